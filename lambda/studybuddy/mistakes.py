"""
Mistake ledger for the Study Buddy skill.

Records missed questions for later revision. The ledger keeps at most
one open entry per question text; missing the same question again bumps
its attempt counter and moves it back to the front. Resolving a mistake
removes it.
"""

import logging
from datetime import datetime

from studybuddy.models import Mistake
from studybuddy.persistence import ATTR_MISTAKES

logger = logging.getLogger(__name__)

DEFAULT_REVISION_COUNT = 3


class MistakeLedger:
    """Ordered collection of open mistakes, most recent miss first."""

    def __init__(self, storage):
        self._storage = storage
        self._mistakes: list[Mistake] = self._load()

    def _load(self) -> list[Mistake]:
        data = self._storage.load(ATTR_MISTAKES)
        if not data:
            return []
        try:
            return [Mistake.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable mistakes", exc_info=True)
            return []

    def _persist(self) -> None:
        self._storage.save(ATTR_MISTAKES, [m.to_dict() for m in self._mistakes])
        self._storage.commit()

    def capture_mistake(
        self,
        question: str,
        user_answer: str,
        correct_answer: str,
        subject: str,
        topic: str | None = None,
    ) -> Mistake:
        """
        Record a wrong answer.

        If an open mistake with the same question text exists, its attempt
        count, answer and timestamp are updated and it moves to the front.
        Otherwise a new entry is added at the front.

        Returns:
            The new or updated mistake.
        """
        for index, existing in enumerate(self._mistakes):
            if existing.question == question and not existing.is_resolved:
                existing.attempts += 1
                existing.user_answer = user_answer
                existing.timestamp = datetime.now()
                self._mistakes.insert(0, self._mistakes.pop(index))
                logger.info(f"Repeated mistake {existing.id}, attempts={existing.attempts}")
                self._persist()
                return existing

        mistake = Mistake(
            question=question,
            user_answer=user_answer,
            correct_answer=correct_answer,
            subject=subject,
            topic=topic,
        )
        self._mistakes.insert(0, mistake)
        logger.info(f"Captured new mistake {mistake.id} in {subject}")
        self._persist()
        return mistake

    def resolve_mistake(self, mistake_id: str) -> bool:
        """
        Remove a mistake the learner has resolved.

        Returns:
            True if an entry was removed.
        """
        remaining = [m for m in self._mistakes if m.id != mistake_id]
        if len(remaining) == len(self._mistakes):
            return False
        self._mistakes = remaining
        self._persist()
        return True

    def get(self, mistake_id: str) -> Mistake | None:
        return next((m for m in self._mistakes if m.id == mistake_id), None)

    def list_for_revision(self, count: int = DEFAULT_REVISION_COUNT) -> list[Mistake]:
        """Return the first `count` open mistakes, most recent miss first."""
        unresolved = [m for m in self._mistakes if not m.is_resolved]
        return unresolved[: max(0, count)]

    def count_all(self) -> int:
        """Number of stored mistakes (all of them are open)."""
        return len(self._mistakes)

    @property
    def mistakes(self) -> list[Mistake]:
        return list(self._mistakes)
