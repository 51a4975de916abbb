"""
Chapter progress tracking for the Study Buddy skill.

Keeps a per-subject, per-chapter attempt count and derives a mastery
status from it. The whole progress map is written back to storage on
every recorded attempt.
"""

import logging

from studybuddy.models import ChapterStats, ChapterStatus
from studybuddy.persistence import ATTR_CHAPTER_PROGRESS

logger = logging.getLogger(__name__)

ProgressMap = dict[str, dict[str, ChapterStats]]


class ProgressStore:
    """
    Per-chapter mastery store.

    Entries are created lazily on the first recorded attempt and are
    never deleted.
    """

    def __init__(self, storage):
        """
        Args:
            storage: Key-value storage with load/save/commit
                     (normally a PersistenceManager).
        """
        self._storage = storage
        self._progress: ProgressMap = self._load()

    def _load(self) -> ProgressMap:
        data = self._storage.load(ATTR_CHAPTER_PROGRESS)
        if not data:
            return {}

        progress: ProgressMap = {}
        try:
            for subject, chapters in data.items():
                progress[subject] = {
                    chapter: ChapterStats.from_dict(stats) for chapter, stats in chapters.items()
                }
        except (AttributeError, TypeError, ValueError):
            logger.warning("Discarding unreadable chapter progress", exc_info=True)
            return {}
        return progress

    def _persist(self) -> None:
        self._storage.save(ATTR_CHAPTER_PROGRESS, self.to_dict())
        self._storage.commit()

    def record_attempt(self, subject: str, chapter: str, is_correct: bool) -> ChapterStats:
        """
        Record one answered question for a chapter.

        Args:
            subject: Subject name, e.g. "Science".
            chapter: Chapter name within the subject.
            is_correct: Whether the answer was correct.

        Returns:
            A copy of the updated chapter statistics.
        """
        chapters = self._progress.setdefault(subject, {})
        stats = chapters.setdefault(chapter, ChapterStats())

        stats.total_attempts += 1
        if is_correct:
            stats.correct_answers += 1
        stats.correct_answers = min(stats.correct_answers, stats.total_attempts)

        logger.info(
            f"Recorded attempt for {subject}/{chapter}: "
            f"{stats.correct_answers}/{stats.total_attempts} ({stats.status.value})"
        )
        self._persist()
        return ChapterStats(stats.total_attempts, stats.correct_answers)

    def get_stats(self, subject: str, chapter: str) -> ChapterStats:
        """Get a copy of a chapter's statistics, zero-state if never recorded."""
        stats = self._progress.get(subject, {}).get(chapter)
        if stats is None:
            return ChapterStats()
        return ChapterStats(stats.total_attempts, stats.correct_answers)

    def chapters_with_status(self, status: ChapterStatus) -> list[tuple[str, str]]:
        """List (subject, chapter) pairs currently in the given status."""
        return [
            (subject, chapter)
            for subject, chapters in self._progress.items()
            for chapter, stats in chapters.items()
            if stats.status == status
        ]

    @property
    def progress(self) -> ProgressMap:
        """A copy of the whole progress map."""
        return {
            subject: {
                chapter: ChapterStats(stats.total_attempts, stats.correct_answers)
                for chapter, stats in chapters.items()
            }
            for subject, chapters in self._progress.items()
        }

    def to_dict(self) -> dict:
        """Convert the progress map to a dictionary for persistence."""
        return {
            subject: {chapter: stats.to_dict() for chapter, stats in chapters.items()}
            for subject, chapters in self._progress.items()
        }
