"""
Daily mission planner.

One mission per calendar day, always two tasks, biased toward the
student's weakest tracked chapter:

1. a random Weak chapter: review it, then take a quiz on it
2. else a random Improving chapter: master it, then play a game in its subject
3. else a random subject from the student's curriculum: start a chapter, then play
"""

import logging
import random
from datetime import date

from studybuddy.curriculum import FALLBACK_SUBJECTS, subjects_for
from studybuddy.models import ChapterStatus, DailyMission, DailyTask, StudentProfile
from studybuddy.persistence import ATTR_DAILY_MISSION

logger = logging.getLogger(__name__)

MISSION_TITLES = [
    "Today's Brain Boost",
    "Your Daily Mission",
    "Level Up Plan",
    "Study Streak Goal",
]

DEFAULT_GRADE = "6"

TASK_FOCUS = "task_1"
TASK_PRACTICE = "task_2"


class DailyMissionPlanner:
    """Creates, stores and completes the mission for today."""

    def __init__(
        self,
        storage,
        progress_store,
        profile: StudentProfile,
        today: date | None = None,
        rng: random.Random | None = None,
    ):
        self._storage = storage
        self._progress = progress_store
        self._profile = profile
        self._today = (today or date.today()).isoformat()
        self._rng = rng or random.Random()

    def _load(self) -> DailyMission | None:
        data = self._storage.load(ATTR_DAILY_MISSION)
        if not data:
            return None
        try:
            return DailyMission.from_dict(data)
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable daily mission", exc_info=True)
            return None

    def _persist(self, mission: DailyMission) -> None:
        self._storage.save(ATTR_DAILY_MISSION, mission.to_dict())
        self._storage.commit()

    def get_or_create_today(self) -> DailyMission:
        """Return today's stored mission, generating and storing a new one on a new day."""
        mission = self._load()
        if mission is not None and mission.date == self._today:
            return mission

        mission = self._create_mission()
        logger.info(f"Created daily mission for {mission.date}: {[t.description for t in mission.tasks]}")
        self._persist(mission)
        return mission

    def complete_task(self, task_id: str) -> bool:
        """
        Mark a task of today's mission done.

        Returns:
            True if the task changed; unknown or already-done tasks are a no-op.
        """
        mission = self.get_or_create_today()
        task = next((t for t in mission.tasks if t.id == task_id), None)
        if task is None or task.is_completed:
            return False

        task.is_completed = True
        mission.completed = all(t.is_completed for t in mission.tasks)
        logger.info(f"Completed {task_id}, mission completed={mission.completed}")
        self._persist(mission)
        return True

    def _create_mission(self) -> DailyMission:
        weak = self._progress.chapters_with_status(ChapterStatus.WEAK)
        improving = self._progress.chapters_with_status(ChapterStatus.IMPROVING)

        if weak:
            subject, chapter = self._rng.choice(weak)
            tasks = [
                DailyTask(TASK_FOCUS, "revision", f'Review "{chapter}" in {subject}', subject, chapter),
                DailyTask(TASK_PRACTICE, "practice", f'Complete a quiz for "{chapter}"', subject, chapter),
            ]
        elif improving:
            subject, chapter = self._rng.choice(improving)
            tasks = [
                DailyTask(TASK_FOCUS, "chapter", f'Master "{chapter}" in {subject}', subject, chapter),
                DailyTask(TASK_PRACTICE, "practice", f"Play a game in {subject} to boost XP", subject, chapter),
            ]
        else:
            subjects = subjects_for(self._profile.board, self._profile.grade or DEFAULT_GRADE)
            subject = self._rng.choice(subjects or FALLBACK_SUBJECTS)
            tasks = [
                DailyTask(TASK_FOCUS, "chapter", f"Start a new chapter in {subject}", subject),
                DailyTask(TASK_PRACTICE, "practice", f"Play a quick game in {subject}", subject),
            ]

        return DailyMission(date=self._today, title=self._rng.choice(MISSION_TITLES), tasks=tasks)
