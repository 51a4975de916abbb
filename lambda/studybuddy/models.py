"""
Data models for the Study Buddy skill.

This module defines the data structures used for tracking chapter mastery,
missed questions, the student profile, generated questions and the daily
mission. Every persisted model converts to and from plain dictionaries.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

# A chapter is not labelled until it has this many attempts
MIN_ATTEMPTS_FOR_STATUS = 20
WEAK_ACCURACY = 0.50
STRONG_ACCURACY = 0.75

# Onboarding steps stored in StudentProfile.current_step
STEP_GRADE = 1
STEP_BOARD = 2
STEP_LANGUAGE = 3


class ChapterStatus(Enum):
    """Mastery status of a single chapter."""

    NOT_STARTED = "Not Started"
    WEAK = "Weak"
    IMPROVING = "Improving"
    STRONG = "Strong"


def calculate_status(total_attempts: int, correct_answers: int) -> ChapterStatus:
    """Derive the mastery status from a chapter's cumulative counters."""
    if total_attempts < MIN_ATTEMPTS_FOR_STATUS:
        return ChapterStatus.NOT_STARTED

    accuracy = correct_answers / total_attempts
    if accuracy < WEAK_ACCURACY:
        return ChapterStatus.WEAK
    if accuracy < STRONG_ACCURACY:
        return ChapterStatus.IMPROVING
    return ChapterStatus.STRONG


def _as_count(value) -> int:
    """Coerce a stored counter (DynamoDB returns Decimal) to a non-negative int."""
    return max(0, int(value or 0))


@dataclass
class ChapterStats:
    """Attempt counters for one (subject, chapter) pair."""

    total_attempts: int = 0
    correct_answers: int = 0

    @property
    def status(self) -> ChapterStatus:
        return calculate_status(self.total_attempts, self.correct_answers)

    @property
    def accuracy(self) -> float:
        if self.total_attempts == 0:
            return 0.0
        return self.correct_answers / self.total_attempts

    def to_dict(self) -> dict:
        """Convert to dictionary for persistence."""
        return {
            "total_attempts": self.total_attempts,
            "correct_answers": self.correct_answers,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChapterStats":
        """Create from dictionary. The stored status is ignored and re-derived."""
        total = _as_count(data.get("total_attempts"))
        correct = min(_as_count(data.get("correct_answers")), total)
        return cls(total_attempts=total, correct_answers=correct)


@dataclass
class Mistake:
    """A previously missed question kept for revision."""

    question: str
    user_answer: str
    correct_answer: str
    subject: str
    topic: str | None = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    attempts: int = 1
    is_resolved: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "subject": self.subject,
            "topic": self.topic,
            "timestamp": self.timestamp.isoformat(),
            "attempts": self.attempts,
            "is_resolved": self.is_resolved,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Mistake":
        timestamp = datetime.now()
        if data.get("timestamp"):
            timestamp = datetime.fromisoformat(data["timestamp"])

        return cls(
            id=data["id"],
            question=data["question"],
            user_answer=data.get("user_answer", ""),
            correct_answer=data.get("correct_answer", ""),
            subject=data.get("subject", ""),
            topic=data.get("topic"),
            timestamp=timestamp,
            attempts=max(1, int(data.get("attempts", 1))),
            is_resolved=bool(data.get("is_resolved", False)),
        )


@dataclass
class StudentProfile:
    """
    Student profile collected during onboarding.

    current_step is the onboarding resume pointer:
    1 = grade, 2 = board, 3 = language, None = not onboarding.
    """

    user_id: str
    grade: str | None = None
    board: str = "maharashtra_state_board"
    preferred_language: str = "en"
    is_configured: bool = False
    current_step: int | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def update_grade(self, grade: str) -> None:
        self.grade = grade

    def update_language(self, language: str) -> None:
        self.preferred_language = language

    def set_current_step(self, step: int) -> None:
        self.current_step = step

    def complete_setup(self) -> None:
        self.is_configured = True
        self.current_step = None

    def to_dict(self) -> dict:
        """Convert to dictionary for persistence."""
        return {
            "user_id": self.user_id,
            "grade": self.grade,
            "board": self.board,
            "preferred_language": self.preferred_language,
            "is_configured": self.is_configured,
            "current_step": self.current_step,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StudentProfile":
        """Create from dictionary (from persistence)."""
        created_at = datetime.now()
        if data.get("created_at"):
            created_at = datetime.fromisoformat(data["created_at"])

        current_step = data.get("current_step")
        grade = data.get("grade")

        return cls(
            user_id=data["user_id"],
            grade=str(grade) if grade is not None else None,
            board=data.get("board", "maharashtra_state_board"),
            preferred_language=data.get("preferred_language", "en"),
            is_configured=bool(data.get("is_configured", False)),
            current_step=int(current_step) if current_step is not None else None,
            created_at=created_at,
        )


@dataclass(frozen=True)
class Question:
    """A multiple-choice question with exactly four options."""

    id: str
    question: str
    options: tuple[str, ...]
    correct_index: int
    explanation: str
    difficulty: int

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_index]

    def check_answer(self, index: int) -> bool:
        """Check if the chosen option index is the correct one."""
        return index == self.correct_index

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "correct_index": self.correct_index,
            "explanation": self.explanation,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(
            id=data["id"],
            question=data["question"],
            options=tuple(data["options"]),
            correct_index=int(data["correct_index"]),
            explanation=data.get("explanation", ""),
            difficulty=int(data.get("difficulty", 1)),
        )


@dataclass
class PerformanceData:
    """
    Running performance over one quiz session.

    average_response_time is a running mean in seconds.
    """

    correct_answers: int = 0
    total_answers: int = 0
    average_response_time: float = 0.0

    @property
    def accuracy(self) -> float:
        """Accuracy between 0 and 1, neutral 0.5 when nothing was answered."""
        if self.total_answers == 0:
            return 0.5
        return self.correct_answers / self.total_answers

    def record(self, is_correct: bool, response_time: float) -> None:
        """Fold one answer into the running counters and mean."""
        self.total_answers += 1
        if is_correct:
            self.correct_answers += 1
        self.average_response_time += (
            response_time - self.average_response_time
        ) / self.total_answers

    def to_dict(self) -> dict:
        return {
            "correct_answers": self.correct_answers,
            "total_answers": self.total_answers,
            "average_response_time": self.average_response_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PerformanceData":
        return cls(
            correct_answers=int(data.get("correct_answers", 0)),
            total_answers=int(data.get("total_answers", 0)),
            average_response_time=float(data.get("average_response_time", 0.0)),
        )


@dataclass
class DailyTask:
    """One task of a daily mission."""

    id: str
    type: str  # "revision", "chapter" or "practice"
    description: str
    subject: str
    chapter: str | None = None
    is_completed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "subject": self.subject,
            "chapter": self.chapter,
            "is_completed": self.is_completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DailyTask":
        return cls(
            id=data["id"],
            type=data["type"],
            description=data["description"],
            subject=data.get("subject", ""),
            chapter=data.get("chapter"),
            is_completed=bool(data.get("is_completed", False)),
        )


@dataclass
class DailyMission:
    """The mission for one calendar day, always two tasks."""

    date: str  # YYYY-MM-DD
    title: str
    tasks: list[DailyTask]
    completed: bool = False

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "title": self.title,
            "tasks": [task.to_dict() for task in self.tasks],
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DailyMission":
        return cls(
            date=data["date"],
            title=data["title"],
            tasks=[DailyTask.from_dict(task) for task in data["tasks"]],
            completed=bool(data.get("completed", False)),
        )
