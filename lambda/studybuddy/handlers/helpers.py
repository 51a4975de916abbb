"""Helper functions for Study Buddy handlers."""

import logging
import random
import string
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from studybuddy import data
from studybuddy.curriculum import ALLOWED_TOPICS, FALLBACK_SUBJECTS, subjects_for
from studybuddy.daily_plan import DailyMissionPlanner
from studybuddy.difficulty import DEFAULT_DIFFICULTY, clamp_difficulty
from studybuddy.models import DailyMission, PerformanceData, Question, StudentProfile
from studybuddy.progress import ProgressStore
from studybuddy.question_service import QuestionBatch, QuestionRequest, prefetched_batches, start_batch
from studybuddy.tutor_client import get_tutor_client

logger = logging.getLogger(__name__)


def get_slot(handler_input, name: str):
    slots = handler_input.request_envelope.request.intent.slots or {}
    return slots.get(name)


def get_slot_value(handler_input, name: str) -> str | None:
    """Get the spoken value of a slot, None if missing or empty."""
    slot = get_slot(handler_input, name)
    value = slot.value if slot else None
    return value.strip() if value and value.strip() else None


def get_slot_id(handler_input, name: str) -> str | None:
    """
    Get a slot's canonical id from entity resolution.

    Falls back to the raw spoken value when the slot did not resolve.
    """
    slot = get_slot(handler_input, name)
    if not slot:
        return None

    resolutions = getattr(slot, "resolutions", None)
    if resolutions and resolutions.resolutions_per_authority:
        for resolution in resolutions.resolutions_per_authority:
            if resolution.status.code.value == "ER_SUCCESS_MATCH":
                return resolution.values[0].value.id

    return get_slot_value(handler_input, name)


def get_session_id(handler_input) -> str:
    return handler_input.request_envelope.session.session_id


def get_session_difficulty(session_attr: dict) -> int:
    return clamp_difficulty(session_attr.get("difficulty", DEFAULT_DIFFICULTY))


def get_session_performance(session_attr: dict) -> PerformanceData:
    return PerformanceData.from_dict(session_attr.get("performance") or {})


def parse_answer(value: str | None, options: list[str]) -> int | None:
    """
    Map a spoken answer to an option index.

    Accepts an option letter ("B", "option b"), a number ("2", "two",
    "second") or the option text itself.
    """
    if not value:
        return None
    text = value.lower().strip().rstrip(".")
    if text.startswith("option "):
        text = text[len("option "):].strip()

    letters = [letter.lower() for letter in data.OPTION_LETTERS[: len(options)]]
    if text in letters:
        return letters.index(text)
    if text.isdigit() and 1 <= int(text) <= len(options):
        return int(text) - 1
    if text in data.OPTION_NUMBER_WORDS and data.OPTION_NUMBER_WORDS[text] < len(options):
        return data.OPTION_NUMBER_WORDS[text]

    for index, option in enumerate(options):
        if option.lower().strip() == text:
            return index
    return None


def format_question(question: Question, number: int) -> str:
    """Speech for a question followed by its lettered options."""
    options = " ".join(
        data.OPTION_TEMPLATE.format(letter=letter, option=option)
        for letter, option in zip(data.OPTION_LETTERS, question.options)
    )
    return data.QUESTION_TEMPLATE.format(number=number, question=question.question) + options


def get_current_question(session_attr: dict) -> Question | None:
    quiz = session_attr.get("quiz")
    if not quiz:
        return None
    return Question.from_dict(quiz["questions"][quiz["index"]])


def current_question_speech(session_attr: dict) -> str:
    """Speech for the question being asked, empty outside a quiz."""
    quiz = session_attr.get("quiz")
    question = get_current_question(session_attr)
    if question is None:
        return ""
    return format_question(question, quiz["index"] + 1)


def get_correct_feedback(question: Question) -> str:
    template = random.choice(data.CORRECT_ANSWER_TEMPLATES)
    return template.format(answer=question.correct_option)


def get_incorrect_feedback(question: Question) -> str:
    template = random.choice(data.WRONG_ANSWER_TEMPLATES)
    return template.format(answer=question.correct_option, explanation=question.explanation)


def get_quiz_end_message(correct: int, total: int) -> str:
    """Get appropriate end-of-quiz message based on performance."""
    if correct == total:
        return data.QUIZ_END_PERFECT.format(total=total)
    elif correct >= total * 0.8:
        return data.QUIZ_END_GREAT.format(correct=correct, total=total)
    elif correct >= total * 0.5:
        return data.QUIZ_END_GOOD.format(correct=correct, total=total)
    else:
        return data.QUIZ_END_KEEP_PRACTICING.format(correct=correct, total=total)


def get_local_today(handler_input, now: datetime | None = None) -> date:
    """
    Get today's date in the device's time zone.

    The time zone comes from the Alexa settings API. Falls back to UTC
    when the service is unavailable or returns an unknown zone.
    """
    now = now or datetime.now(timezone.utc)
    try:
        device_id = handler_input.request_envelope.context.system.device.device_id
        ups_service = handler_input.service_client_factory.get_ups_service()
        time_zone = ZoneInfo(ups_service.get_system_time_zone(device_id))
    except Exception as e:
        logger.warning(f"Could not read device time zone, using UTC: {e}")
        time_zone = timezone.utc
    return now.astimezone(time_zone).date()


def get_mission_planner(
    handler_input, pm, profile: StudentProfile, progress_store: ProgressStore | None = None
) -> DailyMissionPlanner:
    return DailyMissionPlanner(
        pm, progress_store or ProgressStore(pm), profile, today=get_local_today(handler_input)
    )


def describe_mission(mission: DailyMission) -> str:
    tasks = ". ".join(
        data.MISSION_TASK.format(number=index, description=task.description)
        + (data.MISSION_TASK_DONE_SUFFIX if task.is_completed else "")
        for index, task in enumerate(mission.tasks, start=1)
    )
    return data.MISSION_MESSAGE.format(title=mission.title, tasks=tasks)


def default_subject(profile: StudentProfile) -> str:
    subjects = subjects_for(profile.board, profile.grade)
    return (subjects or FALLBACK_SUBJECTS)[0]


def get_subject(handler_input, profile: StudentProfile) -> str | None:
    """
    Get the subject slot spelled the way the curriculum spells it.

    Progress, mistakes and missions are keyed by subject name, so
    "science" and "Science" must land on the same entry. The student's
    own subjects win, then any curriculum subject.
    """
    spoken = get_slot_id(handler_input, "subject")
    if spoken is None:
        return None

    known = subjects_for(profile.board, profile.grade) + FALLBACK_SUBJECTS
    for grades in ALLOWED_TOPICS.values():
        for subjects in grades.values():
            known += subjects
    for subject in known:
        if subject.lower() == spoken.lower():
            return subject
    return string.capwords(spoken)


def build_question_request(
    profile: StudentProfile, session_attr: dict, subject: str, topic: str | None = None
) -> QuestionRequest:
    return QuestionRequest(
        subject=subject,
        topic=topic,
        difficulty=get_session_difficulty(session_attr),
        performance=get_session_performance(session_attr),
        count=data.QUIZ_QUESTION_COUNT,
        grade=profile.grade,
        board=profile.board,
        language=profile.preferred_language,
    )


def prefetch_batch(handler_input, profile: StudentProfile, subject: str, topic: str | None = None) -> QuestionBatch:
    """Start a batch for the session so remote questions can arrive before the quiz."""
    session_attr = handler_input.attributes_manager.session_attributes
    request = build_question_request(profile, session_attr, subject, topic)
    batch = start_batch(request, client=get_tutor_client())
    prefetched_batches.put(get_session_id(handler_input), batch)
    logger.info(f"Prefetching {subject} questions at difficulty {batch.difficulty}")
    return batch


def take_or_start_batch(handler_input, request: QuestionRequest) -> QuestionBatch:
    """Use the session's prefetched batch if it matches, else start a new one."""
    batch = prefetched_batches.take(get_session_id(handler_input), request.subject)
    if batch is not None and batch.difficulty == request.adjusted_difficulty:
        logger.info(f"Using prefetched {request.subject} batch ({batch.source})")
        return batch
    # Presented in this same turn, so a remote result could never be used
    return start_batch(request, client=None)
