"""
Question batches: local fallback first, remote questions if they arrive in time.

A batch is usable the moment it is created because it starts with a
fallback battery. If a tutor client is available, remote generation runs
on a worker thread; its result replaces the fallback only while the batch
is still at the request's generation and no question has been presented.
Remote failures are logged and otherwise ignored.
"""

import json
import logging
import random
import threading
import time
from collections import OrderedDict
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from studybuddy.curriculum import MAHARASHTRA_STATE_BOARD, board_display_name
from studybuddy.difficulty import clamp_difficulty, next_difficulty, performance_summary
from studybuddy.models import PerformanceData, Question
from studybuddy.question_bank import DEFAULT_QUESTION_COUNT, get_fallback_questions

logger = logging.getLogger(__name__)

OPTION_COUNT = 4
DEFAULT_EXPLANATION = "No explanation provided"
GENERATION_TEMPERATURE = 0.7
MAX_PENDING_BATCHES = 256

SOURCE_FALLBACK = "fallback"
SOURCE_REMOTE = "remote"

GRADE_DESCRIPTIONS = {
    "6": "Class 6 (Ages 11-12): Maharashtra Board. Algebra basics, ratio and proportion, cell biology, physics intro",
    "7": "Class 7 (Ages 12-13): Maharashtra Board. Linear equations, geometry, chemistry basics, motion",
    "8": "Class 8 (Ages 13-14): Maharashtra Board. Quadratic equations, trigonometry basics, atoms, force and pressure",
}

LANGUAGE_INSTRUCTIONS = {
    "en": "Generate all content in English.",
    "hi": "Generate all content in Hindi (Devanagari script). Questions, options, and explanations must be in Hindi.",
    "mr": "Generate all content in Marathi (Devanagari script). Questions, options, and explanations must be in Marathi.",
}

GENERATOR_SYSTEM_PROMPT = "You are an educational quiz generator. Always respond with valid JSON arrays only."

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="question-gen")


class QuestionGenerationError(Exception):
    """The gateway answered, but not with usable questions."""


@dataclass
class QuestionRequest:
    """Parameters for one question batch."""

    subject: str
    difficulty: int
    performance: PerformanceData = field(default_factory=PerformanceData)
    count: int = DEFAULT_QUESTION_COUNT
    topic: str | None = None
    grade: str | None = None
    board: str | None = None
    language: str | None = None

    @property
    def adjusted_difficulty(self) -> int:
        return next_difficulty(self.difficulty, self.performance)


@dataclass
class GeneratedQuestions:
    questions: list[Question]
    adjusted_difficulty: int
    performance_summary: dict


def build_generation_prompt(request: QuestionRequest, adjusted: int) -> str:
    """Build the user prompt asking the gateway for a JSON array of questions."""
    performance = request.performance
    accuracy = performance.accuracy
    grade_context = ""
    if request.grade:
        grade_context = GRADE_DESCRIPTIONS.get(request.grade, f"Class {request.grade}")
    language = LANGUAGE_INSTRUCTIONS.get(request.language or "en", LANGUAGE_INSTRUCTIONS["en"])

    lines = [
        "You are an educational AI generating quiz questions for a voice-based learning app "
        "for students in India.",
        "",
        language,
        "",
        "Student Context:",
    ]
    if grade_context:
        lines.append(f"- Grade Level: {grade_context}")
    if board_display_name(request.board) == MAHARASHTRA_STATE_BOARD:
        lines.append("- Curriculum: Follow Maharashtra State Board (SSC) syllabus and curriculum standards.")

    lines += ["", f"Subject: {request.subject}"]
    if request.topic:
        lines.append(f"Topic: {request.topic}")
    lines += [
        f"Difficulty Level: {adjusted}/10",
        f"Number of Questions: {request.count}",
        "",
        "Student Performance Context:",
        f"- Recent Accuracy: {accuracy * 100:.0f}%",
        f"- Average Response Time: {performance.average_response_time:.1f}s",
    ]
    if accuracy > 0.8:
        lines.append("- Student is performing well, provide slightly harder questions")
    elif accuracy < 0.5:
        lines.append("- Student is struggling, provide supportive questions with clear concepts")

    lines += [
        "",
        f"Generate {request.count} multiple-choice questions. Each question has exactly 4 short "
        "options that can be read aloud, and a brief explanation of the correct answer.",
        "",
        "Respond with a JSON array in this exact format:",
        "[",
        '  {"question": "The question?", "options": ["A", "B", "C", "D"], '
        f'"correctIndex": 0, "explanation": "Why this is correct", "difficulty": {adjusted}}}',
        "]",
        "",
        "Only output the JSON array, no additional text.",
    ]
    return "\n".join(lines)


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ``` or ```json fence from model output."""
    cleaned = content.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def _normalise_item(item, index: int, adjusted: int, id_prefix: str) -> Question | None:
    if not isinstance(item, dict):
        return None

    options = item.get("options")
    if not isinstance(options, list) or len(options) < OPTION_COUNT:
        return None
    options = tuple(str(option) for option in options[:OPTION_COUNT])

    correct_index = item.get("correctIndex", 0)
    if isinstance(correct_index, bool) or not isinstance(correct_index, int):
        correct_index = 0
    if not 0 <= correct_index < OPTION_COUNT:
        return None

    difficulty = item.get("difficulty")
    if isinstance(difficulty, bool) or not isinstance(difficulty, (int, float)):
        difficulty = adjusted

    return Question(
        id=f"{id_prefix}-{index}",
        question=item.get("question") or f"Question {index + 1}",
        options=options,
        correct_index=correct_index,
        explanation=item.get("explanation") or DEFAULT_EXPLANATION,
        difficulty=clamp_difficulty(difficulty),
    )


def parse_questions(content: str, adjusted: int, now_ms: int | None = None) -> list[Question]:
    """
    Parse and normalise the gateway's JSON array of questions.

    Items with fewer than four options or an out-of-range correct index
    are dropped. Ids are "<epoch-ms>-<index>".

    Raises:
        QuestionGenerationError: If the content is not a JSON array or no
            item survives normalisation.
    """
    try:
        raw = json.loads(strip_code_fence(content))
    except ValueError as err:
        raise QuestionGenerationError("Failed to parse question data") from err
    if not isinstance(raw, list):
        raise QuestionGenerationError("Response is not an array")

    id_prefix = str(now_ms if now_ms is not None else int(time.time() * 1000))
    questions = []
    for index, item in enumerate(raw):
        question = _normalise_item(item, index, adjusted, id_prefix)
        if question is None:
            logger.warning(f"Dropping malformed generated question #{index}")
            continue
        questions.append(question)

    if not questions:
        raise QuestionGenerationError("No usable questions in response")
    return questions


def generate_questions(client, request: QuestionRequest) -> GeneratedQuestions:
    """
    Ask the tutor gateway for a batch of questions.

    Args:
        client: A TutorClient.
        request: What to generate.

    Returns:
        The questions with the adjusted difficulty and a performance summary.

    Raises:
        TutorError: If the gateway call fails.
        QuestionGenerationError: If the payload is unusable.
    """
    adjusted = request.adjusted_difficulty
    logger.info(f"Generating {request.count} questions: subject={request.subject}, difficulty={adjusted}")

    content = client.complete(
        [
            {"role": "system", "content": GENERATOR_SYSTEM_PROMPT},
            {"role": "user", "content": build_generation_prompt(request, adjusted)},
        ],
        temperature=GENERATION_TEMPERATURE,
    )
    questions = parse_questions(content, adjusted)
    logger.info(f"Generated {len(questions)} questions")

    return GeneratedQuestions(
        questions=questions,
        adjusted_difficulty=adjusted,
        performance_summary=performance_summary(request.difficulty, adjusted, request.performance),
    )


class QuestionBatch:
    """
    A set of questions that may be upgraded once, before it is presented.

    Every remote request captures the batch's generation when it starts.
    Its result is applied only if that generation is still current and
    mark_presented() has not been called.
    """

    def __init__(self, subject: str, difficulty: int, fallback: list[Question], topic: str | None = None):
        self.subject = subject
        self.topic = topic
        self.difficulty = difficulty
        self.future: Future | None = None
        self._lock = threading.Lock()
        self._questions = list(fallback)
        self._source = SOURCE_FALLBACK
        self._generation = 0
        self._presented = False

    def next_generation(self) -> int:
        """Start a new request generation; older in-flight results become stale."""
        with self._lock:
            self._generation += 1
            return self._generation

    def offer(self, generation: int, questions: list[Question]) -> bool:
        """
        Offer remote questions for the batch.

        Returns:
            True if the questions replaced the current set.
        """
        with self._lock:
            if self._presented or generation != self._generation or not questions:
                return False
            self._questions = list(questions)
            self._source = SOURCE_REMOTE
            return True

    def mark_presented(self) -> list[Question]:
        """Freeze the batch as the first question goes out; returns its questions."""
        with self._lock:
            self._presented = True
            return list(self._questions)

    @property
    def questions(self) -> list[Question]:
        with self._lock:
            return list(self._questions)

    @property
    def source(self) -> str:
        return self._source

    @property
    def presented(self) -> bool:
        return self._presented


def _fetch_into(batch: QuestionBatch, generation: int, client, request: QuestionRequest) -> None:
    try:
        result = generate_questions(client, request)
    except Exception:
        logger.warning(f"Remote question generation failed for {request.subject}, keeping fallback", exc_info=True)
        return

    if batch.offer(generation, result.questions):
        logger.info(f"Upgraded {request.subject} batch with {len(result.questions)} remote questions")
    else:
        logger.info(f"Discarded late remote questions for {request.subject}")


def start_batch(
    request: QuestionRequest,
    client=None,
    rng: random.Random | None = None,
    executor: ThreadPoolExecutor | None = None,
) -> QuestionBatch:
    """
    Create a batch that is usable immediately.

    The batch holds a fallback battery at the adjusted difficulty. When a
    client is given, remote generation is submitted to the executor.
    """
    adjusted = request.adjusted_difficulty
    fallback = get_fallback_questions(request.subject, adjusted, request.count, rng)
    batch = QuestionBatch(request.subject, adjusted, fallback, topic=request.topic)

    if client is not None:
        generation = batch.next_generation()
        batch.future = (executor or _executor).submit(_fetch_into, batch, generation, client, request)

    return batch


class BatchRegistry:
    """Batches prefetched for a session, waiting to be taken by a quiz."""

    def __init__(self, max_pending: int = MAX_PENDING_BATCHES):
        self._lock = threading.Lock()
        self._batches: OrderedDict[tuple[str, str], QuestionBatch] = OrderedDict()
        self._max_pending = max_pending

    @staticmethod
    def _key(session_id: str, subject: str) -> tuple[str, str]:
        return session_id, subject.lower()

    def put(self, session_id: str, batch: QuestionBatch) -> None:
        with self._lock:
            self._batches[self._key(session_id, batch.subject)] = batch
            while len(self._batches) > self._max_pending:
                self._batches.popitem(last=False)

    def take(self, session_id: str, subject: str) -> QuestionBatch | None:
        """Remove and return the prefetched batch for a session and subject."""
        with self._lock:
            return self._batches.pop(self._key(session_id, subject), None)

    def discard_session(self, session_id: str) -> None:
        with self._lock:
            for key in [k for k in self._batches if k[0] == session_id]:
                del self._batches[key]

    def __len__(self) -> int:
        return len(self._batches)


prefetched_batches = BatchRegistry()
