"""
Unit tests for question generation and upgrade-if-timely batches.
"""

import json
import random
import threading

import pytest

from studybuddy.models import PerformanceData, Question
from studybuddy.question_service import (
    DEFAULT_EXPLANATION,
    GENERATION_TEMPERATURE,
    SOURCE_FALLBACK,
    SOURCE_REMOTE,
    BatchRegistry,
    QuestionBatch,
    QuestionGenerationError,
    QuestionRequest,
    build_generation_prompt,
    generate_questions,
    parse_questions,
    start_batch,
    strip_code_fence,
)
from studybuddy.tutor_client import RateLimitedError

REMOTE_ITEMS = [
    {
        "question": "What is the SI unit of force?",
        "options": ["Newton", "Joule", "Watt", "Pascal"],
        "correctIndex": 0,
        "explanation": "Force is measured in newtons.",
        "difficulty": 4,
    },
    {
        "question": "Which gas do we breathe out?",
        "options": ["Oxygen", "Carbon dioxide", "Helium", "Argon"],
        "correctIndex": 1,
        "explanation": "We exhale carbon dioxide.",
        "difficulty": 4,
    },
]


class FakeTutorClient:
    """Returns a canned completion; optionally waits for a release event first."""

    def __init__(self, content: str = json.dumps(REMOTE_ITEMS), error: Exception | None = None):
        self.content = content
        self.error = error
        self.release = threading.Event()
        self.release.set()
        self.calls = []

    def complete(self, messages, *, temperature=None):
        self.calls.append({"messages": messages, "temperature": temperature})
        self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.content


def make_question(qid: str) -> Question:
    return Question(qid, f"Question {qid}?", ("a", "b", "c", "d"), 0, "because", 3)


class TestParseQuestions:
    """Tests for normalising the gateway's question payload."""

    def test_parses_array(self):
        questions = parse_questions(json.dumps(REMOTE_ITEMS), 4, now_ms=1700)

        assert [q.id for q in questions] == ["1700-0", "1700-1"]
        assert questions[1].correct_option == "Carbon dioxide"
        assert questions[0].options == ("Newton", "Joule", "Watt", "Pascal")

    def test_strips_code_fences(self):
        content = "```json\n" + json.dumps(REMOTE_ITEMS) + "\n```"

        assert len(parse_questions(content, 4)) == 2

    def test_drops_items_with_too_few_options(self):
        items = REMOTE_ITEMS + [{"question": "Short?", "options": ["a", "b", "c"], "correctIndex": 0}]

        questions = parse_questions(json.dumps(items), 4, now_ms=1)

        assert len(questions) == 2

    def test_drops_items_with_out_of_range_index(self):
        items = [dict(REMOTE_ITEMS[0], correctIndex=4), REMOTE_ITEMS[1]]

        questions = parse_questions(json.dumps(items), 4, now_ms=1)

        assert [q.question for q in questions] == ["Which gas do we breathe out?"]
        assert questions[0].id == "1-1"

    def test_fills_missing_fields(self):
        items = [{"options": ["a", "b", "c", "d", "e"]}]

        question = parse_questions(json.dumps(items), 6, now_ms=1)[0]

        assert question.question == "Question 1"
        assert question.options == ("a", "b", "c", "d")
        assert question.correct_index == 0
        assert question.explanation == DEFAULT_EXPLANATION
        assert question.difficulty == 6

    def test_difficulty_is_clamped(self):
        items = [dict(REMOTE_ITEMS[0], difficulty=42)]

        assert parse_questions(json.dumps(items), 4)[0].difficulty == 10

    @pytest.mark.parametrize("content", ["not json", '{"question": "x"}', "[]", '[{"options": []}]'])
    def test_unusable_content_raises(self, content):
        with pytest.raises(QuestionGenerationError):
            parse_questions(content, 4)


class TestStripCodeFence:
    """Tests for removing markdown fences."""

    @pytest.mark.parametrize("content", ["```json\n[]\n```", "```\n[]\n```", "  []  "])
    def test_strips(self, content):
        assert strip_code_fence(content) == "[]"


class TestGenerationPrompt:
    """Tests for the generation prompt."""

    def test_includes_student_context(self):
        request = QuestionRequest(
            subject="Science",
            difficulty=3,
            topic="Motion",
            grade="7",
            board="maharashtra_state_board",
            language="mr",
        )

        prompt = build_generation_prompt(request, 4)

        assert "Subject: Science" in prompt
        assert "Topic: Motion" in prompt
        assert "Difficulty Level: 4/10" in prompt
        assert "Class 7" in prompt
        assert "Maharashtra State Board" in prompt
        assert "Marathi" in prompt

    def test_struggling_student_hint(self):
        request = QuestionRequest("Science", 3, PerformanceData(correct_answers=1, total_answers=5))

        assert "Student is struggling" in build_generation_prompt(request, 2)


class TestGenerateQuestions:
    """Tests for the gateway round trip."""

    def test_uses_adjusted_difficulty(self):
        client = FakeTutorClient()
        request = QuestionRequest("Science", 3, PerformanceData(9, 10, 10.0))

        result = generate_questions(client, request)

        assert result.adjusted_difficulty == 4
        assert result.performance_summary["difficulty_change"] == 1
        assert len(result.questions) == 2
        assert client.calls[0]["temperature"] == GENERATION_TEMPERATURE
        assert client.calls[0]["messages"][0]["role"] == "system"

    def test_gateway_errors_propagate(self):
        client = FakeTutorClient(error=RateLimitedError("slow down"))

        with pytest.raises(RateLimitedError):
            generate_questions(client, QuestionRequest("Science", 3))


class TestQuestionBatch:
    """Tests for the upgrade rules of a batch."""

    def test_offer_before_presentation_replaces(self):
        batch = QuestionBatch("Science", 3, [make_question("f1")])
        generation = batch.next_generation()

        assert batch.offer(generation, [make_question("r1"), make_question("r2")])
        assert [q.id for q in batch.questions] == ["r1", "r2"]
        assert batch.source == SOURCE_REMOTE

    def test_offer_after_presentation_is_discarded(self):
        batch = QuestionBatch("Science", 3, [make_question("f1")])
        generation = batch.next_generation()
        presented = batch.mark_presented()

        assert not batch.offer(generation, [make_question("r1")])
        assert [q.id for q in batch.questions] == ["f1"]
        assert [q.id for q in presented] == ["f1"]
        assert batch.source == SOURCE_FALLBACK

    def test_stale_generation_is_discarded(self):
        batch = QuestionBatch("Science", 3, [make_question("f1")])
        old = batch.next_generation()
        batch.next_generation()

        assert not batch.offer(old, [make_question("r1")])
        assert [q.id for q in batch.questions] == ["f1"]

    def test_empty_offer_is_discarded(self):
        batch = QuestionBatch("Science", 3, [make_question("f1")])

        assert not batch.offer(batch.next_generation(), [])


class TestStartBatch:
    """Tests for starting a batch with optional remote generation."""

    def test_without_client_is_fallback_only(self):
        batch = start_batch(QuestionRequest("Mathematics", 3), rng=random.Random(1))

        assert batch.future is None
        assert batch.source == SOURCE_FALLBACK
        assert len(batch.questions) == 5

    def test_fallback_uses_adjusted_difficulty(self):
        request = QuestionRequest("Mathematics", 3, PerformanceData(1, 10, 10.0))

        batch = start_batch(request, rng=random.Random(1))

        assert batch.difficulty == 2
        assert all(q.difficulty == 2 for q in batch.questions)

    def test_remote_result_upgrades_unpresented_batch(self):
        batch = start_batch(QuestionRequest("Science", 3), client=FakeTutorClient())
        batch.future.result(timeout=5)

        assert batch.source == SOURCE_REMOTE
        assert [q.question for q in batch.questions] == [item["question"] for item in REMOTE_ITEMS]

    def test_late_remote_result_is_discarded(self):
        client = FakeTutorClient()
        client.release.clear()
        batch = start_batch(QuestionRequest("Science", 3), client=client, rng=random.Random(5))

        presented = batch.mark_presented()
        client.release.set()
        batch.future.result(timeout=5)

        assert batch.source == SOURCE_FALLBACK
        assert batch.questions == presented

    def test_remote_failure_keeps_fallback(self):
        client = FakeTutorClient(content="this is not json")
        batch = start_batch(QuestionRequest("Science", 3), client=client, rng=random.Random(5))
        fallback = batch.questions

        batch.future.result(timeout=5)

        assert batch.source == SOURCE_FALLBACK
        assert batch.questions == fallback


class TestBatchRegistry:
    """Tests for prefetched batch bookkeeping."""

    def test_take_removes_batch(self):
        registry = BatchRegistry()
        batch = QuestionBatch("Science", 3, [])
        registry.put("s1", batch)

        assert registry.take("s1", "science") is batch
        assert registry.take("s1", "Science") is None

    def test_batches_are_per_session(self):
        registry = BatchRegistry()
        registry.put("s1", QuestionBatch("Science", 3, []))

        assert registry.take("s2", "Science") is None

    def test_discard_session(self):
        registry = BatchRegistry()
        registry.put("s1", QuestionBatch("Science", 3, []))
        registry.put("s1", QuestionBatch("English", 3, []))
        registry.put("s2", QuestionBatch("Science", 3, []))

        registry.discard_session("s1")

        assert len(registry) == 1

    def test_oldest_batch_is_evicted(self):
        registry = BatchRegistry(max_pending=2)
        for session in ("s1", "s2", "s3"):
            registry.put(session, QuestionBatch("Science", 3, []))

        assert registry.take("s1", "Science") is None
        assert len(registry) == 2
