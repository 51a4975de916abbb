"""
Unit tests for the local fallback question batteries.
"""

import random

import pytest

from studybuddy.question_bank import (
    ENGLISH_POOL,
    SCIENCE_POOL,
    Operation,
    generate_math_question,
    generate_math_questions,
    generate_question_id,
    get_arithmetic_config,
    get_fallback_questions,
    near_miss_options,
    sample_pool_questions,
    shuffle_options,
)


class TestArithmeticConfig:
    """Tests for difficulty-based arithmetic ranges."""

    def test_easy_levels_have_no_multiplication(self):
        config = get_arithmetic_config(3)

        assert config.operations == [Operation.ADDITION, Operation.SUBTRACTION]
        assert config.max_number == 25

    def test_multiplication_joins_above_level_three(self):
        assert Operation.MULTIPLICATION in get_arithmetic_config(4).operations

    def test_max_number_is_capped(self):
        assert get_arithmetic_config(10).max_number == 50


class TestGenerateQuestionId:
    """Tests for arithmetic question ids."""

    def test_id_format(self):
        assert generate_question_id(Operation.ADDITION, 7, 5) == "add_7_5"
        assert generate_question_id(Operation.MULTIPLICATION, 3, 4) == "mul_3_4"


class TestNearMissOptions:
    """Tests for wrong answer generation."""

    @pytest.mark.parametrize("answer", [1, 2, 12, 144])
    def test_three_distinct_positive_near_misses(self, answer):
        wrong = near_miss_options(answer, random.Random(answer))

        assert len(set(wrong)) == 3
        assert answer not in wrong
        assert all(option > 0 for option in wrong)
        assert all(abs(option - answer) <= 5 for option in wrong)


class TestShuffleOptions:
    """Tests for option shuffling."""

    def test_correct_index_follows_correct_option(self):
        rng = random.Random(7)
        for _ in range(20):
            options, index = shuffle_options(["right", "w1", "w2", "w3"], 0, rng)

            assert options[index] == "right"
            assert sorted(options) == sorted(["right", "w1", "w2", "w3"])


class TestGenerateMathQuestion:
    """Tests for procedural arithmetic questions."""

    @pytest.mark.parametrize("seed", range(10))
    def test_correct_option_is_the_answer(self, seed):
        question = generate_math_question(5, random.Random(seed))
        operation, a, b = question.id.split("_")
        a, b = int(a), int(b)
        expected = {"add": a + b, "sub": a - b, "mul": a * b}[operation]

        assert question.correct_option == str(expected)
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.difficulty == 5

    def test_subtraction_never_goes_negative(self):
        rng = random.Random(3)
        for _ in range(100):
            question = generate_math_question(2, rng)
            if question.id.startswith("sub_"):
                assert int(question.correct_option) >= 0

    def test_batch_has_unique_ids(self):
        questions = generate_math_questions(3, 5, random.Random(1))

        assert len(questions) == 5
        assert len({q.id for q in questions}) == 5


class TestSamplePoolQuestions:
    """Tests for curated pool sampling."""

    def test_samples_without_replacement(self):
        questions = sample_pool_questions("Science", 2, 5, random.Random(4))

        assert len(questions) == 5
        assert len({q.question for q in questions}) == 5

    def test_count_limited_by_pool_size(self):
        questions = sample_pool_questions("English", 2, 50, random.Random(4))

        assert len(questions) == len(ENGLISH_POOL)

    def test_correct_option_survives_shuffle(self):
        by_text = {item.question: item.options[0] for item in SCIENCE_POOL}

        for question in sample_pool_questions("Science", 2, 8, random.Random(9)):
            assert question.correct_option == by_text[question.question]

    def test_ids_use_subject_slug(self):
        questions = sample_pool_questions("History and Civics", 1, 2, random.Random(1))

        assert all(q.id.startswith("history-and-civics_") for q in questions)


class TestGetFallbackQuestions:
    """Tests for the fallback battery entry point."""

    @pytest.mark.parametrize("subject", ["Mathematics", "maths", "MATH"])
    def test_math_subjects_are_generated(self, subject):
        questions = get_fallback_questions(subject, 3, rng=random.Random(2))

        assert len(questions) == 5
        assert all(q.id.split("_")[0] in {"add", "sub", "mul"} for q in questions)

    def test_unknown_subject_uses_science_pool(self):
        science = {item.question for item in SCIENCE_POOL}

        questions = get_fallback_questions("Sanskrit", 3, rng=random.Random(2))

        assert {q.question for q in questions} <= science

    def test_same_seed_same_battery(self):
        first = get_fallback_questions("Geography", 2, rng=random.Random(11))
        second = get_fallback_questions("Geography", 2, rng=random.Random(11))

        assert first == second
