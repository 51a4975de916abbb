"""Unit tests for difficulty adaptation."""

import pytest

from studybuddy.difficulty import clamp_difficulty, next_difficulty, performance_summary
from studybuddy.models import PerformanceData


def performance(correct: int, total: int, seconds: float = 10.0) -> PerformanceData:
    return PerformanceData(correct_answers=correct, total_answers=total, average_response_time=seconds)


class TestNextDifficulty:
    """Tests for the next batch difficulty."""

    def test_no_answers_keeps_level(self):
        assert next_difficulty(3, PerformanceData()) == 3

    def test_high_accuracy_goes_harder(self):
        assert next_difficulty(3, performance(9, 10)) == 4

    def test_low_accuracy_goes_easier(self):
        assert next_difficulty(3, performance(2, 10)) == 2

    def test_thresholds_are_strict(self):
        """Exactly 80% or 50% does not change the level."""
        assert next_difficulty(5, performance(8, 10)) == 5
        assert next_difficulty(5, performance(5, 10)) == 5

    def test_speed_bonus_stacks(self):
        assert next_difficulty(3, performance(9, 10, seconds=3.0)) == 5

    def test_speed_bonus_needs_accuracy_above_seventy(self):
        assert next_difficulty(3, performance(7, 10, seconds=2.0)) == 3
        assert next_difficulty(3, performance(3, 4, seconds=2.0)) == 4

    def test_clamped_at_top(self):
        assert next_difficulty(10, performance(10, 10, seconds=1.0)) == 10

    def test_clamped_at_bottom(self):
        assert next_difficulty(1, performance(0, 10)) == 1

    @pytest.mark.parametrize("requested, expected", [(0, 1), (-4, 1), (15, 10)])
    def test_out_of_range_request_is_clamped(self, requested, expected):
        assert next_difficulty(requested, PerformanceData()) == expected


class TestHelpers:
    """Tests for the small difficulty helpers."""

    def test_clamp_difficulty(self):
        assert clamp_difficulty(0) == 1
        assert clamp_difficulty(7) == 7
        assert clamp_difficulty(11) == 10

    def test_performance_summary(self):
        summary = performance_summary(3, 5, performance(9, 10))

        assert summary == {"accuracy": pytest.approx(90.0), "difficulty_change": 2}
