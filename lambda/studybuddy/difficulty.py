"""
Difficulty adaptation for generated question batches.

The next batch's difficulty is the requested level nudged by how the
student did in the current session:

- accuracy above 80%: one level harder
- accuracy below 50%: one level easier
- accuracy above 70% with answers under 5 seconds on average: one more
  level harder (stacks with the accuracy step)

Levels are clamped to 1-10. Without any answers the accuracy is taken
as a neutral 50%.
"""

from studybuddy.models import PerformanceData

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10
DEFAULT_DIFFICULTY = 3

HARDER_ACCURACY = 0.8
EASIER_ACCURACY = 0.5
SPEED_BONUS_ACCURACY = 0.7
SPEED_BONUS_SECONDS = 5


def clamp_difficulty(level: int) -> int:
    return max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, int(level)))


def next_difficulty(requested: int, performance: PerformanceData) -> int:
    """
    Compute the difficulty for the next question batch.

    Args:
        requested: The difficulty the caller asked for (1-10).
        performance: Running performance of the current session.

    Returns:
        The adjusted difficulty, always within 1-10.
    """
    accuracy = performance.accuracy
    adjusted = clamp_difficulty(requested)

    if accuracy > HARDER_ACCURACY:
        adjusted = min(MAX_DIFFICULTY, adjusted + 1)
    elif accuracy < EASIER_ACCURACY:
        adjusted = max(MIN_DIFFICULTY, adjusted - 1)

    if accuracy > SPEED_BONUS_ACCURACY and performance.average_response_time < SPEED_BONUS_SECONDS:
        adjusted = min(MAX_DIFFICULTY, adjusted + 1)

    return adjusted


def performance_summary(requested: int, adjusted: int, performance: PerformanceData) -> dict:
    """Summarise a difficulty decision: accuracy in percent and the level change."""
    return {
        "accuracy": performance.accuracy * 100,
        "difficulty_change": adjusted - requested,
    }
