"""
Curriculum table for the Study Buddy skill.

Maps a (board, grade) pair to the ordered list of subjects taught.
Used by the subject gate to build its allow-list and by the daily
mission planner when nothing has been tracked yet.
"""

MAHARASHTRA_STATE_BOARD = "Maharashtra State Board"

# Profile board ids and their curriculum names
BOARD_NAMES: dict[str, str] = {
    "maharashtra_state_board": MAHARASHTRA_STATE_BOARD,
}

DEFAULT_BOARD = "maharashtra_state_board"

GRADES: tuple[str, ...] = ("1", "2", "3", "4", "5", "6", "7", "8")

LANGUAGES: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "mr": "Marathi",
}

# Used when the curriculum has no entry for the student
FALLBACK_SUBJECTS: list[str] = ["Mathematics", "Science"]

_PRIMARY = [
    "English",
    "Marathi",
    "Mathematics",
    "Art Education",
    "Physical Education",
    "Work Experience",
]

_LOWER_MIDDLE = [
    "English",
    "Marathi",
    "Hindi",
    "Mathematics",
    "Environmental Studies - Part I",
    "Environmental Studies - Part II",
    "Art Education",
    "Physical Education",
    "Work Experience",
]

_UPPER_MIDDLE = [
    "English",
    "Marathi",
    "Hindi",
    "Mathematics",
    "Science",
    "History and Civics",
    "Geography",
    "Art Education",
    "Physical Education",
]

ALLOWED_TOPICS: dict[str, dict[int, list[str]]] = {
    MAHARASHTRA_STATE_BOARD: {
        1: _PRIMARY,
        2: _PRIMARY,
        3: _LOWER_MIDDLE,
        4: _LOWER_MIDDLE,
        5: _LOWER_MIDDLE,
        6: _UPPER_MIDDLE,
        7: _UPPER_MIDDLE,
        8: _UPPER_MIDDLE + ["Sanskrit"],
    }
}


def board_display_name(board: str | None) -> str | None:
    """Return the curriculum name for a board id (names pass through)."""
    if board is None:
        return None
    return BOARD_NAMES.get(board, board)


def parse_grade(grade) -> int | None:
    """Parse a grade such as "7" or 7 into an int, None if unparsable."""
    try:
        return int(grade)
    except (TypeError, ValueError):
        return None


def subjects_for(board: str | None, grade) -> list[str]:
    """
    Get the subjects taught for a board and grade.

    Args:
        board: Board id or curriculum name.
        grade: Grade as string or int.

    Returns:
        A copy of the ordered subject list, empty if there is no entry.
    """
    board_config = ALLOWED_TOPICS.get(board_display_name(board) or "")
    grade_num = parse_grade(grade)
    if not board_config or grade_num not in board_config:
        return []
    return list(board_config[grade_num])
