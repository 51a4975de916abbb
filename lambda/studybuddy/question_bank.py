"""
Fallback question batteries for the Study Buddy quiz.

These questions are produced locally so a quiz can start without waiting
for the remote question generator. Mathematics questions are generated
procedurally with three near-miss wrong options; other subjects draw from
curated pools. Questions are sampled without replacement, shuffled, and
each question's options are shuffled with the correct index tracked.
"""

import random
import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from studybuddy.models import Question


class Operation(Enum):
    """Supported arithmetic operations."""

    ADDITION = "add"
    SUBTRACTION = "sub"
    MULTIPLICATION = "mul"


OPERATION_SYMBOLS: dict[Operation, str] = {
    Operation.ADDITION: "+",
    Operation.SUBTRACTION: "-",
    Operation.MULTIPLICATION: "×",
}

OPERATION_WORDS: dict[Operation, str] = {
    Operation.ADDITION: "plus",
    Operation.SUBTRACTION: "minus",
    Operation.MULTIPLICATION: "times",
}

MATH_SUBJECTS = {"mathematics", "maths", "math"}

DEFAULT_QUESTION_COUNT = 5


@dataclass
class ArithmeticConfig:
    """Arithmetic ranges for a difficulty level."""

    operations: list[Operation]
    max_number: int


def get_arithmetic_config(difficulty: int) -> ArithmeticConfig:
    """Multiplication joins above level 3; operands grow up to 50."""
    operations = [Operation.ADDITION, Operation.SUBTRACTION]
    if difficulty > 3:
        operations.append(Operation.MULTIPLICATION)
    return ArithmeticConfig(operations=operations, max_number=min(10 + difficulty * 5, 50))


@dataclass(frozen=True)
class PoolQuestion:
    """A pre-authored question; the first option is the correct one."""

    question: str
    options: tuple[str, str, str, str]
    explanation: str


SCIENCE_POOL: list[PoolQuestion] = [
    PoolQuestion(
        "What is the chemical symbol for water?",
        ("H2O", "CO2", "NaCl", "O2"),
        "Water is made of 2 hydrogen atoms and 1 oxygen atom: H2O.",
    ),
    PoolQuestion(
        "What planet is known as the Red Planet?",
        ("Mars", "Venus", "Jupiter", "Saturn"),
        "Mars appears red due to iron oxide (rust) on its surface.",
    ),
    PoolQuestion(
        "What is the powerhouse of the cell?",
        ("Mitochondria", "Nucleus", "Ribosome", "Cytoplasm"),
        "Mitochondria produce energy (ATP) for the cell.",
    ),
    PoolQuestion(
        "What force keeps planets in orbit around the Sun?",
        ("Gravity", "Magnetism", "Friction", "Electricity"),
        "Gravity is the force of attraction between masses.",
    ),
    PoolQuestion(
        "What gas do plants absorb from the air?",
        ("Carbon dioxide", "Oxygen", "Nitrogen", "Hydrogen"),
        "Plants use carbon dioxide for photosynthesis to make food.",
    ),
    PoolQuestion(
        "Which organ pumps blood through the body?",
        ("Heart", "Lungs", "Liver", "Kidney"),
        "The heart is a muscle that pumps blood through blood vessels.",
    ),
    PoolQuestion(
        "What is the boiling point of water at sea level?",
        ("100 °C", "50 °C", "0 °C", "212 °C"),
        "At normal atmospheric pressure water boils at 100 degrees Celsius.",
    ),
    PoolQuestion(
        "Which of these is a good conductor of electricity?",
        ("Copper", "Rubber", "Wood", "Plastic"),
        "Metals like copper let electric current flow easily.",
    ),
]

ENGLISH_POOL: list[PoolQuestion] = [
    PoolQuestion(
        "Which word is a noun in the sentence 'The cat sleeps'?",
        ("cat", "sleeps", "the", "none"),
        "A noun names a person, place, animal or thing. 'Cat' is an animal.",
    ),
    PoolQuestion(
        "What is the past tense of 'run'?",
        ("ran", "runned", "running", "runs"),
        "'Run' is an irregular verb; its past tense is 'ran'.",
    ),
    PoolQuestion(
        "Which word is an adjective?",
        ("beautiful", "quickly", "jump", "and"),
        "An adjective describes a noun. 'Beautiful' describes how something looks.",
    ),
    PoolQuestion(
        "Choose the correct plural of 'child'.",
        ("children", "childs", "childes", "child"),
        "'Child' has an irregular plural: 'children'.",
    ),
    PoolQuestion(
        "Which punctuation mark ends a question?",
        ("?", ".", "!", ","),
        "A question always ends with a question mark.",
    ),
    PoolQuestion(
        "What is the opposite of 'ancient'?",
        ("modern", "old", "historic", "aged"),
        "'Ancient' means very old, so its opposite is 'modern'.",
    ),
]

HISTORY_POOL: list[PoolQuestion] = [
    PoolQuestion(
        "In which year did India gain independence?",
        ("1947", "1950", "1857", "1942"),
        "India became independent on 15 August 1947.",
    ),
    PoolQuestion(
        "Who founded the Maratha empire?",
        ("Chhatrapati Shivaji Maharaj", "Akbar", "Ashoka", "Tipu Sultan"),
        "Shivaji Maharaj was crowned Chhatrapati in 1674 at Raigad.",
    ),
    PoolQuestion(
        "Who is known as the Father of the Nation in India?",
        ("Mahatma Gandhi", "Jawaharlal Nehru", "Bhagat Singh", "Subhas Chandra Bose"),
        "Mahatma Gandhi led the non-violent freedom struggle.",
    ),
    PoolQuestion(
        "When did the Constitution of India come into effect?",
        ("26 January 1950", "15 August 1947", "2 October 1869", "26 November 1949"),
        "The Constitution came into effect on 26 January 1950, Republic Day.",
    ),
    PoolQuestion(
        "Which emperor spread Buddhism after the Kalinga war?",
        ("Ashoka", "Chandragupta", "Babur", "Harsha"),
        "Ashoka turned to Buddhism after seeing the suffering of the Kalinga war.",
    ),
]

GEOGRAPHY_POOL: list[PoolQuestion] = [
    PoolQuestion(
        "Which is the longest river in India?",
        ("Ganga", "Godavari", "Narmada", "Krishna"),
        "The Ganga flows about 2,500 km across northern India.",
    ),
    PoolQuestion(
        "What is the capital of Maharashtra?",
        ("Mumbai", "Pune", "Nagpur", "Nashik"),
        "Mumbai is the capital; Nagpur is the winter capital.",
    ),
    PoolQuestion(
        "Which line divides the Earth into northern and southern hemispheres?",
        ("Equator", "Prime Meridian", "Tropic of Cancer", "Arctic Circle"),
        "The Equator is the 0 degree line of latitude.",
    ),
    PoolQuestion(
        "Which is the largest ocean?",
        ("Pacific Ocean", "Indian Ocean", "Atlantic Ocean", "Arctic Ocean"),
        "The Pacific Ocean covers about a third of the Earth's surface.",
    ),
    PoolQuestion(
        "Which mountain range lies along the western coast of India?",
        ("Sahyadri", "Himalaya", "Aravalli", "Vindhya"),
        "The Sahyadri, or Western Ghats, run parallel to the west coast.",
    ),
]

SUBJECT_POOLS: dict[str, list[PoolQuestion]] = {
    "science": SCIENCE_POOL,
    "environmental studies - part i": SCIENCE_POOL,
    "english": ENGLISH_POOL,
    "history": HISTORY_POOL,
    "history and civics": HISTORY_POOL,
    "environmental studies - part ii": HISTORY_POOL,
    "geography": GEOGRAPHY_POOL,
}


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def generate_question_id(operation: Operation, operand1: int, operand2: int) -> str:
    """Generate a stable id for an arithmetic question, e.g. "add_7_5"."""
    return f"{operation.value}_{operand1}_{operand2}"


def _operands(operation: Operation, config: ArithmeticConfig, rng: random.Random) -> tuple[int, int, int]:
    max_num = config.max_number
    if operation == Operation.ADDITION:
        a = rng.randint(1, max_num)
        b = rng.randint(1, max_num)
        return a, b, a + b
    if operation == Operation.SUBTRACTION:
        # Non-negative result
        a = rng.randint(10, max_num + 9)
        b = rng.randint(1, min(a, max_num))
        return a, b, a - b
    a = rng.randint(1, 12)
    b = rng.randint(1, 12)
    return a, b, a * b


def near_miss_options(answer: int, rng: random.Random) -> list[int]:
    """Three distinct positive wrong answers within 5 of the correct one."""
    wrong: set[int] = set()
    while len(wrong) < 3:
        offset = rng.randint(-5, 4)
        candidate = answer + (offset if offset != 0 else 1)
        if candidate != answer and candidate > 0:
            wrong.add(candidate)
    return sorted(wrong)


def shuffle_options(options: list[str], correct_index: int, rng: random.Random) -> tuple[tuple[str, ...], int]:
    """Shuffle options and return them with the correct option's new index."""
    order = list(range(len(options)))
    rng.shuffle(order)
    return tuple(options[i] for i in order), order.index(correct_index)


def generate_math_question(difficulty: int, rng: random.Random) -> Question:
    """Generate one arithmetic question for a difficulty level."""
    config = get_arithmetic_config(difficulty)
    operation = rng.choice(config.operations)
    a, b, answer = _operands(operation, config, rng)

    options, correct_index = shuffle_options(
        [str(answer)] + [str(w) for w in near_miss_options(answer, rng)], 0, rng
    )
    symbol = OPERATION_SYMBOLS[operation]

    return Question(
        id=generate_question_id(operation, a, b),
        question=f"What is {a} {OPERATION_WORDS[operation]} {b}?",
        options=options,
        correct_index=correct_index,
        explanation=f"{a} {symbol} {b} equals {answer}.",
        difficulty=difficulty,
    )


def generate_math_questions(difficulty: int, count: int, rng: random.Random) -> list[Question]:
    """Generate `count` arithmetic questions without repeating a question."""
    questions: dict[str, Question] = {}
    max_attempts = count * 20

    for _ in range(max_attempts):
        if len(questions) >= count:
            break
        question = generate_math_question(difficulty, rng)
        questions.setdefault(question.id, question)

    return list(questions.values())


def _pool_for(subject: str) -> list[PoolQuestion]:
    return SUBJECT_POOLS.get(subject.lower().strip(), SCIENCE_POOL)


def sample_pool_questions(subject: str, difficulty: int, count: int, rng: random.Random) -> list[Question]:
    """Sample up to `count` curated questions for a subject, options shuffled."""
    pool = _pool_for(subject)
    picked = rng.sample(range(len(pool)), min(count, len(pool)))
    questions = []

    for index in picked:
        item = pool[index]
        options, correct_index = shuffle_options(list(item.options), 0, rng)
        questions.append(
            Question(
                id=f"{_slug(subject)}_{index}",
                question=item.question,
                options=options,
                correct_index=correct_index,
                explanation=item.explanation,
                difficulty=difficulty,
            )
        )

    return questions


_SUBJECT_GENERATORS: dict[str, Callable[[int, int, random.Random], list[Question]]] = {
    name: generate_math_questions for name in MATH_SUBJECTS
}


def get_fallback_questions(
    subject: str,
    difficulty: int,
    count: int = DEFAULT_QUESTION_COUNT,
    rng: random.Random | None = None,
) -> list[Question]:
    """
    Build a local question battery.

    Args:
        subject: Subject name; unknown subjects use the science pool.
        difficulty: Difficulty level (1-10) stamped on the questions.
        count: Number of questions wanted. Curated pools may return fewer.
        rng: Random source, for reproducible batteries.

    Returns:
        A shuffled list of at most `count` distinct questions.
    """
    rng = rng or random.Random()
    generator = _SUBJECT_GENERATORS.get(subject.lower().strip())

    if generator is not None:
        questions = generator(difficulty, count, rng)
    else:
        questions = sample_pool_questions(subject, difficulty, count, rng)

    rng.shuffle(questions)
    return questions
