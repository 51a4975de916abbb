"""
Doubt solving: greeting shortcut, subject gate, then the AI tutor.

A doubt that is rejected by the gate never reaches the tutor. Accepted
doubts are sent with a system prompt built from the student's context and
the most recent chat history.
"""

import logging
from dataclasses import dataclass, field

from studybuddy.curriculum import LANGUAGES, board_display_name
from studybuddy.models import ChapterStats, ChapterStatus
from studybuddy.subject_gate import ValidationContext, is_greeting, validate_question
from studybuddy.tutor_client import TutorError

logger = logging.getLogger(__name__)

MAX_HISTORY_MESSAGES = 10

GREETING_REPLY = (
    "Hello! I'm your study buddy. Ask me any doubt from your subjects, "
    "like maths, science, grammar, history or geography."
)
TUTOR_UNAVAILABLE_MESSAGE = "The tutor is not available right now. Please try again later."

STATUS_COACHING = {
    ChapterStatus.WEAK: (
        "COACHING: The student is struggling with this chapter. Be extra patient, break down "
        "concepts into very small steps, and provide easier examples."
    ),
    ChapterStatus.IMPROVING: (
        "COACHING: The student is improving. Encourage them and slowly introduce slightly "
        "harder concepts."
    ),
    ChapterStatus.STRONG: (
        "COACHING: The student has mastered this chapter! Congratulate them and feel free to "
        "discuss advanced applications or suggest moving to the next chapter."
    ),
}

GENERAL_RULES = """
GENERAL RULES:
1. Explain concepts in SIMPLE language appropriate for Grade {grade}
2. Use REAL-WORLD EXAMPLES and STORIES to make concepts memorable
3. Keep explanations concise, the answer is read aloud
4. Provide 1-2 practice examples when relevant or asked
5. Be encouraging, supportive, and never discourage the student
6. Do NOT invent syllabus content. If unsure, ask a clarifying question.

Use plain sentences without markdown. Keep responses under 150 words unless the topic requires more detail."""


@dataclass
class StudentContext:
    grade: str
    board: str
    language: str = "en"
    subject: str | None = None
    chapter: str | None = None
    chapter_stats: ChapterStats | None = None
    current_question: str | None = None


@dataclass
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str
    is_rejection: bool = False

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content, "is_rejection": self.is_rejection}

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(
            role=data["role"],
            content=data["content"],
            is_rejection=bool(data.get("is_rejection", False)),
        )


@dataclass
class DoubtReply:
    text: str
    is_rejection: bool = False
    is_error: bool = False
    history: list[ChatMessage] = field(default_factory=list)


def build_system_prompt(context: StudentContext) -> str:
    """Write the tutor's system prompt for a student and what they are studying."""
    board = board_display_name(context.board) or context.board
    language = LANGUAGES.get(context.language, context.language)
    lines = [
        f"You are a friendly and expert AI Tutor for a Grade {context.grade} student "
        f"studying under the {board} board. Language: {language}.",
        "",
    ]

    if context.chapter:
        lines.append(f'CONTEXT: CHAPTER "{context.chapter}" ({context.subject})')
        stats = context.chapter_stats
        if stats is not None:
            lines.append(
                f"STUDENT STATUS: {stats.status.value} "
                f"(Attempts: {stats.total_attempts}, Correct: {stats.correct_answers})"
            )
            if stats.status in STATUS_COACHING:
                lines.append(STATUS_COACHING[stats.status])
        lines += [
            f'STRICT RULE: You are currently teaching ONLY the chapter "{context.chapter}".',
            "- If the student asks about a different chapter, politely decline and ask if they "
            "would like to switch.",
            f"- Focus on step-by-step explanations suitable for Grade {context.grade}.",
        ]
    elif context.subject:
        lines += [
            f'CONTEXT: SUBJECT "{context.subject}" (Full Syllabus)',
            f"- You may answer questions from ANY chapter in the {context.subject} syllabus "
            f"for Grade {context.grade}.",
            "- Keep explanations simple, exam-focused, and age-appropriate.",
        ]
    else:
        lines += [
            f"CONTEXT: General Learning (Grade {context.grade})",
            "- Help the student with their studies across subjects.",
        ]

    if context.current_question:
        lines += ["", f'CURRENT ACTIVITY: The student is looking at this question: "{context.current_question}"']

    lines.append(GENERAL_RULES.format(grade=context.grade))
    return "\n".join(lines)


def without_rejections(history: list[ChatMessage]) -> list[ChatMessage]:
    """Drop turned-away doubts together with their rejection replies."""
    kept: list[ChatMessage] = []
    for message in history:
        if message.is_rejection:
            if kept and kept[-1].role == "user":
                kept.pop()
            continue
        kept.append(message)
    return kept


def build_messages(doubt: str, context: StudentContext, history: list[ChatMessage]) -> list[dict]:
    """System prompt, the last ten accepted history messages, then the doubt."""
    messages = [{"role": "system", "content": build_system_prompt(context)}]
    messages += [
        {"role": message.role, "content": message.content}
        for message in without_rejections(history)[-MAX_HISTORY_MESSAGES:]
    ]
    messages.append({"role": "user", "content": doubt})
    return messages


def _append(history: list[ChatMessage], *messages: ChatMessage) -> list[ChatMessage]:
    return (list(history) + list(messages))[-MAX_HISTORY_MESSAGES:]


def solve_doubt(doubt: str, context: StudentContext, history: list[ChatMessage] | None = None, client=None) -> DoubtReply:
    """
    Answer a student's doubt.

    Args:
        doubt: The free-text doubt.
        context: The student's grade, board, language and study context.
        history: Prior chat messages, oldest first.
        client: A TutorClient, or None when the tutor is not configured.

    Returns:
        The reply and the updated history, capped at ten messages.
    """
    history = list(history or [])
    question = ChatMessage(role="user", content=doubt)

    if is_greeting(doubt):
        return DoubtReply(
            text=GREETING_REPLY,
            history=_append(history, question, ChatMessage(role="assistant", content=GREETING_REPLY)),
        )

    validation = validate_question(
        doubt, ValidationContext(grade=context.grade, board=context.board, subject=context.subject)
    )
    if not validation.is_valid:
        logger.info(f"Doubt rejected by subject gate: {validation.reason}")
        reply = ChatMessage(role="assistant", content=validation.rejection_message, is_rejection=True)
        return DoubtReply(
            text=validation.rejection_message,
            is_rejection=True,
            history=_append(history, question, reply),
        )

    if client is None:
        return DoubtReply(text=TUTOR_UNAVAILABLE_MESSAGE, is_error=True, history=history)

    try:
        answer = client.stream_text(build_messages(doubt, context, history))
    except TutorError as err:
        logger.warning(f"Tutor call failed: {err}")
        return DoubtReply(text=err.user_message, is_error=True, history=history)

    if not answer.strip():
        logger.warning("Tutor returned an empty answer")
        return DoubtReply(text=TutorError.user_message, is_error=True, history=history)

    return DoubtReply(
        text=answer,
        history=_append(history, question, ChatMessage(role="assistant", content=answer)),
    )
