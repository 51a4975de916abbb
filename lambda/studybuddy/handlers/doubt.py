"""Doubt handler: free-text questions for the AI tutor."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.daily_plan import DEFAULT_GRADE
from studybuddy.doubt_solver import ChatMessage, StudentContext, solve_doubt
from studybuddy.handlers.helpers import (
    current_question_speech,
    get_current_question,
    get_slot_value,
    get_subject,
)
from studybuddy.persistence import get_persistence_manager
from studybuddy.progress import ProgressStore
from studybuddy.tutor_client import get_tutor_client

logger = logging.getLogger(__name__)


def build_student_context(handler_input, profile) -> StudentContext:
    """Context for the tutor: the profile, plus the quiz subject and chapter if one is running."""
    session_attr = handler_input.attributes_manager.session_attributes
    quiz = session_attr.get("quiz") if session_attr.get("state") == data.STATE_QUIZ else None

    subject = get_subject(handler_input, profile)
    chapter = None
    current_question = None
    if quiz:
        subject = subject or quiz["subject"]
        chapter = quiz.get("chapter")
        current_question = get_current_question(session_attr).question

    chapter_stats = None
    if subject and chapter:
        chapter_stats = ProgressStore(get_persistence_manager(handler_input)).get_stats(subject, chapter)

    return StudentContext(
        grade=profile.grade or DEFAULT_GRADE,
        board=profile.board,
        language=profile.preferred_language,
        subject=subject,
        chapter=chapter,
        chapter_stats=chapter_stats,
        current_question=current_question,
    )


class AskDoubtHandler(AbstractRequestHandler):
    """
    Handler for "I have a doubt" style requests.

    Greetings get a canned reply, off-topic doubts are turned away by
    the subject gate, everything else goes to the tutor. The chat
    history lives in the session.
    """

    def can_handle(self, handler_input):
        return is_intent_name("AskDoubtIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In AskDoubtHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        doubt = get_slot_value(handler_input, "doubt")
        if doubt is None:
            handler_input.response_builder.speak(data.ASK_DOUBT).ask(data.ASK_DOUBT)
            return handler_input.response_builder.response

        pm = get_persistence_manager(handler_input)
        context = build_student_context(handler_input, pm.get_student_profile())
        history = [ChatMessage.from_dict(m) for m in session_attr.get("chat_history", [])]

        reply = solve_doubt(doubt, context, history, client=get_tutor_client())
        session_attr["chat_history"] = [m.to_dict() for m in reply.history]

        if session_attr.get("state") == data.STATE_QUIZ:
            question_speech = current_question_speech(session_attr)
            speech = reply.text + data.BACK_TO_QUIZ + question_speech
            reprompt = question_speech
        else:
            speech = reply.text + data.DOUBT_FOLLOWUP
            reprompt = data.ASK_DOUBT

        handler_input.response_builder.speak(speech).ask(reprompt)
        return handler_input.response_builder.response
