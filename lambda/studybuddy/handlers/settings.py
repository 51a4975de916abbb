"""Settings handlers for difficulty adjustment and profile reset."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.difficulty import MAX_DIFFICULTY, MIN_DIFFICULTY, clamp_difficulty
from studybuddy.handlers.helpers import current_question_speech, get_session_difficulty, get_slot_value
from studybuddy.persistence import get_persistence_manager

logger = logging.getLogger(__name__)


class SetDifficultyHandler(AbstractRequestHandler):
    """
    Handler for adjusting the quiz difficulty.

    Responds to "make it easier/harder" by moving the session's requested
    difficulty one level. The change applies from the next question batch.
    """

    def can_handle(self, handler_input):
        return is_intent_name("SetDifficultyIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In SetDifficultyHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        current = get_session_difficulty(session_attr)
        direction = (get_slot_value(handler_input, "direction") or "").lower()

        if direction in data.EASIER_WORDS:
            new_level = clamp_difficulty(current - 1)
            speech = data.DIFFICULTY_EASIER if new_level != current else data.DIFFICULTY_SAME.format(direction="easiest")
        elif direction in data.HARDER_WORDS:
            new_level = clamp_difficulty(current + 1)
            speech = data.DIFFICULTY_HARDER if new_level != current else data.DIFFICULTY_SAME.format(direction="hardest")
        else:
            new_level = current
            speech = data.DIFFICULTY_CURRENT.format(level=current)

        session_attr["difficulty"] = new_level
        logger.info(f"Difficulty {current} -> {new_level} (range {MIN_DIFFICULTY}-{MAX_DIFFICULTY})")

        if session_attr.get("state") == data.STATE_QUIZ:
            question_speech = current_question_speech(session_attr)
            speech += " " + question_speech
            reprompt = question_speech
        else:
            speech += " " + data.REPROMPT_GENERAL
            reprompt = data.REPROMPT_GENERAL

        handler_input.response_builder.speak(speech).ask(reprompt)
        return handler_input.response_builder.response


class ResetProfileHandler(AbstractRequestHandler):
    """Handler for "reset my profile": forgets the profile and restarts onboarding."""

    def can_handle(self, handler_input):
        return is_intent_name("ResetProfileIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In ResetProfileHandler")

        pm = get_persistence_manager(handler_input)
        pm.reset_student_profile()

        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["state"] = data.STATE_SETUP_GRADE
        session_attr.pop("quiz", None)

        handler_input.response_builder.speak(data.PROFILE_RESET + data.ASK_GRADE).ask(data.ASK_GRADE)
        return handler_input.response_builder.response
