"""Onboarding handlers for grade and language collection."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.curriculum import DEFAULT_BOARD, GRADES, LANGUAGES, board_display_name
from studybuddy.handlers.helpers import get_slot_id
from studybuddy.models import STEP_LANGUAGE
from studybuddy.persistence import get_persistence_manager

logger = logging.getLogger(__name__)


def parse_language(value: str | None) -> str | None:
    """Map a language code or name ("hi", "Hindi") to a supported code."""
    if not value:
        return None
    text = value.lower().strip()
    if text in LANGUAGES:
        return text
    for code, name in LANGUAGES.items():
        if name.lower() == text:
            return code
    return None


class SetupGradeHandler(AbstractRequestHandler):
    """
    Handler for capturing the student's class during onboarding.

    The only supported board is confirmed automatically, then the
    student is asked for a language.
    """

    def can_handle(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        return (
            is_intent_name("SetGradeIntent")(handler_input)
            and session_attr.get("state") == data.STATE_SETUP_GRADE
        )

    def handle(self, handler_input):
        logger.info("In SetupGradeHandler")

        grade = get_slot_id(handler_input, "grade")
        if grade not in GRADES:
            logger.info(f"Rejected grade value: {grade}")
            handler_input.response_builder.speak(data.INVALID_GRADE).ask(data.ASK_GRADE)
            return handler_input.response_builder.response

        pm = get_persistence_manager(handler_input)
        profile = pm.get_student_profile()
        profile.update_grade(grade)
        profile.board = DEFAULT_BOARD
        profile.set_current_step(STEP_LANGUAGE)
        pm.save_student_profile(profile)
        pm.commit()

        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["state"] = data.STATE_SETUP_LANGUAGE

        speech = data.CONFIRM_GRADE.format(grade=grade, board=board_display_name(DEFAULT_BOARD)) + data.ASK_LANGUAGE
        handler_input.response_builder.speak(speech).ask(data.ASK_LANGUAGE)
        return handler_input.response_builder.response


class SetupLanguageHandler(AbstractRequestHandler):
    """Handler for capturing the preferred language; completes onboarding."""

    def can_handle(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        return (
            is_intent_name("SetLanguageIntent")(handler_input)
            and session_attr.get("state") == data.STATE_SETUP_LANGUAGE
        )

    def handle(self, handler_input):
        logger.info("In SetupLanguageHandler")

        language = parse_language(get_slot_id(handler_input, "language"))
        if language is None:
            handler_input.response_builder.speak(data.INVALID_LANGUAGE).ask(data.ASK_LANGUAGE)
            return handler_input.response_builder.response

        pm = get_persistence_manager(handler_input)
        profile = pm.get_student_profile()
        profile.update_language(language)
        profile.complete_setup()
        pm.save_student_profile(profile)
        pm.commit()
        logger.info(f"Onboarding complete: grade={profile.grade}, language={language}")

        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["state"] = data.STATE_NONE

        speech = data.SETUP_COMPLETE.format(language=LANGUAGES[language])
        handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
