"""Standard Alexa intent handlers (Help, Exit, Repeat, Fallback, etc.)."""

import json
import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.serialize import DefaultSerializer
from ask_sdk_core.utils import get_intent_name, is_intent_name, is_request_type
from ask_sdk_model import Response

from studybuddy import data
from studybuddy.handlers.helpers import current_question_speech, get_session_id
from studybuddy.handlers.quiz import QuizHandler
from studybuddy.question_service import prefetched_batches

logger = logging.getLogger(__name__)


def _quiz_reprompt(session_attr: dict) -> str:
    return current_question_speech(session_attr) or data.REPROMPT_QUIZ


class RepeatHandler(AbstractRequestHandler):
    """
    Handler for repeating the current question.

    During a quiz, repeats the current question.
    Outside a quiz, repeats the last response.
    """

    def can_handle(self, handler_input):
        return is_intent_name("AMAZON.RepeatIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In RepeatHandler")

        session_attr = handler_input.attributes_manager.session_attributes

        if session_attr.get("state") == data.STATE_QUIZ:
            question_speech = current_question_speech(session_attr)
            if question_speech:
                speech = data.REPEAT_QUESTION.format(question=question_speech)
                reprompt = question_speech
            else:
                speech = data.ERROR_MESSAGE
                reprompt = data.REPROMPT_GENERAL
        elif "recent_response" in session_attr:
            cached_response_str = json.dumps(session_attr["recent_response"])
            return DefaultSerializer().deserialize(cached_response_str, Response)
        else:
            speech = data.HELP_MESSAGE
            reprompt = data.REPROMPT_GENERAL

        handler_input.response_builder.speak(speech).ask(reprompt)
        return handler_input.response_builder.response


class HelpIntentHandler(AbstractRequestHandler):
    """Handler for help intent. Provides context-appropriate help messages."""

    def can_handle(self, handler_input):
        return is_intent_name("AMAZON.HelpIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In HelpIntentHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        state = session_attr.get("state")

        if state == data.STATE_QUIZ:
            reprompt = _quiz_reprompt(session_attr)
            speech = data.HELP_DURING_QUIZ + " " + reprompt
        elif state == data.STATE_SETUP_GRADE:
            speech = reprompt = data.ASK_GRADE
        elif state == data.STATE_SETUP_LANGUAGE:
            speech = reprompt = data.ASK_LANGUAGE
        elif state == data.STATE_REVIEW:
            speech = reprompt = data.REPROMPT_REVIEW
        else:
            speech = data.HELP_MESSAGE
            reprompt = data.REPROMPT_GENERAL

        handler_input.response_builder.speak(speech).ask(reprompt)
        return handler_input.response_builder.response


class YesIntentHandler(AbstractRequestHandler):
    """Handler for "yes" outside a revision: starts a quiz."""

    def can_handle(self, handler_input):
        return is_intent_name("AMAZON.YesIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In YesIntentHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        if session_attr.get("state") == data.STATE_QUIZ:
            reprompt = _quiz_reprompt(session_attr)
            handler_input.response_builder.speak(data.NOT_UNDERSTOOD_DURING_QUIZ + " " + reprompt).ask(reprompt)
            return handler_input.response_builder.response

        return QuizHandler().handle(handler_input)


class NoIntentHandler(AbstractRequestHandler):
    """Handler for "no" outside a revision: says goodbye."""

    def can_handle(self, handler_input):
        return is_intent_name("AMAZON.NoIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In NoIntentHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        if session_attr.get("state") == data.STATE_QUIZ:
            reprompt = _quiz_reprompt(session_attr)
            handler_input.response_builder.speak(data.NOT_UNDERSTOOD_DURING_QUIZ + " " + reprompt).ask(reprompt)
            return handler_input.response_builder.response

        handler_input.response_builder.speak(data.EXIT_SKILL_MESSAGE).set_should_end_session(True)
        return handler_input.response_builder.response


class ExitIntentHandler(AbstractRequestHandler):
    """
    Handler for Cancel, Stop, and Pause intents.

    Progress is already stored after every answer, so this only says
    goodbye, with the score when a quiz is running.
    """

    def can_handle(self, handler_input):
        return (
            is_intent_name("AMAZON.CancelIntent")(handler_input)
            or is_intent_name("AMAZON.StopIntent")(handler_input)
            or is_intent_name("AMAZON.PauseIntent")(handler_input)
        )

    def handle(self, handler_input):
        logger.info("In ExitIntentHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        quiz = session_attr.get("quiz")

        if session_attr.get("state") == data.STATE_QUIZ and quiz:
            speech = data.EXIT_DURING_QUIZ.format(correct=quiz["correct_count"], answered=quiz["index"])
        else:
            speech = data.EXIT_SKILL_MESSAGE

        prefetched_batches.discard_session(get_session_id(handler_input))
        handler_input.response_builder.speak(speech).set_should_end_session(True)
        return handler_input.response_builder.response


class SessionEndedRequestHandler(AbstractRequestHandler):
    """Handler for session end. Drops batches prefetched for the session."""

    def can_handle(self, handler_input):
        return is_request_type("SessionEndedRequest")(handler_input)

    def handle(self, handler_input):
        logger.info("In SessionEndedRequestHandler")
        logger.info(f"Session ended with reason: {handler_input.request_envelope.request.reason}")
        prefetched_batches.discard_session(get_session_id(handler_input))
        return handler_input.response_builder.response


class FallbackIntentHandler(AbstractRequestHandler):
    """
    Handler for fallback intent.

    Triggered when Alexa doesn't understand the user's input.
    """

    def can_handle(self, handler_input):
        return is_intent_name("AMAZON.FallbackIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In FallbackIntentHandler")

        session_attr = handler_input.attributes_manager.session_attributes

        if session_attr.get("state") == data.STATE_QUIZ:
            reprompt = _quiz_reprompt(session_attr)
            speech = data.FALLBACK_MESSAGE + " " + reprompt
        else:
            speech = data.FALLBACK_MESSAGE
            reprompt = data.REPROMPT_GENERAL

        handler_input.response_builder.speak(speech).ask(reprompt)
        return handler_input.response_builder.response


class IntentReflectorHandler(AbstractRequestHandler):
    """Catches any intent no other handler claimed, logs it and steers back."""

    def can_handle(self, handler_input):
        return is_request_type("IntentRequest")(handler_input)

    def handle(self, handler_input):
        intent_name = get_intent_name(handler_input)
        logger.warning(f"Unhandled intent {intent_name}")

        handler_input.response_builder.speak(data.FALLBACK_MESSAGE).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
