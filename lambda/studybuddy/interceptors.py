"""Request and response interceptors for the Study Buddy skill."""

import logging

from ask_sdk_core.dispatch_components import (
    AbstractExceptionHandler,
    AbstractRequestInterceptor,
    AbstractResponseInterceptor,
)
from ask_sdk_core.utils import get_intent_name, get_request_type

from studybuddy import data
from studybuddy.difficulty import DEFAULT_DIFFICULTY

logger = logging.getLogger(__name__)


def _describe(handler_input) -> str:
    request_type = get_request_type(handler_input)
    if request_type == "IntentRequest":
        return f"{request_type}:{get_intent_name(handler_input)}"
    return request_type


class SessionDefaultsInterceptor(AbstractRequestInterceptor):
    """Seed the session state and quiz difficulty on the first request of a session."""

    def process(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        session_attr.setdefault("state", data.STATE_NONE)
        session_attr.setdefault("difficulty", DEFAULT_DIFFICULTY)


class CacheResponseForRepeatInterceptor(AbstractResponseInterceptor):
    """Keep the last response in the session so it can be repeated."""

    def process(self, handler_input, response):
        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["recent_response"] = response


class RequestLogger(AbstractRequestInterceptor):
    """Log incoming requests."""

    def process(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        logger.info(f"Request {_describe(handler_input)}, state={session_attr.get('state')}")
        logger.debug(f"Request Envelope: {handler_input.request_envelope}")


class ResponseLogger(AbstractResponseInterceptor):
    """Log outgoing responses."""

    def process(self, handler_input, response):
        logger.info(f"Response: {response}")


class CatchAllExceptionHandler(AbstractExceptionHandler):
    """
    Catch-all exception handler.

    Logs the error with the request it came from and apologises. The
    session state is reset so the student is not stuck in a broken flow.
    """

    def can_handle(self, handler_input, exception):
        return True

    def handle(self, handler_input, exception):
        logger.error(f"Unhandled error in {_describe(handler_input)}: {exception}", exc_info=True)

        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["state"] = data.STATE_NONE

        handler_input.response_builder.speak(data.ERROR_MESSAGE).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
