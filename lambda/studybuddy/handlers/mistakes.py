"""Mistake revision handlers."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.mistakes import DEFAULT_REVISION_COUNT, MistakeLedger
from studybuddy.persistence import get_persistence_manager

logger = logging.getLogger(__name__)


def _ask_mistake(handler_input, ledger: MistakeLedger, prefix: str = ""):
    """Ask about the next queued mistake, or finish the revision."""
    session_attr = handler_input.attributes_manager.session_attributes
    queue = session_attr.get("review_queue", [])

    while queue:
        mistake = ledger.get(queue[0])
        if mistake is not None:
            speech = prefix + data.REVIEW_MISTAKE.format(question=mistake.question, answer=mistake.correct_answer)
            handler_input.response_builder.speak(speech).ask(data.REPROMPT_REVIEW)
            return handler_input.response_builder.response
        queue.pop(0)

    session_attr["state"] = data.STATE_NONE
    session_attr.pop("review_queue", None)
    speech = prefix + data.REVIEW_DONE + " " + data.REPROMPT_GENERAL
    handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
    return handler_input.response_builder.response


class ReviewMistakesHandler(AbstractRequestHandler):
    """Handler for "revise my mistakes": walks through the most recent ones."""

    def can_handle(self, handler_input):
        return is_intent_name("ReviewMistakesIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In ReviewMistakesHandler")

        ledger = MistakeLedger(get_persistence_manager(handler_input))
        mistakes = ledger.list_for_revision(DEFAULT_REVISION_COUNT)

        if not mistakes:
            speech = data.NO_MISTAKES + " " + data.REPROMPT_GENERAL
            handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
            return handler_input.response_builder.response

        session_attr = handler_input.attributes_manager.session_attributes
        session_attr["state"] = data.STATE_REVIEW
        session_attr["review_queue"] = [mistake.id for mistake in mistakes]

        return _ask_mistake(handler_input, ledger, data.REVIEW_INTRO.format(count=len(mistakes)))


class ReviewAnswerHandler(AbstractRequestHandler):
    """
    Handler for yes/no while revising mistakes.

    "Yes" resolves the mistake and removes it from the ledger, "no"
    keeps it for next time.
    """

    def can_handle(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        return session_attr.get("state") == data.STATE_REVIEW and (
            is_intent_name("AMAZON.YesIntent")(handler_input)
            or is_intent_name("AMAZON.NoIntent")(handler_input)
        )

    def handle(self, handler_input):
        logger.info("In ReviewAnswerHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        queue = session_attr.get("review_queue", [])
        ledger = MistakeLedger(get_persistence_manager(handler_input))

        if not queue:
            return _ask_mistake(handler_input, ledger)

        mistake_id = queue.pop(0)
        if is_intent_name("AMAZON.YesIntent")(handler_input):
            ledger.resolve_mistake(mistake_id)
            prefix = data.REVIEW_RESOLVED
        else:
            prefix = data.REVIEW_KEPT

        return _ask_mistake(handler_input, ledger, prefix)
