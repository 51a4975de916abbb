"""Progress reporting handler."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.mistakes import MistakeLedger
from studybuddy.models import ChapterStatus
from studybuddy.persistence import get_persistence_manager
from studybuddy.progress import ProgressStore

logger = logging.getLogger(__name__)


class ProgressHandler(AbstractRequestHandler):
    """
    Handler for reporting the student's progress.

    Responds to "how am I doing" with the number of strong, improving
    and weak chapters, up to two weak chapters by name, and the number
    of mistakes waiting for revision.
    """

    def can_handle(self, handler_input):
        return is_intent_name("ProgressIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In ProgressHandler")

        pm = get_persistence_manager(handler_input)
        progress_store = ProgressStore(pm)
        open_mistakes = MistakeLedger(pm).count_all()

        if not progress_store.progress:
            speech = data.PROGRESS_NO_DATA
        else:
            weak = progress_store.chapters_with_status(ChapterStatus.WEAK)
            speech = data.PROGRESS_REPORT.format(
                strong=len(progress_store.chapters_with_status(ChapterStatus.STRONG)),
                improving=len(progress_store.chapters_with_status(ChapterStatus.IMPROVING)),
                weak=len(weak),
            )

            if weak:
                chapters_text = " and ".join(f"{chapter} in {subject}" for subject, chapter in weak[:2])
                speech += data.PROGRESS_WEAK_CHAPTERS.format(chapters=chapters_text)

            if open_mistakes:
                speech += data.PROGRESS_MISTAKES.format(count=open_mistakes)
            else:
                speech += data.PROGRESS_NO_MISTAKES

        speech += " " + data.REPROMPT_GENERAL
        handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
