"""Daily mission handlers."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.daily_plan import TASK_FOCUS, TASK_PRACTICE
from studybuddy.handlers.helpers import describe_mission, get_mission_planner, get_slot_value
from studybuddy.persistence import get_persistence_manager

logger = logging.getLogger(__name__)

TASK_IDS_BY_NUMBER = {"1": TASK_FOCUS, "2": TASK_PRACTICE}


class DailyMissionHandler(AbstractRequestHandler):
    """Handler for "what's my mission today"."""

    def can_handle(self, handler_input):
        return is_intent_name("DailyMissionIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In DailyMissionHandler")

        pm = get_persistence_manager(handler_input)
        mission = get_mission_planner(handler_input, pm, pm.get_student_profile()).get_or_create_today()

        speech = describe_mission(mission)
        if mission.completed:
            speech += " " + data.MISSION_COMPLETED
        speech += " " + data.REPROMPT_GENERAL

        handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response


class CompleteTaskHandler(AbstractRequestHandler):
    """
    Handler for "I finished task one".

    Completing a task is one way; repeating it is a no-op.
    """

    def can_handle(self, handler_input):
        return is_intent_name("CompleteTaskIntent")(handler_input)

    def handle(self, handler_input):
        logger.info("In CompleteTaskHandler")

        number = get_slot_value(handler_input, "task")
        task_id = TASK_IDS_BY_NUMBER.get(number or "")
        if task_id is None:
            handler_input.response_builder.speak(data.ASK_TASK_NUMBER).ask(data.ASK_TASK_NUMBER)
            return handler_input.response_builder.response

        pm = get_persistence_manager(handler_input)
        planner = get_mission_planner(handler_input, pm, pm.get_student_profile())

        if planner.complete_task(task_id):
            speech = data.TASK_MARKED_DONE.format(number=number)
            if planner.get_or_create_today().completed:
                speech += " " + data.MISSION_COMPLETED
        else:
            speech = data.TASK_ALREADY_DONE.format(number=number)

        speech += " " + data.REPROMPT_GENERAL
        handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
