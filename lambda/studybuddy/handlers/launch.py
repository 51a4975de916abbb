"""Launch request handler."""

import logging

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_request_type

from studybuddy import data
from studybuddy.handlers.helpers import describe_mission, get_mission_planner, prefetch_batch
from studybuddy.models import STEP_BOARD, STEP_GRADE, STEP_LANGUAGE
from studybuddy.persistence import get_persistence_manager

logger = logging.getLogger(__name__)


class LaunchRequestHandler(AbstractRequestHandler):
    """
    Handler for skill launch.

    New students start onboarding; students who left onboarding halfway
    resume at their saved step. Configured students hear today's mission,
    and a question batch for the mission's subject is prefetched.
    """

    def can_handle(self, handler_input):
        return is_request_type("LaunchRequest")(handler_input)

    def handle(self, handler_input):
        logger.info("In LaunchRequestHandler")

        pm = get_persistence_manager(handler_input)
        session_attr = handler_input.attributes_manager.session_attributes
        profile = pm.get_student_profile()

        if not profile.is_configured:
            first_time = pm.is_first_time_user()
            step = profile.current_step or STEP_GRADE

            # The single board is confirmed automatically
            if step >= STEP_BOARD and profile.grade:
                step = STEP_LANGUAGE
                session_attr["state"] = data.STATE_SETUP_LANGUAGE
                reprompt = data.ASK_LANGUAGE
            else:
                step = STEP_GRADE
                session_attr["state"] = data.STATE_SETUP_GRADE
                reprompt = data.ASK_GRADE

            profile.set_current_step(step)
            pm.save_student_profile(profile)
            pm.commit()

            if first_time:
                speech = data.WELCOME_MESSAGE_FIRST_TIME
            else:
                speech = data.WELCOME_BACK_ONBOARDING + reprompt
            handler_input.response_builder.speak(speech).ask(reprompt)
            return handler_input.response_builder.response

        mission = get_mission_planner(handler_input, pm, profile).get_or_create_today()
        practice = mission.tasks[-1]
        prefetch_batch(handler_input, profile, practice.subject, practice.chapter)

        session_attr["state"] = data.STATE_NONE
        speech = data.WELCOME_MESSAGE_RETURNING.format(mission=describe_mission(mission)) + data.REPROMPT_GENERAL
        handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
        return handler_input.response_builder.response
