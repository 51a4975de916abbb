"""Quiz handlers for starting quizzes and processing answers."""

import logging
import time

from ask_sdk_core.dispatch_components import AbstractRequestHandler
from ask_sdk_core.utils import is_intent_name

from studybuddy import data
from studybuddy.handlers.helpers import (
    build_question_request,
    default_subject,
    format_question,
    get_correct_feedback,
    get_current_question,
    get_incorrect_feedback,
    get_mission_planner,
    get_quiz_end_message,
    get_session_performance,
    get_slot_value,
    get_subject,
    parse_answer,
    prefetch_batch,
    take_or_start_batch,
)
from studybuddy.mistakes import MistakeLedger
from studybuddy.persistence import get_persistence_manager
from studybuddy.progress import ProgressStore

logger = logging.getLogger(__name__)


class QuizHandler(AbstractRequestHandler):
    """
    Handler for starting a new quiz.

    The subject comes from the request, else from today's mission, else
    from the student's curriculum. Questions come from the prefetched
    batch when one matches, else from a new batch.
    """

    def can_handle(self, handler_input):
        return is_intent_name("QuizIntent")(handler_input) or is_intent_name(
            "AMAZON.StartOverIntent"
        )(handler_input)

    def handle(self, handler_input):
        logger.info("In QuizHandler")

        session_attr = handler_input.attributes_manager.session_attributes
        pm = get_persistence_manager(handler_input)
        profile = pm.get_student_profile()

        if not profile.is_configured:
            session_attr["state"] = data.STATE_SETUP_GRADE
            handler_input.response_builder.speak(data.SETUP_REQUIRED + data.ASK_GRADE).ask(data.ASK_GRADE)
            return handler_input.response_builder.response

        subject = get_subject(handler_input, profile)
        chapter = get_slot_value(handler_input, "chapter")
        if subject is None:
            practice = get_mission_planner(handler_input, pm, profile).get_or_create_today().tasks[-1]
            subject, chapter = practice.subject, chapter or practice.chapter
        subject = subject or default_subject(profile)

        request = build_question_request(profile, session_attr, subject, chapter)
        batch = take_or_start_batch(handler_input, request)
        questions = batch.mark_presented()
        logger.info(
            f"Starting {subject} quiz: {len(questions)} {batch.source} questions at difficulty {batch.difficulty}"
        )

        session_attr["state"] = data.STATE_QUIZ
        session_attr["quiz"] = {
            "subject": subject,
            "chapter": chapter,
            "questions": [question.to_dict() for question in questions],
            "index": 0,
            "correct_count": 0,
            "asked_at": time.time(),
        }

        question_speech = format_question(questions[0], 1)
        speech = data.START_QUIZ_MESSAGE.format(subject=subject) + question_speech
        handler_input.response_builder.speak(speech).ask(question_speech)
        return handler_input.response_builder.response


class AnswerIntentHandler(AbstractRequestHandler):
    """
    Handler for answers during a quiz.

    Records the answer in the session's running performance and in the
    chapter progress, captures a mistake on a wrong answer, then asks
    the next question or ends the quiz.
    """

    def can_handle(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        return (
            is_intent_name("AnswerIntent")(handler_input)
            and session_attr.get("state") == data.STATE_QUIZ
        )

    def handle(self, handler_input):
        session_attr = handler_input.attributes_manager.session_attributes
        quiz = session_attr["quiz"]
        question = get_current_question(session_attr)

        spoken = get_slot_value(handler_input, "answer") or get_slot_value(handler_input, "number")
        chosen = parse_answer(spoken, list(question.options))
        logger.info(f"AnswerIntentHandler: index={quiz['index']}, spoken={spoken}, chosen={chosen}")

        if chosen is None:
            question_speech = format_question(question, quiz["index"] + 1)
            speech = data.NOT_UNDERSTOOD_DURING_QUIZ + " " + question_speech
            handler_input.response_builder.speak(speech).ask(question_speech)
            return handler_input.response_builder.response

        is_correct = question.check_answer(chosen)
        response_time = max(0.0, time.time() - quiz.get("asked_at", time.time()))

        performance = get_session_performance(session_attr)
        performance.record(is_correct, response_time)
        session_attr["performance"] = performance.to_dict()

        subject = quiz["subject"]
        chapter = quiz.get("chapter") or data.GENERAL_CHAPTER
        pm = get_persistence_manager(handler_input)
        progress_store = ProgressStore(pm)
        progress_store.record_attempt(subject, chapter, is_correct)

        if is_correct:
            quiz["correct_count"] += 1
            feedback = get_correct_feedback(question)
        else:
            MistakeLedger(pm).capture_mistake(
                question=question.question,
                user_answer=question.options[chosen],
                correct_answer=question.correct_option,
                subject=subject,
                topic=chapter,
            )
            feedback = get_incorrect_feedback(question)

        total = len(quiz["questions"])
        if quiz["index"] + 1 >= total:
            logger.info(f"QUIZ COMPLETE: correct={quiz['correct_count']}, total={total}")
            speech = feedback + " " + get_quiz_end_message(quiz["correct_count"], total)
            speech += self._complete_practice_task(handler_input, pm, progress_store, subject)

            session_attr["state"] = data.STATE_NONE
            session_attr.pop("quiz", None)

            # Gives the next quiz on this subject a chance at remote questions
            prefetch_batch(handler_input, pm.get_student_profile(), subject, quiz.get("chapter"))

            speech += " " + data.REPROMPT_GENERAL
            handler_input.response_builder.speak(speech).ask(data.REPROMPT_GENERAL)
            return handler_input.response_builder.response

        quiz["index"] += 1
        quiz["asked_at"] = time.time()
        next_question = get_current_question(session_attr)
        question_speech = format_question(next_question, quiz["index"] + 1)

        speech = feedback + " " + data.NEXT_QUESTION + question_speech
        handler_input.response_builder.speak(speech).ask(question_speech)
        return handler_input.response_builder.response

    @staticmethod
    def _complete_practice_task(handler_input, pm, progress_store, subject: str) -> str:
        planner = get_mission_planner(handler_input, pm, pm.get_student_profile(), progress_store)
        mission = planner.get_or_create_today()
        for task in mission.tasks:
            if task.type == "practice" and task.subject == subject and planner.complete_task(task.id):
                return data.MISSION_TASK_DONE
        return ""
