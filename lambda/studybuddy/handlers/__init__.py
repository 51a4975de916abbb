"""Study Buddy request handlers."""

from studybuddy.handlers.doubt import AskDoubtHandler
from studybuddy.handlers.launch import LaunchRequestHandler
from studybuddy.handlers.mission import CompleteTaskHandler, DailyMissionHandler
from studybuddy.handlers.mistakes import ReviewAnswerHandler, ReviewMistakesHandler
from studybuddy.handlers.progress import ProgressHandler
from studybuddy.handlers.quiz import AnswerIntentHandler, QuizHandler
from studybuddy.handlers.settings import ResetProfileHandler, SetDifficultyHandler
from studybuddy.handlers.setup import SetupGradeHandler, SetupLanguageHandler
from studybuddy.handlers.standard import (
    ExitIntentHandler,
    FallbackIntentHandler,
    HelpIntentHandler,
    IntentReflectorHandler,
    NoIntentHandler,
    RepeatHandler,
    SessionEndedRequestHandler,
    YesIntentHandler,
)

__all__ = [
    "LaunchRequestHandler",
    "SetupGradeHandler",
    "SetupLanguageHandler",
    "QuizHandler",
    "AnswerIntentHandler",
    "AskDoubtHandler",
    "DailyMissionHandler",
    "CompleteTaskHandler",
    "ReviewMistakesHandler",
    "ReviewAnswerHandler",
    "ProgressHandler",
    "SetDifficultyHandler",
    "ResetProfileHandler",
    "RepeatHandler",
    "HelpIntentHandler",
    "YesIntentHandler",
    "NoIntentHandler",
    "ExitIntentHandler",
    "SessionEndedRequestHandler",
    "FallbackIntentHandler",
    "IntentReflectorHandler",
]
