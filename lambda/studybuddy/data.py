"""
Language data and prompts for the Study Buddy Alexa Skill.

This module contains the text strings spoken by the skill, including
onboarding prompts, quiz feedback, mission and progress reports, and
the session state names.
"""

# Skill metadata
SKILL_TITLE = "Study Buddy"

# Questions per quiz
QUIZ_QUESTION_COUNT = 5

# Chapter name used when a quiz is not about a specific chapter
GENERAL_CHAPTER = "General"

# ============================================================================
# Welcome and Onboarding
# ============================================================================

WELCOME_MESSAGE_FIRST_TIME = (
    "Hi! Welcome to Study Buddy, your friendly study partner. "
    "Let's get you set up. Which class are you in? First to eighth?"
)

WELCOME_BACK_ONBOARDING = "Welcome back! Let's finish setting you up. "

WELCOME_MESSAGE_RETURNING = "Welcome back to Study Buddy! {mission} "

ASK_GRADE = "Which class are you in? First to eighth?"

INVALID_GRADE = "I can help students from first to eighth class. Which class are you in?"

CONFIRM_GRADE = "Great, class {grade}! I'll follow the {board} syllabus. "

ASK_LANGUAGE = "Which language do you prefer: English, Hindi or Marathi?"

INVALID_LANGUAGE = "I can speak English, Hindi or Marathi. Which one do you prefer?"

SETUP_COMPLETE = (
    "You're all set! I'll use {language}. "
    "You can say 'start a quiz', 'I have a doubt', or 'what's my mission'."
)

SETUP_REQUIRED = "Before we start, I need to know a little about you. "

# ============================================================================
# Quiz
# ============================================================================

START_QUIZ_MESSAGE = "Let's practise {subject}! "

QUESTION_TEMPLATE = "Question {number}: {question} "

OPTION_TEMPLATE = "{letter}: {option}."

NEXT_QUESTION = "Next one. "

CORRECT_ANSWER_TEMPLATES = [
    "Correct!",
    "Well done! {answer} is right!",
    "Awesome! {answer} is correct!",
    "That's right!",
    "Great job!",
]

WRONG_ANSWER_TEMPLATES = [
    "Not quite. The answer is {answer}. {explanation}",
    "Oops, that's not it. The right answer is {answer}. {explanation}",
    "Good try! The correct answer is {answer}. {explanation}",
]

QUIZ_END_PERFECT = "Wow! You got all {total} right! You're a superstar!"

QUIZ_END_GREAT = "Great work! You got {correct} out of {total} right."

QUIZ_END_GOOD = "Good job! You got {correct} out of {total}. Keep it up!"

QUIZ_END_KEEP_PRACTICING = (
    "You got {correct} out of {total}. Practice makes perfect, "
    "and I've saved the tricky ones for revision."
)

MISSION_TASK_DONE = " That completes a task from today's mission!"

REPROMPT_QUIZ = "Which option is it? Say A, B, C or D."

NOT_UNDERSTOOD_DURING_QUIZ = "Sorry, I didn't catch that. Please say A, B, C or D."

# ============================================================================
# Doubts
# ============================================================================

ASK_DOUBT = "Sure, what is your doubt?"

DOUBT_FOLLOWUP = " You can ask another doubt, or say 'start a quiz'."

BACK_TO_QUIZ = " Let's get back to the quiz. "

# ============================================================================
# Daily Mission
# ============================================================================

MISSION_MESSAGE = "{title}! {tasks}."

MISSION_TASK = "Task {number}: {description}"

MISSION_TASK_DONE_SUFFIX = ", done"

MISSION_COMPLETED = "You finished today's mission. Fantastic!"

TASK_MARKED_DONE = "Nice! I've marked task {number} as done."

TASK_ALREADY_DONE = "Task {number} is already done, or I couldn't find it."

ASK_TASK_NUMBER = "Which task did you finish, one or two?"

# ============================================================================
# Progress
# ============================================================================

PROGRESS_REPORT = (
    "You have {strong} strong, {improving} improving and {weak} weak chapters. "
)

PROGRESS_WEAK_CHAPTERS = "Let's work on {chapters}. "

PROGRESS_MISTAKES = "You have {count} mistakes waiting for revision. "

PROGRESS_NO_MISTAKES = "You have no mistakes waiting for revision. "

PROGRESS_NO_DATA = (
    "You haven't answered any questions yet. Say 'start a quiz' to begin!"
)

# ============================================================================
# Mistake Revision
# ============================================================================

NO_MISTAKES = "You have no mistakes to revise. Great job!"

REVIEW_INTRO = "Let's revise {count} of your mistakes. "

REVIEW_MISTAKE = (
    "The question was: {question} The correct answer is {answer}. "
    "Have you got it now?"
)

REVIEW_RESOLVED = "Great, I'll take it off your list. "

REVIEW_KEPT = "No problem, we'll come back to it. "

REVIEW_DONE = "That's all for revision."

REPROMPT_REVIEW = "Have you got it now? Say yes or no."

# ============================================================================
# Difficulty and Settings
# ============================================================================

DIFFICULTY_EASIER = "Okay, I'll make the questions a bit easier."

DIFFICULTY_HARDER = "Alright, I'll make the questions a bit harder."

DIFFICULTY_SAME = "You're already at the {direction} level."

DIFFICULTY_CURRENT = "You're at level {level} out of 10."

EASIER_WORDS = ["easier", "easy", "simpler", "simple"]

HARDER_WORDS = ["harder", "hard", "tougher", "difficult"]

PROFILE_RESET = "I've reset your profile. Let's start again. "

# ============================================================================
# Help, Repeat and Exit
# ============================================================================

HELP_MESSAGE = (
    "I'm your study buddy. Say 'start a quiz' to practise, "
    "'I have a doubt' to ask a question, 'what's my mission' for today's plan, "
    "'revise my mistakes', or 'how am I doing' for your progress. "
    "What would you like to do?"
)

HELP_DURING_QUIZ = (
    "Answer with the letter of the option, like A or B. "
    "Say 'repeat' to hear the question again, or 'stop' to finish."
)

REPEAT_QUESTION = "Once more: {question}"

REPROMPT_GENERAL = "What would you like to do? You can say 'start a quiz'."

EXIT_SKILL_MESSAGE = "Bye! Keep learning, see you soon!"

EXIT_DURING_QUIZ = "Okay, let's stop. You got {correct} out of {answered} right. See you soon!"

# ============================================================================
# Errors
# ============================================================================

FALLBACK_MESSAGE = "Sorry, I didn't understand that. Say 'help' if you're stuck."

ERROR_MESSAGE = "Sorry, something went wrong. Please try again."

# ============================================================================
# Session States
# ============================================================================

STATE_NONE = "NONE"
STATE_SETUP_GRADE = "SETUP_GRADE"
STATE_SETUP_LANGUAGE = "SETUP_LANGUAGE"
STATE_QUIZ = "QUIZ"
STATE_REVIEW = "REVIEW"

# ============================================================================
# Answer options
# ============================================================================

OPTION_LETTERS = ["A", "B", "C", "D"]

OPTION_NUMBER_WORDS = {
    "one": 0,
    "two": 1,
    "three": 2,
    "four": 3,
    "first": 0,
    "second": 1,
    "third": 2,
    "fourth": 3,
}
