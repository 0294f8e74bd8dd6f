"""Static metadata describing LiveQuiz."""

APP_NAME = "LiveQuiz"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "LiveQuiz turns a pasted quiz document into a structured draft that can be "
    "reviewed, fixed and hosted as a live classroom quiz."
)

EXAMPLE_DOCUMENT = (
    "Capitals of Europe\n"
    "Warm-up round (default timer: 10s) (negative: -0.5)\n"
    "1) What is the capital of France?\n"
    "A) Berlin\nB) Paris\nC) Rome\n"
    "[Answer: B] (time: 15s) (+2 / -1)\n"
    "[Explanation: Paris has been the capital since 987.]\n\n"
    "2) Which of these cities lie on the Danube?\n"
    "A) Vienna\nB) Madrid\nC) Budapest\n"
    "[Answer: A, C]"
)

HELP_TEXT = (
    "Paste a quiz document. The first line is the title, the optional second line "
    "is the description. Number each question and letter each option. Mark answers "
    "with [Answer: B] or a check mark after the option, override the timer with "
    "(time: 15s) and the scoring with (+2 / -1).\n\n" + EXAMPLE_DOCUMENT
)
