"""Static metadata describing TimedQuiz."""

APP_NAME = "TimedQuiz"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "TimedQuiz runs timed quiz attempts with single-choice, true/false, ordering "
    "and matching questions, and exposes the attempt to a browser over HTTP."
)

HELP_TEXT = (
    "Quizzes are plain .txt files in the quiz directory, one block per question:\n\n"
    "Q: Newton's first law says...\n"
    "A: An object at rest stays at rest\nB: F = ma\n"
    "CORRECT: A\n\n"
    "TYPE: TRUEFALSE\nQ: The Earth revolves around the Sun.\nCORRECT: TRUE\n\n"
    "TYPE: ORDER\nQ: Arrange the planets from the Sun.\n"
    "ITEM: Mars\nITEM: Venus\nITEM: Earth\nITEM: Mercury\n"
    "CORRECT: Mercury, Venus, Earth, Mars\n\n"
    "TYPE: MATCH\nQ: Match the scientists with their discoveries.\n"
    "PAIR: Newton = Laws of Motion\nPAIR: Darwin = Evolution"
)
