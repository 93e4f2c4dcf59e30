"""Application entry point for TimedQuiz."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

from PySide6.QtCore import QCoreApplication

from assessment_app.constants.about import APP_ABOUT_TEXT, APP_NAME, APP_VERSION, HELP_TEXT
from assessment_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from assessment_app.constants.quiz_constants import (
    DEFAULT_DURATION_SECONDS,
    DEFAULT_QUIZ_DIRECTORY,
)
from assessment_app.core.qt_clock import QtClock
from assessment_app.core.quiz_session import QuizSession
from assessment_app.core.services.question_bank import QuizLibrary
from assessment_app.core.services.result_log import ResultLog
from assessment_app.server.api_server import start_api_server
from assessment_app.utils.logging_config import configure_logging


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_ABOUT_TEXT,
        epilog=HELP_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    parser.add_argument("quiz", help="Quiz name (file stem inside the quiz directory).")
    parser.add_argument(
        "--quiz-dir",
        type=Path,
        default=Path(DEFAULT_QUIZ_DIRECTORY),
        help="Directory holding the .txt quiz files.",
    )
    parser.add_argument(
        "--minutes",
        type=int,
        default=DEFAULT_DURATION_SECONDS // 60,
        help="Time allowed for one attempt, in minutes.",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args(argv)


def main() -> None:
    """Initialize logging, start the API server, and run the Qt event loop for the clock."""
    args = _parse_args(sys.argv[1:])
    logger = configure_logging()

    library = QuizLibrary(args.quiz_dir)
    available = library.available_quizzes()
    if args.quiz not in available:
        logger.error(
            "Quiz %r not found in %s (available: %s)",
            args.quiz,
            args.quiz_dir,
            ", ".join(available) or "none",
        )
        sys.exit(2)
    if args.minutes <= 0:
        logger.error("--minutes must be a positive number")
        sys.exit(2)

    app = QCoreApplication(sys.argv)
    session = QuizSession(
        source=library,
        session_ref=args.quiz,
        clock=QtClock(),
        duration_seconds=args.minutes * 60,
        sink=ResultLog(),
    )
    logger.info("Starting %s for %r (%d min)", APP_NAME, args.quiz, args.minutes)
    start_api_server(session=session, host=args.host, port=args.port)
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
