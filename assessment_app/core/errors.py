"""Exception types raised by the assessment engine."""

from __future__ import annotations


class AssessmentError(Exception):
    """Base class for every error the engine reports to its caller."""


class LoadError(AssessmentError):
    """Raised when a question set is empty, malformed, or cannot be fetched."""


class InvalidStateError(AssessmentError):
    """Raised when an operation does not fit the current session or timer state."""


class AnswerShapeError(AssessmentError):
    """Raised when an answer value does not match the kind of its question."""


class UnknownQuestionError(AssessmentError, LookupError):
    """Raised when a question id is not part of the loaded question set."""

    def __init__(self, question_id: str) -> None:
        super().__init__(f"Unknown question id: {question_id!r}")
        self.question_id = question_id
