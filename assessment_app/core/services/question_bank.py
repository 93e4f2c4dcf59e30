"""Question sources and the validation applied when a question set is loaded."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from assessment_app.core.errors import LoadError
from assessment_app.core.models import Question, QuestionKind
from assessment_app.core.quiz_importer import load_quiz_from_file


class QuestionSource(Protocol):
    def load_questions(self, session_ref: str) -> Sequence[Question]: ...


class StaticQuestionSource:
    """Serves the same in-memory question list for every session reference."""

    def __init__(self, questions: Sequence[Question]) -> None:
        self._questions: list[Question] = list(questions)

    def load_questions(self, session_ref: str) -> list[Question]:
        return list(self._questions)


class QuizLibrary:
    """Directory of plain-text quiz files; a session reference is a file stem."""

    def __init__(self, directory: Path, suffix: str = ".txt") -> None:
        self._directory = Path(directory)
        self._suffix = suffix

    def available_quizzes(self) -> list[str]:
        if not self._directory.is_dir():
            return []
        return sorted(path.stem for path in self._directory.glob(f"*{self._suffix}"))

    def load_questions(self, session_ref: str) -> list[Question]:
        file_path = self._directory / f"{session_ref}{self._suffix}"
        if not file_path.is_file():
            raise LoadError(f"No quiz named {session_ref!r} in {self._directory}.")
        return load_quiz_from_file(file_path).questions


def load_questions(source: QuestionSource, session_ref: str) -> tuple[Question, ...]:
    """Fetch and validate the ordered question set for ``session_ref``."""
    try:
        fetched = list(source.load_questions(session_ref))
    except LoadError:
        raise
    except Exception as exc:
        raise LoadError(f"Question source failed for {session_ref!r}: {exc}") from exc

    if not fetched:
        raise LoadError("Quiz must contain at least one question.")

    seen_ids: set[str] = set()
    questions: list[Question] = []
    for question in fetched:
        if not isinstance(question, Question):
            raise LoadError(f"Question source returned {type(question).__name__}, not a Question.")
        validate_question(question)
        if question.id in seen_ids:
            raise LoadError(f"Duplicate question id {question.id!r}.")
        seen_ids.add(question.id)
        questions.append(question)
    return tuple(questions)


def validate_question(question: Question) -> None:
    """Check the kind-specific invariants of a single question."""
    if not str(question.id).strip():
        raise LoadError("Question id must not be empty.")
    if not question.prompt.strip():
        raise LoadError(f"Question {question.id!r} has no prompt text.")

    if question.kind in (QuestionKind.SINGLE_CHOICE, QuestionKind.BOOLEAN):
        _validate_options(question)
    elif question.kind is QuestionKind.ORDERED_ARRANGEMENT:
        _validate_ordering(question)
    elif question.kind is QuestionKind.MATCHING_PAIRS:
        _validate_pairs(question)
    else:  # pragma: no cover - enum is closed
        raise LoadError(f"Unsupported question kind {question.kind!r}.")


def _validate_options(question: Question) -> None:
    if question.kind is QuestionKind.BOOLEAN and len(question.options) != 2:
        raise LoadError(f"Boolean question {question.id!r} must have exactly two options.")
    if len(question.options) < 2:
        raise LoadError(f"Question {question.id!r} needs at least two options.")
    if any(not option.strip() for option in question.options):
        raise LoadError(f"Option text cannot be empty in question {question.id!r}.")
    index = question.correct_option_index
    if index is None or isinstance(index, bool) or not 0 <= index < len(question.options):
        raise LoadError(f"Correct option index of question {question.id!r} is out of range.")


def _validate_ordering(question: Question) -> None:
    if not question.items:
        raise LoadError(f"Question {question.id!r} has no items to arrange.")
    if len(set(question.items)) != len(question.items):
        raise LoadError(f"Item labels must be unique in question {question.id!r}.")
    if sorted(question.correct_order) != sorted(question.items):
        raise LoadError(
            f"Correct order of question {question.id!r} is not a permutation of its items."
        )


def _validate_pairs(question: Question) -> None:
    if not question.pairs:
        raise LoadError(f"Question {question.id!r} has no pairs to match.")
    lefts = question.left_labels
    rights = question.right_labels
    if len(set(lefts)) != len(lefts) or len(set(rights)) != len(rights):
        raise LoadError(f"Pairs of question {question.id!r} must form a one-to-one mapping.")
