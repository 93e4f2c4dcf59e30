"""Utilities for importing quizzes from a human-friendly text file.

File format (repeat blocks separated by blank lines or '---'):

    ID: optional question id (defaults to q1, q2, ... by position)
    TYPE: CHOICE | TRUEFALSE | ORDER | MATCH   (optional, CHOICE by default)
    Q: Question text (supports markdown + LaTeX). Additional lines until the
       next marker are treated as part of the question.

    CHOICE      A:, B:, C:, ... option lines, CORRECT: <letter>
    TRUEFALSE   CORRECT: TRUE | FALSE (A:/B: lines override the labels)
    ORDER       ITEM: lines in display order, CORRECT: comma-separated items
                (so item labels cannot contain commas)
    MATCH       PAIR: left = right lines (the pairs are the answer key)

Example:

    Q: What is $2 + 2$?
    A: 3
    B: 4
    CORRECT: B

    ---

    TYPE: ORDER
    Q: Arrange the planets in order from the Sun.
    ITEM: Mars
    ITEM: Venus
    ITEM: Earth
    ITEM: Mercury
    CORRECT: Mercury, Venus, Earth, Mars

Architecture note:
    Plain text keeps the workflow close to how teachers already write
    quizzes. Parsing stays isolated here so the engine only ever sees
    validated :class:`Question` objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import string

from assessment_app.core.errors import LoadError
from assessment_app.core.models import BOOLEAN_OPTIONS, Question, QuestionKind


class QuizImportError(LoadError):
    """Raised when a quiz definition cannot be parsed."""


@dataclass(slots=True)
class ImportedQuiz:
    """Container for imported quiz metadata and questions."""

    source_path: Path
    questions: list[Question]


_OPTION_LETTERS = [letter for letter in string.ascii_uppercase if letter != "Q"]
_TYPE_NAMES = {
    "CHOICE": QuestionKind.SINGLE_CHOICE,
    "TRUEFALSE": QuestionKind.BOOLEAN,
    "ORDER": QuestionKind.ORDERED_ARRANGEMENT,
    "MATCH": QuestionKind.MATCHING_PAIRS,
}


def load_quiz_from_file(file_path: Path) -> ImportedQuiz:
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuizImportError(f"Could not read quiz file {file_path}: {exc}") from exc
    questions = parse_quiz_text(text)
    if not questions:
        raise QuizImportError("Quiz file did not contain any questions.")
    return ImportedQuiz(source_path=file_path, questions=questions)


def parse_quiz_text(text: str) -> list[Question]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        stripped = raw_line.strip()
        if stripped == "---":
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [
        _parse_block(block, position)
        for position, block in enumerate((b for b in blocks if b), start=1)
    ]


def _parse_block(block: str, position: int) -> Question:
    question_id = f"q{position}"
    kind = QuestionKind.SINGLE_CHOICE
    question_lines: list[str] = []
    options: dict[str, str] = {}
    items: list[str] = []
    pairs: list[tuple[str, str]] = []
    correct: str | None = None
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("ID:"):
            question_id = _value_of(line)
            if not question_id:
                raise QuizImportError("ID must not be empty.")
            current_section = None
            continue

        if upper.startswith("TYPE:"):
            type_name = _value_of(line).upper()
            if type_name not in _TYPE_NAMES:
                raise QuizImportError(
                    f"TYPE must be one of {', '.join(_TYPE_NAMES)}; got '{type_name}'."
                )
            kind = _TYPE_NAMES[type_name]
            current_section = None
            continue

        if upper.startswith("CORRECT:"):
            correct = _value_of(line)
            current_section = None
            continue

        if upper.startswith("ITEM:"):
            items.append(_value_of(line))
            current_section = None
            continue

        if upper.startswith("PAIR:"):
            left, separator, right = _value_of(line).partition("=")
            if not separator or not left.strip() or not right.strip():
                raise QuizImportError(f"PAIR must look like 'left = right': '{line}'.")
            pairs.append((left.strip(), right.strip()))
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in _OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in options:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuizImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuizImportError(f"Question text missing (Q: ...) in question {position}.")
    if not correct and kind is not QuestionKind.MATCHING_PAIRS:
        raise QuizImportError(f"CORRECT is required for question {position}.")
    correct = correct or ""

    if kind is QuestionKind.SINGLE_CHOICE:
        option_list = _ordered_options(options)
        return Question.single_choice(
            question_id, question_text, option_list, _letter_index(correct, option_list)
        )
    if kind is QuestionKind.BOOLEAN:
        option_list = _ordered_options(options) if options else list(BOOLEAN_OPTIONS)
        return Question.boolean(
            question_id, question_text, _boolean_index(correct, option_list), option_list
        )
    if kind is QuestionKind.ORDERED_ARRANGEMENT:
        if not items:
            raise QuizImportError(f"ORDER question {position} needs ITEM: lines.")
        for item in items:
            if "," in item:
                raise QuizImportError(
                    f"ORDER item '{item}' in question {position} cannot contain a comma."
                )
        correct_order = [entry.strip() for entry in correct.split(",") if entry.strip()]
        return Question.ordering(question_id, question_text, items, correct_order)

    if not pairs:
        raise QuizImportError(f"MATCH question {position} needs PAIR: lines.")
    return Question.matching(question_id, question_text, pairs)


def _value_of(line: str) -> str:
    return line.split(":", 1)[1].strip()


def _ordered_options(options: dict[str, str]) -> list[str]:
    letters = _OPTION_LETTERS[: len(options)]
    if sorted(options) != sorted(letters):
        raise QuizImportError(
            f"Options must use consecutive letters starting at A; got {', '.join(sorted(options))}."
        )
    option_list = [options[letter].strip() for letter in letters]
    if len(option_list) < 2:
        raise QuizImportError("Each question must define at least two options.")
    if any(not opt for opt in option_list):
        raise QuizImportError("Option text cannot be empty.")
    return option_list


def _letter_index(letter: str, option_list: list[str]) -> int:
    letter = letter.upper()
    valid = _OPTION_LETTERS[: len(option_list)]
    if letter not in valid:
        raise QuizImportError(f"CORRECT must be one of {', '.join(valid)}.")
    return valid.index(letter)


def _boolean_index(value: str, option_list: list[str]) -> int:
    lowered = value.strip().lower()
    for index, label in enumerate(option_list):
        if label.strip().lower() == lowered:
            return index
    return _letter_index(value, option_list)
