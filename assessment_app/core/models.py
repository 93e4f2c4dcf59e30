"""Domain models for the assessment engine."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from assessment_app.core.errors import AnswerShapeError

BOOLEAN_OPTIONS: tuple[str, str] = ("True", "False")


class QuestionKind(str, Enum):
    """Answer-shape category of a question."""

    SINGLE_CHOICE = "single-choice"
    BOOLEAN = "boolean"
    ORDERED_ARRANGEMENT = "ordered-arrangement"
    MATCHING_PAIRS = "matching-pairs"


@dataclass(frozen=True, slots=True)
class Question:
    """A single question together with the shape of its accepted answer.

    Only the payload fields of the question's kind are populated:
    ``options``/``correct_option_index`` for single-choice and boolean,
    ``items``/``correct_order`` for ordered-arrangement and ``pairs`` for
    matching-pairs.
    """

    id: str
    kind: QuestionKind
    prompt: str
    options: tuple[str, ...] = ()
    correct_option_index: int | None = None
    items: tuple[str, ...] = ()
    correct_order: tuple[str, ...] = ()
    pairs: tuple[tuple[str, str], ...] = ()

    @classmethod
    def single_choice(
        cls, question_id: str, prompt: str, options: Sequence[str], correct_option_index: int
    ) -> "Question":
        return cls(
            id=question_id,
            kind=QuestionKind.SINGLE_CHOICE,
            prompt=prompt,
            options=tuple(options),
            correct_option_index=correct_option_index,
        )

    @classmethod
    def boolean(
        cls,
        question_id: str,
        prompt: str,
        correct_option_index: int,
        options: Sequence[str] = BOOLEAN_OPTIONS,
    ) -> "Question":
        return cls(
            id=question_id,
            kind=QuestionKind.BOOLEAN,
            prompt=prompt,
            options=tuple(options),
            correct_option_index=correct_option_index,
        )

    @classmethod
    def ordering(
        cls, question_id: str, prompt: str, items: Sequence[str], correct_order: Sequence[str]
    ) -> "Question":
        return cls(
            id=question_id,
            kind=QuestionKind.ORDERED_ARRANGEMENT,
            prompt=prompt,
            items=tuple(items),
            correct_order=tuple(correct_order),
        )

    @classmethod
    def matching(
        cls, question_id: str, prompt: str, pairs: Sequence[tuple[str, str]]
    ) -> "Question":
        return cls(
            id=question_id,
            kind=QuestionKind.MATCHING_PAIRS,
            prompt=prompt,
            pairs=tuple((left, right) for left, right in pairs),
        )

    @property
    def left_labels(self) -> tuple[str, ...]:
        return tuple(left for left, _ in self.pairs)

    @property
    def right_labels(self) -> tuple[str, ...]:
        return tuple(right for _, right in self.pairs)

    @property
    def correct_mapping(self) -> dict[str, str]:
        return dict(self.pairs)


@dataclass(frozen=True, slots=True)
class OptionAnswer:
    """Selected option index for single-choice and boolean questions."""

    option_index: int

    def to_payload(self) -> int:
        return self.option_index


@dataclass(frozen=True, slots=True)
class OrderingAnswer:
    """Submitted arrangement of item labels, first slot first."""

    order: tuple[str, ...]

    def to_payload(self) -> list[str]:
        return list(self.order)


@dataclass(frozen=True, slots=True)
class MatchingAnswer:
    """Submitted left-to-right assignments; may cover only part of the pairs."""

    assignments: tuple[tuple[str, str], ...]

    def as_dict(self) -> dict[str, str]:
        return dict(self.assignments)

    def to_payload(self) -> dict[str, str]:
        return self.as_dict()


Answer = OptionAnswer | OrderingAnswer | MatchingAnswer

_ANSWER_TYPES: dict[QuestionKind, type] = {
    QuestionKind.SINGLE_CHOICE: OptionAnswer,
    QuestionKind.BOOLEAN: OptionAnswer,
    QuestionKind.ORDERED_ARRANGEMENT: OrderingAnswer,
    QuestionKind.MATCHING_PAIRS: MatchingAnswer,
}


def coerce_answer(question: Question, value: object) -> Answer:
    """Convert ``value`` into the answer variant of ``question.kind``.

    Typed answers are checked as-is; raw values (``int``, ``bool``, a
    sequence of labels or a mapping of labels) are converted first. Raises
    :class:`AnswerShapeError` when the value cannot belong to the question.
    """
    expected = _ANSWER_TYPES[question.kind]
    if isinstance(value, (OptionAnswer, OrderingAnswer, MatchingAnswer)):
        if not isinstance(value, expected):
            raise AnswerShapeError(
                f"Question {question.id!r} ({question.kind.value}) cannot take a {type(value).__name__}."
            )
        if isinstance(value, MatchingAnswer):
            lefts = [left for left, _ in value.assignments]
            if len(set(lefts)) != len(lefts):
                raise AnswerShapeError(
                    f"Each left label may be assigned once in question {question.id!r}."
                )
        raw: object = value.to_payload()
    else:
        raw = value

    if question.kind is QuestionKind.SINGLE_CHOICE:
        return OptionAnswer(_option_index(question, raw))
    if question.kind is QuestionKind.BOOLEAN:
        if isinstance(raw, bool):
            return OptionAnswer(_boolean_index(question, raw))
        return OptionAnswer(_option_index(question, raw))
    if question.kind is QuestionKind.ORDERED_ARRANGEMENT:
        return OrderingAnswer(_ordering(question, raw))
    return MatchingAnswer(_assignments(question, raw))


def _option_index(question: Question, raw: object) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise AnswerShapeError(f"Question {question.id!r} expects an option index.")
    if not 0 <= raw < len(question.options):
        raise AnswerShapeError(
            f"Option index {raw} is out of range for question {question.id!r}."
        )
    return raw


def _boolean_index(question: Question, raw: bool) -> int:
    wanted = "true" if raw else "false"
    for index, label in enumerate(question.options):
        if label.strip().lower() == wanted:
            return index
    return 0 if raw else 1


def _ordering(question: Question, raw: object) -> tuple[str, ...]:
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise AnswerShapeError(f"Question {question.id!r} expects a list of item labels.")
    order = tuple(raw)
    if len(order) > len(question.items):
        raise AnswerShapeError(f"Too many items submitted for question {question.id!r}.")
    known = set(question.items)
    for item in order:
        if not isinstance(item, str) or item not in known:
            raise AnswerShapeError(f"Unknown item {item!r} for question {question.id!r}.")
    if len(set(order)) != len(order):
        raise AnswerShapeError(f"Each item may be placed once in question {question.id!r}.")
    return order


def _assignments(question: Question, raw: object) -> tuple[tuple[str, str], ...]:
    if not isinstance(raw, Mapping):
        raise AnswerShapeError(f"Question {question.id!r} expects a left-to-right mapping.")
    lefts = set(question.left_labels)
    rights = set(question.right_labels)
    assignments: list[tuple[str, str]] = []
    for left, right in raw.items():
        if left not in lefts:
            raise AnswerShapeError(f"Unknown left label {left!r} for question {question.id!r}.")
        if right not in rights:
            raise AnswerShapeError(f"Unknown right label {right!r} for question {question.id!r}.")
        assignments.append((left, right))
    used = [right for _, right in assignments]
    if len(set(used)) != len(used):
        raise AnswerShapeError(f"Each right label may be used once in question {question.id!r}.")
    return tuple(assignments)
