"""Deterministic scoring of a submitted attempt."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Sequence

from assessment_app.core.models import (
    Answer,
    MatchingAnswer,
    OptionAnswer,
    OrderingAnswer,
    Question,
    QuestionKind,
)
from assessment_app.core.services.attempt_state import AttemptSnapshot


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one attempt; ``correct`` follows question order."""

    total_questions: int
    correct_count: int
    score_percent: int
    time_spent_seconds: int
    correct: Mapping[str, bool]
    answered_count: int
    auto_submitted: bool = False

    @property
    def incorrect_count(self) -> int:
        return self.total_questions - self.correct_count


def score(
    attempt: AttemptSnapshot, questions: Sequence[Question], auto_submitted: bool = False
) -> Result:
    """Score every question all-or-nothing; unanswered questions are incorrect."""
    correct: dict[str, bool] = {}
    for question in questions:
        answer = attempt.answers.get(question.id)
        correct[question.id] = answer is not None and is_correct(question, answer)

    total = len(questions)
    correct_count = sum(1 for value in correct.values() if value)
    return Result(
        total_questions=total,
        correct_count=correct_count,
        score_percent=percent_round_half_up(correct_count, total),
        time_spent_seconds=attempt.duration_seconds - attempt.remaining_seconds,
        correct=MappingProxyType(correct),
        answered_count=sum(1 for q in questions if q.id in attempt.answers),
        auto_submitted=auto_submitted,
    )


def is_correct(question: Question, answer: Answer) -> bool:
    if question.kind in (QuestionKind.SINGLE_CHOICE, QuestionKind.BOOLEAN):
        return isinstance(answer, OptionAnswer) and answer.option_index == question.correct_option_index
    if question.kind is QuestionKind.ORDERED_ARRANGEMENT:
        return isinstance(answer, OrderingAnswer) and answer.order == question.correct_order
    if question.kind is QuestionKind.MATCHING_PAIRS:
        return isinstance(answer, MatchingAnswer) and answer.as_dict() == question.correct_mapping
    return False


def percent_round_half_up(part: int, total: int) -> int:
    """``part / total * 100`` rounded half up, computed in integers."""
    if total <= 0:
        return 0
    return (200 * part + total) // (2 * total)
