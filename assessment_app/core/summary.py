"""Read-only views of a session for the quiz screen and the results screen."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

from assessment_app.constants.quiz_constants import PERFORMANCE_TIERS
from assessment_app.core.models import Answer, Question
from assessment_app.core.scorer import Result, percent_round_half_up


class QuestionStatus(str, Enum):
    ANSWERED = "answered"
    MARKED = "marked"
    UNANSWERED = "unanswered"


@dataclass(frozen=True, slots=True)
class SessionView:
    """Snapshot of everything the quiz screen shows."""

    state: str
    session_ref: str
    current_index: int
    question_count: int
    current_question_id: str | None
    remaining_seconds: int
    countdown_text: str
    progress_percent: int
    answered_ids: tuple[str, ...]
    review_ids: tuple[str, ...]
    palette: tuple[tuple[str, QuestionStatus], ...]


def format_countdown(seconds: int) -> str:
    """Format seconds as ``mm:ss``; minutes are not wrapped at an hour."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def progress_percent(current_index: int, question_count: int) -> int:
    if question_count <= 0:
        return 0
    return percent_round_half_up(current_index + 1, question_count)


def performance_message(score_percent: int) -> str:
    for minimum, message in PERFORMANCE_TIERS:
        if score_percent >= minimum:
            return message
    return PERFORMANCE_TIERS[-1][1]


def question_palette(
    questions: Sequence[Question],
    answers: Mapping[str, Answer],
    review_flags: frozenset[str],
) -> tuple[tuple[str, QuestionStatus], ...]:
    """Status per question in navigation order; a review mark wins over an answer."""
    palette: list[tuple[str, QuestionStatus]] = []
    for question in questions:
        if question.id in review_flags:
            status = QuestionStatus.MARKED
        elif question.id in answers:
            status = QuestionStatus.ANSWERED
        else:
            status = QuestionStatus.UNANSWERED
        palette.append((question.id, status))
    return tuple(palette)


def submission_payload(
    session_ref: str, result: Result, answers: Mapping[str, Answer]
) -> dict[str, object]:
    """JSON-ready body describing a finished attempt, keyed like the web client's."""
    return {
        "quizId": session_ref,
        "answers": [
            {"questionId": question_id, "answer": answer.to_payload()}
            for question_id, answer in answers.items()
        ],
        "totalTimeTaken": result.time_spent_seconds,
        "totalQuestions": result.total_questions,
        "correctAnswers": result.correct_count,
        "percentage": result.score_percent,
        "autoSubmitted": result.auto_submitted,
    }
