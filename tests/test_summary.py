from __future__ import annotations

from assessment_app.core.models import OptionAnswer
from assessment_app.core.scorer import score
from assessment_app.core.services.attempt_state import AttemptState
from assessment_app.core.summary import (
    QuestionStatus,
    format_countdown,
    performance_message,
    progress_percent,
    question_palette,
    submission_payload,
)


def test_format_countdown():
    assert format_countdown(1800) == "30:00"
    assert format_countdown(65) == "01:05"
    assert format_countdown(0) == "00:00"
    assert format_countdown(-3) == "00:00"


def test_progress_percent_counts_the_current_question():
    assert progress_percent(0, 4) == 25
    assert progress_percent(3, 4) == 100
    assert progress_percent(0, 0) == 0


def test_performance_message_tiers():
    assert performance_message(95).startswith("Excellent")
    assert performance_message(80).startswith("Great job")
    assert performance_message(70).startswith("Good work")
    assert performance_message(10).startswith("Keep studying")


def test_palette_prefers_review_mark(questions):
    palette = question_palette(
        questions,
        {"q1": OptionAnswer(1), "q2": OptionAnswer(0)},
        frozenset({"q2", "q3"}),
    )
    assert palette == (
        ("q1", QuestionStatus.ANSWERED),
        ("q2", QuestionStatus.MARKED),
        ("q3", QuestionStatus.MARKED),
        ("q4", QuestionStatus.UNANSWERED),
    )


def test_submission_payload_shape(questions):
    attempt = AttemptState(questions, 30)
    attempt.record_answer("q3", ["C", "B", "A"])
    attempt.record_answer("q4", {"X": "1"})
    snapshot = attempt.freeze()
    result = score(snapshot, questions)

    payload = submission_payload("physics-101", result, snapshot.answers)

    assert payload["quizId"] == "physics-101"
    assert payload["answers"] == [
        {"questionId": "q3", "answer": ["C", "B", "A"]},
        {"questionId": "q4", "answer": {"X": "1"}},
    ]
    assert payload["totalTimeTaken"] == 0
    assert payload["correctAnswers"] == 1
    assert payload["percentage"] == 25
