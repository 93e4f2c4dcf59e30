from __future__ import annotations

import pytest

from assessment_app.core.clock import VirtualClock
from assessment_app.core.models import Question
from assessment_app.core.quiz_session import QuizSession
from assessment_app.core.services.question_bank import StaticQuestionSource
from assessment_app.core.services.result_log import ResultLog


def build_questions() -> list[Question]:
    return [
        Question.single_choice("q1", "Newton's first law?", ["F = ma", "Inertia", "Action/reaction"], 1),
        Question.boolean("q2", "The Earth revolves around the Sun.", 0),
        Question.ordering("q3", "Reverse the letters.", ["A", "B", "C"], ["C", "B", "A"]),
        Question.matching("q4", "Match the labels.", [("X", "1"), ("Y", "2")]),
    ]


@pytest.fixture
def questions() -> list[Question]:
    return build_questions()


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def result_log() -> ResultLog:
    return ResultLog()


@pytest.fixture
def make_session(questions, clock, result_log):
    def factory(duration_seconds: int = 30, sink=result_log, source=None) -> QuizSession:
        return QuizSession(
            source=source or StaticQuestionSource(questions),
            session_ref="physics-101",
            clock=clock,
            duration_seconds=duration_seconds,
            sink=sink,
        )

    return factory
