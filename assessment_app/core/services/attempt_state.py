"""Mutable record of one student's in-progress attempt."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Sequence

from assessment_app.core.errors import InvalidStateError, UnknownQuestionError
from assessment_app.core.models import Answer, Question, coerce_answer


class AttemptStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"


@dataclass(frozen=True, slots=True)
class AttemptSnapshot:
    """Read-only copy of an attempt handed to the scorer and to callers."""

    current_index: int
    answers: Mapping[str, Answer]
    review_flags: frozenset[str]
    remaining_seconds: int
    duration_seconds: int
    started_at: datetime
    status: AttemptStatus


class AttemptState:
    """Owns answers, review flags, position and remaining time of one attempt."""

    def __init__(
        self,
        questions: Sequence[Question],
        duration_seconds: int,
        started_at: datetime | None = None,
    ) -> None:
        if not questions:
            raise ValueError("An attempt needs at least one question.")
        if duration_seconds <= 0:
            raise ValueError("Duration must be a positive number of seconds.")
        self._questions: dict[str, Question] = {q.id: q for q in questions}
        self._question_count = len(questions)
        self._duration_seconds = duration_seconds
        self._remaining_seconds = duration_seconds
        self._started_at = started_at or datetime.now(timezone.utc)
        self._current_index: int = 0
        self._answers: dict[str, Answer] = {}
        self._review_flags: set[str] = set()
        self._status = AttemptStatus.IN_PROGRESS

    @property
    def question_count(self) -> int:
        return self._question_count

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def duration_seconds(self) -> int:
        return self._duration_seconds

    @property
    def status(self) -> AttemptStatus:
        return self._status

    def is_in_progress(self) -> bool:
        return self._status is AttemptStatus.IN_PROGRESS

    def record_answer(self, question_id: str, value: object) -> Answer:
        """Store the answer for ``question_id``, replacing any earlier one.

        The value is validated before anything is written, so a rejected
        answer leaves the previous one in place.
        """
        self._require_in_progress()
        question = self._question(question_id)
        answer = coerce_answer(question, value)
        self._answers[question_id] = answer
        return answer

    def clear_answer(self, question_id: str) -> None:
        self._require_in_progress()
        self._question(question_id)
        self._answers.pop(question_id, None)

    def get_answer(self, question_id: str) -> Answer | None:
        return self._answers.get(question_id)

    def has_answer(self, question_id: str) -> bool:
        return question_id in self._answers

    def toggle_review(self, question_id: str) -> bool:
        """Flip the review flag of a question; returns the new flag value."""
        self._require_in_progress()
        self._question(question_id)
        if question_id in self._review_flags:
            self._review_flags.discard(question_id)
            return False
        self._review_flags.add(question_id)
        return True

    def is_marked_for_review(self, question_id: str) -> bool:
        return question_id in self._review_flags

    def set_current_index(self, index: int) -> None:
        self._require_in_progress()
        if not 0 <= index < self._question_count:
            raise IndexError(f"Question index {index} out of range")
        self._current_index = index

    def update_remaining(self, remaining_seconds: int) -> None:
        self._require_in_progress()
        if remaining_seconds > self._remaining_seconds:
            raise InvalidStateError("Remaining time cannot increase during an attempt.")
        self._remaining_seconds = max(0, remaining_seconds)

    def freeze(self) -> AttemptSnapshot:
        """Mark the attempt submitted; every mutator is rejected afterwards."""
        self._require_in_progress()
        self._status = AttemptStatus.SUBMITTED
        return self.snapshot()

    def snapshot(self) -> AttemptSnapshot:
        return AttemptSnapshot(
            current_index=self._current_index,
            answers=MappingProxyType(dict(self._answers)),
            review_flags=frozenset(self._review_flags),
            remaining_seconds=self._remaining_seconds,
            duration_seconds=self._duration_seconds,
            started_at=self._started_at,
            status=self._status,
        )

    def _question(self, question_id: str) -> Question:
        question = self._questions.get(question_id)
        if question is None:
            raise UnknownQuestionError(question_id)
        return question

    def _require_in_progress(self) -> None:
        if self._status is not AttemptStatus.IN_PROGRESS:
            raise InvalidStateError("The attempt has already been submitted.")
