"""Bounded forward/back/jump navigation over an attempt."""

from __future__ import annotations

from assessment_app.core.services.attempt_state import AttemptState


class Navigator:
    """Moves the current question index, clamping every request into range."""

    def __init__(self, attempt: AttemptState) -> None:
        self._attempt = attempt

    @property
    def current_index(self) -> int:
        return self._attempt.current_index

    def is_first(self) -> bool:
        return self._attempt.current_index == 0

    def is_last(self) -> bool:
        return self._attempt.current_index == self._attempt.question_count - 1

    def go_to(self, index: int) -> int:
        clamped = max(0, min(index, self._attempt.question_count - 1))
        if clamped != self._attempt.current_index:
            self._attempt.set_current_index(clamped)
        return clamped

    def next(self) -> int:
        return self.go_to(self._attempt.current_index + 1)

    def previous(self) -> int:
        return self.go_to(self._attempt.current_index - 1)
