"""Countdown timer that signals expiry exactly once."""

from __future__ import annotations

from enum import Enum
from threading import RLock
from typing import Callable

from assessment_app.core.clock import Clock
from assessment_app.core.errors import InvalidStateError


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"


class CountdownTimer:
    """Counts whole seconds down from a duration using ticks from a clock.

    ``on_tick`` receives the remaining seconds after every decrement and
    ``on_expire`` fires once when zero is reached. Ticks that arrive while the
    timer is idle or expired are dropped, which covers late or duplicated
    ticks after a cancel or an expiry. Pass the owner's lock as ``lock`` so
    ticks and the owner's own operations are handled one at a time.
    """

    def __init__(
        self,
        clock: Clock,
        on_tick: Callable[[int], None] | None = None,
        on_expire: Callable[[], None] | None = None,
        lock: RLock | None = None,
    ) -> None:
        self._clock = clock
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._lock = lock if lock is not None else RLock()
        self._state = TimerState.IDLE
        self._remaining_seconds = 0
        self._expire_count = 0
        self._clock.subscribe(self._handle_tick)

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def expire_count(self) -> int:
        return self._expire_count

    def start(self, duration_seconds: int) -> None:
        with self._lock:
            if self._state is not TimerState.IDLE:
                raise InvalidStateError(f"Timer cannot start while {self._state.value}.")
            if duration_seconds <= 0:
                raise ValueError("Duration must be a positive number of seconds.")
            self._remaining_seconds = duration_seconds
            self._state = TimerState.RUNNING
            self._clock.start()

    def cancel(self) -> None:
        with self._lock:
            if self._state is not TimerState.RUNNING:
                raise InvalidStateError(f"Timer cannot be cancelled while {self._state.value}.")
            self._state = TimerState.IDLE
            self._clock.stop()

    def reset(self) -> None:
        """Return to idle from any state without firing ``on_expire``."""
        with self._lock:
            if self._state is TimerState.RUNNING:
                self._clock.stop()
            self._state = TimerState.IDLE
            self._remaining_seconds = 0

    def _handle_tick(self) -> None:
        with self._lock:
            if self._state is not TimerState.RUNNING:
                return
            self._remaining_seconds -= 1
            if self._on_tick is not None:
                self._on_tick(self._remaining_seconds)
            # on_tick may have cancelled the timer.
            if self._state is not TimerState.RUNNING or self._remaining_seconds > 0:
                return
            self._state = TimerState.EXPIRED
            self._clock.stop()
            self._expire_count += 1
            if self._on_expire is not None:
                self._on_expire()
