"""Tick sources that drive the countdown, one tick per interval."""

from __future__ import annotations

from typing import Callable, Protocol


TickCallback = Callable[[], None]


class Clock(Protocol):
    """Shared tick source.

    ``start``/``stop`` are counted: every ``start`` must be balanced by one
    ``stop``, and the clock keeps ticking while any caller still holds a start.
    """

    def subscribe(self, callback: TickCallback) -> None: ...

    def start(self) -> None: ...

    def stop(self) -> None: ...


class VirtualClock:
    """Clock advanced by hand, for deterministic tests and simulations."""

    def __init__(self) -> None:
        self._subscribers: list[TickCallback] = []
        self._active_starts = 0

    def subscribe(self, callback: TickCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def start(self) -> None:
        self._active_starts += 1

    def stop(self) -> None:
        if self._active_starts > 0:
            self._active_starts -= 1

    def is_running(self) -> bool:
        return self._active_starts > 0

    def advance(self, ticks: int = 1) -> int:
        """Emit up to ``ticks`` ticks, stopping early once the clock is stopped."""
        emitted = 0
        for _ in range(ticks):
            if not self.is_running():
                break
            self.emit_tick()
            emitted += 1
        return emitted

    def emit_tick(self) -> None:
        """Deliver one tick even if stopped, like a tick already queued before ``stop()``."""
        for callback in list(self._subscribers):
            callback()
