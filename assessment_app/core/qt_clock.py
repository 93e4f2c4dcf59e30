"""Wall-clock tick source backed by a Qt timer."""

from __future__ import annotations

from threading import Lock

from PySide6.QtCore import QMetaObject, QThread, QTimer, Qt

from assessment_app.constants.quiz_constants import TICK_INTERVAL_MS
from assessment_app.core.clock import TickCallback


class QtClock:
    """Wall-clock ticks from a ``QTimer``; needs a running Qt event loop.

    ``start``/``stop`` may be called from any thread (e.g. an API handler);
    they are queued onto the thread that owns the timer. The timer runs while
    at least one ``start`` has not been matched by a ``stop``.
    """

    def __init__(self, interval_ms: int = TICK_INTERVAL_MS) -> None:
        self._subscribers: list[TickCallback] = []
        self._lock = Lock()
        self._active_starts = 0
        self._timer = QTimer()
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._emit_tick)

    def subscribe(self, callback: TickCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def start(self) -> None:
        with self._lock:
            self._active_starts += 1
            if self._active_starts == 1:
                self._invoke("start")

    def stop(self) -> None:
        with self._lock:
            if self._active_starts == 0:
                return
            self._active_starts -= 1
            if self._active_starts == 0:
                self._invoke("stop")

    def is_running(self) -> bool:
        return self._timer.isActive()

    def _invoke(self, slot: str) -> None:
        if QThread.currentThread() == self._timer.thread():
            getattr(self._timer, slot)()
        else:
            QMetaObject.invokeMethod(self._timer, slot, Qt.ConnectionType.QueuedConnection)

    def _emit_tick(self) -> None:
        for callback in list(self._subscribers):
            callback()
