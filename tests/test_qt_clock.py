from __future__ import annotations

import pytest

from PySide6.QtCore import QCoreApplication, QTimer

from assessment_app.core.qt_clock import QtClock
from assessment_app.core.services.countdown import CountdownTimer, TimerState


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def test_qt_clock_drives_a_countdown_to_expiry(qt_app):
    clock = QtClock(interval_ms=5)
    expired: list[int] = []
    timer = CountdownTimer(clock, on_expire=lambda: expired.append(1))

    timer.start(3)
    QTimer.singleShot(2000, qt_app.quit)

    def quit_when_expired() -> None:
        if expired:
            qt_app.quit()

    poll = QTimer()
    poll.setInterval(5)
    poll.timeout.connect(quit_when_expired)
    poll.start()
    qt_app.exec()
    poll.stop()

    assert expired == [1]
    assert timer.state is TimerState.EXPIRED
    assert not clock.is_running()


def test_qt_clock_keeps_running_while_any_start_is_held(qt_app):
    clock = QtClock(interval_ms=5)
    clock.start()
    clock.start()

    clock.stop()
    assert clock.is_running()

    clock.stop()
    assert not clock.is_running()
