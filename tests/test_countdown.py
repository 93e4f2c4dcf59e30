from __future__ import annotations

import pytest

from assessment_app.core.clock import VirtualClock
from assessment_app.core.errors import InvalidStateError
from assessment_app.core.services.countdown import CountdownTimer, TimerState


def _timer(clock: VirtualClock):
    ticks: list[int] = []
    expiries: list[int] = []
    timer = CountdownTimer(clock, on_tick=ticks.append, on_expire=lambda: expiries.append(1))
    return timer, ticks, expiries


def test_counts_down_and_expires_once():
    clock = VirtualClock()
    timer, ticks, expiries = _timer(clock)
    timer.start(3)
    assert timer.state is TimerState.RUNNING

    clock.advance(10)

    assert ticks == [2, 1, 0]
    assert expiries == [1]
    assert timer.state is TimerState.EXPIRED
    assert timer.expire_count == 1
    assert not clock.is_running()


def test_overlapping_ticks_after_expiry_are_ignored():
    clock = VirtualClock()
    timer, ticks, expiries = _timer(clock)
    timer.start(1)
    clock.emit_tick()
    clock.emit_tick()
    clock.emit_tick()
    assert ticks == [0]
    assert expiries == [1]


def test_cancel_prevents_expiry_even_for_late_ticks():
    clock = VirtualClock()
    timer, ticks, expiries = _timer(clock)
    timer.start(2)
    clock.advance(1)
    timer.cancel()
    clock.emit_tick()
    clock.emit_tick()

    assert timer.state is TimerState.IDLE
    assert ticks == [1]
    assert expiries == []


def test_cancel_only_from_running():
    clock = VirtualClock()
    timer, _, _ = _timer(clock)
    with pytest.raises(InvalidStateError):
        timer.cancel()
    timer.start(1)
    clock.advance(1)
    with pytest.raises(InvalidStateError):
        timer.cancel()


def test_start_requires_idle_and_positive_duration():
    clock = VirtualClock()
    timer, _, _ = _timer(clock)
    with pytest.raises(ValueError):
        timer.start(0)
    timer.start(5)
    with pytest.raises(InvalidStateError):
        timer.start(5)


def test_reset_allows_restart_after_expiry():
    clock = VirtualClock()
    timer, ticks, expiries = _timer(clock)
    timer.start(1)
    clock.advance(1)
    timer.reset()
    timer.start(2)
    clock.advance(5)
    assert ticks == [0, 1, 0]
    assert expiries == [1, 1]


def test_cancel_from_tick_callback_suppresses_expiry():
    clock = VirtualClock()
    expiries: list[int] = []
    timer: CountdownTimer

    def on_tick(remaining: int) -> None:
        if remaining == 0:
            timer.cancel()

    timer = CountdownTimer(clock, on_tick=on_tick, on_expire=lambda: expiries.append(1))
    timer.start(1)
    clock.advance(1)
    assert expiries == []
    assert timer.state is TimerState.IDLE


def test_timers_sharing_a_clock_keep_their_own_countdown():
    clock = VirtualClock()
    first, _, first_expiries = _timer(clock)
    second, second_ticks, second_expiries = _timer(clock)
    first.start(5)
    second.start(3)

    first.cancel()
    assert clock.is_running()
    clock.advance(10)

    assert second_ticks == [2, 1, 0]
    assert second_expiries == [1]
    assert first_expiries == []
    assert not clock.is_running()


def test_virtual_clock_runs_until_every_start_is_stopped():
    clock = VirtualClock()
    clock.start()
    clock.start()
    clock.stop()
    assert clock.is_running()
    clock.stop()
    assert not clock.is_running()
    clock.stop()
    assert not clock.is_running()
