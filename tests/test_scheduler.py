"""Tests for writerstats.scheduler: debounced callbacks."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock

from writerstats.scheduler import Debouncer, TimerScheduler


class TestDebouncer:
    def test_waits_for_quiet_period(self, scheduler):
        callback = MagicMock()
        d = Debouncer(callback, 2.0, scheduler)
        d.trigger()
        scheduler.advance(1.0)
        callback.assert_not_called()
        scheduler.advance(1.0)
        callback.assert_called_once()

    def test_burst_coalesces(self, scheduler):
        callback = MagicMock()
        d = Debouncer(callback, 2.0, scheduler)
        for _ in range(10):
            d.trigger()
            scheduler.advance(0.5)
        callback.assert_not_called()
        scheduler.advance(2.0)
        callback.assert_called_once()

    def test_fires_again_after_next_burst(self, scheduler):
        callback = MagicMock()
        d = Debouncer(callback, 1.0, scheduler)
        d.trigger()
        scheduler.advance(1.0)
        d.trigger()
        scheduler.advance(1.0)
        assert callback.call_count == 2

    def test_pending(self, scheduler):
        d = Debouncer(MagicMock(), 1.0, scheduler)
        assert not d.pending
        d.trigger()
        assert d.pending
        scheduler.advance(1.0)
        assert not d.pending

    def test_cancel(self, scheduler):
        callback = MagicMock()
        d = Debouncer(callback, 1.0, scheduler)
        d.trigger()
        d.cancel()
        scheduler.advance(5.0)
        callback.assert_not_called()
        assert not d.pending

    def test_flush_runs_now(self, scheduler):
        callback = MagicMock()
        d = Debouncer(callback, 1.0, scheduler)
        d.trigger()
        d.flush()
        callback.assert_called_once()
        scheduler.advance(5.0)
        callback.assert_called_once()  # the timer no longer fires

    def test_flush_without_pending_is_noop(self, scheduler):
        callback = MagicMock()
        Debouncer(callback, 1.0, scheduler).flush()
        callback.assert_not_called()

    def test_stale_timer_ignored(self, scheduler):
        """A timer that fires after being superseded does nothing."""
        callback = MagicMock()
        captured = []

        class LeakyScheduler:
            def call_later(self, delay, cb):
                captured.append(cb)
                return MagicMock()

        d = Debouncer(callback, 1.0, LeakyScheduler())
        d.trigger()
        d.trigger()
        captured[0]()
        callback.assert_not_called()
        captured[1]()
        callback.assert_called_once()

    def test_callback_error_is_logged(self, scheduler, caplog):
        d = Debouncer(MagicMock(side_effect=RuntimeError("boom")), 1.0, scheduler, name="save")
        d.trigger()
        scheduler.advance(1.0)
        assert "Debounced save failed" in caplog.text


class TestTimerScheduler:
    def test_runs_callback(self):
        done = threading.Event()
        TimerScheduler().call_later(0.01, done.set)
        assert done.wait(2.0)

    def test_cancel(self):
        done = threading.Event()
        timer = TimerScheduler().call_later(0.2, done.set)
        timer.cancel()
        assert not done.wait(0.4)

    def test_timers_are_daemons(self):
        timer = TimerScheduler().call_later(10.0, lambda: None)
        try:
            assert timer.daemon
        finally:
            timer.cancel()
