"""Shared fixtures: a hand-cranked scheduler and an isolated data file."""

from __future__ import annotations

import itertools
from datetime import date

import pytest


class _Handle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls advance()."""

    def __init__(self):
        self.now = 0.0
        self._timers = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = _Handle()
        self._timers.append((self.now + delay, next(self._seq), callback, handle))
        return handle

    @property
    def pending(self):
        return sum(1 for *_, handle in self._timers if not handle.cancelled)

    def advance(self, seconds):
        self.now += seconds
        due = sorted(t for t in self._timers if t[0] <= self.now)
        self._timers = [t for t in self._timers if t[0] > self.now]
        for _, _, callback, handle in due:
            if not handle.cancelled:
                callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def today():
    return date(2024, 3, 15)


@pytest.fixture(autouse=True)
def _isolate_stats(tmp_path, monkeypatch):
    """Redirect the data file so tests never touch real stats."""
    stats_dir = tmp_path / "writerstats"
    stats_dir.mkdir()
    stats_file = stats_dir / "data.json"
    monkeypatch.setattr("writerstats.stats.STATS_DIR", stats_dir)
    monkeypatch.setattr("writerstats.stats.STATS_FILE", stats_file)
    for var in (
        "WRITERSTATS_DATA_FILE",
        "WRITERSTATS_SAVE_DELAY",
        "WRITERSTATS_STATUS_DELAY",
        "WRITERSTATS_DASHBOARD_DELAY",
        "WRITERSTATS_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return stats_dir, stats_file
