"""The live tracking context: edits in, debounced saves and refreshes out."""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Iterable

from writerstats.aggregate import status_line
from writerstats.classifier import EditTransaction, WordDelta, classify_transactions
from writerstats.config import AppConfig
from writerstats.dashboard import render_dashboard
from writerstats.dates import today_key
from writerstats.folders import is_allowed
from writerstats.scheduler import Debouncer, Scheduler, TimerScheduler
from writerstats.stats import StatsRecord

logger = logging.getLogger(__name__)


class WriterStats:
    """Owns the stats record for one session.

    Edits update the in-memory store immediately; saving and the two display
    refreshes each run on their own debounce. All access goes through one lock
    because the keyboard listener and the timers call in from separate threads.
    """

    def __init__(
        self,
        record: StatsRecord | None = None,
        config: AppConfig | None = None,
        scheduler: Scheduler | None = None,
        clock: Callable[[], date] = date.today,
        on_status: Callable[[str], None] | None = None,
        on_dashboard: Callable[[str], None] | None = None,
    ):
        self.record = record or StatsRecord()
        self.config = config or AppConfig()
        self.clock = clock
        self.on_status = on_status
        self.on_dashboard = on_dashboard
        self._lock = threading.RLock()
        # Held from snapshot to write so an older snapshot never lands last
        self._save_lock = threading.Lock()

        scheduler = scheduler or TimerScheduler()
        delays = self.config.debounce
        self._save_debounce = Debouncer(self.save, delays.save_s, scheduler, name="save")
        self._status_debounce = Debouncer(self.refresh_status, delays.status_s, scheduler, name="status")
        self._dashboard_debounce = Debouncer(
            self.refresh_dashboard, delays.dashboard_s, scheduler, name="dashboard"
        )

    @classmethod
    def load(cls, config: AppConfig | None = None, **kwargs) -> WriterStats:
        config = config or AppConfig()
        return cls(record=StatsRecord.load(config.data_file), config=config, **kwargs)

    @property
    def store(self):
        return self.record.store

    @property
    def settings(self):
        return self.record.settings

    def handle_update(self, path: str | None, transactions: Iterable[EditTransaction]) -> WordDelta:
        """Count the words in one batch of edits to the document at *path*.

        Returns what was added to today's counters (zeros if nothing was).
        """
        if path is None:
            return WordDelta()
        with self._lock:
            if not is_allowed(path, self.settings):
                logger.debug("Ignoring edits to %s (folder filter)", path)
                return WordDelta()
            delta = classify_transactions(transactions)
            if not delta:
                return delta
            self.store.increment(today_key(self.clock()), delta.typed, delta.pasted)

        self._save_debounce.trigger()
        self._status_debounce.trigger()
        self._dashboard_debounce.trigger()
        return delta

    def update_setting(self, key: str, value: str) -> None:
        """Apply one validated setting, then save and refresh right away.

        Invalid input raises (KeyError/ValueError) and changes nothing.
        """
        with self._lock:
            self.settings.apply(key, value)
        logger.info("Setting %s updated", key)
        self.save()
        self.refresh_status()
        self.refresh_dashboard()

    def status_text(self) -> str:
        with self._lock:
            return status_line(self.store, self.settings, self.clock())

    def dashboard_text(self) -> str:
        with self._lock:
            return render_dashboard(self.store, self.settings, self.clock())

    def refresh_status(self) -> None:
        if self.on_status is not None:
            self.on_status(self.status_text())

    def refresh_dashboard(self) -> None:
        if self.on_dashboard is not None:
            self.on_dashboard(self.dashboard_text())

    def save(self) -> None:
        with self._save_lock:
            with self._lock:
                snapshot = StatsRecord.from_dict(self.record.to_dict())
            snapshot.save(self.config.data_file)

    def shutdown(self) -> None:
        """Drop pending debounces and write everything out."""
        for debounce in (self._save_debounce, self._status_debounce, self._dashboard_debounce):
            debounce.cancel()
        self.save()
        logger.info("Stats saved on shutdown")
