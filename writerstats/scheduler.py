"""Timer scheduling and trailing-edge debouncing."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class TimerScheduler:
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer:
    """Coalesce bursts of triggers into one call after a quiet period.

    Every ``trigger()`` restarts the quiet period, so the callback runs once,
    ``wait`` seconds after the last trigger of a burst.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        wait: float,
        scheduler: Scheduler,
        name: str = "",
    ):
        self.callback = callback
        self.wait = wait
        self.scheduler = scheduler
        self.name = name or getattr(callback, "__name__", "debounced")
        self._lock = threading.Lock()
        self._handle: Cancellable | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self.scheduler.call_later(self.wait, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            self._generation += 1

    def flush(self) -> None:
        """Run a pending call now instead of waiting out the quiet period."""
        with self._lock:
            if self._handle is None:
                return
            self._handle.cancel()
            self._handle = None
            self._generation += 1
        self._run()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that lost a race with trigger()/cancel() is stale
            if generation != self._generation:
                return
            self._handle = None
        self._run()

    def _run(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("Debounced %s failed", self.name)
