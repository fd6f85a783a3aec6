"""Per-day word statistics and their on-disk record.

Everything lives in one JSON file (``~/.writerstats/data.json`` by default):

    {"days": {"2024-03-05": {"typed": 120, "pasted": 40}},
     "settings": {"includeFolders": "", "excludeFolders": "",
                  "countPastes": true, "dailyGoal": 500}}
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from writerstats.dates import parse_key
from writerstats.settings import Settings

logger = logging.getLogger(__name__)

STATS_DIR = Path.home() / ".writerstats"
STATS_FILE = STATS_DIR / "data.json"


def _counter(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0


@dataclass
class DayCounters:
    """Words written on one day."""

    typed: int = 0
    pasted: int = 0


@dataclass
class StatsStore:
    days: dict[str, DayCounters] = field(default_factory=dict)

    def increment(self, day: str, typed: int = 0, pasted: int = 0) -> DayCounters:
        """Add words to *day*, creating its bucket on first use."""
        if typed < 0 or pasted < 0:
            raise ValueError(f"Counters only grow, got typed={typed} pasted={pasted}")
        counters = self.days.get(day)
        if counters is None:
            counters = self.days[day] = DayCounters()
        counters.typed += typed
        counters.pasted += pasted
        return counters

    def get(self, day: str) -> DayCounters:
        """Counters for *day*; a day with no activity reads as zeros."""
        counters = self.days.get(day)
        if counters is None:
            return DayCounters()
        return DayCounters(typed=counters.typed, pasted=counters.pasted)

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {day: asdict(counters) for day, counters in self.days.items()}

    @classmethod
    def from_dict(cls, data: Any) -> StatsStore:
        store = cls()
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Ignoring malformed days section: %r", type(data).__name__)
            return store
        for day, counters in data.items():
            if parse_key(day) is None:
                logger.warning("Skipping invalid day key %r", day)
                continue
            if not isinstance(counters, dict):
                counters = {}
            store.days[day] = DayCounters(
                typed=_counter(counters.get("typed")),
                pasted=_counter(counters.get("pasted")),
            )
        return store


@dataclass
class StatsRecord:
    """The stats store and settings, saved together as one blob."""

    store: StatsStore = field(default_factory=StatsStore)
    settings: Settings = field(default_factory=Settings)

    def to_dict(self) -> dict[str, Any]:
        return {"days": self.store.to_dict(), "settings": self.settings.to_dict()}

    @classmethod
    def from_dict(cls, data: Any) -> StatsRecord:
        if not isinstance(data, dict):
            data = {}
        return cls(
            store=StatsStore.from_dict(data.get("days")),
            settings=Settings.from_dict(data.get("settings")),
        )

    def save(self, path: Path | None = None) -> None:
        """Persist the record to disk."""
        path = path or STATS_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
            os.chmod(path, 0o600)
        except OSError:
            logger.exception("Failed to save stats")
            return
        logger.debug("Saved stats for %d days to %s", len(self.store.days), path)

    @classmethod
    def load(cls, path: Path | None = None) -> StatsRecord:
        """Load the record from disk, or return a fresh one."""
        path = path or STATS_FILE
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        except (ValueError, OSError):
            logger.warning("Failed to load stats, starting fresh")
            return cls()
        record = cls.from_dict(data)
        logger.info("Loaded stats for %d days from %s", len(record.store.days), path)
        return record

    @staticmethod
    def reset(path: Path | None = None) -> None:
        """Delete the data file, clearing all stats and settings."""
        path = path or STATS_FILE
        if path.exists():
            try:
                path.unlink()
            except OSError:
                logger.warning("Failed to delete stats file")
