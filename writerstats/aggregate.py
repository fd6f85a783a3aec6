"""Derived views over the stats store: totals, goal progress, streaks, windows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from writerstats.dates import date_key_offset, short_label, today_key
from writerstats.settings import Settings
from writerstats.stats import DayCounters, StatsStore

STREAK_LOOKBACK_DAYS = 365


@dataclass(frozen=True)
class DayPoint:
    key: str
    label: str
    value: int


def counters_total(counters: DayCounters, settings: Settings) -> int:
    return counters.typed + (counters.pasted if settings.count_pastes else 0)


def daily_total(store: StatsStore, day: str, settings: Settings) -> int:
    return counters_total(store.get(day), settings)


def today_total(store: StatsStore, settings: Settings, today: date | None = None) -> int:
    return daily_total(store, today_key(today), settings)


def goal_percent(total: int, goal: int) -> int:
    """Share of *goal* reached, as a whole percentage capped at 100."""
    # Halves round up, so 0.5% shows as 1% rather than banker's 0%
    return min(100, math.floor(100 * total / goal + 0.5))


def rolling_window(
    days: int,
    store: StatsStore,
    settings: Settings,
    today: date | None = None,
) -> list[DayPoint]:
    """Totals for the last *days* days, oldest first and ending today."""
    points = []
    for offset in range(days - 1, -1, -1):
        key = date_key_offset(offset, today)
        points.append(DayPoint(key=key, label=short_label(key), value=daily_total(store, key, settings)))
    return points


def _has_activity(counters: DayCounters, settings: Settings) -> bool:
    return counters.typed > 0 or (settings.count_pastes and counters.pasted > 0)


def streak(store: StatsStore, settings: Settings, today: date | None = None) -> int:
    """Consecutive days with writing, counting back from today.

    A quiet today does not break the streak, since the user may still write;
    any earlier quiet day ends it.
    """
    count = 0
    for offset in range(STREAK_LOOKBACK_DAYS):
        if _has_activity(store.get(date_key_offset(offset, today)), settings):
            count += 1
        elif offset == 0:
            continue
        else:
            break
    return count


def status_line(store: StatsStore, settings: Settings, today: date | None = None) -> str:
    total = today_total(store, settings, today)
    return f"{total} words | {streak(store, settings, today)} day streak"
