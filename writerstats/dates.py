"""Calendar-day keys in local time.

Keys look like ``2024-03-05``. Every helper takes an optional ``today`` so
callers (and tests) can pin the wall clock.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

KEY_FORMAT = "%Y-%m-%d"


def _resolve(today: date | None) -> date:
    return today if today is not None else date.today()


def format_key(day: date) -> str:
    return day.strftime(KEY_FORMAT)


def parse_key(key: str) -> date | None:
    """Parse a canonical day key, returning None for anything else."""
    try:
        parsed = datetime.strptime(key, KEY_FORMAT).date()
    except (ValueError, TypeError):
        return None
    # strptime tolerates missing zero padding; keys must round-trip exactly
    return parsed if format_key(parsed) == key else None


def today_key(today: date | None = None) -> str:
    return format_key(_resolve(today))


def date_key_offset(days_ago: int, today: date | None = None) -> str:
    """Key for the day *days_ago* calendar days before today."""
    if days_ago < 0:
        raise ValueError(f"days_ago must be non-negative, got {days_ago}")
    return format_key(_resolve(today) - timedelta(days=days_ago))


def short_label(key: str) -> str:
    """Render ``2024-03-05`` as ``3/5``."""
    _, month, day = key.split("-")
    return f"{int(month)}/{int(day)}"
