"""User settings persisted alongside the daily stats."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_DAILY_GOAL = 500

# Settings keys as exposed on the command line, with the name each one is
# stored under in the data file.
SETTING_KEYS: dict[str, dict[str, str]] = {
    "daily_goal": {
        "description": "Number of words to aim for each day",
        "stored_as": "dailyGoal",
        "type": "positive_int",
    },
    "count_pastes": {
        "description": "Include pasted text in totals and goal progress",
        "stored_as": "countPastes",
        "type": "bool",
    },
    "include_folders": {
        "description": "Only count words in these folders (comma-separated, empty = all)",
        "stored_as": "includeFolders",
        "type": "string",
    },
    "exclude_folders": {
        "description": "Never count words in these folders (comma-separated)",
        "stored_as": "excludeFolders",
        "type": "string",
    },
}

TRUE_VALUES = ("on", "true", "yes", "1")
FALSE_VALUES = ("off", "false", "no", "0")


def parse_daily_goal(value: str) -> int:
    """Parse a daily goal, which must be a positive integer."""
    try:
        goal = int(str(value).strip())
    except ValueError:
        raise ValueError(f"Daily goal must be a whole number, got {value!r}") from None
    if goal <= 0:
        raise ValueError(f"Daily goal must be positive, got {goal}")
    return goal


def parse_bool(value: str) -> bool:
    lowered = str(value).strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(f"Expected on/off, got {value!r}")


@dataclass
class Settings:
    include_folders: str = ""
    exclude_folders: str = ""
    count_pastes: bool = True
    daily_goal: int = DEFAULT_DAILY_GOAL

    def to_dict(self) -> dict[str, Any]:
        return {
            info["stored_as"]: getattr(self, key) for key, info in SETTING_KEYS.items()
        }

    @classmethod
    def from_dict(cls, data: Any) -> Settings:
        """Merge a stored settings object over the defaults.

        Fields with the wrong type are dropped rather than trusted.
        """
        settings = cls()
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Ignoring malformed settings section: %r", type(data).__name__)
            return settings

        include = data.get("includeFolders")
        if isinstance(include, str):
            settings.include_folders = include
        exclude = data.get("excludeFolders")
        if isinstance(exclude, str):
            settings.exclude_folders = exclude
        count_pastes = data.get("countPastes")
        if isinstance(count_pastes, bool):
            settings.count_pastes = count_pastes
        goal = data.get("dailyGoal")
        if isinstance(goal, int) and not isinstance(goal, bool) and goal > 0:
            settings.daily_goal = goal
        elif goal is not None:
            logger.warning("Ignoring invalid stored daily goal %r", goal)
        return settings

    def apply(self, key: str, value: str) -> None:
        """Validate and set one setting from user input.

        Raises KeyError for an unknown key and ValueError for invalid input;
        in both cases the settings are left unchanged.
        """
        if key not in SETTING_KEYS:
            raise KeyError(key)
        kind = SETTING_KEYS[key]["type"]
        if kind == "positive_int":
            resolved: Any = parse_daily_goal(value)
        elif kind == "bool":
            resolved = parse_bool(value)
        else:
            resolved = value
        setattr(self, key, resolved)
