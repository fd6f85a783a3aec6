"""Runtime configuration for Writer Stats."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class DebounceConfig:
    save_s: float = 2.0
    status_s: float = 0.3
    dashboard_s: float = 1.0


@dataclass
class AppConfig:
    data_file: Path | None = None  # None: writerstats.stats.STATS_FILE
    debounce: DebounceConfig = field(default_factory=DebounceConfig)
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        config = cls()

        if data_file := os.environ.get("WRITERSTATS_DATA_FILE"):
            config.data_file = Path(data_file).expanduser()

        for var, attr in (
            ("WRITERSTATS_SAVE_DELAY", "save_s"),
            ("WRITERSTATS_STATUS_DELAY", "status_s"),
            ("WRITERSTATS_DASHBOARD_DELAY", "dashboard_s"),
        ):
            if raw := os.environ.get(var):
                try:
                    delay = float(raw)
                    if delay < 0:
                        raise ValueError(raw)
                except ValueError:
                    logger.warning(
                        "Invalid %s=%r, using default %r",
                        var,
                        raw,
                        getattr(config.debounce, attr),
                    )
                    continue
                setattr(config.debounce, attr, delay)

        if verbose := os.environ.get("WRITERSTATS_VERBOSE"):
            config.verbose = verbose.lower() in ("1", "true", "yes")

        return config
