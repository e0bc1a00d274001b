"""Runtime settings for the usage stats dashboard."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_CSV_URL = "https://recovrr.org/recovrr/log/stats.csv"
DEFAULT_TIMEOUT = 8.0
DEFAULT_TIMEZONE = "UTC"
DEFAULT_NOON_HOUR = 12
DEFAULT_TICK_COUNT = 4
ENV_PREFIX = "USAGE_STATS_"


def coerce_timezone(name: str) -> str:
    """Return ``name`` if it is a known zone, otherwise UTC."""
    try:
        ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return DEFAULT_TIMEZONE
    return str(name)


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class StatsConfig:
    """
    Where the snapshot comes from and how it is interpreted.

    ``csv_path`` wins over ``csv_url`` when both are set. ``timezone`` decides
    which calendar day a sample belongs to, and ``noon_hour`` is the expected
    local hour of the daily "full day" sample.
    """

    csv_url: str = DEFAULT_CSV_URL
    csv_path: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    timezone: str = DEFAULT_TIMEZONE
    noon_hour: int = DEFAULT_NOON_HOUR
    tick_count: int = DEFAULT_TICK_COUNT
    log_level: str = "INFO"

    @property
    def source(self) -> str:
        return self.csv_path or self.csv_url

    @classmethod
    def from_env(cls) -> "StatsConfig":
        csv_path = os.getenv(ENV_PREFIX + "CSV_PATH") or None
        return cls(
            csv_url=os.getenv(ENV_PREFIX + "CSV_URL") or DEFAULT_CSV_URL,
            csv_path=csv_path,
            timeout=_env_float("TIMEOUT", DEFAULT_TIMEOUT),
            timezone=coerce_timezone(os.getenv(ENV_PREFIX + "TIMEZONE") or DEFAULT_TIMEZONE),
            noon_hour=_env_int("NOON_HOUR", DEFAULT_NOON_HOUR),
            tick_count=_env_int("TICK_COUNT", DEFAULT_TICK_COUNT),
            log_level=(os.getenv(ENV_PREFIX + "LOG_LEVEL") or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once; later calls only adjust the level."""
    numeric = getattr(logging, str(level).upper(), logging.INFO)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=numeric,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger().setLevel(numeric)
