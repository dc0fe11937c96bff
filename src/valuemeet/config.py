"""Configuration management for ValueMeet."""

import calendar
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.cost import UNIT_RATE
from .core.periods import Granularity

logger = logging.getLogger(__name__)

VALUEMEET_HOME = Path(os.environ.get("VALUEMEET_HOME", Path.home() / "valuemeet"))
CONFIG_FILE = VALUEMEET_HOME / "config" / "valuemeet.conf"

_WEEKDAYS = {name.lower(): i for i, name in enumerate(calendar.day_name)}


@dataclass
class Config:
    """ValueMeet configuration."""

    api_base_url: str = "http://localhost:8000"
    api_timeout: float = 10.0
    # Logged-in user; empty means nobody is logged in.
    user_id: str = ""
    department_id: str = ""
    unit_rate: float = UNIT_RATE
    week_start: str = "Sunday"
    default_period: str = "week"

    @property
    def first_weekday(self) -> int:
        """week_start as a calendar.MONDAY..SUNDAY index."""
        return _WEEKDAYS.get(self.week_start.strip().lower(), calendar.SUNDAY)

    @property
    def granularity(self) -> Granularity:
        try:
            return Granularity(self.default_period.strip().lower())
        except ValueError:
            return Granularity.WEEK


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from unquoted values."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_float(key: str, value: str, default: float) -> float:
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Invalid number for {key.upper()}: {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from valuemeet.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "api_base_url":
                config.api_base_url = value.rstrip("/")
            case "api_timeout":
                config.api_timeout = _parse_float(key, value, config.api_timeout)
            case "user_id":
                config.user_id = value
            case "department_id":
                config.department_id = value
            case "unit_rate":
                config.unit_rate = _parse_float(key, value, config.unit_rate)
            case "week_start":
                if value.lower() not in _WEEKDAYS:
                    logger.warning(f"Unknown WEEK_START: {value!r}, using {config.week_start}")
                else:
                    config.week_start = value
            case "default_period":
                config.default_period = value
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
