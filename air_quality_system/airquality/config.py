"""
Configuration module for the Air Quality system.

Settings are read from environment variables, after loading a ``.env`` file
from the working directory when one exists. Malformed numeric values fall
back to their defaults so that a typo in the environment never prevents the
UI from starting.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"


def _read_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default


def _read_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        api_key: OpenWeather API key (None when not configured)
        base_url: Provider base URL
        request_timeout: Per-request timeout in seconds
        cache_ttl_seconds: Minimum interval between provider refreshes of one city
        forecast_hours: Number of forecast slots requested from the provider
        log_dir: Directory for the persistent log file
    """

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = 10.0
    cache_ttl_seconds: int = 300
    forecast_hours: int = 24
    log_dir: Path = Path("logs")

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Builds settings from the environment.

        Reads OPENWEATHER_API_KEY (or VITE_OPENWEATHER_API_KEY),
        AIRQUALITY_BASE_URL, AIRQUALITY_REQUEST_TIMEOUT,
        AIRQUALITY_CACHE_SECONDS, AIRQUALITY_FORECAST_HOURS and
        AIRQUALITY_LOG_DIR.

        Args:
            load_env_file: If True, load a .env file first (existing
                           environment variables take precedence)
        """
        if load_env_file:
            load_dotenv()

        api_key = os.getenv("OPENWEATHER_API_KEY") or os.getenv("VITE_OPENWEATHER_API_KEY")
        return cls(
            api_key=api_key or None,
            base_url=os.getenv("AIRQUALITY_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            request_timeout=_read_float("AIRQUALITY_REQUEST_TIMEOUT", cls.request_timeout),
            cache_ttl_seconds=_read_int("AIRQUALITY_CACHE_SECONDS", cls.cache_ttl_seconds),
            forecast_hours=_read_int("AIRQUALITY_FORECAST_HOURS", cls.forecast_hours),
            log_dir=Path(os.getenv("AIRQUALITY_LOG_DIR", "logs")),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)
