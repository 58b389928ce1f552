"""
Purpose: Central runtime configuration (single source of truth for URLs, keys, timeouts).
What it does:
- Reads a .env file (python-dotenv) and the process environment.
- Exposes a frozen Settings object so clients can be built with explicit values.

Example .env:
TASKS_API_URL=https://script.google.com/macros/s/<deployment>/exec
ORS_API_KEY=<openrouteservice key>
HOME_BASE_LAT=12.935
HOME_BASE_LNG=77.614
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ORS_BASE_URL = "https://api.openrouteservice.org"
DEFAULT_ORS_PROFILE = "driving-car"
DEFAULT_HOME_BASE_NAME = "laundry"


def _env_float(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logging.getLogger(__name__).warning(f"Ignoring non-numeric {name}={raw!r}")
        return None


@dataclass(frozen=True)
class Settings:
    """
    Everything the coordinator needs to talk to the outside world.
    """

    tasks_api_url: Optional[str] = None
    store_timeout: float = 10.0

    ors_base_url: str = DEFAULT_ORS_BASE_URL
    ors_api_key: Optional[str] = None
    ors_profile: str = DEFAULT_ORS_PROFILE
    routing_timeout: float = 15.0

    relay_max_workers: int = 8

    # home base as (lat, lng); None means "look it up by name, then fall back"
    home_base_lat: Optional[float] = None
    home_base_lng: Optional[float] = None
    home_base_name: str = DEFAULT_HOME_BASE_NAME

    log_level: str = "INFO"

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.store_timeout <= 0 or self.routing_timeout <= 0:
            raise ValueError("timeouts must be > 0")
        if self.relay_max_workers <= 0:
            raise ValueError("relay_max_workers must be > 0")
        if (self.home_base_lat is None) != (self.home_base_lng is None):
            raise ValueError("HOME_BASE_LAT and HOME_BASE_LNG must be set together")


def load_settings() -> Settings:
    """
    Build Settings from the environment (after .env has been loaded).
    """
    settings = Settings(
        tasks_api_url=(os.getenv("TASKS_API_URL") or "").strip() or None,
        store_timeout=_env_float("STORE_TIMEOUT") or 10.0,
        ors_base_url=(os.getenv("ORS_BASE_URL") or DEFAULT_ORS_BASE_URL).strip().rstrip("/"),
        ors_api_key=(os.getenv("ORS_API_KEY") or "").strip() or None,
        ors_profile=(os.getenv("ORS_PROFILE") or DEFAULT_ORS_PROFILE).strip(),
        routing_timeout=_env_float("ROUTING_TIMEOUT") or 15.0,
        relay_max_workers=int(_env_float("RELAY_MAX_WORKERS") or 8),
        home_base_lat=_env_float("HOME_BASE_LAT"),
        home_base_lng=_env_float("HOME_BASE_LNG"),
        home_base_name=(os.getenv("HOME_BASE_NAME") or DEFAULT_HOME_BASE_NAME).strip(),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
    )
    settings.validate()
    return settings


def configure_logging(level: Optional[str] = None) -> None:
    """Apply LOG_LEVEL for scripts; library modules only ever call getLogger."""
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
