"""Configuration settings for the simwx weather fetcher."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("simwx.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_float(env_var: str, default: float) -> float:
    """Parse an environment variable into a float, falling back on bad input."""

    value = os.getenv(env_var)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", env_var, value, default)
        return default


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    log_level: str = os.getenv("SIMWX_LOG_LEVEL", "INFO")

    # aviationweather.gov data server
    weather_base_url: str = os.getenv(
        "SIMWX_WEATHER_BASE_URL",
        "https://aviationweather.gov/api/data/dataserver",
    )
    weather_timeout: float = _get_float("SIMWX_WEATHER_TIMEOUT", 10.0)
    weather_user_agent: str = os.getenv(
        "SIMWX_WEATHER_USER_AGENT", "simwx/0.1 (weather fetcher)"
    )
    weather_default_radius_nm: float = _get_float(
        "SIMWX_WEATHER_DEFAULT_RADIUS_NM", 25.0
    )
    # the host sim reports bogus latitudes >80 while starting up
    weather_max_latitude: float = _get_float("SIMWX_WEATHER_MAX_LATITUDE", 80.0)
    # OpenSSL does not fetch CRLs itself: enabling the check without a CRL
    # file fails every first handshake and each fetch falls back to a second
    # request without the check
    weather_check_revocation: bool = _get_bool(
        "SIMWX_WEATHER_CHECK_REVOCATION", default=False
    )
    weather_crl_file: str | None = os.getenv("SIMWX_WEATHER_CRL_FILE") or None


settings = Settings()

__all__ = ["settings", "Settings"]
