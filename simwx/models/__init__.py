"""Data models for simwx."""

from .weather import (
    FetchOutcome,
    FetchResult,
    Location,
    MAX_WEATHER_RADIUS_NM,
    Observation,
    SearchRequest,
)

__all__ = [
    "FetchOutcome",
    "FetchResult",
    "Location",
    "MAX_WEATHER_RADIUS_NM",
    "Observation",
    "SearchRequest",
]
