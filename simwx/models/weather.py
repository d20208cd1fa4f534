"""Weather data models for the pressure fetcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

# Maximum search radius [nm]
MAX_WEATHER_RADIUS_NM = 100.0

HPA_PER_INCH_HG = 33.8639
NM_PER_STATUTE_MILE = 1.151


@dataclass(frozen=True)
class Location:
    """A point in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class SearchRequest:
    """Location plus search radius in nautical miles.

    The radius never exceeds ``MAX_WEATHER_RADIUS_NM``; larger values are
    clamped on construction.
    """

    location: Location
    radius_nm: float

    def __post_init__(self) -> None:
        if self.radius_nm > MAX_WEATHER_RADIUS_NM:
            object.__setattr__(self, "radius_nm", MAX_WEATHER_RADIUS_NM)

    @property
    def at_ceiling(self) -> bool:
        return self.radius_nm >= MAX_WEATHER_RADIUS_NM

    @property
    def radius_sm(self) -> float:
        """Radius in statute miles, as the data server expects."""
        return self.radius_nm / NM_PER_STATUTE_MILE

    def widened(self) -> "SearchRequest":
        return SearchRequest(location=self.location, radius_nm=MAX_WEATHER_RADIUS_NM)


class Observation(BaseModel):
    """Decoded METAR pressure observation near the aircraft."""

    pressure_hpa: float = Field(..., description="Altimeter setting in hectopascals")
    station_id: Optional[str] = Field(
        default=None, description="ICAO id of the reporting station",
    )
    raw_text: Optional[str] = Field(default=None, description="Raw METAR text")
    latitude: Optional[float] = Field(
        default=None, description="Latitude of the reporting station",
    )
    longitude: Optional[float] = Field(
        default=None, description="Longitude of the reporting station",
    )

    model_config = ConfigDict(frozen=True)


class FetchOutcome(str, Enum):
    """How a single fetch run ended."""

    FOUND = "FOUND"
    NO_DATA = "NO_DATA"
    SERVICE_ERROR = "SERVICE_ERROR"
    PROTOCOL_FAILURE = "PROTOCOL_FAILURE"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    UNEXPECTED_FAULT = "UNEXPECTED_FAULT"


@dataclass
class FetchResult:
    """Result of one fetch run, including any radius-widening retry."""

    outcome: FetchOutcome
    radius_nm: float
    attempts: int = 0
    observation: Optional[Observation] = None
    detail: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.outcome is FetchOutcome.FOUND


__all__ = [
    "FetchOutcome",
    "FetchResult",
    "HPA_PER_INCH_HG",
    "Location",
    "MAX_WEATHER_RADIUS_NM",
    "NM_PER_STATUTE_MILE",
    "Observation",
    "SearchRequest",
]
