"""Write interface to the shared weather state, plus an in-memory store."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Optional, Protocol

from simwx.models.weather import Observation

logger = logging.getLogger("simwx.state")


class WeatherSink(Protocol):
    """Receives decoded observations. Called from the fetch worker thread."""

    def set_weather(
        self,
        pressure_hpa: float,
        latitude: Optional[float],
        longitude: Optional[float],
        station_id: Optional[str],
        raw_text: Optional[str],
    ) -> None:
        ...


class WeatherState:
    """Last-write-wins holder of the most recent observation."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._latest: Observation | None = None

    def set_weather(
        self,
        pressure_hpa: float,
        latitude: Optional[float],
        longitude: Optional[float],
        station_id: Optional[str],
        raw_text: Optional[str],
    ) -> None:
        observation = Observation(
            pressure_hpa=pressure_hpa,
            latitude=latitude,
            longitude=longitude,
            station_id=station_id,
            raw_text=raw_text,
        )
        with self._lock:
            self._latest = observation
        logger.info(
            "Weather updated: %.1f hPa from %s", pressure_hpa, station_id or "unknown station"
        )

    def latest(self) -> Observation | None:
        with self._lock:
            return self._latest


__all__ = ["WeatherSink", "WeatherState"]
