"""Decode aviationweather.gov METAR responses into observations.

Responses are XML, but we rely on their fairly static structure instead of
parsing them. We look for:

``<error>``
    Indicates just that and stops interpretation.
``<altim_in_hg>``
    Required. Without it there is no observation.
``<raw_text>``, ``<station_id>``, ``<latitude>``, ``<longitude>``
    Optional, read in this order of appearance.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Optional

from simwx.ingestors.extract import extract_field
from simwx.models.weather import HPA_PER_INCH_HG, Observation
from simwx.state import WeatherSink

logger = logging.getLogger("simwx.ingestors.decoder")

TAG_ERROR = "<error>"
TAG_PRESSURE = "<altim_in_hg>"
TAG_RAW_TEXT = "<raw_text>"
TAG_STATION_ID = "<station_id>"
TAG_LATITUDE = "<latitude>"
TAG_LONGITUDE = "<longitude>"


def _to_float(value: str | None, field: str) -> float | None:
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s value %r", field, value)
        return None
    if not math.isfinite(number):
        logger.warning("Ignoring non-finite %s value %r", field, value)
        return None
    return number


@dataclass(frozen=True)
class DecodeResult:
    observation: Optional[Observation]
    found: bool
    service_error: Optional[str] = None


class ResponseDecoder:
    """Pull the pressure observation out of a response and publish it."""

    def __init__(self, sink: WeatherSink) -> None:
        self.sink = sink

    def decode(self, buffer: str) -> DecodeResult:
        error, _ = extract_field(buffer, TAG_ERROR, 0)
        if error is not None:
            logger.error("Weather request returned with error: %s", error)
            return DecodeResult(observation=None, found=False, service_error=error)

        pressure_text, _ = extract_field(buffer, TAG_PRESSURE, 0)
        pressure_inhg = _to_float(pressure_text, "altim_in_hg")
        if pressure_inhg is None:
            return DecodeResult(observation=None, found=False)

        # remaining fields in order of appearance, from the top again
        cursor = 0
        raw_text, cursor = extract_field(buffer, TAG_RAW_TEXT, cursor)
        station_id, cursor = extract_field(buffer, TAG_STATION_ID, cursor)
        latitude_text, cursor = extract_field(buffer, TAG_LATITUDE, cursor)
        longitude_text, cursor = extract_field(buffer, TAG_LONGITUDE, cursor)

        observation = Observation(
            pressure_hpa=pressure_inhg * HPA_PER_INCH_HG,
            station_id=station_id,
            raw_text=raw_text,
            latitude=_to_float(latitude_text, "latitude"),
            longitude=_to_float(longitude_text, "longitude"),
        )
        self.sink.set_weather(
            observation.pressure_hpa,
            observation.latitude,
            observation.longitude,
            observation.station_id,
            observation.raw_text,
        )
        logger.debug("Decoded weather observation: %s", observation)
        return DecodeResult(observation=observation, found=True)


__all__ = ["DecodeResult", "ResponseDecoder"]
