"""Real-world METAR pressure for a simulated aircraft."""

from simwx.ingestors import WeatherFetcher, WeatherRequestScheduler
from simwx.models import Location, Observation
from simwx.state import WeatherSink, WeatherState

__all__ = [
    "Location",
    "Observation",
    "WeatherFetcher",
    "WeatherRequestScheduler",
    "WeatherSink",
    "WeatherState",
]
