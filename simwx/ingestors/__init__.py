"""Weather fetching for simwx."""

from .decoder import DecodeResult, ResponseDecoder
from .extract import extract, extract_field
from .scheduler import WeatherRequestScheduler
from .weather import WeatherFetcher, is_revocation_error

__all__ = [
    "DecodeResult",
    "ResponseDecoder",
    "WeatherFetcher",
    "WeatherRequestScheduler",
    "extract",
    "extract_field",
    "is_revocation_error",
]
