"""Run weather fetches in the background, one at a time."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
import math

from simwx.config import settings
from simwx.ingestors.weather import WeatherFetcher
from simwx.models.weather import FetchOutcome, FetchResult, Location, SearchRequest

logger = logging.getLogger("simwx.ingestors.scheduler")


class WeatherRequestScheduler:
    """Entry point for weather updates.

    ``request_update`` is called from the host's thread, typically on every
    flight loop. It never blocks: it either launches a fetch on the worker
    thread or refuses because the position is unusable or a fetch is still
    running. Outcomes are not reported back to the caller; they end up in
    the logs and in the weather sink.
    """

    def __init__(
        self,
        fetcher: WeatherFetcher,
        *,
        max_latitude: float | None = None,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.max_latitude = (
            settings.weather_max_latitude if max_latitude is None else max_latitude
        )
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="simwx-weather"
        )
        self._pending: Future[FetchResult] | None = None
        self._last_result: FetchResult | None = None

    def request_update(self, location: Location, radius_nm: float | None = None) -> bool:
        """Launch a fetch around ``location`` unless refused. Returns acceptance."""

        radius = settings.weather_default_radius_nm if radius_nm is None else radius_nm
        return self.try_submit(SearchRequest(location=location, radius_nm=radius))

    def try_submit(self, request: SearchRequest) -> bool:
        location = request.location
        if not (math.isfinite(location.latitude) and math.isfinite(location.longitude)):
            logger.debug("Weather request refused, invalid position %s", location)
            return False
        if location.latitude >= self.max_latitude:
            logger.debug(
                "Weather request refused, latitude %.2f out of range", location.latitude
            )
            return False

        if self.busy:
            logger.debug("Weather request refused, previous fetch still running")
            return False

        self._pending = self._executor.submit(self._run, request)
        logger.debug(
            "Weather fetch launched around %.2f/%.2f, radius %.0fnm",
            location.latitude,
            location.longitude,
            request.radius_nm,
        )
        return True

    @property
    def busy(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def last_result(self) -> FetchResult | None:
        """Result of the most recently completed fetch."""
        return self._last_result

    def wait(self, timeout: float | None = None) -> FetchResult | None:
        """Block until the current fetch finishes. For hosts and tests only."""

        if self._pending is None:
            return self._last_result
        return self._pending.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "WeatherRequestScheduler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def _run(self, request: SearchRequest) -> FetchResult:
        try:
            result = self.fetcher.fetch(request.location, request.radius_nm)
        except Exception as exc:
            logger.exception("Weather fetch worker failed")
            result = FetchResult(
                outcome=FetchOutcome.UNEXPECTED_FAULT,
                radius_nm=request.radius_nm,
                detail=str(exc),
            )
        self._last_result = result
        return result


__all__ = ["WeatherRequestScheduler"]
