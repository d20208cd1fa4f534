"""Fetch METAR pressure near a position from aviationweather.gov.

Example request, latest weather within 100 statute miles, limited to the
fields we are interested in::

    https://aviationweather.gov/api/data/dataserver?dataSource=metars&requestType=retrieve&format=xml&radialDistance=100;-118.94,33.40&hoursBeforeNow=2&mostRecent=true&fields=raw_text,station_id,latitude,longitude,altim_in_hg
"""

from __future__ import annotations

import logging
import ssl

import certifi
import httpx

from simwx.config import settings
from simwx.ingestors.decoder import ResponseDecoder
from simwx.models.weather import FetchOutcome, FetchResult, Location, SearchRequest
from simwx.state import WeatherSink

logger = logging.getLogger("simwx.ingestors.weather")

# parameters are: base url, radius [sm], longitude, latitude
WEATHER_URL = (
    "{base_url}?dataSource=metars&requestType=retrieve&format=xml"
    "&radialDistance={radius:.0f};{lon:.2f},{lat:.2f}"
    "&hoursBeforeNow=2&mostRecent=true"
    "&fields=raw_text,station_id,latitude,longitude,altim_in_hg"
)

# any OpenSSL CRL verify error, and the schannel CRYPT_E_NO_REVOCATION_CHECK /
# CRYPT_E_REVOCATION_OFFLINE codes
_REVOCATION_MARKERS = (
    "revocation",
    "crl",
    "0x80092012",
    "0x80092013",
)


def is_revocation_error(exc: BaseException) -> bool:
    """Tell if a transport failure came from certificate revocation checking."""

    text = str(exc).lower()
    cause = exc.__cause__ or exc.__context__
    if cause is not None:
        text += " " + str(cause).lower()
    return any(marker in text for marker in _REVOCATION_MARKERS)


def _ssl_context(check_revocation: bool, crl_file: str | None = None) -> ssl.SSLContext:
    context = ssl.create_default_context(cafile=certifi.where())
    if check_revocation:
        # OpenSSL never downloads CRLs; without a local file every handshake
        # fails with "unable to get certificate CRL"
        if crl_file:
            context.load_verify_locations(cafile=crl_file)
        context.verify_flags |= ssl.VERIFY_CRL_CHECK_LEAF
    else:
        context.verify_flags &= ~(ssl.VERIFY_CRL_CHECK_LEAF | ssl.VERIFY_CRL_CHECK_CHAIN)
    return context


class WeatherFetcher:
    """Blocking METAR fetch with radius widening and revocation fallback.

    Meant to run on a worker thread, see ``WeatherRequestScheduler``.
    """

    def __init__(
        self,
        *,
        sink: WeatherSink | None = None,
        decoder: ResponseDecoder | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        check_revocation: bool | None = None,
        crl_file: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if decoder is None:
            if sink is None:
                raise ValueError("WeatherFetcher needs either a sink or a decoder")
            decoder = ResponseDecoder(sink)
        self.decoder = decoder
        self.base_url = base_url or settings.weather_base_url
        self.timeout = timeout or settings.weather_timeout
        self.user_agent = user_agent or settings.weather_user_agent
        self.check_revocation = (
            settings.weather_check_revocation if check_revocation is None else check_revocation
        )
        self.crl_file = crl_file or settings.weather_crl_file
        self.transport = transport

    def build_url(self, request: SearchRequest) -> str:
        return WEATHER_URL.format(
            base_url=self.base_url,
            radius=request.radius_sm,
            lon=request.location.longitude,
            lat=request.location.latitude,
        )

    def fetch(self, location: Location, radius_nm: float) -> FetchResult:
        """Fetch weather around ``location``; never raises."""

        request: SearchRequest | None = None
        attempts = 0
        try:
            request = SearchRequest(location=location, radius_nm=radius_nm)
            attempts += 1
            result = self._fetch_once(request)
            # nothing found: one more try with the largest radius
            if result.outcome is FetchOutcome.NO_DATA and not request.at_ceiling:
                request = request.widened()
                attempts += 1
                result = self._fetch_once(request)
        except Exception as exc:
            logger.exception("Fetching weather failed with exception")
            return FetchResult(
                outcome=FetchOutcome.UNEXPECTED_FAULT,
                radius_nm=request.radius_nm if request is not None else radius_nm,
                attempts=attempts,
                detail=str(exc),
            )

        result.attempts = attempts
        return result

    def _get(self, url: str, *, check_revocation: bool) -> httpx.Response:
        with httpx.Client(
            timeout=self.timeout,
            verify=_ssl_context(check_revocation, self.crl_file),
            headers={"User-Agent": self.user_agent},
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            return client.get(url)

    def _fetch_once(self, request: SearchRequest) -> FetchResult:
        url = self.build_url(request)
        logger.debug("Requesting weather: %s", url)

        try:
            response = self._get(url, check_revocation=self.check_revocation)
        except httpx.RequestError as exc:
            if not is_revocation_error(exc):
                logger.error("Weather request failed: %s", exc)
                return self._failed(FetchOutcome.TRANSPORT_FAILURE, request, str(exc))

            logger.warning(
                "Certificate revocation check failed, retrying without it: %s", exc
            )
            try:
                response = self._get(url, check_revocation=False)
            except httpx.RequestError as retry_exc:
                logger.error(
                    "Weather request failed even without revocation check: %s", retry_exc
                )
                return self._failed(
                    FetchOutcome.TRANSPORT_FAILURE, request, str(retry_exc)
                )

        if response.status_code != httpx.codes.OK:
            logger.error(
                "Could not request weather from aviationweather.gov: HTTP return code %s",
                response.status_code,
            )
            return self._failed(
                FetchOutcome.PROTOCOL_FAILURE, request, f"HTTP {response.status_code}"
            )

        decoded = self.decoder.decode(response.text)
        if decoded.found:
            return FetchResult(
                outcome=FetchOutcome.FOUND,
                radius_nm=request.radius_nm,
                observation=decoded.observation,
            )
        if decoded.service_error is not None:
            return self._failed(FetchOutcome.SERVICE_ERROR, request, decoded.service_error)

        logger.warning("Found no weather in a %.0fnm radius", request.radius_nm)
        return self._failed(FetchOutcome.NO_DATA, request, None)

    @staticmethod
    def _failed(
        outcome: FetchOutcome, request: SearchRequest, detail: str | None
    ) -> FetchResult:
        return FetchResult(outcome=outcome, radius_nm=request.radius_nm, detail=detail)


__all__ = ["WEATHER_URL", "WeatherFetcher", "is_revocation_error"]
