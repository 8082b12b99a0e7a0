"""HTTP client for OTP index API requests."""

import logging
import time
from typing import TYPE_CHECKING, Any

import aiohttp

from mbus_departures.adapters.api_request_logger import (
    log_stoptimes_request,
    log_stoptimes_response,
)
from mbus_departures.adapters.otp_api.constants import (
    DEFAULT_CLIENT_IDENTIFIER,
    DEFAULT_HEADERS,
    OTP_BASE_URL,
    OTP_STOPTIMES_PATH,
)
from mbus_departures.domain.errors import UpstreamEmptyError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession


class OtpHttpClient:
    """HTTP client for the stop times endpoint of an OTP router.

    Performs exactly one request per call; retrying is left to the caller.
    """

    def __init__(
        self,
        session: "ClientSession | None" = None,
        base_url: str = OTP_BASE_URL,
        timeout_seconds: float = 8.0,
        client_identifier: str = DEFAULT_CLIENT_IDENTIFIER,
    ) -> None:
        """Initialize with optional aiohttp session.

        Args:
            session: aiohttp ClientSession shared by the process.
            base_url: Router base URL, without trailing slash.
            timeout_seconds: Total time budget of one request.
            client_identifier: Value of the User-Agent header.
        """
        self._session = session
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._headers = {**DEFAULT_HEADERS, "User-Agent": client_identifier}

    @property
    def base_url(self) -> str:
        """Router base URL."""
        return self._base_url

    def stoptimes_url(self, stop_id: str, service_date: str) -> str:
        """URL of the stop times of a stop on a service date (YYYYMMDD)."""
        return self._base_url + OTP_STOPTIMES_PATH.format(
            stop_id=stop_id, service_date=service_date
        )

    async def _log_error_response(self, response: "ClientResponse", url: str) -> None:
        """Log error response details."""
        error_text = await response.text()
        error_body = error_text[:500] if error_text else "(empty response body)"
        content_type = response.headers.get("Content-Type", "unknown")
        logger.error(
            f"OTP API returned status {response.status} for {url}: "
            f"{error_body} (Content-Type: {content_type})"
        )

    async def _read_payload(self, response: "ClientResponse", url: str) -> Any:
        """Decode the JSON body of a successful response."""
        try:
            data = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError) as e:
            raise UpstreamEmptyError(f"Unparseable payload from {url}: {e}") from e
        if not data:
            raise UpstreamEmptyError(f"Empty payload from {url}")
        return data

    async def fetch_stoptimes(self, stop_id: str, service_date: str) -> Any:
        """Fetch the raw stop times payload of a stop.

        Args:
            stop_id: OTP stop ID.
            service_date: Service date as YYYYMMDD.

        Returns:
            The decoded, non-empty JSON payload.

        Raises:
            UpstreamUnavailableError: On timeout, network failure or non-2xx status.
            UpstreamEmptyError: On an empty or undecodable body.
        """
        if not self._session:
            raise UpstreamUnavailableError("OTP API requires an aiohttp session")

        url = self.stoptimes_url(stop_id, service_date)
        log_stoptimes_request(stop_id, service_date, url, headers=self._headers)
        started = time.monotonic()

        try:
            async with self._session.get(
                url, headers=self._headers, timeout=self._timeout
            ) as response:
                log_stoptimes_response(
                    stop_id, service_date, response.status, time.monotonic() - started
                )
                if not 200 <= response.status < 300:
                    await self._log_error_response(response, url)
                    raise UpstreamUnavailableError(
                        f"OTP API returned status {response.status} for {url}",
                        status_code=response.status,
                    )
                return await self._read_payload(response, url)
        except TimeoutError as e:
            log_stoptimes_response(stop_id, service_date, "timeout", time.monotonic() - started)
            raise UpstreamUnavailableError(
                f"Timed out after {self._timeout.total}s fetching {url}"
            ) from e
        except aiohttp.ClientError as e:
            log_stoptimes_response(
                stop_id, service_date, "network error", time.monotonic() - started
            )
            raise UpstreamUnavailableError(f"Network error fetching {url}: {e}") from e
