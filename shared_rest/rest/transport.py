"""Transport capability and the httpx-backed network transport."""

import time
from abc import ABC, abstractmethod
from datetime import timedelta

import httpx
import structlog
from pydantic import ValidationError

from shared_rest.rest.errors import RestError, RestErrorKind
from shared_rest.rest.models import RawResponse, RestRequest, RestResponse
from shared_rest.rest.redact import redact_headers, redact_url_credentials
from shared_rest.settings.app import RestSettings, get_settings


logger = structlog.get_logger()


class RestTransport(ABC):
    """Abstract send/receive boundary used by ``RestClient``.

    Implementations must raise ``RestError`` for every failure and
    must be safe to call from concurrent tasks.
    """

    @abstractmethod
    async def execute(self, request: RestRequest) -> RestResponse:
        """Send a request and return the response.

        Args:
            request: Request to send.

        Returns:
            Response with status, headers, body and elapsed time.

        Raises:
            RestError: On any transport failure.
        """

    async def execute_raw(self, request: RestRequest) -> RawResponse:
        """Send a request and return only (status, body, elapsed).

        Args:
            request: Request to send.

        Returns:
            Raw response tuple.
        """
        response = await self.execute(request)
        return response.to_raw()


class HttpxTransport(RestTransport):
    """Network transport backed by ``httpx.AsyncClient``.

    Each request carries its own timeout. When no client is injected a
    short-lived client is opened per request.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        settings: RestSettings | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Optional shared client; the caller owns its lifetime.
            settings: Settings for default timeout, user agent and redirects.
        """
        self._client = client
        self._settings = settings or get_settings()
        self._log = logger.bind(component="rest", transport="httpx")

    async def execute(self, request: RestRequest) -> RestResponse:
        """Send a request over the network."""
        if self._client is not None:
            return await self._send(self._client, request)

        async with httpx.AsyncClient(
            follow_redirects=self._settings.follow_redirects,
        ) as client:
            return await self._send(client, request)

    def _build_headers(self, request: RestRequest) -> list[tuple[str, str]]:
        headers = list(request.headers)
        if not any(key.lower() == "user-agent" for key, _ in headers):
            headers.append(("User-Agent", self._settings.user_agent))
        return headers

    async def _send(
        self, client: httpx.AsyncClient, request: RestRequest
    ) -> RestResponse:
        """Execute a single HTTP exchange.

        Args:
            client: Client to send with.
            request: Request to send.

        Returns:
            Response read in full.

        Raises:
            RestError: INTERNAL for requests that cannot be built, SEND or
                RECEIVE (or CONNECT/TIMEOUT) for network failures.
        """
        timeout = request.timeout_or(self._settings.default_timeout_seconds)
        headers = self._build_headers(request)
        log = self._log.bind(
            method=request.method.value,
            url=redact_url_credentials(request.url),
            timeout=timeout,
        )

        start_ns = time.perf_counter_ns()
        try:
            http_request = client.build_request(
                request.method.value,
                request.url,
                headers=headers,
                content=request.body,
                timeout=timeout,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as e:
            raise RestError.internal(f"Invalid request: {e}") from e

        log.debug("http_request_sent", headers=redact_headers(tuple(headers)))

        try:
            response = await client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise RestError.from_httpx(RestErrorKind.SEND, e) from e

        try:
            body = await response.aread()
        except httpx.HTTPError as e:
            raise RestError.from_httpx(RestErrorKind.RECEIVE, e) from e
        finally:
            await response.aclose()

        elapsed = timedelta(microseconds=(time.perf_counter_ns() - start_ns) / 1000)
        log.debug(
            "http_response_received",
            status_code=response.status_code,
            bytes=len(body),
            duration_ms=round(elapsed.total_seconds() * 1000, 2),
        )

        try:
            return RestResponse(
                status=response.status_code,
                headers=tuple(response.headers.multi_items()),
                body=body,
                elapsed=elapsed,
            )
        except ValidationError as e:
            raise RestError.receive(
                f"Invalid response status {response.status_code}"
            ) from e
