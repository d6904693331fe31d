"""Rest client with checked execution and opt-in status retries."""

import time
from typing import TypeVar

import structlog

from shared_rest.observability.logging import request_context
from shared_rest.rest.codec import JsonCodec, get_default_codec
from shared_rest.rest.errors import RestError
from shared_rest.rest.metrics import RestMetrics
from shared_rest.rest.models import HttpMethod, RestRequest, RestResponse
from shared_rest.rest.redact import redact_url_credentials
from shared_rest.rest.transport import HttpxTransport, RestTransport
from shared_rest.settings.app import RestSettings


T = TypeVar("T")

logger = structlog.get_logger()


class RestClient:
    """Stateless orchestrator in front of a ``RestTransport``.

    Provides:
    - Plain single-attempt execution
    - Checked execution that turns non-2xx statuses into REJECTED errors
      and retries statuses enrolled in the request's retry policy
    - Typed JSON decoding, checked or direct

    Transport failures (connect, send, receive, timeout, internal) are
    never retried here; they propagate unchanged.
    """

    def __init__(
        self,
        transport: RestTransport | None = None,
        codec: JsonCodec | None = None,
        settings: RestSettings | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            transport: Transport to send through, defaults to httpx.
            codec: JSON codec, defaults to the pydantic codec.
            settings: Settings used to build the default transport.
        """
        self._transport = transport or HttpxTransport(settings=settings)
        self._codec = codec or get_default_codec()
        self._log = logger.bind(component="rest")

    @property
    def transport(self) -> RestTransport:
        """Get the underlying transport."""
        return self._transport

    @property
    def _metrics(self) -> RestMetrics:
        return RestMetrics.get_instance()

    async def execute(self, request: RestRequest) -> RestResponse:
        """Send a request once and return whatever the transport returns.

        Args:
            request: Request to send.

        Returns:
            Response of any status.

        Raises:
            RestError: On transport failure.
        """
        with request_context():
            return await self._attempt(request)

    async def execute_checked(self, request: RestRequest) -> RestResponse:
        """Send a request, retrying enrolled statuses, and require 2xx.

        All attempts share one ``request_id`` in the logs.

        Args:
            request: Request to send; its retry policy drives retries.

        Returns:
            A 2xx response.

        Raises:
            RestError: Transport failures unchanged, or REJECTED when the
                final status is not 2xx.
        """
        attempt = 0
        with request_context():
            try:
                while True:
                    response = await self._attempt(request)
                    if response.is_success:
                        return response

                    policy = request.retry_policy
                    if policy is not None and policy.should_retry(
                        response.status, attempt
                    ):
                        attempt += 1
                        self._metrics.record_retry()
                        self._log.info(
                            "retry_attempt",
                            url=redact_url_credentials(request.url),
                            status_code=response.status,
                            attempt=attempt,
                            max_retries=policy.max_retries,
                        )
                        continue

                    error = RestError.from_status(response.status, response.body)
                    self._metrics.record_rejection(response.status)
                    self._log.info(
                        "request_rejected",
                        url=redact_url_credentials(request.url),
                        status_code=response.status,
                        attempts=attempt + 1,
                        retryable=error.retryable,
                    )
                    raise error
            finally:
                self._metrics.record_checked_call(attempt + 1)

    async def _attempt(self, request: RestRequest) -> RestResponse:
        start_ns = time.perf_counter_ns()
        try:
            response = await self._transport.execute(request)
        except RestError as e:
            self._metrics.record_transport_failure(e)
            self._log.info(
                "request_failed",
                method=request.method.value,
                url=redact_url_credentials(request.url),
                **e.to_dict(),
            )
            raise

        duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
        self._metrics.record_response(response, duration_ms)
        self._log.debug(
            "request_complete",
            method=request.method.value,
            url=redact_url_credentials(request.url),
            status_code=response.status,
            bytes=response.body_size,
            duration_ms=round(duration_ms, 2),
        )
        return response

    async def execute_json_checked(
        self, request: RestRequest, response_type: type[T]
    ) -> T:
        """Checked execution followed by a typed JSON decode.

        Args:
            request: Request to send.
            response_type: Type to decode the 2xx body into.

        Returns:
            Decoded body.

        Raises:
            RestError: As ``execute_checked``, or PARSE if decoding fails.
        """
        response = await self.execute_checked(request)
        return self._decode(response, response_type)

    async def execute_json_direct(
        self, request: RestRequest, response_type: type[T]
    ) -> T:
        """Single attempt, decoding the body whatever the status.

        Args:
            request: Request to send.
            response_type: Type to decode the body into.

        Returns:
            Decoded body.

        Raises:
            RestError: Transport failures, or PARSE if decoding fails.
        """
        response = await self.execute(request)
        return self._decode(response, response_type)

    async def get(self, request: RestRequest) -> RestResponse:
        """Execute a prepared request."""
        return await self.execute(request)

    async def get_url(self, url: str) -> RestResponse:
        """GET a URL once."""
        return await self.execute(RestRequest.get(url))

    async def post(self, url: str, body: bytes | str) -> RestResponse:
        """POST a raw body once."""
        return await self.execute(RestRequest.post(url).with_body(body))

    async def post_json(self, url: str, payload: object) -> RestResponse:
        """POST a JSON-encoded payload once.

        Args:
            url: Target URL.
            payload: Value to encode with the codec.

        Returns:
            Response of any status.

        Raises:
            RestError: PARSE if the payload cannot be encoded, or transport
                failures.
        """
        body = self._codec.encode(payload)
        request = (
            RestRequest.new(HttpMethod.POST, url)
            .with_header("Content-Type", "application/json")
            .with_body(body)
        )
        return await self.execute(request)

    def _decode(self, response: RestResponse, response_type: type[T]) -> T:
        try:
            return response.decode_json(response_type, self._codec)
        except RestError:
            self._metrics.record_parse_failure()
            raise
