"""Data models for the rest layer."""

from datetime import timedelta
from enum import Enum
from typing import Annotated, NamedTuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from shared_rest.rest.codec import JsonCodec, get_default_codec
from shared_rest.rest.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_MAX,
    HTTP_STATUS_MIN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)


T = TypeVar("T")

HeaderList = tuple[tuple[str, str], ...]


class HttpMethod(str, Enum):
    """HTTP request methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, method: "HttpMethod | str") -> "HttpMethod":
        """Convert a method name in any case to a member.

        Raises:
            ValueError: If the name is not a known method.
        """
        if isinstance(method, cls):
            return method
        return cls(method.upper())


class RetryPolicy(BaseModel):
    """Opt-in retry policy for HTTP-level rejections.

    Retries only trigger when the response status is one of ``statuses``
    and fewer than ``max_retries`` retries have been made. Transport
    failures are never retried.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0)] = 0
    statuses: frozenset[int] = Field(
        default_factory=frozenset, description="Statuses eligible for retry"
    )

    @classmethod
    def on_statuses(cls, *statuses: int, max_retries: int) -> "RetryPolicy":
        """Create a policy retrying the given statuses.

        Args:
            statuses: HTTP status codes eligible for retry.
            max_retries: Maximum number of retries.

        Returns:
            New retry policy.
        """
        return cls(max_retries=max_retries, statuses=frozenset(statuses))

    def should_retry(self, status: int, attempt: int) -> bool:
        """Determine if a response should be retried.

        Args:
            status: HTTP status of the response.
            attempt: Retries made so far (0-indexed).

        Returns:
            True if the request should be retried.
        """
        return status in self.statuses and attempt < self.max_retries


class RestRequest(BaseModel):
    """An HTTP request descriptor.

    Immutable; the ``with_*`` builders return modified copies. Headers are
    an ordered list of pairs so duplicates and ordering survive.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: HttpMethod
    url: Annotated[str, Field(min_length=1, description="Request URL")]
    headers: HeaderList = Field(default=(), description="Ordered header pairs")
    body: bytes | None = Field(default=None, description="Request body")
    timeout: Annotated[float, Field(gt=0.0)] | None = Field(
        default=None, description="Timeout in seconds, None for the default"
    )
    retry_policy: RetryPolicy | None = Field(
        default=None, description="Retry policy for checked execution"
    )

    @classmethod
    def new(cls, method: HttpMethod | str, url: str) -> "RestRequest":
        """Create a request for any method."""
        return cls(method=HttpMethod.parse(method), url=url)

    @classmethod
    def get(cls, url: str) -> "RestRequest":
        """Create a GET request."""
        return cls.new(HttpMethod.GET, url)

    @classmethod
    def post(cls, url: str) -> "RestRequest":
        """Create a POST request."""
        return cls.new(HttpMethod.POST, url)

    @classmethod
    def put(cls, url: str) -> "RestRequest":
        """Create a PUT request."""
        return cls.new(HttpMethod.PUT, url)

    @classmethod
    def delete(cls, url: str) -> "RestRequest":
        """Create a DELETE request."""
        return cls.new(HttpMethod.DELETE, url)

    def with_header(self, name: str, value: str) -> "RestRequest":
        """Append a header pair."""
        return self.model_copy(update={"headers": (*self.headers, (name, value))})

    def with_body(self, body: bytes | str) -> "RestRequest":
        """Set the request body. Text is encoded as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return self.model_copy(update={"body": body})

    def with_timeout(self, timeout: float | timedelta) -> "RestRequest":
        """Set the request timeout.

        Args:
            timeout: Timeout in seconds or as a timedelta.

        Returns:
            Request with the timeout applied.
        """
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        return self.model_validate({**self.model_dump(), "timeout": timeout})

    def with_retry_policy(self, policy: RetryPolicy | None) -> "RestRequest":
        """Attach (or clear) a retry policy."""
        return self.model_copy(update={"retry_policy": policy})

    def with_retry_on_status(self, status: int, max_retries: int) -> "RestRequest":
        """Enroll a status for retry, creating the policy if needed.

        Args:
            status: HTTP status to retry on.
            max_retries: Maximum number of retries for the policy.

        Returns:
            Request with the updated policy.
        """
        statuses = self.retry_policy.statuses if self.retry_policy else frozenset()
        policy = RetryPolicy(max_retries=max_retries, statuses=statuses | {status})
        return self.with_retry_policy(policy)

    def timeout_or(self, default: float = DEFAULT_TIMEOUT_SECONDS) -> float:
        """Get the request timeout, falling back to ``default``."""
        return self.timeout if self.timeout is not None else default

    @property
    def route_key(self) -> tuple[HttpMethod, str]:
        """Exact (method, url) key used for route matching."""
        return (self.method, self.url)


class RestResponse(BaseModel):
    """Response returned by a transport."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: int = Field(
        ge=HTTP_STATUS_MIN, le=HTTP_STATUS_MAX, description="HTTP status code"
    )
    headers: HeaderList = Field(default=(), description="Ordered header pairs")
    body: bytes = Field(default=b"", description="Response body")
    elapsed: timedelta = Field(
        default_factory=timedelta, description="Time spent on the request"
    )

    @property
    def is_success(self) -> bool:
        """Check if the status is 2xx."""
        return HTTP_STATUS_OK_MIN <= self.status < HTTP_STATUS_OK_MAX

    @property
    def body_size(self) -> int:
        """Get the size of the response body in bytes."""
        return len(self.body)

    def header(self, name: str) -> str | None:
        """Get the first value of a header, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def text(self) -> str:
        """Decode the body as UTF-8 text."""
        return self.body.decode("utf-8", errors="replace")

    def decode_json(
        self, response_type: type[T], codec: JsonCodec | None = None
    ) -> T:
        """Decode the body as JSON.

        Args:
            response_type: Target type.
            codec: Codec to use, defaults to the pydantic codec.

        Returns:
            Decoded value.

        Raises:
            RestError: PARSE error if decoding fails.
        """
        return (codec or get_default_codec()).decode(self.body, response_type)

    def to_raw(self) -> "RawResponse":
        """Reduce to the raw (status, body, elapsed) tuple."""
        return RawResponse(status=self.status, body=self.body, elapsed=self.elapsed)


class RawResponse(NamedTuple):
    """Minimal response tuple returned by ``execute_raw``."""

    status: int
    body: bytes
    elapsed: timedelta
