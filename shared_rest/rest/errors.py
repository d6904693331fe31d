"""Error taxonomy for the rest layer.

Every failure, whether it comes from the network transport, the mock
transport, or local decoding, surfaces as a single ``RestError`` carrying one
``RestErrorKind`` from a closed set.
"""

from enum import Enum

import httpx

from shared_rest.rest.constants import (
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
)


class RestErrorKind(str, Enum):
    """Classification of rest errors.

    - CONNECT: Could not establish a connection
    - SEND: Failure while sending the request
    - RECEIVE: Failure while reading the response body
    - TIMEOUT: The request timed out (never retried by the client)
    - REJECTED: Non-2xx HTTP status
    - PARSE: Local encode/decode failure
    - INTERNAL: Local or unexpected failure
    - MOCK_TRANSPORT: Synthetic fault raised only by the mock transport
    """

    CONNECT = "CONNECT"
    SEND = "SEND"
    RECEIVE = "RECEIVE"
    TIMEOUT = "TIMEOUT"
    REJECTED = "REJECTED"
    PARSE = "PARSE"
    INTERNAL = "INTERNAL"
    MOCK_TRANSPORT = "MOCK_TRANSPORT"


def is_server_error(status: int) -> bool:
    """Check if a status code is in the 5xx range."""
    return HTTP_STATUS_SERVER_ERROR_MIN <= status < HTTP_STATUS_SERVER_ERROR_MAX


class RestError(Exception):
    """Structured failure of a rest call.

    Provides the kind, optional HTTP status, message and retryable flag
    so callers can branch on ``kind`` for domain-specific handling.
    """

    def __init__(
        self,
        kind: RestErrorKind,
        message: str,
        status: int | None = None,
        retryable: bool = False,
    ) -> None:
        """Initialize the rest error.

        Args:
            kind: Classification of the error.
            message: Human-readable error message.
            status: HTTP status code if available.
            retryable: Whether the failure is transient.
        """
        self.kind = kind
        self.message = message
        self.status = status
        self.retryable = retryable
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"rest error {self.kind.value} status={self.status} "
            f"retryable={self.retryable} {self.message}"
        )

    def __repr__(self) -> str:
        return (
            f"RestError(kind={self.kind.value!r}, status={self.status!r}, "
            f"retryable={self.retryable!r}, message={self.message!r})"
        )

    @property
    def is_retryable(self) -> bool:
        """Check if the failure is marked as transient."""
        return self.retryable

    def to_dict(self) -> dict[str, str | int | bool | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self.kind.value,
            "status": self.status,
            "retryable": self.retryable,
            "message": self.message,
        }

    @classmethod
    def connect(
        cls, message: str, status: int | None = None, retryable: bool = True
    ) -> "RestError":
        """Build a CONNECT error."""
        return cls(RestErrorKind.CONNECT, message, status, retryable)

    @classmethod
    def send(
        cls, message: str, status: int | None = None, retryable: bool = False
    ) -> "RestError":
        """Build a SEND error."""
        return cls(RestErrorKind.SEND, message, status, retryable)

    @classmethod
    def receive(
        cls, message: str, status: int | None = None, retryable: bool = False
    ) -> "RestError":
        """Build a RECEIVE error."""
        return cls(RestErrorKind.RECEIVE, message, status, retryable)

    @classmethod
    def timeout(
        cls, message: str, status: int | None = None, retryable: bool = True
    ) -> "RestError":
        """Build a TIMEOUT error."""
        return cls(RestErrorKind.TIMEOUT, message, status, retryable)

    @classmethod
    def rejected(cls, status: int, message: str, retryable: bool) -> "RestError":
        """Build a REJECTED error for a non-2xx status."""
        return cls(RestErrorKind.REJECTED, message, status, retryable)

    @classmethod
    def parse(cls, message: str) -> "RestError":
        """Build a PARSE error. Parse errors are never retryable."""
        return cls(RestErrorKind.PARSE, message, None, False)

    @classmethod
    def internal(cls, message: str) -> "RestError":
        """Build an INTERNAL error. Internal errors are never retryable."""
        return cls(RestErrorKind.INTERNAL, message, None, False)

    @classmethod
    def mock_transport(
        cls, message: str, status: int | None = None, retryable: bool = False
    ) -> "RestError":
        """Build a MOCK_TRANSPORT error."""
        return cls(RestErrorKind.MOCK_TRANSPORT, message, status, retryable)

    @classmethod
    def from_status(cls, status: int, body: bytes = b"") -> "RestError":
        """Classify a non-2xx response as a REJECTED error.

        Args:
            status: HTTP status code.
            body: Response body, used for the message when it is text.

        Returns:
            REJECTED error, retryable for 5xx statuses only.
        """
        detail = body.decode("utf-8", errors="replace").strip()
        message = f"request rejected with status {status}"
        if detail:
            message = f"{message}: {detail[:200]}"
        return cls.rejected(status, message, retryable=is_server_error(status))

    @classmethod
    def from_httpx(cls, kind: RestErrorKind, exc: httpx.HTTPError) -> "RestError":
        """Map an httpx failure onto the taxonomy.

        Timeouts and connection failures become TIMEOUT and CONNECT whatever
        phase they happened in; other failures keep the given kind.

        Args:
            kind: Kind to use for failures that are neither timeouts nor
                connection errors (SEND or RECEIVE).
            exc: The httpx exception.

        Returns:
            Classified RestError.
        """
        status: int | None = None
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code

        message = str(exc) or exc.__class__.__name__

        if isinstance(exc, httpx.TimeoutException):
            return cls.timeout(message, status, retryable=True)
        if isinstance(exc, httpx.ConnectError):
            return cls.connect(message, status, retryable=True)

        retryable = isinstance(exc, httpx.NetworkError)
        return cls(kind, message, status, retryable)
