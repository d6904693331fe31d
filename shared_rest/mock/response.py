"""Canned responses served by the mock transport."""

from datetime import timedelta
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from shared_rest.rest.codec import JsonCodec, get_default_codec
from shared_rest.rest.constants import HTTP_STATUS_MAX, HTTP_STATUS_MIN
from shared_rest.rest.models import HeaderList, RestResponse


class MockResponse(BaseModel):
    """A scripted response frame.

    Attributes:
        status: HTTP status code.
        headers: Ordered header pairs.
        body: Response body.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: Annotated[int, Field(ge=HTTP_STATUS_MIN, le=HTTP_STATUS_MAX)]
    headers: HeaderList = ()
    body: bytes = b""

    @classmethod
    def new(cls, status: int, body: bytes | str = b"") -> "MockResponse":
        """Create a response from bytes or UTF-8 text."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        return cls(status=status, body=body)

    @classmethod
    def from_bytes(cls, status: int, body: bytes) -> "MockResponse":
        """Create a response with a raw body."""
        return cls.new(status, body)

    @classmethod
    def text(cls, status: int, body: str) -> "MockResponse":
        """Create a text response."""
        return cls.new(status, body).with_header(
            "content-type", "text/plain; charset=utf-8"
        )

    @classmethod
    def from_json(
        cls, status: int, payload: object, codec: JsonCodec | None = None
    ) -> "MockResponse":
        """Create a JSON response.

        Args:
            status: HTTP status code.
            payload: Value to encode.
            codec: Codec to encode with, defaults to the pydantic codec.

        Returns:
            Response with the encoded payload.

        Raises:
            RestError: PARSE if the payload cannot be encoded.
        """
        body = (codec or get_default_codec()).encode(payload)
        return cls.new(status, body).with_header("content-type", "application/json")

    @classmethod
    def json_error(
        cls, status: int, payload: object, codec: JsonCodec | None = None
    ) -> "MockResponse":
        """Create a JSON error response."""
        return cls.from_json(status, payload, codec)

    @classmethod
    def text_error(cls, status: int, message: str) -> "MockResponse":
        """Create a text error response."""
        return cls.text(status, message)

    def with_header(self, name: str, value: str) -> "MockResponse":
        """Append a header pair."""
        return self.model_copy(update={"headers": (*self.headers, (name, value))})

    def to_response(self, elapsed: timedelta) -> RestResponse:
        """Materialize as a transport response.

        Args:
            elapsed: Elapsed time to report.

        Returns:
            RestResponse sharing this frame's body.
        """
        return RestResponse.model_construct(
            status=self.status,
            headers=self.headers,
            body=self.body,
            elapsed=elapsed,
        )
