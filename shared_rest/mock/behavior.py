"""Scripted transport outcomes for the mock transport."""

from collections.abc import Iterable
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from shared_rest.mock.response import MockResponse


class MockBehaviorKind(str, Enum):
    """Kinds of scripted outcomes.

    - PASS: Serve the next queued response
    - DELAY: Sleep, then serve the next queued response
    - REJECT: Fail with REJECTED and the configured status
    - CONNECT_ERROR / SEND_ERROR / RECEIVE_ERROR / TIMEOUT_ERROR: Fail with
      the matching transport error kind
    - INTERNAL_ERROR: Fail with INTERNAL
    - DROP: Fail as if the response never arrived (TIMEOUT)
    - REPLAY: Append frames to the default queue, then serve
    """

    PASS = "pass"
    DELAY = "delay"
    REJECT = "reject"
    CONNECT_ERROR = "connect_error"
    SEND_ERROR = "send_error"
    RECEIVE_ERROR = "receive_error"
    TIMEOUT_ERROR = "timeout_error"
    INTERNAL_ERROR = "internal_error"
    DROP = "drop"
    REPLAY = "replay"


class MockBehavior(BaseModel):
    """One scripted outcome, consumed by a single simulated call.

    Build instances through the classmethods; the fields used depend
    on ``kind``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: MockBehaviorKind
    duration: timedelta | None = None
    status: int | None = None
    reason: str | None = None
    retryable: bool = False
    frames: tuple[MockResponse, ...] = Field(default=())

    @classmethod
    def pass_through(cls) -> "MockBehavior":
        """Serve the next queued response."""
        return cls(kind=MockBehaviorKind.PASS)

    @classmethod
    def delay(cls, ms: int) -> "MockBehavior":
        """Sleep ``ms`` milliseconds before serving."""
        return cls(kind=MockBehaviorKind.DELAY, duration=timedelta(milliseconds=ms))

    @classmethod
    def reject(cls, status: int, reason: str) -> "MockBehavior":
        """Fail with REJECTED and ``status``."""
        return cls(kind=MockBehaviorKind.REJECT, status=status, reason=reason)

    @classmethod
    def connect_error(
        cls, reason: str, status: int | None = None, retryable: bool = False
    ) -> "MockBehavior":
        """Fail with CONNECT."""
        return cls(
            kind=MockBehaviorKind.CONNECT_ERROR,
            status=status,
            reason=reason,
            retryable=retryable,
        )

    @classmethod
    def send_error(
        cls, reason: str, status: int | None = None, retryable: bool = False
    ) -> "MockBehavior":
        """Fail with SEND."""
        return cls(
            kind=MockBehaviorKind.SEND_ERROR,
            status=status,
            reason=reason,
            retryable=retryable,
        )

    @classmethod
    def receive_error(
        cls, reason: str, status: int | None = None, retryable: bool = False
    ) -> "MockBehavior":
        """Fail with RECEIVE."""
        return cls(
            kind=MockBehaviorKind.RECEIVE_ERROR,
            status=status,
            reason=reason,
            retryable=retryable,
        )

    @classmethod
    def timeout_error(
        cls, reason: str, status: int | None = None, retryable: bool = False
    ) -> "MockBehavior":
        """Fail with TIMEOUT."""
        return cls(
            kind=MockBehaviorKind.TIMEOUT_ERROR,
            status=status,
            reason=reason,
            retryable=retryable,
        )

    @classmethod
    def internal_error(cls, reason: str) -> "MockBehavior":
        """Fail with INTERNAL."""
        return cls(kind=MockBehaviorKind.INTERNAL_ERROR, reason=reason)

    @classmethod
    def drop_response(cls) -> "MockBehavior":
        """Drop the response; the call fails with TIMEOUT."""
        return cls(kind=MockBehaviorKind.DROP)

    @classmethod
    def replay(cls, frames: Iterable[MockResponse]) -> "MockBehavior":
        """Append ``frames`` to the default queue, then serve."""
        return cls(kind=MockBehaviorKind.REPLAY, frames=tuple(frames))
