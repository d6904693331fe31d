"""Process-wide counters for rest client calls."""

import threading
from dataclasses import dataclass, field
from typing import ClassVar

from shared_rest.rest.errors import RestError
from shared_rest.rest.models import RestResponse


@dataclass
class RestMetrics:
    """Counters for rest client operations.

    A single attempt ends in exactly one of: a response (counted per
    status), or a transport failure (counted per error kind). Checked
    calls additionally record how many attempts they took and, when the
    final status is not 2xx, a rejection per status.
    """

    responses_by_status: dict[int, int] = field(default_factory=dict)
    transport_failures_by_kind: dict[str, int] = field(default_factory=dict)
    rejections_by_status: dict[int, int] = field(default_factory=dict)
    parse_failures_total: int = 0
    retries_total: int = 0
    checked_calls_total: int = 0
    checked_attempts_total: int = 0
    max_attempts: int = 0
    bytes_received_total: int = 0
    duration_ms_total: float = 0.0

    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    _instance: ClassVar["RestMetrics | None"] = None
    _instance_lock: ClassVar[threading.Lock] = threading.Lock()

    @classmethod
    def get_instance(cls) -> "RestMetrics":
        """Get singleton metrics instance."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next caller starts from zero."""
        with cls._instance_lock:
            cls._instance = None

    def record_response(self, response: RestResponse, duration_ms: float) -> None:
        """Record an attempt that produced a response of any status."""
        with self._lock:
            self.responses_by_status[response.status] = (
                self.responses_by_status.get(response.status, 0) + 1
            )
            self.bytes_received_total += response.body_size
            self.duration_ms_total += duration_ms

    def record_transport_failure(self, error: RestError) -> None:
        """Record an attempt that failed before a response was produced."""
        key = error.kind.value
        with self._lock:
            self.transport_failures_by_kind[key] = (
                self.transport_failures_by_kind.get(key, 0) + 1
            )

    def record_rejection(self, status: int) -> None:
        """Record a checked call that ended on a non-2xx status."""
        with self._lock:
            self.rejections_by_status[status] = (
                self.rejections_by_status.get(status, 0) + 1
            )

    def record_parse_failure(self) -> None:
        with self._lock:
            self.parse_failures_total += 1

    def record_retry(self) -> None:
        with self._lock:
            self.retries_total += 1

    def record_checked_call(self, attempts: int) -> None:
        """Record a finished checked call and the attempts it made.

        Args:
            attempts: Transport calls made, at least 1.
        """
        with self._lock:
            self.checked_calls_total += 1
            self.checked_attempts_total += attempts
            self.max_attempts = max(self.max_attempts, attempts)

    @property
    def responses_total(self) -> int:
        return sum(self.responses_by_status.values())

    @property
    def transport_failures_total(self) -> int:
        return sum(self.transport_failures_by_kind.values())

    @property
    def avg_attempts(self) -> float:
        """Mean attempts per checked call, 0.0 before any call."""
        if self.checked_calls_total == 0:
            return 0.0
        return self.checked_attempts_total / self.checked_calls_total

    @property
    def avg_duration_ms(self) -> float:
        """Mean duration of attempts that produced a response."""
        total = self.responses_total
        if total == 0:
            return 0.0
        return self.duration_ms_total / total

    def to_dict(self) -> dict[str, object]:
        """Copy the counters into a plain dictionary for logging."""
        with self._lock:
            return {
                "responses_by_status": dict(self.responses_by_status),
                "transport_failures_by_kind": dict(self.transport_failures_by_kind),
                "rejections_by_status": dict(self.rejections_by_status),
                "parse_failures_total": self.parse_failures_total,
                "retries_total": self.retries_total,
                "checked_calls_total": self.checked_calls_total,
                "checked_attempts_total": self.checked_attempts_total,
                "max_attempts": self.max_attempts,
                "bytes_received_total": self.bytes_received_total,
                "duration_ms_total": self.duration_ms_total,
            }
