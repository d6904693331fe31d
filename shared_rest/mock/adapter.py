"""Deterministic in-memory transport for tests.

Provides a mock transport that:
- Replays scripted behaviors (pass, delay, reject, transport faults, drop,
  replay) in FIFO order, scenario steps first
- Serves queued responses by exact (method, URL) route, then from a
  default queue, then a fallback 200 with an empty body
- Records every request and response for assertions
"""

import asyncio
import threading
import time
from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta
from typing import assert_never

import structlog

from shared_rest.mock.behavior import MockBehavior, MockBehaviorKind
from shared_rest.mock.plan import MockBehaviorPlan
from shared_rest.mock.response import MockResponse
from shared_rest.mock.scenario import MockScenario
from shared_rest.mock.state import MockState, MockStateSnapshot, MockTransportPhase
from shared_rest.rest.codec import JsonCodec
from shared_rest.rest.constants import (
    DEFAULT_REJECT_STATUS,
    DROPPED_RESPONSE_MESSAGE,
    HTTP_STATUS_OK,
)
from shared_rest.rest.errors import RestError
from shared_rest.rest.models import HttpMethod, RestRequest, RestResponse
from shared_rest.rest.transport import RestTransport


logger = structlog.get_logger()


class MockAdapterPoisonedError(RuntimeError):
    """Raised when the adapter's state was left inconsistent by a failure."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__(
            "Mock transport state is poisoned: an earlier operation failed "
            "while holding the state lock"
        )


class MockRestAdapter(RestTransport):
    """In-memory ``RestTransport`` replaying scripted outcomes.

    All state lives in one ``MockState`` guarded by a single lock. Each
    state transition takes the lock separately, so concurrent calls are
    linearized per transition, not per call.
    """

    def __init__(self, behavior_plan: MockBehaviorPlan | None = None) -> None:
        """Initialize the adapter.

        Args:
            behavior_plan: Optional plan of scripted behaviors.
        """
        self._state = MockState(behavior_plan=behavior_plan or MockBehaviorPlan())
        self._lock = threading.Lock()
        self._poisoned = False
        self._log = logger.bind(component="mock")

    @classmethod
    def with_behavior_plan(cls, behavior_plan: MockBehaviorPlan) -> "MockRestAdapter":
        """Create an adapter driven by ``behavior_plan``."""
        return cls(behavior_plan)

    @classmethod
    def from_scenario(cls, scenario: MockScenario) -> "MockRestAdapter":
        """Create an adapter that plays ``scenario``."""
        return cls(MockBehaviorPlan.from_scenario(scenario))

    @contextmanager
    def _locked(self) -> Iterator[MockState]:
        """Hold the state lock, poisoning the adapter if the body raises.

        Raises:
            MockAdapterPoisonedError: If a previous holder failed.
        """
        with self._lock:
            if self._poisoned:
                raise MockAdapterPoisonedError
            try:
                yield self._state
            except BaseException:
                self._poisoned = True
                raise

    @property
    def is_poisoned(self) -> bool:
        """Check if the adapter is poisoned."""
        with self._lock:
            return self._poisoned

    # Behavior scripting

    def push_behavior(self, behavior: MockBehavior) -> None:
        """Append a plain behavior."""
        with self._locked() as state:
            state.behavior_plan.push(behavior)

    def push_scenario(self, scenario: MockScenario) -> None:
        """Append every step of a scenario."""
        with self._locked() as state:
            state.behavior_plan.push_scenario(scenario)

    # Queue management

    def queue_response(self, response: MockResponse) -> None:
        """Queue a route-agnostic response."""
        with self._locked() as state:
            state.default_queue.append(response)

    def queue_response_for(
        self, method: HttpMethod | str, url: str, response: MockResponse
    ) -> None:
        """Queue a response for an exact (method, URL) route."""
        key = (HttpMethod.parse(method), url)
        with self._locked() as state:
            state.route_queues.setdefault(key, deque()).append(response)

    def queue_get_response(self, url: str, response: MockResponse) -> None:
        """Queue a response for GET ``url``."""
        self.queue_response_for(HttpMethod.GET, url, response)

    def queue_post_response(self, url: str, response: MockResponse) -> None:
        """Queue a response for POST ``url``."""
        self.queue_response_for(HttpMethod.POST, url, response)

    def queue_error_response(self, url: str, status: int, body: bytes | str) -> None:
        """Queue an error response for GET ``url``."""
        self.queue_error_response_for(HttpMethod.GET, url, status, body)

    def queue_error_response_for(
        self, method: HttpMethod | str, url: str, status: int, body: bytes | str
    ) -> None:
        """Queue an error response with a raw body for a route."""
        self.queue_response_for(method, url, MockResponse.new(status, body))

    def queue_error_text(self, url: str, status: int, message: str) -> None:
        """Queue a text error response for GET ``url``."""
        self.queue_response_for(
            HttpMethod.GET, url, MockResponse.text_error(status, message)
        )

    def queue_error_json(
        self,
        url: str,
        status: int,
        payload: object,
        codec: JsonCodec | None = None,
    ) -> None:
        """Queue a JSON error response for GET ``url``.

        Raises:
            RestError: PARSE if the payload cannot be encoded.
        """
        response = MockResponse.json_error(status, payload, codec)
        self.queue_response_for(HttpMethod.GET, url, response)

    # Introspection

    def snapshot(self) -> MockStateSnapshot:
        """Take an immutable copy of the state."""
        with self._locked() as state:
            return state.snapshot()

    def outbound_count(self) -> int:
        """Number of requests recorded."""
        with self._locked() as state:
            return len(state.outbound_log)

    def inbound_count(self) -> int:
        """Number of responses served."""
        with self._locked() as state:
            return len(state.inbound_log)

    def outbound_log(self) -> list[RestRequest]:
        """Copy of the recorded requests."""
        with self._locked() as state:
            return list(state.outbound_log)

    def inbound_log(self) -> list[RestResponse]:
        """Copy of the served responses."""
        with self._locked() as state:
            return list(state.inbound_log)

    def clear_logs(self) -> None:
        """Clear the request and response logs."""
        with self._locked() as state:
            state.outbound_log.clear()
            state.inbound_log.clear()

    # Transport

    async def execute(self, request: RestRequest) -> RestResponse:
        """Simulate one call.

        Args:
            request: Request to record and route.

        Returns:
            The resolved or fallback response.

        Raises:
            RestError: For scripted failures.
            MockAdapterPoisonedError: If the adapter is poisoned.
        """
        with self._locked() as state:
            behavior = state.behavior_plan.pop()

        if behavior.kind is MockBehaviorKind.DELAY and behavior.duration:
            await asyncio.sleep(behavior.duration.total_seconds())

        start_ns = time.perf_counter_ns()
        with self._locked() as state:
            state.outbound_log.append(request)
            state.request_count += 1
            state.phase = MockTransportPhase.BUSY
            state.last_url = request.url
            state.last_error = None

        self._log.debug(
            "mock_behavior_applied",
            method=request.method.value,
            url=request.url,
            behavior=behavior.kind.value,
        )

        error = self._failure_for(behavior)
        if error is not None:
            with self._locked() as state:
                state.phase = MockTransportPhase.ERROR
                state.last_error = error.message
                state.last_status = error.status
            self._log.debug("mock_failure_raised", **error.to_dict())
            raise error

        with self._locked() as state:
            if behavior.kind is MockBehaviorKind.REPLAY:
                state.default_queue.extend(behavior.frames)
            frame = state.next_response(request.route_key)

        elapsed = timedelta(microseconds=(time.perf_counter_ns() - start_ns) / 1000)
        if frame is None:
            response = RestResponse(status=HTTP_STATUS_OK, elapsed=elapsed)
        else:
            response = frame.to_response(elapsed)

        with self._locked() as state:
            state.inbound_log.append(response)
            state.last_status = response.status
            state.elapsed_total += elapsed
            state.phase = MockTransportPhase.IDLE

        self._log.debug(
            "mock_response_served",
            url=request.url,
            status_code=response.status,
            fallback=frame is None,
            bytes=response.body_size,
        )
        return response

    @staticmethod
    def _failure_for(behavior: MockBehavior) -> RestError | None:
        """Map a behavior onto the error it produces, if any."""
        reason = behavior.reason or behavior.kind.value
        match behavior.kind:
            case (
                MockBehaviorKind.PASS
                | MockBehaviorKind.DELAY
                | MockBehaviorKind.REPLAY
            ):
                return None
            case MockBehaviorKind.DROP:
                return RestError.timeout(DROPPED_RESPONSE_MESSAGE, retryable=False)
            case MockBehaviorKind.CONNECT_ERROR:
                return RestError.connect(reason, behavior.status, behavior.retryable)
            case MockBehaviorKind.SEND_ERROR:
                return RestError.send(reason, behavior.status, behavior.retryable)
            case MockBehaviorKind.RECEIVE_ERROR:
                return RestError.receive(reason, behavior.status, behavior.retryable)
            case MockBehaviorKind.TIMEOUT_ERROR:
                return RestError.timeout(reason, behavior.status, behavior.retryable)
            case MockBehaviorKind.INTERNAL_ERROR:
                return RestError.internal(reason)
            case MockBehaviorKind.REJECT:
                status = behavior.status
                if status is None:
                    status = DEFAULT_REJECT_STATUS
                return RestError.rejected(status, reason, retryable=True)
            case _:
                assert_never(behavior.kind)
