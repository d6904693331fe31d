"""Mutable engine state and immutable snapshots for the mock transport."""

from collections import deque
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from shared_rest.mock.plan import MockBehaviorPlan
from shared_rest.mock.response import MockResponse
from shared_rest.rest.models import HttpMethod, RestRequest, RestResponse


RouteKey = tuple[HttpMethod, str]


class MockTransportPhase(Enum):
    """Phase of the mock transport.

    IDLE -> BUSY when a call is recorded, BUSY -> IDLE when a response is
    served, BUSY -> ERROR when a scripted failure is raised.
    """

    IDLE = "idle"
    BUSY = "busy"
    ERROR = "error"


@dataclass(frozen=True)
class MockStateSnapshot:
    """Point-in-time copy of the mock transport state.

    Attributes:
        phase: Current phase.
        request_count: Calls recorded so far.
        last_url: URL of the last call.
        last_status: Status of the last response or failure.
        last_error: Message of the last failure, cleared on each call.
        behavior_remaining: Plain behaviors left.
        scenario_remaining: Scenario steps left.
        response_queue_len: Frames left in the default queue.
        route_queue_len: Frames left across all route queues.
        outbound_log: Requests recorded, in order.
        inbound_log: Responses served, in order.
        elapsed_total: Cumulative elapsed time of served responses.
    """

    phase: MockTransportPhase
    request_count: int
    last_url: str | None
    last_status: int | None
    last_error: str | None
    behavior_remaining: int
    scenario_remaining: int
    response_queue_len: int
    route_queue_len: int
    outbound_log: tuple[RestRequest, ...]
    inbound_log: tuple[RestResponse, ...]
    elapsed_total: timedelta

    @property
    def outbound_count(self) -> int:
        """Number of requests recorded."""
        return len(self.outbound_log)

    @property
    def inbound_count(self) -> int:
        """Number of responses served."""
        return len(self.inbound_log)


@dataclass
class MockState:
    """Mutable record owned by one mock transport.

    Must only be touched while holding the owning adapter's lock.
    """

    phase: MockTransportPhase = MockTransportPhase.IDLE
    request_count: int = 0
    last_url: str | None = None
    last_status: int | None = None
    last_error: str | None = None
    behavior_plan: MockBehaviorPlan = field(default_factory=MockBehaviorPlan)
    default_queue: deque[MockResponse] = field(default_factory=deque)
    route_queues: dict[RouteKey, deque[MockResponse]] = field(default_factory=dict)
    outbound_log: list[RestRequest] = field(default_factory=list)
    inbound_log: list[RestResponse] = field(default_factory=list)
    elapsed_total: timedelta = field(default_factory=timedelta)

    def next_response(self, route_key: RouteKey) -> MockResponse | None:
        """Pop the route queue for ``route_key``, else the default queue."""
        queue = self.route_queues.get(route_key)
        if queue:
            return queue.popleft()
        if self.default_queue:
            return self.default_queue.popleft()
        return None

    def snapshot(self) -> MockStateSnapshot:
        """Copy the state into an immutable snapshot."""
        return MockStateSnapshot(
            phase=self.phase,
            request_count=self.request_count,
            last_url=self.last_url,
            last_status=self.last_status,
            last_error=self.last_error,
            behavior_remaining=self.behavior_plan.behavior_remaining,
            scenario_remaining=self.behavior_plan.scenario_remaining,
            response_queue_len=len(self.default_queue),
            route_queue_len=sum(len(q) for q in self.route_queues.values()),
            outbound_log=tuple(self.outbound_log),
            inbound_log=tuple(self.inbound_log),
            elapsed_total=self.elapsed_total,
        )
