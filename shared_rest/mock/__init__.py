"""In-memory mock transport for deterministic tests.

Scripted behaviors, route-aware response queues, and lock-protected
request/response logs with immutable snapshots.
"""

from shared_rest.mock.adapter import MockAdapterPoisonedError, MockRestAdapter
from shared_rest.mock.behavior import MockBehavior, MockBehaviorKind
from shared_rest.mock.plan import MockBehaviorPlan
from shared_rest.mock.response import MockResponse
from shared_rest.mock.scenario import (
    MockScenario,
    MockScenarioStep,
    MockScenarioStepKind,
)
from shared_rest.mock.state import MockStateSnapshot, MockTransportPhase


__all__ = [
    # Adapter
    "MockRestAdapter",
    "MockAdapterPoisonedError",
    # Scripting
    "MockBehavior",
    "MockBehaviorKind",
    "MockBehaviorPlan",
    "MockScenario",
    "MockScenarioStep",
    "MockScenarioStepKind",
    # Responses
    "MockResponse",
    # State
    "MockStateSnapshot",
    "MockTransportPhase",
]
