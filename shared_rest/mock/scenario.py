"""Fluent scenario scripting for the mock transport."""

from collections.abc import Iterable, Iterator
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict

from shared_rest.mock.behavior import MockBehavior, MockBehaviorKind
from shared_rest.mock.response import MockResponse
from shared_rest.rest.constants import DEFAULT_REJECT_REASON, DEFAULT_REJECT_STATUS


class MockScenarioStepKind(str, Enum):
    """Kinds of scenario steps."""

    PASS = "pass"
    DELAY = "delay"
    REJECT = "reject"
    DROP = "drop"
    REPLAY = "replay"


class MockScenarioStep(BaseModel):
    """One step of a scenario.

    Attributes:
        kind: Step kind.
        status: Status for REJECT steps (defaults to 500).
        message: Reason for REJECT steps (defaults to "rejected").
        delay: Duration for DELAY steps (defaults to zero).
        frames: Frames for REPLAY steps.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: MockScenarioStepKind
    status: int | None = None
    message: str | None = None
    delay: timedelta | None = None
    frames: tuple[MockResponse, ...] = ()

    def to_behavior(self) -> MockBehavior:
        """Convert the step into the equivalent behavior."""
        match self.kind:
            case MockScenarioStepKind.PASS:
                return MockBehavior.pass_through()
            case MockScenarioStepKind.DELAY:
                return MockBehavior(
                    kind=MockBehaviorKind.DELAY, duration=self.delay or timedelta(0)
                )
            case MockScenarioStepKind.REJECT:
                return MockBehavior.reject(
                    self.status if self.status is not None else DEFAULT_REJECT_STATUS,
                    self.message or DEFAULT_REJECT_REASON,
                )
            case MockScenarioStepKind.DROP:
                return MockBehavior.drop_response()
            case MockScenarioStepKind.REPLAY:
                return MockBehavior.replay(self.frames)


class MockScenario:
    """Ordered script of steps, built fluently.

    Example:
        MockScenario().reject(503, "busy").delay(50).pass_through()
    """

    def __init__(self, steps: Iterable[MockScenarioStep] = ()) -> None:
        """Initialize the scenario.

        Args:
            steps: Initial steps, in order.
        """
        self._steps: list[MockScenarioStep] = list(steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[MockScenarioStep]:
        return iter(self._steps)

    @property
    def steps(self) -> tuple[MockScenarioStep, ...]:
        """Get the steps in order."""
        return tuple(self._steps)

    def push(self, step: MockScenarioStep) -> "MockScenario":
        """Append a prebuilt step."""
        self._steps.append(step)
        return self

    def pass_through(self) -> "MockScenario":
        """Append a PASS step."""
        return self.push(MockScenarioStep(kind=MockScenarioStepKind.PASS))

    def delay(self, ms: int) -> "MockScenario":
        """Append a DELAY step of ``ms`` milliseconds."""
        return self.push(
            MockScenarioStep(
                kind=MockScenarioStepKind.DELAY, delay=timedelta(milliseconds=ms)
            )
        )

    def reject(self, status: int, message: str) -> "MockScenario":
        """Append a REJECT step."""
        return self.push(
            MockScenarioStep(
                kind=MockScenarioStepKind.REJECT, status=status, message=message
            )
        )

    def drop_response(self) -> "MockScenario":
        """Append a DROP step."""
        return self.push(MockScenarioStep(kind=MockScenarioStepKind.DROP))

    def replay(self, frames: Iterable[MockResponse]) -> "MockScenario":
        """Append a REPLAY step serving ``frames``."""
        return self.push(
            MockScenarioStep(kind=MockScenarioStepKind.REPLAY, frames=tuple(frames))
        )
