"""Prioritized behavior queue for the mock transport."""

from collections import deque
from dataclasses import dataclass, field

from shared_rest.mock.behavior import MockBehavior
from shared_rest.mock.scenario import MockScenario, MockScenarioStep


@dataclass
class MockBehaviorPlan:
    """FIFO queue of scripted outcomes.

    Scenario steps take priority over plain behaviors; when both are
    empty the plan yields PASS. Not thread-safe on its own; the mock
    adapter guards it with its lock.
    """

    _behaviors: deque[MockBehavior] = field(default_factory=deque, repr=False)
    _scenario: deque[MockScenarioStep] = field(default_factory=deque, repr=False)

    @classmethod
    def from_scenario(cls, scenario: MockScenario) -> "MockBehaviorPlan":
        """Create a plan that plays ``scenario`` in order."""
        plan = cls()
        plan.push_scenario(scenario)
        return plan

    def push(self, behavior: MockBehavior) -> "MockBehaviorPlan":
        """Append a plain behavior."""
        self._behaviors.append(behavior)
        return self

    def push_scenario_step(self, step: MockScenarioStep) -> "MockBehaviorPlan":
        """Append a scenario step."""
        self._scenario.append(step)
        return self

    def push_scenario(self, scenario: MockScenario) -> "MockBehaviorPlan":
        """Append every step of ``scenario``."""
        self._scenario.extend(scenario)
        return self

    def pop(self) -> MockBehavior:
        """Take the next behavior.

        Returns:
            Next scenario step as a behavior, else the next plain
            behavior, else PASS.
        """
        if self._scenario:
            return self._scenario.popleft().to_behavior()
        if self._behaviors:
            return self._behaviors.popleft()
        return MockBehavior.pass_through()

    @property
    def behavior_remaining(self) -> int:
        """Number of plain behaviors left."""
        return len(self._behaviors)

    @property
    def scenario_remaining(self) -> int:
        """Number of scenario steps left."""
        return len(self._scenario)

    def __len__(self) -> int:
        return len(self._behaviors) + len(self._scenario)

    def clear(self) -> None:
        """Drop every queued behavior and step."""
        self._behaviors.clear()
        self._scenario.clear()
