"""Unit tests for mock behaviors, scenarios and plans."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from shared_rest.mock.behavior import MockBehavior, MockBehaviorKind
from shared_rest.mock.plan import MockBehaviorPlan
from shared_rest.mock.response import MockResponse
from shared_rest.mock.scenario import (
    MockScenario,
    MockScenarioStep,
    MockScenarioStepKind,
)


class TestMockBehavior:
    """Tests for MockBehavior constructors."""

    def test_delay_duration(self) -> None:
        """delay stores milliseconds as a timedelta."""
        behavior = MockBehavior.delay(25)

        assert behavior.kind == MockBehaviorKind.DELAY
        assert behavior.duration == timedelta(milliseconds=25)

    def test_reject(self) -> None:
        """reject carries status and reason."""
        behavior = MockBehavior.reject(503, "busy")

        assert behavior.status == 503
        assert behavior.reason == "busy"

    def test_transport_error_flags(self) -> None:
        """Transport errors carry optional status and retryable flag."""
        behavior = MockBehavior.receive_error("reset", 502, True)

        assert behavior.kind == MockBehaviorKind.RECEIVE_ERROR
        assert behavior.status == 502
        assert behavior.retryable is True
        assert MockBehavior.send_error("x").retryable is False

    def test_replay_frames(self) -> None:
        """replay freezes the given frames."""
        frames = [MockResponse.new(200, "a"), MockResponse.new(201, "b")]

        behavior = MockBehavior.replay(frames)

        assert behavior.frames == tuple(frames)

    def test_frozen(self) -> None:
        """Behaviors are immutable."""
        behavior = MockBehavior.pass_through()

        with pytest.raises(ValidationError):
            behavior.kind = MockBehaviorKind.DROP  # type: ignore[misc]


class TestMockScenario:
    """Tests for scenario scripting."""

    def test_fluent_order(self) -> None:
        """Steps are kept in call order."""
        scenario = (
            MockScenario()
            .reject(503, "busy")
            .delay(10)
            .drop_response()
            .pass_through()
        )

        kinds = [step.kind for step in scenario]

        assert kinds == [
            MockScenarioStepKind.REJECT,
            MockScenarioStepKind.DELAY,
            MockScenarioStepKind.DROP,
            MockScenarioStepKind.PASS,
        ]
        assert len(scenario) == 4

    def test_reject_defaults(self) -> None:
        """REJECT steps without status or message use 500 and "rejected"."""
        step = MockScenarioStep(kind=MockScenarioStepKind.REJECT)

        behavior = step.to_behavior()

        assert behavior.kind == MockBehaviorKind.REJECT
        assert behavior.status == 500
        assert behavior.reason == "rejected"

    def test_delay_defaults_to_zero(self) -> None:
        """DELAY steps without a duration sleep for zero."""
        behavior = MockScenarioStep(kind=MockScenarioStepKind.DELAY).to_behavior()

        assert behavior.duration == timedelta(0)

    def test_replay_step_keeps_frames(self) -> None:
        """REPLAY steps convert into replay behaviors with their frames."""
        frame = MockResponse.new(202, "queued")

        step = MockScenario().replay([frame]).steps[0]

        assert step.to_behavior() == MockBehavior.replay([frame])

    def test_initial_steps(self) -> None:
        """Scenarios can start from existing steps."""
        step = MockScenarioStep(kind=MockScenarioStepKind.PASS)

        assert MockScenario([step]).steps == (step,)


class TestMockBehaviorPlan:
    """Tests for plan ordering."""

    def test_empty_plan_passes(self) -> None:
        """An exhausted plan yields PASS."""
        plan = MockBehaviorPlan()

        assert plan.pop().kind == MockBehaviorKind.PASS
        assert plan.pop().kind == MockBehaviorKind.PASS

    def test_behaviors_fifo(self) -> None:
        """Plain behaviors pop in push order."""
        plan = (
            MockBehaviorPlan()
            .push(MockBehavior.reject(503, "first"))
            .push(MockBehavior.drop_response())
        )

        assert plan.pop().reason == "first"
        assert plan.pop().kind == MockBehaviorKind.DROP
        assert plan.pop().kind == MockBehaviorKind.PASS

    def test_scenario_before_behaviors(self) -> None:
        """Scenario steps win over plain behaviors."""
        plan = MockBehaviorPlan().push(MockBehavior.drop_response())
        plan.push_scenario(MockScenario().reject(429, "slow down"))

        assert plan.pop().status == 429
        assert plan.pop().kind == MockBehaviorKind.DROP

    def test_counts_and_clear(self) -> None:
        """Remaining counts track both queues."""
        plan = MockBehaviorPlan.from_scenario(MockScenario().pass_through())
        plan.push(MockBehavior.delay(1))
        plan.push_scenario_step(MockScenarioStep(kind=MockScenarioStepKind.DROP))

        assert plan.scenario_remaining == 2
        assert plan.behavior_remaining == 1
        assert len(plan) == 3

        plan.clear()

        assert len(plan) == 0
