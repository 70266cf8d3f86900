"""
Property tests for restart enablement and phase dispatch.

Run with: pytest tests/property -v
"""
from typing import List

from hypothesis import given, settings
from hypothesis import strategies as st

from conftest import RecordingCoordinator, StubProbe
from core.types import LifecycleNotification, OverrideState, PartitioningStrategy
from restart.policy import ENABLED_VARIABLE, RestartEnablementPolicy, resolve_override
from restart.router import LifecyclePhaseRouter

override_values = st.one_of(
    st.none(),
    st.sampled_from(["true", "TRUE", "True", "false", "FALSE", ""]),
    st.text(max_size=12),
)

startup_args = st.lists(st.text(max_size=8), max_size=4)

# Ready or Failed ends every run.
terminal_phases = st.sampled_from(["ready", "failed"])


def run(override, agent_active, args, terminal) -> RecordingCoordinator:
    coordinator = RecordingCoordinator()
    environ = {} if override is None else {ENABLED_VARIABLE: override}
    router = LifecyclePhaseRouter(
        coordinator,
        RestartEnablementPolicy(StubProbe(agent_active), environ=environ),
    )
    router.on_notification(LifecycleNotification.starting(args))
    router.on_notification(LifecycleNotification.prepared("ctx"))
    if terminal == "ready":
        router.on_notification(LifecycleNotification.ready("ctx"))
    else:
        router.on_notification(LifecycleNotification.failed("ctx"))
    return coordinator


@given(raw=override_values)
def test_override_parsing_is_total(raw):
    state = resolve_override(raw)

    if raw is None:
        assert state is OverrideState.UNSET
    elif raw.lower() == "true":
        assert state is OverrideState.FORCE_ENABLED
    else:
        assert state is OverrideState.DISABLED


@settings(max_examples=200)
@given(
    override=override_values,
    agent_active=st.booleans(),
    args=startup_args,
    terminal=terminal_phases,
)
def test_exactly_one_decision_per_run(override, agent_active, args, terminal):
    coordinator = run(override, agent_active, args, terminal)
    names: List[str] = coordinator.names

    assert names.count("initialize") + names.count("disable") == 1
    assert names[0] in ("initialize", "disable")

    expected_tail = ["prepare", "finish"] if terminal == "ready" else ["prepare", "finish", "remove"]
    assert names[1:] == expected_tail


@given(
    override=override_values,
    agent_active=st.booleans(),
    args=startup_args,
)
def test_initialize_arguments_follow_policy(override, agent_active, args):
    coordinator = run(override, agent_active, args, "ready")
    first = coordinator.calls[0]

    if override is not None and override.lower() != "true":
        assert first == ("disable",)
        return

    _, passed_args, development, strategy, restart_on_initialize = first
    assert passed_args == tuple(args)
    assert development is False
    assert restart_on_initialize is (not agent_active)
    if override is None:
        assert strategy is PartitioningStrategy.DEFAULT
    else:
        assert strategy is PartitioningStrategy.FORCE_ALL_DEVELOPMENT
