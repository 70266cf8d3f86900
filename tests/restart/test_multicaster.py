"""
Tests for restart/multicaster.py - Lifecycle Multicaster.
"""
import pytest

from conftest import RecordingCoordinator, StubProbe
from core.errors import LifecycleDispatchError
from core.types import LifecycleNotification
from restart.multicaster import LifecycleMulticaster
from restart.policy import RestartEnablementPolicy
from restart.router import LifecyclePhaseRouter


class RecordingListener:
    def __init__(self, name, events, order=None, fail=False):
        self.name = name
        self._events = events
        self._fail = fail
        if order is not None:
            self.order = order

    def on_notification(self, notification):
        self._events.append(f"{self.name}.{notification.phase.value}")
        if self._fail:
            raise RuntimeError(f"{self.name} failed")


class TestOrdering:

    def test_delivers_in_ascending_order(self):
        events = []
        multicaster = LifecycleMulticaster()
        multicaster.add_listener(RecordingListener("late", events, order=100))
        multicaster.add_listener(RecordingListener("early", events, order=-100))
        multicaster.add_listener(RecordingListener("unordered", events))

        multicaster.publish(LifecycleNotification.starting())

        assert events == ["early.starting", "late.starting", "unordered.starting"]

    def test_ties_keep_registration_order(self):
        events = []
        multicaster = LifecycleMulticaster()
        for name in ("a", "b", "c"):
            multicaster.add_listener(RecordingListener(name, events, order=0))

        multicaster.publish(LifecycleNotification.ready())

        assert events == ["a.ready", "b.ready", "c.ready"]

    def test_router_runs_before_default_listeners(self):
        events = []
        coordinator = RecordingCoordinator()
        original_initialize = coordinator.initialize

        def initialize(*args):
            events.append("router.starting")
            original_initialize(*args)

        coordinator.initialize = initialize
        router = LifecyclePhaseRouter(coordinator, RestartEnablementPolicy(StubProbe(), environ={}))

        multicaster = LifecycleMulticaster()
        multicaster.add_listener(RecordingListener("app", events, order=0))
        multicaster.add_listener(router)

        multicaster.publish(LifecycleNotification.starting())

        assert events == ["router.starting", "app.starting"]

    def test_add_is_idempotent_and_remove_detaches(self):
        events = []
        listener = RecordingListener("only", events)
        multicaster = LifecycleMulticaster()
        multicaster.add_listener(listener)
        multicaster.add_listener(listener)

        multicaster.publish(LifecycleNotification.starting())
        multicaster.remove_listener(listener)
        multicaster.publish(LifecycleNotification.ready())

        assert events == ["only.starting"]
        assert multicaster.listeners == []


class TestFailures:

    def test_failures_are_absorbed_by_default(self):
        events = []
        multicaster = LifecycleMulticaster()
        multicaster.add_listener(RecordingListener("broken", events, order=1, fail=True))
        multicaster.add_listener(RecordingListener("healthy", events, order=2))

        failures = multicaster.publish(LifecycleNotification.starting())

        assert events == ["broken.starting", "healthy.starting"]
        assert [failure.listener for failure in failures] == ["broken"]
        assert isinstance(failures[0].error, RuntimeError)

    def test_fail_fast_raises_dispatch_error(self):
        events = []
        multicaster = LifecycleMulticaster(fail_fast=True)
        multicaster.add_listener(RecordingListener("broken", events, order=1, fail=True))
        multicaster.add_listener(RecordingListener("healthy", events, order=2))

        with pytest.raises(LifecycleDispatchError) as exc_info:
            multicaster.publish(LifecycleNotification.starting())

        error = exc_info.value
        assert error.phase == "starting"
        assert error.listener == "broken"
        assert isinstance(error.cause, RuntimeError)
        assert events == ["broken.starting"]
        assert error.to_dict()["context"]["component"] == "multicaster"

    def test_clean_publish_returns_no_failures(self):
        multicaster = LifecycleMulticaster()
        multicaster.add_listener(RecordingListener("ok", []))

        assert multicaster.publish(LifecycleNotification.starting()) == []
