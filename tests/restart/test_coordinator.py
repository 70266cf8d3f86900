"""
Tests for restart/coordinator.py - Reference Restart Coordinator.

Covers:
- State transitions and their irreversibility
- Context bookkeeping for prepare/remove
- Launcher invocation on initialize and on explicit restart
"""
from unittest.mock import Mock

import pytest

from conftest import make_module
from core.errors import RestartError, RestartStateError
from core.types import CoordinatorState, PartitioningStrategy
from restart.coordinator import RestartCoordinator

DEFAULT = PartitioningStrategy.DEFAULT


@pytest.fixture
def project_modules(tmp_path):
    path = str(tmp_path / "myapp" / "main.py")
    return {"myapp.main": make_module("myapp.main", path)}


@pytest.fixture
def library_modules(tmp_path):
    path = str(tmp_path / "site-packages" / "lib" / "core.py")
    return {"lib.core": make_module("lib.core", path)}


@pytest.fixture
def initialized(project_modules):
    coordinator = RestartCoordinator(modules=project_modules)
    coordinator.initialize(["--reload"], False, DEFAULT, False)
    return coordinator


class TestTransitions:

    def test_starts_uninitialized(self):
        coordinator = RestartCoordinator(modules={})

        assert coordinator.state is CoordinatorState.UNINITIALIZED
        assert coordinator.enabled is False

    def test_initialize_records_arguments(self, initialized):
        assert initialized.state is CoordinatorState.INITIALIZED
        assert initialized.args == ("--reload",)
        assert initialized.development is False
        assert initialized.strategy is DEFAULT
        assert initialized.restart_on_initialize is False
        assert initialized.initial_modules == ("myapp.main",)

    def test_disable(self):
        coordinator = RestartCoordinator(modules={})

        coordinator.disable()

        assert coordinator.state is CoordinatorState.DISABLED
        assert coordinator.enabled is False

    def test_cannot_initialize_twice(self, initialized):
        with pytest.raises(RestartStateError) as exc_info:
            initialized.initialize([], False, DEFAULT, True)

        assert exc_info.value.current == "initialized"
        assert exc_info.value.attempted == "initialize"

    def test_cannot_disable_after_initialize(self, initialized):
        with pytest.raises(RestartStateError):
            initialized.disable()

    def test_cannot_initialize_after_disable(self):
        coordinator = RestartCoordinator(modules={})
        coordinator.disable()

        with pytest.raises(RestartStateError):
            coordinator.initialize([], False, DEFAULT, True)

    def test_finish_is_idempotent(self, initialized):
        initialized.finish()
        initialized.finish()

        assert initialized.state is CoordinatorState.FINISHED

    def test_finish_does_not_leave_disabled(self):
        coordinator = RestartCoordinator(modules={})
        coordinator.disable()

        coordinator.finish()

        assert coordinator.state is CoordinatorState.DISABLED


class TestContexts:

    def test_prepare_tracks_each_context_once(self, initialized):
        context = object()

        initialized.prepare(context)
        initialized.prepare(context)

        assert initialized.prepared_contexts == (context,)

    def test_remove_after_finish(self, initialized):
        context = object()
        initialized.prepare(context)
        initialized.finish()

        initialized.remove(context)

        assert initialized.prepared_contexts == ()

    def test_remove_unknown_context_is_noop(self, initialized):
        kept = object()
        initialized.prepare(kept)

        initialized.remove(object())

        assert initialized.prepared_contexts == (kept,)

    def test_prepare_before_initialize_fails(self):
        with pytest.raises(RestartStateError):
            RestartCoordinator(modules={}).prepare(object())

    def test_prepare_after_finish_fails(self, initialized):
        initialized.finish()

        with pytest.raises(RestartStateError):
            initialized.prepare(object())

    def test_remove_before_initialize_fails(self):
        with pytest.raises(RestartStateError):
            RestartCoordinator(modules={}).remove(object())

    def test_disabled_ignores_contexts(self):
        coordinator = RestartCoordinator(modules={})
        coordinator.disable()

        coordinator.prepare("ctx")
        coordinator.remove("ctx")

        assert coordinator.prepared_contexts == ()


class TestLauncher:

    def test_restart_on_initialize_launches(self, project_modules):
        launcher = Mock()
        coordinator = RestartCoordinator(launcher=launcher, modules=project_modules)

        coordinator.initialize(["serve"], False, DEFAULT, True)

        launcher.assert_called_once_with(("serve",))

    def test_no_launch_without_restart_on_initialize(self, project_modules):
        launcher = Mock()
        coordinator = RestartCoordinator(launcher=launcher, modules=project_modules)

        coordinator.initialize(["serve"], False, DEFAULT, False)

        launcher.assert_not_called()

    def test_no_launch_without_development_modules(self, library_modules):
        launcher = Mock()
        coordinator = RestartCoordinator(launcher=launcher, modules=library_modules)

        coordinator.initialize([], False, DEFAULT, True)

        launcher.assert_not_called()
        assert coordinator.initial_modules == ()

    def test_forced_strategy_launches_for_library_only_code(self, library_modules):
        launcher = Mock()
        coordinator = RestartCoordinator(launcher=launcher, modules=library_modules)

        coordinator.initialize([], False, PartitioningStrategy.FORCE_ALL_DEVELOPMENT, True)

        launcher.assert_called_once_with(())

    def test_explicit_restart_uses_original_args(self, project_modules):
        launcher = Mock()
        coordinator = RestartCoordinator(launcher=launcher, modules=project_modules)
        coordinator.initialize(["a", "b"], False, DEFAULT, False)
        coordinator.finish()

        coordinator.restart()

        launcher.assert_called_once_with(("a", "b"))

    def test_restart_when_disabled_fails(self):
        coordinator = RestartCoordinator(launcher=Mock(), modules={})
        coordinator.disable()

        with pytest.raises(RestartStateError):
            coordinator.restart()

    def test_restart_without_launcher_fails(self, initialized):
        with pytest.raises(RestartError, match="No launcher"):
            initialized.restart()

    def test_launcher_failure_propagates(self, project_modules):
        coordinator = RestartCoordinator(
            launcher=Mock(side_effect=OSError("exec failed")),
            modules=project_modules,
        )

        with pytest.raises(OSError):
            coordinator.initialize([], False, DEFAULT, True)

        assert coordinator.state is CoordinatorState.INITIALIZED
