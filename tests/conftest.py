"""
devrestart - Test Configuration

Pytest fixtures and configuration for all tests.
"""
from types import ModuleType
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from core.types import CoordinatorState, PartitioningStrategy
from observability.logging import LoggingConfig, setup_logging


def make_logging_config(**overrides: Any) -> LoggingConfig:
    """Logging settings for tests; uncached loggers let capture_logs see every event."""
    settings: Dict[str, Any] = {"level": "DEBUG", "json_format": False, "cache_loggers": False}
    settings.update(overrides)
    return LoggingConfig(**settings)


# Configure before any module-level logger is used.
setup_logging(make_logging_config())


class RecordingCoordinator:
    """Coordinator double that records calls and follows the real state changes."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self._state = CoordinatorState.UNINITIALIZED

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def initialize(
        self,
        args: Sequence[str],
        development: bool,
        strategy: PartitioningStrategy,
        restart_on_initialize: bool,
    ) -> None:
        self.calls.append(("initialize", tuple(args), development, strategy, restart_on_initialize))
        self._state = CoordinatorState.INITIALIZED

    def prepare(self, context: Any) -> None:
        self.calls.append(("prepare", context))

    def finish(self) -> None:
        self.calls.append(("finish",))
        if self._state is CoordinatorState.INITIALIZED:
            self._state = CoordinatorState.FINISHED

    def remove(self, context: Any) -> None:
        self.calls.append(("remove", context))

    def disable(self) -> None:
        self.calls.append(("disable",))
        self._state = CoordinatorState.DISABLED


class StubProbe:
    """Agent reloader probe with a fixed answer."""

    def __init__(self, active: bool = False) -> None:
        self.active = active
        self.queries = 0

    def is_active(self) -> bool:
        self.queries += 1
        return self.active


def make_module(name: str, path: Optional[str]) -> ModuleType:
    """Build a module object that appears to be loaded from ``path``."""
    module = ModuleType(name)
    if path is not None:
        module.__file__ = path
    return module


@pytest.fixture
def coordinator() -> RecordingCoordinator:
    return RecordingCoordinator()


@pytest.fixture
def probe() -> StubProbe:
    return StubProbe(active=False)


@pytest.fixture
def environ() -> Dict[str, str]:
    """Raw environment for the Starting-phase override (override unset)."""
    return {"PATH": "/usr/bin"}


@pytest.fixture
def app_context() -> Dict[str, Any]:
    """Stand-in for a prepared application context."""
    return {"name": "sample-app", "beans": ["web", "db"]}


@pytest.fixture
def restore_logging():
    """Put the test logging configuration back after a test reconfigures it."""
    yield
    setup_logging(make_logging_config())
