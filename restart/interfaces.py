"""
Collaborator contracts used by the lifecycle router.

Any object with these methods can stand in for the bundled implementations;
the router only depends on the protocols.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from core.types import CoordinatorState, LifecycleNotification, PartitioningStrategy


@runtime_checkable
class RestartCoordinatorProtocol(Protocol):
    """Process-wide restart state machine."""

    @property
    def state(self) -> CoordinatorState:
        ...

    def initialize(
        self,
        args: Sequence[str],
        development: bool,
        strategy: PartitioningStrategy,
        restart_on_initialize: bool,
    ) -> None:
        ...

    def prepare(self, context: Any) -> None:
        ...

    def finish(self) -> None:
        """Idempotent."""
        ...

    def remove(self, context: Any) -> None:
        ...

    def disable(self) -> None:
        ...


@runtime_checkable
class AgentReloaderProbeProtocol(Protocol):
    """Signals whether an agent-based reloader is active in the process."""

    def is_active(self) -> bool:
        ...


@runtime_checkable
class LifecycleListener(Protocol):
    """Receives lifecycle notifications from the host."""

    def on_notification(self, notification: LifecycleNotification) -> None:
        ...
