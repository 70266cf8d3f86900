"""
devrestart - Centralized Type Definitions

Lifecycle notifications, decision records and the enums shared by the
router, the policy and the coordinator.

Usage:
    from core.types import LifecycleNotification, LifecyclePhase

    listener.on_notification(LifecycleNotification.starting(sys.argv[1:]))
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

# =============================================================================
# DISPATCH PRIORITY
# =============================================================================

# Lower values run earlier.
HIGHEST_PRECEDENCE = -(2**31)
LOWEST_PRECEDENCE = 2**31 - 1


# =============================================================================
# ENUMS
# =============================================================================


class LifecyclePhase(Enum):
    """Phases announced by the host, in the order they occur."""
    STARTING = "starting"
    PREPARED = "prepared"
    READY = "ready"
    FAILED = "failed"


class OverrideState(Enum):
    """Outcome of reading the raw restart override."""
    UNSET = "unset"
    FORCE_ENABLED = "force_enabled"
    DISABLED = "disabled"


class PartitioningStrategy(Enum):
    """
    How code regions are split between restart-eligible and watch-only.

    DEFAULT uses the packaging heuristics; FORCE_ALL_DEVELOPMENT treats every
    region as restart-eligible.
    """
    DEFAULT = "default"
    FORCE_ALL_DEVELOPMENT = "force_all_development"


class CodeRegion(Enum):
    """Classification of a module or source path."""
    DEVELOPMENT = "development"  # restart-eligible
    LIBRARY = "library"          # watched, never triggers a restart


class CoordinatorState(Enum):
    """
    Restart coordinator states.

    UNINITIALIZED → {DISABLED | INITIALIZED} → FINISHED
    """
    UNINITIALIZED = "uninitialized"
    DISABLED = "disabled"
    INITIALIZED = "initialized"
    FINISHED = "finished"


# =============================================================================
# RECORDS
# =============================================================================


@dataclass(frozen=True, slots=True)
class LifecycleNotification:
    """
    Immutable record of one lifecycle transition.

    Starting carries the startup arguments; the other phases carry a handle
    to the prepared application context.
    """
    phase: LifecyclePhase
    args: Tuple[str, ...] = ()
    context: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def starting(cls, args: Sequence[str] = ()) -> "LifecycleNotification":
        return cls(phase=LifecyclePhase.STARTING, args=tuple(args))

    @classmethod
    def prepared(cls, context: Any) -> "LifecycleNotification":
        return cls(phase=LifecyclePhase.PREPARED, context=context)

    @classmethod
    def ready(cls, context: Any = None) -> "LifecycleNotification":
        return cls(phase=LifecyclePhase.READY, context=context)

    @classmethod
    def failed(
        cls,
        context: Any = None,
        error: Optional[BaseException] = None,
    ) -> "LifecycleNotification":
        return cls(phase=LifecyclePhase.FAILED, context=context, error=error)


@dataclass(frozen=True, slots=True)
class EnablementDecision:
    """Resolved restart policy for one process run."""
    source: OverrideState
    enabled: bool
    restart_on_initialize: bool
    strategy: Optional[PartitioningStrategy]
    agent_reloader_active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source.value,
            "enabled": self.enabled,
            "restart_on_initialize": self.restart_on_initialize,
            "strategy": self.strategy.value if self.strategy else None,
            "agent_reloader_active": self.agent_reloader_active,
        }
