"""
devrestart - Core Module

Foundational pieces shared by every other package:
- Unified error handling
- Type definitions for lifecycle notifications and decisions
- The composition root that wires the restart subsystem together

Usage:
    from core import LifecycleNotification
    from core.bootstrap import build_runtime

    runtime = build_runtime()
    runtime.multicaster.publish(LifecycleNotification.starting(sys.argv[1:]))
"""

from core.errors import (
    ConfigurationError,
    DevRestartError,
    ErrorContext,
    ErrorSeverity,
    LifecycleDispatchError,
    RestartError,
    RestartStateError,
)
from core.types import (
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    CodeRegion,
    CoordinatorState,
    EnablementDecision,
    LifecycleNotification,
    LifecyclePhase,
    OverrideState,
    PartitioningStrategy,
)

__all__ = [
    # Errors
    "ConfigurationError",
    "DevRestartError",
    "ErrorContext",
    "ErrorSeverity",
    "LifecycleDispatchError",
    "RestartError",
    "RestartStateError",
    # Types
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "CodeRegion",
    "CoordinatorState",
    "EnablementDecision",
    "LifecycleNotification",
    "LifecyclePhase",
    "OverrideState",
    "PartitioningStrategy",
]
