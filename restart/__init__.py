"""
devrestart - Restart Subsystem

Lifecycle-driven restart enablement:
- router: maps lifecycle phases to coordinator calls
- policy: resolves the raw override into an EnablementDecision
- strategy: classifies code regions as restart-eligible or watch-only
- agent: detects agent-based reloaders
- coordinator: reference restart state machine
- multicaster: ordered in-process delivery of lifecycle notifications

Usage:
    from restart import (
        AgentReloaderProbe, LifecycleMulticaster, LifecyclePhaseRouter,
        RestartCoordinator, RestartEnablementPolicy,
    )

    coordinator = RestartCoordinator()
    router = LifecyclePhaseRouter(
        coordinator, RestartEnablementPolicy(AgentReloaderProbe())
    )
    multicaster = LifecycleMulticaster()
    multicaster.add_listener(router)
"""

from .agent import DEFAULT_AGENT_RELOADERS, AgentReloaderProbe
from .coordinator import RestartCoordinator
from .interfaces import (
    AgentReloaderProbeProtocol,
    LifecycleListener,
    RestartCoordinatorProtocol,
)
from .multicaster import LifecycleMulticaster, ListenerFailure
from .policy import ENABLED_VARIABLE, RestartEnablementPolicy, resolve_override
from .router import DEVELOPMENT_FLAG, LifecyclePhaseRouter
from .strategy import (
    DEFAULT_LIBRARY_MARKERS,
    classify_module,
    classify_path,
    development_modules,
    is_development,
)

__all__ = [
    "DEFAULT_AGENT_RELOADERS",
    "DEFAULT_LIBRARY_MARKERS",
    "DEVELOPMENT_FLAG",
    "ENABLED_VARIABLE",
    "AgentReloaderProbe",
    "AgentReloaderProbeProtocol",
    "LifecycleListener",
    "LifecycleMulticaster",
    "LifecyclePhaseRouter",
    "ListenerFailure",
    "RestartCoordinator",
    "RestartCoordinatorProtocol",
    "RestartEnablementPolicy",
    "classify_module",
    "classify_path",
    "development_modules",
    "is_development",
    "resolve_override",
]
