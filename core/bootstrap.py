"""
devrestart - Application Bootstrap

Composition root for the restart subsystem. Wires configuration, the
agent reloader probe, the enablement policy, the coordinator, the router
and the multicaster, and drives a host application through its lifecycle:

    STARTING → PREPARED → READY
                        ↘ FAILED (when the application body raises)

Usage:
    from core.bootstrap import build_runtime, lifecycle

    runtime = build_runtime(launcher=relaunch)
    with lifecycle(runtime, sys.argv[1:], context=app) as ctx:
        ctx.serve()
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, TypeVar

from config import Config, get_config
from core.types import LifecycleNotification
from observability import get_logger, setup_observability
from restart.agent import AgentReloaderProbe
from restart.coordinator import Launcher, RestartCoordinator
from restart.multicaster import LifecycleMulticaster
from restart.policy import RestartEnablementPolicy
from restart.router import LifecyclePhaseRouter

logger = get_logger("devrestart.bootstrap")

T = TypeVar("T")


@dataclass(frozen=True)
class RestartRuntime:
    """Everything the host needs to announce lifecycle phases."""
    config: Config
    probe: AgentReloaderProbe
    policy: RestartEnablementPolicy
    coordinator: RestartCoordinator
    router: LifecyclePhaseRouter
    multicaster: LifecycleMulticaster

    def publish(self, notification: LifecycleNotification) -> None:
        self.multicaster.publish(notification)


def build_runtime(
    config: Optional[Config] = None,
    launcher: Optional[Launcher] = None,
    environ: Optional[Mapping[str, str]] = None,
    modules: Optional[Mapping[str, Optional[ModuleType]]] = None,
) -> RestartRuntime:
    """
    Build the restart runtime.

    Args:
        config: Structured configuration; loaded from the environment when omitted
        launcher: Restart callback handed to the coordinator
        environ: Source for the Starting-phase override; the process
            environment when omitted
        modules: Module table for reloader detection and region scanning
    """
    config = config or get_config()
    config.validate()
    setup_observability(config.logging, config.tracing)

    probe = AgentReloaderProbe(config.restart.agent_reloader_modules, modules=modules)
    policy = RestartEnablementPolicy(probe, environ=environ)
    coordinator = RestartCoordinator(
        launcher=launcher,
        modules=modules,
        library_markers=config.restart.library_markers,
    )
    router = LifecyclePhaseRouter(coordinator, policy, order=config.restart.listener_order)

    multicaster = LifecycleMulticaster(fail_fast=config.restart.fail_fast)
    multicaster.add_listener(router)

    logger.debug("Restart runtime built", config=config.to_dict())

    return RestartRuntime(
        config=config,
        probe=probe,
        policy=policy,
        coordinator=coordinator,
        router=router,
        multicaster=multicaster,
    )


@contextmanager
def lifecycle(
    runtime: RestartRuntime,
    args: Sequence[str] = (),
    context: Any = None,
) -> Iterator[Any]:
    """
    Announce the lifecycle around a block.

    Publishes STARTING and PREPARED on entry, READY on normal exit and
    FAILED when the block raises; the exception is re-raised.
    """
    runtime.publish(LifecycleNotification.starting(args))
    runtime.publish(LifecycleNotification.prepared(context))
    try:
        yield context
    except Exception as e:
        runtime.publish(LifecycleNotification.failed(context, error=e))
        raise
    runtime.publish(LifecycleNotification.ready(context))


def run_lifecycle(
    runtime: RestartRuntime,
    main: Callable[[Any], T],
    args: Sequence[str] = (),
    context: Any = None,
) -> T:
    """
    Run ``main(context)`` inside the announced lifecycle.

    Usage:
        def main(app):
            app.serve()

        run_lifecycle(build_runtime(), main, sys.argv[1:], context=app)
    """
    with lifecycle(runtime, args, context) as ctx:
        return main(ctx)
