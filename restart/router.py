"""
Lifecycle phase router.

Listens to the host's lifecycle notifications and drives the restart
coordinator:

    STARTING  -> decide enablement, then initialize or disable
    PREPARED  -> prepare(context)
    READY     -> finish()
    FAILED    -> finish(), then remove(context)

The enablement decision is made at STARTING, before structured
configuration exists, so the override is read from the raw environment.
Phases that arrive out of order (anything before STARTING, PREPARED after
the run has finished) are logged and ignored.
Exceptions raised by the coordinator propagate to the host unchanged.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Sequence, Tuple

from core.types import (
    HIGHEST_PRECEDENCE,
    CoordinatorState,
    EnablementDecision,
    LifecycleNotification,
    LifecyclePhase,
    OverrideState,
)
from observability.logging import LogContext, get_logger

from .interfaces import RestartCoordinatorProtocol
from .policy import RestartEnablementPolicy

logger = get_logger("devrestart.router")

# The development flag handed to initialize() is fixed, whatever the override.
DEVELOPMENT_FLAG = False


def _is_out_of_order(phase: LifecyclePhase, state: CoordinatorState) -> bool:
    if phase is LifecyclePhase.STARTING:
        return False
    if state is CoordinatorState.UNINITIALIZED:
        return True
    # No context can be prepared once startup has finished.
    return phase is LifecyclePhase.PREPARED and state is CoordinatorState.FINISHED


class LifecyclePhaseRouter:
    """
    Routes lifecycle notifications to the restart coordinator.

    Holds no state besides its dispatch order; the coordinator and the
    policy are owned by the host.
    """

    def __init__(
        self,
        coordinator: RestartCoordinatorProtocol,
        policy: RestartEnablementPolicy,
        order: int = HIGHEST_PRECEDENCE,
    ):
        self._coordinator = coordinator
        self._policy = policy
        self._order = order

    # -------------------------------------------------------------------------
    # Dispatch order
    # -------------------------------------------------------------------------

    @property
    def order(self) -> int:
        return self._order

    @order.setter
    def order(self, value: int) -> None:
        self._order = value

    def get_order(self) -> int:
        return self._order

    def set_order(self, order: int) -> None:
        self._order = order

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def on_notification(self, notification: LifecycleNotification) -> None:
        handlers = self._DISPATCH[notification.phase]

        with LogContext(lifecycle_phase=notification.phase.value):
            state = self._coordinator.state
            if _is_out_of_order(notification.phase, state):
                logger.warning(
                    "Ignoring lifecycle phase delivered out of order",
                    phase=notification.phase.value,
                    coordinator_state=state.value,
                )
                return

            for handler in handlers:
                handler(self, notification)

    # -------------------------------------------------------------------------
    # Handlers
    # -------------------------------------------------------------------------

    def handle_starting(self, args: Sequence[str]) -> EnablementDecision:
        decision = self._policy.evaluate()

        if not decision.enabled:
            logger.info(
                f"Restart disabled due to environment variable "
                f"'{self._policy.variable}' being set to false"
            )
            self._coordinator.disable()
            return decision

        if decision.source is OverrideState.FORCE_ENABLED:
            logger.info(
                f"Restart enabled irrespective of application packaging due to "
                f"environment variable '{self._policy.variable}' being set to true"
            )

        if decision.agent_reloader_active:
            logger.info("Restart disabled due to an agent-based reloader being active")

        self._coordinator.initialize(
            tuple(args),
            DEVELOPMENT_FLAG,
            decision.strategy,
            decision.restart_on_initialize,
        )
        return decision

    def handle_prepared(self, context: Any) -> None:
        self._coordinator.prepare(context)

    def handle_finished(self) -> None:
        self._coordinator.finish()

    def handle_failed(self, context: Any) -> None:
        self._coordinator.remove(context)

    def _starting(self, notification: LifecycleNotification) -> None:
        self.handle_starting(notification.args)

    def _prepared(self, notification: LifecycleNotification) -> None:
        self.handle_prepared(notification.context)

    def _finished(self, notification: LifecycleNotification) -> None:
        self.handle_finished()

    def _failed(self, notification: LifecycleNotification) -> None:
        self.handle_failed(notification.context)

    # FAILED: finish() strictly before remove().
    _DISPATCH: Dict[
        LifecyclePhase,
        Tuple[Callable[["LifecyclePhaseRouter", LifecycleNotification], None], ...],
    ] = {
        LifecyclePhase.STARTING: (_starting,),
        LifecyclePhase.PREPARED: (_prepared,),
        LifecyclePhase.READY: (_finished,),
        LifecyclePhase.FAILED: (_finished, _failed),
    }
