"""
In-process lifecycle multicaster.

The host side of the router contract: keeps the registered listeners,
orders them by their ``order`` (lower runs earlier, registration order
breaks ties) and delivers each notification synchronously on the calling
thread.

A listener that raises is logged with its exception. By default delivery
continues with the remaining listeners and the failures are returned to
the caller; with ``fail_fast`` the first failure aborts delivery as a
LifecycleDispatchError.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from core.errors import ErrorContext, LifecycleDispatchError
from core.types import LOWEST_PRECEDENCE, LifecycleNotification
from observability.logging import get_logger
from observability.tracing import create_span

from .interfaces import LifecycleListener

logger = get_logger("devrestart.multicaster")


@dataclass(frozen=True)
class ListenerFailure:
    """A listener exception absorbed during delivery."""
    listener: str
    error: Exception


def listener_order(listener: LifecycleListener) -> int:
    return getattr(listener, "order", LOWEST_PRECEDENCE)


def listener_name(listener: LifecycleListener) -> str:
    return str(getattr(listener, "name", type(listener).__name__))


class LifecycleMulticaster:
    """Delivers lifecycle notifications to listeners in ascending order."""

    def __init__(self, fail_fast: bool = False):
        self._listeners: List[LifecycleListener] = []
        self._fail_fast = fail_fast

    @property
    def fail_fast(self) -> bool:
        return self._fail_fast

    def add_listener(self, listener: LifecycleListener) -> None:
        if any(existing is listener for existing in self._listeners):
            return
        self._listeners.append(listener)

    def remove_listener(self, listener: LifecycleListener) -> None:
        self._listeners = [existing for existing in self._listeners if existing is not listener]

    @property
    def listeners(self) -> List[LifecycleListener]:
        """Listeners in delivery order."""
        # sorted() is stable, so ties keep registration order.
        return sorted(self._listeners, key=listener_order)

    def publish(self, notification: LifecycleNotification) -> List[ListenerFailure]:
        failures: List[ListenerFailure] = []
        phase = notification.phase.value

        for listener in self.listeners:
            name = listener_name(listener)
            try:
                with create_span(
                    "lifecycle.deliver",
                    attributes={"lifecycle.phase": phase, "lifecycle.listener": name},
                    tracer_name="devrestart.multicaster",
                ):
                    listener.on_notification(notification)
            except Exception as exc:
                logger.error(
                    "Lifecycle listener failed",
                    phase=phase,
                    listener=name,
                    exc_info=exc,
                )
                if self._fail_fast:
                    raise LifecycleDispatchError(
                        f"Listener {name} failed during {phase}",
                        phase=phase,
                        listener=name,
                        cause=exc,
                        context=ErrorContext.from_current_span(
                            operation="publish",
                            component="multicaster",
                            phase=phase,
                            listener=name,
                        ),
                    ) from exc
                failures.append(ListenerFailure(listener=name, error=exc))

        return failures
