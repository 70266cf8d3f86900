"""
Reference restart coordinator.

A process-wide state machine driven by the lifecycle router:

    UNINITIALIZED → {DISABLED | INITIALIZED} → FINISHED

INITIALIZED additionally tracks the application contexts prepared during
startup. No transition is reversible within one run. Actual code swapping
is delegated to an optional ``launcher`` callback; without one the
coordinator only records what a restart would have used.

The coordinator is constructed once by the host and handed to the router;
there is no module-level instance.
"""
from __future__ import annotations

import sys
import threading
from types import ModuleType
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.errors import RestartError, RestartStateError
from core.types import CoordinatorState, PartitioningStrategy
from observability.logging import get_logger

from .strategy import DEFAULT_LIBRARY_MARKERS, development_modules

logger = get_logger("devrestart.coordinator")

Launcher = Callable[[Tuple[str, ...]], Any]


class RestartCoordinator:
    """
    Holds restart state for one process run.

    Args:
        launcher: Called with the startup arguments to perform a restart
        modules: Module table scanned for restart-eligible code;
            ``sys.modules`` when omitted
        library_markers: Path segments that mark installed distributions
    """

    def __init__(
        self,
        launcher: Optional[Launcher] = None,
        modules: Optional[Mapping[str, Optional[ModuleType]]] = None,
        library_markers: Iterable[str] = DEFAULT_LIBRARY_MARKERS,
    ):
        self._launcher = launcher
        self._modules = modules
        self._library_markers = tuple(library_markers)
        self._lock = threading.Lock()

        self._state = CoordinatorState.UNINITIALIZED
        self._args: Tuple[str, ...] = ()
        self._development = False
        self._strategy: Optional[PartitioningStrategy] = None
        self._restart_on_initialize = False
        self._initial_modules: List[str] = []
        self._prepared: List[Any] = []

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def args(self) -> Tuple[str, ...]:
        return self._args

    @property
    def development(self) -> bool:
        return self._development

    @property
    def strategy(self) -> Optional[PartitioningStrategy]:
        return self._strategy

    @property
    def restart_on_initialize(self) -> bool:
        return self._restart_on_initialize

    @property
    def initial_modules(self) -> Tuple[str, ...]:
        return tuple(self._initial_modules)

    @property
    def prepared_contexts(self) -> Tuple[Any, ...]:
        return tuple(self._prepared)

    @property
    def enabled(self) -> bool:
        return self._state in (CoordinatorState.INITIALIZED, CoordinatorState.FINISHED)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def initialize(
        self,
        args: Sequence[str],
        development: bool,
        strategy: PartitioningStrategy,
        restart_on_initialize: bool,
    ) -> None:
        with self._lock:
            self._require(CoordinatorState.UNINITIALIZED, "initialize")
            self._args = tuple(args)
            self._development = development
            self._strategy = strategy
            self._restart_on_initialize = restart_on_initialize
            modules = sys.modules if self._modules is None else self._modules
            self._initial_modules = development_modules(
                modules, strategy, self._library_markers
            )
            self._state = CoordinatorState.INITIALIZED

        logger.debug(
            "Restart coordinator initialized",
            strategy=strategy.value,
            restart_on_initialize=restart_on_initialize,
            development_modules=len(self._initial_modules),
        )

        if restart_on_initialize and self._initial_modules:
            self._launch()

    def disable(self) -> None:
        with self._lock:
            self._require(CoordinatorState.UNINITIALIZED, "disable")
            self._state = CoordinatorState.DISABLED
        logger.debug("Restart coordinator disabled")

    def prepare(self, context: Any) -> None:
        with self._lock:
            if self._state is CoordinatorState.DISABLED:
                return
            self._require(CoordinatorState.INITIALIZED, "prepare")
            if not any(existing is context for existing in self._prepared):
                self._prepared.append(context)

    def finish(self) -> None:
        with self._lock:
            if self._state is not CoordinatorState.INITIALIZED:
                return
            self._state = CoordinatorState.FINISHED
        logger.debug("Restart coordinator finished", prepared=len(self._prepared))

    def remove(self, context: Any) -> None:
        with self._lock:
            if self._state is CoordinatorState.DISABLED:
                return
            if self._state is CoordinatorState.UNINITIALIZED:
                raise RestartStateError(
                    "Cannot remove a context before the coordinator is initialized",
                    current=self._state.value,
                    attempted="remove",
                )
            self._prepared = [existing for existing in self._prepared if existing is not context]

    def restart(self) -> None:
        """Relaunch with the original startup arguments."""
        if not self.enabled:
            raise RestartStateError(
                f"Restart is not available while {self._state.value}",
                current=self._state.value,
                attempted="restart",
            )
        if self._launcher is None:
            raise RestartError("No launcher configured for restart")
        self._launch()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, expected: CoordinatorState, attempted: str) -> None:
        if self._state is not expected:
            raise RestartStateError(
                f"Cannot {attempted} while {self._state.value}",
                current=self._state.value,
                attempted=attempted,
            )

    def _launch(self) -> None:
        if self._launcher is None:
            logger.debug("Restart requested but no launcher is configured")
            return
        logger.info("Restarting", args=list(self._args))
        self._launcher(self._args)
