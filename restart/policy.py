"""
Restart enablement policy.

Resolved once, at the Starting phase, before structured configuration has
been loaded. The only user input is a raw environment variable:

    unset                       -> DEFAULT partitioning, restart enabled
    "true" (any letter case)    -> FORCE_ALL_DEVELOPMENT, restart enabled
    anything else               -> restart disabled

Malformed values fall back to disabled; nothing here raises on bad input.
"""
from __future__ import annotations

import os
from typing import Mapping, Optional

from core.types import EnablementDecision, OverrideState, PartitioningStrategy

from .interfaces import AgentReloaderProbeProtocol

ENABLED_VARIABLE = "DEVRESTART_RESTART_ENABLED"


def resolve_override(raw: Optional[str]) -> OverrideState:
    """Interpret the raw override value."""
    if raw is None:
        return OverrideState.UNSET
    if raw.lower() == "true":
        return OverrideState.FORCE_ENABLED
    return OverrideState.DISABLED


class RestartEnablementPolicy:
    """
    Computes the EnablementDecision for a process run.

    Args:
        probe: Agent reloader probe, consulted only when restart is enabled
        environ: Raw key/value source; ``os.environ`` when omitted
        variable: Name of the override variable
    """

    def __init__(
        self,
        probe: AgentReloaderProbeProtocol,
        environ: Optional[Mapping[str, str]] = None,
        variable: str = ENABLED_VARIABLE,
    ):
        self._probe = probe
        self._environ = environ
        self._variable = variable

    @property
    def variable(self) -> str:
        return self._variable

    def read_override(self) -> OverrideState:
        environ = os.environ if self._environ is None else self._environ
        return resolve_override(environ.get(self._variable))

    def evaluate(self) -> EnablementDecision:
        source = self.read_override()

        if source is OverrideState.DISABLED:
            return EnablementDecision(
                source=source,
                enabled=False,
                restart_on_initialize=False,
                strategy=None,
            )

        if source is OverrideState.FORCE_ENABLED:
            strategy = PartitioningStrategy.FORCE_ALL_DEVELOPMENT
        else:
            strategy = PartitioningStrategy.DEFAULT

        agent_active = self._probe.is_active()
        return EnablementDecision(
            source=source,
            enabled=True,
            restart_on_initialize=not agent_active,
            strategy=strategy,
            agent_reloader_active=agent_active,
        )
