"""
Detection of agent-based reloaders.

Agent-based reloaders patch code objects in place inside the running
interpreter. When one is loaded, restarting on initialize would drive the
same modules twice, so the enablement policy turns restart-on-initialize
off while keeping explicit restarts available.
"""
from __future__ import annotations

import sys
from typing import Iterable, List, Mapping, Optional, Tuple

DEFAULT_AGENT_RELOADERS: Tuple[str, ...] = ("reloadium", "jurigged")


class AgentReloaderProbe:
    """Reports whether a known agent-based reloader is loaded."""

    def __init__(
        self,
        module_names: Iterable[str] = DEFAULT_AGENT_RELOADERS,
        modules: Optional[Mapping[str, object]] = None,
    ):
        self._module_names = tuple(module_names)
        # Looked up at call time so late imports are seen.
        self._modules = modules

    @property
    def module_names(self) -> Tuple[str, ...]:
        return self._module_names

    def active_reloaders(self) -> List[str]:
        modules = sys.modules if self._modules is None else self._modules
        return [
            name for name in self._module_names
            if modules.get(name) is not None
        ]

    def is_active(self) -> bool:
        return bool(self.active_reloaders())
