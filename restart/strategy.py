"""
Code-region partitioning.

Each PartitioningStrategy variant maps to a pure classification function.
DEFAULT separates the project's own source (restart-eligible) from the
interpreter's standard library and installed distributions (watched only);
FORCE_ALL_DEVELOPMENT treats everything as restart-eligible.
"""
from __future__ import annotations

import functools
import os
import sysconfig
from types import ModuleType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from core.types import CodeRegion, PartitioningStrategy

DEFAULT_LIBRARY_MARKERS: Tuple[str, ...] = ("site-packages", "dist-packages")


@functools.lru_cache(maxsize=1)
def _stdlib_roots() -> Tuple[str, ...]:
    paths = sysconfig.get_paths()
    roots = {paths.get("stdlib"), paths.get("platstdlib")}
    return tuple(sorted(os.path.normcase(os.path.abspath(root)) for root in roots if root))


def _is_under(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def _classify_default(path: Optional[str], library_markers: Iterable[str]) -> CodeRegion:
    if not path or path.startswith("<"):
        # built-in, frozen or namespace modules
        return CodeRegion.LIBRARY

    normalized = os.path.normcase(os.path.abspath(path))
    segments = normalized.split(os.sep)
    if any(marker in segments for marker in library_markers):
        return CodeRegion.LIBRARY
    if any(_is_under(normalized, root) for root in _stdlib_roots()):
        return CodeRegion.LIBRARY
    return CodeRegion.DEVELOPMENT


def _classify_force_all(path: Optional[str], library_markers: Iterable[str]) -> CodeRegion:
    return CodeRegion.DEVELOPMENT


_CLASSIFIERS: Dict[PartitioningStrategy, Callable[[Optional[str], Iterable[str]], CodeRegion]] = {
    PartitioningStrategy.DEFAULT: _classify_default,
    PartitioningStrategy.FORCE_ALL_DEVELOPMENT: _classify_force_all,
}


def classify_path(
    path: Optional[str],
    strategy: PartitioningStrategy = PartitioningStrategy.DEFAULT,
    library_markers: Iterable[str] = DEFAULT_LIBRARY_MARKERS,
) -> CodeRegion:
    """Classify a source path under the given strategy."""
    return _CLASSIFIERS[strategy](path, tuple(library_markers))


def classify_module(
    module: ModuleType,
    strategy: PartitioningStrategy = PartitioningStrategy.DEFAULT,
    library_markers: Iterable[str] = DEFAULT_LIBRARY_MARKERS,
) -> CodeRegion:
    """Classify a loaded module by the file it was loaded from."""
    return classify_path(getattr(module, "__file__", None), strategy, library_markers)


def is_development(
    module: ModuleType,
    strategy: PartitioningStrategy = PartitioningStrategy.DEFAULT,
    library_markers: Iterable[str] = DEFAULT_LIBRARY_MARKERS,
) -> bool:
    return classify_module(module, strategy, library_markers) is CodeRegion.DEVELOPMENT


def development_modules(
    modules: Mapping[str, Optional[ModuleType]],
    strategy: PartitioningStrategy = PartitioningStrategy.DEFAULT,
    library_markers: Iterable[str] = DEFAULT_LIBRARY_MARKERS,
) -> List[str]:
    """
    Names of the restart-eligible modules in a ``sys.modules``-style table.

    Entries mapped to ``None`` (import blockers) are skipped.
    """
    markers = tuple(library_markers)
    return sorted(
        name
        for name, module in list(modules.items())
        if module is not None and is_development(module, strategy, markers)
    )
