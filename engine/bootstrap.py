"""Check that the packages a run depends on are importable before starting."""

from __future__ import annotations

import importlib.util
import logging
from typing import Iterable, Mapping

from engine.errors import MissingDependencyError

LOGGER = logging.getLogger(__name__)

# Import name -> distribution name on the package index.
REQUIRED_MODULES: Mapping[str, str] = {
    "numpy": "numpy",
    "pandas": "pandas",
    "typer": "typer",
}


def _missing_modules(modules: Iterable[tuple[str, str]]) -> list[str]:
    missing: list[str] = []
    for module_name, distribution in modules:
        try:
            spec = importlib.util.find_spec(module_name)
        except (ModuleNotFoundError, ValueError):
            spec = None
        if spec is None:
            missing.append(distribution)
    return missing


def check_dependencies(modules: Mapping[str, str] | Iterable[str] | None = None) -> None:
    """Raise :class:`MissingDependencyError` listing any module that cannot be imported.

    ``modules`` maps import names to distribution names; a plain sequence of
    names uses each name for both. Nothing is installed here; the error
    message carries the ``pip install`` command instead.
    """

    if modules is None:
        required = dict(REQUIRED_MODULES)
    elif isinstance(modules, Mapping):
        required = dict(modules)
    else:
        required = {name: name for name in modules}
    missing = _missing_modules(required.items())
    if missing:
        raise MissingDependencyError(sorted(set(missing)))
    LOGGER.debug("All required packages available: %s", ", ".join(sorted(required)))


__all__ = ["REQUIRED_MODULES", "check_dependencies"]
