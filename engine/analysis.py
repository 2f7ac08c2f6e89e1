"""Interface to the per-region spatial analysis procedure.

The spawn-index computation lives outside this repository. The run loop only
needs a callable with the :class:`SpatialAnalysis` signature; it is resolved by
name so a run configuration can point at any importable implementation::

    [analysis]
    entrypoint = "herring_spatial.analysis:run_spatial_analysis"
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Dict, Protocol

import pandas as pd

from engine.data_loaders.reference_tables import ReferenceYears
from engine.errors import ConfigError
from engine.settings import RunParameters
from engine.spatial_units import SpatialUnit
from engine.workspace import AnalysisWorkspace

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegionRequest:
    """Inputs handed to the analysis for a single region."""

    region_code: str
    region_name: str | None
    is_major: bool | None
    spatial_unit: SpatialUnit
    reference_years: ReferenceYears
    q_parameters: pd.DataFrame
    parameters: RunParameters


class SpatialAnalysis(Protocol):
    """Callable running the spatial analysis for one region."""

    def __call__(self, request: RegionRequest, workspace: AnalysisWorkspace) -> AnalysisWorkspace:
        """Extend ``workspace`` with the region's results and return it."""


def dry_run_analysis(request: RegionRequest, workspace: AnalysisWorkspace) -> AnalysisWorkspace:
    """Record the request without computing anything.

    Used to validate configuration and reference tables before a full run.
    """

    region = request.region_code
    workspace.add_statistic(region, "spatial_unit", request.spatial_unit.value)
    workspace.add_statistic(
        region,
        "reference_years",
        [request.reference_years.start_year, request.reference_years.end_year],
    )
    workspace.add_statistic(region, "q_parameter_rows", int(len(request.q_parameters)))
    workspace.add_statistic(
        region,
        "dive_transects_available",
        request.parameters.dive_transects_path.exists(),
    )
    LOGGER.debug("Dry run recorded request for %s", region)
    return workspace


_BUILTIN_ANALYSES: Dict[str, SpatialAnalysis] = {
    "dry-run": dry_run_analysis,
}


def resolve_analysis(name: str) -> SpatialAnalysis:
    """Return the analysis callable registered as ``name`` or importable as ``module:attr``.

    Raises
    ------
    ConfigError
        If ``name`` is neither a built-in analysis nor an importable callable.
    """

    normalized = name.strip()
    builtin = _BUILTIN_ANALYSES.get(normalized.lower())
    if builtin is not None:
        return builtin

    module_name, sep, attribute = normalized.partition(":")
    if not sep or not module_name or not attribute:
        raise ConfigError(
            f"Unknown analysis {name!r}; use one of {sorted(_BUILTIN_ANALYSES)} "
            "or a 'package.module:callable' entrypoint"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Unable to import analysis module {module_name!r}: {exc}") from exc

    target: object = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigError(f"{module_name!r} has no attribute {attribute!r}") from exc
    if not callable(target):
        raise ConfigError(f"Analysis entrypoint {name!r} is not callable")
    return target  # type: ignore[return-value]


__all__ = [
    "RegionRequest",
    "SpatialAnalysis",
    "dry_run_analysis",
    "resolve_analysis",
]
