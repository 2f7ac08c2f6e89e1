"""Engine package public API."""

from __future__ import annotations

from engine.errors import (
    ConfigError,
    DataLoadError,
    MissingDependencyError,
    MissingReferenceYearsError,
    RunError,
    UnknownRegionError,
)
from engine.spatial_units import SpatialUnit, resolve_spatial_unit

__all__ = [
    "ConfigError",
    "DataLoadError",
    "MissingDependencyError",
    "MissingReferenceYearsError",
    "RunError",
    "SpatialUnit",
    "UnknownRegionError",
    "resolve_spatial_unit",
]
