"""Spatial-unit granularity assigned to each stock assessment region."""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from engine.errors import UnknownRegionError


class SpatialUnit(str, Enum):
    """Level at which spawn-index data are aggregated within a region."""

    REGION = "Region"
    STAT_AREA = "StatArea"
    SECTION = "Section"
    GROUP = "Group"

    def __str__(self) -> str:
        return self.value


SPATIAL_UNIT_BY_REGION: Mapping[str, SpatialUnit] = {
    "HG": SpatialUnit.GROUP,
    "PRD": SpatialUnit.STAT_AREA,
    "CC": SpatialUnit.STAT_AREA,
    "SoG": SpatialUnit.GROUP,
    "WCVI": SpatialUnit.STAT_AREA,
    "A27": SpatialUnit.STAT_AREA,
    "A2W": SpatialUnit.GROUP,
    "All": SpatialUnit.SECTION,
}


def resolve_spatial_unit(region_code: str) -> SpatialUnit:
    """Return the spatial unit for ``region_code``.

    Raises
    ------
    UnknownRegionError
        If ``region_code`` is not one of the mapped regions. Lookups are
        case-sensitive, matching the region codes used in the input tables.
    """

    try:
        return SPATIAL_UNIT_BY_REGION[region_code]
    except KeyError as exc:
        raise UnknownRegionError(region_code) from exc


__all__ = ["SPATIAL_UNIT_BY_REGION", "SpatialUnit", "resolve_spatial_unit"]
