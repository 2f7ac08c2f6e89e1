"""Canonical stock assessment region definitions shared by loaders and the run loop."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class RegionRecord:
    """One row of the SAR cross-walk."""

    sar: int
    code: str
    name: str
    is_major: bool

    @property
    def label(self) -> str:
        """Return the display label used in report captions, e.g. ``Central Coast (CC)``."""
        return f"{self.name} ({self.code})"


# Cross-walk table for SAR number to region code, name and major/minor status.
REGION_CROSSWALK_CSV = """SAR, Region, RegionName, Major
1, HG, Haida Gwaii, TRUE
2, PRD, Prince Rupert District, TRUE
3, CC, Central Coast, TRUE
4, SoG, Strait of Georgia, TRUE
5, WCVI, West Coast of Vancouver Island, TRUE
6, A27, Area 27, FALSE
7, A2W, Area 2 West, FALSE
"""

# Reference years for the biomass threshold.
REFERENCE_YEARS_CSV = """SAR, Start, End
HG, 1951, 2018
PRD, 1951, 2018
CC, 1951, 2018
SoG, 1951, 2018
WCVI, 1990, 1999
A27, 1951, 2018
A2W, 1951, 2018
All, 1951, 2020
"""

# Coastwide pseudo-region; it has reference years but no cross-walk row.
COASTWIDE_REGION = "All"


def region_labels(records: Iterable[RegionRecord]) -> Mapping[str, list[str]]:
    """Return display labels grouped into ``major`` and ``minor`` regions."""

    labels: dict[str, list[str]] = {"major": [], "minor": []}
    for record in records:
        labels["major" if record.is_major else "minor"].append(record.label)
    return labels


__all__ = [
    "COASTWIDE_REGION",
    "REFERENCE_YEARS_CSV",
    "REGION_CROSSWALK_CSV",
    "RegionRecord",
    "region_labels",
]
