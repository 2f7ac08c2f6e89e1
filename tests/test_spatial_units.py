"""Tests for the region to spatial-unit mapping."""

from __future__ import annotations

import pytest

from engine.data_loaders.reference_tables import load_reference_years
from engine.errors import UnknownRegionError
from engine.spatial_units import SPATIAL_UNIT_BY_REGION, SpatialUnit, resolve_spatial_unit


@pytest.mark.parametrize(
    "region_code, expected",
    [
        ("HG", SpatialUnit.GROUP),
        ("PRD", SpatialUnit.STAT_AREA),
        ("CC", SpatialUnit.STAT_AREA),
        ("SoG", SpatialUnit.GROUP),
        ("WCVI", SpatialUnit.STAT_AREA),
        ("A27", SpatialUnit.STAT_AREA),
        ("A2W", SpatialUnit.GROUP),
        ("All", SpatialUnit.SECTION),
    ],
)
def test_resolve_spatial_unit(region_code, expected):
    assert resolve_spatial_unit(region_code) is expected
    assert resolve_spatial_unit(region_code) is resolve_spatial_unit(region_code)


@pytest.mark.parametrize("region_code", ["ZZZ", "cc", "", "Region"])
def test_unknown_region_raises(region_code):
    with pytest.raises(UnknownRegionError) as excinfo:
        resolve_spatial_unit(region_code)

    assert excinfo.value.region_code == region_code


def test_every_region_with_reference_years_has_a_spatial_unit():
    regions = set(load_reference_years()["SAR"])

    assert regions == set(SPATIAL_UNIT_BY_REGION)


def test_spatial_unit_renders_as_its_value():
    assert str(SpatialUnit.STAT_AREA) == "StatArea"
    assert f"{SpatialUnit.GROUP}" == "Group"
    assert SpatialUnit("Section") is SpatialUnit.SECTION
