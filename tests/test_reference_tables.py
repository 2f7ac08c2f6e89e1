"""Tests for the reference table loaders."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

pd = pytest.importorskip("pandas")

from common.regions_schema import region_labels
from engine.data_loaders.reference_tables import (
    Q_PARAMETERS_TABLE,
    REFERENCE_YEARS_TABLE,
    REGIONS_TABLE,
    crosswalk_records,
    load_q_parameters,
    load_reference_tables,
    load_reference_years,
    load_region_crosswalk,
)
from engine.errors import DataLoadError, MissingReferenceYearsError


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_inline_reference_years_have_one_row_per_region():
    frame = load_reference_years()

    assert list(frame.columns) == ["SAR", "Start", "End"]
    assert frame["SAR"].tolist() == ["HG", "PRD", "CC", "SoG", "WCVI", "A27", "A2W", "All"]
    assert not frame["SAR"].duplicated().any()
    assert (frame["Start"] <= frame["End"]).all()

    wcvi = frame.loc[frame["SAR"] == "WCVI"].iloc[0]
    assert (int(wcvi["Start"]), int(wcvi["End"])) == (1990, 1999)
    coastwide = frame.loc[frame["SAR"] == "All"].iloc[0]
    assert (int(coastwide["Start"]), int(coastwide["End"])) == (1951, 2020)


def test_reference_years_accept_single_year_window(tmp_path):
    path = _write(tmp_path, "ref.csv", "SAR,Start,End\nCC,2000,2000\n")

    frame = load_reference_years(path)

    assert frame.to_dict(orient="records") == [{"SAR": "CC", "Start": 2000, "End": 2000}]


def test_reference_years_reject_start_after_end(tmp_path):
    path = _write(tmp_path, "ref.csv", "SAR,Start,End\nCC,2001,2000\nHG,1951,2018\n")

    with pytest.raises(DataLoadError) as excinfo:
        load_reference_years(path)

    assert excinfo.value.table == REFERENCE_YEARS_TABLE
    assert "CC" in str(excinfo.value)


@pytest.mark.parametrize(
    "text, fragment",
    [
        ("SAR,Start,End\nCC,abc,2000\n", "expects integers"),
        ("SAR,Start,End\nCC,1951.5,2000\n", "expects integers"),
        ("SAR,Start,End\nCC,,2000\n", "is empty"),
        ("SAR,Start\nCC,2000\n", "missing required column"),
    ],
)
def test_reference_years_reject_malformed_rows(tmp_path, text, fragment):
    path = _write(tmp_path, "ref.csv", text)

    with pytest.raises(DataLoadError, match=fragment):
        load_reference_years(path)


def test_duplicate_reference_years_fail_only_when_region_is_run(tmp_path, q_parameters_csv, caplog):
    path = _write(tmp_path, "ref.csv", "SAR,Start,End\nCC,1951,2018\nCC,1960,2018\nHG,1951,2018\n")

    with caplog.at_level(logging.WARNING):
        tables = load_reference_tables(q_parameters_csv, reference_years_path=path)

    assert "CC" in caplog.text
    assert tables.reference_years_for("HG").years == range(1951, 2019)
    with pytest.raises(MissingReferenceYearsError) as excinfo:
        tables.reference_years_for("CC")
    assert excinfo.value.matches == 2


def test_missing_q_parameters_file_is_reported(tmp_path):
    with pytest.raises(DataLoadError) as excinfo:
        load_q_parameters(tmp_path / "qPars.csv")

    assert excinfo.value.table == Q_PARAMETERS_TABLE
    assert "file not found" in str(excinfo.value)


def test_q_parameters_without_rows_are_rejected(tmp_path):
    header_only = _write(tmp_path, "header.csv", "Parameter,Value\n")
    empty = _write(tmp_path, "empty.csv", "")

    with pytest.raises(DataLoadError, match="no rows"):
        load_q_parameters(header_only)
    with pytest.raises(DataLoadError, match="empty"):
        load_q_parameters(empty)


def test_q_parameters_are_returned_unchanged(q_parameters_csv):
    frame = load_q_parameters(q_parameters_csv)

    assert list(frame.columns) == ["Parameter", "Value", "Survey"]
    assert frame["Parameter"].tolist() == ["q1", "q2"]


def test_crosswalk_types_and_labels():
    frame = load_region_crosswalk()

    assert frame["SAR"].tolist() == [1, 2, 3, 4, 5, 6, 7]
    assert frame["Major"].dtype == bool

    labels = region_labels(crosswalk_records(frame))
    assert labels["major"][0] == "Haida Gwaii (HG)"
    assert labels["minor"] == ["Area 27 (A27)", "Area 2 West (A2W)"]


def test_crosswalk_rejects_unknown_flag_and_duplicate_codes(tmp_path):
    bad_flag = _write(
        tmp_path, "flag.csv", "SAR,Region,RegionName,Major\n1,HG,Haida Gwaii,maybe\n"
    )
    duplicate = _write(
        tmp_path,
        "dup.csv",
        "SAR,Region,RegionName,Major\n1,HG,Haida Gwaii,TRUE\n2,HG,Haida Gwaii again,TRUE\n",
    )

    with pytest.raises(DataLoadError, match="expects booleans"):
        load_region_crosswalk(bad_flag)
    with pytest.raises(DataLoadError) as excinfo:
        load_region_crosswalk(duplicate)
    assert excinfo.value.table == REGIONS_TABLE


def test_repeated_loads_are_identical(q_parameters_csv):
    first = load_reference_tables(q_parameters_csv)
    second = load_reference_tables(q_parameters_csv)

    for name in ("reference_years", "q_parameters", "regions"):
        pd.testing.assert_frame_equal(getattr(first, name), getattr(second, name))
        assert getattr(first, name).to_csv(index=False) == getattr(second, name).to_csv(index=False)


def test_region_lookup(reference_tables):
    central_coast = reference_tables.region("CC")

    assert central_coast is not None
    assert central_coast.name == "Central Coast"
    assert central_coast.is_major is True
    assert reference_tables.region("All") is None
