"""Shared fixtures for the region run driver tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from engine.data_loaders.reference_tables import load_reference_tables
from engine.settings import RunParameters

Q_PARAMETERS_CSV = """Parameter,Value,Survey
q1,1.000,Surface
q2,1.000,Dive
"""


@pytest.fixture
def q_parameters_csv(tmp_path: Path) -> Path:
    path = tmp_path / "qPars.csv"
    path.write_text(Q_PARAMETERS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def reference_tables(q_parameters_csv: Path):
    return load_reference_tables(q_parameters_csv)


@pytest.fixture
def run_parameters(tmp_path: Path, q_parameters_csv: Path) -> RunParameters:
    return RunParameters(
        q_parameters_path=q_parameters_csv,
        dive_transects_path=tmp_path / "missing_transects.xlsx",
    )
