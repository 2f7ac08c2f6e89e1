"""Loaders for the static reference tables consumed by the region run loop.

Three tables are read once per run:

``reference_years``
    ``SAR`` (region code), ``Start`` and ``End`` (years) describing the window
    used to establish the biomass threshold for each region. Read from the
    inline default table unless a CSV path is configured.
``q_parameters``
    Catchability coefficients from the latest assessment. The schema belongs to
    the analysis procedure; the loader only checks the file parses.
``regions``
    The SAR cross-walk: numeric ``SAR`` id, ``Region`` code, ``RegionName`` and
    the ``Major`` flag.

Every failure is reported as :class:`~engine.errors.DataLoadError` naming the
table so the run aborts before any region is processed.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Callable, Mapping

import pandas as pd

from common.regions_schema import REFERENCE_YEARS_CSV, REGION_CROSSWALK_CSV, RegionRecord
from engine.errors import DataLoadError, MissingReferenceYearsError

LOGGER = logging.getLogger(__name__)

Source = str | PathLike[str] | io.StringIO

REFERENCE_YEARS_TABLE = "reference_years"
Q_PARAMETERS_TABLE = "q_parameters"
REGIONS_TABLE = "regions"

_REFERENCE_YEARS_COLUMNS: Mapping[str, str] = {"SAR": "string", "Start": "int", "End": "int"}
_CROSSWALK_COLUMNS: Mapping[str, str] = {
    "SAR": "int",
    "Region": "string",
    "RegionName": "string",
    "Major": "bool",
}

_TRUE_TOKENS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_TOKENS = frozenset({"false", "f", "no", "n", "0"})


def crosswalk_records(frame: pd.DataFrame) -> tuple[RegionRecord, ...]:
    """Return the rows of a typed cross-walk table as :class:`RegionRecord` instances."""

    return tuple(
        RegionRecord(
            sar=int(row.SAR),
            code=str(row.Region),
            name=str(row.RegionName),
            is_major=bool(row.Major),
        )
        for row in frame.itertuples(index=False)
    )


@dataclass(frozen=True)
class ReferenceYears:
    """Biomass-threshold window for one region."""

    region_code: str
    start_year: int
    end_year: int

    @property
    def years(self) -> range:
        """Inclusive range of reference years."""
        return range(self.start_year, self.end_year + 1)


@dataclass(frozen=True)
class ReferenceTables:
    """Read-only bundle of the tables loaded at the start of a run."""

    reference_years: pd.DataFrame
    q_parameters: pd.DataFrame
    regions: pd.DataFrame

    def reference_years_for(self, region_code: str) -> ReferenceYears:
        """Return the unique reference-years row for ``region_code``.

        Raises
        ------
        MissingReferenceYearsError
            When the region has no row, or more than one.
        """

        matches = self.reference_years[self.reference_years["SAR"] == region_code]
        if len(matches) != 1:
            raise MissingReferenceYearsError(region_code, matches=len(matches))
        row = matches.iloc[0]
        return ReferenceYears(
            region_code=str(row["SAR"]),
            start_year=int(row["Start"]),
            end_year=int(row["End"]),
        )

    def region_records(self) -> tuple[RegionRecord, ...]:
        """Return the cross-walk as :class:`RegionRecord` instances in table order."""

        return crosswalk_records(self.regions)

    def region(self, region_code: str) -> RegionRecord | None:
        """Return the cross-walk record for ``region_code`` if one exists."""

        for record in self.region_records():
            if record.code == region_code:
                return record
        return None


def _read_csv(source: Source, table: str, **kwargs) -> pd.DataFrame:
    if not isinstance(source, io.StringIO):
        path = Path(source)
        if not path.exists():
            raise DataLoadError(table, f"file not found: {path}")
        source = path
    try:
        frame = pd.read_csv(source, **kwargs)
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(table, "table is empty") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataLoadError(table, f"unable to parse table: {exc}") from exc
    frame.columns = [str(column).strip() for column in frame.columns]
    return frame


def _coerce_string(values: pd.Series, table: str, column: str) -> pd.Series:
    return values.astype(str)


def _coerce_int(values: pd.Series, table: str, column: str) -> pd.Series:
    numeric = pd.to_numeric(values, errors="coerce")
    invalid = numeric.isna() | (numeric % 1 != 0)
    if invalid.any():
        bad = ", ".join(repr(value) for value in values[invalid].tolist())
        raise DataLoadError(table, f"column {column!r} expects integers, got {bad}")
    return numeric.astype("int64")


def _coerce_bool(values: pd.Series, table: str, column: str) -> pd.Series:
    lowered = values.str.lower()
    invalid = ~lowered.isin(_TRUE_TOKENS | _FALSE_TOKENS)
    if invalid.any():
        bad = ", ".join(repr(value) for value in values[invalid].tolist())
        raise DataLoadError(table, f"column {column!r} expects booleans, got {bad}")
    return lowered.isin(_TRUE_TOKENS).astype(bool)


_COERCERS: Mapping[str, Callable[[pd.Series, str, str], pd.Series]] = {
    "string": _coerce_string,
    "int": _coerce_int,
    "bool": _coerce_bool,
}


def _typed_table(frame: pd.DataFrame, columns: Mapping[str, str], table: str) -> pd.DataFrame:
    """Return ``frame`` restricted to ``columns`` with each column coerced to its declared type."""

    missing = [column for column in columns if column not in frame.columns]
    if missing:
        raise DataLoadError(table, "missing required column(s): " + ", ".join(missing))

    working = frame.loc[:, list(columns)].copy()
    for column, kind in columns.items():
        raw = working[column].fillna("").astype(str).str.strip()
        empty = raw == ""
        if empty.any():
            rows = ", ".join(str(index + 1) for index in raw.index[empty])
            raise DataLoadError(table, f"column {column!r} is empty on row(s) {rows}")
        working[column] = _COERCERS[kind](raw, table, column)
    return working.reset_index(drop=True)


def load_reference_years(path: Source | None = None) -> pd.DataFrame:
    """Return the reference-years table from ``path`` or the inline default."""

    source: Source = path if path is not None else io.StringIO(REFERENCE_YEARS_CSV)
    frame = _read_csv(source, REFERENCE_YEARS_TABLE, dtype=str, skipinitialspace=True)
    typed = _typed_table(frame, _REFERENCE_YEARS_COLUMNS, REFERENCE_YEARS_TABLE)

    reversed_rows = typed[typed["Start"] > typed["End"]]
    if not reversed_rows.empty:
        regions = ", ".join(reversed_rows["SAR"].tolist())
        raise DataLoadError(REFERENCE_YEARS_TABLE, f"Start year after End year for: {regions}")

    duplicated = typed.loc[typed["SAR"].duplicated(keep=False), "SAR"].unique().tolist()
    if duplicated:
        LOGGER.warning(
            "Reference years listed more than once for %s; these regions cannot be run",
            ", ".join(duplicated),
        )
    return typed


def load_q_parameters(path: Source) -> pd.DataFrame:
    """Return the catchability parameters exactly as stored in ``path``."""

    frame = _read_csv(path, Q_PARAMETERS_TABLE)
    if frame.empty:
        raise DataLoadError(Q_PARAMETERS_TABLE, "table has no rows")
    return frame


def load_region_crosswalk(path: Source | None = None) -> pd.DataFrame:
    """Return the SAR cross-walk from ``path`` or the inline default."""

    source: Source = path if path is not None else io.StringIO(REGION_CROSSWALK_CSV)
    frame = _read_csv(source, REGIONS_TABLE, dtype=str, skipinitialspace=True)
    typed = _typed_table(frame, _CROSSWALK_COLUMNS, REGIONS_TABLE)

    duplicated = typed.loc[typed["Region"].duplicated(keep=False), "Region"].unique().tolist()
    if duplicated:
        raise DataLoadError(REGIONS_TABLE, "duplicate region codes: " + ", ".join(duplicated))
    return typed


def load_reference_tables(
    q_parameters_path: Source,
    *,
    reference_years_path: Source | None = None,
    crosswalk_path: Source | None = None,
) -> ReferenceTables:
    """Load the reference years, catchability parameters and region cross-walk."""

    reference_years = load_reference_years(reference_years_path)
    LOGGER.info(
        "Loaded reference years for %d region(s) from %s",
        len(reference_years),
        reference_years_path or "inline table",
    )
    q_parameters = load_q_parameters(q_parameters_path)
    LOGGER.info("Loaded %d q parameter row(s) from %s", len(q_parameters), q_parameters_path)
    regions = load_region_crosswalk(crosswalk_path)
    LOGGER.debug("Loaded %d region cross-walk rows", len(regions))

    return ReferenceTables(
        reference_years=reference_years,
        q_parameters=q_parameters,
        regions=regions,
    )


__all__ = [
    "Q_PARAMETERS_TABLE",
    "REFERENCE_YEARS_TABLE",
    "REGIONS_TABLE",
    "ReferenceTables",
    "ReferenceYears",
    "crosswalk_records",
    "load_q_parameters",
    "load_reference_tables",
    "load_reference_years",
    "load_region_crosswalk",
]
