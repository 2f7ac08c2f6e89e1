"""Workspace accumulator passed through each region's analysis and persisted at the end."""

from __future__ import annotations

import json
import logging
import types
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import numpy as np
import pandas as pd

LOGGER = logging.getLogger(__name__)

SNAPSHOT_VERSION = "workspace_snapshot.v1"


@dataclass(frozen=True)
class RegionInvocation:
    """Record of one call into the analysis procedure."""

    region_code: str
    spatial_unit: str
    start_year: int
    end_year: int
    started_at: str
    elapsed_seconds: float


@dataclass
class AnalysisWorkspace:
    """Mutable state accumulated across regions.

    Analyses attach results through :meth:`add_table`, :meth:`add_statistic`
    and :meth:`add_figure`; keys are namespaced by region so later regions do
    not overwrite earlier ones.
    """

    tables: dict[str, pd.DataFrame] = field(default_factory=dict)
    statistics: dict[str, Any] = field(default_factory=dict)
    figures: dict[str, list[Path]] = field(default_factory=dict)
    invocations: list[RegionInvocation] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def _key(region_code: str, name: str) -> str:
        return f"{region_code}/{name}"

    def add_table(self, region_code: str, name: str, frame: pd.DataFrame) -> None:
        self.tables[self._key(region_code, name)] = frame.copy(deep=True)

    def add_statistic(self, region_code: str, name: str, value: Any) -> None:
        self.statistics[self._key(region_code, name)] = value

    def add_figure(self, region_code: str, path: str | Path) -> None:
        self.figures.setdefault(region_code, []).append(Path(path))

    def table(self, region_code: str, name: str) -> pd.DataFrame:
        return self.tables[self._key(region_code, name)]

    def record_invocation(self, invocation: RegionInvocation) -> None:
        self.invocations.append(invocation)

    @property
    def regions_completed(self) -> list[str]:
        return [invocation.region_code for invocation in self.invocations]


def _frame_payload(frame: pd.DataFrame) -> dict[str, Any]:
    return {
        "columns": [str(column) for column in frame.columns],
        "dtypes": {str(column): str(dtype) for column, dtype in frame.dtypes.items()},
        "records": _sanitize(frame.to_dict(orient="records")),
    }


def _sanitize(value: Any) -> Any:
    """Convert ``value`` into JSON-serialisable types."""

    if isinstance(value, pd.DataFrame):
        return _frame_payload(value)
    if isinstance(value, pd.Series):
        return _sanitize(value.to_dict())
    if isinstance(value, dict):
        return {str(key): _sanitize(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize(item) for item in value]
    if isinstance(value, set):
        return [_sanitize(item) for item in sorted(value, key=str)]
    if isinstance(value, Enum):
        return _sanitize(value.value)
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, types.SimpleNamespace):
        return _sanitize(vars(value))
    if isinstance(value, np.generic):
        return _sanitize(value.item())
    if isinstance(value, float) and not np.isfinite(value):
        return None
    if value is pd.NA or value is pd.NaT:
        return None
    if hasattr(value, "__dataclass_fields__"):
        return _sanitize({name: getattr(value, name) for name in value.__dataclass_fields__})
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def build_snapshot(
    workspace: AnalysisWorkspace,
    *,
    reference_tables: Mapping[str, pd.DataFrame],
    parameters: Mapping[str, Any],
    regions: list[str],
) -> dict[str, Any]:
    """Return the JSON-ready snapshot of a run."""

    return {
        "version": SNAPSHOT_VERSION,
        "saved_at": datetime.now(timezone.utc).isoformat(),
        "regions": list(regions),
        "parameters": _sanitize(dict(parameters)),
        "reference_tables": {name: _frame_payload(frame) for name, frame in reference_tables.items()},
        "invocations": _sanitize(workspace.invocations),
        "tables": {name: _frame_payload(frame) for name, frame in workspace.tables.items()},
        "statistics": _sanitize(workspace.statistics),
        "figures": _sanitize(workspace.figures),
        "metadata": _sanitize(workspace.metadata),
    }


def save_snapshot(snapshot: Mapping[str, Any], path: str | Path) -> Path:
    """Write ``snapshot`` to ``path`` as indented JSON and return the resolved path."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(snapshot, handle, indent=2, sort_keys=False)
        handle.write("\n")
    LOGGER.info("Workspace snapshot saved to %s", target)
    return target


def load_snapshot(path: str | Path) -> dict[str, Any]:
    """Read a snapshot written by :func:`save_snapshot`."""

    with Path(path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def snapshot_frame(payload: Mapping[str, Any]) -> pd.DataFrame:
    """Rebuild a DataFrame stored in a snapshot ``tables`` or ``reference_tables`` entry."""

    return pd.DataFrame.from_records(payload["records"], columns=payload["columns"])


__all__ = [
    "AnalysisWorkspace",
    "RegionInvocation",
    "SNAPSHOT_VERSION",
    "build_snapshot",
    "load_snapshot",
    "save_snapshot",
    "snapshot_frame",
]
