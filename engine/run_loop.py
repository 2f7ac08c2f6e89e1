"""Sequential region loop and the end-to-end run pipeline.

The pipeline has five named stages, each taking explicit inputs:

``load_config``
    :func:`engine.settings.load_settings` (done by the caller).
``check_dependencies``
    packages the analysis declares under ``[analysis] requires``.
``load_reference_tables``
    reference years, catchability parameters and the SAR cross-walk.
``analyse_regions``
    :func:`run_for_region` for every selected region, in order.
``persist``
    the accumulated workspace written as a single JSON snapshot.

Any error aborts the run at the point it is raised; outputs written by regions
that already finished are left on disk.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Sequence

from engine import constants
from engine.analysis import RegionRequest, SpatialAnalysis, resolve_analysis
from engine.bootstrap import check_dependencies
from engine.data_loaders.reference_tables import ReferenceTables, load_reference_tables
from engine.formatting import paste_nicely
from engine.settings import RunParameters, RunSettings
from engine.spatial_units import resolve_spatial_unit
from engine.workspace import AnalysisWorkspace, RegionInvocation, build_snapshot, save_snapshot

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Outcome of a completed run."""

    regions: tuple[str, ...]
    workspace: AnalysisWorkspace
    snapshot_path: Path
    elapsed_seconds: float


def run_for_region(
    region_code: str,
    reference_tables: ReferenceTables,
    parameters: RunParameters,
    *,
    analysis: SpatialAnalysis,
    workspace: AnalysisWorkspace,
) -> AnalysisWorkspace:
    """Validate ``region_code`` and hand it to ``analysis``.

    Reference years and the spatial unit are resolved before the analysis is
    called, so a region that fails validation triggers no analysis work.
    Returns the workspace handed back by the analysis.
    """

    reference_years = reference_tables.reference_years_for(region_code)
    spatial_unit = resolve_spatial_unit(region_code)
    record = reference_tables.region(region_code)

    request = RegionRequest(
        region_code=region_code,
        region_name=record.name if record is not None else None,
        is_major=record.is_major if record is not None else None,
        spatial_unit=spatial_unit,
        reference_years=reference_years,
        q_parameters=reference_tables.q_parameters,
        parameters=parameters,
    )

    LOGGER.info("Investigate %s by %s", region_code, spatial_unit)
    started_at = datetime.now(timezone.utc).isoformat()
    start = time.perf_counter()
    result = analysis(request, workspace)
    if not isinstance(result, AnalysisWorkspace):
        raise TypeError(
            f"Analysis for {region_code} returned {type(result).__name__}; expected AnalysisWorkspace"
        )

    result.record_invocation(
        RegionInvocation(
            region_code=region_code,
            spatial_unit=spatial_unit.value,
            start_year=reference_years.start_year,
            end_year=reference_years.end_year,
            started_at=started_at,
            elapsed_seconds=round(time.perf_counter() - start, 6),
        )
    )
    return result


def run(
    selected_regions: Sequence[str],
    reference_tables: ReferenceTables,
    parameters: RunParameters,
    *,
    analysis: SpatialAnalysis,
    output_dir: str | Path,
    workspace: AnalysisWorkspace | None = None,
) -> RunResult:
    """Analyse ``selected_regions`` in order and persist the workspace snapshot."""

    regions = tuple(selected_regions)
    start = time.perf_counter()
    workspace = workspace if workspace is not None else AnalysisWorkspace()
    workspace.metadata.setdefault("started_at", datetime.now(timezone.utc).isoformat())

    LOGGER.info("Investigate %d region(s): %s", len(regions), paste_nicely(regions))
    if len(set(regions)) != len(regions):
        LOGGER.warning("Region selection contains duplicates: %s", paste_nicely(regions))

    for region_code in regions:
        try:
            workspace = run_for_region(
                region_code,
                reference_tables,
                parameters,
                analysis=analysis,
                workspace=workspace,
            )
        except Exception as exc:
            LOGGER.error("Run aborted at region %s: %s", region_code, exc)
            raise

    elapsed = time.perf_counter() - start
    workspace.metadata["elapsed_seconds"] = round(elapsed, 6)

    snapshot = build_snapshot(
        workspace,
        reference_tables={
            "reference_years": reference_tables.reference_years,
            "q_parameters": reference_tables.q_parameters,
            "regions": reference_tables.regions,
        },
        parameters=parameters.to_dict(),
        regions=list(regions),
    )
    snapshot_path = save_snapshot(snapshot, Path(output_dir) / constants.SNAPSHOT_FILENAME)
    LOGGER.info("Run finished in %.2f s", elapsed)

    return RunResult(
        regions=regions,
        workspace=workspace,
        snapshot_path=snapshot_path,
        elapsed_seconds=elapsed,
    )


def run_pipeline(settings: RunSettings, analysis: SpatialAnalysis | None = None) -> RunResult:
    """Run every stage for ``settings``; ``analysis`` overrides ``settings.analysis``.

    Packages named by ``settings.analysis_requires`` are checked before the
    analysis is resolved or any table is read.
    """

    parameters = settings.parameters
    LOGGER.info("Stage check_dependencies")
    check_dependencies(settings.analysis_requires)
    if analysis is None:
        analysis = resolve_analysis(settings.analysis)

    LOGGER.info("Stage load_reference_tables")
    reference_tables = load_reference_tables(
        parameters.q_parameters_path,
        reference_years_path=parameters.reference_years_path,
    )

    if parameters.make_gif:
        LOGGER.info("Animated output requested; rendering is left to the analysis")

    LOGGER.info("Stage analyse_regions")
    return run(
        settings.regions,
        reference_tables,
        parameters,
        analysis=analysis,
        output_dir=settings.output_dir,
    )


__all__ = ["RunResult", "run", "run_for_region", "run_pipeline"]
