"""Project-level paths and default run parameters."""

from __future__ import annotations

from pathlib import Path


_PACKAGE_ROOT = Path(__file__).resolve().parent
REPO_ROOT = _PACKAGE_ROOT.parent

DEFAULT_CONFIG_PATH = REPO_ROOT / "run_config.toml"
DATA_DIR = REPO_ROOT / "Data"
OUTPUT_DIR = REPO_ROOT / "output"

DIVE_TRANSECTS_FILENAME = "dive_transects_with_lat_long_June2_2017.xlsx"
Q_PARAMETERS_FILENAME = "qPars.csv"
SNAPSHOT_FILENAME = "workspace_snapshot.json"
LOG_FILENAME = "run.log"

DEFAULT_REGIONS: tuple[str, ...] = ("CC",)

# Spawn index threshold in tonnes; ``None`` disables the threshold.
DEFAULT_SPAWN_INDEX_THRESHOLD: float | None = None
DEFAULT_MIN_CONSECUTIVE_YEARS = 3
# Buffer (m) to include locations just outside the region polygon.
DEFAULT_BUFFER_DISTANCE_M = 10000.0
DEFAULT_INTENDED_HARVEST_RATE = 0.2
DEFAULT_INTENDED_HARVEST_FIRST_YEAR = 1983
DEFAULT_PLOT_DPI = 600
DEFAULT_MAKE_GIF = False

DEFAULT_ANALYSIS = "dry-run"

ENV_PREFIX = "HERRING_"


__all__ = [
    "DATA_DIR",
    "DEFAULT_ANALYSIS",
    "DEFAULT_BUFFER_DISTANCE_M",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_INTENDED_HARVEST_FIRST_YEAR",
    "DEFAULT_INTENDED_HARVEST_RATE",
    "DEFAULT_MAKE_GIF",
    "DEFAULT_MIN_CONSECUTIVE_YEARS",
    "DEFAULT_PLOT_DPI",
    "DEFAULT_REGIONS",
    "DEFAULT_SPAWN_INDEX_THRESHOLD",
    "DIVE_TRANSECTS_FILENAME",
    "ENV_PREFIX",
    "LOG_FILENAME",
    "OUTPUT_DIR",
    "Q_PARAMETERS_FILENAME",
    "REPO_ROOT",
    "SNAPSHOT_FILENAME",
]
