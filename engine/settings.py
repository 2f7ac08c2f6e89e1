"""Run configuration: ``run_config.toml`` plus environment and CLI overrides.

Resolution order for every key (highest priority first):

1. Explicit overrides passed by the caller (the CLI options).
2. ``HERRING_<KEY>`` environment variables, e.g. ``HERRING_PLOT_DPI=300``.
3. The ``run_config.toml`` file.
4. Defaults from :mod:`engine.constants`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore[import-not-found]

from engine import constants
from engine.errors import ConfigError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunParameters:
    """Scalar parameters shared by every region in a run."""

    spawn_index_threshold: float | None = constants.DEFAULT_SPAWN_INDEX_THRESHOLD
    min_consecutive_years: int = constants.DEFAULT_MIN_CONSECUTIVE_YEARS
    buffer_distance_m: float = constants.DEFAULT_BUFFER_DISTANCE_M
    intended_harvest_rate: float = constants.DEFAULT_INTENDED_HARVEST_RATE
    intended_harvest_first_year: int = constants.DEFAULT_INTENDED_HARVEST_FIRST_YEAR
    plot_dpi: int = constants.DEFAULT_PLOT_DPI
    make_gif: bool = constants.DEFAULT_MAKE_GIF
    dive_transects_path: Path = constants.DATA_DIR / constants.DIVE_TRANSECTS_FILENAME
    q_parameters_path: Path = constants.DATA_DIR / constants.Q_PARAMETERS_FILENAME
    reference_years_path: Path | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RunSettings:
    """Everything the driver needs to start a run."""

    regions: tuple[str, ...] = constants.DEFAULT_REGIONS
    parameters: RunParameters = field(default_factory=RunParameters)
    output_dir: Path = constants.OUTPUT_DIR
    analysis: str = constants.DEFAULT_ANALYSIS
    # Import names the analysis needs; ``None`` checks the driver's own stack.
    analysis_requires: tuple[str, ...] | None = None
    debug: bool = False
    config_path: Path | None = None
    ignored_keys: tuple[str, ...] = ()


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "t", "yes", "y", "1", "on"}:
            return True
        if normalized in {"false", "f", "no", "n", "0", "off"}:
            return False
    raise ConfigError(f"{key} must be a boolean value, got {value!r}")


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc
    if not number.is_integer():
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return int(number)


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be a number, got {value!r}") from exc


def _as_optional_float(value: Any, key: str) -> float | None:
    if value is None or (isinstance(value, str) and value.strip().lower() in {"", "na", "none"}):
        return None
    return _as_float(value, key)


def _as_path(value: Any, key: str) -> Path:
    if not isinstance(value, (str, os.PathLike)) or not str(value).strip():
        raise ConfigError(f"{key} must be a path, got {value!r}")
    return Path(value).expanduser()


def _as_optional_path(value: Any, key: str) -> Path | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _as_path(value, key)


def _as_names(value: Any, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        tokens = value.split(",")
    elif isinstance(value, (list, tuple)):
        tokens = [str(item) for item in value]
    else:
        raise ConfigError(f"{key} must be a list of names, got {value!r}")
    return tuple(token.strip() for token in tokens if token.strip())


def _as_str(value: Any, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string, got {value!r}")
    return value.strip()


_PARAMETER_COERCERS: Mapping[str, Callable[[Any, str], Any]] = {
    "spawn_index_threshold": _as_optional_float,
    "min_consecutive_years": _as_int,
    "buffer_distance_m": _as_float,
    "intended_harvest_rate": _as_float,
    "intended_harvest_first_year": _as_int,
    "plot_dpi": _as_int,
    "make_gif": _as_bool,
    "dive_transects_path": _as_path,
    "q_parameters_path": _as_path,
    "reference_years_path": _as_optional_path,
}

_SETTINGS_COERCERS: Mapping[str, Callable[[Any, str], Any]] = {
    "regions": _as_names,
    "output_dir": _as_path,
    "analysis": _as_str,
    "analysis_requires": _as_names,
    "debug": _as_bool,
}


def read_config_file(config_path: str | Path | None) -> dict[str, Any]:
    """Return the flattened contents of ``config_path``.

    Keys from the ``[parameters]``, ``[inputs]`` and ``[analysis]`` tables are
    lifted to the top level; ``[analysis].entrypoint`` becomes ``analysis`` and
    ``[analysis].requires`` becomes ``analysis_requires``.
    A missing default config file yields an empty mapping; a missing explicit
    one is an error.
    """

    if config_path is None:
        path = constants.DEFAULT_CONFIG_PATH
        if not path.exists():
            LOGGER.debug("No run_config.toml found at %s; using defaults", path)
            return {}
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Unable to parse {path}: {exc}") from exc

    flattened: dict[str, Any] = {}
    for key, value in data.items():
        if key in {"parameters", "inputs"} and isinstance(value, Mapping):
            flattened.update(value)
        elif key == "analysis" and isinstance(value, Mapping):
            if "entrypoint" in value:
                flattened["analysis"] = value["entrypoint"]
            if "requires" in value:
                flattened["analysis_requires"] = value["requires"]
        else:
            flattened[key] = value

    # Relative input paths are resolved against the config file location.
    for key in ("dive_transects_path", "q_parameters_path", "reference_years_path", "output_dir"):
        raw = flattened.get(key)
        if isinstance(raw, str) and raw.strip() and not Path(raw).expanduser().is_absolute():
            flattened[key] = str(path.parent / raw)
    return flattened


def _environment_overrides(keys: list[str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key in keys:
        env_key = f"{constants.ENV_PREFIX}{key.upper()}"
        if env_key in os.environ:
            overrides[key] = os.environ[env_key]
    return overrides


def load_settings(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> RunSettings:
    """Build :class:`RunSettings` from file, environment and ``overrides``."""

    raw = read_config_file(config_path)
    known = list(_PARAMETER_COERCERS) + list(_SETTINGS_COERCERS)
    raw.update(_environment_overrides(known))
    raw.update({key: value for key, value in (overrides or {}).items() if value is not None})

    ignored = tuple(sorted(set(raw) - set(known)))
    for key in ignored:
        LOGGER.debug("Ignoring unknown configuration key: %s", key)

    parameter_values = {
        key: coerce(raw[key], key) for key, coerce in _PARAMETER_COERCERS.items() if key in raw
    }
    settings_values = {
        key: coerce(raw[key], key) for key, coerce in _SETTINGS_COERCERS.items() if key in raw
    }

    parameters = RunParameters(**parameter_values)
    if parameters.min_consecutive_years < 1:
        raise ConfigError("min_consecutive_years must be at least 1")
    if parameters.buffer_distance_m < 0:
        raise ConfigError("buffer_distance_m must be non-negative")
    if not 0.0 <= parameters.intended_harvest_rate <= 1.0:
        raise ConfigError("intended_harvest_rate must lie between 0 and 1")
    if parameters.plot_dpi <= 0:
        raise ConfigError("plot_dpi must be positive")

    return RunSettings(
        parameters=parameters,
        config_path=Path(config_path) if config_path is not None else None,
        ignored_keys=ignored,
        **settings_values,
    )


__all__ = ["RunParameters", "RunSettings", "load_settings", "read_config_file"]
