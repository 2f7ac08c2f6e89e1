"""Exception hierarchy raised by the region run driver."""

from __future__ import annotations


class RunError(Exception):
    """Base class for failures that abort a region run."""


class ConfigError(RunError):
    """Raised when ``run_config.toml`` or a CLI override holds an invalid value."""


class MissingDependencyError(RunError):
    """Raised when required third-party distributions cannot be imported."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required packages: "
            + ", ".join(self.missing)
            + ". Install them with `pip install "
            + " ".join(self.missing)
            + "`."
        )


class DataLoadError(RunError):
    """Raised when a required input table is missing, malformed or mistyped."""

    def __init__(self, table: str, message: str):
        self.table = table
        super().__init__(f"{table}: {message}")


class MissingReferenceYearsError(RunError):
    """Raised when a selected region has no (or no unique) reference-years row."""

    def __init__(self, region_code: str, matches: int = 0):
        self.region_code = region_code
        self.matches = matches
        if matches == 0:
            detail = "no reference years specified"
        else:
            detail = f"{matches} reference-year rows found, expected exactly one"
        super().__init__(
            f"Specify reference years for the biomass threshold: {region_code} ({detail})"
        )


class UnknownRegionError(RunError):
    """Raised when a region code has no spatial-unit assignment."""

    def __init__(self, region_code: str):
        self.region_code = region_code
        super().__init__(f"No spatial unit defined for region: {region_code!r}")


__all__ = [
    "ConfigError",
    "DataLoadError",
    "MissingDependencyError",
    "MissingReferenceYearsError",
    "RunError",
    "UnknownRegionError",
]
