from .reference_tables import (
    ReferenceTables,
    ReferenceYears,
    crosswalk_records,
    load_q_parameters,
    load_reference_tables,
    load_reference_years,
    load_region_crosswalk,
)

__all__ = [
    "ReferenceTables",
    "ReferenceYears",
    "crosswalk_records",
    "load_q_parameters",
    "load_reference_tables",
    "load_reference_years",
    "load_region_crosswalk",
]
