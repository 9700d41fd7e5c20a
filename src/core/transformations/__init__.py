"""Pure data cleaning, preparation and period utilities."""

from .data_cleaning import (
    coerce_boolean,
    remove_duplicates,
    remove_incomplete_rows,
    validate_schema,
)
from .periods import daily_workloads, group_daily_periods, is_active_on
from .preparation import (
    LOADING_COLUMNS,
    PreparationResult,
    filter_loadings,
    loadings_from_frame,
    optional_text,
    prepare_loadings_frame,
    validate_loadings,
)

__all__ = [
    "coerce_boolean",
    "remove_duplicates",
    "remove_incomplete_rows",
    "validate_schema",
    "daily_workloads",
    "group_daily_periods",
    "is_active_on",
    "LOADING_COLUMNS",
    "PreparationResult",
    "prepare_loadings_frame",
    "loadings_from_frame",
    "optional_text",
    "validate_loadings",
    "filter_loadings",
]
