"""Preparation of loading tables and integrity checks on loading entities."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from core.domain import DateRange, Loading
from core.time import parse_optional_date

from .data_cleaning import coerce_boolean, remove_incomplete_rows

LOADING_COLUMNS = {"id", "employee_id", "section_id", "start", "end", "rate"}
OPTIONAL_TEXT_COLUMNS = ["comment", "stage_id", "project_id"]


@dataclass(frozen=True)
class PreparationResult:
    """Return type bundling the prepared dataframe and warnings."""

    dataframe: pd.DataFrame
    warnings: list[str]


def prepare_loadings_frame(df: pd.DataFrame) -> PreparationResult:
    """
    Normalize a raw loadings table.

    - Identifier columns become strings
    - ``rate`` becomes numeric; unparseable rates drop the row
    - ``start``/``end`` become dates; unparseable dates drop the row
    - ``is_planned`` becomes boolean (missing column means actual loadings)

    Args:
        df: Raw loadings table with at least :data:`LOADING_COLUMNS`.

    Returns:
        PreparationResult with the cleaned table and one warning per kind of
        dropped row.
    """
    prepared = remove_incomplete_rows(df, ["id", "employee_id", "section_id"])
    warnings: list[str] = []
    dropped = len(df) - len(prepared)
    if dropped:
        warnings.append(f"{dropped} rows have missing identifiers")

    for column in ("id", "employee_id", "section_id"):
        prepared[column] = prepared[column].astype(str).str.strip()

    prepared["rate"] = pd.to_numeric(prepared["rate"], errors="coerce")
    bad_rate = ~np.isfinite(prepared["rate"].to_numpy(dtype=float))
    if bad_rate.any():
        warnings.append(f"{int(bad_rate.sum())} rows have invalid rate values")
        prepared = prepared[~bad_rate].reset_index(drop=True)

    for column in ("start", "end"):
        parsed = []
        for value in prepared[column]:
            try:
                parsed.append(parse_optional_date(value))
            except (ValueError, TypeError):
                parsed.append(None)
        prepared[column] = parsed

    bad_dates = prepared["start"].isna() | prepared["end"].isna()
    if bad_dates.any():
        warnings.append(f"{int(bad_dates.sum())} rows have invalid dates")
        prepared = prepared[~bad_dates].reset_index(drop=True)

    if "is_planned" in prepared.columns:
        prepared["is_planned"] = coerce_boolean(prepared["is_planned"])
    else:
        prepared["is_planned"] = False

    for column in OPTIONAL_TEXT_COLUMNS:
        if column in prepared.columns:
            prepared[column] = pd.Series(
                [optional_text(value) for value in prepared[column]],
                index=prepared.index,
                dtype=object,
            )

    return PreparationResult(dataframe=prepared, warnings=warnings)


def optional_text(value: Any) -> str | None:
    """Return *value* as a string, or ``None`` for missing and blank cells."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    text = str(value)
    return text if text.strip() else None


def loadings_from_frame(df: pd.DataFrame) -> list[Loading]:
    """Build Loading entities from a table produced by :func:`prepare_loadings_frame`."""

    loadings: list[Loading] = []
    for row in df.to_dict("records"):
        loadings.append(
            Loading(
                id=row["id"],
                employee_id=row["employee_id"],
                date_range=DateRange(row["start"], row["end"]),
                rate=float(row["rate"]),
                section_id=row["section_id"],
                comment=optional_text(row.get("comment")),
                stage_id=optional_text(row.get("stage_id")),
                project_id=optional_text(row.get("project_id")),
                is_planned=bool(row.get("is_planned", False)),
            )
        )
    return loadings


def validate_loadings(loadings: Iterable[Loading]) -> tuple[bool, list[str]]:
    """
    Report data-integrity problems the engine tolerates but callers should see.

    Reversed ranges are rendered as a single day and negative rates are
    ignored by aggregation; duplicate ids make lane placement ambiguous.
    """
    loadings = list(loadings)
    issues: list[str] = []

    for loading in loadings:
        if not loading.date_range.is_valid:
            issues.append(
                f"Loading {loading.id} ends before it starts "
                f"({loading.start.isoformat()} > {loading.end.isoformat()})"
            )
        if loading.rate < 0:
            issues.append(f"Loading {loading.id} has negative rate {loading.rate}")

    counts = Counter(loading.id for loading in loadings)
    duplicates = sorted(key for key, count in counts.items() if count > 1)
    if duplicates:
        issues.append(f"Duplicate loading ids: {duplicates}")

    return len(issues) == 0, issues


def filter_loadings(
    loadings: Iterable[Loading],
    *,
    window: DateRange | None = None,
    employee_ids: Sequence[str] | None = None,
    section_ids: Sequence[str] | None = None,
    include_planned: bool = True,
) -> list[Loading]:
    """Return the loadings matching the given row and window criteria."""

    result: list[Loading] = []
    for loading in loadings:
        if employee_ids and loading.employee_id not in employee_ids:
            continue
        if section_ids and loading.section_id not in section_ids:
            continue
        if not include_planned and loading.is_planned:
            continue
        if window is not None and not loading.date_range.normalized().overlaps(window):
            continue
        result.append(loading)
    return result
