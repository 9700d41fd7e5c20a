"""Low-level data cleaning helpers for tabular read-model data."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

import pandas as pd


def remove_duplicates(
    df: pd.DataFrame,
    subset: Iterable[str],
    *,
    keep: Literal["first", "last"] = "first",
) -> pd.DataFrame:
    """Return a copy of *df* without duplicate rows on *subset* columns."""

    return df.drop_duplicates(subset=list(subset), keep=keep).reset_index(drop=True)


def remove_incomplete_rows(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Remove rows where any of *columns* is missing or blank."""

    columns = [column for column in columns if column in df.columns]
    if not columns:
        return df.reset_index(drop=True)

    subset = df[columns]
    blank = subset.apply(lambda col: col.astype(str).str.strip() == "") & subset.notna()
    mask = subset.isna().any(axis=1) | blank.any(axis=1)
    return df[~mask].reset_index(drop=True)


def coerce_boolean(series: pd.Series, *, default: bool = False) -> pd.Series:
    """Map truthy strings/numbers ("true", "1", "yes") to bool; missing becomes *default*."""

    def convert(value) -> bool:
        if pd.isna(value):
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in {"true", "1", "yes", "y"}

    return series.map(convert).astype(bool)


def validate_schema(
    df: pd.DataFrame,
    *,
    required_columns: set[str],
    expected_dtypes: dict[str, str] | None = None,
) -> tuple[bool, list[str]]:
    """Validate that *df* contains the requested columns and dtypes."""

    errors: list[str] = []
    missing = required_columns - set(df.columns)
    if missing:
        errors.append(f"Missing columns: {sorted(missing)}")

    if expected_dtypes:
        for column, expected in expected_dtypes.items():
            if column not in df.columns:
                continue
            actual = str(df[column].dtype)
            if actual != expected:
                errors.append(f"Column '{column}' has dtype {actual}, expected {expected}")

    return not errors, errors
