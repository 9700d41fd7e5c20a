"""CSV read-model adapter for loadings, calendar exceptions and capacity."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

import pandas as pd

from app_config.settings import get_settings
from core.domain import CalendarException, Capacity, ExceptionKind, Loading
from core.time import parse_optional_date
from core.transformations import (
    loadings_from_frame,
    prepare_loadings_frame,
    remove_duplicates,
    validate_schema,
)
from loadplan.config import (
    CALENDAR_FILE,
    CAPACITY_FILE,
    LOADINGS_FILE,
    REQUIRED_CALENDAR_COLUMNS,
    REQUIRED_CAPACITY_COLUMNS,
    REQUIRED_LOADING_COLUMNS,
)
from loadplan.exceptions import DataError

logger = logging.getLogger(__name__)


class DataRepository(Protocol):
    """Protocol for repositories that load/save pandas DataFrames."""

    def load(self, relative_path: str) -> pd.DataFrame: ...

    def save(self, df: pd.DataFrame, relative_path: str) -> None: ...


class CSVLoadingRepository:
    """Filesystem-backed CSV read model.

    Malformed files (missing or unreadable, missing columns) raise
    :class:`DataError`. Malformed rows are dropped and logged as warnings.
    """

    def __init__(self, *, base_path: Path | None = None) -> None:
        settings = get_settings()
        self._base_path = base_path or settings.data_root

    def load(self, relative_path: str) -> pd.DataFrame:
        full_path = self._resolve(relative_path)
        if not full_path.exists():
            raise DataError(f"File not found: {full_path}", details={"path": str(full_path)})
        try:
            return pd.read_csv(full_path, dtype=str, keep_default_na=True)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            raise DataError(
                f"Could not parse {full_path}",
                details={"path": str(full_path), "error": str(exc)},
            ) from exc

    def save(self, df: pd.DataFrame, relative_path: str) -> None:
        full_path = self._resolve(relative_path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(full_path, index=False)

    def load_loadings(self, relative_path: str = LOADINGS_FILE) -> list[Loading]:
        df = self._load_checked(relative_path, REQUIRED_LOADING_COLUMNS)

        result = prepare_loadings_frame(df)
        for warning in result.warnings:
            logger.warning(f"{relative_path}: {warning}")

        frame = result.dataframe
        deduplicated = remove_duplicates(frame, ["id"], keep="last")
        if len(deduplicated) < len(frame):
            logger.warning(
                f"{relative_path}: {len(frame) - len(deduplicated)} duplicate loading ids, "
                "keeping the last row of each"
            )

        loadings = loadings_from_frame(deduplicated)
        logger.info(f"Loaded {len(loadings)} loadings from {relative_path}")
        return loadings

    def load_calendar_exceptions(
        self, relative_path: str = CALENDAR_FILE
    ) -> list[CalendarException]:
        df = self._load_checked(relative_path, REQUIRED_CALENDAR_COLUMNS)

        exceptions: list[CalendarException] = []
        for index, row in enumerate(df.to_dict("records")):
            try:
                start = parse_optional_date(row["date"])
                kind = ExceptionKind(str(row["kind"]).strip().lower())
                end = parse_optional_date(row.get("end_date"))
            except (ValueError, TypeError) as exc:
                logger.warning(f"{relative_path}: skipping row {index}: {exc}")
                continue
            if start is None:
                logger.warning(f"{relative_path}: skipping row {index}: missing date")
                continue
            name = row.get("name")
            exceptions.append(
                CalendarException(
                    date=start,
                    kind=kind,
                    end_date=end,
                    name=None if pd.isna(name) else str(name),
                )
            )

        logger.info(f"Loaded {len(exceptions)} calendar exceptions from {relative_path}")
        return exceptions

    def load_capacities(self, relative_path: str = CAPACITY_FILE) -> dict[str, Capacity]:
        """
        Load section capacities.

        A row without ``date`` sets the section default; a row with ``date``
        is a per-day override. Sections with overrides but no default row
        get a default of 0.
        """
        df = self._load_checked(relative_path, REQUIRED_CAPACITY_COLUMNS)
        if "date" not in df.columns:
            df["date"] = None

        defaults: dict[str, float] = {}
        overrides: dict[str, dict] = {}
        for index, row in enumerate(df.to_dict("records")):
            section_id = str(row["section_id"]).strip()
            value = pd.to_numeric(row["capacity"], errors="coerce")
            try:
                day = parse_optional_date(row["date"])
            except (ValueError, TypeError) as exc:
                logger.warning(f"{relative_path}: skipping row {index}: {exc}")
                continue
            if pd.isna(value) or value < 0:
                logger.warning(
                    f"{relative_path}: skipping row {index}: invalid capacity {row['capacity']!r}"
                )
                continue
            if day is None:
                defaults[section_id] = float(value)
            else:
                overrides.setdefault(section_id, {})[day] = float(value)

        sections = sorted(set(defaults) | set(overrides))
        capacities = {
            section_id: Capacity(
                section_id=section_id,
                default_capacity=defaults.get(section_id, 0.0),
                date_overrides=overrides.get(section_id, {}),
            )
            for section_id in sections
        }
        logger.info(f"Loaded capacity for {len(capacities)} sections from {relative_path}")
        return capacities

    def _load_checked(self, relative_path: str, required: list[str]) -> pd.DataFrame:
        df = self.load(relative_path)
        valid, errors = validate_schema(df, required_columns=set(required))
        if not valid:
            raise DataError(
                f"Invalid schema in {relative_path}",
                details={"errors": "; ".join(errors)},
            )
        return df

    def _resolve(self, relative_path: str) -> Path:
        candidate = Path(relative_path)
        if candidate.is_absolute():
            return candidate
        return self._base_path / candidate
