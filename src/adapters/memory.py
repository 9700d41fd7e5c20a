"""In-memory read model and mutation gateway."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from typing import Protocol

from core.domain import DateRange, Loading
from core.time import to_date

logger = logging.getLogger(__name__)


class LoadingMutationGateway(Protocol):
    """The single mutation the timeline ever requests."""

    def update_loading_dates(self, loading_id: str, new_start: date, new_end: date) -> bool: ...


class InMemoryLoadingStore:
    """Dictionary-backed loading store implementing :class:`LoadingMutationGateway`."""

    def __init__(self, loadings: Iterable[Loading] = ()) -> None:
        self._loadings: dict[str, Loading] = {}
        for loading in loadings:
            self.add(loading)
        self.update_calls: list[tuple[str, date, date]] = []

    def __len__(self) -> int:
        return len(self._loadings)

    def __contains__(self, loading_id: object) -> bool:
        return loading_id in self._loadings

    def add(self, loading: Loading) -> None:
        self._loadings[loading.id] = loading

    def get(self, loading_id: str) -> Loading | None:
        return self._loadings.get(loading_id)

    def all(self) -> list[Loading]:
        return sorted(self._loadings.values(), key=lambda loading: loading.id)

    def for_employee(self, employee_id: str) -> list[Loading]:
        return [loading for loading in self.all() if loading.employee_id == employee_id]

    def update_loading_dates(self, loading_id: str, new_start: date, new_end: date) -> bool:
        """
        Persist new dates for a loading.

        Returns False for an unknown id or a range that ends before it starts;
        the stored loading is left untouched in both cases.
        """
        new_start, new_end = to_date(new_start), to_date(new_end)
        self.update_calls.append((loading_id, new_start, new_end))

        loading = self._loadings.get(loading_id)
        if loading is None:
            logger.warning(f"Update rejected: unknown loading {loading_id}")
            return False

        date_range = DateRange(new_start, new_end)
        if not date_range.is_valid:
            logger.warning(f"Update rejected for {loading_id}: {new_start} > {new_end}")
            return False

        self._loadings[loading_id] = loading.with_range(date_range)
        logger.info(f"Loading {loading_id} moved to {new_start.isoformat()}..{new_end.isoformat()}")
        return True
