"""Tests for :mod:`adapters.memory`."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

import pytest

from adapters import InMemoryLoadingStore, LoadingMutationGateway
from core.domain import DateRange, Loading

pytestmark = pytest.mark.unit


@pytest.fixture
def store(make_loading: Callable[..., Loading]) -> InMemoryLoadingStore:
    return InMemoryLoadingStore(
        [
            make_loading("B", date(2024, 3, 6), date(2024, 3, 8), employee_id="e2"),
            make_loading("A", date(2024, 3, 4), date(2024, 3, 5), employee_id="e1"),
        ]
    )


def test_update_loading_dates__with_known_id__persists_range(store: InMemoryLoadingStore) -> None:
    # Given / When
    ok = store.update_loading_dates("A", date(2024, 3, 4), date(2024, 3, 9))

    # Then
    assert ok is True
    assert store.get("A").date_range == DateRange(date(2024, 3, 4), date(2024, 3, 9))
    assert store.update_calls == [("A", date(2024, 3, 4), date(2024, 3, 9))]


def test_update_loading_dates__accepts_iso_strings(store: InMemoryLoadingStore) -> None:
    assert store.update_loading_dates("A", "2024-03-04", "2024-03-06") is True
    assert store.get("A").end == date(2024, 3, 6)


def test_update_loading_dates__with_unknown_id__fails(store: InMemoryLoadingStore) -> None:
    assert store.update_loading_dates("Z", date(2024, 3, 4), date(2024, 3, 5)) is False
    assert "Z" not in store


def test_update_loading_dates__with_reversed_range__fails_without_change(
    store: InMemoryLoadingStore,
) -> None:
    before = store.get("A")

    assert store.update_loading_dates("A", date(2024, 3, 9), date(2024, 3, 4)) is False
    assert store.get("A") == before


def test_queries__are_sorted_and_filtered(store: InMemoryLoadingStore) -> None:
    assert len(store) == 2
    assert [loading.id for loading in store.all()] == ["A", "B"]
    assert [loading.id for loading in store.for_employee("e2")] == ["B"]


def test_store__satisfies_gateway_protocol(store: InMemoryLoadingStore) -> None:
    gateway: LoadingMutationGateway = store

    assert callable(gateway.update_loading_dates)
