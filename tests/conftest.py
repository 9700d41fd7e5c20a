"""Global pytest configuration and cross-cutting fixtures."""

from __future__ import annotations

import random
import sys
from collections.abc import Callable, Iterator
from datetime import date
from pathlib import Path

import numpy as np
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"

if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from app_config.settings import get_settings  # noqa: E402
from core.domain import DateRange, Loading  # noqa: E402


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    """Seed Python and NumPy RNGs for deterministic tests."""

    random.seed(1337)
    np.random.seed(1337)


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Iterator[None]:
    """Make every test read settings from its own environment."""

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def env_vars(monkeypatch: pytest.MonkeyPatch) -> Callable[[dict[str, str]], None]:
    """Temporarily set environment variables for the duration of a test."""

    def _apply(values: dict[str, str]) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key, value)

    return _apply


@pytest.fixture
def march_window() -> DateRange:
    """Two weeks starting on Monday 2024-03-04."""

    return DateRange(date(2024, 3, 4), date(2024, 3, 17))


@pytest.fixture
def make_loading() -> Callable[..., Loading]:
    """Factory for loadings with sensible defaults."""

    def _factory(
        loading_id: str,
        start: date,
        end: date,
        rate: float = 1.0,
        **kwargs,
    ) -> Loading:
        return Loading(
            id=loading_id,
            employee_id=kwargs.pop("employee_id", "emp-1"),
            date_range=DateRange(start, end),
            rate=rate,
            section_id=kwargs.pop("section_id", "sec-1"),
            **kwargs,
        )

    return _factory
