"""Tests for :mod:`loadplan.services.clock`."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from loadplan.exceptions import ConfigurationError
from loadplan.services import resolve_zone, today

pytestmark = pytest.mark.unit


def test_today__with_aware_now__uses_target_zone() -> None:
    # Given: 22:30 UTC is already the next day in Minsk (UTC+3)
    now = datetime(2024, 3, 4, 22, 30, tzinfo=timezone.utc)

    # When / Then
    assert today("Europe/Minsk", now=now) == date(2024, 3, 5)
    assert today("UTC", now=now) == date(2024, 3, 4)


def test_today__with_naive_now__treats_it_as_utc() -> None:
    assert today("Europe/Minsk", now=datetime(2024, 3, 4, 22, 30)) == date(2024, 3, 5)


def test_today__defaults_to_configured_zone(env_vars) -> None:
    env_vars({"TIMEZONE": "America/New_York"})
    now = datetime(2024, 3, 5, 2, 0, tzinfo=timezone.utc)

    assert today(now=now) == date(2024, 3, 4)


def test_resolve_zone__with_unknown_name__raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        resolve_zone("Mars/Olympus_Mons")

    assert excinfo.value.details == {"timezone": "Mars/Olympus_Mons"}
