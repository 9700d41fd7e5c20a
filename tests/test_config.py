"""
Tests for the centralized configuration system.

Tests cover:
- Default configuration values
- Environment variable overrides
- Configuration validation
- Settings caching
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from adapters import CSVLoadingRepository
from app_config.settings import Settings, get_settings
from core.algorithms import BarLayout
from loadplan.config import LOADINGS_FILE


class TestSettingsDefaults:
    """Test default configuration values."""

    def test_geometry_defaults(self):
        """Test bar geometry defaults."""
        settings = Settings()

        assert settings.day_cell_width == 32
        assert settings.bar_height == 32
        assert settings.bar_gap == 4
        assert settings.comment_height == 18
        assert settings.comment_gap == 4
        assert settings.base_row_height == 44

    def test_interaction_defaults(self):
        """Test resize interaction defaults."""
        settings = Settings()

        assert settings.drag_threshold_px == 3
        assert settings.click_suppress_ms == 250
        assert settings.resize_min_days == 1

    def test_misc_defaults(self):
        """Test calendar, logging and data path defaults."""
        settings = Settings()

        assert settings.timezone == "Europe/Minsk"
        assert settings.log_level == "INFO"
        assert settings.data_root == Path("data")


class TestEnvironmentVariableOverrides:
    """Test environment variable overrides."""

    def test_cell_width_override(self):
        """Test DAY_CELL_WIDTH environment variable."""
        with patch.dict(os.environ, {"DAY_CELL_WIDTH": "24"}):
            settings = Settings()
            assert settings.day_cell_width == 24

    def test_case_insensitive_override(self):
        """Environment variable names are case-insensitive."""
        with patch.dict(os.environ, {"click_suppress_ms": "400"}):
            settings = Settings()
            assert settings.click_suppress_ms == 400

    def test_data_root_override(self):
        """Test DATA_ROOT is converted to a Path."""
        with patch.dict(os.environ, {"DATA_ROOT": "/tmp/loadplan"}):
            settings = Settings()
            assert settings.data_root == Path("/tmp/loadplan")

    def test_log_level_is_normalized(self):
        """Lower-case level names are accepted."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            settings = Settings()
            assert settings.log_level == "DEBUG"


class TestSettingsValidation:
    """Test configuration validation."""

    def test_cell_width_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(day_cell_width=0)

    def test_drag_threshold_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            Settings(drag_threshold_px=-1)

    def test_resize_min_days_at_least_one(self):
        with pytest.raises(ValidationError):
            Settings(resize_min_days=0)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_label_thresholds(self):
        settings = Settings(label_full_width=150)
        assert settings.get_label_thresholds() == {"full": 150, "compact": 70, "minimal": 35}


class TestSettingsCaching:
    """Test settings caching behavior."""

    def test_get_settings_returns_same_instance(self):
        """get_settings is cached."""
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(self):
        """Clearing the cache picks up new environment values."""
        with patch.dict(os.environ, {"BAR_HEIGHT": "20"}):
            get_settings.cache_clear()
            assert get_settings().bar_height == 20
        get_settings.cache_clear()
        assert get_settings().bar_height == 32

    def test_consumers_read_settings_at_call_time(self, tmp_path):
        """Layout and repository pick up overrides made after import."""
        (tmp_path / LOADINGS_FILE).write_text(
            "id,employee_id,section_id,start,end,rate\nL1,e1,s1,2024-03-04,2024-03-05,1\n",
            encoding="utf-8",
        )
        with patch.dict(os.environ, {"BAR_GAP": "10", "DATA_ROOT": str(tmp_path)}):
            get_settings.cache_clear()
            layout = BarLayout.from_settings(get_settings())
            loadings = CSVLoadingRepository().load_loadings()

        assert layout.bar_gap == 10
        assert [loading.id for loading in loadings] == ["L1"]
