"""Centralized application configuration using pydantic-settings.

This module provides the configuration system for the loading timeline engine,
supporting environment variables, .env files, and sensible defaults.

Configuration Categories:
- Geometry: Day-cell width, bar height, gaps and paddings
- Interaction: Drag threshold, click suppression window, minimum resize length
- Labels: Width thresholds for bar label display modes
- Logging: Level and format
- Data Paths: Base directory for the CSV read model

Environment Variables:
- DAY_CELL_WIDTH: Width of a single day cell in pixels (default: 32)
- DRAG_THRESHOLD_PX: Pointer travel before a gesture counts as a drag (default: 3)
- CLICK_SUPPRESS_MS: Click grace window after a finished drag (default: 250)
- TIMEZONE: Zone used by the caller-side ``today()`` helper (default: Europe/Minsk)
- LOG_LEVEL: Logging level (default: INFO)

Example:
    >>> from app_config import get_settings
    >>> settings = get_settings()
    >>> settings.day_cell_width
    32
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Centralized application configuration.

    All settings can be overridden via environment variables or a .env file.
    Environment variables take precedence over .env file values.
    """

    # ===== Geometry =====
    day_cell_width: int = Field(
        default=32,
        description="Width of one day cell in pixels",
        ge=1,
    )
    bar_height: int = Field(default=32, description="Height of a loading bar", ge=1)
    bar_gap: int = Field(default=4, description="Vertical gap between lanes", ge=0)
    bar_top_padding: int = Field(default=8, ge=0)
    bar_bottom_padding: int = Field(default=8, ge=0)
    comment_height: int = Field(
        default=18,
        description="Height of the comment sub-row reserved under a commented bar",
        ge=0,
    )
    comment_gap: int = Field(default=4, ge=0)
    base_row_height: int = Field(
        default=44,
        description="Minimum height of a timeline row",
        ge=1,
    )

    # ===== Interaction =====
    drag_threshold_px: int = Field(
        default=3,
        description="Minimum pointer travel before a gesture counts as a drag",
        ge=0,
    )
    click_suppress_ms: int = Field(
        default=250,
        description="Window after a finished drag during which editor clicks are ignored",
        ge=0,
    )
    resize_min_days: int = Field(
        default=1,
        description="Minimum length of a resized range in days",
        ge=1,
    )

    # ===== Labels =====
    label_full_width: int = Field(default=120, ge=0)
    label_compact_width: int = Field(default=70, ge=0)
    label_minimal_width: int = Field(default=35, ge=0)

    # ===== Calendar =====
    timezone: str = Field(
        default="Europe/Minsk",
        description="Timezone used to resolve 'today' on the caller side",
    )

    # ===== Logging =====
    log_level: str = Field(default="INFO", description="Root logging level")
    log_format: str = Field(default="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    # ===== Data Paths =====
    data_root: Path = Field(
        default=Path("data"),
        description="Base directory for CSV read-model files",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names and reject unknown ones."""
        if isinstance(v, str):
            v = v.strip().upper()
            if not isinstance(logging.getLevelName(v), int):
                raise ValueError(f"Unknown log level: {v!r}")
        return v

    def get_label_thresholds(self) -> dict[str, int]:
        """Get label display-mode thresholds as a dictionary."""
        return {
            "full": self.label_full_width,
            "compact": self.label_compact_width,
            "minimal": self.label_minimal_width,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return a cached Settings instance.

    This function caches the settings to avoid re-reading environment variables
    and .env files on every call.

    Returns:
        Cached Settings instance
    """
    settings = Settings()

    logger.info(f"Day cell width: {settings.day_cell_width}px")
    logger.info(f"Drag threshold: {settings.drag_threshold_px}px")
    logger.info(f"Click suppression window: {settings.click_suppress_ms}ms")
    logger.info(f"Timezone: {settings.timezone}")

    return settings
