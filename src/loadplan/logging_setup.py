"""Process-wide logging configuration."""

from __future__ import annotations

import logging
import sys

from app_config import get_settings


def configure_logging(level: str | int | None = None, fmt: str | None = None) -> None:
    """
    Configure the root logger with a single stream handler.

    Missing arguments fall back to ``Settings.log_level`` and
    ``Settings.log_format``. Calling it again replaces the handler.
    """
    settings = get_settings()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or settings.log_format))
    logging.basicConfig(level=level or settings.log_level, handlers=[handler], force=True)
    logging.getLogger(__name__).debug("Logging configured")
