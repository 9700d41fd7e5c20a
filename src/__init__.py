"""Top-level package for the loading timeline planner source code."""

# Expose key subpackages for convenient imports in tests and applications.
__all__ = ["adapters", "app_config", "core", "loadplan"]
