"""Pure layout, aggregation and interaction logic for the loading timeline."""

from __future__ import annotations

__all__ = [
    "algorithms",
    "domain",
    "time",
    "transformations",
]
