"""Application services for the loading timeline."""

from loadplan.services.clock import resolve_zone, today
from loadplan.services.resize_controller import Preview, ResizeController
from loadplan.services.timeline_service import RowView, TimelineService

__all__ = [
    "Preview",
    "ResizeController",
    "RowView",
    "TimelineService",
    "resolve_zone",
    "today",
]
