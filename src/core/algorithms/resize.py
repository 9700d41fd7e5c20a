"""Pure state machine for interactive resizing of a loading's date range.

The machine knows nothing about input delivery: callers feed it events and
carry out the effects it returns. Phases run
``IDLE -> DRAGGING -> COMMITTED | CANCELLED -> IDLE``; only the commit path
emits a :class:`RequestUpdate` effect.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Union

from core.domain import Anchor, BarGeometry, DateRange, DragPhase, DragState, MapMode

from .geometry import map_to_pixels, pixels_to_days

# ===== Events =====


@dataclass(frozen=True)
class PointerDown:
    loading_id: str
    anchor: Anchor
    date_range: DateRange
    x: float


@dataclass(frozen=True)
class PointerMove:
    x: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class Cancel:
    """Explicit cancellation, e.g. the Escape key."""

    reason: str = "escape"


@dataclass(frozen=True)
class CaptureLost:
    """Pointer capture lost mid-gesture (window blur, tab switch)."""


@dataclass(frozen=True)
class Settle:
    """Return a finished gesture to IDLE once its effects have been handled."""


DragEvent = Union[PointerDown, PointerMove, PointerUp, Cancel, CaptureLost, Settle]


# ===== Effects =====


@dataclass(frozen=True)
class PreviewChanged:
    loading_id: str
    preview_range: DateRange
    geometry: BarGeometry | None


@dataclass(frozen=True)
class ApplyOptimistic:
    loading_id: str
    date_range: DateRange


@dataclass(frozen=True)
class RequestUpdate:
    loading_id: str
    date_range: DateRange


@dataclass(frozen=True)
class DiscardPreview:
    loading_id: str


@dataclass(frozen=True)
class SuppressClicks:
    loading_id: str


Effect = Union[PreviewChanged, ApplyOptimistic, RequestUpdate, DiscardPreview, SuppressClicks]


@dataclass(frozen=True)
class ResizeContext:
    """Static parameters of a resize gesture."""

    window: DateRange
    cell_width: float
    min_days: int = 1
    drag_threshold_px: float = 3.0
    clamp_to_window: bool = True


@dataclass(frozen=True)
class Transition:
    state: DragState
    effects: tuple[Effect, ...] = ()


def resize_range(
    original: DateRange,
    anchor: Anchor,
    delta_days: int,
    *,
    min_days: int = 1,
    window: DateRange | None = None,
) -> DateRange:
    """
    Move one endpoint of *original* by *delta_days*.

    The other endpoint never changes and the result always spans at least
    *min_days* days. With a *window* the moving endpoint cannot be dragged
    past the window edge (an endpoint already outside stays where it is);
    the minimum length wins if the two constraints conflict.
    """
    base = original.normalized()
    span = timedelta(days=max(1, min_days) - 1)

    if anchor is Anchor.START:
        new_start = base.start + timedelta(days=delta_days)
        if window is not None:
            new_start = max(new_start, min(base.start, window.start))
        new_start = min(new_start, base.end - span)
        return DateRange(new_start, base.end)

    new_end = base.end + timedelta(days=delta_days)
    if window is not None:
        new_end = min(new_end, max(base.end, window.end))
    new_end = max(new_end, base.start + span)
    return DateRange(base.start, new_end)


def preview_geometry(date_range: DateRange, context: ResizeContext) -> BarGeometry | None:
    return map_to_pixels(
        date_range, context.window, cell_width=context.cell_width, mode=MapMode.RAW
    )


def _begin(event: PointerDown, context: ResizeContext) -> Transition:
    original = event.date_range.normalized()
    state = DragState(
        phase=DragPhase.DRAGGING,
        loading_id=event.loading_id,
        anchor=event.anchor,
        original_range=original,
        preview_range=original,
        origin_x=event.x,
        max_distance=0.0,
    )
    effect = PreviewChanged(event.loading_id, original, preview_geometry(original, context))
    return Transition(state, (effect,))


def _move(state: DragState, event: PointerMove, context: ResizeContext) -> Transition:
    if state.original_range is None or state.anchor is None:
        return Transition(state)

    delta_px = event.x - state.origin_x
    candidate = resize_range(
        state.original_range,
        state.anchor,
        pixels_to_days(delta_px, context.cell_width),
        min_days=context.min_days,
        window=context.window if context.clamp_to_window else None,
    )
    moved = replace(
        state,
        preview_range=candidate,
        max_distance=max(state.max_distance, abs(delta_px)),
    )
    if candidate == state.preview_range:
        return Transition(moved)

    effect = PreviewChanged(state.loading_id or "", candidate, preview_geometry(candidate, context))
    return Transition(moved, (effect,))


def _release(state: DragState, context: ResizeContext) -> Transition:
    loading_id = state.loading_id or ""
    dragged = state.max_distance > context.drag_threshold_px

    if not dragged:
        return Transition(replace(state, phase=DragPhase.CANCELLED), (DiscardPreview(loading_id),))

    if state.preview_range == state.original_range or state.preview_range is None:
        return Transition(
            replace(state, phase=DragPhase.CANCELLED),
            (DiscardPreview(loading_id), SuppressClicks(loading_id)),
        )

    return Transition(
        replace(state, phase=DragPhase.COMMITTED),
        (
            ApplyOptimistic(loading_id, state.preview_range),
            RequestUpdate(loading_id, state.preview_range),
            SuppressClicks(loading_id),
        ),
    )


def transition(state: DragState, event: DragEvent, context: ResizeContext) -> Transition:
    """
    Advance the drag state machine by one event.

    Events that make no sense in the current phase leave the state unchanged
    and produce no effects; this covers a second pointer-down while dragging.
    """
    if state.phase is DragPhase.IDLE:
        if isinstance(event, PointerDown):
            return _begin(event, context)
        return Transition(state)

    if state.phase is DragPhase.DRAGGING:
        if isinstance(event, PointerMove):
            return _move(state, event, context)
        if isinstance(event, PointerUp):
            return _release(state, context)
        if isinstance(event, (Cancel, CaptureLost)):
            return Transition(
                replace(state, phase=DragPhase.CANCELLED),
                (DiscardPreview(state.loading_id or ""),),
            )
        return Transition(state)

    # COMMITTED / CANCELLED
    if isinstance(event, Settle):
        return Transition(DragState())
    return Transition(state)
