"""Imperative shell around the resize state machine.

:class:`ResizeController` owns one drag session per loading, feeds events to
:func:`core.algorithms.transition` and performs the effects it returns:
preview bookkeeping, the optimistic overlay, the single mutation call on
commit, rollback on failure and click suppression.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from app_config import get_settings
from core.algorithms import (
    ApplyOptimistic,
    Cancel,
    CaptureLost,
    DiscardPreview,
    PointerDown,
    PointerMove,
    PointerUp,
    PreviewChanged,
    RequestUpdate,
    ResizeContext,
    Settle,
    SuppressClicks,
    transition,
)
from core.algorithms.resize import DragEvent
from core.domain import Anchor, BarGeometry, DateRange, DragPhase, DragState
from loadplan.error_handling import log_error
from loadplan.exceptions import DragSessionActiveError, ResizeCommitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preview:
    """Latest preview of an active drag session."""

    date_range: DateRange
    geometry: BarGeometry | None


@dataclass
class _Session:
    state: DragState
    context: ResizeContext


class ResizeController:
    """
    Drive resize gestures for the bars of a timeline.

    Args:
        gateway: Object with ``update_loading_dates(loading_id, start, end) -> bool``.
        window: Visible window; used for preview geometry and clamping.
        cell_width: Pixel width of a day cell (default: ``Settings.day_cell_width``).
        min_days: Minimum length of a resized range (default: ``Settings.resize_min_days``).
        drag_threshold_px: Travel needed for a gesture to count as a drag.
        click_suppress_ms: Grace window during which editor clicks are swallowed.
        clamp_to_window: Keep the moving endpoint inside the window.
        clock: Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        gateway,
        window: DateRange,
        *,
        cell_width: float | None = None,
        min_days: int | None = None,
        drag_threshold_px: float | None = None,
        click_suppress_ms: int | None = None,
        clamp_to_window: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = get_settings()
        self._gateway = gateway
        self.window = window
        self.cell_width = cell_width if cell_width is not None else settings.day_cell_width
        self.min_days = min_days if min_days is not None else settings.resize_min_days
        self.drag_threshold_px = (
            drag_threshold_px if drag_threshold_px is not None else settings.drag_threshold_px
        )
        self.click_suppress_ms = (
            click_suppress_ms if click_suppress_ms is not None else settings.click_suppress_ms
        )
        self.clamp_to_window = clamp_to_window
        self._clock = clock

        self._sessions: dict[str, _Session] = {}
        self._previews: dict[str, Preview] = {}
        self._optimistic: dict[str, DateRange] = {}
        self._suppress_until: float | None = None

    # ===== Gesture API =====

    def begin(self, loading_id: str, anchor: Anchor, date_range: DateRange, x: float) -> DragState:
        """Start a drag session on one of the loading's handles."""
        if self.is_dragging(loading_id):
            raise DragSessionActiveError(
                f"Resize already in progress for loading {loading_id}",
                details={"loading_id": loading_id},
            )

        context = ResizeContext(
            window=self.window,
            cell_width=self.cell_width,
            min_days=self.min_days,
            drag_threshold_px=self.drag_threshold_px,
            clamp_to_window=self.clamp_to_window,
        )
        session = _Session(DragState(), context)
        self._sessions[loading_id] = session
        event = PointerDown(loading_id, Anchor(anchor), date_range, x)
        return self._dispatch(loading_id, session, event)

    def move(self, loading_id: str, x: float) -> DragState:
        return self.handle(loading_id, PointerMove(x))

    def release(self, loading_id: str) -> DragState:
        """
        Finish the gesture.

        Returns the terminal state (``COMMITTED`` or ``CANCELLED``); the
        session itself is already back to idle.

        Raises:
            ResizeCommitError: The mutation returned failure or raised. The
                optimistic range has been rolled back by then.
        """
        return self.handle(loading_id, PointerUp())

    def cancel(self, loading_id: str, reason: str = "escape") -> DragState:
        return self.handle(loading_id, Cancel(reason))

    def capture_lost(self, loading_id: str) -> DragState:
        return self.handle(loading_id, CaptureLost())

    def cancel_all(self) -> None:
        """Cancel every active session, e.g. when the window loses focus."""
        for loading_id in list(self._sessions):
            self.capture_lost(loading_id)

    def handle(self, loading_id: str, event: DragEvent) -> DragState:
        """Feed one event to the loading's session; events without a session are ignored."""
        if isinstance(event, PointerDown):
            return self.begin(event.loading_id, event.anchor, event.date_range, event.x)

        session = self._sessions.get(loading_id)
        if session is None:
            return DragState()
        return self._dispatch(loading_id, session, event)

    # ===== Queries =====

    def is_dragging(self, loading_id: str) -> bool:
        session = self._sessions.get(loading_id)
        return session is not None and session.state.is_active

    def state_of(self, loading_id: str) -> DragState:
        session = self._sessions.get(loading_id)
        return session.state if session is not None else DragState()

    def preview_of(self, loading_id: str) -> Preview | None:
        return self._previews.get(loading_id)

    def effective_range(self, loading_id: str, persisted_range: DateRange) -> DateRange:
        """
        Range to draw: live preview, then optimistic update, then the persisted range.

        The optimistic range is dropped as soon as the persisted range matches it.
        """
        preview = self._previews.get(loading_id)
        if preview is not None:
            return preview.date_range
        optimistic = self._optimistic.get(loading_id)
        if optimistic is None or optimistic == persisted_range:
            self.acknowledge(loading_id)
            return persisted_range
        return optimistic

    def acknowledge(self, loading_id: str) -> None:
        """Drop the optimistic range once the read model reflects the update."""
        self._optimistic.pop(loading_id, None)

    def should_suppress_click(self) -> bool:
        """True while the grace window after a finished drag is open."""
        if self._suppress_until is None:
            return False
        if self._clock() < self._suppress_until:
            return True
        self._suppress_until = None
        return False

    # ===== Internals =====

    def _dispatch(self, loading_id: str, session: _Session, event: DragEvent) -> DragState:
        result = transition(session.state, event, session.context)
        session.state = result.state

        failure: ResizeCommitError | None = None
        previous: DateRange | None = None
        for effect in result.effects:
            if isinstance(effect, PreviewChanged):
                self._previews[loading_id] = Preview(effect.preview_range, effect.geometry)
            elif isinstance(effect, DiscardPreview):
                self._previews.pop(loading_id, None)
            elif isinstance(effect, ApplyOptimistic):
                self._previews.pop(loading_id, None)
                previous = self._optimistic.get(loading_id)
                self._optimistic[loading_id] = effect.date_range
            elif isinstance(effect, RequestUpdate):
                failure = self._commit(effect, session.state, previous)
            elif isinstance(effect, SuppressClicks):
                self._suppress_until = self._clock() + self.click_suppress_ms / 1000.0

        terminal = session.state
        if terminal.phase in (DragPhase.COMMITTED, DragPhase.CANCELLED):
            session.state = transition(terminal, Settle(), session.context).state
            del self._sessions[loading_id]
            logger.debug(f"Resize session for {loading_id} finished as {terminal.phase.value}")

        if failure is not None:
            raise failure
        return terminal

    def _commit(
        self, effect: RequestUpdate, state: DragState, previous: DateRange | None
    ) -> ResizeCommitError | None:
        new_range = effect.date_range
        details = {
            "loading_id": effect.loading_id,
            "start": new_range.start.isoformat(),
            "end": new_range.end.isoformat(),
        }
        try:
            ok = self._gateway.update_loading_dates(
                effect.loading_id, new_range.start, new_range.end
            )
        except Exception as exc:
            self._rollback(effect.loading_id, previous)
            log_error(exc, "Resize commit", extra=details)
            error = ResizeCommitError(
                f"Updating loading {effect.loading_id} raised", details=details
            )
            error.__cause__ = exc
            return error

        if not ok:
            self._rollback(effect.loading_id, previous)
            error = ResizeCommitError(
                f"Update rejected for loading {effect.loading_id}", details=details
            )
            log_error(error, "Resize commit")
            return error

        logger.info(
            f"Resized loading {effect.loading_id} from {state.original_range} to {new_range}"
        )
        return None

    def _rollback(self, loading_id: str, previous: DateRange | None) -> None:
        """Restore what was shown before the gesture: an earlier unacknowledged update, if any."""
        self._previews.pop(loading_id, None)
        if previous is None:
            self._optimistic.pop(loading_id, None)
        else:
            self._optimistic[loading_id] = previous
