"""Lane assignment for overlapping intervals within a timeline row."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from core.domain import Interval, LanePlacement


@dataclass(frozen=True)
class LaneAssignment:
    """
    Lane per input position, lane per interval id, and the number of lanes in use.

    ``by_position`` is authoritative; ``lanes`` is keyed by id and only
    unambiguous when ids are unique.
    """

    lanes: Mapping[str, int] = field(default_factory=dict)
    lane_count: int = 0
    by_position: tuple[int, ...] = ()

    def lane_of(self, interval_id: str) -> int | None:
        return self.lanes.get(interval_id)

    def placements(self) -> list[LanePlacement]:
        return [
            LanePlacement(interval_id=interval_id, lane=lane)
            for interval_id, lane in sorted(self.lanes.items(), key=lambda item: (item[1], item[0]))
        ]


def intervals_overlap(a: Interval, b: Interval) -> bool:
    return not (a.end_index < b.start_index or a.start_index > b.end_index)


def _normalize(interval: Interval) -> Interval:
    if interval.start_index <= interval.end_index:
        return interval
    later = max(interval.start_index, interval.end_index)
    return Interval(interval.id, later, later)


def assign_lanes(intervals: Iterable[Interval]) -> LaneAssignment:
    """
    Assign every interval the lowest lane not used by an overlapping one.

    Intervals are placed in (start_index, id, end_index) order, so with
    unique ids the result never depends on input order. Duplicate ids are
    placed separately, tie-broken by input position. The scan over placed
    intervals is quadratic; rows are expected to hold few bars.
    """
    normalized = [_normalize(i) for i in intervals]
    order = sorted(
        range(len(normalized)),
        key=lambda pos: (
            normalized[pos].start_index,
            normalized[pos].id,
            normalized[pos].end_index,
            pos,
        ),
    )

    placed: list[tuple[Interval, int]] = []
    positions = [0] * len(normalized)
    lanes: dict[str, int] = {}

    for pos in order:
        interval = normalized[pos]
        occupied = {lane for other, lane in placed if intervals_overlap(other, interval)}
        lane = 0
        while lane in occupied:
            lane += 1
        positions[pos] = lane
        lanes[interval.id] = lane
        placed.append((interval, lane))

    lane_count = max(positions) + 1 if positions else 0
    return LaneAssignment(lanes=lanes, lane_count=lane_count, by_position=tuple(positions))
