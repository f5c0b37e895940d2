"""Overlap-lane packing for appointments that share one facility and day.

Greedy first-fit: intervals are taken in start order and dropped into the
lowest lane that has room. The lane count is not guaranteed to be the
minimum an optimal interval colouring would find; rows are sized from
whatever this produces.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from facility_calendar.scheduling.models import Appointment

logger = logging.getLogger(__name__)

Interval = tuple[datetime, datetime, str]


@dataclass
class LanePacking:
    """Lane index per appointment id, valid only within its scope."""

    lanes: dict[str, int] = field(default_factory=dict)
    members: list[list[str]] = field(default_factory=list)

    @property
    def lane_count(self) -> int:
        return len(self.members)

    def lane_of(self, appointment_id: str) -> int:
        return self.lanes[appointment_id]


def _overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    # Half-open: intervals that only touch do not overlap.
    return a_start < b_end and a_end > b_start


def pack_lanes(
    intervals: Sequence[Interval],
    min_duration: timedelta = timedelta(minutes=5),
) -> LanePacking:
    """Assign each ``(start, end, id)`` interval to a lane.

    Intervals are ordered by start time with ties kept in input order.
    An interval whose end is not after its start is packed as if it
    lasted *min_duration*.
    """
    ordered = sorted(intervals, key=lambda item: item[0])
    placed: list[list[tuple[datetime, datetime]]] = []
    packing = LanePacking()

    for start, end, interval_id in ordered:
        if end <= start:
            logger.warning(
                f"Interval {interval_id} ends at or before its start "
                f"({start.isoformat()} -> {end.isoformat()}); packing with minimum duration"
            )
            end = start + min_duration

        lane_index = 0
        while lane_index < len(placed):
            if not any(_overlaps(start, end, s, e) for s, e in placed[lane_index]):
                break
            lane_index += 1

        if lane_index == len(placed):
            placed.append([])
            packing.members.append([])
        placed[lane_index].append((start, end))
        packing.members[lane_index].append(interval_id)
        packing.lanes[interval_id] = lane_index

    return packing


def pack_appointments(
    appointments: Iterable[Appointment],
    min_duration: timedelta = timedelta(minutes=5),
) -> LanePacking:
    """Pack appointments by their own start/end times."""
    return pack_lanes(
        [(apt.start_time, apt.end_time, apt.id) for apt in appointments],
        min_duration=min_duration,
    )
