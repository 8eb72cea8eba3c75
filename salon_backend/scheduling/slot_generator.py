"""Daily time-window generation.

Windows are derived from salon hours on every call and are never persisted
here. A window only becomes a stored slot when a booking is attempted
against its virtual selector.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, NamedTuple, Sequence

from salon_backend.scheduling.clock import (
    SLOT_DURATION,
    SLOT_STEP,
    earliest_bookable_start,
    format_clock,
    intervals_overlap,
    parse_clock,
    segment_for,
)
from salon_backend.scheduling.errors import NoStaffAvailable
from salon_backend.scheduling.roster import StaffMember

VIRTUAL_SLOT_PREFIX = 'virtual-'
DEFAULT_STAFF_FILTER = 'default'


class Reservation(NamedTuple):
    staff_id: str
    start_time: str
    end_time: str


@dataclass
class TimeWindow:
    date: date
    start_time: str
    end_time: str
    segment: str
    available_staff: list[StaffMember] = field(default_factory=list)

    @property
    def slot_id(self) -> str:
        return virtual_slot_id(self.start_time)


def virtual_slot_id(start_time: str) -> str:
    return f'{VIRTUAL_SLOT_PREFIX}{start_time}'


def parse_virtual_slot_id(selector: str) -> str | None:
    """Return the ``HH:MM`` encoded in a virtual selector, or None for a real slot id."""
    if not selector.startswith(VIRTUAL_SLOT_PREFIX):
        return None
    return selector[len(VIRTUAL_SLOT_PREFIX):]


def select_staff(roster: Sequence[StaffMember], staff_filter: str | None) -> list[StaffMember]:
    if not staff_filter or staff_filter == DEFAULT_STAFF_FILTER:
        return list(roster)

    matching = [member for member in roster if member.id == staff_filter]
    return matching or list(roster)


def _reserved_intervals(reservations: Iterable[Reservation]) -> dict[str, list[tuple[time, time]]]:
    intervals: dict[str, list[tuple[time, time]]] = defaultdict(list)
    for reservation in reservations:
        start = parse_clock(reservation.start_time)
        end = parse_clock(reservation.end_time)
        if start is None or end is None:
            continue
        intervals[reservation.staff_id].append((start, end))
    return intervals


def generate_windows(
    opening_time: str | None,
    closing_time: str | None,
    target_date: date,
    now: datetime,
    roster: Sequence[StaffMember],
    reservations: Iterable[Reservation],
    staff_filter: str | None = None,
) -> list[TimeWindow]:
    if not roster:
        raise NoStaffAvailable()

    open_at = parse_clock(opening_time)
    close_at = parse_clock(closing_time)
    if open_at is None or close_at is None:
        return []

    candidates = select_staff(roster, staff_filter)
    reserved = _reserved_intervals(reservations)
    earliest_start = earliest_bookable_start(now)
    day_close = datetime.combine(target_date, close_at)

    windows: list[TimeWindow] = []
    window_start = datetime.combine(target_date, open_at)

    while window_start + SLOT_DURATION <= day_close:
        window_end = window_start + SLOT_DURATION

        if window_start >= earliest_start:
            start, end = window_start.time(), window_end.time()
            available = [
                member
                for member in candidates
                if not any(
                    intervals_overlap(booked_start, booked_end, start, end)
                    for booked_start, booked_end in reserved.get(member.id, ())
                )
            ]

            if available:
                windows.append(
                    TimeWindow(
                        date=target_date,
                        start_time=format_clock(start),
                        end_time=format_clock(end),
                        segment=segment_for(start),
                        available_staff=available,
                    )
                )

        window_start += SLOT_STEP

    return windows
