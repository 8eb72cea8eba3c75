from datetime import date, datetime, time, timedelta

BOOKING_BUFFER = timedelta(hours=12)
SLOT_DURATION = timedelta(hours=2)
SLOT_STEP = timedelta(hours=1)

MORNING_END_HOUR = 12
AFTERNOON_END_HOUR = 17

DAY_NAMES = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')


def parse_clock(value: str | None) -> time | None:
    """Parse an ``HH:MM`` string, returning None for blank or malformed values."""
    if not value:
        return None

    parts = value.strip().split(':')
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        return None

    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour < 24 and 0 <= minute < 60):
        return None

    return time(hour, minute)


def format_clock(value: time) -> str:
    return f'{value.hour:02d}:{value.minute:02d}'


def slot_end_time(start_time: str) -> str | None:
    """End of a generated slot starting at ``start_time``, None if it would pass midnight."""
    start = parse_clock(start_time)
    if start is None:
        return None

    end = datetime.combine(date.min, start) + SLOT_DURATION
    if end.date() != date.min:
        return None

    return format_clock(end.time())


def day_of_week(value: date) -> str:
    return DAY_NAMES[value.weekday()]


def earliest_bookable_start(now: datetime) -> datetime:
    return now + BOOKING_BUFFER


def is_inside_buffer(start: datetime, now: datetime) -> bool:
    return start < earliest_bookable_start(now)


def segment_for(start: time) -> str:
    if start.hour < MORNING_END_HOUR:
        return 'Morning'
    if start.hour < AFTERNOON_END_HOUR:
        return 'Afternoon'
    return 'Evening'


def intervals_overlap(existing_start: time, existing_end: time, candidate_start: time, candidate_end: time) -> bool:
    return existing_start < candidate_end and existing_end > candidate_start
