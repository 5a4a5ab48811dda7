"""Parsing and slot arithmetic for ``HH:MM`` time-of-day strings."""

from datetime import date, datetime, time, timedelta

from dental_backend.core import config

MINUTES_PER_DAY = 24 * 60


def parse_date(value: date | str | None) -> date | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    normalized = value.strip()
    if not normalized:
        return None
    try:
        return date.fromisoformat(normalized[:10])
    except ValueError:
        return None


def parse_time(value: time | str | None) -> time | None:
    if value is None:
        return None
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)

    normalized = value.strip()
    if not normalized:
        return None
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(normalized, fmt).time().replace(second=0)
        except ValueError:
            continue
    return None


def day_of_week(value: date) -> int:
    """Weekday number with Sunday as 0 and Saturday as 6."""
    return (value.weekday() + 1) % 7


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def format_slot(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


def slot_to_minutes(slot: str) -> int:
    hours, minutes = slot.split(':')[:2]
    return int(hours) * 60 + int(minutes)


def next_day(value: date) -> date:
    return value + timedelta(days=1)


def iterate_slots(start: time, end: time, interval: int | None = None) -> list[int]:
    """Slot starts (minutes since midnight) whose whole interval fits before ``end``."""
    step = interval or config.SLOT_INTERVAL_MINUTES
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)

    slots: list[int] = []
    current = start_minutes
    while current + step <= end_minutes:
        slots.append(current)
        current += step

    return slots


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    return start_a < end_b and end_a > start_b


def format_time(value: time | str | None) -> str:
    """Render a time of day for people, e.g. ``13:30`` -> ``1:30 PM``."""
    parsed = parse_time(value) if value else None
    if parsed is None:
        return ''

    period = 'PM' if parsed.hour >= 12 else 'AM'
    display_hour = parsed.hour % 12 or 12
    return f'{display_hour}:{parsed.minute:02d} {period}'
