"""Helpers for the day, clock-time and teaching-week formats used in class schedules."""

import re
from typing import FrozenSet, Iterable, Union


DAY_ORDER = ['MON', 'TUE', 'WED', 'THU', 'FRI', 'SAT', 'SUN']

# Three-letter day code -> key used in the daysOfWeek filter
DAY_FILTER_KEYS = {
    'MON': 'monday',
    'TUE': 'tuesday',
    'WED': 'wednesday',
    'THU': 'thursday',
    'FRI': 'friday',
    'SAT': 'saturday',
    'SUN': 'sunday',
}

_TIME_PATTERN = re.compile(r'^(\d{1,2}):?(\d{2})$')


def normalize_day(day: str) -> str:
    """'Monday', 'mon', 'MON' -> 'MON'."""
    if not day:
        return ''
    return day.strip().upper()[:3]


def normalize_time(value: str) -> str:
    """Normalize '8:30', '08:30' or '0830' to 'HHMM'. Unrecognized values are returned trimmed."""
    trimmed = (value or '').strip()
    match = _TIME_PATTERN.match(trimmed)
    if not match:
        return trimmed
    return f'{match.group(1).zfill(2)}{match.group(2)}'


def time_to_minutes(value: str) -> int:
    """Minutes since midnight, 0 when the value cannot be parsed."""
    normalized = normalize_time(value)
    if len(normalized) != 4 or not normalized.isdigit():
        return 0
    return int(normalized[:2]) * 60 + int(normalized[2:])


def minutes_to_time(minutes: int) -> str:
    return f'{minutes // 60:02d}{minutes % 60:02d}'


def parse_weeks(value: Union[str, Iterable, None]) -> FrozenSet[int]:
    """
    Parse a teaching-week mask.

    Accepts a list of numbers or a string such as "1,2,3" or "1-6,8,10-13".
    Anything that is not a number is skipped. An empty result means the
    session runs every week.
    """
    if not value:
        return frozenset()

    weeks = set()
    if isinstance(value, str):
        for part in value.split(','):
            part = part.strip()
            if not part:
                continue
            if '-' in part:
                start_raw, _, end_raw = part.partition('-')
                if start_raw.strip().isdigit() and end_raw.strip().isdigit():
                    start, end = int(start_raw), int(end_raw)
                    weeks.update(range(min(start, end), max(start, end) + 1))
            elif part.isdigit():
                weeks.add(int(part))
        return frozenset(weeks)

    for item in value:
        try:
            weeks.add(int(item))
        except (TypeError, ValueError):
            continue
    return frozenset(weeks)
