"""
Clash detection between class sessions.
Two sessions clash only if they share a day, their time intervals overlap
and their teaching weeks overlap.
"""

from typing import List, Tuple, Sequence

from utils.generation_types import ClassSession
from utils.time_utils import normalize_day, time_to_minutes


def has_time_clash(a: ClassSession, b: ClassSession) -> bool:
    """
    Check whether two sessions conflict.

    Intervals are half-open, so a class ending at 10:30 does not clash
    with one starting at 10:30. An empty week set means every week.
    """
    # 1. Day
    if normalize_day(a.day) != normalize_day(b.day):
        return False

    # 2. Time
    start1, end1 = time_to_minutes(a.start_time), time_to_minutes(a.end_time)
    start2, end2 = time_to_minutes(b.start_time), time_to_minutes(b.end_time)
    if not (start1 < end2 and start2 < end1):
        return False

    # 3. Weeks
    if not a.weeks or not b.weeks:
        return True
    return not a.weeks.isdisjoint(b.weeks)


def clashes_with_any(candidates: Sequence[ClassSession], occupied: Sequence[ClassSession]) -> bool:
    """True if any candidate session clashes with any already chosen session."""
    for new_session in candidates:
        for existing in occupied:
            if has_time_clash(new_session, existing):
                return True
    return False


def find_clashing_pairs(sessions: Sequence[ClassSession]) -> List[Tuple[ClassSession, ClassSession]]:
    """Return every clashing pair in the list, in (i, j) order with i < j."""
    pairs = []
    for i, first in enumerate(sessions):
        for second in sessions[i + 1:]:
            if has_time_clash(first, second):
                pairs.append((first, second))
    return pairs
