"""
Constraint Filter
Hard user preferences applied to indexes and combinations.

Every rule is written once as a generator of violation messages. The
``passes_*`` helpers stop at the first violation; the result validator
collects them all through ``describe_violations``.
"""

from typing import List, Dict, Iterator, Sequence
from dataclasses import dataclass, field

from utils.generation_types import (
    ClassSession, Combination, GenerationFilters, ModuleOptions, DAY_KEYS
)
from utils.time_utils import DAY_FILTER_KEYS, normalize_day, time_to_minutes


ONLINE_VENUE_MARKERS = ('online', 'e-learn', 'elearn', 'virtual', 'zoom', 'teams')

# Substring of the class type -> classesToConsider key (checked in order)
CLASS_TYPE_MARKERS = [
    ('TUT', 'tutorial'),
    ('LAB', 'lab'),
    ('SEM', 'seminar'),
    ('LEC', 'lecture'),
    ('PRJ', 'project'),
    ('PROJ', 'project'),
    ('DES', 'design'),
]


def should_consider_class_type(class_type: str, filters: GenerationFilters) -> bool:
    """Unknown class types are always considered."""
    normalized = (class_type or '').upper()
    for marker, key in CLASS_TYPE_MARKERS:
        if marker in normalized:
            return filters.classes_to_consider.get(key, True)
    return True


def considered_sessions(sessions: Sequence[ClassSession], filters: GenerationFilters) -> List[ClassSession]:
    return [s for s in sessions if should_consider_class_type(s.type, filters)]


def is_online_venue(venue: str) -> bool:
    normalized = (venue or '').lower()
    return any(marker in normalized for marker in ONLINE_VENUE_MARKERS)


def _label(session: ClassSession) -> str:
    return f"{session.module_code} {session.type}"


# ---------------------------------------------------------------------------
# Per-session rules
# ---------------------------------------------------------------------------

def venue_violations(sessions: Sequence[ClassSession], filters: GenerationFilters) -> Iterator[str]:
    pref = filters.venue_preference
    if pref.include_online and pref.include_in_person:
        return

    for session in sessions:
        online = is_online_venue(session.venue)
        if online and not pref.include_online:
            yield (f"Class {_label(session)} has online venue '{session.venue}' "
                   f"but online classes are not allowed")
        elif not online and not pref.include_in_person:
            yield (f"Class {_label(session)} has in-person venue '{session.venue}' "
                   f"but in-person classes are not allowed")


def day_of_week_violations(sessions: Sequence[ClassSession], filters: GenerationFilters) -> Iterator[str]:
    if all(filters.days_of_week.get(day, True) for day in DAY_KEYS):
        return

    for session in sessions:
        day = normalize_day(session.day)
        key = DAY_FILTER_KEYS.get(day)
        if not key or not filters.days_of_week.get(key, False):
            yield f"Class {_label(session)} on {session.day} violates day filter ({day} not selected)"


def day_start_end_violations(sessions: Sequence[ClassSession], filters: GenerationFilters) -> Iterator[str]:
    window = filters.day_start_end
    if not window.start_enabled and not window.end_enabled:
        return

    start_after = time_to_minutes(window.start_after)
    end_before = time_to_minutes(window.end_before)
    for session in sessions:
        if window.start_enabled and time_to_minutes(session.start_time) < start_after:
            yield (f"Class {_label(session)} starts at {session.start_time}, "
                   f"before allowed start time {window.start_after}")
        if window.end_enabled and time_to_minutes(session.end_time) > end_before:
            yield (f"Class {_label(session)} ends at {session.end_time}, "
                   f"after allowed end time {window.end_before}")


SESSION_RULES = [venue_violations, day_of_week_violations, day_start_end_violations]


# ---------------------------------------------------------------------------
# Per-day rules
# ---------------------------------------------------------------------------

@dataclass
class DayShape:
    """Layout of one day's classes."""
    span_minutes: int = 0
    longest_run: int = 0
    gaps_minutes: List[int] = field(default_factory=list)


def group_by_day(sessions: Sequence[ClassSession]) -> Dict[str, List[ClassSession]]:
    """Group sessions by normalized day, each day sorted by start then end time."""
    by_day: Dict[str, List[ClassSession]] = {}
    for session in sessions:
        by_day.setdefault(normalize_day(session.day), []).append(session)
    for day_sessions in by_day.values():
        day_sessions.sort(key=lambda s: (time_to_minutes(s.start_time), time_to_minutes(s.end_time)))
    return by_day


def day_shape(day_sessions: Sequence[ClassSession]) -> DayShape:
    """Span, longest back-to-back run and gaps for sessions already sorted by start."""
    shape = DayShape()
    if not day_sessions:
        return shape

    first_start = time_to_minutes(day_sessions[0].start_time)
    last_end = max(time_to_minutes(s.end_time) for s in day_sessions)
    shape.span_minutes = last_end - first_start

    run = 1
    shape.longest_run = 1
    previous_end = time_to_minutes(day_sessions[0].end_time)
    for session in day_sessions[1:]:
        # Week-disjoint sessions may overlap in time; count that as no gap
        gap = max(0, time_to_minutes(session.start_time) - previous_end)
        shape.gaps_minutes.append(gap)
        run = run + 1 if gap == 0 else 1
        shape.longest_run = max(shape.longest_run, run)
        previous_end = max(previous_end, time_to_minutes(session.end_time))

    return shape


def day_shape_violations(sessions: Sequence[ClassSession], filters: GenerationFilters) -> Iterator[str]:
    duration = filters.day_duration
    consecutive = filters.consecutive_classes
    gaps = filters.gaps_between_classes
    if not (duration.enabled or consecutive.enabled or gaps.enabled):
        return

    for day, day_sessions in group_by_day(sessions).items():
        shape = day_shape(day_sessions)

        if duration.enabled:
            hours = shape.span_minutes / 60
            if not duration.contains(hours):
                yield (f"{day}: day spans {hours:g}h, outside allowed "
                       f"{duration.min:g}-{duration.max:g}h")

        if consecutive.enabled and not consecutive.contains(shape.longest_run):
            yield (f"{day}: {shape.longest_run} consecutive classes, outside allowed "
                   f"{consecutive.min:g}-{consecutive.max:g}")

        if gaps.enabled:
            for gap in shape.gaps_minutes:
                hours = gap / 60
                if not gaps.contains(hours):
                    yield (f"{day}: gap of {hours:g}h between classes, outside allowed "
                           f"{gaps.min:g}-{gaps.max:g}h")


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def passes_session_rules(sessions: Sequence[ClassSession], filters: GenerationFilters) -> bool:
    considered = considered_sessions(sessions, filters)
    for rule in SESSION_RULES:
        if next(rule(considered, filters), None) is not None:
            return False
    return True


def passes_day_rules(sessions: Sequence[ClassSession], filters: GenerationFilters) -> bool:
    considered = considered_sessions(sessions, filters)
    return next(day_shape_violations(considered, filters), None) is None


def passes(combination: Combination, filters: GenerationFilters) -> bool:
    """True if the combination satisfies every enabled rule."""
    return (passes_session_rules(combination.sessions, filters)
            and passes_day_rules(combination.sessions, filters))


def describe_violations(combination: Combination, filters: GenerationFilters) -> List[str]:
    """Every rule violation in the combination, as readable messages."""
    considered = considered_sessions(combination.sessions, filters)
    messages = []
    for rule in SESSION_RULES + [day_shape_violations]:
        messages.extend(rule(considered, filters))
    return messages


def filter_module_indexes(modules: List[ModuleOptions], filters: GenerationFilters) -> List[ModuleOptions]:
    """
    Drop indexes with no class of a considered type, or whose own sessions
    already break a per-session rule.

    Per-session rules do not depend on the other modules, so checking them
    once per index prunes the search without changing its result. Modules
    are kept even when no index survives.
    """
    filtered = []
    for module in modules:
        groups = [
            g for g in module.groups
            if considered_sessions(g.sessions, filters) and passes_session_rules(g.sessions, filters)
        ]
        filtered.append(ModuleOptions(code=module.code, name=module.name, au=module.au, groups=groups))
    return filtered
