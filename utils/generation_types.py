"""
Data types shared by the timetable generation engine.
Everything here is built fresh per request and thrown away afterwards.
"""

from typing import List, Dict, FrozenSet, Optional, Any
from dataclasses import dataclass, field

from utils.time_utils import normalize_time


DAY_KEYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']
CLASS_TYPE_KEYS = ['tutorial', 'lab', 'seminar', 'lecture', 'project', 'design']
DAILY_LOAD_PREFERENCES = ('skewed', 'balanced')


@dataclass(frozen=True)
class ClassSession:
    """One recurring weekly meeting of a class group."""
    module_code: str
    index_number: str
    type: str
    day: str
    start_time: str             # "HHMM"
    end_time: str               # "HHMM"
    venue: str = ''
    weeks: FrozenSet[int] = frozenset()     # empty = every teaching week
    module_name: str = ''

    @property
    def group_id(self) -> str:
        return self.index_number

    def to_dict(self):
        return {
            'moduleCode': self.module_code,
            'moduleName': self.module_name,
            'indexNumber': self.index_number,
            'type': self.type,
            'day': self.day,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'venue': self.venue,
            'weeks': ','.join(str(w) for w in sorted(self.weeks)),
        }


@dataclass
class GroupOption:
    """A selectable index (class group) of a module."""
    index_number: str
    sessions: List[ClassSession] = field(default_factory=list)


@dataclass
class ModuleOptions:
    """A requested module together with its resolved group options."""
    code: str
    name: str = ''
    au: float = 0
    groups: List[GroupOption] = field(default_factory=list)


@dataclass
class CombinationStats:
    distinct_days: int = 0
    weekly_hours: float = 0.0
    avg_gap_minutes: int = 0
    earliest_start: str = '0000'
    latest_end: str = '0000'

    def to_dict(self):
        return {
            'distinctDays': self.distinct_days,
            'weeklyHours': self.weekly_hours,
            'avgGapMinutes': self.avg_gap_minutes,
            'earliestStart': self.earliest_start,
            'latestEnd': self.latest_end,
        }


@dataclass
class Combination:
    """One clash-free assignment of exactly one index per module."""
    modules: List[ModuleOptions]        # chosen module, in request order
    module_assignments: Dict[str, str]  # module code -> index number
    sessions: List[ClassSession]
    score: float = 0.0
    stats: Optional[CombinationStats] = None
    id: Optional[str] = None

    def to_dict(self):
        return {
            'id': self.id,
            'modules': [
                {
                    'code': module.code,
                    'name': module.name,
                    'au': module.au,
                    'indexNumber': self.module_assignments[module.code],
                } for module in self.modules
            ],
            'moduleAssignments': dict(self.module_assignments),
            'classes': [s.to_dict() for s in self.sessions],
            'score': round(self.score, 2),
            'stats': self.stats.to_dict() if self.stats else None,
        }


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

@dataclass
class RangeFilter:
    min: float
    max: float
    enabled: bool = False

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass
class DayStartEnd:
    start_after: str = '0800'
    end_before: str = '2300'
    start_enabled: bool = False
    end_enabled: bool = False


@dataclass
class VenuePreference:
    include_online: bool = True
    include_in_person: bool = True


@dataclass
class DailyLoad:
    preference: str = 'skewed'
    enabled: bool = False


@dataclass
class GenerationGoals:
    balance_workload: bool = False
    minimize_days: bool = False
    consecutive_days: bool = False


def _all_enabled(keys):
    return {key: True for key in keys}


@dataclass
class GenerationFilters:
    """
    User preferences for timetable generation.
    Each axis is toggled independently; disabled axes are ignored.
    Day duration and gap bounds are in hours, consecutive classes is a count.
    """
    day_duration: RangeFilter = field(default_factory=lambda: RangeFilter(4, 8))
    consecutive_classes: RangeFilter = field(default_factory=lambda: RangeFilter(1, 3))
    gaps_between_classes: RangeFilter = field(default_factory=lambda: RangeFilter(1, 2))
    day_start_end: DayStartEnd = field(default_factory=DayStartEnd)
    days_of_week: Dict[str, bool] = field(default_factory=lambda: _all_enabled(DAY_KEYS))
    daily_load: DailyLoad = field(default_factory=DailyLoad)
    classes_to_consider: Dict[str, bool] = field(default_factory=lambda: _all_enabled(CLASS_TYPE_KEYS))
    venue_preference: VenuePreference = field(default_factory=VenuePreference)
    generation_goals: GenerationGoals = field(default_factory=GenerationGoals)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'GenerationFilters':
        """Build filters from a validated request payload; absent axes keep their defaults."""
        filters = cls()
        if not data:
            return filters

        for key, attr in (('dayDuration', 'day_duration'),
                          ('consecutiveClasses', 'consecutive_classes'),
                          ('gapsBetweenClasses', 'gaps_between_classes')):
            raw = data.get(key)
            if raw:
                current = getattr(filters, attr)
                setattr(filters, attr, RangeFilter(
                    min=raw.get('min', current.min),
                    max=raw.get('max', current.max),
                    enabled=bool(raw.get('enabled', False)),
                ))

        raw = data.get('dayStartEnd')
        if raw:
            filters.day_start_end = DayStartEnd(
                start_after=normalize_time(raw.get('startAfter') or '0800'),
                end_before=normalize_time(raw.get('endBefore') or '2300'),
                start_enabled=bool(raw.get('startEnabled', False)),
                end_enabled=bool(raw.get('endEnabled', False)),
            )

        raw = data.get('daysOfWeek')
        if raw:
            filters.days_of_week = {day: bool(raw.get(day, True)) for day in DAY_KEYS}

        raw = data.get('classesToConsider')
        if raw:
            filters.classes_to_consider = {t: bool(raw.get(t, True)) for t in CLASS_TYPE_KEYS}

        raw = data.get('venuePreference')
        if raw:
            filters.venue_preference = VenuePreference(
                include_online=bool(raw.get('includeOnline', True)),
                include_in_person=bool(raw.get('includeInPerson', True)),
            )

        raw = data.get('dailyLoad')
        if raw:
            filters.daily_load = DailyLoad(
                preference=raw.get('preference', 'skewed'),
                enabled=bool(raw.get('enabled', False)),
            )

        raw = data.get('generationGoals')
        if raw:
            filters.generation_goals = GenerationGoals(
                balance_workload=bool(raw.get('balanceWorkload', False)),
                minimize_days=bool(raw.get('minimizeDays', False)),
                consecutive_days=bool(raw.get('consecutiveDays', False)),
            )

        return filters


@dataclass
class GenerationResult:
    """Response payload of a generation run."""
    combinations: List[Combination]
    generated_at: str
    total_combinations: int = 0
    has_more: bool = False
    stop_reason: str = 'exhausted'
    warnings: List[str] = field(default_factory=list)

    @property
    def returned_count(self) -> int:
        return len(self.combinations)

    def to_dict(self):
        return {
            'combinations': [c.to_dict() for c in self.combinations],
            'totalCombinations': self.total_combinations,
            'returnedCount': self.returned_count,
            'hasMore': self.has_more,
            'searchComplete': self.stop_reason == 'exhausted',
            'stopReason': self.stop_reason,
            'warnings': self.warnings,
            'generatedAt': self.generated_at,
        }
