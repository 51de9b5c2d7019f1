"""
Scoring and ranking of generated combinations.

Score starts at 100 and each enabled goal adjusts it:
- daily load 'balanced': +5 per day used; 'skewed': -5 per day used
- minimize days: +20 per free day of the week
- balance workload: +max(0, 30 - 10 * variance of classes per day)
- consecutive days: +50 when the used days form one unbroken run,
  otherwise -10000 so such timetables always rank last
"""

import uuid
from typing import List

from utils.constraint_filter import considered_sessions, group_by_day, day_shape
from utils.generation_types import Combination, CombinationStats, GenerationFilters
from utils.time_utils import DAY_ORDER, time_to_minutes, minutes_to_time


BASE_SCORE = 100.0
DAILY_LOAD_WEIGHT = 5
FREE_DAY_BONUS = 20
BALANCE_MAX_BONUS = 30
BALANCE_VARIANCE_WEIGHT = 10
CONSECUTIVE_DAYS_BONUS = 50
NON_CONSECUTIVE_PENALTY = 10000


def calculate_stats(combination: Combination, filters: GenerationFilters) -> CombinationStats:
    """Stats over the sessions of the class types being considered."""
    sessions = considered_sessions(combination.sessions, filters)
    stats = CombinationStats()
    if not sessions:
        return stats

    by_day = group_by_day(sessions)
    total_minutes = sum(
        time_to_minutes(s.end_time) - time_to_minutes(s.start_time) for s in sessions
    )

    gaps = []
    for day_sessions in by_day.values():
        gaps.extend(g for g in day_shape(day_sessions).gaps_minutes if g > 0)

    stats.distinct_days = len(by_day)
    stats.weekly_hours = round(total_minutes / 60, 1)
    stats.avg_gap_minutes = round(sum(gaps) / len(gaps)) if gaps else 0
    stats.earliest_start = minutes_to_time(min(time_to_minutes(s.start_time) for s in sessions))
    stats.latest_end = minutes_to_time(max(time_to_minutes(s.end_time) for s in sessions))
    return stats


def _is_consecutive(days: List[str]) -> bool:
    indices = sorted(DAY_ORDER.index(day) for day in days if day in DAY_ORDER)
    return all(b - a == 1 for a, b in zip(indices, indices[1:]))


def score_combination(combination: Combination, filters: GenerationFilters) -> float:
    score = BASE_SCORE
    by_day = group_by_day(considered_sessions(combination.sessions, filters))
    days_used = len(by_day)

    if filters.daily_load.enabled:
        if filters.daily_load.preference == 'balanced':
            score += days_used * DAILY_LOAD_WEIGHT
        else:
            score -= days_used * DAILY_LOAD_WEIGHT

    goals = filters.generation_goals
    if goals.minimize_days:
        score += (len(DAY_ORDER) - days_used) * FREE_DAY_BONUS

    if goals.balance_workload and days_used > 0:
        counts = [len(day_sessions) for day_sessions in by_day.values()]
        mean = sum(counts) / days_used
        variance = sum((c - mean) ** 2 for c in counts) / days_used
        score += max(0.0, BALANCE_MAX_BONUS - variance * BALANCE_VARIANCE_WEIGHT)

    if goals.consecutive_days:
        if days_used <= 1 or _is_consecutive(list(by_day)):
            score += CONSECUTIVE_DAYS_BONUS
        else:
            score -= NON_CONSECUTIVE_PENALTY

    return score


def rank_combinations(combinations: List[Combination], filters: GenerationFilters) -> List[Combination]:
    """
    Attach id, stats and score, then sort best first.
    Ties go to fewer weekly hours, then to enumeration order.
    """
    for combination in combinations:
        combination.id = str(uuid.uuid4())
        combination.stats = calculate_stats(combination, filters)
        combination.score = score_combination(combination, filters)

    # list.sort is stable, so equal keys keep emission order
    return sorted(combinations, key=lambda c: (-c.score, c.stats.weekly_hours))
