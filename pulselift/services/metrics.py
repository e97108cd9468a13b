"""Workout metrics: set volume, estimated 1RM, top set, streaks, weekly consistency.

Pure functions over logged sets and workout timestamps. No storage access and no
error paths: inputs are validated before they get here, so odd values (negative
reps, say) give arithmetically consistent but meaningless results.

Flag filtering differs on purpose between the helpers:
- total_volume / total_reps count every completed set, warmups included. This is
  what a workout's cached totals show.
- best_estimated_one_rep_max / top_set only look at completed working sets
  (completed and not warmup). This is what PR detection uses.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Protocol, TypeVar

from pulselift.core.clock import local_date
from pulselift.core.constants import KG_TO_LB, LB_TO_KG


class SetLike(Protocol):
    """Anything shaped like a logged set (ORM row, schema, test double)."""

    reps: int
    weight: float
    is_completed: bool
    is_warmup: bool


S = TypeVar("S", bound=SetLike)


def estimated_one_rep_max(weight: float, reps: int) -> float:
    """Epley: 1RM = weight * (1 + reps/30). A single is returned as lifted."""
    if reps == 1:
        return weight
    if reps == 0:
        return 0.0
    return weight * (1 + reps / 30)


def estimated_one_rep_max_brzycki(weight: float, reps: int) -> float:
    """Brzycki: 1RM = weight * 36 / (37 - reps). Undefined past 36 reps, so 0."""
    if reps == 1:
        return weight
    if reps == 0 or reps > 36:
        return 0.0
    return weight * (36 / (37 - reps))


def set_volume(set_: SetLike) -> float:
    """weight * reps, whatever the set's flags."""
    return float(set_.weight) * set_.reps


def working_sets(sets: Iterable[S]) -> list[S]:
    """Completed, non-warmup sets in input order."""
    return [s for s in sets if s.is_completed and not s.is_warmup]


def total_volume(sets: Iterable[SetLike]) -> float:
    return sum((set_volume(s) for s in sets if s.is_completed), 0.0)


def total_reps(sets: Iterable[SetLike]) -> int:
    return sum(s.reps for s in sets if s.is_completed)


def completed_set_count(sets: Iterable[SetLike]) -> int:
    return sum(1 for s in sets if s.is_completed)


def best_estimated_one_rep_max(sets: Iterable[SetLike]) -> float:
    """Highest Epley 1RM across completed working sets; 0 if there are none."""
    candidates = working_sets(sets)
    if not candidates:
        return 0.0
    return max(estimated_one_rep_max(float(s.weight), s.reps) for s in candidates)


def top_set(sets: Iterable[S]) -> S | None:
    """
    Heaviest completed working set. Ties keep the first one seen, so callers
    should pass sets in set-number order.
    """
    best: S | None = None
    for s in working_sets(sets):
        if best is None or s.weight > best.weight:
            best = s
    return best


def average_rpe(sets: Iterable[object]) -> float:
    rpes = [r for r in (getattr(s, "rpe", None) for s in sets) if r is not None]
    if not rpes:
        return 0.0
    return sum(rpes) / len(rpes)


def weekly_consistency_percent(workouts_this_week: int, weekly_target: int) -> float:
    """Share of the weekly target met, capped at 100. A zero target gives 0."""
    if weekly_target == 0:
        return 0.0
    return min(workouts_this_week / weekly_target * 100, 100.0)


def _distinct_days_desc(workout_dates: Iterable[datetime | date]) -> list[date]:
    days = {d if not isinstance(d, datetime) else local_date(d) for d in workout_dates}
    return sorted(days, reverse=True)


def day_streak(workout_dates: Iterable[datetime | date], today: date | None = None) -> int:
    """
    Consecutive local calendar days with at least one workout, ending today or
    yesterday. Several workouts on one day count once; a gap of two or more
    days ends the walk. Returns 0 for no workouts or when the latest one is
    older than yesterday.
    """
    days = _distinct_days_desc(workout_dates)
    if not days:
        return 0
    today = today or date.today()
    if (today - days[0]).days > 1:
        return 0

    streak = 1
    anchor = days[0]
    for day in days[1:]:
        if anchor - day != timedelta(days=1):
            break
        streak += 1
        anchor = day
    return streak


def longest_streak(workout_dates: Iterable[datetime | date]) -> int:
    """Longest run of consecutive local calendar days with a workout, at any time."""
    days = _distinct_days_desc(workout_dates)
    if not days:
        return 0
    longest = run = 1
    for prev, day in zip(days, days[1:]):
        if prev - day == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def kg_to_lb(kg: float) -> float:
    return kg * KG_TO_LB


def lb_to_kg(lb: float) -> float:
    return lb * LB_TO_KG


def convert_weight(weight: float, from_unit: str, to_unit: str) -> float:
    """Display conversion between kg and lb. Stored values are never converted."""
    if from_unit == to_unit:
        return weight
    return kg_to_lb(weight) if from_unit == "kg" else lb_to_kg(weight)


def percent_change(old_value: float, new_value: float) -> float:
    if old_value == 0:
        return 0.0
    return (new_value - old_value) / old_value * 100


def is_new_pr(current_value: float, previous_best: float | None) -> bool:
    """Strictly better than the previous best, or first ever."""
    if previous_best is None:
        return True
    return current_value > previous_best


def sort_by_set_number(sets: Sequence[S]) -> list[S]:
    """Stable ascending order by set_number (falls back to input order)."""
    return sorted(sets, key=lambda s: getattr(s, "set_number", 0))
