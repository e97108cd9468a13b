"""Progress aggregation: the dashboard (weekly volume, consistency, streak, recent PRs,
top exercises) and per-exercise session history.

Weeks are local calendar weeks starting Monday 00:00. The dashboard only counts
completed workouts and sums their cached total_volume (which includes completed
warmups). Per-exercise history covers every workout the exercise was logged in.

An aggregator instance keeps the last good result. A failed load flips it to
`errored` with the underlying message and leaves the previous numbers in place,
so the dashboard can keep showing stale data. Loads are not locked: callers must
not run two loads on one instance at the same time.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

from pulselift.core.clock import as_utc, local_date, utcnow
from pulselift.core.constants import (
    DEFAULT_PROGRESS_WEEKS,
    DEFAULT_RECENT_PRS_LIMIT,
    DEFAULT_TOP_EXERCISES_LIMIT,
)
from pulselift.core.enums import LoadState, WeightUnit, WorkoutStatus
from pulselift.schemas.personal_record import PersonalRecordBase
from pulselift.schemas.progress import (
    ExerciseProgress,
    ExerciseSessionMetrics,
    ExerciseUsage,
    ProgressSnapshot,
    TopExerciseItem,
    WeeklyCountPoint,
    WeeklyVolumePoint,
)
from pulselift.services.metrics import (
    SetLike,
    best_estimated_one_rep_max,
    day_streak,
    top_set,
    total_volume,
    weekly_consistency_percent,
    working_sets,
)
from pulselift.services.stores import ProgressSource, WorkoutLike

logger = logging.getLogger(__name__)


def _local_midnight(day: date) -> datetime:
    return datetime.combine(day, time.min).astimezone()


def start_of_local_week(moment: datetime) -> datetime:
    """Monday 00:00 local time of the week containing `moment`."""
    day = local_date(moment)
    return _local_midnight(day - timedelta(days=day.weekday()))


def format_week_label(week_start: datetime) -> str:
    return f"{week_start:%b} {week_start.day}"


def _in_window(workout: WorkoutLike, start: datetime, end: datetime) -> bool:
    return start <= as_utc(workout.started_at) < end


def _week_windows(weeks: int, now: datetime) -> list[tuple[datetime, datetime]]:
    """(start, end) of the last `weeks` local weeks, oldest first, current week last."""
    current_monday = local_date(start_of_local_week(now))
    windows = []
    for i in range(weeks - 1, -1, -1):
        monday = current_monday - timedelta(weeks=i)
        windows.append((_local_midnight(monday), _local_midnight(monday + timedelta(weeks=1))))
    return windows


def weekly_volume_series(
    workouts: list[WorkoutLike],
    weeks: int,
    now: datetime,
) -> list[WeeklyVolumePoint]:
    """Summed total_volume per local week, oldest week first, current week last."""
    series: list[WeeklyVolumePoint] = []
    for start, end in _week_windows(weeks, now):
        volume = sum((float(w.total_volume or 0) for w in workouts if _in_window(w, start, end)), 0.0)
        series.append(WeeklyVolumePoint(week_start=start, label=format_week_label(start), volume=volume))
    return series


def exercise_sessions(rows: Iterable[tuple[int, datetime, SetLike]]) -> list[ExerciseSessionMetrics]:
    """
    Per-workout metrics for one exercise from (workout_id, started_at, set) rows,
    oldest session first. Only completed working sets count; a session whose
    sets are all warmups or unfinished still appears, with zeros.
    """
    grouped: dict[int, tuple[datetime, list[SetLike]]] = {}
    for workout_id, started_at, set_ in rows:
        grouped.setdefault(workout_id, (started_at, []))[1].append(set_)

    sessions = []
    for workout_id, (started_at, sets) in grouped.items():
        working = working_sets(sets)
        heaviest = top_set(working)
        sessions.append(
            ExerciseSessionMetrics(
                workout_id=workout_id,
                started_at=as_utc(started_at),
                best_one_rep_max=best_estimated_one_rep_max(working),
                top_set_weight=float(heaviest.weight) if heaviest else 0.0,
                volume=total_volume(working),
                set_count=len(working),
            )
        )
    sessions.sort(key=lambda s: s.started_at)
    return sessions


def weekly_session_frequency(
    sessions: list[ExerciseSessionMetrics],
    weeks: int,
    now: datetime,
) -> list[WeeklyCountPoint]:
    """Sessions per local week, oldest first. Empty when the exercise was never done."""
    if not sessions:
        return []
    return [
        WeeklyCountPoint(
            week_start=start,
            label=format_week_label(start),
            count=sum(1 for s in sessions if start <= s.started_at < end),
        )
        for start, end in _week_windows(weeks, now)
    ]


def exercise_progress(
    usage: ExerciseUsage,
    rows: Iterable[tuple[int, datetime, SetLike]],
    personal_records: list[PersonalRecordBase],
    weeks: int = DEFAULT_PROGRESS_WEEKS,
    now: datetime | None = None,
) -> ExerciseProgress:
    sessions = exercise_sessions(rows)
    return ExerciseProgress(
        usage=usage,
        sessions=sessions,
        weekly_frequency=weekly_session_frequency(sessions, weeks, now or utcnow()),
        personal_records=personal_records,
    )


class ProgressAggregator:
    """Builds the progress dashboard from a ProgressSource."""

    def __init__(
        self,
        source: ProgressSource,
        weekly_target: int = 0,
        weeks: int = DEFAULT_PROGRESS_WEEKS,
        recent_prs_limit: int = DEFAULT_RECENT_PRS_LIMIT,
        top_exercises_limit: int = DEFAULT_TOP_EXERCISES_LIMIT,
        unit: WeightUnit = WeightUnit.KG,
    ):
        self.source = source
        self.weeks = weeks
        self.recent_prs_limit = recent_prs_limit
        self.top_exercises_limit = top_exercises_limit
        self.unit = unit

        self.state = LoadState.IDLE
        self.error: str | None = None
        self.weekly_target = weekly_target
        self.weekly_count = 0
        self.consistency_pct = 0.0
        self.streak = 0
        self.weekly_volume_series: list[WeeklyVolumePoint] = []
        self.recent_prs: list[PersonalRecordBase] = []
        self.top_exercises: list[TopExerciseItem] = []

    @property
    def loading(self) -> bool:
        return self.state == LoadState.LOADING

    async def load(self, weeks: int | None = None, now: datetime | None = None) -> ProgressSnapshot:
        """
        Fetch workouts, recent PRs and top exercises, then replace every field at
        once. Any fetch error is captured into `error`; nothing is half-applied.
        """
        weeks = weeks or self.weeks
        now = now or utcnow()
        self.state = LoadState.LOADING
        self.error = None
        try:
            workouts = [
                w for w in await self.source.get_all_completed_workouts() if w.status == WorkoutStatus.COMPLETED
            ]
            raw_recent_prs = list(await self.source.get_recent_prs(self.recent_prs_limit))
            top_exercises = list(await self.source.get_top_exercises_by_usage(self.top_exercises_limit))

            week_start = start_of_local_week(now)
            week_end = _local_midnight(local_date(week_start) + timedelta(weeks=1))
            weekly_count = sum(1 for w in workouts if _in_window(w, week_start, week_end))
            consistency_pct = weekly_consistency_percent(weekly_count, self.weekly_target)
            streak = day_streak([w.started_at for w in workouts], today=local_date(now))
            series = weekly_volume_series(workouts, weeks, now)
            recent_prs = await self._with_exercise_names(raw_recent_prs)
        except Exception as e:
            logger.exception("Failed to load progress metrics: %s", e)
            self.state = LoadState.ERRORED
            self.error = str(e) or "Failed to load progress"
            return self.snapshot()

        self.weekly_count = weekly_count
        self.consistency_pct = consistency_pct
        self.streak = streak
        self.weekly_volume_series = series
        self.recent_prs = recent_prs
        self.top_exercises = top_exercises
        self.state = LoadState.READY
        return self.snapshot()

    async def refresh(self) -> ProgressSnapshot:
        return await self.load()

    async def _with_exercise_names(self, prs: list[PersonalRecordBase]) -> list[PersonalRecordBase]:
        # One lookup per distinct exercise id, in first-seen order
        names: dict[int, str | None] = {}
        for pr in prs:
            if pr.exercise_id not in names:
                names[pr.exercise_id] = await self.source.get_exercise_name(pr.exercise_id)
        return [pr.model_copy(update={"exercise_name": names[pr.exercise_id]}) for pr in prs]

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            state=self.state,
            error=self.error,
            unit=self.unit,
            weekly_target=self.weekly_target,
            weekly_count=self.weekly_count,
            consistency_pct=self.consistency_pct,
            streak=self.streak,
            weekly_volume_series=self.weekly_volume_series,
            recent_prs=self.recent_prs,
            top_exercises=self.top_exercises,
        )
