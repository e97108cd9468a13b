from dataclasses import dataclass
from datetime import datetime, timedelta

import pytest

from pulselift.core.enums import LoadState, PRType, WeightUnit, WorkoutStatus
from pulselift.schemas.exercise import ExerciseRead
from pulselift.schemas.personal_record import pr_from_row
from pulselift.schemas.progress import ExerciseUsage, TopExerciseItem
from pulselift.services.progress import (
    ProgressAggregator,
    exercise_progress,
    exercise_sessions,
    format_week_label,
    start_of_local_week,
    weekly_session_frequency,
    weekly_volume_series,
)

# Wednesday 5 Nov 2025, noon local time
NOW = datetime(2025, 11, 5, 12).astimezone()


@dataclass
class FakeWorkout:
    started_at: datetime
    total_volume: float
    status: WorkoutStatus = WorkoutStatus.COMPLETED


def make_pr(pr_id, exercise_id, pr_type=PRType.ONE_RM, value=100.0):
    return pr_from_row(
        {
            "id": pr_id,
            "exercise_id": exercise_id,
            "workout_id": 1,
            "type": pr_type,
            "value": value,
            "reps": 5 if pr_type != PRType.ONE_RM else None,
            "achieved_at": NOW,
        }
    )


class FakeSource:
    def __init__(self, workouts=(), prs=(), top=(), names=None):
        self.workouts = list(workouts)
        self.prs = list(prs)
        self.top = list(top)
        self.names = names or {}
        self.name_lookups = []
        self.fail = None

    async def get_all_completed_workouts(self):
        if self.fail:
            raise self.fail
        return self.workouts

    async def get_recent_prs(self, limit):
        return self.prs[:limit]

    async def get_exercise_name(self, exercise_id):
        self.name_lookups.append(exercise_id)
        return self.names.get(exercise_id)

    async def get_top_exercises_by_usage(self, limit):
        return self.top[:limit]


@pytest.fixture
def workouts():
    last_week = datetime(2025, 10, 28, 18).astimezone()
    return [
        FakeWorkout(last_week, 900),
        FakeWorkout(datetime(2025, 11, 4, 18).astimezone(), 1500),
        FakeWorkout(datetime(2025, 11, 5, 8).astimezone(), 1000),
        FakeWorkout(datetime(2025, 11, 5, 9).astimezone(), 5000, status=WorkoutStatus.IN_PROGRESS),
    ]


def test_start_of_local_week_is_monday_midnight():
    monday = start_of_local_week(NOW)
    assert monday.weekday() == 0
    assert (monday.year, monday.month, monday.day, monday.hour) == (2025, 11, 3, 0)
    assert format_week_label(monday) == "Nov 3"


def test_weekly_volume_series_oldest_first(workouts):
    completed = [w for w in workouts if w.status == WorkoutStatus.COMPLETED]
    series = weekly_volume_series(completed, 2, NOW)
    assert [p.label for p in series] == ["Oct 27", "Nov 3"]
    assert [p.volume for p in series] == [900, 2500]


async def test_load_computes_dashboard(workouts):
    source = FakeSource(workouts=workouts)
    aggregator = ProgressAggregator(source, weekly_target=4, weeks=2, unit=WeightUnit.LB)

    snapshot = await aggregator.load(now=NOW)

    assert snapshot.state == LoadState.READY
    assert snapshot.error is None
    assert snapshot.unit == WeightUnit.LB
    assert snapshot.weekly_count == 2
    assert snapshot.consistency_pct == pytest.approx(50.0)
    # Today and yesterday
    assert snapshot.streak == 2
    assert [p.volume for p in snapshot.weekly_volume_series] == [900, 2500]


async def test_default_window_has_eight_weeks():
    snapshot = await ProgressAggregator(FakeSource()).load(now=NOW)
    assert len(snapshot.weekly_volume_series) == 8
    assert all(p.volume == 0 for p in snapshot.weekly_volume_series)
    assert snapshot.weekly_volume_series[-1].label == "Nov 3"
    assert snapshot.consistency_pct == 0
    assert snapshot.streak == 0


async def test_streak_of_one_when_only_today():
    source = FakeSource(workouts=[FakeWorkout(NOW - timedelta(hours=1), 100)])
    snapshot = await ProgressAggregator(source).load(now=NOW)
    assert snapshot.streak == 1


async def test_recent_prs_get_names_with_one_lookup_per_exercise():
    prs = [make_pr(1, 10), make_pr(2, 10, PRType.VOLUME), make_pr(3, 20, PRType.FIVE_RM)]
    source = FakeSource(prs=prs, names={10: "Bench Press", 20: "Squat"})

    snapshot = await ProgressAggregator(source).load(now=NOW)

    assert [p.exercise_name for p in snapshot.recent_prs] == ["Bench Press", "Bench Press", "Squat"]
    assert sorted(source.name_lookups) == [10, 20]
    assert snapshot.recent_prs[2].type == PRType.FIVE_RM
    assert snapshot.recent_prs[2].target == 5


async def test_recent_prs_respect_limit():
    source = FakeSource(prs=[make_pr(i, 1) for i in range(1, 6)], names={1: "Row"})
    snapshot = await ProgressAggregator(source, recent_prs_limit=3).load(now=NOW)
    assert [p.id for p in snapshot.recent_prs] == [1, 2, 3]


async def test_top_exercises_pass_through():
    item = TopExerciseItem(
        exercise=ExerciseRead(id=1, name="Deadlift", primary_muscle="back", equipment="barbell"),
        workout_count=4,
        set_count=12,
    )
    snapshot = await ProgressAggregator(FakeSource(top=[item])).load(now=NOW)
    assert snapshot.top_exercises == [item]


async def test_failed_refresh_keeps_previous_values(workouts):
    source = FakeSource(workouts=workouts)
    aggregator = ProgressAggregator(source, weekly_target=4, weeks=2)
    first = await aggregator.load(now=NOW)

    source.fail = RuntimeError("database is locked")
    second = await aggregator.load(now=NOW)

    assert second.state == LoadState.ERRORED
    assert second.error == "database is locked"
    assert second.weekly_count == first.weekly_count
    assert second.weekly_volume_series == first.weekly_volume_series
    assert aggregator.loading is False


async def test_failure_without_message_uses_fallback():
    source = FakeSource()
    source.fail = RuntimeError()
    snapshot = await ProgressAggregator(source).load(now=NOW)
    assert snapshot.error == "Failed to load progress"


async def test_state_transitions():
    source = FakeSource()
    aggregator = ProgressAggregator(source)
    assert aggregator.state == LoadState.IDLE

    seen = []
    original = source.get_all_completed_workouts

    async def spy():
        seen.append((aggregator.state, aggregator.loading))
        return await original()

    source.get_all_completed_workouts = spy
    await aggregator.refresh()

    assert seen == [(LoadState.LOADING, True)]
    assert aggregator.state == LoadState.READY

    source.fail = ValueError("boom")
    await aggregator.refresh()
    assert aggregator.state == LoadState.ERRORED

    source.fail = None
    await aggregator.refresh()
    assert aggregator.state == LoadState.READY
    assert aggregator.error is None


@dataclass
class FakeSet:
    reps: int
    weight: float
    is_completed: bool = True
    is_warmup: bool = False


def test_exercise_sessions_use_working_sets_oldest_first():
    older = datetime(2025, 10, 28, 18).astimezone()
    newer = datetime(2025, 11, 4, 18).astimezone()
    rows = [
        (2, newer, FakeSet(reps=5, weight=100)),
        (2, newer, FakeSet(reps=3, weight=110)),
        (2, newer, FakeSet(reps=10, weight=60, is_warmup=True)),
        (1, older, FakeSet(reps=8, weight=90)),
        (1, older, FakeSet(reps=8, weight=95, is_completed=False)),
    ]

    sessions = exercise_sessions(rows)

    assert [s.workout_id for s in sessions] == [1, 2]
    first, second = sessions
    assert (first.top_set_weight, first.volume, first.set_count) == (90, 720, 1)
    assert first.best_one_rep_max == pytest.approx(90 * (1 + 8 / 30))
    assert (second.top_set_weight, second.volume, second.set_count) == (110, 830, 2)
    assert second.best_one_rep_max == pytest.approx(121.0)


def test_session_with_only_warmups_reports_zeros():
    rows = [(1, NOW, FakeSet(reps=10, weight=40, is_warmup=True))]
    (session,) = exercise_sessions(rows)
    assert (session.best_one_rep_max, session.top_set_weight, session.volume, session.set_count) == (0, 0, 0, 0)


def test_weekly_session_frequency():
    rows = [
        (1, datetime(2025, 10, 28, 18).astimezone(), FakeSet(reps=5, weight=100)),
        (2, datetime(2025, 11, 3, 7).astimezone(), FakeSet(reps=5, weight=100)),
        (3, datetime(2025, 11, 5, 8).astimezone(), FakeSet(reps=5, weight=100)),
    ]
    series = weekly_session_frequency(exercise_sessions(rows), 8, NOW)

    assert len(series) == 8
    assert [p.label for p in series[-2:]] == ["Oct 27", "Nov 3"]
    assert [p.count for p in series] == [0, 0, 0, 0, 0, 0, 1, 2]


def test_weekly_session_frequency_empty_without_sessions():
    assert weekly_session_frequency([], 8, NOW) == []


def test_exercise_progress_bundles_usage_and_prs():
    usage = ExerciseUsage(
        exercise=ExerciseRead(id=1, name="Deadlift", primary_muscle="back", equipment="barbell"),
        total_workouts=1,
        total_sets=1,
        total_volume=500,
    )
    prs = [make_pr(1, 1)]
    progress = exercise_progress(usage, [(1, NOW, FakeSet(reps=5, weight=100))], prs, weeks=4, now=NOW)

    assert progress.usage == usage
    assert len(progress.sessions) == 1
    assert len(progress.weekly_frequency) == 4
    assert progress.weekly_frequency[-1].count == 1
    assert progress.personal_records == prs
