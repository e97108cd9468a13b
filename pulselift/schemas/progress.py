"""Progress dashboard schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from pulselift.core.enums import LoadState, WeightUnit
from pulselift.schemas.exercise import ExerciseRead
from pulselift.schemas.personal_record import PersonalRecordRead


class WeeklyVolumePoint(BaseModel):
    week_start: datetime  # local Monday 00:00
    label: str  # e.g. "Oct 28"
    volume: float


class TopExerciseItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exercise: ExerciseRead
    workout_count: int
    set_count: int


class ProgressSnapshot(BaseModel):
    state: LoadState
    error: str | None = None
    unit: WeightUnit = WeightUnit.KG

    weekly_target: int = 0
    weekly_count: int = 0
    consistency_pct: float = 0.0
    streak: int = 0

    weekly_volume_series: list[WeeklyVolumePoint] = []
    recent_prs: list[PersonalRecordRead] = []
    top_exercises: list[TopExerciseItem] = []


class StreakRead(BaseModel):
    current_streak: int
    longest_streak: int
    last_workout_date: date | None = None


class WeeklyCountPoint(BaseModel):
    week_start: datetime
    label: str
    count: int


class ExerciseUsage(BaseModel):
    """Lifetime usage of one exercise. total_volume covers completed sets, warmups included."""

    exercise: ExerciseRead
    total_workouts: int
    total_sets: int
    total_volume: float
    last_used_at: datetime | None = None


class ExerciseSessionMetrics(BaseModel):
    """One workout's completed working sets for an exercise."""

    workout_id: int
    started_at: datetime
    best_one_rep_max: float
    top_set_weight: float
    volume: float
    set_count: int


class ExerciseProgress(BaseModel):
    usage: ExerciseUsage
    sessions: list[ExerciseSessionMetrics] = []  # oldest first
    weekly_frequency: list[WeeklyCountPoint] = []
    personal_records: list[PersonalRecordRead] = []
