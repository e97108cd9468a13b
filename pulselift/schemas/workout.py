"""Workout, WorkoutExercise and WorkoutSet schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pulselift.core.enums import WorkoutStatus
from pulselift.schemas.exercise import ExerciseRef
from pulselift.schemas.personal_record import PersonalRecordRead


class WorkoutSetBase(BaseModel):
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)
    rpe: int | None = Field(default=None, ge=1, le=10)
    is_warmup: bool = False
    is_completed: bool = False
    notes: str | None = Field(default=None, max_length=500)


class WorkoutSetCreate(WorkoutSetBase):
    pass


class WorkoutSetUpdate(BaseModel):
    reps: int | None = Field(default=None, ge=0)
    weight: float | None = Field(default=None, ge=0)
    rpe: int | None = Field(default=None, ge=1, le=10)
    is_warmup: bool | None = None
    is_completed: bool | None = None
    notes: str | None = Field(default=None, max_length=500)


class WorkoutSetRead(WorkoutSetBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_exercise_id: int
    set_number: int
    created_at: datetime


class WorkoutExerciseCreate(BaseModel):
    exercise_id: int
    notes: str | None = None


class WorkoutExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    workout_id: int
    exercise_id: int
    order_index: int
    notes: str | None = None
    exercise: ExerciseRef | None = None
    sets: list[WorkoutSetRead] = []


class WorkoutCreate(BaseModel):
    notes: str | None = None
    started_at: datetime | None = None  # defaults to now


class WorkoutRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    started_at: datetime
    ended_at: datetime | None = None
    duration_seconds: int | None = None
    notes: str | None = None
    total_sets: int = 0
    total_reps: int = 0
    total_volume: float = 0.0
    status: WorkoutStatus


class WorkoutReadWithExercises(WorkoutRead):
    """Workout with nested exercises and their sets (detail view)."""

    exercises: list[WorkoutExerciseRead] = []


class WorkoutSummary(BaseModel):
    """Result of finishing a workout."""

    workout_id: int
    total_sets: int
    total_reps: int
    total_volume: float
    duration_seconds: int
    exercise_count: int
    new_prs: list[PersonalRecordRead] = []
