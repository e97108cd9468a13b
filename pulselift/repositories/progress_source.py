"""SQL-backed ProgressSource for the progress dashboard."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.models.workout import Workout
from pulselift.repositories.exercise_repo import ExerciseRepository
from pulselift.repositories.pr_repo import PersonalRecordRepository
from pulselift.repositories.workout_repo import WorkoutRepository
from pulselift.schemas.personal_record import PersonalRecordBase
from pulselift.schemas.progress import TopExerciseItem


class SqlProgressSource:
    """Read-only view over workouts, PRs and exercises in one session."""

    def __init__(self, db: AsyncSession):
        self.workouts = WorkoutRepository(db)
        self.prs = PersonalRecordRepository(db)
        self.exercises = ExerciseRepository(db)

    async def get_all_completed_workouts(self) -> list[Workout]:
        return await self.workouts.get_all_completed()

    async def get_recent_prs(self, limit: int) -> list[PersonalRecordBase]:
        return await self.prs.get_recent(limit)

    async def get_exercise_name(self, exercise_id: int) -> str | None:
        return await self.exercises.get_name(exercise_id)

    async def get_top_exercises_by_usage(self, limit: int) -> list[TopExerciseItem]:
        return await self.exercises.top_by_usage(limit)
