"""Exercise catalog reads/writes, usage ranking and per-exercise history."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.clock import utcnow
from pulselift.core.errors import NotFoundError
from pulselift.models.exercise import Exercise
from pulselift.models.workout import Workout, WorkoutExercise, WorkoutSet
from pulselift.schemas.exercise import ExerciseCreate, ExerciseRead
from pulselift.schemas.progress import ExerciseUsage, TopExerciseItem


class ExerciseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, exercise_id: int) -> Exercise:
        exercise = await self.db.get(Exercise, exercise_id)
        if exercise is None:
            raise NotFoundError("Exercise", exercise_id)
        return exercise

    async def get_name(self, exercise_id: int) -> str | None:
        result = await self.db.execute(select(Exercise.name).where(Exercise.id == exercise_id))
        return result.scalar_one_or_none()

    async def list_exercises(self, skip: int = 0, limit: int = 100) -> list[Exercise]:
        result = await self.db.execute(
            select(Exercise)
            .order_by(Exercise.is_favorite.desc(), Exercise.name.asc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def create(self, payload: ExerciseCreate) -> Exercise:
        exercise = Exercise(**payload.model_dump())
        self.db.add(exercise)
        await self.db.flush()
        await self.db.refresh(exercise)
        return exercise

    async def touch_last_used(self, exercise_id: int) -> None:
        exercise = await self.get(exercise_id)
        exercise.last_used_at = utcnow()
        await self.db.flush()

    async def top_by_usage(self, limit: int = 5) -> list[TopExerciseItem]:
        """Most used exercises: distinct workouts first, then number of logged sets."""
        workout_count = func.count(func.distinct(WorkoutExercise.workout_id)).label("workout_count")
        set_count = func.count(WorkoutSet.id).label("set_count")
        result = await self.db.execute(
            select(Exercise, workout_count, set_count)
            .join(WorkoutExercise, WorkoutExercise.exercise_id == Exercise.id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_exercise_id == WorkoutExercise.id)
            .group_by(Exercise.id)
            .order_by(workout_count.desc(), set_count.desc(), Exercise.id.asc())
            .limit(limit)
        )
        return [
            TopExerciseItem(
                exercise=ExerciseRead.model_validate(row.Exercise),
                workout_count=int(row.workout_count or 0),
                set_count=int(row.set_count or 0),
            )
            for row in result.all()
        ]

    async def get_with_stats(self, exercise_id: int) -> ExerciseUsage:
        """Workouts containing the exercise, all its logged sets, and completed volume."""
        exercise = await self.get(exercise_id)
        workouts = await self.db.execute(
            select(func.count(func.distinct(WorkoutExercise.workout_id))).where(
                WorkoutExercise.exercise_id == exercise_id
            )
        )
        completed_volume = case(
            (WorkoutSet.is_completed.is_(True), WorkoutSet.weight * WorkoutSet.reps),
            else_=0,
        )
        sets = await self.db.execute(
            select(func.count(WorkoutSet.id), func.coalesce(func.sum(completed_volume), 0))
            .select_from(WorkoutSet)
            .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
            .where(WorkoutExercise.exercise_id == exercise_id)
        )
        set_count, volume = sets.one()
        return ExerciseUsage(
            exercise=ExerciseRead.model_validate(exercise),
            total_workouts=int(workouts.scalar() or 0),
            total_sets=int(set_count or 0),
            total_volume=float(volume or 0),
            last_used_at=exercise.last_used_at,
        )

    async def sets_with_workouts(self, exercise_id: int) -> list[tuple[int, datetime, WorkoutSet]]:
        """(workout_id, started_at, set) for every set of the exercise, oldest workout first."""
        result = await self.db.execute(
            select(Workout.id, Workout.started_at, WorkoutSet)
            .select_from(WorkoutSet)
            .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
            .join(Workout, Workout.id == WorkoutExercise.workout_id)
            .where(WorkoutExercise.exercise_id == exercise_id)
            .order_by(Workout.started_at.asc(), WorkoutExercise.order_index.asc(), WorkoutSet.set_number.asc())
        )
        return [tuple(row) for row in result.all()]
