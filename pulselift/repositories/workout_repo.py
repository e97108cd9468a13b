"""Workout, exercise-instance and set persistence.

Every set or exercise mutation ends with recalculate_totals(), so a workout's
cached total_sets / total_reps / total_volume always match its sets.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pulselift.core.clock import as_utc, utcnow
from pulselift.core.enums import WorkoutStatus
from pulselift.core.errors import NotFoundError
from pulselift.models.workout import Workout, WorkoutExercise, WorkoutSet
from pulselift.repositories.exercise_repo import ExerciseRepository
from pulselift.schemas.workout import WorkoutSetCreate, WorkoutSetUpdate
from pulselift.services.metrics import completed_set_count, total_reps, total_volume

logger = logging.getLogger(__name__)


class WorkoutRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # -- workouts --

    async def create(self, notes: str | None = None, started_at=None) -> Workout:
        workout = Workout(
            notes=notes,
            started_at=as_utc(started_at) if started_at else utcnow(),
            status=WorkoutStatus.IN_PROGRESS,
            total_sets=0,
            total_reps=0,
            total_volume=0.0,
        )
        self.db.add(workout)
        await self.db.flush()
        await self.db.refresh(workout)
        return workout

    async def get(self, workout_id: int, with_exercises: bool = False) -> Workout:
        stmt = select(Workout).where(Workout.id == workout_id)
        if with_exercises:
            stmt = stmt.options(
                selectinload(Workout.exercises).selectinload(WorkoutExercise.sets),
                selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise),
            ).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        workout = result.scalar_one_or_none()
        if workout is None:
            raise NotFoundError("Workout", workout_id)
        return workout

    async def list_workouts(self, skip: int = 0, limit: int = 50) -> list[Workout]:
        result = await self.db.execute(
            select(Workout).order_by(Workout.started_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def get_all_completed(self) -> list[Workout]:
        result = await self.db.execute(
            select(Workout)
            .where(Workout.status == WorkoutStatus.COMPLETED)
            .order_by(Workout.started_at.desc())
        )
        return list(result.scalars().all())

    async def get_active(self) -> Workout | None:
        """Latest in-progress workout with its exercises and sets, if any."""
        result = await self.db.execute(
            select(Workout)
            .where(Workout.status == WorkoutStatus.IN_PROGRESS)
            .options(
                selectinload(Workout.exercises).selectinload(WorkoutExercise.sets),
                selectinload(Workout.exercises).selectinload(WorkoutExercise.exercise),
            )
            .order_by(Workout.started_at.desc(), Workout.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def delete(self, workout_id: int) -> None:
        workout = await self.get(workout_id, with_exercises=True)
        await self.db.delete(workout)
        await self.db.flush()

    async def recalculate_totals(self, workout_id: int) -> Workout:
        """Recompute cached totals from completed sets (warmups included)."""
        workout = await self.get(workout_id)
        result = await self.db.execute(
            select(WorkoutSet)
            .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
            .where(WorkoutExercise.workout_id == workout_id)
        )
        sets = result.scalars().all()
        workout.total_sets = completed_set_count(sets)
        workout.total_reps = total_reps(sets)
        workout.total_volume = total_volume(sets)
        workout.updated_at = utcnow()
        await self.db.flush()
        logger.debug(
            "Recalculated totals for workout %s: sets=%s reps=%s volume=%.2f",
            workout_id,
            workout.total_sets,
            workout.total_reps,
            workout.total_volume,
        )
        return workout

    # -- exercise instances --

    async def get_workout_exercise(self, workout_exercise_id: int) -> WorkoutExercise:
        result = await self.db.execute(
            select(WorkoutExercise)
            .where(WorkoutExercise.id == workout_exercise_id)
            .options(selectinload(WorkoutExercise.sets), selectinload(WorkoutExercise.exercise))
            .execution_options(populate_existing=True)
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError("WorkoutExercise", workout_exercise_id)
        return entry

    async def get_workout_exercises(self, workout_id: int) -> list[WorkoutExercise]:
        result = await self.db.execute(
            select(WorkoutExercise)
            .where(WorkoutExercise.workout_id == workout_id)
            .options(selectinload(WorkoutExercise.sets))
            .order_by(WorkoutExercise.order_index.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def add_exercise(self, workout_id: int, exercise_id: int, notes: str | None = None) -> WorkoutExercise:
        await self.get(workout_id)
        exercises = ExerciseRepository(self.db)
        await exercises.touch_last_used(exercise_id)

        result = await self.db.execute(
            select(func.max(WorkoutExercise.order_index)).where(WorkoutExercise.workout_id == workout_id)
        )
        max_order = result.scalar()
        entry = WorkoutExercise(
            workout_id=workout_id,
            exercise_id=exercise_id,
            order_index=(max_order if max_order is not None else -1) + 1,
            notes=notes,
        )
        self.db.add(entry)
        await self.db.flush()
        return await self.get_workout_exercise(entry.id)

    async def remove_exercise(self, workout_exercise_id: int) -> None:
        entry = await self.get_workout_exercise(workout_exercise_id)
        workout_id = entry.workout_id
        await self.db.delete(entry)
        await self.db.flush()
        await self.recalculate_totals(workout_id)

    # -- sets --

    async def get_set(self, set_id: int) -> WorkoutSet:
        set_ = await self.db.get(WorkoutSet, set_id)
        if set_ is None:
            raise NotFoundError("WorkoutSet", set_id)
        return set_

    async def add_set(self, workout_exercise_id: int, payload: WorkoutSetCreate) -> WorkoutSet:
        entry = await self.get_workout_exercise(workout_exercise_id)
        result = await self.db.execute(
            select(func.max(WorkoutSet.set_number)).where(WorkoutSet.workout_exercise_id == workout_exercise_id)
        )
        max_set = result.scalar()
        set_ = WorkoutSet(
            workout_exercise_id=workout_exercise_id,
            set_number=(max_set or 0) + 1,
            **payload.model_dump(),
        )
        self.db.add(set_)
        await self.db.flush()
        await self.db.refresh(set_)
        await self.recalculate_totals(entry.workout_id)
        return set_

    async def update_set(self, set_id: int, payload: WorkoutSetUpdate) -> WorkoutSet:
        set_ = await self.get_set(set_id)
        for k, v in payload.model_dump(exclude_unset=True).items():
            setattr(set_, k, v)
        await self.db.flush()
        entry = await self.get_workout_exercise(set_.workout_exercise_id)
        await self.recalculate_totals(entry.workout_id)
        await self.db.refresh(set_)
        return set_

    async def delete_set(self, set_id: int) -> None:
        set_ = await self.get_set(set_id)
        workout_exercise_id = set_.workout_exercise_id
        await self.db.delete(set_)
        await self.db.flush()
        entry = await self.get_workout_exercise(workout_exercise_id)
        await self.recalculate_totals(entry.workout_id)

    async def duplicate_last_set(self, workout_exercise_id: int) -> WorkoutSet | None:
        """Copy the last set's reps/weight/rpe/warmup flag into a new, not yet completed set."""
        entry = await self.get_workout_exercise(workout_exercise_id)
        if not entry.sets:
            return None
        last = entry.sets[-1]
        return await self.add_set(
            workout_exercise_id,
            WorkoutSetCreate(
                reps=last.reps,
                weight=last.weight,
                rpe=last.rpe,
                is_warmup=last.is_warmup,
                is_completed=False,
            ),
        )
