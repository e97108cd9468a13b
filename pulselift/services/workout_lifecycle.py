"""Finishing a workout: the one-way in_progress -> completed transition.

Finishing stamps ended_at and duration, recomputes the cached totals and runs
PR detection over the workout's exercises. Everything happens in the caller's
session, so with the request-scoped session the finish commits or rolls back
as a whole.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.clock import as_utc, utcnow
from pulselift.core.enums import WorkoutStatus
from pulselift.core.errors import WorkoutStateError
from pulselift.repositories.pr_repo import PersonalRecordRepository
from pulselift.repositories.workout_repo import WorkoutRepository
from pulselift.schemas.workout import WorkoutSummary
from pulselift.services.pr_engine import PREngine

logger = logging.getLogger(__name__)


async def finish_workout(
    db: AsyncSession,
    workout_id: int,
    now: datetime | None = None,
) -> WorkoutSummary:
    """Complete the workout and return its summary with the PRs it set."""
    workouts = WorkoutRepository(db)
    workout = await workouts.get(workout_id)
    if workout.status == WorkoutStatus.COMPLETED:
        raise WorkoutStateError(f"Workout {workout_id} is already completed")

    ended_at = as_utc(now) if now else utcnow()
    workout.ended_at = ended_at
    workout.duration_seconds = max(0, int((ended_at - as_utc(workout.started_at)).total_seconds()))
    workout.status = WorkoutStatus.COMPLETED
    await db.flush()
    await workouts.recalculate_totals(workout_id)

    exercises = await workouts.get_workout_exercises(workout_id)
    engine = PREngine(PersonalRecordRepository(db))
    new_prs = await engine.evaluate_workout(workout_id, exercises)

    logger.info("Finished workout %s with %d new PR(s)", workout_id, len(new_prs))
    return WorkoutSummary(
        workout_id=workout_id,
        total_sets=workout.total_sets,
        total_reps=workout.total_reps,
        total_volume=workout.total_volume,
        duration_seconds=workout.duration_seconds,
        exercise_count=len(exercises),
        new_prs=new_prs,
    )
