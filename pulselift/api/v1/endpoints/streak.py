"""Streak calculation endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.clock import local_date
from pulselift.db.session import get_db
from pulselift.repositories.workout_repo import WorkoutRepository
from pulselift.schemas.progress import StreakRead
from pulselift.services.metrics import day_streak, longest_streak

router = APIRouter()


@router.get("", response_model=StreakRead)
async def get_streak(db: AsyncSession = Depends(get_db)):
    """
    Current streak (consecutive days with a completed workout, ending today or
    yesterday), longest ever streak, and the local date of the last workout.
    """
    workouts = await WorkoutRepository(db).get_all_completed()
    dates = [w.started_at for w in workouts]
    return StreakRead(
        current_streak=day_streak(dates),
        longest_streak=longest_streak(dates),
        last_workout_date=max((local_date(d) for d in dates), default=None),
    )
