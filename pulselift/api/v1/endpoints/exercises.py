"""Exercise catalog endpoints."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.config import Settings, get_settings
from pulselift.db.session import get_db
from pulselift.repositories.exercise_repo import ExerciseRepository
from pulselift.repositories.pr_repo import PersonalRecordRepository
from pulselift.schemas.exercise import ExerciseCreate, ExerciseRead
from pulselift.schemas.progress import ExerciseProgress, TopExerciseItem
from pulselift.services.progress import exercise_progress

router = APIRouter()


@router.get("", response_model=list[ExerciseRead])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 100,
):
    """Favourites first, then alphabetical."""
    return await ExerciseRepository(db).list_exercises(skip=skip, limit=limit)


@router.post("", response_model=ExerciseRead, status_code=201)
async def create_exercise(
    payload: ExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    return await ExerciseRepository(db).create(payload)


@router.get("/top", response_model=list[TopExerciseItem])
async def top_exercises(
    limit: int = 5,
    db: AsyncSession = Depends(get_db),
):
    """Most used exercises by workouts, then by sets."""
    return await ExerciseRepository(db).top_by_usage(limit)


@router.get("/{exercise_id}", response_model=ExerciseRead)
async def get_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    return await ExerciseRepository(db).get(exercise_id)


@router.get("/{exercise_id}/stats", response_model=ExerciseProgress)
async def exercise_stats(
    exercise_id: int,
    weeks: int | None = Query(default=None, ge=1, le=104),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Progress of one exercise: lifetime usage, per-session best 1RM / top set /
    volume (oldest first), sessions per week and its PR history.
    """
    exercises = ExerciseRepository(db)
    usage = await exercises.get_with_stats(exercise_id)
    rows = await exercises.sets_with_workouts(exercise_id)
    prs = await PersonalRecordRepository(db).list_for_exercise(exercise_id)
    return exercise_progress(usage, rows, prs, weeks=weeks or settings.progress_weeks)
