"""Personal record listings and administrative removal."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.db.session import get_db
from pulselift.repositories.pr_repo import PersonalRecordRepository
from pulselift.schemas.personal_record import PersonalRecordRead

router = APIRouter()


@router.get("/recent", response_model=list[PersonalRecordRead])
async def recent_prs(
    limit: int = 10,
    db: AsyncSession = Depends(get_db),
):
    """Most recently achieved PRs across all exercises and categories."""
    return await PersonalRecordRepository(db).get_recent(limit)


@router.get("/exercise/{exercise_id}", response_model=list[PersonalRecordRead])
async def prs_for_exercise(
    exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Full PR history of one exercise, newest first."""
    return await PersonalRecordRepository(db).list_for_exercise(exercise_id)


@router.get("/workout/{workout_id}", response_model=list[PersonalRecordRead])
async def prs_for_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """PRs set in one workout, grouped by category."""
    return await PersonalRecordRepository(db).list_for_workout(workout_id)


@router.delete("/{pr_id}", status_code=204)
async def delete_pr(
    pr_id: int,
    db: AsyncSession = Depends(get_db),
):
    await PersonalRecordRepository(db).delete(pr_id)
    return None
