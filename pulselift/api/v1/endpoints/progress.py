"""Progress dashboard: weekly volume, consistency, streak, recent PRs, top exercises."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.config import Settings, get_settings
from pulselift.core.enums import WeightUnit
from pulselift.db.session import get_db
from pulselift.repositories.progress_source import SqlProgressSource
from pulselift.schemas.progress import ProgressSnapshot
from pulselift.services.progress import ProgressAggregator

router = APIRouter()


@router.get("", response_model=ProgressSnapshot)
async def progress_dashboard(
    weeks: int | None = Query(default=None, ge=1, le=104),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """
    Dashboard aggregates. Failures in the underlying reads come back as
    state="errored" with the message, not as a 5xx.
    """
    aggregator = ProgressAggregator(
        SqlProgressSource(db),
        weekly_target=settings.weekly_target_days,
        weeks=settings.progress_weeks,
        recent_prs_limit=settings.recent_prs_limit,
        top_exercises_limit=settings.top_exercises_limit,
        unit=WeightUnit(settings.unit_preference),
    )
    return await aggregator.load(weeks=weeks)
