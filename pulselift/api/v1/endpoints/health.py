"""Liveness and readiness probes."""

import logging
import os

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.config import Settings, get_settings
from pulselift.db.session import get_db
from pulselift.models.workout import Workout

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def health(settings: Settings = Depends(get_settings)):
    """Process is up. Adds built_at when PULSELIFT_BUILT_AT is set by the deploy."""
    payload: dict = {"status": "ok", "app": settings.app_name, "environment": settings.environment}
    built_at = os.environ.get("PULSELIFT_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_db)):
    """Database reachable and schema migrated (the workouts table answers a count)."""
    try:
        workouts = (await db.execute(select(func.count(Workout.id)))).scalar_one()
    except Exception as e:
        logger.exception("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": str(e)},
        )
    return {"status": "ok", "database": db.bind.dialect.name, "workouts": workouts}
