"""API v1 router aggregation."""

from fastapi import APIRouter

from pulselift.api.v1.endpoints import (
    exercises,
    health,
    pr,
    progress,
    streak,
    workouts,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(exercises.router, prefix="/exercises", tags=["exercises"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["workouts"])
api_router.include_router(pr.router, prefix="/pr", tags=["pr"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
api_router.include_router(streak.router, prefix="/streak", tags=["streak"])
