"""Workout lifecycle endpoints: sessions, exercise instances, sets, finish."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.db.session import get_db
from pulselift.repositories.workout_repo import WorkoutRepository
from pulselift.schemas.workout import (
    WorkoutCreate,
    WorkoutExerciseCreate,
    WorkoutExerciseRead,
    WorkoutRead,
    WorkoutReadWithExercises,
    WorkoutSetCreate,
    WorkoutSetRead,
    WorkoutSetUpdate,
    WorkoutSummary,
)
from pulselift.services.workout_lifecycle import finish_workout

router = APIRouter()


@router.get("", response_model=list[WorkoutRead])
async def list_workouts(
    db: AsyncSession = Depends(get_db),
    skip: int = 0,
    limit: int = 50,
):
    """List workouts (without exercises), newest first."""
    return await WorkoutRepository(db).list_workouts(skip=skip, limit=limit)


@router.post("", response_model=WorkoutRead, status_code=201)
async def create_workout(
    payload: WorkoutCreate,
    db: AsyncSession = Depends(get_db),
):
    """Start a new workout (status in_progress)."""
    return await WorkoutRepository(db).create(notes=payload.notes, started_at=payload.started_at)


@router.get("/active", response_model=WorkoutReadWithExercises | None)
async def get_active_workout(db: AsyncSession = Depends(get_db)):
    """The in-progress workout to resume, or null when none is open."""
    return await WorkoutRepository(db).get_active()


@router.get("/{workout_id}", response_model=WorkoutReadWithExercises)
async def get_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a workout with its exercises and their sets."""
    return await WorkoutRepository(db).get(workout_id, with_exercises=True)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a workout with its exercises and sets."""
    await WorkoutRepository(db).delete(workout_id)
    return None


@router.post("/{workout_id}/finish", response_model=WorkoutSummary)
async def finish(
    workout_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Complete the workout, finalise totals and detect new PRs. 409 if already completed."""
    return await finish_workout(db, workout_id)


@router.post("/{workout_id}/exercises", response_model=WorkoutExerciseRead, status_code=201)
async def add_exercise(
    workout_id: int,
    payload: WorkoutExerciseCreate,
    db: AsyncSession = Depends(get_db),
):
    return await WorkoutRepository(db).add_exercise(workout_id, payload.exercise_id, payload.notes)


@router.delete("/exercises/{workout_exercise_id}", status_code=204)
async def remove_exercise(
    workout_exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    await WorkoutRepository(db).remove_exercise(workout_exercise_id)
    return None


@router.post("/exercises/{workout_exercise_id}/sets", response_model=WorkoutSetRead, status_code=201)
async def add_set(
    workout_exercise_id: int,
    payload: WorkoutSetCreate,
    db: AsyncSession = Depends(get_db),
):
    """Add a set; the workout's totals are recomputed."""
    return await WorkoutRepository(db).add_set(workout_exercise_id, payload)


@router.post("/exercises/{workout_exercise_id}/sets/duplicate", response_model=WorkoutSetRead | None)
async def duplicate_last_set(
    workout_exercise_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Copy the last set as a new uncompleted set; null if the exercise has no sets."""
    return await WorkoutRepository(db).duplicate_last_set(workout_exercise_id)


@router.patch("/sets/{set_id}", response_model=WorkoutSetRead)
async def update_set(
    set_id: int,
    payload: WorkoutSetUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update reps, weight, RPE, flags or notes of a set."""
    return await WorkoutRepository(db).update_set(set_id, payload)


@router.delete("/sets/{set_id}", status_code=204)
async def delete_set(
    set_id: int,
    db: AsyncSession = Depends(get_db),
):
    await WorkoutRepository(db).delete_set(set_id)
    return None
