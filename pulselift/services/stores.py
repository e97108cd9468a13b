"""Storage contracts consumed by the PR engine and the progress aggregator.

The SQLAlchemy repositories in pulselift.repositories implement these; tests
use in-memory doubles. Timeouts and retries, if any, belong to the implementation.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from pulselift.core.enums import PRType, WorkoutStatus
from pulselift.schemas.personal_record import PersonalRecordBase
from pulselift.schemas.progress import TopExerciseItem
from pulselift.services.metrics import SetLike


class WorkoutExerciseLike(Protocol):
    exercise_id: int
    sets: Sequence[SetLike]


class WorkoutLike(Protocol):
    started_at: datetime
    status: WorkoutStatus
    total_volume: float


class PRStore(Protocol):
    async def get_best_pr(self, exercise_id: int, pr_type: PRType) -> PersonalRecordBase | None:
        """Highest-value PR ever recorded for the pair."""

    async def get_most_recent_pr(self, exercise_id: int, pr_type: PRType) -> PersonalRecordBase | None:
        """Latest achieved PR for the pair, whatever its value."""

    async def save_pr(
        self,
        workout_id: int,
        exercise_id: int,
        pr_type: PRType,
        value: float,
        reps: int | None = None,
    ) -> PersonalRecordBase:
        """Persist one new PR row and return it."""


class ProgressSource(Protocol):
    async def get_all_completed_workouts(self) -> Sequence[WorkoutLike]: ...

    async def get_recent_prs(self, limit: int) -> Sequence[PersonalRecordBase]: ...

    async def get_exercise_name(self, exercise_id: int) -> str | None: ...

    async def get_top_exercises_by_usage(self, limit: int) -> Sequence[TopExerciseItem]: ...
