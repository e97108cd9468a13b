"""PersonalRecord persistence: the PR store behind PREngine plus PR listings."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pulselift.core.clock import utcnow
from pulselift.core.enums import PRType
from pulselift.core.errors import NotFoundError
from pulselift.models.personal_record import PersonalRecord
from pulselift.schemas.personal_record import PersonalRecordBase, pr_from_row


class PersonalRecordRepository:
    """Writes go into the caller's session; committing is the caller's job."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_best_pr(self, exercise_id: int, pr_type: PRType) -> PersonalRecordBase | None:
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.exercise_id == exercise_id, PersonalRecord.type == pr_type)
            .order_by(PersonalRecord.value.desc(), PersonalRecord.id.asc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return pr_from_row(row) if row else None

    async def get_most_recent_pr(self, exercise_id: int, pr_type: PRType) -> PersonalRecordBase | None:
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.exercise_id == exercise_id, PersonalRecord.type == pr_type)
            .order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.id.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return pr_from_row(row) if row else None

    async def save_pr(
        self,
        workout_id: int,
        exercise_id: int,
        pr_type: PRType,
        value: float,
        reps: int | None = None,
    ) -> PersonalRecordBase:
        row = PersonalRecord(
            workout_id=workout_id,
            exercise_id=exercise_id,
            type=pr_type,
            value=value,
            reps=reps,
            achieved_at=utcnow(),
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return pr_from_row(row)

    async def get_recent(self, limit: int = 10) -> list[PersonalRecordBase]:
        result = await self.db.execute(
            select(PersonalRecord)
            .order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.id.desc())
            .limit(limit)
        )
        return [pr_from_row(r) for r in result.scalars().all()]

    async def list_for_exercise(self, exercise_id: int) -> list[PersonalRecordBase]:
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.exercise_id == exercise_id)
            .order_by(PersonalRecord.achieved_at.desc(), PersonalRecord.id.desc())
        )
        return [pr_from_row(r) for r in result.scalars().all()]

    async def list_for_workout(self, workout_id: int) -> list[PersonalRecordBase]:
        result = await self.db.execute(
            select(PersonalRecord)
            .where(PersonalRecord.workout_id == workout_id)
            .order_by(PersonalRecord.type.asc(), PersonalRecord.id.asc())
        )
        return [pr_from_row(r) for r in result.scalars().all()]

    async def delete(self, pr_id: int) -> None:
        """Administrative removal; PR evaluation itself never deletes."""
        row = await self.db.get(PersonalRecord, pr_id)
        if row is None:
            raise NotFoundError("PersonalRecord", pr_id)
        await self.db.delete(row)
        await self.db.flush()
