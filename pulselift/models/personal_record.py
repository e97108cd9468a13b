"""PersonalRecord model - immutable PR history rows."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from pulselift.core.enums import PRType
from pulselift.db.base import Base


class PersonalRecord(Base):
    """
    One achieved PR. Rows are never updated; the current best for an
    (exercise, type) pair is the max value (or, for Volume, the latest row).
    `reps` holds the set's reps for TopSet and the rep target for 3RM/5RM/10RM.
    """

    __tablename__ = "personal_records"
    __table_args__ = (
        Index("ix_personal_records_exercise_achieved", "exercise_id", "achieved_at"),
        Index("ix_personal_records_exercise_type_value", "exercise_id", "type", "value"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    type: Mapped[PRType] = mapped_column(
        Enum(PRType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=10),
        nullable=False,
    )
    value: Mapped[float] = mapped_column(Float, nullable=False)
    reps: Mapped[int | None] = mapped_column(Integer, nullable=True)
    workout_id: Mapped[int | None] = mapped_column(ForeignKey("workouts.id", ondelete="SET NULL"), nullable=True)
    achieved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )
