"""Exercise model - catalog entry; the progress engine only reads its name."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulselift.db.base import Base


class Exercise(Base):
    """Exercise definition with muscle/equipment metadata and usage bookkeeping."""

    __tablename__ = "exercises"
    __table_args__ = (
        Index("ix_exercises_last_used_at", "last_used_at"),
        Index("ix_exercises_favorite_name", "is_favorite", "name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    primary_muscle: Mapped[str] = mapped_column(String(100), nullable=False)
    secondary_muscles: Mapped[str | None] = mapped_column(String(255), nullable=True)  # comma-separated
    equipment: Mapped[str] = mapped_column(String(100), nullable=False)
    movement_pattern: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_bodyweight: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    form_tips: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    workout_entries: Mapped[list["WorkoutExercise"]] = relationship(
        "WorkoutExercise", back_populates="exercise"
    )
