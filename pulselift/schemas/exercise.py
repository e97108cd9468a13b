"""Exercise schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExerciseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    primary_muscle: str = Field(..., min_length=1, max_length=100)
    secondary_muscles: str | None = None
    equipment: str = Field(..., min_length=1, max_length=100)
    movement_pattern: str | None = None
    is_bodyweight: bool = False
    difficulty: str | None = None
    form_tips: str | None = None
    is_favorite: bool = False


class ExerciseCreate(ExerciseBase):
    pass


class ExerciseRead(ExerciseBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    last_used_at: datetime | None = None


class ExerciseRef(BaseModel):
    """Minimal exercise info for embedding in workout responses (id + name only)."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)
