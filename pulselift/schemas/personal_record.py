"""Personal record schemas: one variant per PR category, tagged by `type`.

A TopSet record always carries reps and a rep-target record always carries its
target, while 1RM and Volume records carry neither, so impossible combinations
(a Volume PR with reps, a 5RM without a target) cannot be built.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from pulselift.core.clock import as_utc
from pulselift.core.enums import PRType


class PersonalRecordBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    exercise_id: int
    workout_id: int | None = None
    value: float
    achieved_at: datetime
    exercise_name: str | None = None  # filled in by the progress dashboard


class OneRepMaxPR(PersonalRecordBase):
    type: Literal[PRType.ONE_RM] = PRType.ONE_RM


class TopSetPR(PersonalRecordBase):
    """value is the set's weight; reps is the set's rep count."""

    type: Literal[PRType.TOP_SET] = PRType.TOP_SET
    reps: int


class VolumePR(PersonalRecordBase):
    type: Literal[PRType.VOLUME] = PRType.VOLUME


class RepTargetPR(PersonalRecordBase):
    """value is the estimated 1RM of the best set near `target` reps."""

    type: Literal[PRType.THREE_RM, PRType.FIVE_RM, PRType.TEN_RM]
    target: int = Field(validation_alias=AliasChoices("target", "reps"))


# Field/response type for any PR. Each variant pins its own `type` literal, so
# both model instances and dicts resolve to exactly one member.
PersonalRecordRead = Union[OneRepMaxPR, TopSetPR, VolumePR, RepTargetPR]

_adapter = TypeAdapter(Annotated[PersonalRecordRead, Field(discriminator="type")])

_ROW_FIELDS = ("id", "exercise_id", "workout_id", "value", "reps", "achieved_at")


def pr_from_row(row: Any) -> PersonalRecordBase:
    """Build the variant matching a stored PR row (ORM object or mapping)."""
    data = dict(row) if isinstance(row, Mapping) else {f: getattr(row, f, None) for f in (*_ROW_FIELDS, "type")}
    data["type"] = PRType(data["type"])
    if isinstance(data.get("achieved_at"), datetime):
        data["achieved_at"] = as_utc(data["achieved_at"])
    return _adapter.validate_python(data)
