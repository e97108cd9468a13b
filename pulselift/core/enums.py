"""Shared enums for models and API."""

from enum import Enum


class WorkoutStatus(str, Enum):
    """Workout lifecycle. The only transition is in_progress -> completed."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PRType(str, Enum):
    """Category of personal record."""

    ONE_RM = "1RM"  # Best estimated one-rep max
    THREE_RM = "3RM"  # Estimated 1RM from a set near 3 reps
    FIVE_RM = "5RM"
    TEN_RM = "10RM"
    TOP_SET = "TopSet"  # Heaviest completed working set
    VOLUME = "Volume"  # Working-set volume (weight × reps) in one session

    @classmethod
    def for_rep_target(cls, target: int) -> "PRType":
        return cls(f"{target}RM")


class WeightUnit(str, Enum):
    KG = "kg"
    LB = "lb"


class LoadState(str, Enum):
    """Progress aggregation lifecycle: idle -> loading -> ready | errored."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERRORED = "errored"
