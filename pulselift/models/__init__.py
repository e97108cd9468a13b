"""ORM models - import all so Base.metadata is complete for migrations."""

from pulselift.models.exercise import Exercise
from pulselift.models.personal_record import PersonalRecord
from pulselift.models.workout import Workout, WorkoutExercise, WorkoutSet

__all__ = [
    "Exercise",
    "PersonalRecord",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
]
