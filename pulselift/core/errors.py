"""Domain exceptions raised by repositories and services.

HTTP endpoints translate these to status codes; the core calculators never raise.
"""


class PulseLiftError(Exception):
    """Base class for domain errors."""


class NotFoundError(PulseLiftError, LookupError):
    """A referenced workout, exercise, set or PR does not exist."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class WorkoutStateError(PulseLiftError):
    """Operation not allowed in the workout's current status (e.g. finishing twice)."""
