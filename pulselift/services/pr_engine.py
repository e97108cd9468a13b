"""PR detection: decide which personal records a finished workout broke and save them.

Per exercise, over completed working sets only (warmups and unfinished sets are
ignored), five independent checks run against the stored history:

- 1RM: best Epley estimate vs the highest 1RM ever.
- TopSet: heaviest set weight vs the highest TopSet ever.
- Volume: working-set volume vs the *most recent* Volume PR, not the highest.
  A session can therefore re-trigger a Volume PR below an older peak.
- 3RM / 5RM / 10RM: heaviest set within ±2 reps of the target, scored by its
  estimated 1RM, vs the highest record for that target. The record stores the
  target, not the set's actual reps.

Each detected PR is written as its own row. Store errors propagate; rows already
saved by an earlier check are not rolled back here (the caller's transaction
decides). Evaluations of the same workout must not overlap.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pulselift.core.constants import REP_TARGET_TOLERANCE, REP_TARGETS
from pulselift.core.enums import PRType
from pulselift.schemas.personal_record import PersonalRecordBase
from pulselift.services.metrics import (
    S,
    best_estimated_one_rep_max,
    estimated_one_rep_max,
    is_new_pr,
    sort_by_set_number,
    top_set,
    total_volume,
    working_sets,
)
from pulselift.services.stores import PRStore, WorkoutExerciseLike

logger = logging.getLogger(__name__)


def best_set_for_reps(sets: Iterable[S], target_reps: int, tolerance: int = REP_TARGET_TOLERANCE) -> S | None:
    """Heaviest set whose reps are within `tolerance` of the target; first wins on ties."""
    best: S | None = None
    for s in sets:
        if not (target_reps - tolerance <= s.reps <= target_reps + tolerance):
            continue
        if best is None or s.weight > best.weight:
            best = s
    return best


class PREngine:
    """Evaluates finished workouts against a PR store."""

    def __init__(self, store: PRStore, rep_targets: Sequence[int] = REP_TARGETS):
        self.store = store
        self.rep_targets = tuple(rep_targets)

    async def evaluate_workout(
        self,
        workout_id: int,
        workout_exercises: Iterable[WorkoutExerciseLike],
    ) -> list[PersonalRecordBase]:
        """Detect and save new PRs for every exercise in the workout; return them in detection order."""
        new_prs: list[PersonalRecordBase] = []
        for entry in workout_exercises:
            new_prs.extend(await self.evaluate_exercise(workout_id, entry.exercise_id, entry.sets))
        return new_prs

    async def evaluate_exercise(self, workout_id: int, exercise_id: int, sets) -> list[PersonalRecordBase]:
        sets = working_sets(sort_by_set_number(list(sets)))
        if not sets:
            return []

        new_prs: list[PersonalRecordBase] = []

        best_1rm = best_estimated_one_rep_max(sets)
        if best_1rm > 0:
            previous = await self.store.get_best_pr(exercise_id, PRType.ONE_RM)
            if is_new_pr(best_1rm, previous.value if previous else None):
                new_prs.append(await self._save(workout_id, exercise_id, PRType.ONE_RM, best_1rm))

        heaviest = top_set(sets)
        if heaviest is not None:
            previous = await self.store.get_best_pr(exercise_id, PRType.TOP_SET)
            if is_new_pr(float(heaviest.weight), previous.value if previous else None):
                new_prs.append(
                    await self._save(workout_id, exercise_id, PRType.TOP_SET, float(heaviest.weight), heaviest.reps)
                )

        volume = total_volume(sets)
        if volume > 0:
            previous = await self.store.get_most_recent_pr(exercise_id, PRType.VOLUME)
            if is_new_pr(volume, previous.value if previous else None):
                new_prs.append(await self._save(workout_id, exercise_id, PRType.VOLUME, volume))

        for target in self.rep_targets:
            candidate = best_set_for_reps(sets, target)
            if candidate is None:
                continue
            pr_type = PRType.for_rep_target(target)
            estimate = estimated_one_rep_max(float(candidate.weight), candidate.reps)
            previous = await self.store.get_best_pr(exercise_id, pr_type)
            if is_new_pr(estimate, previous.value if previous else None):
                new_prs.append(await self._save(workout_id, exercise_id, pr_type, estimate, target))

        return new_prs

    async def _save(
        self,
        workout_id: int,
        exercise_id: int,
        pr_type: PRType,
        value: float,
        reps: int | None = None,
    ) -> PersonalRecordBase:
        pr = await self.store.save_pr(workout_id, exercise_id, pr_type, value, reps)
        logger.info("New PR saved: %s for exercise %s = %.2f", pr_type.value, exercise_id, value)
        return pr
