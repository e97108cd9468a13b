from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import pytest

from pulselift.core.enums import PRType
from pulselift.schemas.personal_record import (
    OneRepMaxPR,
    RepTargetPR,
    TopSetPR,
    VolumePR,
    pr_from_row,
)
from pulselift.services.pr_engine import PREngine, best_set_for_reps

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


@dataclass
class FakeSet:
    reps: int
    weight: float
    is_completed: bool = True
    is_warmup: bool = False
    set_number: int = 1


@dataclass
class FakeEntry:
    exercise_id: int
    sets: list = field(default_factory=list)


class InMemoryPRStore:
    """Keeps PR rows in a list; achieved_at increases with every save."""

    def __init__(self, fail_on: PRType | None = None):
        self.rows = []
        self.fail_on = fail_on

    def seed(self, exercise_id, pr_type, value, achieved_at, reps=None):
        self.rows.append(
            pr_from_row(
                {
                    "id": len(self.rows) + 1,
                    "exercise_id": exercise_id,
                    "workout_id": None,
                    "type": pr_type,
                    "value": value,
                    "reps": reps,
                    "achieved_at": achieved_at,
                }
            )
        )

    def _matching(self, exercise_id, pr_type):
        return [r for r in self.rows if r.exercise_id == exercise_id and r.type == pr_type]

    async def get_best_pr(self, exercise_id, pr_type):
        rows = self._matching(exercise_id, pr_type)
        return max(rows, key=lambda r: r.value) if rows else None

    async def get_most_recent_pr(self, exercise_id, pr_type):
        rows = self._matching(exercise_id, pr_type)
        return max(rows, key=lambda r: r.achieved_at) if rows else None

    async def save_pr(self, workout_id, exercise_id, pr_type, value, reps=None):
        if pr_type == self.fail_on:
            raise RuntimeError("store unavailable")
        row = pr_from_row(
            {
                "id": len(self.rows) + 1,
                "exercise_id": exercise_id,
                "workout_id": workout_id,
                "type": pr_type,
                "value": value,
                "reps": reps,
                "achieved_at": BASE_TIME + timedelta(days=30, seconds=len(self.rows)),
            }
        )
        self.rows.append(row)
        return row


@pytest.fixture
def store():
    return InMemoryPRStore()


async def test_first_workout_sets_every_applicable_pr(store):
    engine = PREngine(store)
    prs = await engine.evaluate_workout(1, [FakeEntry(7, [FakeSet(reps=5, weight=100)])])

    assert [p.type for p in prs] == [
        PRType.ONE_RM,
        PRType.TOP_SET,
        PRType.VOLUME,
        PRType.THREE_RM,
        PRType.FIVE_RM,
    ]
    one_rm, top, volume, three, five = prs
    assert one_rm.value == pytest.approx(116.6667, rel=1e-4)
    assert isinstance(top, TopSetPR)
    assert (top.value, top.reps) == (100, 5)
    assert volume.value == 500
    assert isinstance(three, RepTargetPR) and three.target == 3
    assert five.target == 5
    assert three.value == pytest.approx(116.6667, rel=1e-4)
    assert all(p.workout_id == 1 and p.exercise_id == 7 for p in prs)


async def test_warmups_and_unfinished_sets_are_ignored(store):
    sets = [
        FakeSet(reps=5, weight=200, is_warmup=True, set_number=1),
        FakeSet(reps=5, weight=180, is_completed=False, set_number=2),
    ]
    assert await PREngine(store).evaluate_exercise(1, 7, sets) == []
    assert store.rows == []


async def test_repeating_the_same_workout_sets_nothing_new(store):
    engine = PREngine(store)
    entries = [FakeEntry(7, [FakeSet(reps=5, weight=100)])]
    await engine.evaluate_workout(1, entries)
    assert await engine.evaluate_workout(2, entries) == []


async def test_volume_compares_against_most_recent_record(store):
    store.seed(7, PRType.VOLUME, 2000, BASE_TIME)
    store.seed(7, PRType.VOLUME, 800, BASE_TIME + timedelta(days=7))
    # Keep the other categories out of the way
    store.seed(7, PRType.ONE_RM, 1000, BASE_TIME)
    store.seed(7, PRType.TOP_SET, 1000, BASE_TIME, reps=1)
    store.seed(7, PRType.THREE_RM, 1000, BASE_TIME, reps=3)
    store.seed(7, PRType.FIVE_RM, 1000, BASE_TIME, reps=5)
    store.seed(7, PRType.TEN_RM, 1000, BASE_TIME, reps=10)

    prs = await PREngine(store).evaluate_exercise(3, 7, [FakeSet(reps=10, weight=100)])

    assert len(prs) == 1
    assert isinstance(prs[0], VolumePR)
    assert prs[0].value == 1000


async def test_ten_rep_target_accepts_eight_reps(store):
    prs = await PREngine(store).evaluate_exercise(1, 7, [FakeSet(reps=8, weight=80)])
    types = [p.type for p in prs]
    assert PRType.TEN_RM in types
    assert PRType.FIVE_RM not in types
    ten = next(p for p in prs if p.type == PRType.TEN_RM)
    assert ten.target == 10
    assert ten.value == pytest.approx(80 * (1 + 8 / 30))


async def test_top_set_tie_uses_set_order_not_input_order(store):
    sets = [
        FakeSet(reps=3, weight=100, set_number=2),
        FakeSet(reps=6, weight=100, set_number=1),
    ]
    prs = await PREngine(store).evaluate_exercise(1, 7, sets)
    top = next(p for p in prs if p.type == PRType.TOP_SET)
    assert top.reps == 6


async def test_store_failure_propagates_and_keeps_earlier_saves():
    store = InMemoryPRStore(fail_on=PRType.VOLUME)
    with pytest.raises(RuntimeError, match="store unavailable"):
        await PREngine(store).evaluate_exercise(1, 7, [FakeSet(reps=5, weight=100)])
    assert [r.type for r in store.rows] == [PRType.ONE_RM, PRType.TOP_SET]


async def test_zero_weight_sets_only_produce_rep_targets(store):
    prs = await PREngine(store).evaluate_exercise(1, 7, [FakeSet(reps=10, weight=0)])
    # Top set and rep targets still fire on a first-ever record; 1RM and volume need a positive value
    assert [p.type for p in prs] == [PRType.TOP_SET, PRType.TEN_RM]


def test_best_set_for_reps_window_includes_both_edges():
    sets = [FakeSet(reps=1, weight=150), FakeSet(reps=4, weight=110), FakeSet(reps=5, weight=110)]
    # 1 to 5 reps all count for the 3-rep target; the single is heaviest
    assert best_set_for_reps(sets, 3) is sets[0]
    assert best_set_for_reps(sets, 10) is None


def test_best_set_for_reps_ties_keep_first_in_range():
    sets = [FakeSet(reps=0, weight=200), FakeSet(reps=4, weight=110), FakeSet(reps=5, weight=110)]
    assert best_set_for_reps(sets, 3) is sets[1]


def test_six_reps_fall_outside_three_but_inside_five():
    six = FakeSet(reps=6, weight=120)
    assert best_set_for_reps([six], 3) is None
    assert best_set_for_reps([six], 5) is six


def test_pr_from_row_variants():
    common = {"id": 1, "exercise_id": 2, "workout_id": 3, "value": 50.0, "achieved_at": BASE_TIME}
    assert isinstance(pr_from_row({**common, "type": "1RM", "reps": None}), OneRepMaxPR)
    assert isinstance(pr_from_row({**common, "type": "Volume", "reps": None}), VolumePR)
    rep = pr_from_row({**common, "type": "5RM", "reps": 5})
    assert isinstance(rep, RepTargetPR) and rep.target == 5


def test_pr_from_row_naive_datetime_is_utc():
    pr = pr_from_row(
        {
            "id": 1,
            "exercise_id": 2,
            "workout_id": None,
            "value": 1.0,
            "reps": None,
            "type": PRType.ONE_RM,
            "achieved_at": datetime(2025, 1, 1, 8, 0),
        }
    )
    assert pr.achieved_at.tzinfo is not None
    assert pr.achieved_at.hour == 8
