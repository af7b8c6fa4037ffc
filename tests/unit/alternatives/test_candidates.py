"""Tests for candidate filtering.

Pure unit tests: the pool is a list of ``ExerciseData`` built in memory.
"""

from app.alternatives.candidates import find_candidates, is_performable
from app.schemas.exercise import DifficultyTier, ExerciseData


# ======================================================================
# Helpers
# ======================================================================


def _ex(id, name, pattern=None, muscles=(), equipment=(), difficulty="beginner", category="chest"):
    return ExerciseData(
        id=id,
        name=name,
        movement_pattern=pattern,
        muscle_groups=muscles,
        equipment=equipment,
        difficulty=difficulty,
        category=category,
    )


BENCH = _ex(1, "Barbell Bench Press", "horizontal_push", ("chest", "triceps"), ("barbell", "bench"), "intermediate")
DB_BENCH = _ex(2, "Dumbbell Bench Press", "horizontal_push", ("chest", "triceps"), ("dumbbell",))
PUSH_UP = _ex(3, "Push-Up", "horizontal_push", ("chest", "triceps", "core"), ("bodyweight",))
MACHINE = _ex(4, "Machine Chest Press", "horizontal_push", ("chest",), ("machine",))
DIPS = _ex(5, "Dips", "vertical_push", ("chest", "triceps"), ("bodyweight",), "advanced")
SQUAT = _ex(6, "Bodyweight Squat", "squat", ("quadriceps",), ("bodyweight",), category="legs")

AVAILABLE = frozenset({"dumbbell", "bodyweight"})


# ======================================================================
# Equipment gate
# ======================================================================


class TestIsPerformable:

    def test_no_equipment_always_performable(self):
        assert is_performable(_ex(9, "Plank"), frozenset())

    def test_bodyweight_only_always_performable(self):
        assert is_performable(PUSH_UP, frozenset())

    def test_all_required_tags_must_be_available(self):
        assert not is_performable(BENCH, frozenset({"barbell"}))
        assert is_performable(BENCH, frozenset({"barbell", "bench"}))

    def test_bodyweight_tag_is_ignored_in_mixed_requirements(self):
        ex = _ex(9, "Weighted Push-Up", equipment=("bodyweight", "dumbbell"))
        assert is_performable(ex, frozenset({"dumbbell"}))


# ======================================================================
# find_candidates
# ======================================================================


class TestFindCandidates:

    def test_excludes_source(self):
        result = find_candidates(BENCH, [BENCH, DB_BENCH], AVAILABLE)
        assert [c.id for c in result] == [2]

    def test_excludes_unavailable_equipment(self):
        result = find_candidates(BENCH, [DB_BENCH, PUSH_UP, MACHINE], AVAILABLE)
        assert MACHINE not in result
        assert {c.id for c in result} == {2, 3}

    def test_excludes_implausible_candidates(self):
        result = find_candidates(BENCH, [SQUAT, PUSH_UP], AVAILABLE)
        assert [c.id for c in result] == [3]

    def test_pattern_matches_come_before_muscle_matches(self):
        # Dips only shares muscles, so it ranks after both pattern matches
        result = find_candidates(BENCH, [DIPS, PUSH_UP, DB_BENCH], AVAILABLE)
        assert [c.id for c in result] == [3, 2, 5]

    def test_pool_order_within_tier(self):
        result = find_candidates(BENCH, [PUSH_UP, DB_BENCH], AVAILABLE)
        assert [c.id for c in result] == [3, 2]

    def test_category_match_only_without_patterns(self):
        source = _ex(10, "Mystery Move", category="chest")
        same_cat = _ex(11, "Other Move", category="chest")
        patterned = _ex(12, "Patterned", "horizontal_push", category="chest")
        result = find_candidates(source, [same_cat, patterned], AVAILABLE)
        assert [c.id for c in result] == [11]

    def test_difficulty_filter_is_exact(self):
        result = find_candidates(BENCH, [DB_BENCH, DIPS], AVAILABLE, DifficultyTier.ADVANCED)
        assert [c.id for c in result] == [5]

    def test_limit_truncates(self):
        pool = [_ex(100 + i, f"Press {i}", "horizontal_push", ("chest",)) for i in range(10)]
        result = find_candidates(BENCH, pool, AVAILABLE, limit=4)
        assert [c.id for c in result] == [100, 101, 102, 103]

    def test_empty_pool(self):
        assert find_candidates(BENCH, [], AVAILABLE) == []
