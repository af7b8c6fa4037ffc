"""Tests for the built-in exercise catalog and database seeding."""

from sqlmodel import Session, select

from app.alternatives.exercise_catalog import BUILTIN_EXERCISES, get_builtin_exercise
from app.db.init_db import seed_catalog
from app.models.exercise import Exercise
from app.schemas.equipment import DEFAULT_EQUIPMENT
from app.schemas.exercise import DifficultyTier, MovementPattern


class TestCatalogContents:
    """Verify the built-in exercise catalog is well-formed."""

    def test_catalog_not_empty(self):
        assert len(BUILTIN_EXERCISES) >= 30, (
            f"Expected at least 30 exercises, got {len(BUILTIN_EXERCISES)}"
        )

    def test_all_entries_have_valid_enum_tags(self):
        for entry in BUILTIN_EXERCISES:
            assert isinstance(entry.movement_pattern, MovementPattern), f"{entry.name}: invalid pattern"
            assert isinstance(entry.difficulty, DifficultyTier), f"{entry.name}: invalid difficulty"

    def test_no_duplicate_names(self):
        names = [e.name.lower() for e in BUILTIN_EXERCISES]
        assert len(names) == len(set(names))

    def test_equipment_tags_are_known(self):
        known = set(DEFAULT_EQUIPMENT)
        for entry in BUILTIN_EXERCISES:
            unknown = set(entry.equipment) - known
            assert not unknown, f"{entry.name}: unknown equipment {unknown}"

    def test_every_entry_has_muscles(self):
        for entry in BUILTIN_EXERCISES:
            assert entry.muscle_groups, f"{entry.name}: no muscle groups"

    def test_every_pattern_is_covered(self):
        used = {e.movement_pattern for e in BUILTIN_EXERCISES}
        assert used == set(MovementPattern)


class TestLookup:

    def test_by_name_case_insensitive(self):
        assert get_builtin_exercise("barbell bench press").name == "Barbell Bench Press"

    def test_by_alias(self):
        assert get_builtin_exercise("Press-Up").name == "Push-Up"

    def test_unknown(self):
        assert get_builtin_exercise("Underwater Basket Weaving") is None


class TestSeedCatalog:

    def test_seeds_global_rows_in_catalog_order(self, engine):
        assert seed_catalog(engine) == len(BUILTIN_EXERCISES)
        with Session(engine) as session:
            rows = session.exec(select(Exercise).order_by(Exercise.id)).all()
        assert [r.name for r in rows] == [e.name for e in BUILTIN_EXERCISES]
        assert all(r.organization_id is None for r in rows)

    def test_seeding_twice_is_a_noop(self, engine):
        seed_catalog(engine)
        assert seed_catalog(engine) == 0
