"""Tests for the alternatives result cache."""

import datetime

from app.alternatives.cache import ResultCache, equipment_fingerprint, make_cache_key
from app.models.alternatives_cache import AlternativesCacheEntry
from app.schemas.alternatives import AlternativeCandidate, CacheEntry, RankingMode
from app.schemas.exercise import ExerciseSummary

NOW = datetime.datetime(2026, 10, 18, 12, 0, 0)
TTL = 7 * 24 * 3600


def _entry(score=80, ranking=RankingMode.RULE_BASED):
    return CacheEntry(
        alternatives=[
            AlternativeCandidate(
                exercise=ExerciseSummary(id=2, name="Dumbbell Bench Press", muscle_groups=["chest"]),
                reason="same horizontal push pattern",
                score=score,
            )
        ],
        ranking=ranking,
        created_at=NOW,
    )


# ======================================================================
# Keys
# ======================================================================


class TestEquipmentFingerprint:

    def test_order_case_and_duplicates_do_not_matter(self):
        assert equipment_fingerprint(["Dumbbell", "bodyweight", "dumbbell "]) == equipment_fingerprint(
            ["bodyweight", "dumbbell"]
        )

    def test_different_sets_differ(self):
        assert equipment_fingerprint(["dumbbell"]) != equipment_fingerprint(["dumbbell", "barbell"])

    def test_length(self):
        assert len(equipment_fingerprint(["dumbbell"])) == 16


class TestMakeCacheKey:

    def test_deterministic(self):
        fp = equipment_fingerprint(["dumbbell"])
        assert make_cache_key("org", 1, fp, None, 5) == make_cache_key("org", 1, fp, None, 5)

    def test_every_input_changes_the_key(self):
        fp = equipment_fingerprint(["dumbbell"])
        base = make_cache_key("org", 1, fp, None, 5)
        assert make_cache_key("other", 1, fp, None, 5) != base
        assert make_cache_key("org", 2, fp, None, 5) != base
        assert make_cache_key("org", 1, equipment_fingerprint(["cable"]), None, 5) != base
        assert make_cache_key("org", 1, fp, "beginner", 5) != base
        assert make_cache_key("org", 1, fp, None, 6) != base

    def test_is_sha256_hex(self):
        key = make_cache_key("org", 1, "abc", None, 5)
        assert len(key) == 64
        int(key, 16)


# ======================================================================
# ResultCache
# ======================================================================


class TestResultCache:

    def test_miss(self, session):
        assert ResultCache(session, clock=lambda: NOW).lookup("nope") is None

    def test_store_then_lookup(self, session):
        cache = ResultCache(session, clock=lambda: NOW)
        cache.store("k", "org", 1, _entry(), TTL)
        hit = cache.lookup("k")
        assert hit is not None
        assert hit.alternatives[0].exercise.name == "Dumbbell Bench Press"
        assert hit.ranking == RankingMode.RULE_BASED

    def test_hit_updates_counters(self, session):
        cache = ResultCache(session, clock=lambda: NOW)
        cache.store("k", "org", 1, _entry(), TTL)
        cache.lookup("k")
        cache.lookup("k")
        row = session.get(AlternativesCacheEntry, "k")
        session.refresh(row)
        assert row.hit_count == 2
        assert row.last_hit_at == NOW

    def test_expired_entry_is_a_miss(self, session):
        ResultCache(session, clock=lambda: NOW).store("k", "org", 1, _entry(), 60)
        later = ResultCache(session, clock=lambda: NOW + datetime.timedelta(seconds=61))
        assert later.lookup("k") is None

    def test_store_is_last_write_wins(self, session):
        cache = ResultCache(session, clock=lambda: NOW)
        cache.store("k", "org", 1, _entry(score=50), TTL)
        cache.store("k", "org", 1, _entry(score=70, ranking=RankingMode.ENHANCED), TTL)
        hit = cache.lookup("k")
        assert hit.alternatives[0].score == 70
        assert hit.ranking == RankingMode.ENHANCED

    def test_purge_expired(self, session):
        ResultCache(session, clock=lambda: NOW).store("old", "org", 1, _entry(), 60)
        ResultCache(session, clock=lambda: NOW).store("fresh", "org", 2, _entry(), TTL)
        later = ResultCache(session, clock=lambda: NOW + datetime.timedelta(hours=1))
        assert later.purge_expired() == 1
        assert session.get(AlternativesCacheEntry, "old") is None
        assert later.lookup("fresh") is not None
