"""Tests for generative re-ranking and response validation."""

import json

import pytest
from conftest import FakeRankingClient

from app.alternatives.reranker import (
    BASE_TOKEN_ESTIMATE,
    PER_CANDIDATE_TOKEN_ESTIMATE,
    AIReranker,
    Enhanced,
    build_prompt,
    extract_json_object,
)
from app.core.exceptions import UpstreamServiceError
from app.schemas.alternatives import AlternativeCandidate
from app.schemas.exercise import ExerciseData, ExerciseSummary

SOURCE = ExerciseData(
    id=1,
    name="Barbell Bench Press",
    movement_pattern="horizontal_push",
    muscle_groups=("chest", "triceps"),
    equipment=("barbell", "bench"),
    difficulty="intermediate",
    category="chest",
)
AVAILABLE = frozenset({"dumbbell", "bodyweight"})


def _alt(id, score, name=None, reason="rule reason"):
    return AlternativeCandidate(
        exercise=ExerciseSummary(id=id, name=name or f"Exercise {id}"),
        reason=reason,
        score=score,
    )


CANDIDATES = [_alt(2, 90), _alt(3, 80), _alt(4, 70)]


def _rankings(*items):
    return json.dumps({"rankings": [dict(id=i, score=s, reason=r) for i, s, r in items]})


# ======================================================================
# Prompt / parsing helpers
# ======================================================================


class TestBuildPrompt:

    def test_lists_every_candidate_with_its_id(self):
        prompt = build_prompt(SOURCE, CANDIDATES, AVAILABLE)
        for alt in CANDIDATES:
            assert f"[{alt.exercise.id}] {alt.exercise.name}" in prompt

    def test_includes_source_and_equipment(self):
        prompt = build_prompt(SOURCE, CANDIDATES, AVAILABLE)
        assert "Barbell Bench Press" in prompt
        assert "bodyweight, dumbbell" in prompt


class TestExtractJsonObject:

    def test_plain_json(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_json_wrapped_in_prose(self):
        assert extract_json_object('Sure! {"a": {"b": 2}} Hope this helps.') == {"a": {"b": 2}}

    def test_no_json(self):
        with pytest.raises(ValueError):
            extract_json_object("I cannot help with that")


# ======================================================================
# AIReranker
# ======================================================================


class TestAIReranker:

    def test_reorders_by_model_score(self):
        client = FakeRankingClient(_rankings(("2", 40, "meh"), ("3", 95, "great"), ("4", 60, "ok")))
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "gpt-4o-mini")
        assert isinstance(result, Enhanced)
        assert [a.exercise.id for a in result.alternatives] == [3, 4, 2]
        assert result.alternatives[0].reason == "great"
        assert result.model == "gpt-4o-mini"
        assert client.calls[0]["model"] == "gpt-4o-mini"

    def test_unknown_and_duplicate_ids_are_dropped(self):
        client = FakeRankingClient(_rankings(("999", 100, "bogus"), ("3", 99, "first"), ("3", 1, "dup")))
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        ids = [a.exercise.id for a in result.alternatives]
        assert 999 not in ids
        assert ids[0] == 3
        assert result.alternatives[0].reason == "first"

    def test_omitted_candidates_keep_rule_score(self):
        client = FakeRankingClient(_rankings(("4", 99, "best")))
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        by_id = {a.exercise.id: a for a in result.alternatives}
        assert by_id[2].score == 90
        assert by_id[2].reason == "rule reason"
        assert len(result.alternatives) == 3

    def test_scores_are_clamped(self):
        client = FakeRankingClient(_rankings(("2", 250, "high"), ("3", -10, "low")))
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        by_id = {a.exercise.id: a.score for a in result.alternatives}
        assert by_id[2] == 100
        assert by_id[3] == 0

    def test_reasons_are_truncated(self):
        client = FakeRankingClient(_rankings(("2", 50, "x" * 500)))
        result = AIReranker(client, max_reason_length=100).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        by_id = {a.exercise.id: a for a in result.alternatives}
        assert len(by_id[2].reason) == 100

    def test_integer_ids_are_accepted(self):
        client = FakeRankingClient(json.dumps({"rankings": [{"id": 3, "score": 99, "reason": "int id"}]}))
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        assert result.alternatives[0].exercise.id == 3

    def test_provider_token_count_is_used(self):
        client = FakeRankingClient(_rankings(("2", 50, "ok")), total_tokens=321)
        assert AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m").tokens_used == 321

    def test_token_count_estimated_when_missing(self):
        client = FakeRankingClient(_rankings(("2", 50, "ok")), total_tokens=None)
        result = AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        assert result.tokens_used == BASE_TOKEN_ESTIMATE + PER_CANDIDATE_TOKEN_ESTIMATE * 3

    @pytest.mark.parametrize("content", [
        "not json at all",
        '{"something": "else"}',
        '{"rankings": "nope"}',
        '{"rankings": []}',
        '{"rankings": [{"id": "999", "score": 50, "reason": "unknown"}]}',
        '{"rankings": [{"id": "2", "score": "high", "reason": "bad score"}]}',
    ])
    def test_unusable_responses_raise(self, content):
        with pytest.raises(UpstreamServiceError):
            AIReranker(FakeRankingClient(content)).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")

    def test_client_errors_propagate(self):
        client = FakeRankingClient(error=UpstreamServiceError("timeout"))
        with pytest.raises(UpstreamServiceError):
            AIReranker(client).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")

    @pytest.mark.parametrize("score", ["NaN", "Infinity", "-Infinity", "1e999"])
    def test_non_finite_scores_are_rejected(self, score):
        content = '{"rankings": [{"id": "2", "score": %s, "reason": "x"}]}' % score
        with pytest.raises(UpstreamServiceError):
            AIReranker(FakeRankingClient(content)).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")

    def test_non_finite_score_skips_only_that_item(self):
        content = (
            '{"rankings": [{"id": "2", "score": NaN, "reason": "x"},'
            ' {"id": "4", "score": 99, "reason": "best"}]}'
        )
        result = AIReranker(FakeRankingClient(content)).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        by_id = {a.exercise.id: a for a in result.alternatives}
        assert result.alternatives[0].exercise.id == 4
        assert by_id[2].score == 90
        assert by_id[2].reason == "rule reason"

    def test_huge_integer_score_is_clamped(self):
        content = '{"rankings": [{"id": "2", "score": %d, "reason": "big"}]}' % 10 ** 400
        result = AIReranker(FakeRankingClient(content)).rerank(SOURCE, CANDIDATES, AVAILABLE, "m")
        assert result.alternatives[0].score == 100
