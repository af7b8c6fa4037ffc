"""
Generative re-ranking.

Sends the source exercise and the rule-ranked candidates to a chat model
and asks for a similarity score and a short reason per candidate.  The
response is validated strictly: unknown or repeated ids are dropped and
candidates the model skipped keep their rule-based score and reason.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from app.alternatives.llm_client import RankingClient
from app.alternatives.scoring import sort_alternatives
from app.core.exceptions import UpstreamServiceError
from app.schemas.alternatives import AlternativeCandidate
from app.schemas.exercise import ExerciseData

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an expert exercise physiologist. Respond only with valid JSON."

RANKING_PROMPT = """You are an expert exercise physiologist. Given a source exercise and a list of candidate alternatives, rank them by how similar and effective they are as substitutes.

Source exercise:
- Name: {source_name}
- Category: {source_category}
- Muscle groups: {source_muscles}
- Equipment: {source_equipment}
- Movement pattern: {source_movement_pattern}
- Difficulty: {source_difficulty}

Equipment available in the gym: {available_equipment}

Candidate alternatives:
{candidates_list}

For each candidate, provide:
1. A similarity score (0-100) considering muscle activation, movement pattern and practical substitutability
2. A short reason (at most 15 words) explaining why it is a good alternative

Respond ONLY with valid JSON in exactly this format:
{{
  "rankings": [
    {{"id": "12", "score": 85, "reason": "Same pushing pattern, works the same muscles"}}
  ]
}}

Rules:
- Prefer exercises that use the available equipment
- Treat bodyweight exercises as very versatile
- Higher score = better substitute
- Focus on functional similarity, not only muscle overlap"""

# Used when the provider does not report usage.
BASE_TOKEN_ESTIMATE = 150
PER_CANDIDATE_TOKEN_ESTIMATE = 10


@dataclass(frozen=True)
class Enhanced:
    """Ranking refined by the chat model."""

    alternatives: list[AlternativeCandidate]
    tokens_used: int
    model: str


def _join(values: Iterable[str], empty: str = "N/A") -> str:
    values = list(values)
    return ", ".join(values) if values else empty


def build_prompt(
    source: ExerciseData,
    candidates: list[AlternativeCandidate],
    available: frozenset[str],
) -> str:
    lines = []
    for i, alt in enumerate(candidates, start=1):
        ex = alt.exercise
        lines.append(
            f"{i}. [{ex.id}] {ex.name}\n"
            f"   Muscles: {_join(ex.muscle_groups)}\n"
            f"   Equipment: {_join(ex.equipment, 'none')}\n"
            f"   Pattern: {ex.movement_pattern or 'N/A'}\n"
            f"   Difficulty: {ex.difficulty or 'N/A'}"
        )
    return RANKING_PROMPT.format(
        source_name=source.name,
        source_category=source.category or "N/A",
        source_muscles=_join(source.muscle_groups),
        source_equipment=_join(source.equipment, "none"),
        source_movement_pattern=source.movement_pattern or "N/A",
        source_difficulty=source.difficulty or "N/A",
        available_equipment=_join(sorted(available), "none"),
        candidates_list="\n\n".join(lines),
    )


def extract_json_object(content: str) -> dict[str, Any]:
    """Decode the first JSON object embedded in ``content``."""
    start = content.find("{")
    if start < 0:
        raise ValueError(f"No JSON object in model response: {content[:100]!r}")
    obj, _ = json.JSONDecoder().raw_decode(content, start)
    if not isinstance(obj, dict):
        raise ValueError("Model response is not a JSON object")
    return obj


def _valid_score(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return max(0, min(100, int(round(value))))


class AIReranker:
    """Re-rank rule-scored candidates with a chat model."""

    def __init__(self, client: RankingClient, max_reason_length: int = 100):
        self.client = client
        self.max_reason_length = max_reason_length

    def parse_rankings(
        self,
        content: str,
        candidates: list[AlternativeCandidate],
    ) -> list[AlternativeCandidate]:
        """
        Merge model rankings into ``candidates``.

        Raises:
            UpstreamServiceError: if the response is not parseable or
                contains no usable ranking
        """
        try:
            parsed = extract_json_object(content)
        except ValueError as exc:
            raise UpstreamServiceError(f"Unparseable ranking response: {exc}") from exc

        rankings = parsed.get("rankings")
        if not isinstance(rankings, list):
            raise UpstreamServiceError("Ranking response has no 'rankings' list")

        by_id = {str(alt.exercise.id): alt for alt in candidates}
        updates: dict[str, AlternativeCandidate] = {}
        for item in rankings:
            if not isinstance(item, dict):
                continue
            key = str(item.get("id"))
            score = _valid_score(item.get("score"))
            reason = item.get("reason")
            if key not in by_id or key in updates or score is None or not isinstance(reason, str):
                continue
            reason = reason.strip()[: self.max_reason_length] or by_id[key].reason
            updates[key] = by_id[key].model_copy(update={"score": score, "reason": reason})

        if not updates:
            raise UpstreamServiceError("Ranking response contained no valid rankings")

        merged = [updates.get(str(alt.exercise.id), alt) for alt in candidates]
        return sort_alternatives(merged)

    def rerank(
        self,
        source: ExerciseData,
        candidates: list[AlternativeCandidate],
        available: frozenset[str],
        model: str,
    ) -> Enhanced:
        """
        Make one model call and merge its rankings into ``candidates``.

        Raises:
            UpstreamServiceError: on any client or validation failure
        """
        prompt = build_prompt(source, candidates, available)
        completion = self.client.complete(SYSTEM_PROMPT, prompt, model=model)
        alternatives = self.parse_rankings(completion.content, candidates)

        tokens = completion.total_tokens
        if tokens is None:
            tokens = BASE_TOKEN_ESTIMATE + PER_CANDIDATE_TOKEN_ESTIMATE * len(candidates)
        logger.info("Re-ranked %d candidates with %s (%d tokens)", len(candidates), model, tokens)
        return Enhanced(alternatives=alternatives, tokens_used=tokens, model=model)
