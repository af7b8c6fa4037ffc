"""
Chat-completion client used for re-ranking.

The pipeline depends on the small :class:`RankingClient` protocol so tests
can substitute a fake.  :class:`OpenAIRankingClient` is the production
implementation; it is created once per process in the application
lifespan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from openai import OpenAI, OpenAIError

from app.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Completion:
    """Text returned by the model and the tokens it cost (if reported)."""

    content: str
    total_tokens: Optional[int] = None


class RankingClient(Protocol):
    def complete(self, system: str, prompt: str, *, model: str) -> Completion:
        """Run one chat completion.  Raises :class:`UpstreamServiceError` on failure."""
        ...


class OpenAIRankingClient:
    """Synchronous OpenAI chat client with a bounded timeout and no retries."""

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 8.0,
        max_tokens: int = 1500,
        temperature: float = 0.1,
    ):
        self._client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.max_tokens = max_tokens
        self.temperature = temperature

    def complete(self, system: str, prompt: str, *, model: str) -> Completion:
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as exc:
            raise UpstreamServiceError(f"OpenAI request failed: {exc}") from exc

        if not response.choices:
            raise UpstreamServiceError("OpenAI returned no choices")
        content = (response.choices[0].message.content or "").strip()
        total_tokens = response.usage.total_tokens if response.usage is not None else None
        logger.debug("OpenAI completion: model=%s tokens=%s", model, total_tokens)
        return Completion(content=content, total_tokens=total_tokens)

    def close(self) -> None:
        self._client.close()
