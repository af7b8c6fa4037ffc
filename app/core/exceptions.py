"""
Domain exceptions for the alternatives pipeline.

Each exception maps to one HTTP status category; the mapping lives in the
exception handlers registered by :func:`app.main.create_app`.  Exceptions
that the pipeline degrades around (``UpstreamServiceError`` and store errors
on the usage-commit path) never reach those handlers.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for errors raised by the alternatives pipeline."""


class ExerciseNotFoundError(PipelineError):
    """The source exercise does not exist or is not visible to the organization."""

    def __init__(self, exercise_id: int):
        super().__init__(f"Exercise {exercise_id} not found")
        self.exercise_id = exercise_id


class FeatureNotEntitledError(PipelineError):
    """The organization's plan does not include the requested feature."""

    def __init__(self, feature: str, plan: str):
        super().__init__(f"Feature '{feature}' is not available on the '{plan}' plan")
        self.feature = feature
        self.plan = plan


class QuotaExceededError(PipelineError):
    """A usage tier is exhausted and the product gates the whole request."""

    def __init__(self, tier: str, used: int, limit: int):
        super().__init__(f"Usage limit reached for tier '{tier}' ({used}/{limit})")
        self.tier = tier
        self.used = used
        self.limit = limit


class UpstreamServiceError(PipelineError):
    """The external ranking service timed out, failed or returned unusable output."""


class StoreUnavailableError(PipelineError):
    """The backing store could not be read."""
