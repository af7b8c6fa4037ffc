"""
Base database configuration.

Import all models here so Alembic can detect them for migrations.
"""

from sqlmodel import SQLModel

# Import all models for Alembic autogenerate
from app.models.exercise import Exercise  # noqa: F401
from app.models.equipment import OrganizationEquipment  # noqa: F401
from app.models.ai_usage import AIUsageLog, OrganizationAIUsage, UsageCounter  # noqa: F401
from app.models.alternatives_cache import AlternativesCacheEntry  # noqa: F401

metadata = SQLModel.metadata
