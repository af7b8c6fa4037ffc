"""SQLModel database models."""

from app.models.ai_usage import AIUsageLog, OrganizationAIUsage, UsageCounter
from app.models.alternatives_cache import AlternativesCacheEntry
from app.models.equipment import OrganizationEquipment
from app.models.exercise import Exercise

__all__ = [
    "Exercise",
    "OrganizationEquipment",
    "OrganizationAIUsage",
    "UsageCounter",
    "AIUsageLog",
    "AlternativesCacheEntry",
]
