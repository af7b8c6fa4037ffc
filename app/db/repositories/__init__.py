"""Database repositories."""

from app.db.repositories.alternatives_cache import AlternativesCacheRepository
from app.db.repositories.equipment import EquipmentRepository
from app.db.repositories.exercise import ExerciseRepository
from app.db.repositories.usage import UsageRepository

__all__ = [
    "AlternativesCacheRepository",
    "EquipmentRepository",
    "ExerciseRepository",
    "UsageRepository",
]
