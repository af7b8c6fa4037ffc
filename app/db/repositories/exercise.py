"""
Exercise repository.

Read-only access to the catalog, scoped to what an organization can see:
global exercises plus its own.
"""

from typing import Optional

from sqlmodel import Session, or_, select

from app.models.exercise import Exercise


class ExerciseRepository:
    """Repository for Exercise database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def _visible_to(self, organization_id: str):
        return or_(Exercise.organization_id.is_(None), Exercise.organization_id == organization_id)

    def get_visible(self, exercise_id: int, organization_id: str) -> Optional[Exercise]:
        """
        Get an exercise by ID if the organization can see it.

        Args:
            exercise_id: Exercise ID
            organization_id: Caller's organization

        Returns:
            Exercise if found and visible, None otherwise
        """
        statement = (
            select(Exercise)
            .where(Exercise.id == exercise_id)
            .where(self._visible_to(organization_id))
        )
        return self.session.exec(statement).first()

    def list_visible(self, organization_id: str) -> list[Exercise]:
        """
        List active exercises visible to an organization, in catalog order.

        Args:
            organization_id: Caller's organization

        Returns:
            Exercises ordered by id (insertion order)
        """
        statement = (
            select(Exercise)
            .where(Exercise.is_active == True)  # noqa: E712
            .where(self._visible_to(organization_id))
            .order_by(Exercise.id)
        )
        return list(self.session.exec(statement).all())

    def create(self, exercise: Exercise) -> Exercise:
        self.session.add(exercise)
        self.session.commit()
        self.session.refresh(exercise)
        return exercise

    def count(self) -> int:
        return len(self.session.exec(select(Exercise.id)).all())
