"""
Exercise catalog model.

Rows are owned by the catalog-management surface; the alternatives
pipeline only reads them.  ``organization_id`` is ``NULL`` for global
exercises shared by every organization.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Exercise(SQLModel, table=True):
    """A catalog exercise.

    The autoincrement ``id`` doubles as catalog insertion order, which the
    ranking uses to break score ties deterministically.
    """

    __tablename__ = "exercises"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: Optional[str] = Field(default=None, max_length=64, index=True)

    name: str = Field(nullable=False, max_length=255)
    category: Optional[str] = Field(default=None, max_length=50)
    muscle_groups: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    equipment: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    movement_pattern: Optional[str] = Field(default=None, max_length=50, index=True)
    difficulty: Optional[str] = Field(default=None, max_length=20)

    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
