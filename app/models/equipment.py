"""
Organization equipment configuration model.
"""

import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class OrganizationEquipment(SQLModel, table=True):
    """Equipment configured for one gym.

    ``unavailable_equipment`` lists tags that are temporarily out of
    service; they are subtracted from ``available_equipment``.
    """

    __tablename__ = "organization_equipment"

    id: Optional[int] = Field(default=None, primary_key=True)
    organization_id: str = Field(nullable=False, max_length=64, unique=True, index=True)

    available_equipment: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    unavailable_equipment: list = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Timestamps
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
    updated_at: datetime.datetime = Field(default_factory=datetime.datetime.utcnow)
