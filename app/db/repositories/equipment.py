"""Organization equipment repository."""

from typing import Optional

from sqlmodel import Session, select

from app.models.equipment import OrganizationEquipment


class EquipmentRepository:
    """Repository for OrganizationEquipment database operations."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_organization(self, organization_id: str) -> Optional[OrganizationEquipment]:
        statement = select(OrganizationEquipment).where(
            OrganizationEquipment.organization_id == organization_id
        )
        return self.session.exec(statement).first()

    def upsert(self, config: OrganizationEquipment) -> OrganizationEquipment:
        self.session.add(config)
        self.session.commit()
        self.session.refresh(config)
        return config
