from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from core.interfaces import StatusDefinitionRepository
from core.models import StatusDefinition
from infra.db.models import StatusDefinitionORM
from infra.db.status.mapper import status_from_orm, status_to_orm


class SqlAlchemyStatusDefinitionRepository(StatusDefinitionRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, definition: StatusDefinition) -> None:
        self.session.add(status_to_orm(definition))

    def update(self, definition: StatusDefinition) -> None:
        self.session.merge(status_to_orm(definition))

    def delete(self, definition_id: str) -> None:
        self.session.execute(delete(StatusDefinitionORM).where(StatusDefinitionORM.id == definition_id))

    def get(self, definition_id: str) -> Optional[StatusDefinition]:
        obj = self.session.get(StatusDefinitionORM, definition_id)
        return status_from_orm(obj) if obj else None

    def get_by_name(self, name: str) -> Optional[StatusDefinition]:
        stmt = select(StatusDefinitionORM).where(StatusDefinitionORM.name == name)
        obj = self.session.execute(stmt).scalars().first()
        return status_from_orm(obj) if obj else None

    def list_ordered(self) -> List[StatusDefinition]:
        stmt = select(StatusDefinitionORM).order_by(StatusDefinitionORM.order_index, StatusDefinitionORM.name)
        return [status_from_orm(row) for row in self.session.execute(stmt).scalars()]


__all__ = ["SqlAlchemyStatusDefinitionRepository"]
