from infra.db.status.mapper import status_from_orm, status_to_orm
from infra.db.status.repository import SqlAlchemyStatusDefinitionRepository

__all__ = ["status_to_orm", "status_from_orm", "SqlAlchemyStatusDefinitionRepository"]
