from infra.db.history.mapper import history_from_orm, history_to_orm
from infra.db.history.repository import SqlAlchemyStageHistoryRepository

__all__ = ["history_to_orm", "history_from_orm", "SqlAlchemyStageHistoryRepository"]
