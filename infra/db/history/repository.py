from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import StageHistoryRepository
from core.models import StageHistoryEntry
from infra.db.history.mapper import history_from_orm, history_to_orm
from infra.db.models import StageHistoryORM


class SqlAlchemyStageHistoryRepository(StageHistoryRepository):
    """Append-only: no update or delete."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: StageHistoryEntry) -> None:
        self.session.add(history_to_orm(entry))

    def list_for_stage(self, stage_id: str) -> List[StageHistoryEntry]:
        stmt = (
            select(StageHistoryORM)
            .where(StageHistoryORM.stage_id == stage_id)
            .order_by(StageHistoryORM.changed_at, StageHistoryORM.id)
        )
        return [history_from_orm(row) for row in self.session.execute(stmt).scalars()]

    def list_for_project(self, project_id: str) -> List[StageHistoryEntry]:
        stmt = (
            select(StageHistoryORM)
            .where(StageHistoryORM.project_id == project_id)
            .order_by(StageHistoryORM.changed_at, StageHistoryORM.id)
        )
        return [history_from_orm(row) for row in self.session.execute(stmt).scalars()]


__all__ = ["SqlAlchemyStageHistoryRepository"]
