from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import ManualTransactionRepository
from core.models import ManualTransaction
from infra.db.models import ManualTransactionORM
from infra.db.transaction.mapper import transaction_from_orm, transaction_to_orm


class SqlAlchemyManualTransactionRepository(ManualTransactionRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, tx: ManualTransaction) -> None:
        self.session.add(transaction_to_orm(tx))

    def update(self, tx: ManualTransaction) -> None:
        tx.updated_at = datetime.now(timezone.utc)
        self.session.merge(transaction_to_orm(tx))

    def get(self, tx_id: str) -> Optional[ManualTransaction]:
        obj = self.session.get(ManualTransactionORM, tx_id)
        return transaction_from_orm(obj) if obj else None

    def list_all(self) -> List[ManualTransaction]:
        stmt = select(ManualTransactionORM).order_by(ManualTransactionORM.due_date, ManualTransactionORM.description)
        return [transaction_from_orm(row) for row in self.session.execute(stmt).scalars()]


__all__ = ["SqlAlchemyManualTransactionRepository"]
