from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.interfaces import LedgerRepository
from core.models import LedgerEntry, LedgerEntryType, LedgerStatus, SourceRef
from infra.db.ledger.mapper import ledger_from_orm, ledger_to_orm, orm_type_for
from infra.db.models import AccountPayableORM, AccountReceivableORM
from infra.db.optimistic import update_with_status_check


class SqlAlchemyLedgerRepository(LedgerRepository):
    """Payables and receivables live in separate tables behind one repository."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: LedgerEntry) -> None:
        self.session.add(ledger_to_orm(entry))

    def get(self, entry_id: str) -> Optional[LedgerEntry]:
        for orm_type in (AccountReceivableORM, AccountPayableORM):
            obj = self.session.get(orm_type, entry_id)
            if obj is not None:
                return ledger_from_orm(obj)
        return None

    def find_by_source(self, entry_type: LedgerEntryType, source_ref: SourceRef) -> Optional[LedgerEntry]:
        orm_type = orm_type_for(entry_type)
        if source_ref.is_stage:
            stmt = select(orm_type).where(orm_type.stage_id == source_ref.stage_id)
        else:
            stmt = select(orm_type).where(orm_type.manual_transaction_id == source_ref.manual_transaction_id)
        obj = self.session.execute(stmt).scalars().first()
        return ledger_from_orm(obj) if obj else None

    def update_derived_fields(self, entry: LedgerEntry) -> None:
        orm_type = orm_type_for(entry.entry_type)
        entry.updated_at = datetime.now(timezone.utc)
        if entry.entry_type == LedgerEntryType.PAYABLE:
            counterparty = {"consultant_id": entry.consultant_id}
        else:
            counterparty = {"client_id": entry.client_id}
        # status and payment_date are left alone so a concurrent transition is never overwritten
        self.session.execute(
            update(orm_type)
            .where(orm_type.id == entry.id)
            .values(
                amount=entry.amount,
                due_date=entry.due_date,
                description=entry.description,
                updated_at=entry.updated_at,
                **counterparty,
            )
        )

    def transition_status(
        self,
        entry: LedgerEntry,
        *,
        expected_status: LedgerStatus,
        new_status: LedgerStatus,
        payment_date: Optional[date],
    ) -> bool:
        return update_with_status_check(
            self.session,
            orm_type_for(entry.entry_type),
            entry.id,
            expected_status,
            {
                "status": new_status,
                "payment_date": payment_date,
                "updated_at": datetime.now(timezone.utc),
            },
        )

    def list_all(self, entry_type: LedgerEntryType | None = None) -> List[LedgerEntry]:
        types = [entry_type] if entry_type is not None else [LedgerEntryType.RECEIVABLE, LedgerEntryType.PAYABLE]
        out: List[LedgerEntry] = []
        for kind in types:
            orm_type = orm_type_for(kind)
            stmt = select(orm_type).order_by(orm_type.due_date, orm_type.description)
            out.extend(ledger_from_orm(row) for row in self.session.execute(stmt).scalars())
        return out


__all__ = ["SqlAlchemyLedgerRepository"]
