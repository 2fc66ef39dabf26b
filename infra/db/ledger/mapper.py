from __future__ import annotations

from typing import Union

from core.models import LedgerEntry, LedgerEntryType, SourceRef
from infra.db.models import AccountPayableORM, AccountReceivableORM

LedgerORM = Union[AccountPayableORM, AccountReceivableORM]


def orm_type_for(entry_type: LedgerEntryType) -> type[AccountPayableORM] | type[AccountReceivableORM]:
    if entry_type == LedgerEntryType.PAYABLE:
        return AccountPayableORM
    return AccountReceivableORM


def ledger_to_orm(entry: LedgerEntry) -> LedgerORM:
    common = dict(
        id=entry.id,
        description=entry.description,
        amount=entry.amount,
        due_date=entry.due_date,
        payment_date=entry.payment_date,
        status=entry.status,
        stage_id=entry.source_ref.stage_id,
        project_id=entry.source_ref.project_id,
        manual_transaction_id=entry.source_ref.manual_transaction_id,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
    )
    if entry.entry_type == LedgerEntryType.PAYABLE:
        return AccountPayableORM(consultant_id=entry.consultant_id, **common)
    return AccountReceivableORM(client_id=entry.client_id, **common)


def ledger_from_orm(obj: LedgerORM) -> LedgerEntry:
    payable = isinstance(obj, AccountPayableORM)
    return LedgerEntry(
        id=obj.id,
        entry_type=LedgerEntryType.PAYABLE if payable else LedgerEntryType.RECEIVABLE,
        description=obj.description,
        amount=obj.amount,
        due_date=obj.due_date,
        source_ref=SourceRef(
            stage_id=obj.stage_id,
            project_id=obj.project_id,
            manual_transaction_id=obj.manual_transaction_id,
        ),
        status=obj.status,
        payment_date=obj.payment_date,
        consultant_id=obj.consultant_id if payable else None,
        client_id=None if payable else obj.client_id,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


__all__ = ["LedgerORM", "orm_type_for", "ledger_to_orm", "ledger_from_orm"]
