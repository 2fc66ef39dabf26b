from __future__ import annotations

from core.models import ManualTransaction
from infra.db.models import ManualTransactionORM


def transaction_to_orm(tx: ManualTransaction) -> ManualTransactionORM:
    return ManualTransactionORM(
        id=tx.id,
        type=tx.type,
        description=tx.description,
        amount=tx.amount,
        due_date=tx.due_date,
        status=tx.status,
        payment_date=tx.payment_date,
        client_id=tx.client_id,
        consultant_id=tx.consultant_id,
        project_id=tx.project_id,
        is_recurring=tx.is_recurring,
        recurrence_interval=tx.recurrence_interval,
        installments=tx.installments,
        current_installment=tx.current_installment,
        recurrence_tag=tx.recurrence_tag,
        created_at=tx.created_at,
        updated_at=tx.updated_at,
    )


def transaction_from_orm(obj: ManualTransactionORM) -> ManualTransaction:
    return ManualTransaction(
        id=obj.id,
        type=obj.type,
        description=obj.description,
        amount=obj.amount,
        due_date=obj.due_date,
        status=obj.status,
        payment_date=obj.payment_date,
        client_id=obj.client_id,
        consultant_id=obj.consultant_id,
        project_id=obj.project_id,
        is_recurring=bool(obj.is_recurring),
        recurrence_interval=obj.recurrence_interval,
        installments=obj.installments,
        current_installment=obj.current_installment,
        recurrence_tag=obj.recurrence_tag,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


__all__ = ["transaction_to_orm", "transaction_from_orm"]
