# infra/db/models.py
from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    String,
    Date,
    DateTime,
    Boolean,
    ForeignKey,
    Enum as SAEnum,
    Index,
    Integer,
    Numeric,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from infra.db.base import Base
from core.models import (
    LedgerStatus,
    RecurrenceInterval,
    TransactionStatus,
    TransactionType,
)

MONEY = Numeric(14, 2, asdecimal=True)
PERCENT = Numeric(7, 4, asdecimal=True)


class ProjectORM(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    main_consultant_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    support_consultant_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    client_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    total_value: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0"), nullable=False)
    tax_percent: Mapped[Decimal] = mapped_column(PERCENT, default=Decimal("0"), nullable=False)
    third_party_expenses: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0"), nullable=False)
    main_consultant_value: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0"), nullable=False)
    support_consultant_value: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)


class StageORM(Base):
    __tablename__ = "project_stages"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    project_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    stage_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    value: Mapped[Decimal] = mapped_column(MONEY, default=Decimal("0"), nullable=False)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    description: Mapped[str] = mapped_column(String, default="")
    consultant_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    consultant_value: Mapped[Optional[Decimal]] = mapped_column(MONEY, nullable=True)

    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    client_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    invoice_issued: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_received: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    consultants_settled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    consultant_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


Index("idx_project_stages_project_order", StageORM.project_id, StageORM.stage_order)
Index("idx_project_stages_status", StageORM.status)


class StageHistoryORM(Base):
    __tablename__ = "stage_history"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    stage_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("project_stages.id", ondelete="CASCADE"),
        nullable=False,
    )
    project_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    previous_status: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    changed_by: Mapped[str] = mapped_column(String, nullable=False, default="Sistema")
    changed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


Index("idx_stage_history_stage", StageHistoryORM.stage_id, StageHistoryORM.changed_at)
Index("idx_stage_history_project", StageHistoryORM.project_id, StageHistoryORM.changed_at)


class StatusDefinitionORM(Base):
    __tablename__ = "status_definitions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#6b7280")
    is_completion_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_cancellation_status: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class ManualTransactionORM(Base):
    __tablename__ = "manual_transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    type: Mapped[TransactionType] = mapped_column(SAEnum(TransactionType), nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        SAEnum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False
    )
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    client_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    consultant_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    project_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    recurrence_interval: Mapped[Optional[RecurrenceInterval]] = mapped_column(
        SAEnum(RecurrenceInterval), nullable=True
    )
    installments: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_installment: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    recurrence_tag: Mapped[str] = mapped_column(String, nullable=False, default="unique")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


Index("idx_manual_transactions_due", ManualTransactionORM.due_date)


class _LedgerColumns:
    id: Mapped[str] = mapped_column(String, primary_key=True)
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    payment_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    status: Mapped[LedgerStatus] = mapped_column(
        SAEnum(LedgerStatus), default=LedgerStatus.PENDING, nullable=False
    )
    stage_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    project_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    manual_transaction_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class AccountPayableORM(_LedgerColumns, Base):
    __tablename__ = "accounts_payable"

    consultant_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)


Index("ux_accounts_payable_stage", AccountPayableORM.stage_id, unique=True)
Index("ux_accounts_payable_transaction", AccountPayableORM.manual_transaction_id, unique=True)
Index("idx_accounts_payable_due", AccountPayableORM.due_date)


class AccountReceivableORM(_LedgerColumns, Base):
    __tablename__ = "accounts_receivable"

    client_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)


Index("ux_accounts_receivable_stage", AccountReceivableORM.stage_id, unique=True)
Index("ux_accounts_receivable_transaction", AccountReceivableORM.manual_transaction_id, unique=True)
Index("idx_accounts_receivable_due", AccountReceivableORM.due_date)


class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    occurred_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    actor_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    action: Mapped[str] = mapped_column(String, nullable=False)
    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False)
    project_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    details_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")


Index("idx_audit_logs_occurred", AuditLogORM.occurred_at)
Index("idx_audit_logs_project", AuditLogORM.project_id)
Index("idx_audit_logs_entity", AuditLogORM.entity_type, AuditLogORM.entity_id)
