from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

from core.domain.enums import LedgerEntryType, LedgerStatus
from core.domain.identifiers import generate_id
from core.domain.money import as_money


@dataclass(frozen=True)
class SourceRef:
    """Where a ledger row came from: a project stage or a manual transaction."""

    stage_id: Optional[str] = None
    project_id: Optional[str] = None
    manual_transaction_id: Optional[str] = None

    def __post_init__(self) -> None:
        if bool(self.stage_id) == bool(self.manual_transaction_id):
            raise ValueError("SourceRef needs exactly one of stage_id or manual_transaction_id.")

    @staticmethod
    def for_stage(stage_id: str, project_id: str) -> "SourceRef":
        return SourceRef(stage_id=stage_id, project_id=project_id)

    @staticmethod
    def for_transaction(manual_transaction_id: str, project_id: str | None = None) -> "SourceRef":
        return SourceRef(manual_transaction_id=manual_transaction_id, project_id=project_id)

    @property
    def is_stage(self) -> bool:
        return self.stage_id is not None


@dataclass
class LedgerEntry:
    id: str
    entry_type: LedgerEntryType
    description: str
    amount: Decimal
    due_date: date
    source_ref: SourceRef
    status: LedgerStatus = LedgerStatus.PENDING
    payment_date: Optional[date] = None
    consultant_id: Optional[str] = None
    client_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def settled_status(self) -> LedgerStatus:
        if self.entry_type == LedgerEntryType.PAYABLE:
            return LedgerStatus.PAID
        return LedgerStatus.RECEIVED

    @property
    def is_active(self) -> bool:
        return self.status not in (LedgerStatus.CANCELED, LedgerStatus.DELETED)

    @staticmethod
    def create(
        entry_type: LedgerEntryType,
        description: str,
        amount: object,
        due_date: date,
        source_ref: SourceRef,
        **extra,
    ) -> "LedgerEntry":
        return LedgerEntry(
            id=generate_id(),
            entry_type=entry_type,
            description=description,
            amount=as_money(amount),
            due_date=due_date,
            source_ref=source_ref,
            **extra,
        )


__all__ = ["LedgerEntry", "SourceRef"]
