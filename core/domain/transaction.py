from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import ROUND_DOWN, Decimal
from typing import Optional

from core.domain.enums import (
    RecurrenceInterval,
    RecurrenceMode,
    TransactionStatus,
    TransactionType,
)
from core.domain.identifiers import generate_id
from core.domain.money import CENT, as_money

MIN_OCCURRENCES = 2
MAX_OCCURRENCES = 360


@dataclass(frozen=True)
class TransactionIntent:
    """What the user typed in, before expansion and persistence."""

    type: TransactionType
    description: str
    amount: Decimal
    due_date: date
    status: TransactionStatus = TransactionStatus.PENDING
    payment_date: Optional[date] = None
    client_id: Optional[str] = None
    consultant_id: Optional[str] = None
    project_id: Optional[str] = None

    @staticmethod
    def create(
        type: TransactionType,
        description: str,
        amount: object,
        due_date: date,
        **extra,
    ) -> "TransactionIntent":
        return TransactionIntent(
            type=TransactionType(type),
            description=description,
            amount=as_money(amount),
            due_date=due_date,
            **extra,
        )


@dataclass(frozen=True)
class RecurrenceSpec:
    mode: RecurrenceMode = RecurrenceMode.UNIQUE
    interval: Optional[RecurrenceInterval] = None
    occurrences: int = 1

    @staticmethod
    def unique() -> "RecurrenceSpec":
        return RecurrenceSpec()

    @staticmethod
    def recurring(occurrences: int, interval: RecurrenceInterval = RecurrenceInterval.MONTHLY) -> "RecurrenceSpec":
        return RecurrenceSpec(RecurrenceMode.RECURRING, interval, occurrences)

    @staticmethod
    def installment(occurrences: int, interval: RecurrenceInterval = RecurrenceInterval.MONTHLY) -> "RecurrenceSpec":
        return RecurrenceSpec(RecurrenceMode.INSTALLMENT, interval, occurrences)

    def amount_per_occurrence(self, amount: Decimal) -> Decimal:
        """Installment share rounded down to the cent; the last instance takes the remainder."""
        if self.mode == RecurrenceMode.INSTALLMENT and self.occurrences > 0:
            return (amount / Decimal(self.occurrences)).quantize(CENT, rounding=ROUND_DOWN)
        return amount

    @property
    def tag(self) -> str:
        if self.mode == RecurrenceMode.UNIQUE:
            return RecurrenceMode.UNIQUE.value
        interval = (self.interval or RecurrenceInterval.MONTHLY).value
        return f"{self.mode.value}:{interval}:{self.occurrences}"


@dataclass
class ManualTransaction:
    id: str
    type: TransactionType
    description: str
    amount: Decimal
    due_date: date
    status: TransactionStatus = TransactionStatus.PENDING
    payment_date: Optional[date] = None
    client_id: Optional[str] = None
    consultant_id: Optional[str] = None
    project_id: Optional[str] = None
    is_recurring: bool = False
    recurrence_interval: Optional[RecurrenceInterval] = None
    installments: Optional[int] = None
    current_installment: Optional[int] = None
    recurrence_tag: str = RecurrenceMode.UNIQUE.value
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ledger_description(self) -> str:
        if self.installments and self.current_installment:
            return f"{self.description} ({self.current_installment}/{self.installments})"
        return self.description

    @staticmethod
    def from_intent(
        intent: TransactionIntent,
        *,
        spec: RecurrenceSpec,
        current_installment: int | None = None,
    ) -> "ManualTransaction":
        expanded = spec.mode != RecurrenceMode.UNIQUE
        return ManualTransaction(
            id=generate_id(),
            type=intent.type,
            description=intent.description,
            amount=intent.amount,
            due_date=intent.due_date,
            status=intent.status,
            payment_date=intent.payment_date,
            client_id=intent.client_id,
            consultant_id=intent.consultant_id,
            project_id=intent.project_id,
            is_recurring=spec.mode == RecurrenceMode.RECURRING,
            recurrence_interval=spec.interval if expanded else None,
            installments=spec.occurrences if expanded else None,
            current_installment=current_installment if expanded else None,
            recurrence_tag=spec.tag,
        )


__all__ = [
    "TransactionIntent",
    "RecurrenceSpec",
    "ManualTransaction",
    "MIN_OCCURRENCES",
    "MAX_OCCURRENCES",
]
