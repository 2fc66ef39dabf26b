from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from core.domain.money import ZERO
from core.models import LedgerEntry, Stage


@dataclass(frozen=True)
class FinancialSummary:
    total_expected: Decimal = ZERO
    total_received: Decimal = ZERO
    total_pending: Decimal = ZERO
    consultant_payments_made: Decimal = ZERO
    consultant_payments_pending: Decimal = ZERO
    projects_net_value: Decimal = ZERO


@dataclass(frozen=True)
class CashflowPeriodRow:
    period_key: str
    period_start: date
    period_end: date
    receivable_expected: Decimal
    receivable_settled: Decimal
    payable_expected: Decimal
    payable_settled: Decimal

    @property
    def net_expected(self) -> Decimal:
        return self.receivable_expected - self.payable_expected

    @property
    def net_settled(self) -> Decimal:
        return self.receivable_settled - self.payable_settled


@dataclass(frozen=True)
class FinancialSnapshot:
    scope: str
    anchor: date
    consultant_id: str | None
    summary: FinancialSummary
    receivables: list[LedgerEntry] = field(default_factory=list)
    payables: list[LedgerEntry] = field(default_factory=list)
    cashflow: list[CashflowPeriodRow] = field(default_factory=list)
    overdue_stages: list[Stage] = field(default_factory=list)
    overdue_entries: list[LedgerEntry] = field(default_factory=list)
    awaiting_invoice: list[Stage] = field(default_factory=list)
    awaiting_payment: list[Stage] = field(default_factory=list)
    awaiting_consultant_settlement: list[Stage] = field(default_factory=list)


__all__ = ["FinancialSummary", "CashflowPeriodRow", "FinancialSnapshot"]
