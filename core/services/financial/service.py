from __future__ import annotations

from datetime import date

from core.interfaces import LedgerRepository, ProjectRepository
from core.models import LedgerEntry, LedgerEntryType
from core.services.financial.aggregator import (
    accounts_history,
    bucket,
    filter_entries,
    iter_stages,
    overdue_stages,
    summarize,
)
from core.services.financial.cashflow import build_period_cashflow
from core.services.financial.helpers import normalize_scope
from core.services.financial.models import CashflowPeriodRow, FinancialSnapshot, FinancialSummary
from core.services.financial.predicates import (
    awaiting_consultant_settlement,
    awaiting_invoice,
    awaiting_payment,
    overdue_entry,
)
from core.services.status_catalog.service import StatusCatalogService


class FinancialService:
    """Read-only financial views, recomputed from the current rows on every call."""

    def __init__(
        self,
        *,
        ledger_repo: LedgerRepository,
        project_repo: ProjectRepository,
        status_catalog: StatusCatalogService,
    ) -> None:
        self._ledger_repo: LedgerRepository = ledger_repo
        self._project_repo: ProjectRepository = project_repo
        self._status_catalog: StatusCatalogService = status_catalog

    def get_summary(
        self,
        *,
        scope: str = "general",
        anchor: date | None = None,
        consultant_id: str | None = None,
    ) -> FinancialSummary:
        entries = filter_entries(
            self._ledger_repo.list_all(),
            scope=scope,
            anchor=anchor,
            consultant_id=consultant_id,
        )
        return summarize(entries, self._project_repo.list_all())

    def get_snapshot(
        self,
        *,
        scope: str = "general",
        anchor: date | None = None,
        consultant_id: str | None = None,
        period: str = "month",
    ) -> FinancialSnapshot:
        anchor = anchor or date.today()
        scope = normalize_scope(scope)
        projects = self._project_repo.list_all()
        catalog = self._status_catalog.current()
        entries = filter_entries(
            self._ledger_repo.list_all(),
            scope=scope,
            anchor=anchor,
            consultant_id=consultant_id,
        )
        stages = list(iter_stages(projects))
        return FinancialSnapshot(
            scope=scope,
            anchor=anchor,
            consultant_id=consultant_id,
            summary=summarize(entries, projects),
            receivables=[e for e in entries if e.entry_type == LedgerEntryType.RECEIVABLE],
            payables=[e for e in entries if e.entry_type == LedgerEntryType.PAYABLE],
            cashflow=build_period_cashflow(entries=entries, period=period, as_of=anchor),
            overdue_stages=overdue_stages(projects, catalog, now=anchor),
            overdue_entries=bucket(entries, overdue_entry(anchor)),
            awaiting_invoice=bucket(stages, awaiting_invoice),
            awaiting_payment=bucket(stages, awaiting_payment),
            awaiting_consultant_settlement=bucket(stages, awaiting_consultant_settlement),
        )

    def get_cashflow_by_period(
        self,
        *,
        as_of: date | None = None,
        period: str = "month",
    ) -> list[CashflowPeriodRow]:
        return build_period_cashflow(entries=self._ledger_repo.list_all(), period=period, as_of=as_of)

    def list_accounts_history(self, entry_type: LedgerEntryType | None = None) -> list[LedgerEntry]:
        return accounts_history(self._ledger_repo.list_all(entry_type))


__all__ = ["FinancialService"]
