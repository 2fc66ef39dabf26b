from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, Iterator, List, TypeVar

from core.domain.money import ZERO
from core.models import LedgerEntry, LedgerEntryType, LedgerStatus, Project, Stage
from core.services.financial.helpers import as_date, in_scope, normalize_scope
from core.services.financial.models import FinancialSummary
from core.services.financial.predicates import overdue_stage
from core.services.status_catalog.catalog import StatusCatalog

T = TypeVar("T")


def summarize(entries: Iterable[LedgerEntry], projects: Iterable[Project] = ()) -> FinancialSummary:
    expected = received = ZERO
    payable_active = payable_paid = ZERO
    for entry in entries:
        if not entry.is_active:
            continue
        if entry.entry_type == LedgerEntryType.RECEIVABLE:
            expected += entry.amount
            if entry.status == LedgerStatus.RECEIVED:
                received += entry.amount
        else:
            payable_active += entry.amount
            if entry.status == LedgerStatus.PAID:
                payable_paid += entry.amount

    net = sum((project.net_value for project in projects), ZERO)
    return FinancialSummary(
        total_expected=expected,
        total_received=received,
        total_pending=expected - received,
        consultant_payments_made=payable_paid,
        consultant_payments_pending=payable_active - payable_paid,
        projects_net_value=net,
    )


def filter_entries(
    entries: Iterable[LedgerEntry],
    *,
    scope: str = "general",
    anchor: date | None = None,
    consultant_id: str | None = None,
) -> List[LedgerEntry]:
    scope = normalize_scope(scope)
    anchor = as_date(anchor)
    out: List[LedgerEntry] = []
    for entry in entries:
        if not in_scope(entry.due_date, scope, anchor):
            continue
        if consultant_id and entry.consultant_id != consultant_id:
            continue
        out.append(entry)
    return out


def summarize_period(
    entries: Iterable[LedgerEntry],
    *,
    scope: str = "general",
    anchor: date | None = None,
    consultant_id: str | None = None,
    projects: Iterable[Project] = (),
) -> FinancialSummary:
    """Summary restricted to rows due in the month/year of ``anchor`` (or all of them)."""
    scoped = filter_entries(entries, scope=scope, anchor=anchor, consultant_id=consultant_id)
    return summarize(scoped, projects)


def iter_stages(projects: Iterable[Project]) -> Iterator[Stage]:
    for project in projects:
        yield from project.stages


def overdue_stages(
    projects: Iterable[Project],
    catalog: StatusCatalog,
    *,
    now: date | datetime | None = None,
) -> List[Stage]:
    return bucket(iter_stages(projects), overdue_stage(catalog, as_date(now)))


def bucket(items: Iterable[T], predicate: Callable[[T], bool]) -> List[T]:
    return [item for item in items if predicate(item)]


def accounts_history(entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
    """Every row including canceled and deleted ones, most recently touched first."""
    return sorted(entries, key=lambda entry: entry.updated_at, reverse=True)


__all__ = [
    "summarize",
    "summarize_period",
    "filter_entries",
    "iter_stages",
    "overdue_stages",
    "bucket",
    "accounts_history",
]
