"""Pure bucket predicates over stages and ledger rows."""
from __future__ import annotations

from datetime import date
from typing import Callable

from core.models import LedgerEntry, LedgerStatus, Stage
from core.services.status_catalog.catalog import StatusCatalog

StagePredicate = Callable[[Stage], bool]
EntryPredicate = Callable[[LedgerEntry], bool]


def awaiting_invoice(stage: Stage) -> bool:
    return bool(stage.client_approved and not stage.invoice_issued)


def awaiting_payment(stage: Stage) -> bool:
    return bool(stage.invoice_issued and not stage.payment_received)


def awaiting_consultant_settlement(stage: Stage) -> bool:
    return bool(stage.payment_received and not stage.consultants_settled)


def open_stage(catalog: StatusCatalog) -> StagePredicate:
    return lambda stage: not catalog.is_completion(stage.status)


def completed_stage(catalog: StatusCatalog) -> StagePredicate:
    return lambda stage: catalog.is_completion(stage.status)


def overdue_stage(catalog: StatusCatalog, today: date) -> StagePredicate:
    def _check(stage: Stage) -> bool:
        return (
            not catalog.is_completion(stage.status)
            and stage.end_date is not None
            and stage.end_date < today
        )

    return _check


def overdue_entry(today: date) -> EntryPredicate:
    return lambda entry: entry.status == LedgerStatus.PENDING and entry.due_date < today


__all__ = [
    "StagePredicate",
    "EntryPredicate",
    "awaiting_invoice",
    "awaiting_payment",
    "awaiting_consultant_settlement",
    "open_stage",
    "completed_stage",
    "overdue_stage",
    "overdue_entry",
]
