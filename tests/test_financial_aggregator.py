from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from core.models import LedgerEntry, LedgerEntryType, LedgerStatus, Project, SourceRef, Stage
from core.services.financial import (
    accounts_history,
    build_period_cashflow,
    overdue_stages,
    summarize,
    summarize_period,
)
from core.services.financial.predicates import (
    awaiting_consultant_settlement,
    awaiting_invoice,
    awaiting_payment,
    overdue_entry,
)
from core.services.status_catalog import StatusCatalog


def _entry(kind, amount, status=LedgerStatus.PENDING, *, due=date(2024, 1, 15), paid=None, consultant=None):
    return LedgerEntry.create(
        kind,
        f"{kind.value} {amount}",
        amount,
        due,
        SourceRef.for_transaction(f"tx-{kind.value}-{amount}-{status.value}"),
        status=status,
        payment_date=paid,
        consultant_id=consultant,
    )


def _stage(status, end_date=None, **flags):
    return Stage.create("p-1", f"Stage {status}", status, 100, end_date=end_date, **flags)


def test_received_receivable_counts_as_received_and_not_pending():
    summary = summarize([_entry(LedgerEntryType.RECEIVABLE, "1000", LedgerStatus.RECEIVED, paid=date(2024, 1, 20))])

    assert summary.total_expected == Decimal("1000")
    assert summary.total_received == Decimal("1000")
    assert summary.total_pending == Decimal("0")


def test_summary_ignores_canceled_and_deleted_rows():
    entries = [
        _entry(LedgerEntryType.RECEIVABLE, "500"),
        _entry(LedgerEntryType.RECEIVABLE, "300", LedgerStatus.CANCELED),
        _entry(LedgerEntryType.RECEIVABLE, "200", LedgerStatus.DELETED),
        _entry(LedgerEntryType.PAYABLE, "120", LedgerStatus.PAID, paid=date(2024, 1, 16)),
        _entry(LedgerEntryType.PAYABLE, "80"),
        _entry(LedgerEntryType.PAYABLE, "999", LedgerStatus.DELETED),
    ]

    summary = summarize(entries)

    assert summary.total_expected == Decimal("500")
    assert summary.total_received == Decimal("0")
    assert summary.total_pending == Decimal("500")
    assert summary.consultant_payments_made == Decimal("120")
    assert summary.consultant_payments_pending == Decimal("80")


def test_summary_adds_projects_net_value():
    project = Project.create(
        "Net",
        "em_producao",
        total_value=1000,
        tax_percent=16,
        third_party_expenses=100,
        main_consultant_value=400,
        support_consultant_value=50,
    )

    assert project.net_value == Decimal("290")
    assert summarize([], [project]).projects_net_value == Decimal("290")


def test_period_summary_filters_by_due_month_and_consultant():
    entries = [
        _entry(LedgerEntryType.PAYABLE, "10", due=date(2024, 1, 5), consultant="c-1"),
        _entry(LedgerEntryType.PAYABLE, "20", due=date(2024, 1, 25), consultant="c-2"),
        _entry(LedgerEntryType.PAYABLE, "40", due=date(2024, 2, 5), consultant="c-1"),
    ]

    month = summarize_period(entries, scope="month", anchor=date(2024, 1, 1))
    assert month.consultant_payments_pending == Decimal("30")

    year_c1 = summarize_period(entries, scope="year", anchor=date(2024, 6, 1), consultant_id="c-1")
    assert year_c1.consultant_payments_pending == Decimal("50")

    everything = summarize_period(entries, scope="general")
    assert everything.consultant_payments_pending == Decimal("70")


def test_overdue_stage_uses_completion_status_and_end_date():
    catalog = StatusCatalog()
    late = _stage("aguardando_pagamento", date(2024, 1, 10))
    done = _stage("concluido", date(2024, 1, 10))
    undated = _stage("em_producao")
    future = _stage("em_producao", date(2024, 3, 1))
    project = Project.create("Overdue", "em_producao")
    project.stages.extend([late, done, undated, future])

    overdue = overdue_stages([project], catalog, now=datetime(2024, 2, 1, 9, 30))

    assert overdue == [late]


def test_overdue_entry_is_pending_and_past_due():
    check = overdue_entry(date(2024, 2, 1))

    assert check(_entry(LedgerEntryType.RECEIVABLE, "1", due=date(2024, 1, 31))) is True
    assert check(_entry(LedgerEntryType.RECEIVABLE, "2", due=date(2024, 2, 1))) is False
    assert check(_entry(LedgerEntryType.RECEIVABLE, "3", LedgerStatus.RECEIVED, due=date(2024, 1, 1))) is False


def test_checklist_buckets():
    approved = _stage("em_producao", client_approved=True)
    invoiced = _stage("em_producao", client_approved=True, invoice_issued=True)
    paid = _stage("em_producao", invoice_issued=True, payment_received=True)
    settled = _stage("em_producao", payment_received=True, consultants_settled=True)

    assert [awaiting_invoice(s) for s in (approved, invoiced, paid, settled)] == [True, False, False, False]
    assert [awaiting_payment(s) for s in (approved, invoiced, paid, settled)] == [False, True, False, False]
    assert [awaiting_consultant_settlement(s) for s in (approved, invoiced, paid, settled)] == [
        False,
        False,
        True,
        False,
    ]


def test_cashflow_buckets_settled_rows_by_payment_date():
    entries = [
        _entry(LedgerEntryType.RECEIVABLE, "1000", LedgerStatus.RECEIVED, due=date(2024, 1, 30), paid=date(2024, 2, 2)),
        _entry(LedgerEntryType.RECEIVABLE, "300", due=date(2024, 1, 10)),
        _entry(LedgerEntryType.PAYABLE, "200", LedgerStatus.PAID, due=date(2024, 1, 12), paid=date(2024, 1, 12)),
        _entry(LedgerEntryType.PAYABLE, "50", LedgerStatus.CANCELED, due=date(2024, 1, 12)),
    ]

    rows = build_period_cashflow(entries=entries, period="month")

    assert [r.period_key for r in rows] == ["2024-01", "2024-02"]
    january, february = rows
    assert january.receivable_expected == Decimal("300")
    assert january.receivable_settled == Decimal("0")
    assert january.payable_settled == Decimal("200")
    assert january.net_expected == Decimal("100")
    assert february.receivable_settled == Decimal("1000")
    assert february.net_settled == Decimal("1000")


def test_accounts_history_lists_every_row_newest_first():
    old = _entry(LedgerEntryType.PAYABLE, "1", LedgerStatus.DELETED)
    new = _entry(LedgerEntryType.PAYABLE, "2", LedgerStatus.CANCELED)
    old.updated_at = datetime(2024, 1, 1, tzinfo=timezone.utc)
    new.updated_at = old.updated_at + timedelta(days=1)

    assert accounts_history([old, new]) == [new, old]


def test_financial_service_reflects_marked_receivable(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    sm = services["status_machine"]
    fs = services["financial_service"]

    project = ps.create_project(
        "Summary Project",
        "em_producao",
        total_value=1000,
        stages=[{"name": "Only", "status": "em_producao", "value": 1000, "end_date": date(2024, 1, 10)}],
    )
    ss.set_stage_status(project.stages[0].id, "aguardando_pagamento")
    [receivable] = fs.list_accounts_history(LedgerEntryType.RECEIVABLE)

    assert fs.get_summary().total_pending == Decimal("1000")

    sm.mark_paid_or_received(receivable.id, date(2024, 1, 20))
    summary = fs.get_summary()
    assert summary.total_expected == Decimal("1000")
    assert summary.total_received == Decimal("1000")
    assert summary.total_pending == Decimal("0")

    snapshot = fs.get_snapshot(anchor=date(2024, 2, 1))
    assert [s.id for s in snapshot.overdue_stages] == [project.stages[0].id]
    assert snapshot.overdue_entries == []
    assert [r.period_key for r in fs.get_cashflow_by_period()] == ["2024-01"]
