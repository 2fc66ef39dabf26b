from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from core.exceptions import ValidationError
from core.models import (
    LedgerEntryType,
    LedgerStatus,
    ManualTransaction,
    RecurrenceSpec,
    TransactionIntent,
    TransactionStatus,
    TransactionType,
)


def _project(ps, *, stage_value=250, consultant_value=None, end_date=date(2024, 3, 31)):
    stage = {
        "name": "Kickoff",
        "status": "em_producao",
        "value": stage_value,
        "end_date": end_date,
    }
    if consultant_value is not None:
        stage["consultant_value"] = consultant_value
        stage["consultant_id"] = "consultant-stage"
    return ps.create_project(
        "Derivation Project",
        "em_producao",
        client_id="client-1",
        main_consultant_id="consultant-main",
        total_value=1000,
        main_consultant_value=400,
        stages=[stage],
    )


def _rows(fs, entry_type):
    return fs.list_accounts_history(entry_type)


def test_status_outside_ledger_sets_creates_nothing(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps)
    ss.set_stage_status(project.stages[0].id, "aguardando_aprovacao")

    assert _rows(fs, LedgerEntryType.RECEIVABLE) == []
    assert _rows(fs, LedgerEntryType.PAYABLE) == []


def test_awaiting_payment_creates_receivable_only(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps)
    ss.set_stage_status(project.stages[0].id, "aguardando_pagamento")

    receivables = _rows(fs, LedgerEntryType.RECEIVABLE)
    assert len(receivables) == 1
    row = receivables[0]
    assert row.amount == Decimal("250.00")
    assert row.due_date == date(2024, 3, 31)
    assert row.description == "Derivation Project - Kickoff"
    assert row.status == LedgerStatus.PENDING
    assert row.client_id == "client-1"
    assert row.source_ref.stage_id == project.stages[0].id
    assert _rows(fs, LedgerEntryType.PAYABLE) == []


def test_payable_uses_proportional_share_of_main_consultant_value(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps)
    ss.set_stage_status(project.stages[0].id, "aguardando_repasse")

    payables = _rows(fs, LedgerEntryType.PAYABLE)
    assert len(payables) == 1
    # 400 * 250 / 1000
    assert payables[0].amount == Decimal("100.00")
    assert payables[0].consultant_id == "consultant-main"
    assert len(_rows(fs, LedgerEntryType.RECEIVABLE)) == 1


def test_payable_prefers_stage_consultant_value(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps, consultant_value=75)
    ss.set_stage_status(project.stages[0].id, "concluido")

    payables = _rows(fs, LedgerEntryType.PAYABLE)
    assert payables[0].amount == Decimal("75.00")
    assert payables[0].consultant_id == "consultant-stage"


def test_cancellation_status_never_derives(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps)
    ss.set_stage_status(project.stages[0].id, "cancelado")

    assert fs.list_accounts_history() == []


def test_zero_value_stage_creates_no_rows(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = _project(ps, stage_value=0)
    ss.set_stage_status(project.stages[0].id, "aguardando_repasse")

    assert fs.list_accounts_history() == []


def test_derivation_is_idempotent(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    ds = services["derivation_service"]
    fs = services["financial_service"]

    project = _project(ps)
    stage_id = project.stages[0].id
    ss.set_stage_status(stage_id, "aguardando_repasse")
    before = {(e.entry_type, e.id, e.amount) for e in fs.list_accounts_history()}

    again = ds.derive_for_stage_id(stage_id)
    ss.set_stage_status(stage_id, "concluido")

    assert again.created == []
    assert again.updated == []
    after = {(e.entry_type, e.id, e.amount) for e in fs.list_accounts_history()}
    assert after == before


def test_rederivation_refreshes_amount_but_keeps_status_and_payment_date(services, session):
    ps = services["project_service"]
    ss = services["stage_service"]
    ds = services["derivation_service"]
    sm = services["status_machine"]
    fs = services["financial_service"]

    project = _project(ps)
    stage_id = project.stages[0].id
    ss.set_stage_status(stage_id, "aguardando_pagamento")
    receivable = _rows(fs, LedgerEntryType.RECEIVABLE)[0]
    sm.mark_paid_or_received(receivable.id, date(2024, 4, 2))

    stage = ds._stage_repo.get(stage_id)
    stage.value = Decimal("300.00")
    result = ds.derive_from_stage(stage, ps.get_project(project.id))

    assert result.updated == [receivable.id]
    refreshed = _rows(fs, LedgerEntryType.RECEIVABLE)[0]
    assert refreshed.id == receivable.id
    assert refreshed.amount == Decimal("300.00")
    assert refreshed.status == LedgerStatus.RECEIVED
    assert refreshed.payment_date == date(2024, 4, 2)


def test_due_date_falls_back_to_start_date(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]

    project = ps.create_project(
        "Start Date Project",
        "em_producao",
        stages=[{"name": "S1", "status": "em_producao", "value": 10, "start_date": date(2024, 5, 1)}],
    )
    ss.set_stage_status(project.stages[0].id, "aguardando_pagamento")

    assert _rows(fs, LedgerEntryType.RECEIVABLE)[0].due_date == date(2024, 5, 1)


def test_received_manual_income_creates_settled_receivable(services):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    intent = TransactionIntent.create(
        TransactionType.INCOME,
        "Workshop fee",
        "480.00",
        date(2024, 6, 10),
        status=TransactionStatus.RECEIVED,
        client_id="client-9",
    )
    [result] = ds.submit_transaction(intent)

    assert result.ok is True
    row = _rows(fs, LedgerEntryType.RECEIVABLE)[0]
    assert row.id == result.entry_id
    assert row.status == LedgerStatus.RECEIVED
    assert row.payment_date == date(2024, 6, 10)
    assert row.source_ref.manual_transaction_id == result.transaction_id


def test_paid_manual_expense_uses_explicit_payment_date(services):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    intent = TransactionIntent.create(
        TransactionType.EXPENSE,
        "Hosting",
        50,
        date(2024, 6, 10),
        status=TransactionStatus.PAID,
        payment_date=date(2024, 6, 8),
    )
    ds.submit_transaction(intent)

    row = _rows(fs, LedgerEntryType.PAYABLE)[0]
    assert row.status == LedgerStatus.PAID
    assert row.payment_date == date(2024, 6, 8)


def test_update_manual_transaction_refreshes_the_same_row(services):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    intent = TransactionIntent.create(TransactionType.EXPENSE, "Licences", 120, date(2024, 7, 1))
    [result] = ds.submit_transaction(intent)

    ds.update_manual_transaction(
        result.transaction_id,
        description="Licences (annual)",
        amount="150.50",
        due_date=date(2024, 7, 15),
    )

    payables = _rows(fs, LedgerEntryType.PAYABLE)
    assert len(payables) == 1
    assert payables[0].id == result.entry_id
    assert payables[0].amount == Decimal("150.50")
    assert payables[0].due_date == date(2024, 7, 15)
    assert payables[0].description == "Licences (annual)"
    assert payables[0].status == LedgerStatus.PENDING


def test_financial_update_refreshes_existing_payable_share(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    fs = services["financial_service"]
    sm = services["status_machine"]

    project = _project(ps)
    ss.set_stage_status(project.stages[0].id, "aguardando_repasse")
    payable = _rows(fs, LedgerEntryType.PAYABLE)[0]
    assert payable.amount == Decimal("100.00")
    sm.mark_paid_or_received(payable.id, date(2024, 4, 5))

    ps.update_financials(project.id, main_consultant_value=800)

    payables = _rows(fs, LedgerEntryType.PAYABLE)
    assert len(payables) == 1
    assert payables[0].id == payable.id
    assert payables[0].amount == Decimal("200.00")
    assert payables[0].status == LedgerStatus.PAID
    assert payables[0].payment_date == date(2024, 4, 5)
    assert _rows(fs, LedgerEntryType.RECEIVABLE)[0].amount == Decimal("250.00")


def test_financial_update_without_money_stages_creates_nothing(services):
    ps = services["project_service"]
    fs = services["financial_service"]

    project = _project(ps)
    ps.update_financials(project.id, total_value=2000)

    assert fs.list_accounts_history() == []


def test_stage_created_in_completion_status_derives_both_rows(services):
    ps = services["project_service"]
    fs = services["financial_service"]

    project = ps.create_project(
        "Imported Project",
        "em_producao",
        client_id="client-1",
        main_consultant_id="consultant-main",
        total_value=1000,
        main_consultant_value=400,
        stages=[{"name": "Done", "status": "concluido", "value": 250, "end_date": date(2024, 2, 29)}],
    )
    stage_id = project.stages[0].id

    [receivable] = _rows(fs, LedgerEntryType.RECEIVABLE)
    [payable] = _rows(fs, LedgerEntryType.PAYABLE)
    assert receivable.source_ref.stage_id == stage_id
    assert receivable.amount == Decimal("250.00")
    assert receivable.client_id == "client-1"
    assert receivable.due_date == date(2024, 2, 29)
    assert payable.amount == Decimal("100.00")
    assert payable.consultant_id == "consultant-main"
    assert fs.get_summary().total_expected == Decimal("250.00")


def test_added_stage_in_awaiting_payment_derives_receivable(services):
    ps = services["project_service"]
    fs = services["financial_service"]

    project = _project(ps)
    stage = ps.add_stage(project.id, "Extra", "aguardando_pagamento", 120, end_date=date(2024, 5, 31))

    [receivable] = _rows(fs, LedgerEntryType.RECEIVABLE)
    assert receivable.source_ref.stage_id == stage.id
    assert receivable.amount == Decimal("120.00")
    assert _rows(fs, LedgerEntryType.PAYABLE) == []


def _manual(amount, entry_type=TransactionType.INCOME, **extra):
    intent = TransactionIntent.create(entry_type, "Direct fee", amount, date(2024, 8, 1), **extra)
    return ManualTransaction.from_intent(intent, spec=RecurrenceSpec.unique())


def test_derive_from_manual_transaction_creates_pending_receivable(services):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    tx = _manual(75, client_id="client-3")
    entry = ds.derive_from_manual_transaction(tx)

    assert entry.entry_type == LedgerEntryType.RECEIVABLE
    assert entry.status == LedgerStatus.PENDING
    assert entry.source_ref.manual_transaction_id == tx.id
    assert entry.client_id == "client-3"

    again = ds.derive_from_manual_transaction(tx)
    assert again.id == entry.id
    assert len(_rows(fs, LedgerEntryType.RECEIVABLE)) == 1


@pytest.mark.parametrize("amount", ["-5", 0])
def test_derive_from_manual_transaction_rejects_non_positive_amount(services, amount):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    with pytest.raises(ValidationError) as exc:
        ds.derive_from_manual_transaction(_manual(amount))

    assert exc.value.code == "AMOUNT_NOT_POSITIVE"
    assert fs.list_accounts_history() == []


def test_update_manual_transaction_moves_the_counterparty(services):
    ds = services["derivation_service"]
    fs = services["financial_service"]

    intent = TransactionIntent.create(
        TransactionType.EXPENSE, "Subcontract", 300, date(2024, 9, 1), consultant_id="consultant-a"
    )
    [result] = ds.submit_transaction(intent)

    ds.update_manual_transaction(result.transaction_id, consultant_id="consultant-b")

    [payable] = _rows(fs, LedgerEntryType.PAYABLE)
    assert payable.id == result.entry_id
    assert payable.consultant_id == "consultant-b"
    assert payable.amount == Decimal("300.00")
