from __future__ import annotations

from decimal import Decimal

import pytest

from core.exceptions import UnauthorizedError
from core.models import Project, Stage
from core.services.ledger import LedgerPolicy
from core.services.ledger.policy import DEFAULT_PAYABLE_STATUSES, DEFAULT_RECEIVABLE_STATUSES
from core.services.status_catalog import StatusCatalog


def test_policy_reads_environment(monkeypatch):
    monkeypatch.setenv("LEDGER_CONFIRMATION_SECRET", "s3cret")
    monkeypatch.setenv("LEDGER_RECEIVABLE_STATUSES", "faturado, aguardando_pagamento")
    monkeypatch.setenv("LEDGER_PAYABLE_STATUSES", "repasse")

    policy = LedgerPolicy.from_env()

    assert policy.confirmation_secret == "s3cret"
    assert policy.receivable_statuses == frozenset({"faturado", "aguardando_pagamento"})
    assert policy.payable_statuses == frozenset({"repasse"})
    assert "s3cret" not in repr(policy)


def test_policy_defaults_without_environment(monkeypatch):
    for name in ("LEDGER_CONFIRMATION_SECRET", "LEDGER_RECEIVABLE_STATUSES", "LEDGER_PAYABLE_STATUSES"):
        monkeypatch.delenv(name, raising=False)

    policy = LedgerPolicy.from_env()

    assert policy.confirmation_secret is None
    assert policy.receivable_statuses == DEFAULT_RECEIVABLE_STATUSES
    assert policy.payable_statuses == DEFAULT_PAYABLE_STATUSES
    with pytest.raises(UnauthorizedError):
        policy.confirm("anything", action="undo")


def test_confirm_requires_exact_match():
    policy = LedgerPolicy(confirmation_secret="abc123")

    policy.confirm("abc123", action="delete")
    for attempt in ("ABC123", "abc123 ", "", None):
        with pytest.raises(UnauthorizedError) as exc:
            policy.confirm(attempt, action="delete")
        assert exc.value.code == "LEDGER_SECRET_MISMATCH"


def test_completion_statuses_always_require_both_rows():
    policy = LedgerPolicy(receivable_statuses=frozenset(), payable_statuses=frozenset())
    catalog = StatusCatalog()

    assert policy.requires_receivable("concluido", catalog) is True
    assert policy.requires_payable("concluido", catalog) is True
    assert policy.requires_receivable("em_producao", catalog) is False


def test_payable_amount_share_and_override():
    project = Project.create("Share", "em_producao", total_value=3000, main_consultant_value=1000)
    stage = Stage.create(project.id, "S", "aguardando_repasse", 1000)

    assert LedgerPolicy.payable_amount(stage, project) == Decimal("333.33")

    stage.consultant_value = Decimal("120")
    assert LedgerPolicy.payable_amount(stage, project) == Decimal("120.00")

    empty = Project.create("Empty", "em_producao")
    assert LedgerPolicy.payable_amount(Stage.create(empty.id, "S", "concluido", 10), empty) == Decimal("0")
