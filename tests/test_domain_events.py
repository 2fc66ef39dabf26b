from datetime import date

import pytest

from core.events.domain_events import domain_events
from core.events.signal import Signal
from core.exceptions import InvalidTransitionError
from core.models import TransactionIntent, TransactionType


def test_domain_event_signal_connect_emit_disconnect():
    seen: list[str] = []

    def _handler(project_id: str) -> None:
        seen.append(project_id)

    domain_events.project_changed.connect(_handler)
    domain_events.project_changed.emit("p-1")
    domain_events.project_changed.disconnect(_handler)
    domain_events.project_changed.emit("p-2")

    assert seen == ["p-1"]


def test_signal_emit_keeps_runtime_errors_visible():
    signal: Signal[str] = Signal()

    def _boom(_payload: str) -> None:
        raise RuntimeError("boom")

    signal.connect(_boom)

    try:
        signal.emit("x")
        assert False, "Expected RuntimeError to propagate"
    except RuntimeError as exc:
        assert str(exc) == "boom"


def test_stage_transition_emits_stage_and_ledger_events(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    stage_events: list[str] = []
    ledger_events: list[str] = []

    def _on_stages(project_id: str) -> None:
        stage_events.append(project_id)

    def _on_ledger(entry_id: str) -> None:
        ledger_events.append(entry_id)

    project = ps.create_project(
        "Event Project",
        "em_producao",
        stages=[{"name": "S1", "status": "em_producao", "value": 100}],
    )
    domain_events.stages_changed.connect(_on_stages)
    domain_events.ledger_changed.connect(_on_ledger)
    try:
        ss.set_stage_status(project.stages[0].id, "aguardando_pagamento")
    finally:
        domain_events.stages_changed.disconnect(_on_stages)
        domain_events.ledger_changed.disconnect(_on_ledger)

    assert stage_events == [project.id]
    assert len(ledger_events) == 1


def test_failed_ledger_action_emits_nothing(services):
    ds = services["derivation_service"]
    sm = services["status_machine"]
    seen: list[str] = []

    def _on_ledger(entry_id: str) -> None:
        seen.append(entry_id)

    intent = TransactionIntent.create(TransactionType.EXPENSE, "Quiet", 10, date(2024, 1, 1))
    [result] = ds.submit_transaction(intent)
    sm.mark_paid_or_received(result.entry_id, date(2024, 1, 2))

    domain_events.ledger_changed.connect(_on_ledger)
    try:
        with pytest.raises(InvalidTransitionError):
            sm.cancel(result.entry_id)
    finally:
        domain_events.ledger_changed.disconnect(_on_ledger)

    assert seen == []
