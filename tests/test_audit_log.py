from __future__ import annotations

from datetime import date

import pytest

from core.exceptions import NotFoundError


def test_audit_log_records_project_stage_and_ledger_changes(services):
    ps = services["project_service"]
    ss = services["stage_service"]
    sm = services["status_machine"]
    fs = services["financial_service"]
    audit = services["audit_service"]

    project = ps.create_project(
        "Audit Project",
        "em_producao",
        stages=[{"name": "S1", "status": "em_producao", "value": 100, "end_date": date(2024, 1, 1)}],
    )
    ss.set_stage_status(project.stages[0].id, "aguardando_pagamento", changed_by="Bruno")
    [receivable] = fs.list_accounts_history()
    sm.mark_paid_or_received(receivable.id, date(2024, 1, 3), actor_name="Bruno")

    entries = audit.list_recent(limit=20, project_id=project.id)
    actions = {entry.action for entry in entries}
    assert "project.create" in actions
    assert "stage.set_status" in actions
    assert "ledger.mark_settled" in actions
    assert any(entry.actor_name == "Bruno" for entry in entries)


def test_status_catalog_changes_are_audited(services):
    catalog_service = services["status_catalog_service"]
    audit = services["audit_service"]

    created = catalog_service.add_status("faturado", "Faturado")
    catalog_service.remove_status(created.id)

    actions = [entry.action for entry in audit.list_recent(entity_type="status_definition")]
    assert sorted(actions) == ["status.add", "status.remove"]


def test_failed_unit_of_work_leaves_no_audit_row(services):
    ss = services["stage_service"]
    audit = services["audit_service"]

    with pytest.raises(NotFoundError):
        ss.set_stage_status("missing-stage", "concluido")

    assert audit.list_recent(entity_type="stage") == []


def test_audit_service_is_append_only_contract(services):
    audit = services["audit_service"]
    assert not hasattr(audit, "update")
    assert not hasattr(audit, "delete")
