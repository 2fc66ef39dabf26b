from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker

from core.models import LedgerEntryType, LedgerStatus
from core.services.ledger import LedgerPolicy
from infra.migrate import run_migrations
from infra.services import build_service_graph


def test_migrations_create_schema_usable_by_the_service_graph(tmp_path):
    db_url = f"sqlite:///{(tmp_path / 'ledger.db').as_posix()}"
    run_migrations(db_url)

    engine = create_engine(db_url, future=True)
    tables = set(inspect(engine).get_table_names())
    assert {
        "projects",
        "project_stages",
        "stage_history",
        "status_definitions",
        "manual_transactions",
        "accounts_payable",
        "accounts_receivable",
        "audit_logs",
    } <= tables

    session = sessionmaker(bind=engine, autoflush=False, future=True)()
    try:
        graph = build_service_graph(session, policy=LedgerPolicy(confirmation_secret="migrated"))
        project = graph.project_service.create_project(
            "Migrated Project",
            "em_producao",
            total_value=500,
            stages=[{"name": "Only", "status": "em_producao", "value": 500, "end_date": date(2024, 1, 1)}],
        )
        graph.stage_service.set_stage_status(project.stages[0].id, "aguardando_pagamento")
        [row] = graph.financial_service.list_accounts_history(LedgerEntryType.RECEIVABLE)
        graph.status_machine.delete(row.id, "migrated")

        [stored] = graph.financial_service.list_accounts_history(LedgerEntryType.RECEIVABLE)
        assert stored.amount == Decimal("500.00")
        assert stored.status == LedgerStatus.DELETED
    finally:
        session.close()
        engine.dispose()
