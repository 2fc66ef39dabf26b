from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.audit import AuditService
from core.services.financial import FinancialService
from core.services.ledger import LedgerDerivationService, LedgerPolicy, LedgerStatusMachine
from core.services.project import ProjectService
from core.services.stage import StageLifecycleService
from core.services.status_catalog import StatusCatalogService
from infra.db.audit import SqlAlchemyAuditLogRepository
from infra.db.history import SqlAlchemyStageHistoryRepository
from infra.db.ledger import SqlAlchemyLedgerRepository
from infra.db.project import SqlAlchemyProjectRepository, SqlAlchemyStageRepository
from infra.db.status import SqlAlchemyStatusDefinitionRepository
from infra.db.transaction import SqlAlchemyManualTransactionRepository
from infra.operational_support import register_secret


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    policy: LedgerPolicy
    audit_service: AuditService
    status_catalog_service: StatusCatalogService
    project_service: ProjectService
    stage_service: StageLifecycleService
    derivation_service: LedgerDerivationService
    status_machine: LedgerStatusMachine
    financial_service: FinancialService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "policy": self.policy,
            "audit_service": self.audit_service,
            "status_catalog_service": self.status_catalog_service,
            "project_service": self.project_service,
            "stage_service": self.stage_service,
            "derivation_service": self.derivation_service,
            "status_machine": self.status_machine,
            "financial_service": self.financial_service,
        }


def build_service_graph(
    session: Session,
    *,
    policy: LedgerPolicy | None = None,
    seed_statuses: bool = True,
) -> ServiceGraph:
    policy = policy or LedgerPolicy.from_env()
    register_secret(policy.confirmation_secret)

    project_repo = SqlAlchemyProjectRepository(session)
    stage_repo = SqlAlchemyStageRepository(session)
    history_repo = SqlAlchemyStageHistoryRepository(session)
    status_repo = SqlAlchemyStatusDefinitionRepository(session)
    transaction_repo = SqlAlchemyManualTransactionRepository(session)
    ledger_repo = SqlAlchemyLedgerRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(session=session, audit_repo=audit_repo)
    status_catalog_service = StatusCatalogService(
        session,
        status_repo,
        stage_repo,
        audit_service=audit_service,
    )
    if seed_statuses:
        status_catalog_service.seed_defaults()

    derivation_service = LedgerDerivationService(
        session,
        ledger_repo,
        stage_repo,
        project_repo,
        transaction_repo,
        status_catalog_service,
        policy,
        audit_service=audit_service,
    )
    project_service = ProjectService(
        session,
        project_repo,
        stage_repo,
        status_catalog_service,
        derivation=derivation_service,
        audit_service=audit_service,
    )
    stage_service = StageLifecycleService(
        session,
        stage_repo,
        project_repo,
        history_repo,
        status_catalog_service,
        derivation=derivation_service,
        audit_service=audit_service,
    )
    status_machine = LedgerStatusMachine(
        session,
        ledger_repo,
        policy,
        audit_service=audit_service,
    )
    financial_service = FinancialService(
        ledger_repo=ledger_repo,
        project_repo=project_repo,
        status_catalog=status_catalog_service,
    )

    return ServiceGraph(
        session=session,
        policy=policy,
        audit_service=audit_service,
        status_catalog_service=status_catalog_service,
        project_service=project_service,
        stage_service=stage_service,
        derivation_service=derivation_service,
        status_machine=status_machine,
        financial_service=financial_service,
    )


def build_service_dict(session: Session, *, policy: LedgerPolicy | None = None) -> dict[str, Any]:
    return build_service_graph(session, policy=policy).as_dict()
