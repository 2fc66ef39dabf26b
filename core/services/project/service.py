from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from core.interfaces import ProjectRepository, StageRepository
from core.services.audit.service import AuditService
from core.services.project.lifecycle import ProjectLifecycleMixin
from core.services.project.query import ProjectQueryMixin
from core.services.status_catalog.service import StatusCatalogService

if TYPE_CHECKING:
    from core.services.ledger.derivation import LedgerDerivationService


class ProjectService(ProjectLifecycleMixin, ProjectQueryMixin):
    """Project service orchestrator: wiring repositories + composing mixins."""

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        stage_repo: StageRepository,
        status_catalog: StatusCatalogService,
        derivation: "LedgerDerivationService | None" = None,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._project_repo: ProjectRepository = project_repo
        self._stage_repo: StageRepository = stage_repo
        self._status_catalog: StatusCatalogService = status_catalog
        self._derivation = derivation
        self._audit_service: AuditService | None = audit_service


__all__ = ["ProjectService"]
