from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError
from core.interfaces import ProjectRepository, StageHistoryRepository, StageRepository
from core.models import Project, Stage, StageHistoryEntry
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.project.validation import ProjectValidationMixin
from core.services.stage.models import StageProgress
from core.services.status_catalog.service import StatusCatalogService

if TYPE_CHECKING:
    from core.services.ledger.derivation import LedgerDerivationService

logger = logging.getLogger(__name__)

_FLAG_FIELDS = (
    "client_approved",
    "invoice_issued",
    "payment_received",
    "consultants_settled",
    "consultant_paid",
)


class StageLifecycleService(ProjectValidationMixin):
    """
    Stage status transitions, completion queries and the append-only history.

    A transition into a completion status sets ``completed``; leaving one never
    clears it. Ledger rows are re-derived after the transition commits when a
    derivation service is wired in.
    """

    def __init__(
        self,
        session: Session,
        stage_repo: StageRepository,
        project_repo: ProjectRepository,
        history_repo: StageHistoryRepository,
        status_catalog: StatusCatalogService,
        derivation: "LedgerDerivationService | None" = None,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._stage_repo: StageRepository = stage_repo
        self._project_repo: ProjectRepository = project_repo
        self._history_repo: StageHistoryRepository = history_repo
        self._status_catalog: StatusCatalogService = status_catalog
        self._derivation = derivation
        self._audit_service: AuditService | None = audit_service

    def set_stage_status(
        self,
        stage_id: str,
        new_status: str,
        *,
        changed_by: str | None = None,
    ) -> Stage:
        stage = self._stage_repo.get(stage_id)
        if not stage:
            raise NotFoundError("Stage not found.", code="STAGE_NOT_FOUND", entity_id=stage_id)
        catalog = self._status_catalog.current()
        self._validate_status(catalog, new_status)

        previous = stage.status
        stage.status = new_status
        if catalog.is_completion(new_status):
            stage.completed = True
            if stage.completed_at is None:
                stage.completed_at = datetime.now(timezone.utc)

        entry = StageHistoryEntry.create(
            stage.id,
            stage.project_id,
            new_status,
            previous_status=previous,
            changed_by=changed_by,
        )
        try:
            self._stage_repo.update(stage)
            self._history_repo.add(entry)
            record_audit(
                self,
                action="stage.set_status",
                entity_type="stage",
                entity_id=stage.id,
                project_id=stage.project_id,
                actor_name=entry.changed_by,
                details={"from": previous, "to": new_status},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.info("Stage %s moved %s -> %s", stage.id, previous, new_status)
        domain_events.stages_changed.emit(stage.project_id)

        if self._derivation is not None:
            self._derivation.derive_for_stage_id(stage.id)
        return stage

    def set_stage_flags(self, stage_id: str, **flags: bool) -> Stage:
        stage = self._stage_repo.get(stage_id)
        if not stage:
            raise NotFoundError("Stage not found.", code="STAGE_NOT_FOUND", entity_id=stage_id)
        unknown = set(flags) - set(_FLAG_FIELDS)
        if unknown:
            raise TypeError(f"Unknown stage flags: {', '.join(sorted(unknown))}")
        for key, value in flags.items():
            setattr(stage, key, bool(value))
        try:
            self._stage_repo.update(stage)
            record_audit(
                self,
                action="stage.set_flags",
                entity_type="stage",
                entity_id=stage.id,
                project_id=stage.project_id,
                details={key: bool(value) for key, value in flags.items()},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        domain_events.stages_changed.emit(stage.project_id)
        return stage

    def progress(self, project: Project) -> StageProgress:
        catalog = self._status_catalog.current()
        completed = sum(1 for stage in project.stages if catalog.is_completion(stage.status))
        return StageProgress(completed=completed, total=len(project.stages))

    def progress_for(self, project_id: str) -> StageProgress:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND", entity_id=project_id)
        return self.progress(project)

    def list_stage_history(
        self,
        stage_id: str | None = None,
        *,
        project_id: str | None = None,
    ) -> List[StageHistoryEntry]:
        if stage_id:
            return self._history_repo.list_for_stage(stage_id)
        if project_id:
            return self._history_repo.list_for_project(project_id)
        raise ValueError("Pass a stage_id or a project_id.")


__all__ = ["StageLifecycleService"]
