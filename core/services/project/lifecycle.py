from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Iterable, Mapping

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError
from core.interfaces import ProjectRepository, StageRepository
from core.models import Project, Stage
from core.services.audit.helpers import record_audit
from core.services.project.validation import ProjectValidationMixin
from core.services.status_catalog.service import StatusCatalogService

if TYPE_CHECKING:
    from core.services.ledger.derivation import LedgerDerivationService

logger = logging.getLogger(__name__)

_FINANCIAL_FIELDS = (
    "total_value",
    "tax_percent",
    "third_party_expenses",
    "main_consultant_value",
    "support_consultant_value",
)


class ProjectLifecycleMixin(ProjectValidationMixin):
    _session: Session
    _project_repo: ProjectRepository
    _stage_repo: StageRepository
    _status_catalog: StatusCatalogService
    _derivation: "LedgerDerivationService | None"

    def create_project(
        self,
        name: str,
        status: str,
        *,
        main_consultant_id: str | None = None,
        support_consultant_id: str | None = None,
        client_id: str | None = None,
        total_value: object = 0,
        tax_percent: object = 0,
        third_party_expenses: object = 0,
        main_consultant_value: object = 0,
        support_consultant_value: object = None,
        stages: Iterable[Mapping[str, Any]] = (),
    ) -> Project:
        self._validate_project_name(name)
        catalog = self._status_catalog.current()
        self._validate_status(catalog, status)
        project = Project.create(
            name=name.strip(),
            status=status,
            main_consultant_id=main_consultant_id,
            support_consultant_id=support_consultant_id,
            client_id=client_id,
            total_value=self._validate_money(total_value, field_name="Total value"),
            tax_percent=self._validate_tax_percent(tax_percent),
            third_party_expenses=self._validate_money(third_party_expenses, field_name="Third-party expenses"),
            main_consultant_value=self._validate_money(main_consultant_value, field_name="Main consultant value"),
            support_consultant_value=self._validate_money(
                support_consultant_value, field_name="Support consultant value", allow_none=True
            ),
        )
        # validate every stage before anything is written
        for order, raw in enumerate(stages):
            project.stages.append(self._build_stage(project.id, order, **dict(raw)))

        try:
            self._project_repo.add(project)
            for stage in project.stages:
                self._stage_repo.add(stage)
            record_audit(
                self,
                action="project.create",
                entity_type="project",
                entity_id=project.id,
                project_id=project.id,
                details={"name": project.name, "stages": len(project.stages)},
            )
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating project: %s", e)
            raise
        logger.info("Created project %s - %s", project.id, project.name)
        domain_events.project_changed.emit(project.id)
        self._rederive(project, project.stages)
        return project

    def add_stage(
        self,
        project_id: str,
        name: str,
        status: str,
        value: object = 0,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        description: str = "",
        consultant_id: str | None = None,
        consultant_value: object = None,
    ) -> Stage:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND", entity_id=project_id)
        existing = self._stage_repo.list_by_project(project_id)
        stage = self._build_stage(
            project_id,
            len(existing),
            name=name,
            status=status,
            value=value,
            start_date=start_date,
            end_date=end_date,
            description=description,
            consultant_id=consultant_id,
            consultant_value=consultant_value,
        )
        try:
            self._stage_repo.add(stage)
            record_audit(
                self,
                action="stage.add",
                entity_type="stage",
                entity_id=stage.id,
                project_id=project_id,
                details={"name": stage.name, "status": stage.status},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        domain_events.stages_changed.emit(project_id)
        self._rederive(project, [stage])
        return stage

    def update_financials(
        self,
        project_id: str,
        *,
        expected_version: int | None = None,
        **values: object,
    ) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND", entity_id=project_id)
        if expected_version is not None and project.version != expected_version:
            raise ConcurrencyError(
                "Project changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        unknown = set(values) - set(_FINANCIAL_FIELDS)
        if unknown:
            raise TypeError(f"Unknown financial fields: {', '.join(sorted(unknown))}")

        for key, raw in values.items():
            if key == "tax_percent":
                project.tax_percent = self._validate_tax_percent(raw)
            else:
                setattr(
                    project,
                    key,
                    self._validate_money(raw, field_name=key, allow_none=key == "support_consultant_value"),
                )

        try:
            self._project_repo.update(project)
            record_audit(
                self,
                action="project.update_financials",
                entity_type="project",
                entity_id=project.id,
                project_id=project.id,
                details={"net_value": str(project.net_value)},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        domain_events.project_changed.emit(project.id)
        # payable shares and counterparties follow the project operands
        self._rederive(project, self._stage_repo.list_by_project(project.id))
        return project

    def _build_stage(
        self,
        project_id: str,
        order: int,
        *,
        name: str,
        status: str,
        value: object = 0,
        start_date: date | None = None,
        end_date: date | None = None,
        description: str = "",
        consultant_id: str | None = None,
        consultant_value: object = None,
    ) -> Stage:
        self._validate_stage_name(name)
        self._validate_status(self._status_catalog.current(), status)
        self._validate_stage_dates(start_date, end_date)
        stage = Stage.create(
            project_id,
            name.strip(),
            status,
            self._validate_money(value, field_name="Stage value"),
            start_date=start_date,
            end_date=end_date,
            description=(description or "").strip(),
            consultant_id=consultant_id,
            consultant_value=self._validate_money(
                consultant_value, field_name="Consultant value", allow_none=True
            ),
            stage_order=order,
        )
        if self._status_catalog.current().is_completion(status):
            stage.completed = True
            stage.completed_at = datetime.now(timezone.utc)
        return stage

    def _rederive(self, project: Project, stages: Iterable[Stage]) -> None:
        if self._derivation is None:
            return
        for stage in stages:
            self._derivation.derive_from_stage(stage, project)


__all__ = ["ProjectLifecycleMixin"]
