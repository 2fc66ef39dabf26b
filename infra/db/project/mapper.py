from __future__ import annotations

from decimal import Decimal

from core.models import Project, Stage
from infra.db.models import ProjectORM, StageORM

_ZERO = Decimal("0")


def project_to_orm(project: Project) -> ProjectORM:
    return ProjectORM(
        id=project.id,
        name=project.name,
        status=project.status,
        main_consultant_id=project.main_consultant_id,
        support_consultant_id=project.support_consultant_id,
        client_id=project.client_id,
        total_value=project.total_value,
        tax_percent=project.tax_percent,
        third_party_expenses=project.third_party_expenses,
        main_consultant_value=project.main_consultant_value,
        support_consultant_value=project.support_consultant_value,
        version=getattr(project, "version", 1),
    )


def project_from_orm(obj: ProjectORM, stages: list[Stage] | None = None) -> Project:
    return Project(
        id=obj.id,
        name=obj.name,
        status=obj.status,
        main_consultant_id=obj.main_consultant_id,
        support_consultant_id=obj.support_consultant_id,
        client_id=obj.client_id,
        total_value=obj.total_value if obj.total_value is not None else _ZERO,
        tax_percent=obj.tax_percent if obj.tax_percent is not None else _ZERO,
        third_party_expenses=obj.third_party_expenses if obj.third_party_expenses is not None else _ZERO,
        main_consultant_value=obj.main_consultant_value if obj.main_consultant_value is not None else _ZERO,
        support_consultant_value=obj.support_consultant_value,
        stages=list(stages or []),
        version=getattr(obj, "version", 1),
    )


def stage_to_orm(stage: Stage) -> StageORM:
    return StageORM(
        id=stage.id,
        project_id=stage.project_id,
        name=stage.name,
        status=stage.status,
        stage_order=stage.stage_order,
        value=stage.value,
        start_date=stage.start_date,
        end_date=stage.end_date,
        description=stage.description,
        consultant_id=stage.consultant_id,
        consultant_value=stage.consultant_value,
        completed=stage.completed,
        completed_at=stage.completed_at,
        client_approved=stage.client_approved,
        invoice_issued=stage.invoice_issued,
        payment_received=stage.payment_received,
        consultants_settled=stage.consultants_settled,
        consultant_paid=stage.consultant_paid,
    )


def stage_from_orm(obj: StageORM) -> Stage:
    return Stage(
        id=obj.id,
        project_id=obj.project_id,
        name=obj.name,
        status=obj.status,
        value=obj.value if obj.value is not None else _ZERO,
        start_date=obj.start_date,
        end_date=obj.end_date,
        description=obj.description or "",
        consultant_id=obj.consultant_id,
        consultant_value=obj.consultant_value,
        completed=bool(obj.completed),
        completed_at=obj.completed_at,
        client_approved=bool(obj.client_approved),
        invoice_issued=bool(obj.invoice_issued),
        payment_received=bool(obj.payment_received),
        consultants_settled=bool(obj.consultants_settled),
        consultant_paid=bool(obj.consultant_paid),
        stage_order=obj.stage_order,
    )


__all__ = ["project_to_orm", "project_from_orm", "stage_to_orm", "stage_from_orm"]
