from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from core.interfaces import ProjectRepository, StageRepository
from core.models import Project, Stage
from infra.db.models import ProjectORM, StageORM
from infra.db.optimistic import update_with_version_check
from infra.db.project.mapper import (
    project_from_orm,
    project_to_orm,
    stage_from_orm,
    stage_to_orm,
)


class SqlAlchemyProjectRepository(ProjectRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, project: Project) -> None:
        self.session.add(project_to_orm(project))

    def update(self, project: Project) -> None:
        project.version = update_with_version_check(
            self.session,
            ProjectORM,
            project.id,
            getattr(project, "version", 1),
            {
                "name": project.name,
                "status": project.status,
                "main_consultant_id": project.main_consultant_id,
                "support_consultant_id": project.support_consultant_id,
                "client_id": project.client_id,
                "total_value": project.total_value,
                "tax_percent": project.tax_percent,
                "third_party_expenses": project.third_party_expenses,
                "main_consultant_value": project.main_consultant_value,
                "support_consultant_value": project.support_consultant_value,
            },
            not_found_message="Project not found.",
            stale_message="Project was updated by another user.",
        )

    def get(self, project_id: str) -> Optional[Project]:
        obj = self.session.get(ProjectORM, project_id)
        if not obj:
            return None
        return project_from_orm(obj, self._stages_for([project_id]).get(project_id, []))

    def list_all(self) -> List[Project]:
        rows = self.session.execute(select(ProjectORM).order_by(ProjectORM.name)).scalars().all()
        stages = self._stages_for([row.id for row in rows])
        return [project_from_orm(row, stages.get(row.id, [])) for row in rows]

    def _stages_for(self, project_ids: list[str]) -> dict[str, list[Stage]]:
        if not project_ids:
            return {}
        stmt = (
            select(StageORM)
            .where(StageORM.project_id.in_(project_ids))
            .order_by(StageORM.project_id, StageORM.stage_order)
        )
        out: dict[str, list[Stage]] = {}
        for row in self.session.execute(stmt).scalars():
            out.setdefault(row.project_id, []).append(stage_from_orm(row))
        return out


class SqlAlchemyStageRepository(StageRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, stage: Stage) -> None:
        self.session.add(stage_to_orm(stage))

    def update(self, stage: Stage) -> None:
        self.session.merge(stage_to_orm(stage))

    def get(self, stage_id: str) -> Optional[Stage]:
        obj = self.session.get(StageORM, stage_id)
        return stage_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[Stage]:
        stmt = select(StageORM).where(StageORM.project_id == project_id).order_by(StageORM.stage_order)
        return [stage_from_orm(row) for row in self.session.execute(stmt).scalars()]

    def count_with_status(self, status: str) -> int:
        stmt = select(func.count()).select_from(StageORM).where(StageORM.status == status)
        return int(self.session.execute(stmt).scalar_one())


__all__ = ["SqlAlchemyProjectRepository", "SqlAlchemyStageRepository"]
