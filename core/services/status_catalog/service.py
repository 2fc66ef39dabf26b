from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import StageRepository, StatusDefinitionRepository
from core.models import StatusDefinition
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.status_catalog.catalog import StatusCatalog

logger = logging.getLogger(__name__)

# (name, display_name, color, is_completion, is_cancellation)
DEFAULT_STATUSES: tuple[tuple[str, str, str, bool, bool], ...] = (
    ("iniciar_projeto", "Iniciar Projeto", "#6b7280", False, False),
    ("em_producao", "Em Produção", "#3b82f6", False, False),
    ("aguardando_aprovacao", "Aguardando Aprovação", "#f97316", False, False),
    ("aguardando_nota_fiscal", "Aguardando Nota Fiscal", "#8b5cf6", False, False),
    ("aguardando_pagamento", "Aguardando Pagamento", "#ec4899", False, False),
    ("aguardando_repasse", "Aguardando Repasse", "#6366f1", False, False),
    ("concluido", "Concluído", "#10b981", True, False),
    ("cancelado", "Cancelado", "#ef4444", False, True),
)


class StatusCatalogService:
    def __init__(
        self,
        session: Session,
        status_repo: StatusDefinitionRepository,
        stage_repo: StageRepository,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._status_repo: StatusDefinitionRepository = status_repo
        self._stage_repo: StageRepository = stage_repo
        self._audit_service: AuditService | None = audit_service
        self._cached: StatusCatalog | None = None

    def load_catalog(self) -> StatusCatalog:
        self._cached = StatusCatalog(self._status_repo.list_ordered())
        return self._cached

    def current(self) -> StatusCatalog:
        """Catalog shared by this service graph; reloaded after local edits."""
        if self._cached is None:
            return self.load_catalog()
        return self._cached

    def list_statuses(self) -> list[StatusDefinition]:
        return self._status_repo.list_ordered()

    def seed_defaults(self) -> int:
        if self._status_repo.list_ordered():
            return 0
        try:
            for index, (name, label, color, done, cancel) in enumerate(DEFAULT_STATUSES):
                self._status_repo.add(
                    StatusDefinition.create(
                        name=name,
                        display_name=label,
                        color=color,
                        is_completion_status=done,
                        is_cancellation_status=cancel,
                        order_index=index,
                    )
                )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._cached = None
        logger.info("Seeded %d default status definitions", len(DEFAULT_STATUSES))
        return len(DEFAULT_STATUSES)

    def add_status(
        self,
        name: str,
        display_name: str,
        *,
        color: str = "#6b7280",
        is_completion_status: bool = False,
        is_cancellation_status: bool = False,
        order_index: int | None = None,
    ) -> StatusDefinition:
        name = self._validate_name(name)
        if self._status_repo.get_by_name(name) is not None:
            raise ValidationError(f"Status '{name}' already exists.", code="STATUS_DUPLICATE")
        if order_index is None:
            order_index = len(self._status_repo.list_ordered())
        definition = StatusDefinition.create(
            name=name,
            display_name=(display_name or "").strip() or name,
            color=color,
            is_completion_status=is_completion_status,
            is_cancellation_status=is_cancellation_status,
            order_index=order_index,
        )
        try:
            self._status_repo.add(definition)
            record_audit(
                self,
                action="status.add",
                entity_type="status_definition",
                entity_id=definition.id,
                details={"name": name, "is_completion_status": is_completion_status},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._cached = None
        domain_events.statuses_changed.emit(name)
        return definition

    def update_status(
        self,
        definition_id: str,
        *,
        display_name: str | None = None,
        color: str | None = None,
        is_completion_status: bool | None = None,
        is_cancellation_status: bool | None = None,
        order_index: int | None = None,
    ) -> StatusDefinition:
        definition = self._require(definition_id)
        self._ensure_not_referenced(definition)
        if display_name is not None:
            definition.display_name = display_name.strip() or definition.name
        if color is not None:
            definition.color = color
        if is_completion_status is not None:
            definition.is_completion_status = is_completion_status
        if is_cancellation_status is not None:
            definition.is_cancellation_status = is_cancellation_status
        if order_index is not None:
            definition.order_index = order_index
        try:
            self._status_repo.update(definition)
            record_audit(
                self,
                action="status.update",
                entity_type="status_definition",
                entity_id=definition.id,
                details={"name": definition.name},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._cached = None
        domain_events.statuses_changed.emit(definition.name)
        return definition

    def remove_status(self, definition_id: str) -> None:
        definition = self._require(definition_id)
        self._ensure_not_referenced(definition)
        try:
            self._status_repo.delete(definition_id)
            record_audit(
                self,
                action="status.remove",
                entity_type="status_definition",
                entity_id=definition_id,
                details={"name": definition.name},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        self._cached = None
        domain_events.statuses_changed.emit(definition.name)

    def _require(self, definition_id: str) -> StatusDefinition:
        definition = self._status_repo.get(definition_id)
        if definition is None:
            raise NotFoundError(
                "Status definition not found.",
                code="STATUS_NOT_FOUND",
                entity_id=definition_id,
            )
        return definition

    def _ensure_not_referenced(self, definition: StatusDefinition) -> None:
        in_use = self._stage_repo.count_with_status(definition.name)
        if in_use:
            raise BusinessRuleError(
                f"Status '{definition.name}' is used by {in_use} stage(s) and cannot change.",
                code="STATUS_IN_USE",
            )

    @staticmethod
    def _validate_name(name: str) -> str:
        cleaned = (name or "").strip()
        if not cleaned:
            raise ValidationError("Status name cannot be empty.", code="STATUS_NAME_EMPTY")
        if " " in cleaned:
            raise ValidationError(
                "Status name must be a single token (use underscores).",
                code="STATUS_NAME_INVALID",
            )
        return cleaned


__all__ = ["StatusCatalogService", "DEFAULT_STATUSES"]
