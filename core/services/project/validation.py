from __future__ import annotations

from datetime import date
from decimal import Decimal

from core.exceptions import ValidationError
from core.interfaces import ProjectRepository
from core.domain.money import as_money
from core.services.status_catalog.catalog import StatusCatalog


class ProjectValidationMixin:
    _project_repo: ProjectRepository

    def _validate_project_name(self, name: str, *, ignore_id: str | None = None) -> None:
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")
        if len(name.strip()) < 3:
            raise ValidationError("Project name must be at least 3 characters.", code="PROJECT_NAME_TOO_SHORT")

        for project in self._project_repo.list_all():
            if project.id == ignore_id:
                continue
            if project.name.strip().lower() == name.strip().lower():
                raise ValidationError("A project with this name already exists.", code="PROJECT_NAME_DUPLICATE")

    def _validate_status(self, catalog: StatusCatalog, status: str) -> None:
        if not status or not status.strip():
            raise ValidationError("Status cannot be empty.", code="STATUS_EMPTY")
        # an empty catalog accepts anything so the default completion name keeps working
        if len(catalog) and status not in catalog:
            raise ValidationError(f"Unknown status '{status}'.", code="STATUS_UNKNOWN")

    def _validate_money(self, value: object, *, field_name: str, allow_none: bool = False) -> Decimal | None:
        if value is None and allow_none:
            return None
        try:
            amount = as_money(value)
        except ValueError as exc:
            raise ValidationError(f"{field_name} is not a valid amount.", code="MONEY_INVALID") from exc
        if amount < 0:
            raise ValidationError(f"{field_name} cannot be negative.", code="MONEY_NEGATIVE")
        return amount

    def _validate_tax_percent(self, value: object) -> Decimal:
        percent = self._validate_money(value, field_name="Tax percent")
        if percent > 100:
            raise ValidationError("Tax percent cannot exceed 100.", code="TAX_PERCENT_INVALID")
        return percent

    def _validate_stage_dates(self, start_date: date | None, end_date: date | None) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError(
                f"Stage end date ({end_date}) cannot be before start date ({start_date}).",
                code="STAGE_INVALID_DATES",
            )

    def _validate_stage_name(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Stage name cannot be empty.", code="STAGE_NAME_EMPTY")


__all__ = ["ProjectValidationMixin"]
