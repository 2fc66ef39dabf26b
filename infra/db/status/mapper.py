from __future__ import annotations

from core.models import StatusDefinition
from infra.db.models import StatusDefinitionORM


def status_to_orm(definition: StatusDefinition) -> StatusDefinitionORM:
    return StatusDefinitionORM(
        id=definition.id,
        name=definition.name,
        display_name=definition.display_name,
        color=definition.color,
        is_completion_status=definition.is_completion_status,
        is_cancellation_status=definition.is_cancellation_status,
        order_index=definition.order_index,
    )


def status_from_orm(obj: StatusDefinitionORM) -> StatusDefinition:
    return StatusDefinition(
        id=obj.id,
        name=obj.name,
        display_name=obj.display_name,
        color=obj.color,
        is_completion_status=bool(obj.is_completion_status),
        is_cancellation_status=bool(obj.is_cancellation_status),
        order_index=obj.order_index,
    )


__all__ = ["status_to_orm", "status_from_orm"]
