from __future__ import annotations

from core.models import StageHistoryEntry
from infra.db.models import StageHistoryORM


def history_to_orm(entry: StageHistoryEntry) -> StageHistoryORM:
    return StageHistoryORM(
        id=entry.id,
        stage_id=entry.stage_id,
        project_id=entry.project_id,
        status=entry.status,
        previous_status=entry.previous_status,
        changed_by=entry.changed_by,
        changed_at=entry.changed_at,
    )


def history_from_orm(obj: StageHistoryORM) -> StageHistoryEntry:
    return StageHistoryEntry(
        id=obj.id,
        stage_id=obj.stage_id,
        project_id=obj.project_id,
        status=obj.status,
        changed_at=obj.changed_at,
        previous_status=obj.previous_status,
        changed_by=obj.changed_by,
    )


__all__ = ["history_to_orm", "history_from_orm"]
