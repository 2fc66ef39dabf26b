from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from core.domain.identifiers import generate_id

DEFAULT_CHANGED_BY = "Sistema"


@dataclass(frozen=True)
class StageHistoryEntry:
    id: str
    stage_id: str
    project_id: str
    status: str
    changed_at: datetime
    previous_status: str | None = None
    changed_by: str = DEFAULT_CHANGED_BY

    @staticmethod
    def create(
        stage_id: str,
        project_id: str,
        status: str,
        *,
        previous_status: str | None = None,
        changed_by: str | None = None,
    ) -> "StageHistoryEntry":
        return StageHistoryEntry(
            id=generate_id(),
            stage_id=stage_id,
            project_id=project_id,
            status=status,
            changed_at=datetime.now(timezone.utc),
            previous_status=previous_status,
            changed_by=(changed_by or "").strip() or DEFAULT_CHANGED_BY,
        )


__all__ = ["StageHistoryEntry", "DEFAULT_CHANGED_BY"]
