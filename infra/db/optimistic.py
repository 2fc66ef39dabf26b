from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError


def update_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    values: dict[str, Any],
    *,
    not_found_message: str,
    stale_message: str,
) -> int:
    next_version = int(expected_version) + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.version == expected_version)
        .values(**values, version=next_version)
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return next_version

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message, entity_id=row_id)
    raise ConcurrencyError(stale_message, code="STALE_WRITE")


def update_with_status_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_status: Any,
    values: dict[str, Any],
) -> bool:
    """Compare-and-set on ``status``; False when the stored row no longer matches."""
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.status == expected_status)
        .values(**values)
    )
    result = session.execute(stmt)
    return result.rowcount == 1


__all__ = ["update_with_version_check", "update_with_status_check"]
