from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import FrozenSet, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import InvalidTransitionError, NotFoundError
from core.interfaces import LedgerRepository
from core.models import LedgerEntry, LedgerStatus
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.ledger.policy import LedgerPolicy

logger = logging.getLogger(__name__)

_PENDING_ONLY: FrozenSet[LedgerStatus] = frozenset({LedgerStatus.PENDING})
_DELETED_ONLY: FrozenSet[LedgerStatus] = frozenset({LedgerStatus.DELETED})
_NOT_PENDING: FrozenSet[LedgerStatus] = frozenset(
    {LedgerStatus.PAID, LedgerStatus.RECEIVED, LedgerStatus.CANCELED, LedgerStatus.DELETED}
)


class LedgerStatusMachine:
    """
    Lifecycle of a single payable/receivable row.

        pending -> paid|received, canceled, deleted
        paid|received|canceled|deleted -> pending   (undo)
        deleted -> pending                          (reactivate)

    Every write is a compare-and-set against the status that was read, so a
    row that moved on in the meantime yields ``InvalidTransitionError``
    instead of a lost update. ``delete``, ``reactivate`` and ``undo`` require
    the configured confirmation secret, checked before the row is read.
    """

    def __init__(
        self,
        session: Session,
        ledger_repo: LedgerRepository,
        policy: LedgerPolicy,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._ledger_repo: LedgerRepository = ledger_repo
        self._policy: LedgerPolicy = policy
        self._audit_service: AuditService | None = audit_service

    def mark_paid_or_received(self, entry_id: str, payment_date: date, *, actor_name: str | None = None) -> LedgerEntry:
        entry = self._require(entry_id)
        return self._transition(
            entry,
            action="mark_settled",
            allowed_from=_PENDING_ONLY,
            target=entry.settled_status,
            payment_date=payment_date,
            idempotent=False,
            actor_name=actor_name,
        )

    def cancel(self, entry_id: str, *, actor_name: str | None = None) -> LedgerEntry:
        entry = self._require(entry_id)
        return self._transition(
            entry,
            action="cancel",
            allowed_from=_PENDING_ONLY,
            target=LedgerStatus.CANCELED,
            payment_date=entry.payment_date,
            idempotent=True,
            actor_name=actor_name,
        )

    def delete(self, entry_id: str, confirmation_secret: str | None, *, actor_name: str | None = None) -> LedgerEntry:
        self._policy.confirm(confirmation_secret, action="delete")
        entry = self._require(entry_id)
        return self._transition(
            entry,
            action="delete",
            allowed_from=None,
            target=LedgerStatus.DELETED,
            payment_date=entry.payment_date,
            idempotent=True,
            actor_name=actor_name,
        )

    def reactivate(
        self, entry_id: str, confirmation_secret: str | None, *, actor_name: str | None = None
    ) -> LedgerEntry:
        self._policy.confirm(confirmation_secret, action="reactivate")
        entry = self._require(entry_id)
        return self._transition(
            entry,
            action="reactivate",
            allowed_from=_DELETED_ONLY,
            target=LedgerStatus.PENDING,
            payment_date=None,
            idempotent=True,
            actor_name=actor_name,
        )

    def undo(self, entry_id: str, confirmation_secret: str | None, *, actor_name: str | None = None) -> LedgerEntry:
        # there is no multi-step history: undo always lands on pending
        self._policy.confirm(confirmation_secret, action="undo")
        entry = self._require(entry_id)
        return self._transition(
            entry,
            action="undo",
            allowed_from=_NOT_PENDING,
            target=LedgerStatus.PENDING,
            payment_date=None,
            idempotent=True,
            actor_name=actor_name,
        )

    def _require(self, entry_id: str) -> LedgerEntry:
        entry = self._ledger_repo.get(entry_id)
        if entry is None:
            raise NotFoundError("Ledger entry not found.", code="LEDGER_ENTRY_NOT_FOUND", entity_id=entry_id)
        return entry

    @staticmethod
    def _already_there(entry: LedgerEntry, target: LedgerStatus, payment_date: Optional[date]) -> bool:
        if entry.status != target:
            return False
        return target != LedgerStatus.PENDING or entry.payment_date == payment_date

    def _transition(
        self,
        entry: LedgerEntry,
        *,
        action: str,
        allowed_from: FrozenSet[LedgerStatus] | None,
        target: LedgerStatus,
        payment_date: Optional[date],
        idempotent: bool,
        actor_name: str | None,
    ) -> LedgerEntry:
        if idempotent and self._already_there(entry, target, payment_date):
            return entry
        if allowed_from is not None and entry.status not in allowed_from:
            raise self._invalid(entry, action)

        previous = entry.status
        try:
            applied = self._ledger_repo.transition_status(
                entry,
                expected_status=previous,
                new_status=target,
                payment_date=payment_date,
            )
            if not applied:
                self._session.rollback()
                current = self._require(entry.id)
                if idempotent and self._already_there(current, target, payment_date):
                    return current
                raise self._invalid(current, action)

            record_audit(
                self,
                action=f"ledger.{action}",
                entity_type=entry.entry_type.value,
                entity_id=entry.id,
                project_id=entry.source_ref.project_id,
                actor_name=actor_name,
                details={
                    "from": previous.value,
                    "to": target.value,
                    "payment_date": payment_date.isoformat() if payment_date else None,
                },
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        entry.status = target
        entry.payment_date = payment_date
        entry.updated_at = datetime.now(timezone.utc)
        logger.info("Ledger %s %s: %s -> %s", entry.entry_type.value, entry.id, previous.value, target.value)
        domain_events.ledger_changed.emit(entry.id)
        return entry

    @staticmethod
    def _invalid(entry: LedgerEntry, action: str) -> InvalidTransitionError:
        return InvalidTransitionError(
            f"Cannot {action.replace('_', ' ')} a {entry.status.value} {entry.entry_type.value}.",
            entity_id=entry.id,
            action=action,
            current_status=entry.status.value,
        )


__all__ = ["LedgerStatusMachine"]
