from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from core.domain.money import ZERO, as_money
from core.events.domain_events import domain_events
from core.exceptions import DomainError, NotFoundError, ValidationError
from core.interfaces import (
    LedgerRepository,
    ManualTransactionRepository,
    ProjectRepository,
    StageRepository,
)
from core.models import (
    LedgerEntry,
    LedgerEntryType,
    LedgerStatus,
    ManualTransaction,
    Project,
    RecurrenceSpec,
    SourceRef,
    Stage,
    TransactionIntent,
    TransactionStatus,
    TransactionType,
)
from core.services.audit.helpers import record_audit
from core.services.audit.service import AuditService
from core.services.ledger.expansion import expand
from core.services.ledger.models import DerivationResult, InstanceResult
from core.services.ledger.policy import LedgerPolicy
from core.services.status_catalog.service import StatusCatalogService

logger = logging.getLogger(__name__)


class LedgerDerivationService:
    """
    Creates and refreshes payable/receivable rows from stages and manual transactions.

    Rows are correlated with their source by ``SourceRef`` only. An existing
    row gets its amount, due date, description and counterparty refreshed;
    status and payment date belong to the status machine and are never
    written here.
    """

    def __init__(
        self,
        session: Session,
        ledger_repo: LedgerRepository,
        stage_repo: StageRepository,
        project_repo: ProjectRepository,
        transaction_repo: ManualTransactionRepository,
        status_catalog: StatusCatalogService,
        policy: LedgerPolicy,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._ledger_repo: LedgerRepository = ledger_repo
        self._stage_repo: StageRepository = stage_repo
        self._project_repo: ProjectRepository = project_repo
        self._transaction_repo: ManualTransactionRepository = transaction_repo
        self._status_catalog: StatusCatalogService = status_catalog
        self._policy: LedgerPolicy = policy
        self._audit_service: AuditService | None = audit_service

    # ---- stages -------------------------------------------------------

    def derive_for_stage_id(self, stage_id: str) -> DerivationResult:
        stage = self._stage_repo.get(stage_id)
        if not stage:
            raise NotFoundError("Stage not found.", code="STAGE_NOT_FOUND", entity_id=stage_id)
        project = self._project_repo.get(stage.project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND", entity_id=stage.project_id)
        return self.derive_from_stage(stage, project)

    def derive_from_stage(self, stage: Stage, project: Project) -> DerivationResult:
        try:
            result = self._derive_stage_rows(stage, project)
            self._session.commit()
        except IntegrityError:
            # a concurrent derivation inserted the same row first; the retry updates it
            self._session.rollback()
            logger.info("Retrying derivation for stage %s after a concurrent insert", stage.id)
            try:
                result = self._derive_stage_rows(stage, project)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise
        except Exception:
            self._session.rollback()
            raise

        if result.created or result.updated:
            logger.info(
                "Derived ledger rows for stage %s (created=%d, updated=%d)",
                stage.id,
                len(result.created),
                len(result.updated),
            )
            for entry_id in result.created + result.updated:
                domain_events.ledger_changed.emit(entry_id)
        return result

    def _derive_stage_rows(self, stage: Stage, project: Project) -> DerivationResult:
        catalog = self._status_catalog.current()
        ref = SourceRef.for_stage(stage.id, project.id)
        due = stage.end_date or stage.start_date or date.today()
        description = f"{project.name} - {stage.name}"
        result = DerivationResult()

        if self._policy.requires_receivable(stage.status, catalog):
            result.receivable = self._upsert(
                result,
                LedgerEntryType.RECEIVABLE,
                ref,
                amount=self._policy.receivable_amount(stage),
                due_date=due,
                description=description,
                client_id=project.client_id,
            )
        if self._policy.requires_payable(stage.status, catalog):
            result.payable = self._upsert(
                result,
                LedgerEntryType.PAYABLE,
                ref,
                amount=self._policy.payable_amount(stage, project),
                due_date=due,
                description=description,
                consultant_id=self._policy.payable_consultant(stage, project),
            )
        return result

    # ---- manual transactions -----------------------------------------

    def derive_from_manual_transaction(self, tx: ManualTransaction) -> LedgerEntry | None:
        self._validate_instance(tx)
        result = DerivationResult()
        try:
            entry = self._derive_transaction_row(result, tx)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        for entry_id in result.created + result.updated:
            domain_events.ledger_changed.emit(entry_id)
        return entry

    def submit_transaction(
        self,
        intent: TransactionIntent,
        spec: RecurrenceSpec | None = None,
        *,
        actor_name: str | None = None,
    ) -> List[InstanceResult]:
        """
        Expand, persist and derive every occurrence of ``intent``.

        Validation of the intent and the recurrence happens before anything is
        written. After that each occurrence is its own unit of work: a failing
        occurrence is rolled back and reported, the others are kept.
        """
        spec = spec or RecurrenceSpec.unique()
        instances = expand(intent, spec)
        total = len(instances)
        results: List[InstanceResult] = []

        for position, instance in enumerate(instances, start=1):
            tx = ManualTransaction.from_intent(
                instance,
                spec=spec,
                current_installment=position if total > 1 else None,
            )
            try:
                self._validate_instance(tx)
                self._transaction_repo.add(tx)
                entry = self._derive_transaction_row(DerivationResult(), tx)
                record_audit(
                    self,
                    action="transaction.submit",
                    entity_type="manual_transaction",
                    entity_id=tx.id,
                    project_id=tx.project_id,
                    actor_name=actor_name,
                    details={
                        "type": tx.type.value,
                        "amount": str(tx.amount),
                        "occurrence": f"{position}/{total}",
                        "recurrence": tx.recurrence_tag,
                    },
                )
                self._session.commit()
            except (DomainError, SQLAlchemyError) as exc:
                self._session.rollback()
                logger.warning("Occurrence %d/%d of '%s' failed: %s", position, total, intent.description, exc)
                results.append(
                    InstanceResult(
                        index=position,
                        ok=False,
                        transaction_id=None,
                        error_code=getattr(exc, "code", exc.__class__.__name__),
                        error=str(exc),
                    )
                )
                continue

            results.append(
                InstanceResult(
                    index=position,
                    ok=True,
                    transaction_id=tx.id,
                    entry_id=entry.id if entry is not None else None,
                )
            )
            if entry is not None:
                domain_events.ledger_changed.emit(entry.id)

        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Submitted '%s' as %d occurrence(s): %d ok, %d failed",
            intent.description,
            total,
            total - failed,
            failed,
        )
        return results

    def update_manual_transaction(
        self,
        tx_id: str,
        *,
        description: str | None = None,
        amount: object = None,
        due_date: date | None = None,
        client_id: str | None = None,
        consultant_id: str | None = None,
        project_id: str | None = None,
    ) -> ManualTransaction:
        tx = self._transaction_repo.get(tx_id)
        if not tx:
            raise NotFoundError("Transaction not found.", code="TRANSACTION_NOT_FOUND", entity_id=tx_id)

        if description is not None:
            tx.description = description.strip()
        if amount is not None:
            try:
                tx.amount = as_money(amount)
            except ValueError as exc:
                raise ValidationError("Amount is not valid.", code="AMOUNT_INVALID") from exc
        if due_date is not None:
            tx.due_date = due_date
        if client_id is not None:
            tx.client_id = client_id or None
        if consultant_id is not None:
            tx.consultant_id = consultant_id or None
        if project_id is not None:
            tx.project_id = project_id or None
        self._validate_instance(tx)

        result = DerivationResult()
        try:
            self._transaction_repo.update(tx)
            self._derive_transaction_row(result, tx)
            record_audit(
                self,
                action="transaction.update",
                entity_type="manual_transaction",
                entity_id=tx.id,
                project_id=tx.project_id,
                details={"amount": str(tx.amount), "due_date": tx.due_date.isoformat()},
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        for entry_id in result.created + result.updated:
            domain_events.ledger_changed.emit(entry_id)
        return tx

    def _derive_transaction_row(self, result: DerivationResult, tx: ManualTransaction) -> LedgerEntry | None:
        ref = SourceRef.for_transaction(tx.id, tx.project_id)
        if tx.type == TransactionType.INCOME:
            settled = tx.status == TransactionStatus.RECEIVED
            entry = self._upsert(
                result,
                LedgerEntryType.RECEIVABLE,
                ref,
                amount=tx.amount,
                due_date=tx.due_date,
                description=tx.ledger_description,
                client_id=tx.client_id,
                initial_status=LedgerStatus.RECEIVED if settled else LedgerStatus.PENDING,
                initial_payment_date=(tx.payment_date or tx.due_date) if settled else None,
            )
            result.receivable = entry
        else:
            settled = tx.status == TransactionStatus.PAID
            entry = self._upsert(
                result,
                LedgerEntryType.PAYABLE,
                ref,
                amount=tx.amount,
                due_date=tx.due_date,
                description=tx.ledger_description,
                consultant_id=tx.consultant_id,
                initial_status=LedgerStatus.PAID if settled else LedgerStatus.PENDING,
                initial_payment_date=(tx.payment_date or tx.due_date) if settled else None,
            )
            result.payable = entry
        return entry

    # ---- shared -------------------------------------------------------

    def _upsert(
        self,
        result: DerivationResult,
        entry_type: LedgerEntryType,
        ref: SourceRef,
        *,
        amount: Decimal,
        due_date: date,
        description: str,
        client_id: str | None = None,
        consultant_id: str | None = None,
        initial_status: LedgerStatus = LedgerStatus.PENDING,
        initial_payment_date: date | None = None,
    ) -> LedgerEntry | None:
        existing = self._ledger_repo.find_by_source(entry_type, ref)
        if existing is not None:
            if (
                existing.amount == amount
                and existing.due_date == due_date
                and existing.description == description
                and existing.client_id == client_id
                and existing.consultant_id == consultant_id
            ):
                return existing
            existing.amount = amount
            existing.due_date = due_date
            existing.description = description
            existing.client_id = client_id
            existing.consultant_id = consultant_id
            self._ledger_repo.update_derived_fields(existing)
            result.updated.append(existing.id)
            return existing

        if amount <= ZERO:
            return None
        entry = LedgerEntry.create(
            entry_type,
            description,
            amount,
            due_date,
            ref,
            status=initial_status,
            payment_date=initial_payment_date,
            client_id=client_id,
            consultant_id=consultant_id,
        )
        self._ledger_repo.add(entry)
        result.created.append(entry.id)
        return entry

    @staticmethod
    def _validate_instance(tx: ManualTransaction) -> None:
        if tx.amount is None or tx.amount <= ZERO:
            raise ValidationError("Amount must be greater than zero.", code="AMOUNT_NOT_POSITIVE")
        if not (tx.description or "").strip():
            raise ValidationError("Description cannot be empty.", code="DESCRIPTION_EMPTY")
        if tx.due_date is None:
            raise ValidationError("Due date is required.", code="DUE_DATE_REQUIRED")


__all__ = ["LedgerDerivationService"]
