from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal

from core.domain.money import ZERO, quantize_cents
from core.exceptions import UnauthorizedError
from core.models import Project, Stage
from core.services.status_catalog.catalog import StatusCatalog

logger = logging.getLogger(__name__)

DEFAULT_RECEIVABLE_STATUSES = frozenset({"aguardando_pagamento", "aguardando_repasse"})
DEFAULT_PAYABLE_STATUSES = frozenset({"aguardando_repasse"})


def _status_set(raw: str | None, default: frozenset[str]) -> frozenset[str]:
    raw = (raw or "").strip()
    if not raw:
        return default
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class LedgerPolicy:
    """
    Ledger rules read from the environment once and injected into services.

    The confirmation secret is a shared plaintext value compared for exact
    equality. It is a low-assurance gate against accidental clicks, not an
    authentication mechanism. With no secret configured every guarded action
    is refused.
    """

    confirmation_secret: str | None = field(default=None, repr=False)
    receivable_statuses: frozenset[str] = DEFAULT_RECEIVABLE_STATUSES
    payable_statuses: frozenset[str] = DEFAULT_PAYABLE_STATUSES

    @staticmethod
    def from_env() -> "LedgerPolicy":
        secret = os.getenv("LEDGER_CONFIRMATION_SECRET")
        if not secret:
            logger.warning("LEDGER_CONFIRMATION_SECRET is not set; delete/reactivate/undo are disabled.")
        return LedgerPolicy(
            confirmation_secret=secret or None,
            receivable_statuses=_status_set(
                os.getenv("LEDGER_RECEIVABLE_STATUSES"), DEFAULT_RECEIVABLE_STATUSES
            ),
            payable_statuses=_status_set(os.getenv("LEDGER_PAYABLE_STATUSES"), DEFAULT_PAYABLE_STATUSES),
        )

    def confirm(self, supplied: str | None, *, action: str) -> None:
        if not self.confirmation_secret or supplied != self.confirmation_secret:
            logger.warning("Confirmation secret rejected for ledger action %s", action)
            raise UnauthorizedError(
                "Confirmation secret does not match.",
                code="LEDGER_SECRET_MISMATCH",
            )

    def requires_receivable(self, status: str, catalog: StatusCatalog) -> bool:
        if catalog.is_cancellation(status):
            return False
        return status in self.receivable_statuses or catalog.is_completion(status)

    def requires_payable(self, status: str, catalog: StatusCatalog) -> bool:
        if catalog.is_cancellation(status):
            return False
        return status in self.payable_statuses or catalog.is_completion(status)

    @staticmethod
    def receivable_amount(stage: Stage) -> Decimal:
        return quantize_cents(stage.value or ZERO)

    @staticmethod
    def payable_amount(stage: Stage, project: Project) -> Decimal:
        if stage.consultant_value is not None:
            return quantize_cents(stage.consultant_value)
        if not project.total_value or project.total_value <= 0:
            return ZERO
        share = (project.main_consultant_value or ZERO) * (stage.value or ZERO) / project.total_value
        return quantize_cents(share)

    @staticmethod
    def payable_consultant(stage: Stage, project: Project) -> str | None:
        return stage.consultant_id or project.main_consultant_id


__all__ = ["LedgerPolicy", "DEFAULT_RECEIVABLE_STATUSES", "DEFAULT_PAYABLE_STATUSES"]
