from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from core.models import LedgerEntry


@dataclass
class DerivationResult:
    receivable: Optional[LedgerEntry] = None
    payable: Optional[LedgerEntry] = None
    created: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)

    @property
    def entries(self) -> List[LedgerEntry]:
        return [entry for entry in (self.receivable, self.payable) if entry is not None]


@dataclass(frozen=True)
class InstanceResult:
    """Outcome of one expanded occurrence; ``index`` is 1-based."""

    index: int
    ok: bool
    transaction_id: Optional[str] = None
    entry_id: Optional[str] = None
    error_code: Optional[str] = None
    error: Optional[str] = None


__all__ = ["DerivationResult", "InstanceResult"]
