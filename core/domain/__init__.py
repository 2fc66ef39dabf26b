from core.domain.audit import AuditLogEntry
from core.domain.enums import (
    LedgerEntryType,
    LedgerStatus,
    RecurrenceInterval,
    RecurrenceMode,
    TransactionStatus,
    TransactionType,
)
from core.domain.history import StageHistoryEntry
from core.domain.identifiers import generate_id
from core.domain.ledger import LedgerEntry, SourceRef
from core.domain.project import Project, Stage
from core.domain.status import StatusDefinition, StatusDisplay
from core.domain.transaction import ManualTransaction, RecurrenceSpec, TransactionIntent

__all__ = [
    "generate_id",
    "LedgerEntryType",
    "LedgerStatus",
    "TransactionType",
    "TransactionStatus",
    "RecurrenceMode",
    "RecurrenceInterval",
    "StatusDefinition",
    "StatusDisplay",
    "Project",
    "Stage",
    "StageHistoryEntry",
    "LedgerEntry",
    "SourceRef",
    "TransactionIntent",
    "RecurrenceSpec",
    "ManualTransaction",
    "AuditLogEntry",
]
