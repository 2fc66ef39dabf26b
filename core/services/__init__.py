from .audit import AuditService
from .financial import FinancialService, FinancialSnapshot, FinancialSummary, CashflowPeriodRow
from .ledger import LedgerDerivationService, LedgerPolicy, LedgerStatusMachine, InstanceResult, DerivationResult
from .project import ProjectService
from .stage import StageLifecycleService, StageProgress
from .status_catalog import StatusCatalog, StatusCatalogService

__all__ = [
    "AuditService",
    "StatusCatalog",
    "StatusCatalogService",
    "ProjectService",
    "StageLifecycleService",
    "StageProgress",
    "LedgerPolicy",
    "LedgerDerivationService",
    "LedgerStatusMachine",
    "DerivationResult",
    "InstanceResult",
    "FinancialService",
    "FinancialSummary",
    "FinancialSnapshot",
    "CashflowPeriodRow",
]
