from core.services.ledger.derivation import LedgerDerivationService
from core.services.ledger.expansion import add_interval, expand
from core.services.ledger.models import DerivationResult, InstanceResult
from core.services.ledger.policy import LedgerPolicy
from core.services.ledger.status_machine import LedgerStatusMachine

__all__ = [
    "LedgerDerivationService",
    "LedgerStatusMachine",
    "LedgerPolicy",
    "DerivationResult",
    "InstanceResult",
    "expand",
    "add_interval",
]
