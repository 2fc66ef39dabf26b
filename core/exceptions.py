# core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""
    def __init__(self, message: str, *, code: str | None = None, entity_id: str | None = None):
        super().__init__(message, code=code)
        self.entity_id = entity_id


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., editing a status in use)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""


class InvalidTransitionError(DomainError):
    """Raised when a ledger entry is not in a state the requested action accepts."""
    def __init__(
        self,
        message: str,
        *,
        entity_id: str,
        action: str,
        current_status: str | None,
        code: str | None = None,
    ):
        super().__init__(message, code=code or "LEDGER_INVALID_TRANSITION")
        self.entity_id = entity_id
        self.action = action
        self.current_status = current_status


class UnauthorizedError(DomainError):
    """Raised when a confirmation secret does not match the configured value."""
