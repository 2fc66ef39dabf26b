from __future__ import annotations

from enum import Enum


class LedgerEntryType(str, Enum):
    PAYABLE = "payable"
    RECEIVABLE = "receivable"


class LedgerStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    RECEIVED = "received"
    CANCELED = "canceled"
    DELETED = "deleted"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    RECEIVED = "received"
    CANCELED = "canceled"


class RecurrenceMode(str, Enum):
    UNIQUE = "unique"
    RECURRING = "recurring"
    INSTALLMENT = "installment"


class RecurrenceInterval(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


__all__ = [
    "LedgerEntryType",
    "LedgerStatus",
    "TransactionType",
    "TransactionStatus",
    "RecurrenceMode",
    "RecurrenceInterval",
]
