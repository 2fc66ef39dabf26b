from .aggregator import (
    accounts_history,
    bucket,
    filter_entries,
    overdue_stages,
    summarize,
    summarize_period,
)
from .cashflow import build_period_cashflow
from .models import CashflowPeriodRow, FinancialSnapshot, FinancialSummary
from .service import FinancialService

__all__ = [
    "FinancialService",
    "FinancialSummary",
    "FinancialSnapshot",
    "CashflowPeriodRow",
    "summarize",
    "summarize_period",
    "filter_entries",
    "overdue_stages",
    "bucket",
    "accounts_history",
    "build_period_cashflow",
]
