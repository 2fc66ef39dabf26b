from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable

from core.domain.money import ZERO
from core.models import LedgerEntry, LedgerEntryType, LedgerStatus
from core.services.financial.helpers import normalize_period, period_bounds
from core.services.financial.models import CashflowPeriodRow


def build_period_cashflow(
    *,
    entries: Iterable[LedgerEntry],
    period: str = "month",
    as_of: date | None = None,
) -> list[CashflowPeriodRow]:
    normalized_period = normalize_period(period)
    buckets: dict[str, dict[str, object]] = {}
    for entry in entries:
        if not entry.is_active:
            continue
        settled = entry.status in (LedgerStatus.PAID, LedgerStatus.RECEIVED)
        anchor = (entry.payment_date if settled else None) or entry.due_date or as_of or date.today()
        period_key, start, end = period_bounds(anchor, normalized_period)
        bucket = buckets.get(period_key)
        if bucket is None:
            bucket = {
                "period_key": period_key,
                "period_start": start,
                "period_end": end,
                "receivable_expected": ZERO,
                "receivable_settled": ZERO,
                "payable_expected": ZERO,
                "payable_settled": ZERO,
            }
            buckets[period_key] = bucket
        side = "receivable" if entry.entry_type == LedgerEntryType.RECEIVABLE else "payable"
        bucket[f"{side}_expected"] = Decimal(bucket[f"{side}_expected"]) + entry.amount
        if settled:
            bucket[f"{side}_settled"] = Decimal(bucket[f"{side}_settled"]) + entry.amount

    out: list[CashflowPeriodRow] = []
    for row in sorted(buckets.values(), key=lambda item: item["period_start"]):
        out.append(
            CashflowPeriodRow(
                period_key=str(row["period_key"]),
                period_start=row["period_start"],  # type: ignore[arg-type]
                period_end=row["period_end"],  # type: ignore[arg-type]
                receivable_expected=row["receivable_expected"],  # type: ignore[arg-type]
                receivable_settled=row["receivable_settled"],  # type: ignore[arg-type]
                payable_expected=row["payable_expected"],  # type: ignore[arg-type]
                payable_settled=row["payable_settled"],  # type: ignore[arg-type]
            )
        )
    return out


__all__ = ["build_period_cashflow"]
