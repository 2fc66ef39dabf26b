from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta

PERIOD_SCOPES = ("month", "year", "general")


def normalize_period(value: str) -> str:
    token = (value or "").strip().lower()
    if token in {"week", "weekly"}:
        return "week"
    return "month"


def normalize_scope(value: str) -> str:
    token = (value or "").strip().lower()
    if token in {"month", "monthly", "mes"}:
        return "month"
    if token in {"year", "yearly", "ano"}:
        return "year"
    return "general"


def period_bounds(anchor: date, period: str) -> tuple[str, date, date]:
    if period == "week":
        start = anchor - timedelta(days=anchor.weekday())
        end = start + timedelta(days=6)
        iso = start.isocalendar()
        return f"{iso[0]}-W{iso[1]:02d}", start, end

    last_day = monthrange(anchor.year, anchor.month)[1]
    start = date(anchor.year, anchor.month, 1)
    end = date(anchor.year, anchor.month, last_day)
    return f"{anchor.year}-{anchor.month:02d}", start, end


def in_scope(day: date | None, scope: str, anchor: date) -> bool:
    if scope == "general":
        return True
    if day is None:
        return False
    if scope == "year":
        return day.year == anchor.year
    return day.year == anchor.year and day.month == anchor.month


def as_date(value: date | datetime | None) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    return value


__all__ = [
    "PERIOD_SCOPES",
    "normalize_period",
    "normalize_scope",
    "period_bounds",
    "in_scope",
    "as_date",
]
