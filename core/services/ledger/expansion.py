from __future__ import annotations

import calendar
from dataclasses import replace
from datetime import date, timedelta
from typing import List

from core.domain.money import ZERO
from core.exceptions import ValidationError
from core.models import RecurrenceInterval, RecurrenceMode, RecurrenceSpec, TransactionIntent
from core.domain.transaction import MAX_OCCURRENCES, MIN_OCCURRENCES


def add_months(base: date, months: int) -> date:
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    day = min(base.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def add_interval(base: date, interval: RecurrenceInterval, steps: int) -> date:
    """``base`` moved forward ``steps`` intervals; month ends are clamped."""
    if interval == RecurrenceInterval.DAILY:
        return base + timedelta(days=steps)
    if interval == RecurrenceInterval.WEEKLY:
        return base + timedelta(weeks=steps)
    if interval == RecurrenceInterval.MONTHLY:
        return add_months(base, steps)
    if interval == RecurrenceInterval.YEARLY:
        return add_months(base, 12 * steps)
    raise ValidationError(f"Unsupported interval: {interval!r}", code="RECURRENCE_INTERVAL_INVALID")


def validate_expansion(intent: TransactionIntent, spec: RecurrenceSpec) -> None:
    if intent.amount is None or intent.amount <= ZERO:
        raise ValidationError("Amount must be greater than zero.", code="AMOUNT_NOT_POSITIVE")
    if intent.due_date is None:
        raise ValidationError("Due date is required.", code="DUE_DATE_REQUIRED")
    if not (intent.description or "").strip():
        raise ValidationError("Description cannot be empty.", code="DESCRIPTION_EMPTY")
    if spec.mode == RecurrenceMode.UNIQUE:
        return
    if not isinstance(spec.occurrences, int) or not (MIN_OCCURRENCES <= spec.occurrences <= MAX_OCCURRENCES):
        raise ValidationError(
            f"Occurrences must be between {MIN_OCCURRENCES} and {MAX_OCCURRENCES}.",
            code="OCCURRENCES_OUT_OF_RANGE",
        )


def expand(intent: TransactionIntent, spec: RecurrenceSpec) -> List[TransactionIntent]:
    """
    Turn one intent into the list of dated instances described by ``spec``.

    Pure: no I/O, same output for the same input. Installments split the
    amount (cents, remainder on the last instance); recurring instances
    repeat it. Instance ``i`` is due at ``due_date + i * interval``.
    """
    validate_expansion(intent, spec)
    if spec.mode == RecurrenceMode.UNIQUE:
        return [intent]

    interval = spec.interval or RecurrenceInterval.MONTHLY
    n = spec.occurrences
    if spec.mode == RecurrenceMode.INSTALLMENT:
        share = spec.amount_per_occurrence(intent.amount)
        amounts = [share] * (n - 1) + [intent.amount - share * (n - 1)]
    else:
        amounts = [intent.amount] * n

    return [
        replace(intent, amount=amounts[i], due_date=add_interval(intent.due_date, interval, i))
        for i in range(n)
    ]


__all__ = ["expand", "add_interval", "add_months", "validate_expansion"]
