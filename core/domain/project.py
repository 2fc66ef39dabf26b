from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from core.domain.identifiers import generate_id
from core.domain.money import ZERO, as_money


@dataclass
class Stage:
    id: str
    project_id: str
    name: str
    status: str
    value: Decimal = ZERO
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    description: str = ""
    consultant_id: Optional[str] = None
    consultant_value: Optional[Decimal] = None
    completed: bool = False
    completed_at: Optional[datetime] = None
    client_approved: bool = False
    invoice_issued: bool = False
    payment_received: bool = False
    consultants_settled: bool = False
    consultant_paid: bool = False
    stage_order: int = 0

    @staticmethod
    def create(
        project_id: str,
        name: str,
        status: str,
        value: object = ZERO,
        **extra,
    ) -> "Stage":
        consultant_value = extra.pop("consultant_value", None)
        return Stage(
            id=generate_id(),
            project_id=project_id,
            name=name,
            status=status,
            value=as_money(value),
            consultant_value=None if consultant_value is None else as_money(consultant_value),
            **extra,
        )


@dataclass
class Project:
    id: str
    name: str
    status: str
    main_consultant_id: Optional[str] = None
    support_consultant_id: Optional[str] = None
    client_id: Optional[str] = None
    total_value: Decimal = ZERO
    tax_percent: Decimal = ZERO
    third_party_expenses: Decimal = ZERO
    main_consultant_value: Decimal = ZERO
    support_consultant_value: Optional[Decimal] = None
    stages: List[Stage] = field(default_factory=list)
    version: int = 1

    @property
    def net_value(self) -> Decimal:
        """Always derived from the financial operands, never stored."""
        tax = self.total_value * self.tax_percent / Decimal(100)
        return (
            self.total_value
            - tax
            - self.third_party_expenses
            - self.main_consultant_value
            - (self.support_consultant_value or ZERO)
        )

    @staticmethod
    def create(name: str, status: str, **extra) -> "Project":
        for key in (
            "total_value",
            "tax_percent",
            "third_party_expenses",
            "main_consultant_value",
        ):
            if key in extra:
                extra[key] = as_money(extra[key])
        if extra.get("support_consultant_value") is not None:
            extra["support_consultant_value"] = as_money(extra["support_consultant_value"])
        return Project(
            id=generate_id(),
            name=name,
            status=status,
            **extra,
        )


__all__ = ["Project", "Stage"]
