from __future__ import annotations

from dataclasses import dataclass

from core.domain.identifiers import generate_id

DEFAULT_COMPLETION_STATUS = "concluido"
NEUTRAL_STATUS_COLOR = "#6b7280"


@dataclass
class StatusDefinition:
    id: str
    name: str
    display_name: str
    color: str = NEUTRAL_STATUS_COLOR
    is_completion_status: bool = False
    is_cancellation_status: bool = False
    order_index: int = 0

    @staticmethod
    def create(
        name: str,
        display_name: str,
        color: str = NEUTRAL_STATUS_COLOR,
        is_completion_status: bool = False,
        is_cancellation_status: bool = False,
        order_index: int = 0,
    ) -> "StatusDefinition":
        return StatusDefinition(
            id=generate_id(),
            name=name,
            display_name=display_name,
            color=color,
            is_completion_status=is_completion_status,
            is_cancellation_status=is_cancellation_status,
            order_index=order_index,
        )


@dataclass(frozen=True)
class StatusDisplay:
    label: str
    color: str


__all__ = [
    "StatusDefinition",
    "StatusDisplay",
    "DEFAULT_COMPLETION_STATUS",
    "NEUTRAL_STATUS_COLOR",
]
