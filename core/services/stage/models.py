from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StageProgress:
    completed: int
    total: int

    @property
    def percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(100.0 * self.completed / self.total, 1)


__all__ = ["StageProgress"]
