from __future__ import annotations

from typing import Iterable, Sequence

from core.models import StatusDefinition, StatusDisplay
from core.domain.status import DEFAULT_COMPLETION_STATUS, NEUTRAL_STATUS_COLOR


class StatusCatalog:
    """
    Read-only, ordered view over the configured status definitions.

    Built once per service graph and handed to every component that has to
    decide whether a stage is "done". An empty catalog still works: the fixed
    default completion name keeps classifying finished stages.
    """

    def __init__(self, definitions: Iterable[StatusDefinition] = ()):
        ordered = sorted(definitions, key=lambda d: d.order_index)
        self._ordered: tuple[StatusDefinition, ...] = tuple(ordered)
        self._by_name: dict[str, StatusDefinition] = {}
        for definition in self._ordered:
            self._by_name.setdefault(definition.name, definition)

    @property
    def definitions(self) -> Sequence[StatusDefinition]:
        return self._ordered

    def get(self, status_name: str | None) -> StatusDefinition | None:
        if not status_name:
            return None
        return self._by_name.get(status_name)

    def is_completion(self, status_name: str | None) -> bool:
        definition = self.get(status_name)
        if definition is not None:
            return bool(definition.is_completion_status)
        return status_name == DEFAULT_COMPLETION_STATUS

    def is_cancellation(self, status_name: str | None) -> bool:
        definition = self.get(status_name)
        return bool(definition is not None and definition.is_cancellation_status)

    def completion_names(self) -> set[str]:
        names = {d.name for d in self._ordered if d.is_completion_status}
        if DEFAULT_COMPLETION_STATUS not in self._by_name:
            names.add(DEFAULT_COMPLETION_STATUS)
        return names

    def display(self, status_name: str | None) -> StatusDisplay:
        definition = self.get(status_name)
        if definition is not None:
            return StatusDisplay(label=definition.display_name, color=definition.color)
        return StatusDisplay(label=str(status_name or ""), color=NEUTRAL_STATUS_COLOR)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, status_name: object) -> bool:
        return isinstance(status_name, str) and status_name in self._by_name


__all__ = ["StatusCatalog"]
