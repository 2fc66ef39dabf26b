from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from core.domain import (
    AuditLogEntry,
    LedgerEntry,
    LedgerEntryType,
    LedgerStatus,
    ManualTransaction,
    Project,
    SourceRef,
    Stage,
    StageHistoryEntry,
    StatusDefinition,
)


class ProjectRepository(ABC):
    @abstractmethod
    def add(self, project: Project) -> None: ...

    @abstractmethod
    def update(self, project: Project) -> None: ...

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def list_all(self) -> List[Project]: ...


class StageRepository(ABC):
    @abstractmethod
    def add(self, stage: Stage) -> None: ...

    @abstractmethod
    def update(self, stage: Stage) -> None: ...

    @abstractmethod
    def get(self, stage_id: str) -> Optional[Stage]: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[Stage]: ...

    @abstractmethod
    def count_with_status(self, status: str) -> int: ...


class StageHistoryRepository(ABC):
    @abstractmethod
    def add(self, entry: StageHistoryEntry) -> None: ...

    @abstractmethod
    def list_for_stage(self, stage_id: str) -> List[StageHistoryEntry]: ...

    @abstractmethod
    def list_for_project(self, project_id: str) -> List[StageHistoryEntry]: ...


class StatusDefinitionRepository(ABC):
    @abstractmethod
    def add(self, definition: StatusDefinition) -> None: ...

    @abstractmethod
    def update(self, definition: StatusDefinition) -> None: ...

    @abstractmethod
    def delete(self, definition_id: str) -> None: ...

    @abstractmethod
    def get(self, definition_id: str) -> Optional[StatusDefinition]: ...

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[StatusDefinition]: ...

    @abstractmethod
    def list_ordered(self) -> List[StatusDefinition]: ...


class ManualTransactionRepository(ABC):
    @abstractmethod
    def add(self, tx: ManualTransaction) -> None: ...

    @abstractmethod
    def update(self, tx: ManualTransaction) -> None: ...

    @abstractmethod
    def get(self, tx_id: str) -> Optional[ManualTransaction]: ...

    @abstractmethod
    def list_all(self) -> List[ManualTransaction]: ...


class LedgerRepository(ABC):
    @abstractmethod
    def add(self, entry: LedgerEntry) -> None: ...

    @abstractmethod
    def get(self, entry_id: str) -> Optional[LedgerEntry]: ...

    @abstractmethod
    def find_by_source(self, entry_type: LedgerEntryType, source_ref: SourceRef) -> Optional[LedgerEntry]: ...

    @abstractmethod
    def update_derived_fields(self, entry: LedgerEntry) -> None:
        """Persist amount, due_date, description and the counterparty only."""

    @abstractmethod
    def transition_status(
        self,
        entry: LedgerEntry,
        *,
        expected_status: LedgerStatus,
        new_status: LedgerStatus,
        payment_date: Optional[date],
    ) -> bool:
        """Compare-and-set on status; False when the stored status moved on."""

    @abstractmethod
    def list_all(self, entry_type: LedgerEntryType | None = None) -> List[LedgerEntry]: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...

    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
        entity_id: str | None = None,
    ) -> List[AuditLogEntry]: ...


__all__ = [
    "ProjectRepository",
    "StageRepository",
    "StageHistoryRepository",
    "StatusDefinitionRepository",
    "ManualTransactionRepository",
    "LedgerRepository",
    "AuditLogRepository",
]
