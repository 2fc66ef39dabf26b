""" Track changes in projects, stages, ledger rows and statuses so read models can refresh"""
from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.project_changed: Signal[str] = Signal()   # project_id
        self.stages_changed: Signal[str] = Signal()    # project_id
        self.ledger_changed: Signal[str] = Signal()    # ledger entry id
        self.statuses_changed: Signal[str] = Signal()  # status name


# SINGLE global instance
domain_events = DomainEvents()
