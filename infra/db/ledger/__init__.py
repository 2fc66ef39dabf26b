from infra.db.ledger.mapper import ledger_from_orm, ledger_to_orm, orm_type_for
from infra.db.ledger.repository import SqlAlchemyLedgerRepository

__all__ = ["ledger_to_orm", "ledger_from_orm", "orm_type_for", "SqlAlchemyLedgerRepository"]
