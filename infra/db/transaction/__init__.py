from infra.db.transaction.mapper import transaction_from_orm, transaction_to_orm
from infra.db.transaction.repository import SqlAlchemyManualTransactionRepository

__all__ = ["transaction_to_orm", "transaction_from_orm", "SqlAlchemyManualTransactionRepository"]
