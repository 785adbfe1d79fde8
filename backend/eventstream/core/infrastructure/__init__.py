from .unit_of_work import (
    TransactionContext,
    TransactionError,
    UnitOfWork,
    UnitOfWorkError,
)

__all__ = ["TransactionContext", "TransactionError", "UnitOfWork", "UnitOfWorkError"]
