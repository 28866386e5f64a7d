"""Domain layer for the kea ledger.

Only entities and errors are re-exported here; the services import the
database interface, which itself imports the entities.
"""

from kea.domain.entities import (
    Account,
    AccountNode,
    AccountType,
    Split,
    SplitDetail,
    SplitInput,
    Transaction,
    TransactionCategory,
    TransactionDetail,
    TransactionInput,
    TransactionStatus,
    TransactionSummary,
)
from kea.domain.errors import (
    ConflictError,
    DependencyError,
    DomainError,
    LockedError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "Account",
    "AccountNode",
    "AccountType",
    "Split",
    "SplitDetail",
    "SplitInput",
    "Transaction",
    "TransactionCategory",
    "TransactionDetail",
    "TransactionInput",
    "TransactionStatus",
    "TransactionSummary",
    "ConflictError",
    "DependencyError",
    "DomainError",
    "LockedError",
    "NotFoundError",
    "ValidationError",
]
