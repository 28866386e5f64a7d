"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, so the domain keeps its closed
enums while the schema stores plain codes and integers.
"""

from kea.domain import entities as domain
from kea.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
    Split as ORMSplit,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        type=domain.AccountType(orm_account.type),
        parent_id=orm_account.parent_id,
        currency=orm_account.currency,
        description=orm_account.description or "",
        is_hidden=bool(orm_account.is_hidden),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        timestamp=orm_transaction.timestamp,
        description=orm_transaction.description or "",
        status=domain.TransactionStatus(orm_transaction.status),
        external_id=orm_transaction.external_id,
    )


def split_to_domain(orm_split: ORMSplit) -> domain.Split:
    """Convert SQLAlchemy Split model to domain Split entity."""
    return domain.Split(
        id=orm_split.id,
        transaction_id=orm_split.transaction_id,
        account_id=orm_split.account_id,
        amount=orm_split.amount,
        currency=orm_split.currency,
        memo=orm_split.memo or "",
    )
