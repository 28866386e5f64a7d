"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class LockedError(DomainError):
    """Operation attempted on a locked (reconciled or protected) transaction."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


# Validation
class InvalidTypeError(ValidationError):
    """Unknown account type code."""


class InvalidNameError(ValidationError):
    """Account name fails the naming rules."""


class InvalidCurrencyError(ValidationError):
    """Currency code is not three letters."""


class InvalidStatusError(ValidationError):
    """Transaction status outside Pending/Cleared/Reconciled."""


class TooFewSplitsError(ValidationError):
    """Transaction has fewer than two splits."""


class UnbalancedError(ValidationError):
    """Splits do not sum to zero."""

    def __init__(self, total: int):
        self.total = total
        super().__init__(unbalanced_splits(total))


# Not found
class AccountNotFoundError(NotFoundError):
    """Account lookup by name or ID failed."""


class TransactionNotFoundError(NotFoundError):
    """Transaction lookup by ID failed."""


class SplitNotFoundError(NotFoundError):
    """Split ID is unknown or belongs to another transaction."""


# Locked
class ReconciledLockedError(LockedError):
    """Transaction is reconciled and can no longer change."""


class AlreadyReconciledError(LockedError):
    """Transaction is already reconciled."""


class ProtectedTransactionError(LockedError):
    """The opening balance transaction can never be edited or deleted."""


# Conflicts
class DuplicateAccountError(ConflictError):
    """An account with the same full name already exists."""


class DuplicateTransactionError(ConflictError):
    """A transaction with the same external ID already exists."""


def account_not_found(account: int | str) -> str:
    """Return message for missing account by ID or name."""
    if isinstance(account, int):
        return f"Account {account} not found"
    return f"Account '{account}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def split_not_found(split_id: int, transaction_id: Optional[int] = None) -> str:
    """Return message for a split that is missing or owned elsewhere."""
    if transaction_id is None:
        return f"Split {split_id} not found"
    return f"Split {split_id} does not belong to transaction {transaction_id}"


def duplicate_account(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account '{name}' already exists"


def duplicate_external_id(external_id: str) -> str:
    """Return message for duplicate transaction external ID."""
    return f"Transaction with external ID '{external_id}' already exists"


def account_delete_blocked(account_id: int, split_count: int, child_count: int) -> str:
    """Return message when an account still has splits or subaccounts."""
    parts = []
    if split_count > 0:
        parts.append(f"{split_count} split{'s' if split_count != 1 else ''}")
    if child_count > 0:
        parts.append(f"{child_count} subaccount{'s' if child_count != 1 else ''}")
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please move or delete them first."
    )


def too_few_splits(count: int) -> str:
    """Return message when a transaction has fewer than two splits."""
    return f"Transaction must have at least 2 splits (got {count})"


def unbalanced_splits(total: int) -> str:
    """Return message reporting the non-zero split total."""
    return (
        f"Splits do not balance: total is {total} cents ({total / 100:.2f}), must be 0. "
        "In double-entry bookkeeping, debits must equal credits"
    )


def reconciled_locked(transaction_id: int) -> str:
    """Return message when a reconciled transaction would change."""
    return f"Transaction #{transaction_id} has been reconciled and cannot be modified"


def already_reconciled(transaction_id: int) -> str:
    """Return message when reconciling an already reconciled transaction."""
    return f"Transaction #{transaction_id} is already reconciled"


def protected_transaction(transaction_id: int) -> str:
    """Return message for the opening balance transaction."""
    return (
        f"Transaction #{transaction_id} is the initial opening balance transaction "
        "and cannot be edited or deleted"
    )
