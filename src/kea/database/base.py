"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Callable, Optional, Sequence, TypeVar

# Import entities directly to avoid circular import through domain/__init__.py
from kea.domain.entities import (
    Account,
    AccountType,
    Split,
    Transaction,
    TransactionStatus,
)

T = TypeVar("T")


class Database(ABC):
    """Abstract repository interface for the ledger.

    Every write commits on its own unless it runs inside ``atomic()``, in
    which case the whole block commits or rolls back as one unit.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Atomic units
    @abstractmethod
    def atomic(self) -> AbstractContextManager["Database"]:
        """Context manager running the enclosed repository calls as one unit.

        Nested blocks join the outermost one. Any exception rolls back every
        change made since the outermost block began and is re-raised.
        """
        pass

    def run_atomically(self, fn: Callable[["Database"], T]) -> T:
        """Run ``fn(self)`` inside ``atomic()`` and return its result."""
        with self.atomic() as repo:
            return fn(repo)

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        currency: str,
        description: str = "",
        parent_id: Optional[int] = None,
    ) -> int:
        """Create a new account. Returns account ID.

        Raises DuplicateAccountError if the name is taken.
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by its full name."""
        pass

    @abstractmethod
    def account_exists(self, name: str) -> bool:
        """Check if an account with the given full name exists."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by name."""
        pass

    @abstractmethod
    def list_accounts_by_type(self, account_type: AccountType) -> list[Account]:
        """List accounts of one type ordered by name."""
        pass

    @abstractmethod
    def get_account_balance(self, account_id: int) -> int:
        """Sum of split amounts for the account (0 when it has none)."""
        pass

    @abstractmethod
    def get_account_split_count(self, account_id: int) -> int:
        """Number of splits referencing the account."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        description: Optional[str] = None,
        is_hidden: Optional[bool] = None,
    ) -> None:
        """Update mutable account fields (type and name never change)."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction_with_splits(
        self,
        timestamp: int,
        description: str,
        status: TransactionStatus,
        splits: Sequence[Split],
        external_id: Optional[str] = None,
    ) -> int:
        """Create a transaction header and its splits. Returns transaction ID.

        The ``id`` and ``transaction_id`` fields of the given splits are ignored.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction header by ID."""
        pass

    @abstractmethod
    def get_transaction_by_external_id(self, external_id: str) -> Optional[Transaction]:
        """Get transaction header by external correlation ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        limit: Optional[int] = None,
        account_id: Optional[int] = None,
        start_timestamp: Optional[int] = None,
        end_timestamp: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions, newest first, with optional filters.

        Args:
            limit: Maximum number of transactions to return
            account_id: Only transactions with a split on this account
            start_timestamp: Inclusive lower bound on the timestamp
            end_timestamp: Inclusive upper bound on the timestamp
        """
        pass

    @abstractmethod
    def update_transaction_status(self, transaction_id: int, status: TransactionStatus) -> None:
        """Update transaction status."""
        pass

    @abstractmethod
    def update_transaction_header(
        self,
        transaction_id: int,
        description: str,
        timestamp: int,
        status: TransactionStatus,
    ) -> None:
        """Update description, timestamp and status of a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and all of its splits."""
        pass

    # Split operations
    @abstractmethod
    def create_split(
        self,
        transaction_id: int,
        account_id: int,
        amount: int,
        currency: str,
        memo: str = "",
    ) -> int:
        """Add a split to a transaction. Returns split ID."""
        pass

    @abstractmethod
    def get_split(self, split_id: int) -> Optional[Split]:
        """Get split by ID."""
        pass

    @abstractmethod
    def update_split(
        self,
        split_id: int,
        account_id: int,
        amount: int,
        currency: str,
        memo: str,
    ) -> None:
        """Update a split in place."""
        pass

    @abstractmethod
    def delete_split(self, split_id: int) -> None:
        """Delete a split."""
        pass

    @abstractmethod
    def get_splits_by_transaction(self, transaction_id: int) -> list[Split]:
        """Get the splits of a transaction ordered by ID."""
        pass
