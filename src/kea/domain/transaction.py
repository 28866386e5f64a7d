"""Ledger engine: transaction creation, status lifecycle and atomic edits."""

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from kea.config import LedgerConfig
from kea.database.base import Database
from kea.domain.constants import MIN_SPLITS, OPENING_BALANCE_TRANSACTION_ID
from kea.domain.entities import (
    Account,
    Split,
    SplitDetail,
    SplitInput,
    Transaction,
    TransactionDetail,
    TransactionInput,
    TransactionStatus,
)
from kea.domain.errors import (
    AccountNotFoundError,
    AlreadyReconciledError,
    DuplicateTransactionError,
    ProtectedTransactionError,
    ReconciledLockedError,
    SplitNotFoundError,
    TooFewSplitsError,
    TransactionNotFoundError,
    UnbalancedError,
    ValidationError,
    account_not_found,
    already_reconciled,
    duplicate_external_id,
    protected_transaction,
    reconciled_locked,
    split_not_found,
    too_few_splits,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


class _HasAmount(Protocol):
    amount: int


@dataclass(frozen=True)
class SplitReconciliation:
    """Three-way difference between stored and incoming splits of one transaction."""

    to_delete: tuple[int, ...]
    to_insert: tuple[SplitInput, ...]
    to_update: tuple[SplitInput, ...]


def plan_split_reconciliation(
    existing_ids: Iterable[int], incoming: Sequence[SplitInput]
) -> SplitReconciliation:
    """Work out which splits to delete, insert and update.

    Stored IDs missing from ``incoming`` are deleted, incoming splits with
    ``id == 0`` are inserted and the rest are updated in place.

    Raises:
        SplitNotFoundError: If an incoming ID is not one of ``existing_ids``
        ValidationError: If an incoming ID appears twice
    """
    existing = set(existing_ids)
    seen: set[int] = set()
    to_insert = []
    to_update = []
    for split in incoming:
        if split.id == 0:
            to_insert.append(split)
            continue
        if split.id not in existing:
            raise SplitNotFoundError(split_not_found(split.id))
        if split.id in seen:
            raise ValidationError(f"Split {split.id} appears more than once")
        seen.add(split.id)
        to_update.append(split)
    return SplitReconciliation(
        to_delete=tuple(sorted(existing - seen)),
        to_insert=tuple(to_insert),
        to_update=tuple(to_update),
    )


class TransactionService:
    """Service for creating, editing and reading ledger transactions."""

    def __init__(self, db: Database, config: Optional[LedgerConfig] = None):
        """Initialize transaction service.

        Args:
            db: Database instance
            config: Ledger settings; defaults to LedgerConfig()
        """
        self.db = db
        self.config = config or LedgerConfig()

    # Validation
    @staticmethod
    def is_protected(transaction_id: int) -> bool:
        """True for the opening balance transaction."""
        return transaction_id == OPENING_BALANCE_TRANSACTION_ID

    @staticmethod
    def validate_splits_balance(splits: Iterable[_HasAmount]) -> None:
        """Check the double-entry invariant.

        Raises:
            UnbalancedError: If the amounts do not sum to zero
        """
        total = sum(split.amount for split in splits)
        if total != 0:
            raise UnbalancedError(total)

    def validate_transaction_edit(self, splits: Sequence[SplitInput]) -> list[Account]:
        """Validate a full split list without saving it.

        Returns:
            The resolved account for each split, in order

        Raises:
            TooFewSplitsError: If fewer than 2 splits are given
            UnbalancedError: If the splits do not sum to zero
            AccountNotFoundError: If a split references an unknown account
        """
        if len(splits) < MIN_SPLITS:
            raise TooFewSplitsError(too_few_splits(len(splits)))
        self.validate_splits_balance(splits)
        return [self._resolve_account(split, position) for position, split in enumerate(splits, 1)]

    def _resolve_account(self, split: SplitInput, position: int) -> Account:
        if split.account_id is not None:
            account = self.db.get_account(split.account_id)
            reference: int | str = split.account_id
        else:
            account = self.db.get_account_by_name(split.account_name)
            reference = split.account_name
        if account is None:
            raise AccountNotFoundError(f"Split #{position}: {account_not_found(reference)}")
        return account

    def _split_currency(self, split: SplitInput, account: Account) -> str:
        return split.currency or account.currency or self.config.default_currency

    def _require_transaction(self, transaction_id: int) -> Transaction:
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise TransactionNotFoundError(transaction_not_found(transaction_id))
        return txn

    # Writes
    def create_transaction(self, txn_input: TransactionInput) -> int:
        """Create a balanced transaction.

        Args:
            txn_input: Description, timestamp (0 means now), status and splits
                referencing accounts by name

        Returns:
            Transaction ID

        Raises:
            TooFewSplitsError: If fewer than 2 splits are given
            AccountNotFoundError: If a split references an unknown account
            UnbalancedError: If the splits do not sum to zero
            InvalidStatusError: If the status is not 0, 1 or 2
            DuplicateTransactionError: If the external ID is already used
        """
        status = TransactionStatus.parse(txn_input.status)
        if len(txn_input.splits) < MIN_SPLITS:
            raise TooFewSplitsError(too_few_splits(len(txn_input.splits)))

        timestamp = txn_input.timestamp or int(time.time())

        splits = []
        for position, split_input in enumerate(txn_input.splits, 1):
            account = self._resolve_account(split_input, position)
            splits.append(
                Split(
                    id=0,
                    transaction_id=0,
                    account_id=account.id,
                    amount=split_input.amount,
                    currency=self._split_currency(split_input, account),
                    memo=split_input.memo,
                )
            )

        self.validate_splits_balance(splits)

        if txn_input.external_id is not None:
            if self.db.get_transaction_by_external_id(txn_input.external_id) is not None:
                raise DuplicateTransactionError(duplicate_external_id(txn_input.external_id))

        with self.db.atomic() as repo:
            transaction_id = repo.create_transaction_with_splits(
                timestamp=timestamp,
                description=txn_input.description,
                status=status,
                splits=splits,
                external_id=txn_input.external_id,
            )

        logger.info("Created transaction %d with %d splits", transaction_id, len(splits))
        return transaction_id

    def create_simple_transaction(
        self,
        from_account: str,
        to_account: str,
        amount: int,
        description: str,
        timestamp: int = 0,
        status: TransactionStatus = TransactionStatus.PENDING,
    ) -> tuple[int, TransactionInput]:
        """Create a two-split transaction moving ``amount`` from one account to another.

        The destination gets ``+amount`` and the source ``-amount``.

        Returns:
            Tuple of (transaction ID, the TransactionInput that was created)

        Raises:
            ValidationError: If the accounts are the same or the amount is not positive
        """
        if from_account == to_account:
            raise ValidationError("Source and destination accounts cannot be the same")
        if amount <= 0:
            raise ValidationError("Amount must be positive")

        txn_input = TransactionInput(
            description=description,
            timestamp=timestamp,
            status=status,
            splits=(
                SplitInput(account_name=to_account, amount=amount),
                SplitInput(account_name=from_account, amount=-amount),
            ),
        )
        return self.create_transaction(txn_input), txn_input

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its splits.

        Raises:
            ProtectedTransactionError: For the opening balance transaction
            TransactionNotFoundError: If the transaction doesn't exist
            ReconciledLockedError: If the transaction is reconciled
        """
        if self.is_protected(transaction_id):
            logger.warning("Refused to delete opening transaction %d", transaction_id)
            raise ProtectedTransactionError(protected_transaction(transaction_id))

        txn = self._require_transaction(transaction_id)
        if txn.status == TransactionStatus.RECONCILED:
            logger.warning("Refused to delete reconciled transaction %d", transaction_id)
            raise ReconciledLockedError(reconciled_locked(transaction_id))

        with self.db.atomic() as repo:
            repo.delete_transaction(transaction_id)
        logger.info("Deleted transaction %d", transaction_id)

    def set_status(self, transaction_id: int, new_status: TransactionStatus | int) -> None:
        """Move a transaction to a new status.

        Pending and Cleared can move freely between each other and on to
        Reconciled. Reconciled is terminal unless the config allows demotion.

        Raises:
            InvalidStatusError: If the status is not 0, 1 or 2
            TransactionNotFoundError: If the transaction doesn't exist
            AlreadyReconciledError: If reconciling a reconciled transaction
            ReconciledLockedError: If demoting a reconciled transaction
        """
        status = TransactionStatus.parse(new_status)
        txn = self._require_transaction(transaction_id)

        if txn.status == TransactionStatus.RECONCILED:
            if status == TransactionStatus.RECONCILED:
                raise AlreadyReconciledError(already_reconciled(transaction_id))
            if not self.config.allow_reconciled_demotion:
                logger.warning("Refused to demote reconciled transaction %d", transaction_id)
                raise ReconciledLockedError(reconciled_locked(transaction_id))

        self.db.update_transaction_status(transaction_id, status)
        logger.info("Transaction %d: %s -> %s", transaction_id, txn.status.label, status.label)

    def clear(self, transaction_id: int) -> None:
        """Mark a transaction as cleared."""
        self.set_status(transaction_id, TransactionStatus.CLEARED)

    def reconcile(self, transaction_id: int) -> None:
        """Mark a transaction as reconciled. It cannot change afterwards."""
        self.set_status(transaction_id, TransactionStatus.RECONCILED)

    def update_complete(
        self,
        transaction_id: int,
        description: str,
        timestamp: int,
        status: TransactionStatus | int,
        splits: Sequence[SplitInput],
    ) -> None:
        """Replace a transaction's header and its full split list atomically.

        Splits with ``id == 0`` are inserted, splits whose ID matches a stored
        split are updated in place, and stored splits missing from ``splits``
        are deleted. Either every change is applied or none is.

        Args:
            transaction_id: Transaction to update
            description: New description
            timestamp: New Unix timestamp; 0 keeps the stored one
            status: New status
            splits: Complete new split list; accounts by ``account_id`` or name

        Raises:
            InvalidStatusError: If the status is not 0, 1 or 2
            ProtectedTransactionError: For the opening balance transaction
            TransactionNotFoundError: If the transaction doesn't exist
            ReconciledLockedError: If the transaction is reconciled
            TooFewSplitsError: If fewer than 2 splits are given
            UnbalancedError: If the splits do not sum to zero
            AccountNotFoundError: If a split references an unknown account
            SplitNotFoundError: If a split ID belongs to another transaction
        """
        new_status = TransactionStatus.parse(status)
        if self.is_protected(transaction_id):
            logger.warning("Refused to edit opening transaction %d", transaction_id)
            raise ProtectedTransactionError(protected_transaction(transaction_id))

        with self.db.atomic() as repo:
            current = repo.get_transaction(transaction_id)
            if current is None:
                raise TransactionNotFoundError(transaction_not_found(transaction_id))
            if current.status == TransactionStatus.RECONCILED:
                logger.warning("Refused to edit reconciled transaction %d", transaction_id)
                raise ReconciledLockedError(reconciled_locked(transaction_id))

            accounts = self.validate_transaction_edit(splits)
            account_by_split = {id(split): account for split, account in zip(splits, accounts)}

            existing_ids = [split.id for split in repo.get_splits_by_transaction(transaction_id)]
            plan = plan_split_reconciliation(existing_ids, splits)

            repo.update_transaction_header(
                transaction_id,
                description=description,
                timestamp=timestamp or current.timestamp,
                status=new_status,
            )
            for split_id in plan.to_delete:
                repo.delete_split(split_id)
            for split in plan.to_update:
                account = account_by_split[id(split)]
                repo.update_split(
                    split.id,
                    account_id=account.id,
                    amount=split.amount,
                    currency=self._split_currency(split, account),
                    memo=split.memo,
                )
            for split in plan.to_insert:
                account = account_by_split[id(split)]
                repo.create_split(
                    transaction_id,
                    account_id=account.id,
                    amount=split.amount,
                    currency=self._split_currency(split, account),
                    memo=split.memo,
                )

        logger.info(
            "Updated transaction %d: %d deleted, %d updated, %d inserted splits",
            transaction_id,
            len(plan.to_delete),
            len(plan.to_update),
            len(plan.to_insert),
        )

    # Reads
    def find_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction header by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> TransactionDetail:
        """Get a transaction with its splits and their account names.

        Raises:
            TransactionNotFoundError: If the transaction doesn't exist
        """
        return self._to_detail(self._require_transaction(transaction_id), {})

    def _to_detail(self, txn: Transaction, account_cache: dict[int, Account]) -> TransactionDetail:
        details = []
        for split in self.db.get_splits_by_transaction(txn.id):
            account = account_cache.get(split.account_id)
            if account is None:
                account = self.db.get_account(split.account_id)
                if account is None:
                    raise AccountNotFoundError(account_not_found(split.account_id))
                account_cache[account.id] = account
            details.append(
                SplitDetail(
                    id=split.id,
                    account_id=split.account_id,
                    account_name=account.name,
                    account_type=account.type,
                    amount=split.amount,
                    currency=split.currency,
                    memo=split.memo,
                )
            )
        return TransactionDetail(
            id=txn.id,
            timestamp=txn.timestamp,
            description=txn.description,
            status=txn.status,
            splits=tuple(details),
            external_id=txn.external_id,
        )

    def list_transactions(
        self,
        limit: Optional[int] = None,
        account_name: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[TransactionDetail]:
        """List transactions newest first, with their splits.

        Args:
            limit: Maximum number of transactions
            account_name: Only transactions touching this account
            start: Only transactions at or after this time
            end: Only transactions at or before this time

        Raises:
            AccountNotFoundError: If ``account_name`` is unknown
        """
        account_id = None
        if account_name is not None:
            account = self.db.get_account_by_name(account_name)
            if account is None:
                raise AccountNotFoundError(account_not_found(account_name))
            account_id = account.id

        transactions = self.db.list_transactions(
            limit=limit,
            account_id=account_id,
            start_timestamp=int(start.timestamp()) if start is not None else None,
            end_timestamp=int(end.timestamp()) if end is not None else None,
        )
        cache: dict[int, Account] = {}
        return [self._to_detail(txn, cache) for txn in transactions]

    def is_editable(self, detail: TransactionDetail) -> bool:
        """False for the opening transaction and for reconciled transactions."""
        if self.is_protected(detail.id):
            return False
        return detail.status != TransactionStatus.RECONCILED
