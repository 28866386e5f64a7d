"""Tests for the SQLAlchemy Database implementation."""

import pytest

from kea.domain import entities
from kea.domain.entities import AccountType, Split, TransactionStatus
from kea.domain.errors import (
    DuplicateAccountError,
    DuplicateTransactionError,
    SplitNotFoundError,
    TransactionNotFoundError,
)


def make_splits(debit_account_id, credit_account_id, amount):
    return [
        Split(id=0, transaction_id=0, account_id=debit_account_id, amount=amount, currency="USD"),
        Split(id=0, transaction_id=0, account_id=credit_account_id, amount=-amount, currency="USD"),
    ]


@pytest.fixture
def two_accounts(temp_db):
    bank = temp_db.create_account("Assets:Bank", AccountType.ASSET, "USD")
    food = temp_db.create_account("Expenses:Food", AccountType.EXPENSE, "USD")
    return bank, food


class TestDatabaseInterface:
    """Tests to verify the Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account("Assets:Bank", AccountType.ASSET, "USD", description="Bank")

        account = temp_db.get_account(account_id)
        assert isinstance(account, entities.Account)
        assert account.type == AccountType.ASSET
        assert account.description == "Bank"

    def test_duplicate_account_name(self, temp_db):
        temp_db.create_account("Assets:Bank", AccountType.ASSET, "USD")
        with pytest.raises(DuplicateAccountError):
            temp_db.create_account("Assets:Bank", AccountType.ASSET, "USD")
        # the session is still usable after the failed insert
        assert len(temp_db.list_accounts()) == 1

    def test_transaction_with_splits(self, temp_db, two_accounts):
        bank, food = two_accounts
        transaction_id = temp_db.create_transaction_with_splits(
            timestamp=1000,
            description="Food",
            status=TransactionStatus.CLEARED,
            splits=make_splits(food, bank, 500),
        )

        txn = temp_db.get_transaction(transaction_id)
        assert isinstance(txn, entities.Transaction)
        assert txn.status is TransactionStatus.CLEARED

        splits = temp_db.get_splits_by_transaction(transaction_id)
        assert all(isinstance(s, entities.Split) for s in splits)
        assert [s.amount for s in splits] == [500, -500]
        assert all(s.transaction_id == transaction_id for s in splits)
        assert temp_db.get_account_balance(bank) == -500
        assert temp_db.get_account_split_count(bank) == 1

    def test_duplicate_external_id(self, temp_db, two_accounts):
        bank, food = two_accounts
        temp_db.create_transaction_with_splits(1, "a", TransactionStatus.PENDING, make_splits(food, bank, 1), "x-1")
        with pytest.raises(DuplicateTransactionError):
            temp_db.create_transaction_with_splits(2, "b", TransactionStatus.PENDING, make_splits(food, bank, 1), "x-1")
        assert temp_db.get_transaction_by_external_id("x-1").description == "a"

    def test_missing_rows(self, temp_db):
        assert temp_db.get_account(1) is None
        assert temp_db.get_transaction(1) is None
        assert temp_db.get_split(1) is None
        with pytest.raises(TransactionNotFoundError):
            temp_db.update_transaction_status(1, TransactionStatus.CLEARED)
        with pytest.raises(SplitNotFoundError):
            temp_db.delete_split(1)

    def test_delete_transaction_removes_splits(self, temp_db, two_accounts):
        bank, food = two_accounts
        transaction_id = temp_db.create_transaction_with_splits(
            1, "a", TransactionStatus.PENDING, make_splits(food, bank, 100)
        )
        temp_db.delete_transaction(transaction_id)

        assert temp_db.get_splits_by_transaction(transaction_id) == []
        assert temp_db.get_account_balance(bank) == 0

    def test_list_transactions_filters(self, temp_db, two_accounts):
        bank, food = two_accounts
        other = temp_db.create_account("Assets:Cash", AccountType.ASSET, "USD")
        old = temp_db.create_transaction_with_splits(100, "old", TransactionStatus.PENDING, make_splits(food, bank, 1))
        new = temp_db.create_transaction_with_splits(300, "new", TransactionStatus.PENDING, make_splits(food, bank, 1))
        cash = temp_db.create_transaction_with_splits(200, "cash", TransactionStatus.PENDING, make_splits(food, other, 1))

        assert [t.id for t in temp_db.list_transactions()] == [new, cash, old]
        assert [t.id for t in temp_db.list_transactions(account_id=bank)] == [new, old]
        assert [t.id for t in temp_db.list_transactions(start_timestamp=150, end_timestamp=300)] == [new, cash]
        assert [t.id for t in temp_db.list_transactions(limit=1)] == [new]


class TestAtomic:
    """Tests for atomic units of work."""

    def test_commit(self, temp_db, two_accounts):
        bank, food = two_accounts
        transaction_id = temp_db.create_transaction_with_splits(
            1, "a", TransactionStatus.PENDING, make_splits(food, bank, 100)
        )
        with temp_db.atomic() as repo:
            repo.update_transaction_header(transaction_id, "b", 2, TransactionStatus.CLEARED)
            repo.update_transaction_status(transaction_id, TransactionStatus.RECONCILED)

        assert temp_db.get_transaction(transaction_id).status is TransactionStatus.RECONCILED

    def test_rollback_on_error(self, temp_db, two_accounts):
        bank, food = two_accounts
        transaction_id = temp_db.create_transaction_with_splits(
            1, "a", TransactionStatus.PENDING, make_splits(food, bank, 100)
        )
        splits = temp_db.get_splits_by_transaction(transaction_id)

        with pytest.raises(RuntimeError):
            with temp_db.atomic() as repo:
                repo.update_transaction_header(transaction_id, "changed", 2, TransactionStatus.CLEARED)
                repo.delete_split(splits[0].id)
                repo.create_split(transaction_id, food, 999, "USD")
                raise RuntimeError("boom")

        txn = temp_db.get_transaction(transaction_id)
        assert txn.description == "a"
        assert txn.status is TransactionStatus.PENDING
        assert temp_db.get_splits_by_transaction(transaction_id) == splits

    def test_nested_blocks_join_outer(self, temp_db, two_accounts):
        bank, food = two_accounts
        transaction_id = temp_db.create_transaction_with_splits(
            1, "a", TransactionStatus.PENDING, make_splits(food, bank, 100)
        )

        with pytest.raises(ValueError):
            with temp_db.atomic() as outer:
                with outer.atomic() as inner:
                    inner.update_transaction_status(transaction_id, TransactionStatus.CLEARED)
                raise ValueError("outer fails after inner finished")

        assert temp_db.get_transaction(transaction_id).status is TransactionStatus.PENDING

    def test_run_atomically(self, temp_db, two_accounts):
        bank, food = two_accounts

        def create(repo):
            return repo.create_transaction_with_splits(
                1, "a", TransactionStatus.PENDING, make_splits(food, bank, 100)
            )

        transaction_id = temp_db.run_atomically(create)
        assert temp_db.get_transaction(transaction_id) is not None
