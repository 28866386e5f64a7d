"""Shared pytest fixtures for kea tests."""

import tempfile
import os
from dataclasses import dataclass
import pytest

from kea.config import LedgerConfig
from kea.database.factories import create_sqlite_database
from kea.domain.account import AccountService
from kea.domain.balance import BalanceCalculator
from kea.domain.classifier import TransactionClassifier
from kea.domain.entities import Account, AccountType
from kea.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def config():
    """Default ledger settings."""
    return LedgerConfig()


@pytest.fixture
def account_service(temp_db, config):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, config)


@pytest.fixture
def transaction_service(temp_db, config):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, config)


@pytest.fixture
def balance_calculator(temp_db):
    """Create a BalanceCalculator with a temporary database."""
    return BalanceCalculator(temp_db)


@pytest.fixture
def classifier():
    return TransactionClassifier()


@dataclass
class SampleLedger:
    """Accounts of a small personal ledger."""

    equity: Account
    checking: Account
    savings: Account
    credit_card: Account
    groceries: Account
    dining: Account
    salary: Account
    opening_transaction_id: int


@pytest.fixture
def ledger(account_service):
    """A ledger with the usual accounts and a checking opening balance.

    The opening balance takes transaction ID 1, so transactions created by
    tests start at ID 2.
    """
    equity = account_service.ensure_system_accounts()
    bank = account_service.create_account("Bank", AccountType.ASSET)
    checking = account_service.create_account("Checking", parent_name=bank.name)
    savings = account_service.create_account("Savings", parent_name=bank.name)
    credit_card = account_service.create_account("CreditCard", AccountType.LIABILITY)
    food = account_service.create_account("Food", AccountType.EXPENSE)
    groceries = account_service.create_account("Groceries", parent_name=food.name)
    dining = account_service.create_account("Dining", parent_name=food.name)
    salary = account_service.create_account("Salary", AccountType.REVENUE)
    opening_id = account_service.set_opening_balance(checking, 100000)
    return SampleLedger(
        equity=equity,
        checking=checking,
        savings=savings,
        credit_card=credit_card,
        groceries=groceries,
        dining=dining,
        salary=salary,
        opening_transaction_id=opening_id,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
