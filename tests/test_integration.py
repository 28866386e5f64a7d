"""Integration tests for end-to-end workflows."""

import pytest
from click.testing import CliRunner
from kea.cli.main import cli


def test_full_workflow(cli_runner, temp_db):
    """Accounts -> opening balance -> transactions -> edit -> reconcile -> balances."""

    def run(*args, **kwargs):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)
        assert result.exit_code == 0, result.output
        return result

    run("account", "create", "Bank", "--type", "asset")
    result = run("account", "create", "Checking", "--parent", "Assets:Bank", "--balance", "1000")
    assert "(transaction 1)" in result.output
    run("account", "create", "Visa", "--type", "liability")
    run("account", "create", "Food", "--type", "expense")
    run("account", "create", "Salary", "--type", "revenue")

    run("add", "--from", "Revenue:Salary", "--to", "Assets:Bank:Checking", "--amount", "2500", "--description", "Paycheck")
    run("add", "--from", "Liabilities:Visa", "--to", "Expenses:Food", "--amount", "80", "--description", "Dinner")
    run("add", "--from", "Assets:Bank:Checking", "--to", "Liabilities:Visa", "--amount", "80", "--description", "Pay card")

    result = run("transaction", "list")
    assert "Found 4 transaction(s)" in result.output
    for category in ("Opening", "Income", "Expense", "Transfer"):
        assert category in result.output

    run("transaction", "edit", "3", "--amount", "95")
    run("transaction", "edit", "4", "--amount", "95")
    run("transaction", "reconcile", "4")

    assert "Assets:Bank:Checking: 3405.00 USD" in run("account", "balance", "Assets:Bank:Checking").output
    assert "Liabilities:Visa: 0.00 USD" in run("account", "balance", "Liabilities:Visa").output
    assert "Expenses:Food: 95.00 USD" in run("account", "balance", "Expenses:Food").output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "transaction", "delete", "4", "--yes"])
    assert result.exit_code == 1
