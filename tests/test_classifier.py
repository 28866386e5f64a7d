"""Tests for the transaction classifier."""

import itertools

import pytest

from kea.domain.entities import (
    Account,
    AccountType,
    SplitDetail,
    TransactionCategory,
    TransactionDetail,
    TransactionStatus,
)

A, L, C, R, E = (
    AccountType.ASSET,
    AccountType.LIABILITY,
    AccountType.EQUITY,
    AccountType.REVENUE,
    AccountType.EXPENSE,
)


def split(account_name, account_type, amount, memo="", currency="USD"):
    return SplitDetail(
        id=0,
        account_id=0,
        account_name=account_name,
        account_type=account_type,
        amount=amount,
        currency=currency,
        memo=memo,
    )


class TestClassify:
    """Tests for category inference."""

    def test_expense(self, classifier):
        splits = [split("Assets:Cash", A, -1500), split("Expenses:Food", E, 1500)]

        category = classifier.classify(splits)
        assert category == TransactionCategory.EXPENSE
        assert classifier.display_account(splits, category) == "Expenses:Food"
        assert classifier.display_amount(splits) == (1500, "USD")

    def test_income(self, classifier):
        splits = [split("Assets:Bank", A, 1500), split("Revenue:Salary", R, -1500)]

        category = classifier.classify(splits)
        assert category == TransactionCategory.INCOME
        assert classifier.display_account(splits, category) == "Revenue:Salary"

    def test_transfer(self, classifier):
        splits = [split("Assets:Bank", A, 1000), split("Assets:Cash", A, -1000)]

        category = classifier.classify(splits)
        assert category == TransactionCategory.TRANSFER
        assert classifier.display_account(splits, category) == "Assets:Bank"

    def test_credit_card_payment_is_transfer(self, classifier):
        splits = [split("Liabilities:Visa", L, 5000), split("Assets:Bank", A, -5000)]
        category = classifier.classify(splits)
        assert category == TransactionCategory.TRANSFER
        assert classifier.display_account(splits, category) == "Liabilities:Visa"

    def test_expense_on_credit_card(self, classifier):
        splits = [split("Expenses:Food", E, 900), split("Liabilities:Visa", L, -900)]
        assert classifier.classify(splits) == TransactionCategory.EXPENSE

    def test_opening(self, classifier):
        splits = [
            split("Assets:Bank", A, 100000, memo="Opening Balance"),
            split("Equity:OpeningBalances", C, -100000, memo="Opening Balance"),
        ]
        category = classifier.classify(splits)
        assert category == TransactionCategory.OPENING
        assert classifier.display_account(splits, category) == "Assets:Bank"

    def test_deposit(self, classifier):
        splits = [split("Equity:Owner", C, -5000), split("Assets:Bank", A, 5000)]
        category = classifier.classify(splits)
        assert category == TransactionCategory.DEPOSIT
        assert classifier.display_account(splits, category) == "Assets:Bank"

    def test_withdrawal(self, classifier):
        splits = [split("Equity:Owner", C, 5000), split("Assets:Bank", A, -5000)]
        assert classifier.classify(splits) == TransactionCategory.WITHDRAWAL

    def test_mixed_expense_and_revenue(self, classifier):
        # refund netted against a purchase
        mostly_expense = [
            split("Expenses:Food", E, 3000),
            split("Revenue:Refunds", R, -1000),
            split("Assets:Bank", A, -2000),
        ]
        assert classifier.classify(mostly_expense) == TransactionCategory.EXPENSE

        mostly_revenue = [
            split("Expenses:Fees", E, 500),
            split("Revenue:Salary", R, -3000),
            split("Assets:Bank", A, 2500),
        ]
        assert classifier.classify(mostly_revenue) == TransactionCategory.INCOME

    def test_mixed_tie_is_income(self, classifier):
        splits = [split("Expenses:Fees", E, 1000), split("Revenue:Rebate", R, -1000)]
        assert classifier.classify(splits) == TransactionCategory.INCOME

    def test_other(self, classifier):
        splits = [split("Expenses:Food", E, 1000), split("Expenses:Dining", E, -1000)]
        category = classifier.classify(splits)
        assert category == TransactionCategory.OTHER
        assert classifier.display_account(splits, category) == "Expenses:Food"

    def test_empty(self, classifier):
        assert classifier.classify([]) == TransactionCategory.OTHER
        assert classifier.display_account([], TransactionCategory.OTHER) == "-"
        assert classifier.display_amount([]) == (0, "")

    @pytest.mark.parametrize(
        "splits",
        [
            [split("Assets:Cash", A, -1500), split("Expenses:Food", E, 1500)],
            [split("Assets:Bank", A, 1000), split("Assets:Cash", A, -1000)],
            [split("Expenses:Food", E, 3000), split("Revenue:Refunds", R, -1000), split("Assets:Bank", A, -2000)],
            [split("Equity:Owner", C, -5000), split("Assets:Bank", A, 3000), split("Liabilities:Visa", L, 2000)],
        ],
    )
    def test_order_independent(self, classifier, splits):
        expected = classifier.classify(splits)
        for permutation in itertools.permutations(splits):
            assert classifier.classify(list(permutation)) == expected


class TestDisplayAmount:
    """Tests for the representative amount."""

    def test_largest_positive(self, classifier):
        splits = [
            split("Expenses:Food", E, 300),
            split("Expenses:Travel", E, 700, currency="EUR"),
            split("Assets:Bank", A, -1000),
        ]
        assert classifier.display_amount(splits) == (700, "EUR")

    def test_no_positive_split(self, classifier):
        splits = [split("Assets:Bank", A, 0, currency="GBP"), split("Assets:Cash", A, 0)]
        assert classifier.display_amount(splits) == (0, "GBP")


class TestRoleSwap:
    """Tests for eligible accounts when swapping one leg."""

    @pytest.fixture
    def accounts(self):
        return [
            Account(id=1, name="Assets:Bank", type=A, parent_id=None, currency="USD"),
            Account(id=2, name="Liabilities:Visa", type=L, parent_id=None, currency="USD"),
            Account(id=3, name="Expenses:Food", type=E, parent_id=None, currency="USD"),
            Account(id=4, name="Revenue:Salary", type=R, parent_id=None, currency="USD"),
            Account(id=5, name="Equity:OpeningBalances", type=C, parent_id=None, currency="USD"),
        ]

    def names(self, accounts):
        return [acc.name for acc in accounts]

    def test_expense_leg(self, classifier, accounts):
        eligible = classifier.eligible_accounts_for_role_swap(TransactionCategory.EXPENSE, E, accounts)
        assert self.names(eligible) == ["Expenses:Food"]

    def test_expense_payment_leg(self, classifier, accounts):
        eligible = classifier.eligible_accounts_for_role_swap(TransactionCategory.EXPENSE, A, accounts)
        assert self.names(eligible) == ["Assets:Bank", "Liabilities:Visa"]

    def test_income_legs(self, classifier, accounts):
        assert self.names(
            classifier.eligible_accounts_for_role_swap(TransactionCategory.INCOME, R, accounts)
        ) == ["Revenue:Salary"]
        assert self.names(
            classifier.eligible_accounts_for_role_swap(TransactionCategory.INCOME, L, accounts)
        ) == ["Assets:Bank", "Liabilities:Visa"]

    def test_transfer(self, classifier, accounts):
        eligible = classifier.eligible_accounts_for_role_swap(TransactionCategory.TRANSFER, A, accounts)
        assert self.names(eligible) == ["Assets:Bank", "Liabilities:Visa"]

    def test_other_is_unrestricted(self, classifier, accounts):
        eligible = classifier.eligible_accounts_for_role_swap(TransactionCategory.OTHER, E, accounts)
        assert eligible == accounts


class TestSummarize:
    """Tests for summaries of stored transactions."""

    def test_summarize(self, classifier):
        detail = TransactionDetail(
            id=2,
            timestamp=0,
            description="Lunch",
            status=TransactionStatus.PENDING,
            splits=(split("Assets:Cash", A, -1500), split("Expenses:Food", E, 1500)),
        )
        summary = classifier.summarize(detail)

        assert summary.detail is detail
        assert summary.category == TransactionCategory.EXPENSE
        assert summary.display_account == "Expenses:Food"
        assert summary.display_amount == 1500
        assert summary.display_currency == "USD"

    def test_summarize_stored(self, classifier, transaction_service, ledger):
        transaction_id, _ = transaction_service.create_simple_transaction(
            "Revenue:Salary", "Assets:Bank:Checking", 250000, "Paycheck"
        )
        summary = classifier.summarize(transaction_service.get_transaction(transaction_id))
        assert summary.category == TransactionCategory.INCOME
        assert summary.display_account == "Revenue:Salary"
        assert summary.display_amount == 250000
