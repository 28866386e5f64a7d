"""Transaction classifier.

Infers a category and a representative account/amount for a transaction
from the account types its splits touch. Nothing user-supplied is stored;
the category is recomputed on every read.
"""

from dataclasses import dataclass
from typing import Sequence

from kea.domain.constants import OPENING_BALANCE_MEMO
from kea.domain.entities import (
    Account,
    AccountType,
    SplitDetail,
    TransactionCategory,
    TransactionDetail,
    TransactionSummary,
)

NO_ACCOUNT = "-"

_BALANCE_SHEET = frozenset({AccountType.ASSET, AccountType.LIABILITY})


@dataclass(frozen=True)
class _Signals:
    """Facts about a split set that drive classification."""

    is_opening: bool
    has_equity: bool
    has_expense: bool
    has_revenue: bool
    balance_sheet_legs: int
    balance_sheet_increase: bool
    expense_total: int
    revenue_total: int

    @classmethod
    def from_splits(cls, splits: Sequence[SplitDetail]) -> "_Signals":
        balance_sheet = [s for s in splits if s.account_type in _BALANCE_SHEET]
        expenses = [s for s in splits if s.account_type == AccountType.EXPENSE]
        revenues = [s for s in splits if s.account_type == AccountType.REVENUE]
        return cls(
            is_opening=any(s.memo == OPENING_BALANCE_MEMO for s in splits),
            has_equity=any(s.account_type == AccountType.EQUITY for s in splits),
            has_expense=bool(expenses),
            has_revenue=bool(revenues),
            balance_sheet_legs=len(balance_sheet),
            balance_sheet_increase=any(s.amount > 0 for s in balance_sheet),
            expense_total=sum(abs(s.amount) for s in expenses),
            revenue_total=sum(abs(s.amount) for s in revenues),
        )


class TransactionClassifier:
    """Derives category, display account and display amount from splits."""

    def classify(self, splits: Sequence[SplitDetail]) -> TransactionCategory:
        """Infer the category of a split set.

        Rules are tried in order and the first match wins:

        1. Opening: a split carries the opening balance memo.
        2. Deposit / Withdrawal: an Equity leg with at least one
           Asset/Liability leg; Deposit when a balance-sheet leg increases.
        3. Expense vs Income when both Expense and Revenue legs are present:
           Expense only if the expense total strictly exceeds revenue.
        4. Expense: an Expense leg with an Asset/Liability leg.
        5. Income: a Revenue leg with an Asset/Liability leg.
        6. Transfer: two or more Asset/Liability legs.
        7. Other.

        Only totals and presence flags are used, so the result does not
        depend on split order.
        """
        if not splits:
            return TransactionCategory.OTHER

        signals = _Signals.from_splits(splits)

        if signals.is_opening:
            return TransactionCategory.OPENING

        if signals.has_equity and signals.balance_sheet_legs >= 1:
            if signals.balance_sheet_increase:
                return TransactionCategory.DEPOSIT
            return TransactionCategory.WITHDRAWAL

        if signals.has_expense and signals.has_revenue:
            if signals.expense_total > signals.revenue_total:
                return TransactionCategory.EXPENSE
            return TransactionCategory.INCOME

        if signals.has_expense and signals.balance_sheet_legs >= 1:
            return TransactionCategory.EXPENSE

        if signals.has_revenue and signals.balance_sheet_legs >= 1:
            return TransactionCategory.INCOME

        if signals.balance_sheet_legs >= 2:
            return TransactionCategory.TRANSFER

        return TransactionCategory.OTHER

    def display_account(
        self, splits: Sequence[SplitDetail], category: TransactionCategory
    ) -> str:
        """Pick the account name that best represents the transaction in a list."""
        if not splits:
            return NO_ACCOUNT

        match = None
        if category == TransactionCategory.EXPENSE:
            match = _first(splits, lambda s: s.account_type == AccountType.EXPENSE)
        elif category == TransactionCategory.INCOME:
            match = _first(splits, lambda s: s.account_type == AccountType.REVENUE)
        elif category == TransactionCategory.TRANSFER:
            # the receiving side
            match = _first(splits, lambda s: s.amount > 0 and s.account_type in _BALANCE_SHEET)
        elif category == TransactionCategory.OPENING:
            match = _first(splits, lambda s: s.account_type != AccountType.EQUITY)
        elif category in (TransactionCategory.DEPOSIT, TransactionCategory.WITHDRAWAL):
            match = _first(splits, lambda s: s.account_type in _BALANCE_SHEET)
        elif category == TransactionCategory.OTHER:
            match = _first(splits, lambda s: s.amount > 0)

        if match is None:
            match = splits[0]
        return match.account_name

    def display_amount(self, splits: Sequence[SplitDetail]) -> tuple[int, str]:
        """Largest positive split amount and its currency.

        Returns (0, "") for no splits, and (0, first currency) when no split
        is positive.
        """
        if not splits:
            return 0, ""

        amount = 0
        currency = splits[0].currency
        for split in splits:
            if split.amount > amount:
                amount = split.amount
                currency = split.currency
        return amount, currency

    def eligible_accounts_for_role_swap(
        self,
        category: TransactionCategory,
        current_account_type: AccountType,
        accounts: Sequence[Account],
    ) -> list[Account]:
        """Accounts that may replace one leg of a 2-split transaction.

        For Expense, an Expense leg can only become another Expense account
        and the other leg only another Asset/Liability account. Income works
        the same with Revenue. Transfers keep both legs on the balance sheet.
        Other categories are unrestricted.
        """
        if category == TransactionCategory.EXPENSE:
            if current_account_type == AccountType.EXPENSE:
                allowed = {AccountType.EXPENSE}
            else:
                allowed = _BALANCE_SHEET
        elif category == TransactionCategory.INCOME:
            if current_account_type == AccountType.REVENUE:
                allowed = {AccountType.REVENUE}
            else:
                allowed = _BALANCE_SHEET
        elif category == TransactionCategory.TRANSFER:
            allowed = _BALANCE_SHEET
        else:
            return list(accounts)
        return [account for account in accounts if account.type in allowed]

    def summarize(self, detail: TransactionDetail) -> TransactionSummary:
        """Classify a transaction and pick its display fields."""
        category = self.classify(detail.splits)
        amount, currency = self.display_amount(detail.splits)
        return TransactionSummary(
            detail=detail,
            category=category,
            display_account=self.display_account(detail.splits, category),
            display_amount=amount,
            display_currency=currency,
        )


def _first(splits, predicate):
    for split in splits:
        if predicate(split):
            return split
    return None
