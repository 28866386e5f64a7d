"""Account balance calculation."""

import logging
from typing import Iterable

from kea.database.base import Database
from kea.domain.entities import Account
from kea.domain.errors import AccountNotFoundError, account_not_found

logger = logging.getLogger(__name__)


class BalanceCalculator:
    """Derives balances from splits. Nothing is cached; every call re-sums."""

    def __init__(self, db: Database):
        """Initialize balance calculator.

        Args:
            db: Database instance
        """
        self.db = db

    def account_balance(self, account_id: int) -> int:
        """Sum of split amounts on one account, in minor units.

        Returns 0 for an account without splits.

        Raises:
            AccountNotFoundError: If the account doesn't exist
        """
        if self.db.get_account(account_id) is None:
            raise AccountNotFoundError(account_not_found(account_id))
        balance = self.db.get_account_balance(account_id)
        logger.debug("Balance of account %d: %d", account_id, balance)
        return balance

    def balances(self, accounts: Iterable[Account]) -> dict[int, int]:
        """Map account ID to balance for each given account."""
        return {account.id: self.db.get_account_balance(account.id) for account in accounts}

    def subtree_balance(self, account_id: int) -> int:
        """Balance of an account plus all of its descendants.

        Raises:
            AccountNotFoundError: If the account doesn't exist
        """
        total = self.account_balance(account_id)
        children: dict[int, list[int]] = {}
        for account in self.db.list_accounts():
            if account.parent_id is not None:
                children.setdefault(account.parent_id, []).append(account.id)

        pending = list(children.get(account_id, []))
        visited = {account_id}
        while pending:
            child_id = pending.pop()
            if child_id in visited:
                continue
            visited.add(child_id)
            total += self.db.get_account_balance(child_id)
            pending.extend(children.get(child_id, []))
        return total
