"""Account domain service."""

import logging
from dataclasses import dataclass
from typing import Optional

from kea.config import LedgerConfig
from kea.database.base import Database
from kea.domain.constants import (
    ACCOUNT_SEPARATOR,
    MAX_NAME_LENGTH,
    OPENING_BALANCE_ACCOUNT,
    OPENING_BALANCE_ACCOUNT_LEAF,
    OPENING_BALANCE_DESCRIPTION,
    OPENING_BALANCE_MEMO,
    RESERVED_ROOT_NAMES,
)
from kea.domain.entities import (
    Account,
    AccountNode,
    AccountType,
    SplitInput,
    TransactionInput,
    TransactionStatus,
)
from kea.domain.errors import (
    AccountNotFoundError,
    DependencyError,
    DuplicateAccountError,
    InvalidCurrencyError,
    InvalidNameError,
    InvalidTypeError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account,
)
from kea.domain.transaction import TransactionService

logger = logging.getLogger(__name__)

ROOT_NAMES = {
    AccountType.ASSET: "Assets",
    AccountType.LIABILITY: "Liabilities",
    AccountType.EXPENSE: "Expenses",
    AccountType.REVENUE: "Revenue",
    AccountType.EQUITY: "Equity",
}


@dataclass(frozen=True)
class _AccountPlan:
    """A validated account, ready to insert."""

    full_name: str
    account_type: AccountType
    currency: str
    parent_id: Optional[int]


class AccountService:
    """Service for managing the account hierarchy."""

    def __init__(self, db: Database, config: Optional[LedgerConfig] = None):
        """Initialize account service.

        Args:
            db: Database instance
            config: Ledger settings; defaults to LedgerConfig()
        """
        self.db = db
        self.config = config or LedgerConfig()

    @staticmethod
    def root_name_for_type(account_type: AccountType | str) -> str:
        """Return the root path segment for an account type.

        Raises:
            InvalidTypeError: If the type code is not recognized
        """
        return ROOT_NAMES[AccountType.parse(account_type)]

    @staticmethod
    def validate_name(candidate: str) -> str:
        """Validate a single (leaf) account name segment.

        Returns:
            The name with surrounding whitespace removed

        Raises:
            InvalidNameError: If the name is empty, contains the separator,
                is too long or is a reserved root name
        """
        name = (candidate or "").strip()
        if not name:
            raise InvalidNameError("Account name can't be empty")
        if ACCOUNT_SEPARATOR in name:
            raise InvalidNameError(f"Account name cannot contain '{ACCOUNT_SEPARATOR}' character")
        if len(name) > MAX_NAME_LENGTH:
            raise InvalidNameError(f"Account name too long (max {MAX_NAME_LENGTH} characters)")
        if name.lower() in RESERVED_ROOT_NAMES:
            raise InvalidNameError(f"'{name}' is a reserved root account name")
        return name

    def validate_currency(self, code: Optional[str]) -> str:
        """Normalize a currency code; empty means the configured default.

        Raises:
            InvalidCurrencyError: If the code is not exactly 3 letters
        """
        currency = (code or "").strip().upper()
        if not currency:
            return self.config.default_currency
        if len(currency) != 3:
            raise InvalidCurrencyError("Currency code must be 3 characters (e.g. USD)")
        if not all("A" <= c <= "Z" for c in currency):
            raise InvalidCurrencyError("Currency code must contain only letters")
        return currency

    @staticmethod
    def build_full_name(parent_full_name: str, leaf_name: str) -> str:
        """Join a parent path and a leaf name."""
        return f"{parent_full_name}{ACCOUNT_SEPARATOR}{leaf_name}"

    def create_account(
        self,
        name: str,
        account_type: Optional[AccountType | str] = None,
        parent_name: Optional[str] = None,
        currency: Optional[str] = "",
        description: str = "",
    ) -> Account:
        """Create a new account.

        Top-level accounts live under the root for their type, so
        ``create_account("Bank", AccountType.ASSET)`` creates ``Assets:Bank``.
        Subaccounts inherit the parent's type.

        Args:
            name: Leaf name of the new account
            account_type: Required without a parent; must match the parent's if given
            parent_name: Full name of the parent account
            currency: Currency code; empty uses the parent's or the default
            description: Free text description

        Returns:
            The created account

        Raises:
            InvalidNameError: If the name breaks the naming rules
            InvalidTypeError: If the type is missing, unknown or conflicts with the parent
            InvalidCurrencyError: If the currency code is malformed
            AccountNotFoundError: If the parent doesn't exist
            DuplicateAccountError: If the full name is already taken
        """
        plan = self._plan_account(name, account_type, parent_name, currency)
        return self._insert_account(plan, description)

    def open_account(
        self,
        name: str,
        account_type: Optional[AccountType | str] = None,
        parent_name: Optional[str] = None,
        currency: Optional[str] = "",
        description: str = "",
        opening_balance: int = 0,
        timestamp: int = 0,
    ) -> tuple[Account, Optional[int]]:
        """Create an account together with its opening balance.

        Everything is checked before the first write, and the account and
        its opening transaction are saved as one unit: if either fails,
        neither is kept.

        Args:
            name, account_type, parent_name, currency, description: As for
                ``create_account``
            opening_balance: Balance in minor units; 0 records no transaction
            timestamp: Unix timestamp of the opening transaction, 0 means now

        Returns:
            Tuple of (created account, opening transaction ID or None)

        Raises:
            ValidationError: If a non-zero balance is given for an account
                that is not an Asset or Liability
            AccountNotFoundError: If the parent or the opening balances
                account is missing
        """
        plan = self._plan_account(name, account_type, parent_name, currency)
        if opening_balance:
            self._check_opening_balance(plan.account_type)

        with self.db.atomic():
            account = self._insert_account(plan, description)
            transaction_id = self.set_opening_balance(account, opening_balance, timestamp)
        return account, transaction_id

    def _plan_account(
        self,
        name: str,
        account_type: Optional[AccountType | str],
        parent_name: Optional[str],
        currency: Optional[str],
    ) -> _AccountPlan:
        leaf = self.validate_name(name)

        parent = None
        if parent_name is not None:
            parent = self.require_account_by_name(parent_name)
            if account_type is not None and AccountType.parse(account_type) != parent.type:
                raise InvalidTypeError(
                    f"Subaccounts of '{parent.name}' must be of type {parent.type.name.capitalize()}"
                )
            resolved_type = parent.type
            full_name = self.build_full_name(parent.name, leaf)
        else:
            if account_type is None:
                raise InvalidTypeError("Account type is required for a top-level account")
            resolved_type = AccountType.parse(account_type)
            full_name = self.build_full_name(self.root_name_for_type(resolved_type), leaf)

        if len(full_name) > MAX_NAME_LENGTH:
            raise InvalidNameError(f"Account name too long (max {MAX_NAME_LENGTH} characters)")

        if currency:
            resolved_currency = self.validate_currency(currency)
        elif parent is not None:
            resolved_currency = parent.currency
        else:
            resolved_currency = self.config.default_currency

        if self.db.account_exists(full_name):
            raise DuplicateAccountError(duplicate_account(full_name))

        return _AccountPlan(
            full_name=full_name,
            account_type=resolved_type,
            currency=resolved_currency,
            parent_id=parent.id if parent is not None else None,
        )

    def _insert_account(self, plan: _AccountPlan, description: str) -> Account:
        account_id = self.db.create_account(
            name=plan.full_name,
            account_type=plan.account_type,
            currency=plan.currency,
            description=description,
            parent_id=plan.parent_id,
        )
        logger.info("Created account %s (%s, id %d)", plan.full_name, plan.account_type.name, account_id)
        return self.get_account(account_id)

    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by full name, or None if not found."""
        return self.db.get_account_by_name(name)

    def require_account_by_name(self, name: str) -> Account:
        """Get account by full name.

        Raises:
            AccountNotFoundError: If no account has that name
        """
        account = self.db.get_account_by_name(name)
        if account is None:
            raise AccountNotFoundError(account_not_found(name))
        return account

    def account_exists(self, name: str) -> bool:
        return self.db.account_exists(name)

    def list_accounts(
        self,
        account_type: Optional[AccountType | str] = None,
        include_hidden: bool = True,
    ) -> list[Account]:
        """List accounts ordered by name.

        Args:
            account_type: Only accounts of this type
            include_hidden: If False, hidden accounts are left out
        """
        if account_type is not None:
            accounts = self.db.list_accounts_by_type(AccountType.parse(account_type))
        else:
            accounts = self.db.list_accounts()
        if not include_hidden:
            accounts = [acc for acc in accounts if not acc.is_hidden]
        return accounts

    def update_account(
        self,
        account_id: int,
        description: Optional[str] = None,
        is_hidden: Optional[bool] = None,
    ) -> None:
        """Update an account's description or hidden flag.

        Name and type are fixed once the account exists.

        Raises:
            AccountNotFoundError: If account not found
        """
        if self.db.get_account(account_id) is None:
            raise AccountNotFoundError(account_not_found(account_id))
        self.db.update_account(account_id, description=description, is_hidden=is_hidden)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            AccountNotFoundError: If account not found
            DependencyError: If the account has splits or subaccounts
        """
        if self.db.get_account(account_id) is None:
            raise AccountNotFoundError(account_not_found(account_id))

        split_count = self.db.get_account_split_count(account_id)
        child_count = sum(1 for acc in self.db.list_accounts() if acc.parent_id == account_id)
        if split_count > 0 or child_count > 0:
            raise DependencyError(account_delete_blocked(account_id, split_count, child_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %d", account_id)

    def ensure_system_accounts(self) -> Account:
        """Create the Equity:OpeningBalances account if it is missing.

        Returns:
            The opening balances account
        """
        account = self.db.get_account_by_name(OPENING_BALANCE_ACCOUNT)
        if account is not None:
            return account
        return self.create_account(
            OPENING_BALANCE_ACCOUNT_LEAF,
            AccountType.EQUITY,
            currency=self.config.default_currency,
            description="Opening Balances (System Account)",
        )

    def set_opening_balance(self, account: Account, amount: int, timestamp: int = 0) -> Optional[int]:
        """Record an account's starting balance against Equity:OpeningBalances.

        Args:
            account: Asset or Liability account
            amount: Balance in minor units; for a Liability, the amount owed
            timestamp: Unix timestamp, 0 means now

        Returns:
            The transaction ID, or None when ``amount`` is 0

        Raises:
            ValidationError: If the account is not an Asset or Liability
            AccountNotFoundError: If the opening balances account is missing
        """
        if amount == 0:
            return None
        equity = self._check_opening_balance(account.type)
        balance_amount = amount if account.type == AccountType.ASSET else -amount

        ledger = TransactionService(self.db, self.config)
        return ledger.create_transaction(
            TransactionInput(
                description=OPENING_BALANCE_DESCRIPTION,
                timestamp=timestamp,
                status=TransactionStatus.CLEARED,
                splits=(
                    SplitInput(account_name=account.name, amount=balance_amount, memo=OPENING_BALANCE_MEMO),
                    SplitInput(account_name=equity.name, amount=-balance_amount, memo=OPENING_BALANCE_MEMO),
                ),
            )
        )

    def _check_opening_balance(self, account_type: AccountType) -> Account:
        """Return the opening balances account if ``account_type`` may have an opening balance."""
        if account_type not in (AccountType.ASSET, AccountType.LIABILITY):
            raise ValidationError("Only Asset and Liability accounts can have an opening balance")

        equity = self.db.get_account_by_name(OPENING_BALANCE_ACCOUNT)
        if equity is None:
            raise AccountNotFoundError(
                f"{account_not_found(OPENING_BALANCE_ACCOUNT)}, failed to set initial balance"
            )
        return equity

    @staticmethod
    def build_tree(accounts: list[Account]) -> list[AccountNode]:
        """Arrange accounts into a forest by parent ID.

        An account whose parent is missing from ``accounts`` is shown as a root.
        """
        by_id = {acc.id: acc for acc in accounts}
        children: dict[int, list[Account]] = {}
        roots = []
        for acc in accounts:
            if acc.parent_id is None or acc.parent_id not in by_id:
                roots.append(acc)
            else:
                children.setdefault(acc.parent_id, []).append(acc)

        def build_node(acc: Account) -> AccountNode:
            return AccountNode(
                account=acc,
                children=tuple(build_node(child) for child in children.get(acc.id, [])),
            )

        return [build_node(root) for root in roots]
