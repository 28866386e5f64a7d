"""Domain model entities for kea.

These are pure data classes representing ledger concepts, independent of
the database schema. ORM rows are converted into these entities by the
mappers in ``kea.database.mappers``.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Optional

from kea.domain.errors import InvalidStatusError, InvalidTypeError, ValidationError


class AccountType(str, Enum):
    """Account type; the value is the single-letter code stored in the database."""

    ASSET = "A"
    LIABILITY = "L"
    EQUITY = "C"
    REVENUE = "R"
    EXPENSE = "E"

    @classmethod
    def parse(cls, value: "AccountType | str") -> "AccountType":
        """Parse an account type from an enum, a code ("A") or a name ("asset").

        Raises:
            InvalidTypeError: If the value does not name an account type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip().upper()
            for member in cls:
                if text == member.value or text == member.name:
                    return member
        raise InvalidTypeError(f"Invalid account type '{value}' (must be A, L, C, R, E)")

    @property
    def is_balance_sheet(self) -> bool:
        """True for Asset and Liability accounts."""
        return self in (AccountType.ASSET, AccountType.LIABILITY)


class TransactionStatus(IntEnum):
    """Transaction lifecycle status."""

    PENDING = 0
    CLEARED = 1
    RECONCILED = 2

    @classmethod
    def parse(cls, value: "TransactionStatus | int") -> "TransactionStatus":
        """Parse a status from its integer value.

        Raises:
            InvalidStatusError: If the value is not 0, 1 or 2
        """
        if isinstance(value, bool):
            raise InvalidStatusError(f"Invalid status: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise InvalidStatusError(
                f"Invalid status {value!r}: must be 0 (Pending), 1 (Cleared) or 2 (Reconciled)"
            ) from None

    @property
    def label(self) -> str:
        return self.name.capitalize()


class TransactionCategory(str, Enum):
    """Category inferred from the account types a transaction touches."""

    OPENING = "Opening"
    DEPOSIT = "Deposit"
    WITHDRAWAL = "Withdrawal"
    EXPENSE = "Expense"
    INCOME = "Income"
    TRANSFER = "Transfer"
    OTHER = "Other"


@dataclass(frozen=True)
class Account:
    """Ledger account domain entity."""

    id: int
    name: str
    type: AccountType
    parent_id: Optional[int]
    currency: str
    description: str = ""
    is_hidden: bool = False

    @property
    def leaf_name(self) -> str:
        return self.name.rsplit(":", 1)[-1]


@dataclass(frozen=True)
class AccountNode:
    """Account with its subaccounts, for hierarchical display."""

    account: Account
    children: tuple["AccountNode", ...] = ()


@dataclass(frozen=True)
class Transaction:
    """Transaction header domain entity."""

    id: int
    timestamp: int
    description: str
    status: TransactionStatus
    external_id: Optional[str] = None


@dataclass(frozen=True)
class Split:
    """One signed line item of a transaction."""

    id: int
    transaction_id: int
    account_id: int
    amount: int
    currency: str
    memo: str = ""


@dataclass(frozen=True)
class SplitInput:
    """Split request. ``id == 0`` marks a split that does not exist yet."""

    account_name: str
    amount: int
    memo: str = ""
    id: int = 0
    account_id: Optional[int] = None
    currency: str = ""


@dataclass(frozen=True)
class TransactionInput:
    """Request to create a transaction."""

    description: str
    splits: tuple[SplitInput, ...]
    timestamp: int = 0
    status: TransactionStatus = TransactionStatus.PENDING
    external_id: Optional[str] = None


@dataclass(frozen=True)
class SplitDetail:
    """Split resolved for display, with its account name and type attached."""

    id: int
    account_id: int
    account_name: str
    account_type: AccountType
    amount: int
    currency: str
    memo: str = ""


@dataclass(frozen=True)
class TransactionDetail:
    """Transaction with its resolved splits."""

    id: int
    timestamp: int
    description: str
    status: TransactionStatus
    splits: tuple[SplitDetail, ...] = field(default_factory=tuple)
    external_id: Optional[str] = None

    def to_split_inputs(self) -> list[SplitInput]:
        """Convert the stored splits into inputs for a complete update."""
        return [
            SplitInput(
                id=split.id,
                account_name=split.account_name,
                account_id=split.account_id,
                amount=split.amount,
                currency=split.currency,
                memo=split.memo,
            )
            for split in self.splits
        ]

    def with_amount_preserving_balance(self, new_abs_amount: int) -> "TransactionDetail":
        """Return a copy with both legs of a 2-split transaction set to a new magnitude.

        Each leg keeps its sign, so the result still balances.

        Raises:
            ValidationError: If the transaction does not have exactly 2 splits
        """
        if len(self.splits) != 2:
            raise ValidationError("Auto-balance only supports transactions with 2 splits")
        amount = abs(new_abs_amount)
        first, second = self.splits
        if first.amount >= 0:
            splits = (replace(first, amount=amount), replace(second, amount=-amount))
        else:
            splits = (replace(first, amount=-amount), replace(second, amount=amount))
        return replace(self, splits=splits)


@dataclass(frozen=True)
class TransactionSummary:
    """Classifier output for one transaction, used by list views."""

    detail: TransactionDetail
    category: TransactionCategory
    display_account: str
    display_amount: int
    display_currency: str
