"""Ledger-wide constants."""

ACCOUNT_SEPARATOR = ":"
MAX_NAME_LENGTH = 100
CENTS_PER_UNIT = 100
MIN_SPLITS = 2

RESERVED_ROOT_NAMES = frozenset({"assets", "liabilities", "equity", "revenue", "expenses"})

OPENING_BALANCE_ACCOUNT_LEAF = "OpeningBalances"
OPENING_BALANCE_ACCOUNT = "Equity:OpeningBalances"
OPENING_BALANCE_DESCRIPTION = "Opening Balance"
OPENING_BALANCE_MEMO = "Opening Balance"
OPENING_BALANCE_TRANSACTION_ID = 1

DEFAULT_CURRENCY = "USD"
