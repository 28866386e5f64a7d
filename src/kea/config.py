"""Ledger configuration."""

import os
from dataclasses import dataclass
from typing import Optional

from kea.domain.constants import DEFAULT_CURRENCY

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LedgerConfig:
    """Settings passed explicitly into the services.

    Attributes:
        default_currency: Currency used when an account has none of its own.
        database_path: Path to the SQLite database file, or None for the default.
        allow_reconciled_demotion: Allow moving a reconciled transaction back
            to Pending or Cleared. Off by default: reconciled is terminal.
    """

    default_currency: str = DEFAULT_CURRENCY
    database_path: Optional[str] = None
    allow_reconciled_demotion: bool = False

    def __post_init__(self):
        object.__setattr__(self, "default_currency", self.default_currency.strip().upper())

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Build settings from environment variables.

        Reads KEA_DEFAULT_CURRENCY, KEA_DB_PATH and KEA_ALLOW_DEMOTION.

        Returns:
            LedgerConfig: Settings sourced from environment variables.
        """
        currency = os.getenv("KEA_DEFAULT_CURRENCY") or DEFAULT_CURRENCY
        database_path = os.getenv("KEA_DB_PATH") or None
        demotion = os.getenv("KEA_ALLOW_DEMOTION", "").strip().lower() in _TRUE_VALUES
        return cls(
            default_currency=currency,
            database_path=database_path,
            allow_reconciled_demotion=demotion,
        )
