"""Utility functions for kea."""

from kea.utils.date_parser import parse_date, parse_timestamp, format_timestamp
from kea.utils.amount_parser import parse_amount, format_cents
from kea.utils.account_resolver import resolve_account

__all__ = [
    "parse_date",
    "parse_timestamp",
    "format_timestamp",
    "parse_amount",
    "format_cents",
    "resolve_account",
]
