"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from kea.cli.error_handling import handle_domain_error
from kea.domain.account import AccountService
from kea.domain.entities import Account
from kea.domain.errors import DomainError
from kea.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> Account:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
