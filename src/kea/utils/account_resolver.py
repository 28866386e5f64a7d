"""Utility for resolving account names to accounts."""

from kea.domain.account import AccountService
from kea.domain.entities import Account
from kea.domain.errors import AccountNotFoundError, account_not_found


def resolve_account(account_service: AccountService, account: str | int) -> Account:
    """Resolve an account full name or ID to the account.

    Args:
        account_service: AccountService instance
        account: Full account name, or ID (int or string representation of int)

    Returns:
        Account entity

    Raises:
        AccountNotFoundError: If account is not found
    """
    if isinstance(account, int):
        account_obj = account_service.get_account(account)
        if account_obj is None:
            raise AccountNotFoundError(account_not_found(account))
        return account_obj

    # Names always contain a separator, so a plain number is an ID
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        return account_service.require_account_by_name(account)

    account_obj = account_service.get_account(account_id)
    if account_obj is None:
        raise AccountNotFoundError(account_not_found(account_id))
    return account_obj
