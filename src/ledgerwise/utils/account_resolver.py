"""Utility for resolving account names to IDs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledgerwise.domain.errors import NotFoundError

if TYPE_CHECKING:
    from ledgerwise.domain.account import AccountService


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    for acc in account_service.list_accounts(active_only=False):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
