"""Utility for resolving account codes to IDs."""

from ledgerkit.domain.account import AccountService
from ledgerkit.domain.errors import UnknownAccount


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve an account code or ID to an account ID.

    Codes are often numeric ("1000"), so an exact code match wins over
    reading the value as an ID.

    Args:
        account_service: AccountService instance
        account: Account code (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        UnknownAccount: If account is not found
    """
    # If it's already an integer, use it as ID
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise UnknownAccount(f"Account ID {account} not found")
        return account

    account = account.strip()
    account_obj = account_service.get_account_by_code(account)
    if account_obj is not None:
        return account_obj.id

    # Try to parse as integer (handles string IDs like "1")
    try:
        account_id = int(account)
    except ValueError:
        raise UnknownAccount(f"Account '{account}' not found") from None

    if account_service.get_account(account_id) is None:
        raise UnknownAccount(f"Account '{account}' not found")
    return account_id
