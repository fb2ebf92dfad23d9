"""Utilities for resolving account and group names to IDs."""

from cashledger.domain.account import AccountService


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        ValueError: If account is not found
    """
    account_id = _as_id(account)
    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise ValueError(f"Account ID {account_id} not found")
        return account_id

    account_obj = account_service.get_account_by_name(account)
    if account_obj is None:
        raise ValueError(f"Account '{account}' not found")
    return account_obj.id


def resolve_group(account_service: AccountService, group: str | int) -> int:
    """Resolve account group name or ID to group ID.

    Raises:
        ValueError: If the group is not found
    """
    group_id = _as_id(group)
    if group_id is not None:
        if account_service.get_group(group_id) is None:
            raise ValueError(f"Account group ID {group_id} not found")
        return group_id

    group_obj = account_service.get_group_by_name(group)
    if group_obj is None:
        raise ValueError(f"Account group '{group}' not found")
    return group_obj.id
