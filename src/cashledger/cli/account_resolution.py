"""CLI helpers for account and group resolution."""

from __future__ import annotations

import click
from cashledger.domain.account import AccountService
from cashledger.utils.account_resolver import resolve_account, resolve_group


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_group_or_exit(
    ctx: click.Context, account_service: AccountService, group: str | int
) -> int:
    """Resolve account group name or ID, or exit with a CLI error."""
    try:
        return resolve_group(account_service, group)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
