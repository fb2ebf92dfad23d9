"""Account group management commands."""

import click
from cashledger.cli.account_resolution import resolve_group_or_exit
from cashledger.cli.error_handling import handle_domain_error
from cashledger.domain.account import AccountService
from cashledger.domain.errors import DomainError


@click.group()
def group_group():
    """Manage account groups."""
    pass


@group_group.command("create")
@click.argument("name", metavar="GROUP_NAME")
@click.pass_context
def create_group(ctx, name: str):
    """Create a new account group.

    Examples:
        cashledger group create "Restaurant"
    """
    service = AccountService(ctx.obj["db"])
    try:
        group_id = service.create_group(name)
        click.echo(f"Created account group '{name}' (ID: {group_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List all account groups with their accounts."""
    service = AccountService(ctx.obj["db"])

    groups = service.list_groups()
    if not groups:
        click.echo("No account groups found.")
        return

    click.echo("\nAccount groups:")
    click.echo("-" * 60)
    for grp in groups:
        accounts = service.list_accounts(group_id=grp.id)
        names = ", ".join(acc.name for acc in accounts) or "-"
        click.echo(f"ID: {grp.id:3d} | {grp.name:20s} | Accounts: {names}")


@group_group.command("delete")
@click.argument("group", metavar="GROUP")
@click.pass_context
def delete_group(ctx, group: str) -> None:
    """Delete an account group with all its accounts and entries.

    GROUP can be a group name or ID.
    """
    service = AccountService(ctx.obj["db"])
    group_id = resolve_group_or_exit(ctx, service, group)
    group_obj = service.get_group(group_id)

    account_count = len(service.list_accounts(group_id=group_id))
    if not click.confirm(
        f"Delete account group '{group_obj.name}' and its {account_count} account(s)?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_group(group_id)
        click.echo(f"Deleted account group '{group_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account group commands with main CLI."""
    cli.add_command(group_group, name="group")
