"""Account management commands."""

import click
from cashledger.cli.account_resolution import resolve_account_or_exit, resolve_group_or_exit
from cashledger.cli.error_handling import handle_domain_error
from cashledger.domain.account import AccountService
from cashledger.domain.entities import AccountKind
from cashledger.domain.errors import DomainError


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--group", "group", required=True, help="Account group name or ID")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in AccountKind], case_sensitive=False),
    default=AccountKind.BANK.value,
    help="Account kind (default: bank)",
)
@click.option(
    "--exclude-from-balance",
    is_flag=True,
    help="Leave the account out of the group balance",
)
@click.pass_context
def create_account(ctx, name: str, group: str, kind: str, exclude_from_balance: bool):
    """Create a new account in a group.

    Examples:
        cashledger account create "Giro" --group "Restaurant"
        cashledger account create "Bargeld" --group "Restaurant" --kind cash
    """
    service = AccountService(ctx.obj["db"])
    group_id = resolve_group_or_exit(ctx, service, group)

    try:
        account_id = service.create_account(
            name=name,
            group_id=group_id,
            kind=AccountKind(kind.lower()),
            included_in_balance=not exclude_from_balance,
        )
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--group", help="Only show accounts of this group (name or ID)")
@click.pass_context
def list_accounts(ctx, group: str | None):
    """List accounts."""
    service = AccountService(ctx.obj["db"])
    group_id = resolve_group_or_exit(ctx, service, group) if group else None

    accounts = service.list_accounts(group_id=group_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    groups = {grp.id: grp.name for grp in service.list_groups()}
    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        balance_flag = "" if acc.included_in_balance else " (excluded)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.kind.value:5s} | "
            f"Group: {groups.get(acc.group_id, '?')}{balance_flag}"
        )


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_account(ctx, account: str, new_name: str) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.
    """
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.rename_account(account_id=account_id, name=new_name)
        click.echo(f"Renamed account to '{new_name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("include")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def include_account(ctx, account: str) -> None:
    """Count an account in its group balance again."""
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    service.set_included_in_balance(account_id, True)
    click.echo(f"Account {account} is included in the group balance")


@account_group.command("exclude")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def exclude_account(ctx, account: str) -> None:
    """Leave an account out of its group balance."""
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, account)
    service.set_included_in_balance(account_id, False)
    click.echo(f"Account {account} is excluded from the group balance")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account together with all its entries.

    ACCOUNT can be an account name or ID. Transfers on other accounts that
    point at it keep their amount but lose the target reference.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    entry_count = len(db.list_entries(account_id=account_id))
    if not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' "
        f"and its {entry_count} entr{'y' if entry_count == 1 else 'ies'}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
