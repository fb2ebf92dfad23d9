"""Balance commands."""

import click
from cashledger.cli.account_resolution import resolve_account_or_exit, resolve_group_or_exit
from cashledger.domain.account import AccountService
from cashledger.domain.entities import BalanceView
from cashledger.domain.ledger import LedgerService
from cashledger.utils.date_parser import parse_date


@click.command("balance")
@click.option("--account", help="Only this account (name or ID)")
@click.option("--group", help="Only this account group (name or ID)")
@click.option(
    "--view",
    type=click.Choice([v.value for v in BalanceView], case_sensitive=False),
    default=BalanceView.RAW.value,
    help="raw: everything but reservations; evaluation: also without cash deposits",
)
@click.option("--as-of", help="Only count entries up to this date")
@click.pass_context
def balance(ctx, account: str | None, group: str | None, view: str, as_of: str | None):
    """Show account and group balances.

    Without --account or --group all groups are shown with their accounts.
    Accounts excluded from the group balance are marked and not summed.
    """
    if account and group:
        click.echo("Error: --account and --group cannot be combined.", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    account_service = AccountService(db)
    ledger = LedgerService(db)
    balance_view = BalanceView(view.lower())

    end = None
    if as_of:
        try:
            end = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)
        acc = account_service.get_account(account_id)
        click.echo(f"{acc.name}: {ledger.balance(account_id, balance_view, end):.2f}")
        return

    if group:
        groups = [account_service.get_group(resolve_group_or_exit(ctx, account_service, group))]
    else:
        groups = account_service.list_groups()

    if not groups:
        click.echo("No account groups found.")
        return

    click.echo(f"\nBalances ({balance_view.value}):")
    for grp in groups:
        click.echo("-" * 50)
        for acc in account_service.list_accounts(group_id=grp.id):
            marker = "" if acc.included_in_balance else " (excluded)"
            click.echo(f"  {acc.name:30s} {ledger.balance(acc.id, balance_view, end):>12.2f}{marker}")
        click.echo(f"{grp.name:32s} {ledger.group_balance(grp.id, balance_view, end):>12.2f}")


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(balance)
