"""Ledger entry commands."""

import click
from cashledger.cli.account_resolution import resolve_account_or_exit
from cashledger.cli.date_filters import resolve_cli_date_range
from cashledger.cli.error_handling import handle_domain_error
from cashledger.domain.account import AccountService
from cashledger.domain.category import CategoryService
from cashledger.domain.entities import EntryKind
from cashledger.domain.errors import DomainError
from cashledger.domain.ledger import LedgerService
from cashledger.utils.amount_parser import parse_amount
from cashledger.utils.date_parser import parse_date

KIND_CHOICE = click.Choice([k.value for k in EntryKind], case_sensitive=False)


def _parse_amount_or_exit(ctx, amount: str):
    try:
        return parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _parse_date_or_exit(ctx, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@click.group()
def entry_group():
    """Manage ledger entries."""
    pass


@entry_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--kind", type=KIND_CHOICE, required=True, help="Entry kind")
@click.option("--amount", required=True, help="Amount (e.g. 12,50 or 12.50)")
@click.option("--category", required=True, help="Category name")
@click.option("--date", "entry_date", default="today", help="Date (default: today)")
@click.option("--usage", help="Usage text")
@click.option("--target", help="Target account of a transfer (name or ID)")
@click.pass_context
def add_entry(ctx, account, kind, amount, category, entry_date, usage, target):
    """Book an entry.

    Income is stored positive and expenses negative. For a transfer AMOUNT
    leaves ACCOUNT and, with --target, arrives on the target account.

    Examples:
        cashledger entry add --account Giro --kind expense --amount 12,50 --category Wareneinkauf
        cashledger entry add --account Giro --kind transfer --amount 200 --category Umbuchung --target Kasse
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)
    target_id = resolve_account_or_exit(ctx, account_service, target) if target else None
    value = _parse_amount_or_exit(ctx, amount)
    booking_date = _parse_date_or_exit(ctx, entry_date)

    try:
        entries = LedgerService(db).create_entry(
            kind=kind.lower(),
            amount=value,
            category=category,
            account_id=account_id,
            usage=usage,
            entry_date=booking_date,
            target_account_id=target_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for created in entries:
        click.echo(f"Created entry {created.id}: {created.date} {created.amount:.2f} on account {created.account_id}")


@entry_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--kind", "kinds", type=KIND_CHOICE, multiple=True, help="Only entries of this kind (repeatable)")
@click.option("--category", help="Category name")
@click.option("--start-date", help="Start date (e.g. 01.01.2025, 2025-01-01, 'last month')")
@click.option("--end-date", help="End date")
@click.option("--this-month", is_flag=True, help="Entries of the current month")
@click.option("--this-year", is_flag=True, help="Entries of the current year")
@click.option("--last-month", is_flag=True, help="Entries of the previous month")
@click.option("--last-year", is_flag=True, help="Entries of the previous year")
@click.option("--this-week", is_flag=True, help="Entries of the current week")
@click.option("--last-week", is_flag=True, help="Entries of the previous week")
@click.pass_context
def list_entries(ctx, account, kinds, category, start_date, end_date, this_month, this_year, last_month, last_year, this_week, last_week):
    """List entries, newest first."""
    db = ctx.obj["db"]
    account_service = AccountService(db)
    category_service = CategoryService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
            "this-week": this_week,
            "last-week": last_week,
        },
    )

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    category_id = None
    if category:
        group_id = account_service.get_account(account_id).group_id if account_id else None
        category_obj = category_service.find_category(category, group_id)
        if category_obj is None:
            click.echo(f"Error: Category '{category}' not found", err=True)
            ctx.exit(1)
        category_id = category_obj.id

    entries = LedgerService(db).list_entries(
        account_id=account_id,
        start_date=start,
        end_date=end,
        kinds=[k.lower() for k in kinds] or None,
        category_id=category_id,
    )
    if not entries:
        click.echo("No entries found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    categories = {}
    for item in entries:
        if item.category_id is not None and item.category_id not in categories:
            cat = category_service.get_category(item.category_id)
            categories[item.category_id] = cat.name if cat else "?"

    click.echo(f"{'ID':>5} | {'Date':10} | {'Amount':>10} | {'Kind':12} | {'Account':12} | {'Category':15} | Usage")
    click.echo("-" * 100)
    for item in entries:
        target = f" -> {accounts.get(item.target_account_id, '?')}" if item.target_account_id else ""
        click.echo(
            f"{item.id:>5} | {item.date.strftime('%d.%m.%Y'):10} | {item.amount:>10.2f} | "
            f"{item.kind.value:12} | {accounts.get(item.account_id, '?'):12} | "
            f"{categories.get(item.category_id, ''):15} | {item.usage or ''}{target}"
        )


@entry_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--kind", type=KIND_CHOICE, help="Entry kind")
@click.option("--amount", help="Amount")
@click.option("--category", help="Category name")
@click.option("--date", "entry_date", help="Date")
@click.option("--usage", help="Usage text")
@click.option("--target", help="Target account of a transfer (name or ID)")
@click.pass_context
def update_entry(ctx, entry_id, account, kind, amount, category, entry_date, usage, target):
    """Update an entry; only the given fields change.

    Transfers keep their mirror on the target account in sync.
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    target_id = resolve_account_or_exit(ctx, account_service, target) if target else None
    value = _parse_amount_or_exit(ctx, amount) if amount is not None else None
    booking_date = _parse_date_or_exit(ctx, entry_date) if entry_date is not None else None

    try:
        LedgerService(db).update_entry(
            entry_id,
            kind=kind.lower() if kind else None,
            amount=value,
            category=category,
            account_id=account_id,
            usage=usage,
            entry_date=booking_date,
            target_account_id=target_id,
        )
        click.echo(f"Updated entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete an entry; a transfer's mirror is deleted with it."""
    try:
        LedgerService(ctx.obj["db"]).delete_entry(entry_id)
        click.echo(f"Deleted entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
