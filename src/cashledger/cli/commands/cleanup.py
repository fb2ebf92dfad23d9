"""Data cleanup commands."""

import click
from cashledger.domain.ledger import LedgerService


@click.group()
def cleanup_group():
    """Repair stored ledger data."""
    pass


@cleanup_group.command("invalid")
@click.pass_context
def cleanup_invalid(ctx):
    """Delete entries with a zero amount or an unknown kind."""
    removed = LedgerService(ctx.obj["db"]).cleanup_invalid_entries()
    click.echo(f"Removed {removed} invalid entries")


@cleanup_group.command("years")
@click.pass_context
def cleanup_years(ctx):
    """Move entries dated before year 100 (e.g. 0025) into the 2000s."""
    corrected = LedgerService(ctx.obj["db"]).correct_entry_years()
    click.echo(f"Corrected {corrected} entries")


def register_commands(cli):
    """Register cleanup commands with main CLI."""
    cli.add_command(cleanup_group, name="cleanup")
