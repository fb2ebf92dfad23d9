"""Main CLI entry point."""

import click
from cashledger.database.factories import DB_PATH_ENV, create_sqlite_database
from cashledger.log_config import configure_logging

# Import and register all commands at module level
from cashledger.cli.commands import (
    group,
    account,
    category,
    entry,
    import_cmd,
    balance,
    rules,
    cleanup,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level (overrides CASHLEDGER_LOG_LEVEL, default WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Cashledger - personal multi-account cash ledger.

    Keep bank and cash accounts in groups, import bank statement CSV exports
    with automatic categorization, and look at raw and evaluation balances.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
group.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
entry.register_commands(cli)
import_cmd.register_commands(cli)
balance.register_commands(cli)
rules.register_commands(cli)
cleanup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
