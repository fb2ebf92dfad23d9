"""CSV import command."""

import click
from cashledger.cli.account_resolution import resolve_account_or_exit
from cashledger.cli.error_handling import handle_domain_error
from cashledger.domain.account import AccountService
from cashledger.domain.csv_import import CSVImportService
from cashledger.domain.errors import DomainError


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True))
@click.option("--account", required=True, help="Account the statement belongs to (name or ID)")
@click.option(
    "--transfer-account",
    help="Counter account for cash withdrawals and rebookings (name or ID)",
)
@click.pass_context
def import_csv(ctx, csv_file: str, account: str, transfer_account: str | None):
    """Import a bank statement CSV file.

    Rows are categorized automatically. Cash deposits that look already
    booked are not imported but listed for review.

    Examples:
        cashledger import umsaetze.csv --account Giro
        cashledger import umsaetze.csv --account Giro --transfer-account Bargeld
    """
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, account_service, account)
    transfer_id = (
        resolve_account_or_exit(ctx, account_service, transfer_account) if transfer_account else None
    )

    service = CSVImportService(db)
    try:
        result = service.import_csv(
            csv_file_path=csv_file, account_id=account_id, transfer_account_id=transfer_id
        )
    except (DomainError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported_count} entries")
    click.echo(f"  Skipped: {result.skipped_count} rows")
    click.echo(f"  Suspicious: {result.suspicious_count} rows")
    if result.suspicious:
        click.echo("\nPossible duplicates (not imported):")
        for item in result.suspicious:
            click.echo(
                f"  Row {item.row_num}: {item.date.strftime('%d.%m.%Y')} {item.amount:.2f} "
                f"{item.usage} (matches entry {item.existing_entry.id})"
            )
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}", err=True)
        for error in result.errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
