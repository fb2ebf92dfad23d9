"""Tests for entry, balance, rules and cleanup commands."""

import json
from datetime import date
from decimal import Decimal

import click
import pytest

from cashledger.cli.error_handling import handle_domain_error
from cashledger.cli.main import cli
from cashledger.domain.errors import CommitError
from cashledger.domain.entities import EntryKind


def _run(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_entry_add(cli_runner, temp_db, giro):
    """Test booking an expense."""
    result = _run(
        cli_runner,
        temp_db,
        "entry", "add",
        "--account", "Giro",
        "--kind", "expense",
        "--amount", "12,50",
        "--category", "Wareneinkauf",
        "--date", "25.04.2025",
        "--usage", "Metro",
    )

    assert result.exit_code == 0
    assert f"Created entry 1: 2025-04-25 -12.50 on account {giro.id}" in result.output


def test_entry_add_transfer(cli_runner, temp_db, giro, kasse):
    """Test that a transfer with a target prints both legs."""
    result = _run(
        cli_runner,
        temp_db,
        "entry", "add",
        "--account", "Giro",
        "--kind", "transfer",
        "--amount", "200",
        "--category", "Umbuchung",
        "--date", "01.04.2025",
        "--target", "Kasse",
    )

    assert result.exit_code == 0
    assert result.output.count("Created entry") == 2
    assert f"200.00 on account {kasse.id}" in result.output


def test_entry_add_invalid_amount(cli_runner, temp_db, giro):
    result = _run(
        cli_runner, temp_db,
        "entry", "add", "--account", "Giro", "--kind", "income", "--amount", "abc", "--category", "Einnahmen",
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_entry_add_same_transfer_target(cli_runner, temp_db, giro):
    result = _run(
        cli_runner, temp_db,
        "entry", "add", "--account", "Giro", "--kind", "transfer", "--amount", "5",
        "--category", "Umbuchung", "--target", "Giro",
    )

    assert result.exit_code == 1
    assert "must differ" in result.output


def test_entry_list(cli_runner, temp_db, ledger_service, giro):
    ledger_service.create_entry(
        kind=EntryKind.EXPENSE,
        amount=Decimal("12.50"),
        category="Sonstiges",
        account_id=giro.id,
        usage="ACME GmbH",
        entry_date=date(2025, 4, 25),
    )

    result = _run(cli_runner, temp_db, "entry", "list", "--account", "Giro")
    assert result.exit_code == 0
    assert "25.04.2025" in result.output
    assert "-12.50" in result.output
    assert "ACME GmbH" in result.output

    result = _run(cli_runner, temp_db, "entry", "list", "--kind", "income")
    assert "No entries found." in result.output


def test_entry_list_rejects_two_periods(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "entry", "list", "--this-month", "--last-month")

    assert result.exit_code == 1
    assert "Only one period option" in result.output


def test_entry_update_and_delete(cli_runner, temp_db, ledger_service, giro):
    (entry,) = ledger_service.create_entry(
        kind=EntryKind.EXPENSE,
        amount=Decimal("12.50"),
        category="Sonstiges",
        account_id=giro.id,
        usage="ACME",
        entry_date=date(2025, 4, 25),
    )

    result = _run(cli_runner, temp_db, "entry", "update", str(entry.id), "--usage", "ACME GmbH")
    assert result.exit_code == 0
    assert f"Updated entry {entry.id}" in result.output

    result = _run(cli_runner, temp_db, "entry", "list")
    assert "ACME GmbH" in result.output

    result = _run(cli_runner, temp_db, "entry", "delete", str(entry.id))
    assert result.exit_code == 0
    assert f"Deleted entry {entry.id}" in result.output

    result = _run(cli_runner, temp_db, "entry", "delete", str(entry.id))
    assert result.exit_code == 1
    assert f"Entry {entry.id} not found" in result.output


def test_balance_views(cli_runner, temp_db, ledger_service, giro):
    """Test raw and evaluation balance of one account."""
    ledger_service.create_entry(
        kind=EntryKind.INCOME, amount=Decimal("100"), category="Einnahmen",
        account_id=giro.id, usage="", entry_date=date(2025, 3, 1),
    )
    ledger_service.create_entry(
        kind=EntryKind.CASH_DEPOSIT, amount=Decimal("50"), category="SB-Einzahlung",
        account_id=giro.id, usage="SB-Einzahlung", entry_date=date(2025, 3, 2),
    )

    result = _run(cli_runner, temp_db, "balance", "--account", "Giro")
    assert "Giro: 150.00" in result.output

    result = _run(cli_runner, temp_db, "balance", "--account", "Giro", "--view", "evaluation")
    assert "Giro: 100.00" in result.output

    result = _run(cli_runner, temp_db, "balance", "--account", "Giro", "--as-of", "01.03.2025")
    assert "Giro: 100.00" in result.output


def test_balance_groups(cli_runner, temp_db, ledger_service, account_service, giro, kasse):
    """Test that excluded accounts are marked and not summed."""
    for account, amount in ((giro, "100"), (kasse, "30")):
        ledger_service.create_entry(
            kind=EntryKind.INCOME, amount=Decimal(amount), category="Einnahmen",
            account_id=account.id, usage="", entry_date=date(2025, 3, 1),
        )
    account_service.set_included_in_balance(kasse.id, False)

    result = _run(cli_runner, temp_db, "balance")

    assert result.exit_code == 0
    assert "Balances (raw):" in result.output
    assert "(excluded)" in result.output
    group_line = [line for line in result.output.splitlines() if line.startswith("Restaurant")][0]
    assert group_line.split()[-1] == "100.00"


def test_balance_account_and_group(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "balance", "--account", "Giro", "--group", "Restaurant")

    assert result.exit_code == 1
    assert "cannot be combined" in result.output


def test_rules_learn_and_suggest(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "rules", "learn", "METRO Filiale", "Wareneinkauf")
    assert result.exit_code == 0
    assert "Learned 'metro filiale' -> Wareneinkauf (count 1)" in result.output

    result = _run(cli_runner, temp_db, "rules", "suggest", "Metro Filiale Nord")
    assert result.output.strip() == "Wareneinkauf"

    result = _run(cli_runner, temp_db, "rules", "suggest", "Vodafone")
    assert "No suggestion." in result.output

    result = _run(cli_runner, temp_db, "rules", "list")
    assert "metro filiale" in result.output


def test_rules_learn_nothing(cli_runner, temp_db):
    result = _run(cli_runner, temp_db, "rules", "learn", "12345678", "Steuern")

    assert result.exit_code == 1
    assert "no text to learn from" in result.output


def test_rules_export_and_import(cli_runner, temp_db, tmp_path):
    """Test moving rules between databases as JSON records."""
    _run(cli_runner, temp_db, "rules", "learn", "Metro", "Wareneinkauf")
    export_file = tmp_path / "rules.json"

    result = _run(cli_runner, temp_db, "rules", "export", str(export_file))
    assert result.exit_code == 0
    records = json.loads(export_file.read_text(encoding="utf-8"))
    assert records == [{"pattern": "metro", "category": "Wareneinkauf", "exampleUsage": "Metro", "count": 1}]

    other_db = tmp_path / "other.db"
    result = cli_runner.invoke(cli, ["--db-path", str(other_db), "rules", "import", str(export_file)])
    assert result.exit_code == 0
    assert "Imported 1 rules" in result.output


def test_rules_import_invalid_file(cli_runner, temp_db, tmp_path):
    bad_file = tmp_path / "rules.json"
    bad_file.write_text("{not json", encoding="utf-8")

    result = _run(cli_runner, temp_db, "rules", "import", str(bad_file))

    assert result.exit_code == 1
    assert "Invalid rules file" in result.output


def test_cleanup_invalid(cli_runner, temp_db, giro):
    temp_db.create_entry(account_id=giro.id, date=date(2025, 1, 1), amount=Decimal("3"), kind="gift")

    result = _run(cli_runner, temp_db, "cleanup", "invalid")

    assert result.exit_code == 0
    assert "Removed 1 invalid entries" in result.output


def test_cleanup_years(cli_runner, temp_db, giro):
    temp_db.create_entry(account_id=giro.id, date=date(25, 1, 1), amount=Decimal("-3"), kind="expense")

    result = _run(cli_runner, temp_db, "cleanup", "years")

    assert result.exit_code == 0
    assert "Corrected 1 entries" in result.output


def test_commit_failure_message(capsys):
    ctx = click.Context(click.Command("test"))

    with pytest.raises(click.exceptions.Exit) as excinfo:
        handle_domain_error(ctx, CommitError("Could not commit changes: database is locked"))

    assert excinfo.value.exit_code == 1
    err = capsys.readouterr().err
    assert "Error: Could not commit changes: database is locked (no changes were saved)" in err
