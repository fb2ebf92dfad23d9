"""Tests for categories: service, legacy schema and commands."""

import importlib.util
import sqlite3
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from cashledger.cli.main import cli
from cashledger.database.factories import create_sqlite_database
from cashledger.domain.category import CategoryService, DEFAULT_CATEGORIES, RESERVED_CATEGORY
from cashledger.domain.entities import EntryKind
from cashledger.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError

MIGRATION = Path(__file__).parent.parent / "migrations" / "migrate_add_category_group.py"


def _load_migration():
    spec = importlib.util.spec_from_file_location("migrate_add_category_group", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def legacy_db_path(tmp_path):
    """A database whose categories table predates group scopes."""
    path = tmp_path / "legacy.db"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE categories (id INTEGER PRIMARY KEY, name VARCHAR NOT NULL, created_at DATETIME NOT NULL)"
    )
    conn.execute("INSERT INTO categories (name, created_at) VALUES ('Steuern', '2024-01-01 00:00:00')")
    conn.commit()
    conn.close()
    return str(path)


class TestCategoryService:
    """Tests for CategoryService."""

    def test_create_and_find(self, category_service):
        category_id = category_service.create_category("Telefon")
        assert category_service.find_category("Telefon").id == category_id

    def test_create_duplicate(self, category_service):
        category_service.create_category("Telefon")
        with pytest.raises(ConflictError):
            category_service.create_category(" Telefon ")

    def test_create_empty(self, category_service):
        with pytest.raises(ValidationError):
            category_service.create_category("   ")

    def test_scoped_category_preferred(self, category_service, sample_group):
        """Test that a group's own category shadows the global one."""
        global_id = category_service.create_category("Kasa")
        scoped_id = category_service.create_category("Kasa", group_id=sample_group.id)

        assert category_service.find_category("Kasa", sample_group.id).id == scoped_id
        assert category_service.find_category("Kasa").id == global_id

    def test_global_fallback(self, category_service, sample_group):
        global_id = category_service.create_category("Steuern")
        assert category_service.find_category("Steuern", sample_group.id).id == global_id

    def test_resolve_creates_in_group(self, category_service, sample_group):
        category = category_service.resolve_category("Werbekosten", sample_group.id)
        assert category.group_id == sample_group.id
        assert category_service.resolve_category("Werbekosten", sample_group.id).id == category.id

    def test_ensure_default_categories(self, category_service):
        assert category_service.ensure_default_categories() == len(DEFAULT_CATEGORIES)
        assert category_service.ensure_default_categories() == 0
        names = [c.name for c in category_service.list_categories()]
        assert RESERVED_CATEGORY in names
        assert "SB-Einzahlung" in names

    def test_rename(self, category_service):
        category_id = category_service.create_category("Telfon")
        category_service.rename_category(category_id, "Telefon")
        assert category_service.get_category(category_id).name == "Telefon"

    def test_rename_reserved(self, category_service):
        category_id = category_service.create_category(RESERVED_CATEGORY)
        with pytest.raises(ValidationError):
            category_service.rename_category(category_id, "Anderes")

    def test_rename_to_taken_name(self, category_service):
        category_service.create_category("Telefon")
        category_id = category_service.create_category("Internet")
        with pytest.raises(ConflictError):
            category_service.rename_category(category_id, "Telefon")

    def test_delete_moves_entries_to_reserved(self, category_service, ledger_service, giro):
        """Test that entries of a deleted category end up in the fallback."""
        (entry,) = ledger_service.create_entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("20"),
            category="Werbekosten",
            account_id=giro.id,
            usage="Flyer",
            entry_date=date(2025, 4, 1),
        )

        moved = category_service.delete_category(entry.category_id)

        assert moved == 1
        assert category_service.get_category(entry.category_id) is None
        fallback = category_service.get_category(ledger_service.get_entry(entry.id).category_id)
        assert fallback.name == RESERVED_CATEGORY

    def test_reserved_cannot_be_deleted(self, category_service):
        category_id = category_service.create_category(RESERVED_CATEGORY)
        with pytest.raises(DependencyError, match="reserved"):
            category_service.delete_category(category_id)

    def test_delete_unknown(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.delete_category(999)


class TestLegacySchema:
    """Tests for databases without group-scoped categories."""

    def test_categories_are_global(self, legacy_db_path):
        db = create_sqlite_database(database_path=legacy_db_path)
        try:
            service = CategoryService(db)
            group_id = db.create_account_group("Restaurant")

            assert db.supports_group_categories is False
            assert service.find_category("Steuern", group_id).name == "Steuern"

            category = service.resolve_category("Telefon", group_id)
            assert category.group_id is None
            assert [c.name for c in service.list_categories(group_id)] == ["Steuern", "Telefon"]
        finally:
            db.disconnect()

    def test_migration_adds_group_scope(self, legacy_db_path, capsys):
        migration = _load_migration()

        assert migration.migrate_database(legacy_db_path) is True
        assert migration.migrate_database(legacy_db_path) is False

        db = create_sqlite_database(database_path=legacy_db_path)
        try:
            assert db.supports_group_categories is True
            steuern = CategoryService(db).find_category("Steuern")
            assert steuern.group_id is None
        finally:
            db.disconnect()


def test_category_init(cli_runner, temp_db):
    """Test creating default categories."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "init"])

    assert result.exit_code == 0
    assert f"Created {len(DEFAULT_CATEGORIES)} default categories" in result.output


def test_category_create_and_list(cli_runner, temp_db, sample_group):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "category", "create", "Kasa", "--group", "Restaurant"],
    )
    assert result.exit_code == 0
    assert "Created category 'Kasa'" in result.output

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "list", "--group", "Restaurant"]
    )
    assert result.exit_code == 0
    assert "Kasa" in result.output
    assert f"[group {sample_group.id}]" in result.output


def test_category_delete_reserved(cli_runner, temp_db):
    """Test that deleting the fallback category fails."""
    cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "init"])

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "delete", RESERVED_CATEGORY]
    )

    assert result.exit_code == 1
    assert "reserved" in result.output


def test_category_delete(cli_runner, temp_db):
    cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "init"])

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "delete", "Werbekosten"]
    )

    assert result.exit_code == 0
    assert "moved 0 entries to 'Sonstiges'" in result.output


def test_category_delete_unknown(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "delete", "Nope"])

    assert result.exit_code == 1
    assert "not found" in result.output
