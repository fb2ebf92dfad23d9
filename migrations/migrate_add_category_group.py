#!/usr/bin/env python3
"""Migration script to add group_id column to categories table.

Databases created before group-scoped categories keep all categories in one
global list. This migration adds:
- group_id (INTEGER, NULL, references account_groups.id)

Existing categories keep group_id NULL and stay global, so every lookup
behaves exactly as before the migration.

Usage:
    python migrations/migrate_add_category_group.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import cashledger modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from cashledger.database.factories import DB_PATH_ENV, create_sqlite_database


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> bool:
    """Add the group_id column to categories.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        True if the column was added, False if it already existed

    Raises:
        RuntimeError: If the categories table does not exist
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.get_bind()
        finally:
            session.close()

        if "categories" not in inspect(engine).get_table_names():
            raise RuntimeError(
                "Table 'categories' does not exist. Please initialize the database schema first."
            )

        if column_exists(engine, "categories", "group_id"):
            print("Migration already applied: group_id column exists in categories table")
            return False

        print("Starting migration: adding group_id column...")
        with engine.begin() as conn:
            conn.execute(
                text("ALTER TABLE categories ADD COLUMN group_id INTEGER REFERENCES account_groups(id)")
            )
        with engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM categories")).scalar() or 0
        print(f"  Added column: group_id ({count} existing categories stay global)")
        print("Migration completed successfully!")
        return True
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add group_id column to categories"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
