"""Shared pytest fixtures for cashledger tests."""

import logging
import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from cashledger.database.factories import create_sqlite_database
from cashledger.domain.account import AccountService
from cashledger.domain.category import CategoryService
from cashledger.domain.entities import AccountKind, EntryKind
from cashledger.domain.learning import CategoryLearningStore, InMemoryRuleStore
from cashledger.domain.ledger import LedgerService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def learning_store():
    """Create a learning store backed by memory."""
    return CategoryLearningStore(InMemoryRuleStore())


@pytest.fixture
def sample_group(account_service):
    """Create a sample account group."""
    group_id = account_service.create_group("Restaurant")
    return account_service.get_group(group_id)


@pytest.fixture
def giro(account_service, sample_group):
    """Create a bank account in the sample group."""
    account_id = account_service.create_account(name="Giro", group_id=sample_group.id)
    return account_service.get_account(account_id)


@pytest.fixture
def kasse(account_service, sample_group):
    """Create a cash register account in the sample group."""
    account_id = account_service.create_account(
        name="Kasse", group_id=sample_group.id, kind=AccountKind.CASH
    )
    return account_service.get_account(account_id)


@pytest.fixture
def bargeld(account_service, sample_group):
    """Create a cash account whose transfers to Giro are not mirrored."""
    account_id = account_service.create_account(
        name="Bargeld", group_id=sample_group.id, kind=AccountKind.CASH
    )
    return account_service.get_account(account_id)


@pytest.fixture
def stored_cash_deposit(ledger_service, bargeld):
    """A self-service cash deposit of 50.00 already booked on Bargeld."""
    entries = ledger_service.create_entry(
        kind=EntryKind.CASH_DEPOSIT,
        amount=Decimal("50.00"),
        category="SB-Einzahlung",
        account_id=bargeld.id,
        usage="SB-Einzahlung - 01.03.2025",
        entry_date=date(2025, 3, 1),
    )
    return entries[0]


@pytest.fixture
def write_csv(tmp_path):
    """Write CSV text to a file and return its path."""

    def _write(text: str, name: str = "statement.csv", encoding: str = "utf-8") -> str:
        path = tmp_path / name
        path.write_text(text, encoding=encoding)
        return str(path)

    return _write


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_cashledger_logger():
    """Drop handlers the CLI attached to the package logger."""
    yield
    logger = logging.getLogger("cashledger")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
