"""CSV import domain service."""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional

from cashledger.database.base import Database
from cashledger.domain.category import RESERVED_CATEGORY
from cashledger.domain.classification import TransactionClassifier
from cashledger.domain.entities import (
    Account as AccountEntity,
    EntryKind,
    ImportedEntry,
    ImportResult,
    StatementRow,
    SuspiciousEntry,
)
from cashledger.domain.errors import (
    CommitError,
    DomainError,
    NotFoundError,
    RowParseError,
    account_name_not_found,
    account_not_found,
)
from cashledger.domain.learning import CategoryLearningStore, DatabaseRuleStore
from cashledger.domain.ledger import LedgerService
from cashledger.domain.statement_reader import StatementReader
from cashledger.domain.suspicion import SuspicionDetector

logger = logging.getLogger(__name__)

# Tried in order when reading statement files
STATEMENT_ENCODINGS = ("utf-8-sig", "cp1252")


def read_statement_file(csv_file_path: str) -> str:
    """Read a statement file as text.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
    raw = csv_path.read_bytes()
    for encoding in STATEMENT_ENCODINGS[:-1]:
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            logger.debug("%s is not %s encoded", csv_file_path, encoding)
    return raw.decode(STATEMENT_ENCODINGS[-1], errors="replace")


class CSVImportService:
    """Service for importing bank statement CSV files.

    All rows are booked in file order inside one atomic block. Rows that
    cannot be parsed are skipped and reported; cash deposits that look
    already booked are withheld for review. A failed commit aborts the whole
    import.
    """

    def __init__(
        self,
        db: Database,
        learning: Optional[CategoryLearningStore] = None,
        classifier: Optional[TransactionClassifier] = None,
        detector: Optional[SuspicionDetector] = None,
    ):
        """Initialize CSV import service.

        Args:
            db: Database instance
            learning: Learning store; database-backed if None
            classifier: Row classifier; built around the learning store if None
            detector: Duplicate detector with the default sensitive categories if None
        """
        self.db = db
        self.learning = learning or CategoryLearningStore(DatabaseRuleStore(db))
        self.classifier = classifier or TransactionClassifier(self.learning)
        self.detector = detector or SuspicionDetector(db)
        self.ledger = LedgerService(db)

    def import_csv(
        self,
        csv_file_path: str,
        account_id: int,
        transfer_account_id: Optional[int] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> ImportResult:
        """Import a statement file.

        Args:
            csv_file_path: Path to CSV file
            account_id: Account the statement belongs to
            transfer_account_id: Counter account for rows classified as transfers
            should_continue: Checked before each row; returning False stops the import

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            StatementImportError: If the file is empty or lacks date/amount columns
            NotFoundError: If an account doesn't exist
            CommitError: If the rows cannot be committed
        """
        text = read_statement_file(csv_file_path)
        return self.import_text(text, account_id, transfer_account_id, should_continue)

    def import_text(
        self,
        text: str,
        account_id: int,
        transfer_account_id: Optional[int] = None,
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> ImportResult:
        """Import statement CSV text; see import_csv."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if transfer_account_id is not None and self.db.get_account(transfer_account_id) is None:
            raise NotFoundError(account_not_found(transfer_account_id))

        reader = StatementReader(text)
        result = ImportResult()
        logger.info("Importing %d rows into '%s'", len(reader), account.name)

        with self.db.atomic():
            for row_num, fields in reader.records():
                if should_continue is not None and not should_continue():
                    result.cancelled = True
                    logger.info("Import cancelled before row %d", row_num)
                    break
                try:
                    row = reader.parse_row(row_num, fields)
                    self._import_row(row, account, transfer_account_id, result)
                except CommitError:
                    raise
                except DomainError as e:
                    message = str(e) if isinstance(e, RowParseError) else f"Row {row_num}: {e}"
                    logger.warning("Skipping %s", message)
                    result.errors.append(message)

        logger.info("Import into '%s' finished: %s", account.name, result.summary)
        return result

    def _row_account(self, row: StatementRow, default: AccountEntity) -> AccountEntity:
        if not row.account_name:
            return default
        account = self.db.get_account_by_name(row.account_name)
        if account is None:
            raise RowParseError(row.row_num, account_name_not_found(row.account_name))
        return account

    def _import_row(
        self,
        row: StatementRow,
        default_account: AccountEntity,
        transfer_account_id: Optional[int],
        result: ImportResult,
    ) -> None:
        account = self._row_account(row, default_account)
        classification = self.classifier.classify(row.purpose, row.name, row.amount, row.category)
        usage = classification.usage
        category = classification.category
        kind = classification.kind

        existing = self.detector.find_duplicate(account.id, row.amount, category, usage)
        if existing is not None:
            logger.info(
                "Row %d looks like entry %s already booked on '%s'", row.row_num, existing.id, account.name
            )
            result.suspicious.append(
                SuspiciousEntry(
                    row_num=row.row_num,
                    date=row.date,
                    amount=row.amount,
                    account=account.name,
                    usage=usage,
                    category=category,
                    kind=kind,
                    existing_entry=existing,
                )
            )
            return

        target_account_id = None
        amount: Decimal = row.amount
        if kind == EntryKind.TRANSFER:
            if transfer_account_id is not None and transfer_account_id != account.id:
                target_account_id = transfer_account_id
                # Stated transfer amount is what leaves the statement account
                amount = -row.amount
            else:
                kind = EntryKind.INCOME if row.amount > 0 else EntryKind.EXPENSE

        self.ledger.create_entry(
            kind=kind,
            amount=amount,
            category=category,
            account_id=account.id,
            usage=usage or None,
            entry_date=row.date,
            target_account_id=target_account_id,
        )
        if usage and category != RESERVED_CATEGORY:
            self.learning.learn(usage, category)

        result.imported.append(
            ImportedEntry(
                row_num=row.row_num,
                date=row.date,
                amount=row.amount,
                account=account.name,
                usage=usage,
                category=category,
                kind=kind,
            )
        )
