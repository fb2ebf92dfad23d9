"""Domain model entities for cashledger.

These are pure data classes representing business concepts, independent of
database schema. This allows the business logic to remain stable when the
database schema changes (e.g., global vs. group-scoped categories).
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class EntryKind(str, Enum):
    """Kind tag of a ledger entry."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"
    RESERVATION = "reservation"
    CASH_DEPOSIT = "cash_deposit"


class AccountKind(str, Enum):
    """Kind tag of an account."""

    BANK = "bank"
    CASH = "cash"
    OTHER = "other"


class BalanceView(str, Enum):
    """Inclusion rule used when summing entries into a balance.

    RAW counts everything except reservations, EVALUATION additionally
    leaves out cash deposits.
    """

    RAW = "raw"
    EVALUATION = "evaluation"


@dataclass(frozen=True)
class AccountGroup:
    """Account group domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    group_id: int
    kind: AccountKind
    included_in_balance: bool
    display_order: int
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity.

    group_id is None for global categories.
    """

    id: int
    name: str
    group_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Entry:
    """Ledger entry domain entity."""

    id: int
    account_id: int
    date: date
    amount: Decimal
    kind: EntryKind
    category_id: Optional[int]
    usage: Optional[str]
    target_account_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class CategoryLearningRule:
    """Learned mapping from a cleaned usage pattern to a category."""

    pattern: str
    category: str
    example_usage: str
    count: int = 1


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one statement row."""

    usage: str
    category: str
    kind: EntryKind


@dataclass(frozen=True)
class StatementRow:
    """One parsed statement row, text fields already repaired."""

    row_num: int
    date: date
    amount: Decimal
    category: str = ""
    name: str = ""
    purpose: str = ""
    account_name: str = ""


@dataclass(frozen=True)
class ImportedEntry:
    """Statement row that was booked into the ledger."""

    row_num: int
    date: date
    amount: Decimal
    account: str
    usage: str
    category: str
    kind: EntryKind


@dataclass(frozen=True)
class SuspiciousEntry:
    """Statement row withheld from the ledger for manual review."""

    row_num: int
    date: date
    amount: Decimal
    account: str
    usage: str
    category: str
    kind: EntryKind
    existing_entry: Entry


@dataclass
class ImportResult:
    """Outcome of a statement import."""

    imported: list[ImportedEntry] = field(default_factory=list)
    suspicious: list[SuspiciousEntry] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    cancelled: bool = False

    @property
    def imported_count(self) -> int:
        return len(self.imported)

    @property
    def skipped_count(self) -> int:
        return len(self.errors)

    @property
    def suspicious_count(self) -> int:
        return len(self.suspicious)

    @property
    def summary(self) -> str:
        return (
            f"{self.imported_count} imported, {self.skipped_count} skipped, "
            f"{self.suspicious_count} suspicious"
        )
