"""Shared domain error messages and error types."""

from datetime import date
from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StatementImportError(DomainError):
    """A statement file cannot be imported at all (e.g. mandatory columns missing).

    Raised before any row is processed.
    """


class RowParseError(DomainError):
    """A single statement row cannot be parsed; the row is skipped."""

    def __init__(self, row_num: int, reason: str):
        super().__init__(f"Row {row_num}: {reason}")
        self.row_num = row_num
        self.reason = reason


class CommitError(DomainError):
    """The persistent store failed to commit a batch of changes."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_not_found(name: str) -> str:
    """Return message for missing account by name."""
    return f"Account '{name}' not found"


def group_not_found(group_id: int) -> str:
    """Return message for missing account group."""
    return f"Account group {group_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Entry {entry_id} not found"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a name that is already taken."""
    return f"{kind} with name '{name}' already exists"


def reserved_category_delete(name: str) -> str:
    """Return message when the reserved fallback category is about to be deleted."""
    return f"Category '{name}' is reserved and cannot be deleted"


def invalid_entry_kind(kind: object) -> str:
    """Return message for an unknown entry kind."""
    return f"Invalid entry kind '{kind}'"


def zero_amount() -> str:
    """Return message for a zero amount."""
    return "Amount must not be zero"


def empty_category() -> str:
    """Return message for a missing category name."""
    return "Category must not be empty"


def missing_columns(columns: list[str]) -> str:
    """Return message for a statement header without mandatory columns."""
    return f"CSV file missing required columns: {', '.join(columns)}"


def mirror_not_found(entry_id: int, entry_date: date, amount: Decimal) -> str:
    """Return message when a transfer leg has no counterpart."""
    return f"No mirror found for transfer entry {entry_id} ({entry_date}, {amount})"
