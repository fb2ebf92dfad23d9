"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Iterable
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from cashledger.domain.entities import (
    AccountGroup,
    Account,
    Category,
    Entry,
    CategoryLearningRule,
)


class Database(ABC):
    """Abstract database interface for cashledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group all writes of a block into one commit.

        Writes inside the block become visible to queries in the same block,
        are committed together on exit and rolled back on error. A failing
        commit raises CommitError. Nested blocks join the outermost one.
        """
        pass

    @property
    @abstractmethod
    def supports_group_categories(self) -> bool:
        """Whether the schema stores a group reference on categories."""
        pass

    # Account group operations
    @abstractmethod
    def create_account_group(self, name: str) -> int:
        """Create an account group. Returns group ID."""
        pass

    @abstractmethod
    def get_account_group(self, group_id: int) -> Optional[AccountGroup]:
        """Get account group by ID."""
        pass

    @abstractmethod
    def list_account_groups(self) -> list[AccountGroup]:
        """List all account groups."""
        pass

    @abstractmethod
    def delete_account_group(self, group_id: int) -> None:
        """Delete a group together with its accounts and their entries."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        group_id: int,
        kind: str = "bank",
        included_in_balance: bool = True,
        display_order: int = 0,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def list_accounts(self, group_id: Optional[int] = None) -> list[Account]:
        """List accounts, optionally filtered by group."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        included_in_balance: Optional[bool] = None,
        display_order: Optional[int] = None,
    ) -> None:
        """Update account fields."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account together with its entries."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, name: str, group_id: Optional[int] = None) -> int:
        """Create a category. Returns category ID.

        group_id is ignored when the schema has no group scope.
        """
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str, group_id: Optional[int] = None) -> Optional[Category]:
        """Get a category by exact name within one scope (None = global)."""
        pass

    @abstractmethod
    def list_categories(self, group_id: Optional[int] = None) -> list[Category]:
        """List global categories plus those scoped to group_id."""
        pass

    @abstractmethod
    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category."""
        pass

    @abstractmethod
    def reassign_entries_category(self, from_category_id: int, to_category_id: int) -> int:
        """Move all entries of one category to another. Returns the number moved."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        pass

    # Entry operations
    @abstractmethod
    def create_entry(
        self,
        account_id: int,
        date: date,
        amount: Decimal,
        kind: str,
        category_id: Optional[int] = None,
        usage: Optional[str] = None,
        target_account_id: Optional[int] = None,
    ) -> int:
        """Create a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[Entry]:
        """Get entry by ID."""
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        account_id: int,
        date: date,
        amount: Decimal,
        kind: str,
        category_id: Optional[int],
        usage: Optional[str],
        target_account_id: Optional[int],
    ) -> None:
        """Overwrite all mutable fields of an entry."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete an entry."""
        pass

    @abstractmethod
    def list_entries(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kinds: Optional[Iterable[str]] = None,
        category_id: Optional[int] = None,
    ) -> list[Entry]:
        """List entries with optional filters, newest first."""
        pass

    @abstractmethod
    def find_entries(
        self,
        account_id: int,
        amount: Decimal,
        tolerance: Decimal,
        on_date: Optional[date] = None,
        kind: Optional[str] = None,
        target_account_id: Optional[int] = None,
    ) -> list[Entry]:
        """Find entries of an account whose amount lies within tolerance of amount."""
        pass

    @abstractmethod
    def sum_entry_amounts(
        self,
        account_id: int,
        exclude_kinds: Iterable[str] = (),
        end_date: Optional[date] = None,
    ) -> Decimal:
        """Sum entry amounts of an account, leaving out the given kinds."""
        pass

    @abstractmethod
    def delete_invalid_entries(self, valid_kinds: Iterable[str]) -> int:
        """Delete entries with a zero amount or an unknown kind. Returns the count."""
        pass

    # Category learning rule operations
    @abstractmethod
    def get_learning_rule(self, pattern: str) -> Optional[CategoryLearningRule]:
        """Get a learning rule by pattern."""
        pass

    @abstractmethod
    def list_learning_rules(self) -> list[CategoryLearningRule]:
        """List all learning rules in insertion order."""
        pass

    @abstractmethod
    def save_learning_rule(self, rule: CategoryLearningRule) -> None:
        """Insert or replace the rule stored under rule.pattern."""
        pass
