"""Account and account group domain service."""

import logging
from typing import Optional
from cashledger.database.base import Database
from cashledger.domain.entities import (
    Account as AccountEntity,
    AccountGroup as AccountGroupEntity,
    AccountKind,
)
from cashledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_name,
    group_not_found,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts and account groups."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_group(self, name: str) -> int:
        """Create a new account group.

        Args:
            name: Group name

        Returns:
            Group ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a group with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Group name must not be empty")
        for group in self.db.list_account_groups():
            if group.name == name:
                raise ConflictError(duplicate_name("Account group", name))
        return self.db.create_account_group(name)

    def get_group(self, group_id: int) -> Optional[AccountGroupEntity]:
        """Get account group by ID."""
        return self.db.get_account_group(group_id)

    def get_group_by_name(self, name: str) -> Optional[AccountGroupEntity]:
        """Get account group by name."""
        for group in self.db.list_account_groups():
            if group.name == name:
                return group
        return None

    def list_groups(self) -> list[AccountGroupEntity]:
        """List all account groups."""
        return self.db.list_account_groups()

    def delete_group(self, group_id: int) -> None:
        """Delete a group, its accounts and all their entries.

        Raises:
            NotFoundError: If the group doesn't exist
        """
        if self.db.get_account_group(group_id) is None:
            raise NotFoundError(group_not_found(group_id))
        self.db.delete_account_group(group_id)
        logger.info("Deleted account group %s", group_id)

    def create_account(
        self,
        name: str,
        group_id: int,
        kind: AccountKind = AccountKind.BANK,
        included_in_balance: bool = True,
        display_order: Optional[int] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name (unique)
            group_id: Owning account group
            kind: Bank, cash or other
            included_in_balance: False opts the account out of group totals
            display_order: Position in listings; appended at the end if None

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the group doesn't exist
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name must not be empty")
        if self.db.get_account_group(group_id) is None:
            raise NotFoundError(group_not_found(group_id))
        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(duplicate_name("Account", name))

        if display_order is None:
            display_order = len(self.db.list_accounts(group_id=group_id))

        return self.db.create_account(
            name=name,
            group_id=group_id,
            kind=AccountKind(kind).value,
            included_in_balance=included_in_balance,
            display_order=display_order,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        """Get account by name."""
        return self.db.get_account_by_name(name)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, group_id: Optional[int] = None) -> list[AccountEntity]:
        """List accounts, optionally only those of one group."""
        return self.db.list_accounts(group_id=group_id)

    def set_included_in_balance(self, account_id: int, included: bool) -> None:
        """Opt an account in or out of its group's balance."""
        self.require_account(account_id)
        self.db.update_account(account_id, included_in_balance=included)

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account.

        Raises:
            NotFoundError: If account not found
            ConflictError: If name already exists
        """
        self.require_account(account_id)
        existing = self.db.get_account_by_name(name)
        if existing is not None and existing.id != account_id:
            raise ConflictError(duplicate_name("Account", name))
        self.db.update_account(account_id, name=name)

    def delete_account(self, account_id: int) -> None:
        """Delete an account together with all its entries.

        Raises:
            NotFoundError: If account not found
        """
        self.require_account(account_id)
        self.db.delete_account(account_id)
        logger.info("Deleted account %s and its entries", account_id)
