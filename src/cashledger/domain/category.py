"""Category domain service."""

import logging
from typing import Optional
from cashledger.database.base import Database
from cashledger.domain.entities import Category as CategoryEntity
from cashledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    category_not_found,
    duplicate_name,
    empty_category,
    reserved_category_delete,
)

logger = logging.getLogger(__name__)

# Fallback category; can never be deleted and receives the entries of deleted categories
RESERVED_CATEGORY = "Sonstiges"

DEFAULT_CATEGORIES = [
    "Personal",
    "EC-Umbuchung",
    "Kasa",
    "KV-Beiträge",
    "Priv. KV",
    "Strom/Gas",
    "Telefon",
    "Verpackung",
    "Steuerberater",
    "Werbekosten",
    "Einnahmen",
    "Wareneinkauf",
    "Raumkosten",
    "Instandhaltung",
    "Reparatur",
    "Steuern",
    "Sozialkassen",
    "Reservierung",
    "SB-Einzahlung",
    "Umbuchung",
    RESERVED_CATEGORY,
]


class CategoryService:
    """Service for managing categories.

    Categories are either global (group_id None) or scoped to one account
    group. Lookups for a group try the group scope first and fall back to the
    global categories; on databases without group scope only the global
    lookup happens.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def _scope(self, group_id: Optional[int]) -> Optional[int]:
        return group_id if self.db.supports_group_categories else None

    def create_category(self, name: str, group_id: Optional[int] = None) -> int:
        """Create a category.

        Args:
            name: Category name
            group_id: Optional owning account group (ignored on legacy schemas)

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the name already exists in that scope
        """
        name = name.strip()
        if not name:
            raise ValidationError(empty_category())
        scope = self._scope(group_id)
        if self.db.get_category_by_name(name, group_id=scope) is not None:
            raise ConflictError(duplicate_name("Category", name))
        return self.db.create_category(name=name, group_id=scope)

    def ensure_default_categories(self, group_id: Optional[int] = None) -> int:
        """Create the default categories that are missing.

        Returns:
            Number of categories created
        """
        created = 0
        for name in DEFAULT_CATEGORIES:
            if self.find_category(name, group_id) is None:
                self.db.create_category(name=name, group_id=self._scope(group_id))
                created += 1
        if created:
            logger.info("Created %d default categories", created)
        return created

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def find_category(self, name: str, group_id: Optional[int] = None) -> Optional[CategoryEntity]:
        """Find a category by name, group scope first, then global.

        Args:
            name: Category name
            group_id: Account group whose scoped categories are preferred

        Returns:
            Category entity or None if not found
        """
        scope = self._scope(group_id)
        if scope is not None:
            category = self.db.get_category_by_name(name, group_id=scope)
            if category is not None:
                return category
        return self.db.get_category_by_name(name, group_id=None)

    def resolve_category(self, name: str, group_id: Optional[int] = None) -> CategoryEntity:
        """Find a category by name, creating it when missing.

        New categories are created in the group scope when one is given and
        the schema supports it, otherwise globally.

        Raises:
            ValidationError: If the name is empty
        """
        name = name.strip()
        if not name:
            raise ValidationError(empty_category())
        category = self.find_category(name, group_id)
        if category is not None:
            return category
        category_id = self.db.create_category(name=name, group_id=self._scope(group_id))
        logger.debug("Created category '%s' (ID %s)", name, category_id)
        return self.db.get_category(category_id)

    def list_categories(self, group_id: Optional[int] = None) -> list[CategoryEntity]:
        """List global categories plus those scoped to group_id."""
        return self.db.list_categories(group_id=self._scope(group_id))

    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If the new name is empty or the category is reserved
            ConflictError: If the new name is taken in the same scope
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        name = name.strip()
        if not name:
            raise ValidationError(empty_category())
        if category.name == RESERVED_CATEGORY:
            raise ValidationError(f"Category '{RESERVED_CATEGORY}' cannot be renamed")
        existing = self.db.get_category_by_name(name, group_id=category.group_id)
        if existing is not None and existing.id != category_id:
            raise ConflictError(duplicate_name("Category", name))
        self.db.rename_category(category_id, name)

    def delete_category(self, category_id: int) -> int:
        """Delete a category, moving its entries to the reserved category.

        Args:
            category_id: Category ID to delete

        Returns:
            Number of entries reassigned

        Raises:
            NotFoundError: If the category doesn't exist
            DependencyError: If the category is the reserved fallback
        """
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if category.name == RESERVED_CATEGORY:
            raise DependencyError(reserved_category_delete(RESERVED_CATEGORY))

        with self.db.atomic():
            fallback = self.resolve_category(RESERVED_CATEGORY, category.group_id)
            moved = self.db.reassign_entries_category(category_id, fallback.id)
            self.db.delete_category(category_id)

        logger.info(
            "Deleted category '%s', moved %d entries to '%s'", category.name, moved, RESERVED_CATEGORY
        )
        return moved
