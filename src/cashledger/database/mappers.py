"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, making it easy to change when
the database schema changes (e.g., when categories gained a group scope).
"""

from decimal import Decimal

from cashledger.domain import entities as domain
from cashledger.database.models import (
    AccountGroup as ORMAccountGroup,
    Account as ORMAccount,
    Category as ORMCategory,
    Entry as ORMEntry,
    CategoryLearningRule as ORMCategoryLearningRule,
)


def account_group_to_domain(orm_group: ORMAccountGroup) -> domain.AccountGroup:
    """Convert SQLAlchemy AccountGroup model to domain AccountGroup entity."""
    return domain.AccountGroup(
        id=orm_group.id,
        name=orm_group.name,
        created_at=orm_group.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        group_id=orm_account.group_id,
        kind=domain.AccountKind(orm_account.kind),
        included_in_balance=orm_account.included_in_balance,
        display_order=orm_account.display_order,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory, group_scoped: bool = True) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity.

    Args:
        orm_category: ORM category row
        group_scoped: False on legacy schemas without categories.group_id;
            the (deferred) column is then never read.
    """
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        group_id=orm_category.group_id if group_scoped else None,
        created_at=orm_category.created_at,
    )


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy Entry model to domain Entry entity.

    Raises:
        ValueError: If the stored kind is not a known EntryKind
    """
    return domain.Entry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        date=orm_entry.date,
        amount=Decimal(orm_entry.amount),
        kind=domain.EntryKind(orm_entry.kind),
        category_id=orm_entry.category_id,
        usage=orm_entry.usage,
        target_account_id=orm_entry.target_account_id,
        created_at=orm_entry.created_at,
    )


def learning_rule_to_domain(orm_rule: ORMCategoryLearningRule) -> domain.CategoryLearningRule:
    """Convert SQLAlchemy CategoryLearningRule model to domain entity."""
    return domain.CategoryLearningRule(
        pattern=orm_rule.pattern,
        category=orm_rule.category,
        example_usage=orm_rule.example_usage,
        count=orm_rule.count,
    )
