"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from cashledger.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Entry as ORMEntry,
    CategoryLearningRule as ORMCategoryLearningRule,
)
from cashledger.database.mappers import (
    account_to_domain,
    category_to_domain,
    entry_to_domain,
    learning_rule_to_domain,
)
from cashledger.domain.entities import (
    Account,
    AccountKind,
    Category,
    CategoryLearningRule,
    Entry,
    EntryKind,
)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        now = datetime.now(UTC)
        orm_account = ORMAccount(
            id=1,
            name="Bargeld",
            group_id=2,
            kind="cash",
            included_in_balance=False,
            display_order=3,
            created_at=now,
        )

        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.name == "Bargeld"
        assert account.group_id == 2
        assert account.kind == AccountKind.CASH
        assert account.included_in_balance is False
        assert account.display_order == 3
        assert account.created_at == now


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_group_scoped(self):
        orm_category = ORMCategory(id=5, name="Kasa", group_id=2, created_at=datetime.now(UTC))

        category = category_to_domain(orm_category)

        assert isinstance(category, Category)
        assert category.group_id == 2

    def test_legacy_schema_is_global(self):
        """Test that the group column is ignored without group scopes."""
        orm_category = ORMCategory(id=5, name="Kasa", group_id=2, created_at=datetime.now(UTC))

        assert category_to_domain(orm_category, group_scoped=False).group_id is None


class TestEntryMapper:
    """Tests for Entry mapper."""

    def test_entry_to_domain(self):
        orm_entry = ORMEntry(
            id=7,
            account_id=1,
            date=date(2025, 4, 25),
            amount=Decimal("-12.50"),
            kind="expense",
            category_id=3,
            usage="ACME GmbH",
            target_account_id=None,
            created_at=datetime.now(UTC),
        )

        entry = entry_to_domain(orm_entry)

        assert isinstance(entry, Entry)
        assert entry.kind == EntryKind.EXPENSE
        assert entry.amount == Decimal("-12.50")
        assert entry.usage == "ACME GmbH"

    def test_amount_is_decimal(self):
        orm_entry = ORMEntry(
            id=7, account_id=1, date=date(2025, 4, 25), amount=12.5, kind="income", created_at=datetime.now(UTC)
        )

        assert entry_to_domain(orm_entry).amount == Decimal("12.5")

    def test_unknown_kind(self):
        orm_entry = ORMEntry(
            id=7, account_id=1, date=date(2025, 4, 25), amount=Decimal("1"), kind="gift", created_at=datetime.now(UTC)
        )

        with pytest.raises(ValueError):
            entry_to_domain(orm_entry)


class TestLearningRuleMapper:
    def test_learning_rule_to_domain(self):
        orm_rule = ORMCategoryLearningRule(
            id=1, pattern="metro", category="Wareneinkauf", example_usage="Metro", count=4
        )

        assert learning_rule_to_domain(orm_rule) == CategoryLearningRule("metro", "Wareneinkauf", "Metro", 4)
