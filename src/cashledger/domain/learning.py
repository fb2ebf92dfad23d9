"""Category learning store.

Remembers which category the user (or the import) chose for a usage text and
suggests it again for similar usages.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from cashledger.database.base import Database
from cashledger.domain.entities import CategoryLearningRule

logger = logging.getLogger(__name__)

_DATE_TOKENS = re.compile(r"\b\d{1,2}[./-]\d{1,2}[./-]\d{2,4}\b|\b\d{4}-\d{2}-\d{2}\b")
_LONG_DIGIT_RUNS = re.compile(r"\d{5,}")
_PUNCTUATION = re.compile(r"[^\w\s]")


def clean_pattern(usage: str) -> str:
    """Reduce a usage text to the pattern rules are keyed by.

    Lower-cases, removes date tokens, digit runs of five or more digits and
    punctuation, and collapses blanks.
    """
    text = (usage or "").lower()
    text = _DATE_TOKENS.sub(" ", text)
    text = _LONG_DIGIT_RUNS.sub(" ", text)
    text = _PUNCTUATION.sub(" ", text)
    return " ".join(text.split())


class RuleStore(ABC):
    """Backing store for learning rules."""

    @abstractmethod
    def get(self, pattern: str) -> Optional[CategoryLearningRule]:
        """Get the rule stored under pattern."""
        pass

    @abstractmethod
    def all(self) -> list[CategoryLearningRule]:
        """List all rules."""
        pass

    @abstractmethod
    def save(self, rule: CategoryLearningRule) -> None:
        """Insert or replace the rule stored under rule.pattern."""
        pass


class InMemoryRuleStore(RuleStore):
    """Dictionary-backed rule store."""

    def __init__(self, rules: Iterable[CategoryLearningRule] = ()):
        self._rules: dict[str, CategoryLearningRule] = {r.pattern: r for r in rules}

    def get(self, pattern: str) -> Optional[CategoryLearningRule]:
        return self._rules.get(pattern)

    def all(self) -> list[CategoryLearningRule]:
        return list(self._rules.values())

    def save(self, rule: CategoryLearningRule) -> None:
        self._rules[rule.pattern] = rule


class DatabaseRuleStore(RuleStore):
    """Rule store persisted in the category_learning_rules table."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, pattern: str) -> Optional[CategoryLearningRule]:
        return self.db.get_learning_rule(pattern)

    def all(self) -> list[CategoryLearningRule]:
        return self.db.list_learning_rules()

    def save(self, rule: CategoryLearningRule) -> None:
        self.db.save_learning_rule(rule)


class CategoryLearningStore:
    """Learns usage -> category mappings and suggests categories from them."""

    def __init__(self, store: RuleStore):
        """Initialize learning store.

        Args:
            store: Backing rule store
        """
        self.store = store

    def learn(self, usage: str, category: str) -> Optional[CategoryLearningRule]:
        """Record that usage was filed under category.

        A known pattern gets its count incremented and its category and
        example refreshed; a new pattern starts with count 1.

        Returns:
            The stored rule, or None if the usage has no usable pattern
        """
        pattern = clean_pattern(usage)
        if not pattern or not category:
            return None

        existing = self.store.get(pattern)
        count = existing.count + 1 if existing is not None else 1
        rule = CategoryLearningRule(
            pattern=pattern, category=category, example_usage=usage, count=count
        )
        self.store.save(rule)
        logger.debug("Learned '%s' -> %s (count %d)", pattern, category, count)
        return rule

    def suggest(self, usage: str) -> Optional[str]:
        """Suggest a category for usage.

        Exact pattern match first; otherwise the rule with the highest count
        whose pattern contains or is contained in the cleaned usage (ties go
        to the longer pattern).
        """
        pattern = clean_pattern(usage)
        if not pattern:
            return None

        exact = self.store.get(pattern)
        if exact is not None:
            return exact.category

        candidates = [
            rule
            for rule in self.store.all()
            if rule.pattern and (rule.pattern in pattern or pattern in rule.pattern)
        ]
        if not candidates:
            return None
        best = max(candidates, key=lambda r: (r.count, len(r.pattern)))
        return best.category

    def rules(self) -> list[CategoryLearningRule]:
        """List rules, most frequently learned first."""
        return sorted(self.store.all(), key=lambda r: (-r.count, r.pattern))

    def export_records(self) -> list[dict[str, Any]]:
        """Export rules as {pattern, category, exampleUsage, count} records."""
        return [
            {
                "pattern": rule.pattern,
                "category": rule.category,
                "exampleUsage": rule.example_usage,
                "count": rule.count,
            }
            for rule in self.rules()
        ]

    def import_records(self, records: Iterable[dict[str, Any]]) -> int:
        """Load exported records, replacing rules with the same pattern.

        Records without a pattern or category are ignored.

        Returns:
            Number of rules stored
        """
        stored = 0
        for record in records:
            pattern = str(record.get("pattern") or "").strip()
            category = str(record.get("category") or "").strip()
            if not pattern or not category:
                continue
            self.store.save(
                CategoryLearningRule(
                    pattern=pattern,
                    category=category,
                    example_usage=str(record.get("exampleUsage") or ""),
                    count=max(int(record.get("count") or 1), 1),
                )
            )
            stored += 1
        return stored
