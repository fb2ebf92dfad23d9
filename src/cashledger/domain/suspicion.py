"""Duplicate detection for cash-handling statement rows."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from cashledger.database.base import Database
from cashledger.domain.classification import CASH_DEPOSIT_MARKERS
from cashledger.domain.entities import Entry

logger = logging.getLogger(__name__)

DEFAULT_SENSITIVE_CATEGORIES = frozenset({"SB-Einzahlung", "Geldautomat", "Bargeld"})
DUPLICATE_TOLERANCE = Decimal("0.01")


class SuspicionDetector:
    """Flags cash deposits that were most likely booked already.

    Only rows whose category is in the sensitive set and whose usage carries
    a cash-deposit marker are checked. All other rows are never treated as
    duplicates, even when an identical entry exists.
    """

    def __init__(
        self,
        db: Database,
        sensitive_categories: Iterable[str] = DEFAULT_SENSITIVE_CATEGORIES,
        markers: Iterable[str] = CASH_DEPOSIT_MARKERS,
        tolerance: Decimal = DUPLICATE_TOLERANCE,
    ):
        self.db = db
        self.sensitive_categories = frozenset(sensitive_categories)
        self.markers = tuple(m.lower() for m in markers)
        self.tolerance = tolerance

    def _has_marker(self, text: Optional[str]) -> bool:
        lowered = (text or "").lower()
        return any(marker in lowered for marker in self.markers)

    def is_candidate(self, category: str, usage: Optional[str]) -> bool:
        """Whether a row with this category and usage is checked for duplicates."""
        return category in self.sensitive_categories and self._has_marker(usage)

    def find_duplicate(
        self, account_id: int, amount: Decimal, category: str, usage: Optional[str]
    ) -> Optional[Entry]:
        """Return a stored entry the row most likely duplicates, or None.

        Args:
            account_id: Account the row would be booked on
            amount: Signed row amount
            category: Resolved category name of the row
            usage: Usage text of the row
        """
        if not self.is_candidate(category, usage):
            return None

        for entry in self.db.find_entries(account_id, amount, self.tolerance):
            if self._has_marker(entry.usage):
                return entry
            if entry.category_id is not None:
                stored_category = self.db.get_category(entry.category_id)
                if stored_category is not None and self._has_marker(stored_category.name):
                    return entry
        return None
