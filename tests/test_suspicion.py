"""Tests for duplicate detection of cash deposits."""

from datetime import date
from decimal import Decimal

from cashledger.domain.entities import EntryKind
from cashledger.domain.suspicion import SuspicionDetector


class TestSuspicionDetector:
    """Tests for SuspicionDetector."""

    def test_candidate_needs_category_and_marker(self, temp_db):
        """Test that both the category and the usage marker are required."""
        detector = SuspicionDetector(temp_db)
        assert detector.is_candidate("SB-Einzahlung", "SB-Einzahlung - 01.03.2025")
        assert detector.is_candidate("Bargeld", "Bareinzahlung Filiale")
        assert not detector.is_candidate("Einnahmen", "SB-Einzahlung")
        assert not detector.is_candidate("SB-Einzahlung", "Wolt - Auszahlung")
        assert not detector.is_candidate("SB-Einzahlung", None)

    def test_finds_stored_deposit(self, temp_db, bargeld, stored_cash_deposit):
        """Test that a deposit with the same amount on the same account is found."""
        detector = SuspicionDetector(temp_db)
        match = detector.find_duplicate(
            bargeld.id, Decimal("50.00"), "SB-Einzahlung", "SB-Einzahlung - 01.03.2025"
        )
        assert match is not None
        assert match.id == stored_cash_deposit.id

    def test_amount_tolerance(self, temp_db, bargeld, stored_cash_deposit):
        """Test the 0.01 tolerance."""
        detector = SuspicionDetector(temp_db)
        assert detector.find_duplicate(bargeld.id, Decimal("50.01"), "SB-Einzahlung", "SB-Einzahlung") is not None
        assert detector.find_duplicate(bargeld.id, Decimal("50.02"), "SB-Einzahlung", "SB-Einzahlung") is None

    def test_other_account(self, temp_db, giro, stored_cash_deposit):
        """Test that entries on other accounts don't count."""
        detector = SuspicionDetector(temp_db)
        assert detector.find_duplicate(giro.id, Decimal("50.00"), "SB-Einzahlung", "SB-Einzahlung") is None

    def test_match_by_stored_category(self, temp_db, ledger_service, giro):
        """Test that a stored entry matches through its category name."""
        ledger_service.create_entry(
            kind=EntryKind.CASH_DEPOSIT,
            amount=Decimal("100"),
            category="SB-Einzahlung",
            account_id=giro.id,
            usage="Einzahlung Filiale",
            entry_date=date(2025, 3, 2),
        )
        detector = SuspicionDetector(temp_db)
        assert detector.find_duplicate(giro.id, Decimal("100"), "SB-Einzahlung", "SB-Einzahlung") is not None

    def test_non_sensitive_rows_never_match(self, temp_db, ledger_service, giro):
        """Test that identical non-cash rows are not treated as duplicates."""
        ledger_service.create_entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("12.50"),
            category="Sonstiges",
            account_id=giro.id,
            usage="ACME GmbH",
            entry_date=date(2025, 4, 25),
        )
        detector = SuspicionDetector(temp_db)
        assert detector.find_duplicate(giro.id, Decimal("-12.50"), "Sonstiges", "ACME GmbH") is None

    def test_configurable_categories(self, temp_db, bargeld, stored_cash_deposit):
        """Test that the sensitive category set can be replaced."""
        detector = SuspicionDetector(temp_db, sensitive_categories={"Kasse"})
        assert detector.find_duplicate(bargeld.id, Decimal("50"), "SB-Einzahlung", "SB-Einzahlung") is None
        assert detector.find_duplicate(bargeld.id, Decimal("50"), "Kasse", "SB-Einzahlung") is not None
