"""Heuristic classification of bank statement rows.

A row is run through a chain of stages; each stage is a plain function
``(purpose, name, amount) -> Optional[Classification]`` and the first stage
that returns a classification wins. When every stage abstains the learning
store, the statement's own category and finally the reserved category are
consulted.
"""

import re
from decimal import Decimal
from typing import Callable, Optional, Sequence

from cashledger.domain.category import RESERVED_CATEGORY
from cashledger.domain.entities import Classification, EntryKind
from cashledger.domain.learning import CategoryLearningStore
from cashledger.utils.date_parser import parse_statement_date
from cashledger.utils.usage_cleaner import clean_usage

PAYROLL_CATEGORY = "Personal"
RESERVATION_CATEGORY = "Reservierung"
HEALTH_INSURANCE_CATEGORY = "KV-Beiträge"
CASH_DEPOSIT_CATEGORY = "SB-Einzahlung"
TRANSFER_CATEGORY = "Umbuchung"

GUEST_DEPOSIT_AMOUNT = Decimal("50.00")

PAYROLL_PATTERN = re.compile(r"\b(lohn|gehalt|salary|wages?|entgeltabrechnung)\b", re.I)
PAYROLL_RECIPIENT = re.compile(
    r"\b(?:lohn|gehalt|salary|wages?)\b\s+(?:für|fuer|for|to|an)\s+(.+)$", re.I
)

RESERVATION_KEYWORDS = ("reservierung", "reservation", "kaution", "anzahlung", "pfand", "booking")
COMPANY_SUFFIXES = re.compile(
    r"\b(gmbh|mbh|ag|kg|ug|ohg|gbr|e\.\s?k\.|e\.\s?v\.|ltd|inc|llc|oy|b\.\s?v\.|se|co)\b", re.I
)
CASH_PHRASES = ("einzahlung", "auszahlung", "bargeld", "geldautomat", "sb-", "atm", "kasse")

HEALTH_INSURANCE_MARKER = "betriebsnummer"

# (substring of name or purpose, display name, category, purpose class)
KNOWN_VENDORS: tuple[tuple[str, str, str, str], ...] = (
    ("wolt", "Wolt", "Einnahmen", "Auszahlung"),
    ("lieferando", "Lieferando", "Einnahmen", "Auszahlung"),
    ("uber payments", "Uber", "Einnahmen", "Auszahlung"),
    ("vodafone", "Vodafone", "Telefon", "Rechnung"),
    ("telekom", "Telekom", "Telefon", "Rechnung"),
    ("finanzamt", "Finanzamt", "Steuern", "Steuer"),
    ("sgb energie", "SGB Energie", "Strom/Gas", "Abschlag"),
    ("stadtwerke", "Stadtwerke", "Strom/Gas", "Abschlag"),
    ("signal iduna", "Signal Iduna", "Priv. KV", "Beitrag"),
    ("bundesknappschaft", "Bundesknappschaft", "Sozialkassen", "Beitrag"),
    ("recup", "reCup", "Verpackung", "Rechnung"),
    ("strato", "Strato", "Sonstiges", "Rechnung"),
)

CASH_DEPOSIT_MARKERS = (
    "sb-einzahlung",
    "sb einzahlung",
    "selbstbedienungs-einzahlung",
    "bareinzahlung",
    "cash deposit",
)
DATE_TOKEN = re.compile(r"\b\d{1,2}\.\d{1,2}\.\d{2,4}\b")

TRANSFER_PATTERN = re.compile(
    r"(sb-auszahlung|bargeldauszahlung|geldautomat|\batm\b|umbuchung|übertrag|\btransfer\b)", re.I
)

Stage = Callable[[str, str, Decimal], Optional[Classification]]


def _sign_kind(amount: Decimal) -> EntryKind:
    return EntryKind.INCOME if amount > 0 else EntryKind.EXPENSE


def classify_payroll(purpose: str, name: str, amount: Decimal) -> Optional[Classification]:
    """Wages and salaries, recognized by whole words in the purpose."""
    if not PAYROLL_PATTERN.search(purpose):
        return None
    usage = clean_usage(name)
    if not usage:
        match = PAYROLL_RECIPIENT.search(purpose)
        usage = clean_usage(match.group(1)) if match else ""
    return Classification(usage=usage or "Lohn", category=PAYROLL_CATEGORY, kind=EntryKind.EXPENSE)


def _looks_like_guest(name: str, purpose: str) -> bool:
    if not name or len(name.split()) > 3:
        return False
    if COMPANY_SUFFIXES.search(name):
        return False
    text = f"{name} {purpose}".lower()
    return not any(phrase in text for phrase in CASH_PHRASES)


def classify_reservation(purpose: str, name: str, amount: Decimal) -> Optional[Classification]:
    """Guest deposits: reservation keywords, or the fixed deposit amount from a private payer."""
    text = f"{purpose} {name}".lower()
    keyword = any(word in text for word in RESERVATION_KEYWORDS)
    guest_deposit = abs(amount) == GUEST_DEPOSIT_AMOUNT and _looks_like_guest(name.strip(), purpose)
    if not keyword and not guest_deposit:
        return None
    usage = f"{RESERVATION_CATEGORY} {name.strip()}" if name.strip() else RESERVATION_CATEGORY
    return Classification(usage=usage, category=RESERVATION_CATEGORY, kind=EntryKind.RESERVATION)


def classify_known_vendor(purpose: str, name: str, amount: Decimal) -> Optional[Classification]:
    """Health insurance carriers and a fixed table of recurring vendors."""
    if HEALTH_INSURANCE_MARKER in purpose.lower():
        vendor = clean_usage(name) or "Krankenkasse"
        return Classification(
            usage=f"{vendor} - Beitrag", category=HEALTH_INSURANCE_CATEGORY, kind=_sign_kind(amount)
        )

    haystack = f"{name} {purpose}".lower()
    for needle, vendor, category, purpose_class in KNOWN_VENDORS:
        if needle in haystack:
            return Classification(
                usage=f"{vendor} - {purpose_class}", category=category, kind=_sign_kind(amount)
            )
    return None


def classify_cash_deposit(purpose: str, name: str, amount: Decimal) -> Optional[Classification]:
    """Self-service cash deposits at the bank's machines."""
    text = purpose.lower()
    if not any(marker in text for marker in CASH_DEPOSIT_MARKERS):
        return None

    usage = CASH_DEPOSIT_CATEGORY
    match = DATE_TOKEN.search(purpose)
    if match:
        try:
            deposit_date = parse_statement_date(match.group(0))
        except ValueError:
            deposit_date = None
        if deposit_date is not None:
            usage = f"{CASH_DEPOSIT_CATEGORY} - {deposit_date.strftime('%d.%m.%Y')}"
    return Classification(usage=usage, category=CASH_DEPOSIT_CATEGORY, kind=EntryKind.CASH_DEPOSIT)


def classify_fallback(purpose: str, name: str, amount: Decimal) -> Optional[Classification]:
    """Always abstains; the classifier then consults learned rules."""
    return None


DEFAULT_STAGES: tuple[Stage, ...] = (
    classify_payroll,
    classify_reservation,
    classify_known_vendor,
    classify_cash_deposit,
    classify_fallback,
)


def is_transfer_text(purpose: str, name: str = "") -> bool:
    """Whether the texts mention cash withdrawals or internal rebookings."""
    return TRANSFER_PATTERN.search(f"{name} {purpose}") is not None


class TransactionClassifier:
    """Runs statement rows through the stage chain."""

    def __init__(
        self,
        learning: Optional[CategoryLearningStore] = None,
        stages: Sequence[Stage] = DEFAULT_STAGES,
    ):
        """Initialize classifier.

        Args:
            learning: Learned rules consulted when every stage abstains
            stages: Stage functions, tried in order
        """
        self.learning = learning
        self.stages = tuple(stages)

    def classify(
        self, purpose: str, name: str, amount: Decimal, csv_category: str = ""
    ) -> Classification:
        """Classify one statement row.

        Args:
            purpose: Repaired purpose text
            name: Repaired payer/payee name
            amount: Signed row amount
            csv_category: Category column of the statement, if any

        Returns:
            Usage, category and kind for the row
        """
        purpose = purpose or ""
        name = name or ""
        result = None
        for stage in self.stages:
            result = stage(purpose, name, amount)
            if result is not None:
                break

        if result is None:
            usage = clean_usage(name) or clean_usage(purpose)
            if is_transfer_text(purpose, name):
                return Classification(usage=usage, category=TRANSFER_CATEGORY, kind=EntryKind.TRANSFER)
            category = None
            if self.learning is not None and usage:
                category = self.learning.suggest(usage)
            category = category or csv_category.strip() or RESERVED_CATEGORY
            return Classification(usage=usage, category=category, kind=_sign_kind(amount))

        # Stages own their kind; transfer keywords override it, category stays
        kind = EntryKind.TRANSFER if is_transfer_text(purpose, name) else result.kind
        return Classification(usage=result.usage, category=result.category, kind=kind)
