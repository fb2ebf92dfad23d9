"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

# German: comma decimal separator, dot grouping ("1.234,56")
GERMAN_AMOUNT = re.compile(r"^[+-]?(\d{1,3}(\.\d{3})+|\d+)(,\d+)?$")
# English: dot decimal separator, comma grouping ("1,234.56")
ENGLISH_AMOUNT = re.compile(r"^[+-]?(\d{1,3}(,\d{3})+|\d+)(\.\d+)?$")


def _parse_german(amount_str: str) -> Decimal | None:
    if not GERMAN_AMOUNT.match(amount_str):
        return None
    return Decimal(amount_str.replace(".", "").replace(",", "."))


def _parse_english(amount_str: str) -> Decimal | None:
    if not ENGLISH_AMOUNT.match(amount_str):
        return None
    return Decimal(amount_str.replace(",", ""))


AMOUNT_PARSERS = (_parse_german, _parse_english)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Tries the German locale first, then the English one; the first parser
    that accepts the string wins. Handles:
    - "1.234,56" and "-12,50" (German)
    - "1,234.56" and "-12.50" (English)
    - "12,50 €", "$123.45" (currency symbols are ignored)
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove whitespace
    cleaned = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1]

    # Remove currency symbols and inner blanks
    cleaned = re.sub(r"[$€£¥\s]|EUR", "", cleaned)
    cleaned = cleaned.replace("−", "-")

    for parser in AMOUNT_PARSERS:
        try:
            amount = parser(cleaned)
        except InvalidOperation:
            amount = None
        if amount is not None:
            return -amount if is_negative else amount

    raise ValueError(f"Could not parse amount '{amount_str}'")
