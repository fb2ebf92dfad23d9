"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Tried in order; the first format that parses wins.
STATEMENT_DATE_FORMATS = ("%d.%m.%Y", "%Y-%m-%d", "%d.%m.%y")
PERIOD_UNITS = ("week", "month", "year")


def correct_two_digit_year(value: date) -> date:
    """Move a year below 100 (e.g. 0025 from a misparsed '25') into the 2000s."""
    if value.year < 100:
        return value.replace(year=value.year + 2000)
    return value


def parse_statement_date(date_str: str) -> date:
    """Parse a bank statement date.

    Accepts "dd.mm.yyyy", "yyyy-mm-dd" and "dd.mm.yy". Two-digit years are
    always read as 20yy, so "01.02.25" becomes 2025-02-01.

    Args:
        date_str: Date string from a statement row

    Returns:
        Date object

    Raises:
        ValueError: If no format matches
    """
    value = date_str.strip()
    for fmt in STATEMENT_DATE_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt).date()
        except ValueError:
            continue
        if fmt.endswith("%y"):
            # strptime maps 69-99 to the 1900s
            parsed = parsed.replace(year=2000 + parsed.year % 100)
        return correct_two_digit_year(parsed)
    raise ValueError(f"Could not parse date '{date_str}'")


def _period_start(unit: str, today: date, back: int = 0) -> date:
    """First day of the week, month or year containing today, ``back`` units earlier."""
    if unit == "week":
        return today - timedelta(days=today.weekday(), weeks=back)
    if unit == "month":
        return today.replace(day=1) - relativedelta(months=back)
    if unit == "year":
        return today.replace(month=1, day=1) - relativedelta(years=back)
    raise ValueError(f"Unknown period unit: '{unit}'")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date given on the command line.

    Supports:
    - Statement dates: "15.01.2024", "2024-01-15", "15.01.24"
    - Other absolute dates: "January 15, 2024", etc.
    - "today", "yesterday", and the first day of "this/last week|month|year"

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    relative, _, unit = text.partition(" ")
    if relative in ("this", "last") and unit in PERIOD_UNITS:
        return _period_start(unit, today, back=1 if relative == "last" else 0)

    # Statement formats first: dateutil would read "01.02.2025" month-first
    try:
        return parse_statement_date(text)
    except ValueError:
        pass

    try:
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}") from None


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Start and end date of a named period such as "this-month" or "last-year".

    Periods starting with "this" end today; "last" periods cover the whole
    previous week, month or year.

    Raises:
        ValueError: If period string is not recognized
    """
    today = today or date.today()
    relative, _, unit = period.strip().lower().partition("-")
    if relative not in ("this", "last") or unit not in PERIOD_UNITS:
        supported = ", ".join(f"{r}-{u}" for r in ("this", "last") for u in PERIOD_UNITS)
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {supported}")

    if relative == "this":
        return _period_start(unit, today), today
    start = _period_start(unit, today, back=1)
    return start, _period_start(unit, today) - timedelta(days=1)
