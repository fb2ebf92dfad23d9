"""Tokenizing and header mapping of bank statement CSV exports."""

import csv
from typing import Iterator, Optional

from cashledger.domain.entities import StatementRow
from cashledger.domain.errors import RowParseError, StatementImportError, missing_columns, zero_amount
from cashledger.utils.amount_parser import parse_amount
from cashledger.utils.date_parser import parse_statement_date
from cashledger.utils.text_repair import repair_text

# Header synonyms per field, in order of preference
HEADER_SYNONYMS: dict[str, tuple[str, ...]] = {
    "date": (
        "datum",
        "buchungsdatum",
        "buchungstag",
        "valutadatum",
        "date",
        "booking-date",
        "booking date",
        "value-date",
        "value date",
    ),
    "amount": ("betrag", "betrag (eur)", "amount", "amount_eur", "summe", "sum"),
    "category": ("hauptkategorie", "kategorie", "main-category", "category"),
    "name": ("name", "empfänger", "zahlungsempfänger", "auftraggeber", "payee", "payer"),
    "purpose": ("zweck", "verwendungszweck", "verwendung", "purpose", "reference", "description"),
    "account": ("konto", "account", "accountname"),
}

REQUIRED_FIELDS = ("date", "amount")


def split_lines(text: str) -> list[str]:
    """Split statement text into trimmed, non-empty lines."""
    if text.startswith("\ufeff"):
        text = text[1:]
    return [line.strip() for line in text.splitlines() if line.strip()]


def detect_delimiter(header_line: str) -> str:
    """Pick ';' or ',' by counting both in the header line; ties favor ','."""
    return ";" if header_line.count(";") > header_line.count(",") else ","


def map_header(header: list[str]) -> dict[str, int]:
    """Map logical field names to column indexes.

    Header names are repaired and lower-cased before matching; fields with
    no matching column are left out.
    """
    normalized = [repair_text(name).strip().strip('"').lower() for name in header]
    columns: dict[str, int] = {}
    for field, synonyms in HEADER_SYNONYMS.items():
        for synonym in synonyms:
            if synonym in normalized:
                columns[field] = normalized.index(synonym)
                break
    return columns


class StatementReader:
    """Reads the rows of one statement export.

    Construction validates the header; iterating yields the data rows with
    their 1-based line numbers (the header is row 1).
    """

    def __init__(self, text: str):
        """Initialize reader.

        Args:
            text: Complete CSV text

        Raises:
            StatementImportError: If the text is empty or lacks date/amount columns
        """
        self.lines = split_lines(text or "")
        if not self.lines:
            raise StatementImportError("CSV file is empty")

        self.delimiter = detect_delimiter(self.lines[0])
        header = next(csv.reader([self.lines[0]], delimiter=self.delimiter))
        self.columns = map_header(header)

        missing = [field for field in REQUIRED_FIELDS if field not in self.columns]
        if missing:
            raise StatementImportError(missing_columns(missing))

        self.min_fields = max(self.columns[field] for field in REQUIRED_FIELDS) + 1

    def __len__(self) -> int:
        return len(self.lines) - 1

    def records(self) -> Iterator[tuple[int, list[str]]]:
        """Yield (row number, trimmed fields) for every data line."""
        reader = csv.reader(self.lines[1:], delimiter=self.delimiter)
        for row_num, fields in enumerate(reader, start=2):
            yield row_num, [value.strip() for value in fields]

    def _optional(self, fields: list[str], field: str) -> str:
        index: Optional[int] = self.columns.get(field)
        if index is None or index >= len(fields):
            return ""
        return repair_text(fields[index]).strip()

    def parse_row(self, row_num: int, fields: list[str]) -> StatementRow:
        """Parse one tokenized data line.

        Raises:
            RowParseError: If fields are missing or date/amount don't parse
        """
        if len(fields) < self.min_fields:
            raise RowParseError(
                row_num, f"expected at least {self.min_fields} fields, got {len(fields)}"
            )

        try:
            row_date = parse_statement_date(fields[self.columns["date"]])
            amount = parse_amount(fields[self.columns["amount"]])
        except ValueError as e:
            raise RowParseError(row_num, str(e)) from e
        if amount == 0:
            raise RowParseError(row_num, zero_amount())

        return StatementRow(
            row_num=row_num,
            date=row_date,
            amount=amount,
            category=self._optional(fields, "category"),
            name=self._optional(fields, "name"),
            purpose=self._optional(fields, "purpose"),
            account_name=self._optional(fields, "account"),
        )
