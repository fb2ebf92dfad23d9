"""Utility functions for cashledger."""

from cashledger.utils.date_parser import parse_date, parse_statement_date
from cashledger.utils.amount_parser import parse_amount
from cashledger.utils.text_repair import repair_text
from cashledger.utils.usage_cleaner import clean_usage

__all__ = ["parse_date", "parse_statement_date", "parse_amount", "repair_text", "clean_usage"]
