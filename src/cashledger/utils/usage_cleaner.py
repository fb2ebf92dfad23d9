"""Shortening of statement name/purpose texts into a usage description."""

import re

MAX_USAGE_LENGTH = 50

ADDRESS_PATTERNS = [
    re.compile(r"\b\w+\s*(strasse|straße|str\.|platz|allee|weg|gasse)\b[^,]*?(,\s*\d{5}\s*[a-zäöü]+)?", re.I),
    re.compile(r"\b\d{5}\s+[a-zäöü]+", re.I),
]

DATE_PATTERNS = [
    re.compile(r"datum\s*\d{2}\.\d{2}\.\d{4},?\s*\d{1,2}[.:]\d{2}\s*uhr", re.I),
    re.compile(r"\b\d{8}\s*-\s*\d{3}\b"),
    re.compile(r"\b\d{2}\.\d{2}\.\d{2,4}\b"),
    re.compile(r"\b\d{2}/\d{4}\b"),
]

CODE_PATTERNS = [
    re.compile(
        r"\b(betriebsnummer|kd\.\s?nr\.|rg\.\s?nr\.|kundennr\.?|vertragsnummer|mandatsreferenz|"
        r"end-to-end-ref\.?|steuernummer|drp|inv)(?![a-zäöü])\s*:?\s*\S*",
        re.I,
    ),
    re.compile(r"\b[a-z0-9]+(/[0-9]+){3,}\b", re.I),
    re.compile(r"\b\d{6,}\b"),
]


def clean_usage(text: str) -> str:
    """Strip addresses, timestamps and reference codes from a statement text.

    Args:
        text: Name or purpose text

    Returns:
        Cleaned text with collapsed blanks, at most 50 characters long
    """
    if not text:
        return ""
    cleaned = text
    for pattern in ADDRESS_PATTERNS + DATE_PATTERNS + CODE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    cleaned = " ".join(cleaned.split())
    cleaned = cleaned.strip(" ,;-/")
    return cleaned[:MAX_USAGE_LENGTH].rstrip()
