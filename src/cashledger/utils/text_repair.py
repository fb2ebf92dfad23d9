"""Repair of mis-decoded accented characters in imported text."""

# UTF-8 bytes read as Latin-1/Windows-1252 and as Mac-Roman.
# Ordered longest first so multi-character sequences win over their prefixes.
MOJIBAKE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("â‚¬", "€"),
    ("â€ž", "„"),
    ("â€œ", "“"),
    ("â€“", "–"),
    ("Ã¤", "ä"),
    ("Ã¶", "ö"),
    ("Ã¼", "ü"),
    ("Ã„", "Ä"),
    ("Ã–", "Ö"),
    ("Ãœ", "Ü"),
    ("ÃŸ", "ß"),
    ("Ã©", "é"),
    ("Ã¨", "è"),
    ("Ã¡", "á"),
    ("Ã ", "à"),
    ("Ã§", "ç"),
    ("Ã±", "ñ"),
    ("Ã³", "ó"),
    ("Ã­", "í"),
    ("Ãº", "ú"),
    ("√§", "ä"),
    ("√∂", "ö"),
    ("√º", "ü"),
    ("√ü", "ß"),
    ("√Ñ", "Ä"),
    ("√ñ", "Ö"),
    ("√ú", "Ü"),
    ("√©", "é"),
)


def repair_text(text: str) -> str:
    """Translate known mojibake sequences back to the intended characters.

    Args:
        text: Free text from a statement (name, purpose, category, header)

    Returns:
        Repaired text; text without mojibake is returned unchanged
    """
    if not text:
        return text
    for broken, fixed in MOJIBAKE_REPLACEMENTS:
        if broken in text:
            text = text.replace(broken, fixed)
    return text
