"""
Text processing utilities shared by the intake and templating contexts.
"""

import re
import unicodedata
from typing import Any, List

_WHITESPACE_RUN = re.compile(r"\s+")

# Separators accepted in free-text list fields ("Inglés, Francés; Alemán")
FREE_TEXT_DELIMITERS = re.compile(r"[\n\r,;•]+")


def to_text(value: Any) -> str:
    """
    Convert a raw submission value to NFC-normalized text.

    Args:
        value: Any JSON value (None becomes "")

    Returns:
        String form of the value
    """
    if value is None:
        return ""
    return unicodedata.normalize("NFC", str(value))


def collapse_whitespace(text: Any) -> str:
    """
    Collapse every whitespace run to a single space and trim both ends.

    Example:
        >>> collapse_whitespace("  Senior\\n\\tEngineer  ")
        'Senior Engineer'
    """
    return _WHITESPACE_RUN.sub(" ", to_text(text)).strip()


def split_delimited(text: Any) -> List[str]:
    """
    Split free text on newlines, commas, semicolons, and bullet characters.

    Items are trimmed and empty items dropped.

    Example:
        >>> split_delimited("Inglés, Francés; Alemán")
        ['Inglés', 'Francés', 'Alemán']
    """
    return [part.strip() for part in FREE_TEXT_DELIMITERS.split(to_text(text)) if part.strip()]
