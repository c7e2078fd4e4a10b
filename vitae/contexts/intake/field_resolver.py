"""
Field Resolver

Alias-driven lookups over a canonical submission record. Form builders name
the same field in many ways ("name", "Nombre completo", "full_name"); the
resolver walks a prioritized alias list and returns the first usable value.

A value is usable when its stringified, trimmed form is non-empty. None,
False, 0 and whitespace-only strings all count as absent: résumé fields are
text, so numeric and boolean zeros are treated like blanks.
"""

from typing import Any, List, Mapping, Optional, Sequence

from vitae.utils.text_processing import split_delimited, to_text


def _unwrap(value: Any) -> Any:
    """
    Reduce container values to the scalar a text field can use.

    File-upload fields arrive as lists of URLs or as objects like
    {"url": "...", "name": "foto.jpg"}; the first usable entry wins.
    """
    if isinstance(value, Mapping):
        return _unwrap(value.get("url"))
    if isinstance(value, (list, tuple)):
        for item in value:
            item = _unwrap(item)
            if not is_blank(item):
                return item
        return None
    return value


def is_blank(value: Any) -> bool:
    """Return True if the value counts as absent under the stringify-trim rule."""
    if not value and not isinstance(value, str):
        return True
    if isinstance(value, (Mapping, list, tuple)):
        return is_blank(_unwrap(value))
    return to_text(value).strip() == ""


def resolve(record: Optional[Mapping[str, Any]], candidate_keys: Sequence[str], fallback: Any = "") -> Any:
    """
    Return the first non-empty value among candidate keys.

    Args:
        record: Canonical submission record (None behaves like {})
        candidate_keys: Alias names in priority order
        fallback: Value returned when no alias holds a usable value

    Returns:
        The first usable value (scalar), or fallback

    Examples:
        >>> resolve({"name": "", "full_name": "Ana"}, ["name", "full_name"])
        'Ana'
        >>> resolve({}, ["name"], "N/A")
        'N/A'
    """
    if not record:
        return fallback
    for key in candidate_keys:
        value = _unwrap(record.get(key))
        if not is_blank(value):
            return value
    return fallback


def collect_indexed(record: Optional[Mapping[str, Any]], prefix: str, count: int) -> List[str]:
    """
    Collect numbered fields (prefix1..prefixN) into a dense list.

    Gaps are dropped, so {"skill_1": "Go", "skill_3": "SQL"} yields ["Go", "SQL"].

    Args:
        record: Canonical submission record
        prefix: Key prefix including any separator (e.g., "skill_")
        count: Highest index to look up

    Returns:
        Trimmed non-empty values in index order
    """
    if not record:
        return []
    values = []
    for index in range(1, count + 1):
        value = _unwrap(record.get(f"{prefix}{index}"))
        if not is_blank(value):
            values.append(to_text(value).strip())
    return values


def item_text(value: Any) -> str:
    """
    Render a single list item as text.

    Object items such as {"name": "Inglés", "level": "B2"} are joined with
    " - " over their non-empty scalar values.
    """
    if isinstance(value, Mapping):
        parts = [to_text(v).strip() for v in value.values() if not isinstance(v, (Mapping, list)) and not is_blank(v)]
        return " - ".join(parts)
    if is_blank(value):
        return ""
    return to_text(value).strip()


def split_free_text(value: Any) -> List[str]:
    """
    Turn a free-text list field into items.

    Strings are split on newline, comma, semicolon, and bullet characters.
    Lists are taken item-wise (each item rendered with item_text()).

    Example:
        >>> split_free_text("Inglés, Francés; Alemán")
        ['Inglés', 'Francés', 'Alemán']
    """
    if isinstance(value, (list, tuple)):
        return [text for text in (item_text(item) for item in value) if text]
    if is_blank(value):
        return []
    return split_delimited(value)
