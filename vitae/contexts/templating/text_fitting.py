"""
Text Fitting

Pure functions that make free text fit the fixed-size text boxes of a
presentation template. Two strategies are provided:

- clamp_plain(): single-line truncation with a trailing ellipsis
- clamp_wrapped(): greedy word wrapping into a bounded number of lines

Both collapse whitespace runs first, so a value coming from a textarea with
stray newlines and tabs renders as clean text. Passing enabled=False keeps the
whitespace normalization but never cuts or splits.
"""

from typing import Any, List

from vitae.utils.text_processing import collapse_whitespace

ELLIPSIS = "…"


def clamp_plain(text: Any, max_chars: int, enabled: bool = True) -> str:
    """
    Truncate text to a character budget, ending with an ellipsis when cut.

    The result never exceeds max_chars and reapplying the clamp with the same
    budget returns the same string.

    Args:
        text: Text to fit
        max_chars: Character budget (non-positive disables truncation)
        enabled: Global clamping switch

    Returns:
        Whitespace-normalized, possibly truncated text

    Example:
        >>> clamp_plain("Universidad Nacional de Córdoba", 12)
        'Universidad…'
    """
    normalized = collapse_whitespace(text)
    if not enabled or max_chars <= 0 or len(normalized) <= max_chars:
        return normalized
    return normalized[: max_chars - 1].rstrip() + ELLIPSIS


def _append_ellipsis(line: str, max_chars_per_line: int) -> str:
    """Append an ellipsis to the last wrapped line without growing it past the width."""
    words = line.split(" ")
    # Over-budget single words are already exempt from the width rule
    while len(words) > 1 and len(" ".join(words)) + 1 > max_chars_per_line:
        words.pop()
    line = " ".join(words)
    if len(line) + 1 > max_chars_per_line and len(line) <= max_chars_per_line:
        line = line[: max_chars_per_line - 1].rstrip()
    return line + ELLIPSIS


def wrap_lines(text: Any, max_chars_per_line: int, max_lines: int, enabled: bool = True) -> List[str]:
    """
    Greedily pack words into at most max_lines lines.

    Words are never split: a word longer than the width sits alone on its own
    line. When words had to be dropped the last line ends with an ellipsis.

    Args:
        text: Text to wrap
        max_chars_per_line: Maximum characters per line
        max_lines: Maximum number of lines
        enabled: Global clamping switch

    Returns:
        List of lines (empty list for empty input)
    """
    normalized = collapse_whitespace(text)
    if not normalized:
        return []
    if not enabled or max_chars_per_line <= 0 or max_lines <= 0:
        return [normalized]

    words = normalized.split(" ")
    lines: List[str] = []
    current = ""
    consumed = 0

    for word in words:
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars_per_line or not current:
            current = candidate
            consumed += 1
            continue
        lines.append(current)
        if len(lines) >= max_lines:
            current = ""
            break
        current = word
        consumed += 1

    if current and len(lines) < max_lines:
        lines.append(current)

    if consumed < len(words):
        lines[-1] = _append_ellipsis(lines[-1], max_chars_per_line)

    return lines


def clamp_wrapped(
    text: Any, max_chars_per_line: int, max_lines: int, enabled: bool = True
) -> str:
    """
    Word-wrap text into a bounded block of lines joined by newlines.

    Args:
        text: Text to fit
        max_chars_per_line: Maximum characters per line
        max_lines: Maximum number of lines
        enabled: Global clamping switch

    Returns:
        Lines joined with "\\n" ("" for empty input)

    Example:
        >>> clamp_wrapped("Desarrollo de APIs REST para pagos", 20, 2)
        'Desarrollo de APIs\\nREST para pagos'
    """
    return "\n".join(wrap_lines(text, max_chars_per_line, max_lines, enabled))
