"""Unit tests for text fitting (single-line and wrapped clamps)."""

import pytest

from vitae.contexts.templating.text_fitting import ELLIPSIS, clamp_plain, clamp_wrapped, wrap_lines


@pytest.mark.unit
def test_clamp_plain_truncates_with_ellipsis():
    """Test that over-budget text is cut and ends with an ellipsis."""
    result = clamp_plain("Universidad Nacional de Córdoba", 12)

    assert result == "Universidad…"
    assert len(result) == 12


@pytest.mark.unit
def test_clamp_plain_collapses_whitespace():
    """Test that whitespace runs (newlines, tabs) collapse to single spaces."""
    assert clamp_plain("  Senior\n\t  Engineer  ", 50) == "Senior Engineer"


@pytest.mark.unit
def test_clamp_plain_fits_unchanged():
    """Test that text within budget is returned as-is."""
    assert clamp_plain("Go", 26) == "Go"
    assert clamp_plain("exactly ten", 11) == "exactly ten"


@pytest.mark.unit
def test_clamp_plain_is_idempotent():
    """Test that clamping twice with the same budget changes nothing."""
    once = clamp_plain("Ingeniería en Sistemas de Información", 20)

    assert clamp_plain(once, 20) == once
    assert len(once) <= 20


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "   \n\t "])
def test_clamp_plain_empty_values(value):
    """Test that empty-ish input becomes an empty string."""
    assert clamp_plain(value, 10) == ""


@pytest.mark.unit
def test_clamp_plain_disabled_keeps_length():
    """Test that enabled=False only normalizes whitespace."""
    text = "A very long description   that would not fit"

    assert clamp_plain(text, 5, enabled=False) == "A very long description that would not fit"


@pytest.mark.unit
def test_clamp_wrapped_packs_words_greedily():
    """Test greedy word packing into the allowed lines."""
    assert clamp_wrapped("Desarrollo de APIs REST para pagos", 20, 2) == "Desarrollo de APIs\nREST para pagos"


@pytest.mark.unit
def test_clamp_wrapped_adds_ellipsis_when_words_dropped():
    """Test that the last line ends with an ellipsis when text was cut."""
    result = clamp_wrapped("one two three four five six", 9, 2)

    assert result == "one two\nthree…"
    assert all(len(line) <= 9 for line in result.split("\n"))


@pytest.mark.unit
def test_clamp_wrapped_ellipsis_never_overflows_line():
    """Test that the ellipsis replaces words instead of growing a full line."""
    result = clamp_wrapped("alpha beta gamma delta", 10, 1)

    assert result == "alpha…"
    assert len(result) <= 10


@pytest.mark.unit
def test_clamp_wrapped_keeps_long_word_whole():
    """Test that a word longer than the width occupies its own line unsplit."""
    result = clamp_wrapped("Supercalifragilistic is long", 10, 2)

    assert result.split("\n") == ["Supercalifragilistic", "is long"]


@pytest.mark.unit
def test_clamp_wrapped_line_count_bounded():
    """Test that no more than max_lines lines are produced."""
    text = " ".join(["palabra"] * 40)

    lines = wrap_lines(text, 15, 3)

    assert len(lines) == 3
    assert lines[-1].endswith(ELLIPSIS)


@pytest.mark.unit
def test_clamp_wrapped_empty_input():
    """Test that empty input produces an empty string, not a blank line."""
    assert clamp_wrapped("", 10, 2) == ""
    assert clamp_wrapped(None, 10, 2) == ""


@pytest.mark.unit
def test_clamp_wrapped_disabled():
    """Test that enabled=False returns one whitespace-normalized line."""
    assert clamp_wrapped("a  b\n c", 1, 1, enabled=False) == "a b c"
