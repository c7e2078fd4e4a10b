"""Unit tests for static template inspection."""

import pytest

from vitae.contexts.templating.template_checker import inspect_template


@pytest.mark.unit
def test_clean_template(cv_template, config):
    """Test that a template using only schema keys is reported ok."""
    report = inspect_template(cv_template, config)

    assert report.ok
    assert report.placeholders == ["name", "title", "exp_1_company", "exp_1_dates"]
    assert report.image_placeholders == ["photo"]
    assert report.issues == []


@pytest.mark.unit
def test_unknown_placeholders(make_template, config):
    """Test that names outside the schema are reported."""
    template = make_template(["{{nombre}}", "{{name}}", "{{%logo}}"])

    report = inspect_template(template, config)

    assert not report.ok
    assert report.unknown_placeholders == ["nombre", "logo"]


@pytest.mark.unit
def test_split_placeholder_reported(make_template, config):
    """Test that a placeholder spanning runs is listed but not an issue."""
    template = make_template([], runs=["{{na", "me}}"])

    report = inspect_template(template, config)

    assert report.split_placeholders == ["name"]
    assert report.issues == []
    assert report.ok


@pytest.mark.unit
def test_double_open(make_template, config):
    """Test detection of a second opener before the first closes."""
    template = make_template([], runs=["{{na", "{{title"])

    issues = inspect_template(template, config).issues

    assert [(issue.kind, issue.run_index, issue.slide) for issue in issues] == [("double-open", 1, 1)]


@pytest.mark.unit
def test_unclosed_and_unmatched(make_template, config):
    """Test detection of unclosed openers and stray closers."""
    template = make_template(["Hola {{name", "name}} chau"])

    report = inspect_template(template, config)

    assert [issue.kind for issue in report.issues] == ["unclosed", "unmatched-close"]
    assert not report.ok
