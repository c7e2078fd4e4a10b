"""
Templating context logger.

Normalization, rendering and template checks log through the helpers here
so every record carries the [template] prefix.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[template]"


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# Templating events


def log_normalization_result(normalized, clamp_enabled: bool) -> None:
    """
    Log a summary of a normalization run.

    Args:
        normalized: NormalizedFields returned by normalize()
        clamp_enabled: Whether text fitting was active
    """
    filled = sum(1 for value in normalized.fields.values() if value)
    _log_info(
        f"Normalized {normalized.shape.value} submission: "
        f"{filled}/{len(normalized.fields)} fields filled"
    )
    if not clamp_enabled:
        _log_debug("Text clamping disabled; values were only whitespace-normalized")


def log_render_result(template_name: str, replaced: int, images: int) -> None:
    """Log the number of placeholders substituted in a template."""
    _log_success(f"Rendered {template_name}: {replaced} text placeholders, {images} image slots")


def log_template_report(template_path: Path, report) -> None:
    """
    Log a template inspection report.

    Args:
        template_path: Inspected template
        report: TemplateReport from inspect_template()
    """
    _log_info(f"Template {template_path.name}: {len(report.placeholders)} placeholders")
    for issue in report.issues:
        _log_warning(f"  Slide {issue.slide}, run {issue.run_index}: {issue.kind} ({issue.text!r})")
    if report.unknown_placeholders:
        _log_warning(f"  Unknown placeholders: {', '.join(report.unknown_placeholders)}")
