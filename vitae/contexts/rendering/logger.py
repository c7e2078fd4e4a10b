"""
Rendering context logger.

Generation and conversion log through the helpers here so every record
carries the [render] prefix.
"""

from pathlib import Path

from loguru import logger

CONTEXT_PREFIX = "[render]"


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# Generation and conversion events


def log_generation_start(template_path: Path, workdir: Path) -> None:
    """Log start of a document generation with context."""
    _log_info(f"Starting generation from template: {template_path.name}")
    _log_debug(f"  Template: {template_path}")
    _log_debug(f"  Working directory: {workdir}")


def log_conversion_result(
    document_path: Path,
    result,  # ConversionResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Log conversion result with diagnostics.

    Args:
        document_path: Document handed to the converter
        result: ConversionResult from convert_to_pdf()
        elapsed_time: Time taken to convert
        verbose: Always dump converter output (default: only on failure)
    """
    if result.success:
        _log_success(f"{document_path.name}: converted to PDF ({elapsed_time:.2f}s)")
        if result.pdf_path:
            _log_debug(f"  PDF: {result.pdf_path}")
    else:
        _log_error(f"{document_path.name}: conversion failed ({elapsed_time:.2f}s)")
        for i, err in enumerate(result.errors[:5], 1):
            _log_error(f"  Error {i}: {err}")
        if len(result.errors) > 5:
            _log_error(f"  ... and {len(result.errors) - 5} more errors")

    # Raw converter output bypasses the format template to keep its own line structure
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nSOFFICE STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nSOFFICE STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )
