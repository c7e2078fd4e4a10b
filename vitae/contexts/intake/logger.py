"""
Intake context logger.

Intake modules log through the helpers here so every record carries the
[intake] prefix.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# Intake events


def log_shape_detected(shape, key_count: int) -> None:
    """Log which submission shape was detected and how many canonical keys it produced."""
    _log_debug(f"Submission shape: {shape.value} ({key_count} canonical keys)")


def log_photo_resolution(resolution) -> None:
    """
    Log the outcome of photo resolution.

    Args:
        resolution: PhotoResolution from resolve_photo()
    """
    if resolution.data is not None:
        _log_info(f"Photo resolved from {resolution.source} source ({len(resolution.data)} bytes)")
    elif resolution.error:
        _log_warning(f"Photo unavailable: {resolution.error}")
    else:
        _log_debug("No photo supplied")
