"""
Logging setup for VITAE entry points.

Library modules only log through their context wrappers
(vitae/contexts/{context}/logger.py); sinks are configured once per run by
the script that owns the run, via setup_logger().
"""

import platform
import sys
from pathlib import Path
from typing import Dict, Optional

from loguru import logger

import vitae

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"

# Console colors per level; INFO keeps loguru's default
LEVEL_COLORS = {
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

SEPARATOR = "-" * 72


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, object]] = None,
    level_colors: Optional[Dict[str, str]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output to a run log file and the console.

    The file receives every DEBUG record (including raw converter output);
    the console gets console_level and above on stderr, so command output
    printed on stdout (e.g., normalized JSON) stays clean.

    Args:
        context_name: Run name used for the log file (e.g., "generate")
        log_dir: Directory for this run (created if missing)
        extra_provenance: Extra key-value pairs for the run header
        level_colors: Per-level console color overrides
        console_level: Minimum level shown on the console

    Returns:
        Path to the run log file

    Example:
        log_file = setup_logger(
            "generate",
            Path("outs/logs/generate_20251114_123456"),
            extra_provenance={"Template": "templates/1.pptx"},
        )
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in {**LEVEL_COLORS, **(level_colors or {})}.items():
        logger.level(level_name, color=color)

    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: Optional[Dict[str, object]] = None) -> None:
    """
    Write the run header: what ran, where, and with which versions.

    Args:
        context_name: Run name
        extra_context: Additional key-value pairs (e.g., template, submission)
    """
    header = {
        "Run": context_name,
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "VITAE": vitae.__version__,
        "Python": f"{platform.python_version()} ({platform.system()})",
        **(extra_context or {}),
    }
    logger.info(SEPARATOR)
    for key, value in header.items():
        logger.info(f"{key}: {value}")
    logger.info(SEPARATOR)
