"""
Office Document Conversion Module

Handles conversion of .pptx (or any office document) to PDF using a headless
LibreOffice (soffice) process.
"""

import os
import subprocess
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from vitae.contexts.rendering.logger import _log_debug, log_conversion_result

load_dotenv()

DEFAULT_SOFFICE = (
    r"C:\Program Files\LibreOffice\program\soffice.exe" if sys.platform == "win32" else "soffice"
)
SOFFICE_PATH = os.getenv("SOFFICE_PATH") or DEFAULT_SOFFICE
CONVERSION_TIMEOUT_S = float(os.getenv("CONVERSION_TIMEOUT_S", "120"))

# Profile directory name created next to the output for each conversion
PROFILE_DIR_NAME = "lo-profile"


@dataclass
class ConversionResult:
    """
    Result of PDF conversion.

    Attributes:
        success: Whether conversion succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from soffice
        stderr: Standard error from soffice
        errors: Human-readable failure descriptions
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)


def build_command(document_path: Path, out_dir: Path, soffice_path: str, profile_dir: Path) -> List[str]:
    """
    Build the soffice command line for a headless PDF conversion.

    Each conversion gets its own user profile so concurrent runs do not
    contend for the profile lock.
    """
    return [
        soffice_path,
        "--headless",
        "--nologo",
        "--nofirststartwizard",
        "--norestore",
        f"-env:UserInstallation={profile_dir.resolve().as_uri()}",
        "--convert-to",
        "pdf",
        "--outdir",
        str(out_dir),
        str(document_path),
    ]


def convert_to_pdf(
    document_path: Path,
    out_dir: Path,
    *,
    soffice_path: str = SOFFICE_PATH,
    timeout: float = CONVERSION_TIMEOUT_S,
    verbose: bool = False,
) -> ConversionResult:
    """
    Convert an office document to PDF with LibreOffice.

    The PDF is written as <out_dir>/<document stem>.pdf. Failures are returned
    in ConversionResult.errors with the converter output attached verbatim.

    Args:
        document_path: Document to convert (e.g., a rendered .pptx)
        out_dir: Directory for the PDF (must exist)
        soffice_path: soffice executable (default: SOFFICE_PATH env)
        timeout: Seconds before the converter process is killed
        verbose: Log converter output even on success

    Returns:
        ConversionResult with success status and diagnostic information
    """
    document_path = Path(document_path)
    out_dir = Path(out_dir)
    start_time = time.time()

    if not document_path.exists():
        return ConversionResult(success=False, errors=[f"Document not found: {document_path}"])

    # Clean any existing output to ensure unambiguous success detection
    pdf_path = out_dir / f"{document_path.stem}.pdf"
    if pdf_path.exists():
        pdf_path.unlink()

    cmd = build_command(document_path, out_dir, soffice_path, out_dir / PROFILE_DIR_NAME)
    _log_debug(f"Running: {' '.join(cmd)}")

    try:
        completed = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            timeout=timeout,
        )
    except FileNotFoundError:
        result = ConversionResult(
            success=False,
            errors=[f"LibreOffice executable not found (sofficePath: {soffice_path})"],
        )
        log_conversion_result(document_path, result, time.time() - start_time, verbose)
        return result
    except subprocess.TimeoutExpired as e:
        result = ConversionResult(
            success=False,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            errors=[f"Conversion timed out after {timeout:g}s (sofficePath: {soffice_path})"],
        )
        log_conversion_result(document_path, result, time.time() - start_time, verbose)
        return result

    errors = []
    if completed.returncode != 0:
        errors.append(
            f"Error converting to PDF (exit code {completed.returncode}).\n"
            f"sofficePath: {soffice_path}\nstderr: {completed.stderr}\nstdout: {completed.stdout}"
        )
    elif not pdf_path.exists():
        errors.append(f"LibreOffice did not produce the expected PDF: {pdf_path}")

    result = ConversionResult(
        success=not errors,
        pdf_path=pdf_path if not errors else None,
        stdout=completed.stdout,
        stderr=completed.stderr,
        errors=errors,
    )
    log_conversion_result(document_path, result, time.time() - start_time, verbose)
    return result


def _as_text(output) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output
