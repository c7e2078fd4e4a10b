"""
Document Generation

Orchestrates one submission end to end:

1. Normalize the submission (fields + photo)
2. Populate the presentation template
3. Convert the populated presentation to PDF
4. Read the PDF into memory and clean up the working directory

Every generation uses its own temporary working directory, so concurrent
generations never share files.
"""

import secrets
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

import httpx

from vitae.contexts.rendering.converter import convert_to_pdf
from vitae.contexts.rendering.logger import (
    _log_debug,
    _log_error,
    _log_warning,
    log_generation_start,
)
from vitae.contexts.templating.config_resolver import get_default_config
from vitae.contexts.templating.document_renderer import render_presentation
from vitae.contexts.templating.exceptions import TemplateRenderError
from vitae.contexts.templating.normalizer import NormalizedFields, normalize


@dataclass
class GenerationResult:
    """
    Result of a document generation.

    Attributes:
        success: Whether a PDF was produced
        pdf_bytes: PDF content (None if failed)
        normalized: Normalized fields used for rendering (None if normalization never ran)
        errors: Failure descriptions, verbatim from the failing stage
        workdir: Working directory (only set when it was kept)
    """

    success: bool
    pdf_bytes: Optional[bytes] = None
    normalized: Optional[NormalizedFields] = None
    errors: List[str] = field(default_factory=list)
    workdir: Optional[Path] = None


async def generate_document(
    raw: Any,
    template_path: Path,
    *,
    config=None,
    client: Optional[httpx.AsyncClient] = None,
    require_photo: bool = False,
    keep_workdir: bool = False,
    verbose: bool = False,
) -> GenerationResult:
    """
    Generate a PDF résumé from a raw submission and a .pptx template.

    Args:
        raw: Submission in any accepted shape
        template_path: Presentation template to populate
        config: PipelineConfig (defaults to get_default_config())
        client: Optional AsyncClient for the photo download
        require_photo: Fail when no photo could be resolved
        keep_workdir: Keep the working directory (for debugging)
        verbose: Log converter output even on success

    Returns:
        GenerationResult with the PDF bytes or the collected errors
    """
    template_path = Path(template_path)
    config = config or get_default_config()

    if not template_path.exists():
        return GenerationResult(success=False, errors=[f"Template not found: {template_path}"])

    normalized = await normalize(raw, config, client=client)
    if normalized.photo is None and require_photo:
        reason = normalized.photo_error or "No photo supplied"
        _log_error(f"Photo required but unavailable: {reason}")
        return GenerationResult(
            success=False, normalized=normalized, errors=[f"Photo required: {reason}"]
        )
    if normalized.photo_error:
        _log_warning(f"Continuing without photo: {normalized.photo_error}")

    workdir = Path(tempfile.mkdtemp(prefix="cv-"))
    log_generation_start(template_path, workdir)

    try:
        try:
            pptx_bytes = render_presentation(
                template_path,
                normalized.as_template_data(),
                photo_size_px=config.photo_size_px,
            )
        except TemplateRenderError as e:
            _log_error(f"Template rendering failed: {e.message}")
            return GenerationResult(
                success=False,
                normalized=normalized,
                errors=[str(e)],
                workdir=workdir if keep_workdir else None,
            )

        document_path = workdir / f"cv-{secrets.token_hex(8)}.pptx"
        document_path.write_bytes(pptx_bytes)

        conversion = convert_to_pdf(document_path, workdir, verbose=verbose)
        if not conversion.success:
            return GenerationResult(
                success=False,
                normalized=normalized,
                errors=list(conversion.errors),
                workdir=workdir if keep_workdir else None,
            )

        return GenerationResult(
            success=True,
            pdf_bytes=conversion.pdf_path.read_bytes(),
            normalized=normalized,
            workdir=workdir if keep_workdir else None,
        )
    finally:
        if keep_workdir:
            _log_debug(f"Keeping working directory: {workdir}")
        else:
            shutil.rmtree(workdir, ignore_errors=True)
