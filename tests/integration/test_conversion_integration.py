"""
Integration tests for rendering context - tests real LibreOffice conversion.
"""

import asyncio
import shutil

import pytest

from vitae.contexts.rendering.converter import convert_to_pdf
from vitae.contexts.rendering.generator import generate_document
from vitae.contexts.templating.document_renderer import render_presentation

# Check if soffice is available
SOFFICE_AVAILABLE = shutil.which("soffice") is not None
skip_if_no_soffice = pytest.mark.skipif(
    not SOFFICE_AVAILABLE,
    reason="soffice not installed - install LibreOffice",
)


@pytest.mark.integration
@skip_if_no_soffice
def test_convert_rendered_presentation(cv_template, photo_png, tmp_path):
    """Test converting a populated presentation to PDF with real LibreOffice."""
    data = {"name": "Ana Pérez", "title": "Analista", "exp_1_company": "ACME", "exp_1_dates": "2020", "photo": photo_png}
    document_path = tmp_path / "cv-integration.pptx"
    document_path.write_bytes(render_presentation(cv_template, data))

    result = convert_to_pdf(document_path, tmp_path, soffice_path="soffice")

    assert result.success, f"Conversion failed with errors: {result.errors}"
    assert result.pdf_path.read_bytes().startswith(b"%PDF")


@pytest.mark.integration
@skip_if_no_soffice
def test_generate_document_end_to_end(cv_template):
    """Test the full submission -> PDF workflow."""
    submission = {
        "Nombre completo": "Ana Pérez",
        "Puesto": "Analista de datos",
        "experiencia": [{"empresa": "ACME", "desde": "2020", "hasta": "2022"}],
        "photo_base64": "",
    }

    result = asyncio.run(generate_document(submission, cv_template))

    assert result.success, f"Generation failed with errors: {result.errors}"
    assert result.pdf_bytes.startswith(b"%PDF")
    assert result.normalized["exp_1_dates"] == "2020 - 2022"


@pytest.mark.integration
def test_missing_soffice_binary(cv_template, tmp_path):
    """Test that an absent converter binary is reported as a failed conversion."""
    document_path = tmp_path / "cv.pptx"
    document_path.write_bytes(cv_template.read_bytes())

    result = convert_to_pdf(document_path, tmp_path, soffice_path=str(tmp_path / "no-soffice"))

    assert not result.success
    assert result.pdf_path is None
