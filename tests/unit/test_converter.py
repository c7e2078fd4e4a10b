"""Unit tests for PDF conversion (soffice process mocked)."""

import subprocess
from pathlib import Path

import pytest

from vitae.contexts.rendering import converter
from vitae.contexts.rendering.converter import convert_to_pdf


@pytest.fixture
def document(tmp_path):
    path = tmp_path / "cv-0123.pptx"
    path.write_bytes(b"pptx")
    return path


def fake_soffice(returncode=0, write_pdf=True, stdout="convert ok", stderr=""):
    """Build a subprocess.run replacement that records its command."""
    calls = []

    def _run(cmd, **kwargs):
        calls.append((cmd, kwargs))
        if write_pdf:
            out_dir = Path(cmd[cmd.index("--outdir") + 1])
            (out_dir / f"{Path(cmd[-1]).stem}.pdf").write_bytes(b"%PDF-1.4 fake")
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    _run.calls = calls
    return _run


@pytest.mark.unit
def test_successful_conversion(monkeypatch, document, tmp_path):
    """Test that a zero exit with a PDF on disk is a success."""
    run = fake_soffice()
    monkeypatch.setattr(converter.subprocess, "run", run)

    result = convert_to_pdf(document, tmp_path, soffice_path="soffice")

    assert result.success
    assert result.pdf_path == tmp_path / "cv-0123.pdf"
    assert result.pdf_path.read_bytes().startswith(b"%PDF")
    assert result.stdout == "convert ok"
    assert result.errors == []


@pytest.mark.unit
def test_command_line(monkeypatch, document, tmp_path):
    """Test the headless flags and the private user profile."""
    run = fake_soffice()
    monkeypatch.setattr(converter.subprocess, "run", run)

    convert_to_pdf(document, tmp_path, soffice_path="/opt/lo/soffice", timeout=7)

    cmd, kwargs = run.calls[0]
    assert cmd[0] == "/opt/lo/soffice"
    assert {"--headless", "--nologo", "--nofirststartwizard", "--norestore"} <= set(cmd)
    assert cmd[cmd.index("--convert-to") + 1] == "pdf"
    assert cmd[cmd.index("--outdir") + 1] == str(tmp_path)
    assert cmd[-1] == str(document)
    profile_args = [arg for arg in cmd if arg.startswith("-env:UserInstallation=")]
    assert len(profile_args) == 1
    assert profile_args[0].startswith("-env:UserInstallation=file://")
    assert kwargs["timeout"] == 7


@pytest.mark.unit
def test_nonzero_exit(monkeypatch, document, tmp_path):
    """Test that a crash reports the converter output verbatim."""
    monkeypatch.setattr(
        converter.subprocess, "run", fake_soffice(returncode=1, write_pdf=False, stderr="source file could not be loaded")
    )

    result = convert_to_pdf(document, tmp_path, soffice_path="soffice")

    assert not result.success
    assert result.pdf_path is None
    assert "source file could not be loaded" in result.errors[0]
    assert "sofficePath: soffice" in result.errors[0]


@pytest.mark.unit
def test_missing_pdf(monkeypatch, document, tmp_path):
    """Test that a clean exit without a PDF is still a failure."""
    monkeypatch.setattr(converter.subprocess, "run", fake_soffice(write_pdf=False))

    result = convert_to_pdf(document, tmp_path)

    assert not result.success
    assert "did not produce the expected PDF" in result.errors[0]


@pytest.mark.unit
def test_stale_pdf_is_not_success(monkeypatch, document, tmp_path):
    """Test that a PDF left from an earlier run does not mask a failure."""
    (tmp_path / "cv-0123.pdf").write_bytes(b"%PDF old")
    monkeypatch.setattr(converter.subprocess, "run", fake_soffice(write_pdf=False))

    assert not convert_to_pdf(document, tmp_path).success


@pytest.mark.unit
def test_missing_executable(monkeypatch, document, tmp_path):
    """Test that a missing soffice binary is reported, not raised."""

    def _run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(converter.subprocess, "run", _run)

    result = convert_to_pdf(document, tmp_path, soffice_path="/nope/soffice")

    assert not result.success
    assert "not found" in result.errors[0]
    assert "/nope/soffice" in result.errors[0]


@pytest.mark.unit
def test_timeout(monkeypatch, document, tmp_path):
    """Test that a hung converter is reported as a timeout."""

    def _run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output=b"partial")

    monkeypatch.setattr(converter.subprocess, "run", _run)

    result = convert_to_pdf(document, tmp_path, timeout=3)

    assert not result.success
    assert "timed out after 3s" in result.errors[0]
    assert result.stdout == "partial"


@pytest.mark.unit
def test_missing_document(tmp_path):
    """Test that a missing input document fails before running soffice."""
    result = convert_to_pdf(tmp_path / "missing.pptx", tmp_path)

    assert not result.success
    assert "Document not found" in result.errors[0]
