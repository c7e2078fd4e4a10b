"""Shared fixtures: presentation templates and images built on the fly."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image
from pptx import Presentation
from pptx.util import Inches

from vitae.contexts.templating.config_resolver import get_default_config

BLANK_LAYOUT = 6


def build_template(path: Path, texts, runs=None) -> Path:
    """
    Save a one-slide presentation with one text box per entry in texts.

    Args:
        path: Output .pptx path
        texts: Text for each box (a single run each)
        runs: Optional list of run texts for one extra box (simulates split runs)
    """
    presentation = Presentation()
    slide = presentation.slides.add_slide(presentation.slide_layouts[BLANK_LAYOUT])
    for index, text in enumerate(texts):
        box = slide.shapes.add_textbox(Inches(0.5), Inches(0.5 + index), Inches(4), Inches(0.8))
        box.text_frame.text = text
    if runs:
        box = slide.shapes.add_textbox(Inches(5), Inches(0.5), Inches(4), Inches(0.8))
        paragraph = box.text_frame.paragraphs[0]
        for run_text in runs:
            paragraph.add_run().text = run_text
    presentation.save(str(path))
    return path


def png_bytes(size=(8, 8), color="red") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def config():
    return get_default_config()


@pytest.fixture
def photo_png():
    return png_bytes()


@pytest.fixture
def cv_template(tmp_path):
    """Template with text placeholders, a photo slot and a plain label."""
    return build_template(
        tmp_path / "cv.pptx",
        ["{{name}}", "{{title}}", "{{%photo}}", "Experiencia", "{{exp_1_company}} | {{exp_1_dates}}"],
    )


@pytest.fixture
def make_template(tmp_path):
    """Factory fixture: make_template(texts, runs=None) -> path of a fresh template."""

    def _make(texts, runs=None, name="t.pptx"):
        return build_template(tmp_path / name, texts, runs)

    return _make
