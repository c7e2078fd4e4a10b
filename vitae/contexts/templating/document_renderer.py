"""
Presentation Template Renderer

Populates a .pptx template with normalized fields using python-pptx and Jinja2.

Template conventions:
- Text placeholder: {{key}} (whitespace inside the braces is allowed)
- Image placeholder: {{%key}}, placed alone in a text box; the box is replaced
  by the picture at the same position and size
- Optional Jinja2 blocks use <%% ... %%> and comments use <# ... #> so they
  never collide with text typed on a slide

PowerPoint often splits one visible placeholder across several runs (spell
check, formatting edits). Rendering works on the joined text of each paragraph
and rewrites the paragraph with the formatting of its first run, so split
placeholders are still substituted.
"""

import re
import zipfile
from copy import deepcopy
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Tuple, Union

from jinja2 import (
    Environment,
    StrictUndefined,
    TemplateError,
    TemplateSyntaxError,
    Undefined,
    UndefinedError,
)
from pptx import Presentation
from pptx.exc import PackageNotFoundError
from pptx.oxml.ns import qn
from pptx.shapes.group import GroupShape
from pptx.util import Emu

from vitae.contexts.templating.exceptions import TemplateRenderError
from vitae.contexts.templating.logger import _log_debug, _log_warning, log_render_result

PLACEHOLDER_START = "{{"
PLACEHOLDER_END = "}}"
IMAGE_MARKER = "%"

IMAGE_PLACEHOLDER = re.compile(r"\{\{\s*%\s*(\w+)\s*\}\}")
TEXT_PLACEHOLDER = re.compile(r"\{\{\s*([^%{}\s][^{}]*?)\s*\}\}")
UNDEFINED_NAME = re.compile(r"'(\w+)' is undefined")

# python-pptx works in English Metric Units; 9525 EMU per pixel at 96 dpi
EMU_PER_PX = 9525

# Characters lxml refuses in XML text nodes
XML_INVALID_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

TemplateSource = Union[str, Path, bytes]


def build_environment(strict: bool = True) -> Environment:
    """
    Create the Jinja2 environment used for slide text.

    Args:
        strict: Raise on placeholders missing from the data (StrictUndefined)

    Returns:
        Configured Environment
    """
    return Environment(
        # Catches silent failures
        undefined=StrictUndefined if strict else Undefined,
        variable_start_string=PLACEHOLDER_START,
        variable_end_string=PLACEHOLDER_END,
        block_start_string="<%%",
        block_end_string="%%>",
        comment_start_string="<#",
        comment_end_string="#>",
        trim_blocks=False,
        lstrip_blocks=False,
        keep_trailing_newline=True,
        autoescape=False,
    )


def iter_text_frames(shapes) -> Iterator[Any]:
    """
    Yield every text frame in a shape collection.

    Descends into group shapes and table cells.
    """
    for shape in shapes:
        if isinstance(shape, GroupShape):
            yield from iter_text_frames(shape.shapes)
        elif shape.has_text_frame:
            yield shape.text_frame
        elif getattr(shape, "has_table", False) and shape.has_table:
            for row in shape.table.rows:
                for cell in row.cells:
                    yield cell.text_frame


def paragraph_text(paragraph) -> str:
    """Joined text of all runs in a paragraph."""
    return "".join(run.text for run in paragraph.runs)


def _xml_safe(text: str) -> str:
    return XML_INVALID_CHARS.sub("", text)


def write_paragraph(paragraph, text: str) -> None:
    """
    Replace the runs of a paragraph with text, keeping the first run's formatting.

    Newlines in text become line breaks within the paragraph.
    """
    p = paragraph._p
    first_run = p.find(qn("a:r"))
    run_properties = None
    if first_run is not None and first_run.find(qn("a:rPr")) is not None:
        run_properties = deepcopy(first_run.find(qn("a:rPr")))

    for child in list(p):
        if child.tag in (qn("a:r"), qn("a:br"), qn("a:fld")):
            p.remove(child)

    for index, line in enumerate(text.split("\n")):
        if index:
            paragraph.add_line_break()
        run = paragraph.add_run()
        if run_properties is not None:
            run._r.insert(0, deepcopy(run_properties))
        run.text = _xml_safe(line)


def _open_presentation(template: TemplateSource):
    if isinstance(template, bytes):
        source, template_name = BytesIO(template), "<memory>"
    else:
        source, template_name = str(template), Path(template).name
    try:
        return Presentation(source), template_name
    # Not a zip, a zip without a presentation part, or a non-PowerPoint content type
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        raise TemplateRenderError(
            f"Could not open template {template_name}", original_error=e
        ) from e


def _image_slots(shapes) -> List[Tuple[Any, Any, str]]:
    """
    Text boxes holding an image placeholder, with the collection that owns them.

    Descends into group shapes; a picture for a grouped slot is added to the
    same group so it shares the group's coordinate space.
    """
    slots = []
    for shape in shapes:
        if isinstance(shape, GroupShape):
            slots.extend(_image_slots(shape.shapes))
        elif shape.has_text_frame:
            match = IMAGE_PLACEHOLDER.search(shape.text_frame.text)
            if match:
                slots.append((shapes, shape, match.group(1)))
    return slots


def _fill_image_slot(shapes, shape, image: Any, photo_size_px: int) -> bool:
    """
    Replace a placeholder shape with a picture (or just remove it when no image).

    Returns:
        True when a picture was inserted
    """
    inserted = False
    if isinstance(image, (bytes, bytearray)) and image:
        default_size = Emu(photo_size_px * EMU_PER_PX)
        width = shape.width or default_size
        height = shape.height or default_size
        try:
            shapes.add_picture(
                BytesIO(bytes(image)), shape.left or 0, shape.top or 0, width, height
            )
            inserted = True
        except (OSError, ValueError) as e:
            # Unreadable image bytes leave the slot empty
            _log_warning(f"Could not place image in '{shape.name}': {e}")

    element = shape._element
    element.getparent().remove(element)
    return inserted


def _render_paragraph(env: Environment, paragraph, data: Mapping[str, Any], slide_number: int) -> int:
    text = paragraph_text(paragraph)
    if PLACEHOLDER_START not in text and "<%%" not in text and "<#" not in text:
        return 0

    # Image markers outside a text box of their own (e.g. table cells) are dropped
    dropped = IMAGE_PLACEHOLDER.findall(text)
    if dropped:
        _log_warning(
            f"Slide {slide_number}: image placeholder(s) {', '.join(dropped)} "
            "not in a text box of their own; removed"
        )
    source = IMAGE_PLACEHOLDER.sub("", text)

    try:
        rendered = env.from_string(source).render(data)
    except UndefinedError as e:
        match = UNDEFINED_NAME.search(str(e))
        tag = match.group(1) if match else None
        raise TemplateRenderError(
            f"Unknown placeholder '{tag}'" if tag else "Undefined value in template",
            tag=tag,
            slide=slide_number,
            paragraph_text=text,
            original_error=e,
        ) from e
    except TemplateSyntaxError as e:
        raise TemplateRenderError(
            "Malformed placeholder",
            slide=slide_number,
            paragraph_text=text,
            original_error=e,
        ) from e
    except (TemplateError, TypeError, ValueError) as e:
        raise TemplateRenderError(
            "Could not render placeholder",
            slide=slide_number,
            paragraph_text=text,
            original_error=e,
        ) from e

    write_paragraph(paragraph, rendered)
    return len(TEXT_PLACEHOLDER.findall(source))


def render_presentation(
    template: TemplateSource,
    data: Mapping[str, Any],
    *,
    strict: bool = True,
    photo_size_px: int = 220,
) -> bytes:
    """
    Populate a presentation template and return the resulting .pptx bytes.

    Args:
        template: Path to a .pptx file, or its bytes
        data: Placeholder values (NormalizedFields.as_template_data() or a plain dict);
              image slots take bytes or None
        strict: Raise TemplateRenderError for placeholders missing from data
        photo_size_px: Picture size used when the placeholder box has no extent

    Returns:
        Populated presentation as bytes

    Raises:
        TemplateRenderError: If a placeholder is malformed, or unknown while strict
    """
    presentation, template_name = _open_presentation(template)
    env = build_environment(strict=strict)
    values: Dict[str, Any] = dict(data)

    replaced = 0
    images = 0
    for slide_number, slide in enumerate(presentation.slides, start=1):
        for shapes, shape, key in _image_slots(slide.shapes):
            if strict and key not in values:
                raise TemplateRenderError(
                    f"Unknown placeholder '{key}'",
                    tag=key,
                    slide=slide_number,
                    paragraph_text=shape.text_frame.text,
                )
            if _fill_image_slot(shapes, shape, values.get(key), photo_size_px):
                images += 1
            else:
                _log_debug(f"Slide {slide_number}: image slot '{key}' left empty")

        for text_frame in iter_text_frames(slide.shapes):
            for paragraph in text_frame.paragraphs:
                replaced += _render_paragraph(env, paragraph, values, slide_number)

    output = BytesIO()
    presentation.save(output)
    log_render_result(template_name, replaced, images)
    return output.getvalue()
