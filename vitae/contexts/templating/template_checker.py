"""
Template Checker

Static inspection of a .pptx template before it is used for rendering.

Reports:
- Text and image placeholders found on each slide
- Placeholders that are not part of the schema for a PipelineConfig
- Placeholders split across several runs (rendered fine, but fragile to edit)
- Brace problems: a second "{{" opened before the first closed, "}}" with no
  opener, and "{{" left open at the end of a paragraph
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from pptx import Presentation

from vitae.contexts.templating.config_resolver import get_default_config
from vitae.contexts.templating.document_renderer import (
    IMAGE_PLACEHOLDER,
    PLACEHOLDER_END,
    PLACEHOLDER_START,
    TEXT_PLACEHOLDER,
    iter_text_frames,
    paragraph_text,
)
from vitae.contexts.templating.logger import log_template_report
from vitae.contexts.templating.schema import PHOTO_KEY, schema_keys


@dataclass
class TemplateIssue:
    """
    One brace problem found in a template.

    Attributes:
        slide: 1-based slide number
        run_index: Index of the run where the problem was detected
        kind: "double-open", "unmatched-close" or "unclosed"
        text: Paragraph text for context
    """

    slide: int
    run_index: int
    kind: str
    text: str


@dataclass
class TemplateReport:
    """Result of inspect_template()."""

    placeholders: List[str] = field(default_factory=list)
    image_placeholders: List[str] = field(default_factory=list)
    unknown_placeholders: List[str] = field(default_factory=list)
    split_placeholders: List[str] = field(default_factory=list)
    issues: List[TemplateIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when the template has no brace issues and no unknown placeholders."""
        return not self.issues and not self.unknown_placeholders


def _scan_runs(runs: List[str], slide_number: int, text: str) -> List[TemplateIssue]:
    """Track open braces run by run within one paragraph."""
    issues = []
    depth = 0
    for run_index, run_text in enumerate(runs):
        depth += run_text.count(PLACEHOLDER_START) - run_text.count(PLACEHOLDER_END)
        if depth > 1:
            issues.append(TemplateIssue(slide_number, run_index, "double-open", text))
            depth = 0
        elif depth < 0:
            issues.append(TemplateIssue(slide_number, run_index, "unmatched-close", text))
            depth = 0
    if depth > 0:
        issues.append(TemplateIssue(slide_number, len(runs) - 1, "unclosed", text))
    return issues


def _split_names(runs: List[str], text: str) -> List[str]:
    """Names of placeholders whose characters span more than one run."""
    boundaries = []
    offset = 0
    for run_text in runs[:-1]:
        offset += len(run_text)
        boundaries.append(offset)

    names = []
    for pattern in (TEXT_PLACEHOLDER, IMAGE_PLACEHOLDER):
        for match in pattern.finditer(text):
            if any(match.start() < b < match.end() for b in boundaries):
                names.append(match.group(1).strip())
    return names


def _add_unique(target: List[str], names) -> None:
    for name in names:
        if name not in target:
            target.append(name)


def inspect_template(path: Path, config=None) -> TemplateReport:
    """
    Inspect a presentation template for placeholder problems.

    Args:
        path: Path to the .pptx template
        config: PipelineConfig defining the schema (defaults to get_default_config())

    Returns:
        TemplateReport (report.ok is False when issues or unknown names were found)

    Example:
        >>> report = inspect_template(Path("templates/cv.pptx"))
        >>> report.ok, report.unknown_placeholders
        (False, ['nombre'])
    """
    path = Path(path)
    config = config or get_default_config()
    known = set(schema_keys(config))
    presentation = Presentation(str(path))
    report = TemplateReport()

    for slide_number, slide in enumerate(presentation.slides, start=1):
        for text_frame in iter_text_frames(slide.shapes):
            for paragraph in text_frame.paragraphs:
                runs = [run.text for run in paragraph.runs]
                text = paragraph_text(paragraph)
                if PLACEHOLDER_START not in text and PLACEHOLDER_END not in text:
                    continue

                report.issues.extend(_scan_runs(runs, slide_number, text))
                _add_unique(report.split_placeholders, _split_names(runs, text))

                images = [m.group(1) for m in IMAGE_PLACEHOLDER.finditer(text)]
                names = [m.group(1).strip() for m in TEXT_PLACEHOLDER.finditer(text)]
                _add_unique(report.image_placeholders, images)
                _add_unique(report.placeholders, names)

    _add_unique(
        report.unknown_placeholders,
        [name for name in report.placeholders if name not in known],
    )
    _add_unique(
        report.unknown_placeholders,
        [name for name in report.image_placeholders if name != PHOTO_KEY],
    )

    log_template_report(path, report)
    return report
