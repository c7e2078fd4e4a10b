"""
Templating Context

Responsibilities:
- Defines the fixed field schema and per-field space budgets
- Fits text to its budget (single-line and word-wrapped clamps)
- Normalizes submissions into the complete field map a template consumes
- Populates .pptx templates with text and the photo image slot
- Inspects templates for unknown or malformed placeholders

Owns: Field schema, budget profiles, text fitting, template population
Never: Talks to the network or runs the PDF converter
"""

from vitae.contexts.templating.config_resolver import (
    FieldBudget,
    PipelineConfig,
    get_default_config,
    load_pipeline_config,
)
from vitae.contexts.templating.document_renderer import render_presentation
from vitae.contexts.templating.exceptions import TemplateRenderError
from vitae.contexts.templating.normalizer import NormalizedFields, normalize, normalize_fields
from vitae.contexts.templating.schema import schema_keys
from vitae.contexts.templating.template_checker import (
    TemplateIssue,
    TemplateReport,
    inspect_template,
)
from vitae.contexts.templating.text_fitting import clamp_plain, clamp_wrapped

__all__ = [
    # Configuration
    "PipelineConfig",
    "FieldBudget",
    "load_pipeline_config",
    "get_default_config",
    "schema_keys",
    # Text fitting
    "clamp_plain",
    "clamp_wrapped",
    # Normalization
    "NormalizedFields",
    "normalize",
    "normalize_fields",
    # Template population
    "render_presentation",
    "TemplateRenderError",
    "inspect_template",
    "TemplateReport",
    "TemplateIssue",
]
