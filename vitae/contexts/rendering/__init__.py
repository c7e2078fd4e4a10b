"""
Rendering Context

Responsibilities:
- Converts populated presentations to PDF with headless LibreOffice
- Orchestrates submission -> populated template -> PDF generation
- Isolates each generation in its own working directory and converter profile
- Reports converter failures with their raw diagnostics

Owns: PDF conversion, generation workflow, working directory lifecycle
Never: Modifies field values or template content
"""

from vitae.contexts.rendering.converter import ConversionResult, convert_to_pdf
from vitae.contexts.rendering.generator import GenerationResult, generate_document

__all__ = [
    "ConversionResult",
    "convert_to_pdf",
    "GenerationResult",
    "generate_document",
]
