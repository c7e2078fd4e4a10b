"""Custom exceptions for templating context with placeholder references."""

from typing import Optional


class TemplateRenderError(Exception):
    """
    Exception raised when populating a presentation template fails.

    Attributes:
        message: Error description
        tag: Placeholder name that caused the failure (if known)
        slide: 1-based slide number containing the placeholder
        paragraph_text: Raw paragraph text holding the placeholder
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        tag: Optional[str] = None,
        slide: Optional[int] = None,
        paragraph_text: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.tag = tag
        self.slide = slide
        self.paragraph_text = paragraph_text
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if tag:
            parts.append(f"\nPlaceholder: {tag}")
        if slide is not None:
            parts.append(f"Slide: {slide}")

        if paragraph_text:
            # Truncate snippet if too long
            snippet = paragraph_text[:200] + "..." if len(paragraph_text) > 200 else paragraph_text
            parts.append(f"\nTemplate text:\n{snippet}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
