"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import List, Optional


class TemplateLoadError(Exception):
    """
    Exception raised when the order form template cannot be loaded.

    Covers a missing or unreadable file as well as Jinja2 syntax errors.

    Attributes:
        message: Error description
        template_path: Path to the template file
        original_error: The underlying I/O or Jinja2 error
    """

    def __init__(
        self,
        message: str,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]

        if template_path:
            parts.append(f"\nTemplate: {template_path}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class TemplateRenderError(Exception):
    """
    Exception raised when placeholder substitution cannot be done safely.

    Attributes:
        message: Error description
        placeholders: Placeholder names involved in the failure
        template_path: Path to the template file
        original_error: The original Jinja2 error, if any
    """

    def __init__(
        self,
        message: str,
        placeholders: Optional[List[str]] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.placeholders = placeholders or []
        self.template_path = template_path
        self.original_error = original_error

        parts = [message]

        if self.placeholders:
            parts.append(f"\nPlaceholders: {', '.join(self.placeholders)}")

        if template_path:
            parts.append(f"Template: {template_path}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))
