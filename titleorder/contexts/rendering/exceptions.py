"""Exceptions raised while turning a rendered order form into a PDF."""

from pathlib import Path
from typing import List, Optional


class CompilationError(Exception):
    """
    The compiler finished (or timed out) without producing a PDF.

    Attributes:
        message: Error description
        errors: Error lines parsed from the compiler log
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.message = message
        self.errors = errors or []

        parts = [message]
        if self.errors:
            parts.extend(f"  {err}" for err in self.errors[:5])

        super().__init__("\n".join(parts))


class ArtifactRelocationError(Exception):
    """The compiled PDF was produced but is missing at its destination."""

    def __init__(self, message: str, destination: Optional[Path] = None):
        self.message = message
        self.destination = destination
        super().__init__(f"{message}: {destination}" if destination else message)


class DocumentGenerationError(Exception):
    """
    Opaque failure of the whole PDF pipeline.

    The only error that leaves the rendering context. Its message is safe to
    show to API callers; the cause is chained for server-side logs.
    """

    pass
