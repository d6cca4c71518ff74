"""
Rendering Context

Responsibilities:
- Compiles rendered order forms to PDF with pdflatex
- Gives every generation an isolated staging directory
- Names, verifies and hands over the finished PDF
- Purges compiler byproducts whatever the outcome

Owns: LaTeX compilation, PDF generation, artifact lifecycle
Never: Modifies template content
"""

from titleorder.contexts.rendering.artifacts import (
    discard_artifact,
    sweep_stale_staging_dirs,
    unique_pdf_path,
)
from titleorder.contexts.rendering.compiler import CompilationResult, compile_latex
from titleorder.contexts.rendering.exceptions import (
    ArtifactRelocationError,
    CompilationError,
    DocumentGenerationError,
)
from titleorder.contexts.rendering.pipeline import PipelineConfig, generate_pdf

__all__ = [
    "generate_pdf",
    "PipelineConfig",
    "discard_artifact",
    "unique_pdf_path",
    "sweep_stale_staging_dirs",
    "compile_latex",
    "CompilationResult",
    "CompilationError",
    "ArtifactRelocationError",
    "DocumentGenerationError",
]
