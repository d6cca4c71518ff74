"""
Order form PDF pipeline.

render -> stage -> compile -> relocate -> purge, strictly in sequence, inside a
staging directory private to the invocation. Any failure is logged in detail
and re-raised as one opaque DocumentGenerationError.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from titleorder.contexts.rendering.artifacts import (
    STAGING_ROOT,
    STAGING_STEM,
    create_staging_dir,
    purge_byproducts,
    relocate_artifact,
    remove_staging_dir,
    unique_pdf_path,
)
from titleorder.contexts.rendering.compiler import (
    COMPILE_TIMEOUT_S,
    LATEX_COMPILER,
    compile_latex,
)
from titleorder.contexts.rendering.exceptions import CompilationError, DocumentGenerationError
from titleorder.contexts.rendering.logger import (
    _log_error,
    _log_info,
    _log_success,
    log_compilation_result,
    log_compilation_start,
)
from titleorder.contexts.templating.order_data_structure import DocumentRecord
from titleorder.contexts.templating.renderer import ORDER_TEMPLATE_PATH, OrderFormRenderer

GENERATION_FAILED_MESSAGE = "Failed to generate PDF"


@dataclass
class PipelineConfig:
    """
    Settings for one PDF generation.

    Attributes:
        template_path: Order form template
        staging_root: Parent of the per-invocation staging directories
        compiler: LaTeX compiler command line
        timeout: Seconds before the compiler is killed
        verbose: Log full compiler output on success too
    """

    template_path: Path = ORDER_TEMPLATE_PATH
    staging_root: Path = STAGING_ROOT
    compiler: str = LATEX_COMPILER
    timeout: float = COMPILE_TIMEOUT_S
    verbose: bool = False


def generate_pdf(record: DocumentRecord, config: Optional[PipelineConfig] = None) -> Path:
    """
    Render a record to a PDF.

    The returned file lives in its own staging directory and belongs to the
    caller, who should release it with discard_artifact() once delivered.

    Args:
        record: Order to render (date_ordered is defaulted in place)
        config: Pipeline settings (default: from environment)

    Returns:
        Path to the PDF, named <Title>_<MM-DD-YYYY>.pdf

    Raises:
        DocumentGenerationError: Any failure; the cause is chained
    """
    config = config or PipelineConfig()
    staging_dir = create_staging_dir(config.staging_root)
    unique_pdf: Optional[Path] = None

    try:
        _log_info("Processing LaTeX template...")
        latex = OrderFormRenderer(config.template_path).render(record)

        tex_file = staging_dir / f"{STAGING_STEM}.tex"
        tex_file.write_text(latex, encoding="utf-8")

        log_compilation_start(record.title, tex_file, staging_dir)
        start_time = time.time()
        result = compile_latex(
            tex_file, compile_dir=staging_dir, timeout=config.timeout, compiler=config.compiler
        )
        log_compilation_result(
            record.title, result, time.time() - start_time, verbose=config.verbose
        )

        if not result.success:
            raise CompilationError("PDF was not generated", errors=result.errors)

        unique_pdf = unique_pdf_path(record, staging_dir)
        relocate_artifact(result.pdf_path, unique_pdf)

        _log_success(f"PDF generated successfully: {unique_pdf}")
        return unique_pdf

    except Exception as e:
        _log_error(f"Error generating PDF: {e}")
        # Never hand out a partial artifact
        if unique_pdf is not None:
            unique_pdf.unlink(missing_ok=True)
            unique_pdf = None
        raise DocumentGenerationError(GENERATION_FAILED_MESSAGE) from e

    finally:
        purge_byproducts(staging_dir)
        if unique_pdf is None:
            remove_staging_dir(staging_dir)
