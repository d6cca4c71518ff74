"""
Integration tests for rendering context - tests real LaTeX compilation.
"""

import shutil

import pytest

from titleorder.contexts.rendering.artifacts import BYPRODUCT_FILES, discard_artifact
from titleorder.contexts.rendering.compiler import compile_latex
from titleorder.contexts.rendering.pipeline import PipelineConfig, generate_pdf
from titleorder.contexts.templating.order_data_structure import DocumentRecord

PDFLATEX_AVAILABLE = shutil.which("pdflatex") is not None
skip_if_no_pdflatex = pytest.mark.skipif(
    not PDFLATEX_AVAILABLE,
    reason="pdflatex not installed - install TeX Live, MiKTeX, or MacTeX"
)

NASTY_RECORD = {
    "title": "O'Brien & Sons #7 {draft} 100% ~ready^",
    "date_ordered": "10/17/2026",
    "title_scope_items": [
        {"name": "Survey_2026", "description": "Check C:\\records\\plat $5"},
        {"name": "Chain\nof title"},
    ],
    "er_items": [],
    "include_property_profile": True,
    "delivery_instructions": "\nLine one & two\n\nSecond paragraph #3\n",
    "delivery_email": "closing_team@example.com",
    "parcels": [
        {"name": "North_lot", "parcel_id": "R-100", "address": "1 Main St", "county_st": "Ada, ID"},
    ],
}


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_bundled_template_compiles(tmp_path):
    """Escaped special characters in every field must compile cleanly."""
    config = PipelineConfig(staging_root=tmp_path / "staging", timeout=120)

    pdf_path = generate_pdf(DocumentRecord.from_dict(NASTY_RECORD), config)

    assert pdf_path.name == "O_Brien_Sons_7_draft_100_ready_10-17-2026.pdf"
    assert pdf_path.stat().st_size > 0
    assert not any((pdf_path.parent / name).exists() for name in BYPRODUCT_FILES)

    discard_artifact(pdf_path)
    assert list((tmp_path / "staging").iterdir()) == []


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_compile_with_intentional_error(tmp_path):
    """Test that compilation properly detects and reports errors."""
    broken_tex = tmp_path / "broken.tex"
    broken_tex.write_text(
        r"""
\documentclass{article}
\begin{document}
This has an \undefinedcommand{test} that should fail.
\end{document}
"""
    )

    result = compile_latex(broken_tex, compile_dir=tmp_path, timeout=120)

    # nonstopmode still writes a PDF for recoverable errors
    assert result.returncode != 0
    assert any("Undefined control sequence" in err for err in result.errors)
    assert result.success
    assert result.pdf_path == (tmp_path / "broken.pdf").resolve()
    assert result.pdf_path.exists()


@pytest.mark.integration
@pytest.mark.latex
@skip_if_no_pdflatex
def test_compile_with_fatal_error(tmp_path):
    """A missing input file stops pdflatex before any page is shipped."""
    broken_tex = tmp_path / "fatal.tex"
    broken_tex.write_text(
        r"""
\documentclass{article}
\begin{document}
\input{no_such_file}
\end{document}
"""
    )

    result = compile_latex(broken_tex, compile_dir=tmp_path, timeout=120)

    assert not result.success
    assert result.pdf_path is None
    assert result.returncode != 0
    assert not (tmp_path / "fatal.pdf").exists()
    assert result.errors
