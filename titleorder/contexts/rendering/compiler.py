"""
LaTeX Compilation Module

Handles compilation of .tex files to PDF using pdflatex.

The presence of the PDF is the source of truth for success: pdflatex exits
non-zero for recoverable errors and still writes a usable document, while a
clean exit without a PDF is a failure.
"""

import os
import re
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv

from titleorder.utils.pdf_processing import page_count

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
COMPILE_TIMEOUT_S = float(os.getenv("COMPILE_TIMEOUT_S", "60"))


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether a PDF was produced
        pdf_path: Path to generated PDF (None if failed)
        returncode: Compiler exit status (None if it never finished)
        stdout: Standard output from pdflatex
        stderr: Standard error from pdflatex
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
        timed_out: Whether the compiler was killed for exceeding the timeout
    """

    success: bool
    pdf_path: Optional[Path] = None
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None
    timed_out: bool = False


# "! Message" lines mark errors in a pdflatex log
ERROR_PATTERN = re.compile(r"^! (.+)$", re.MULTILINE)
WARNING_PATTERNS = [
    re.compile(r"LaTeX Warning: (.+)"),
    re.compile(r"Package \w+ Warning: (.+)"),
    re.compile(r"Overfull \\hbox \((.+)\)"),
    re.compile(r"Underfull \\hbox \((.+)\)"),
]


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Extract errors and warnings from a pdflatex log.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = [m.group(1).strip() for m in ERROR_PATTERN.finditer(log_content)]
    warnings = [
        m.group(1).strip() for pattern in WARNING_PATTERNS for m in pattern.finditer(log_content)
    ]
    return errors, warnings


def _as_text(output: Union[str, bytes, None]) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def compile_latex(
    tex_file: Path,
    compile_dir: Optional[Path] = None,
    timeout: float = COMPILE_TIMEOUT_S,
    compiler: str = LATEX_COMPILER,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF using pdflatex.

    Runs a single non-interactive pass with stdin closed, so a broken document
    can never block waiting for terminal input.

    Args:
        tex_file: Path to the .tex file to compile
        compile_dir: Output directory (default: the directory of tex_file)
        timeout: Seconds to wait before the compiler is killed
        compiler: Compiler command line; may include leading arguments

    Returns:
        CompilationResult with success status and diagnostic information
    """
    # Absolute paths, since the compiler runs with cwd=compile_dir
    tex_file = Path(tex_file).resolve()
    compile_dir = Path(compile_dir).resolve() if compile_dir is not None else tex_file.parent
    pdf_path = compile_dir / f"{tex_file.stem}.pdf"

    cmd = shlex.split(compiler) + [
        "-interaction=nonstopmode",
        f"-output-directory={compile_dir}",
        str(tex_file),
    ]

    try:
        process = subprocess.run(
            cmd,
            cwd=compile_dir,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",  # Replace invalid UTF-8 bytes instead of crashing
            timeout=timeout,
        )
    except FileNotFoundError:
        return CompilationResult(success=False, errors=[f"LaTeX compiler not found: {compiler}"])
    except subprocess.TimeoutExpired as e:
        # subprocess.run() kills the child before re-raising
        return CompilationResult(
            success=False,
            stdout=_as_text(e.stdout),
            stderr=_as_text(e.stderr),
            errors=[f"Compilation timed out after {timeout:g}s"],
            timed_out=True,
        )

    errors: List[str] = []
    warnings: List[str] = []

    log_file = compile_dir / f"{tex_file.stem}.log"
    if log_file.exists():
        # pdflatex writes log files in latin-1 encoding (font metadata contains non-UTF-8)
        log_content = log_file.read_text(encoding="latin-1")
        errors, warnings = _parse_latex_log(log_content)

    success = pdf_path.exists()
    if not success and not errors:
        errors.append("PDF file was not generated")

    return CompilationResult(
        success=success,
        pdf_path=pdf_path if success else None,
        returncode=process.returncode,
        stdout=process.stdout,
        stderr=process.stderr,
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if success else None,
    )
