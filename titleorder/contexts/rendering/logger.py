"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path
from typing import Callable, Sequence

from dotenv import load_dotenv
from loguru import logger

from titleorder.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"
# How many parsed diagnostics to echo per compilation
ERROR_LIMIT = 5
WARNING_LIMIT = 3
VERBOSE_LIMIT = 10


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for a command-line rendering session.

    Args:
        log_dir: Directory for this rendering session

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance={
            "LaTeX compiler": os.getenv("LATEX_COMPILER", "pdflatex"),
            "Compile timeout": f"{os.getenv('COMPILE_TIMEOUT_S', '60')}s",
        },
    )


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def _log_first(
    items: Sequence[str], label: str, limit: int, log: Callable[[str], None]
) -> None:
    for i, item in enumerate(items[:limit], 1):
        log(f"  {label} {i}: {item}")
    if len(items) > limit:
        log(f"  ... and {len(items) - limit} more")


def _dump_output(title: str, output: str) -> None:
    # raw=True keeps multi-line compiler output free of per-line timestamps
    if output:
        bar = "=" * 80
        logger.opt(raw=True).debug(f"\n{bar}\n{title}:\n{bar}\n{output}\n")


def log_compilation_start(order_title: str, tex_file: Path, working_dir: Path) -> None:
    """Log start of compilation with context."""
    _log_info(f"Compiling order form for '{order_title}' in {working_dir}")
    _log_debug(f"  Source: {tex_file}")


def log_compilation_result(
    order_title: str,
    result,  # CompilationResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Summarize a compilation: outcome, parsed diagnostics, and raw output.

    A non-zero exit that still produced a PDF is logged as a warning, not a
    failure. Raw compiler output is dumped on failure, or always in verbose mode.

    Args:
        order_title: Order being compiled
        result: CompilationResult from compile_latex()
        elapsed_time: Seconds spent in the compiler
        verbose: Echo more diagnostics and the full compiler output
    """
    if result.timed_out:
        _log_error(f"'{order_title}': compiler killed after {elapsed_time:.2f}s")
    elif result.success:
        _log_success(
            f"'{order_title}': PDF ready, {len(result.warnings)} warnings ({elapsed_time:.2f}s)"
        )
        if result.returncode not in (0, None):
            _log_warning(f"Compiler exited with status {result.returncode} but produced a PDF")
        _log_debug(f"  PDF: {result.pdf_path} ({result.page_count} pages)")
    else:
        _log_error(f"'{order_title}': no PDF, {len(result.errors)} errors ({elapsed_time:.2f}s)")

    if result.errors:
        _log_first(result.errors, "Error", VERBOSE_LIMIT if verbose else ERROR_LIMIT, _log_error)
    if result.warnings:
        _log_first(
            result.warnings, "Warning", VERBOSE_LIMIT if verbose else WARNING_LIMIT, _log_debug
        )

    if verbose or not result.success:
        _dump_output("COMPILER STDOUT", result.stdout)
        _dump_output("COMPILER STDERR", result.stderr)
