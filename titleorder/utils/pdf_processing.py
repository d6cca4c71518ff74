"""Inspection of compiled order form PDFs."""

from pathlib import Path
from typing import Optional

from loguru import logger
from PyPDF2 import PdfReader


def page_count(pdf_path: Path) -> Optional[int]:
    """
    Number of pages in a PDF.

    Diagnostic only: a PDF PyPDF2 cannot parse is still a delivered PDF, so
    parse failures give None instead of raising.
    """
    try:
        return len(PdfReader(str(pdf_path)).pages)
    except Exception as e:  # PyPDF2 raises a variety of types on malformed input
        logger.debug(f"Could not count pages in {Path(pdf_path).name}: {e}")
        return None
