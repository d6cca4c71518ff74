"""
Artifact management for compiled order forms.

Every PDF generation runs in its own staging directory under STAGING_ROOT. The
compiler always works on the fixed stem "output"; the finished PDF is copied
to a name derived from the order title and date, and every other file the
compiler leaves behind is purged.
"""

import os
import re
import shutil
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from titleorder.contexts.rendering.exceptions import ArtifactRelocationError
from titleorder.contexts.rendering.logger import _log_debug, _log_info, _log_warning
from titleorder.contexts.templating.order_data_structure import DocumentRecord

load_dotenv()
STAGING_ROOT = Path(os.getenv("STAGING_ROOT", str(Path(tempfile.gettempdir()) / "titleorder")))
# Staging directories untouched for this long belong to no live request
STALE_STAGING_AGE_S = float(os.getenv("STALE_STAGING_AGE_S", "3600"))

# Prefix of per-invocation staging directories
STAGING_DIR_PREFIX = "order_"
# Stem of the rendered source and everything pdflatex derives from it
STAGING_STEM = "output"
PDF_SUFFIX = ".pdf"

# Byproducts removed after every compilation, successful or not
BYPRODUCT_FILES = [
    f"{STAGING_STEM}.aux",
    f"{STAGING_STEM}.log",
    f"{STAGING_STEM}.out",
    f"{STAGING_STEM}.pdf",
    f"{STAGING_STEM}.tex",
    "texput.log",  # written when pdflatex fails before opening the source
]

_NON_ALNUM_RUN = re.compile(r"[^A-Za-z0-9]+")


def create_staging_dir(staging_root: Path = STAGING_ROOT) -> Path:
    """Create a fresh, private staging directory for one PDF generation."""
    staging_root = Path(staging_root)
    staging_root.mkdir(parents=True, exist_ok=True)
    return Path(tempfile.mkdtemp(prefix=STAGING_DIR_PREFIX, dir=staging_root))


def safe_title(title: str) -> str:
    """
    Make an order title filesystem safe.

    Runs of non-alphanumeric characters collapse to a single underscore.

    >>> safe_title("Smith Estate #42")
    'Smith_Estate_42'
    """
    return _NON_ALNUM_RUN.sub("_", title or "").strip("_") or "untitled"


def date_segment(date_ordered: str) -> str:
    """
    Make an order date path safe (slashes become dashes).

    >>> date_segment("10/17/2026")
    '10-17-2026'
    """
    return _NON_ALNUM_RUN.sub("-", date_ordered or "").strip("-") or "undated"


def unique_pdf_path(record: DocumentRecord, staging_dir: Path) -> Path:
    """
    Destination of the finished PDF for a record.

    Uniqueness across concurrent generations comes from staging_dir, which is
    private to one invocation.
    """
    return Path(staging_dir) / (
        f"{safe_title(record.title)}_{date_segment(record.date_ordered)}{PDF_SUFFIX}"
    )


def relocate_artifact(compiled_pdf: Path, destination: Path) -> Path:
    """
    Copy the compiler's PDF to its final name and verify it arrived.

    Raises:
        ArtifactRelocationError: Destination missing after the copy
    """
    shutil.copyfile(compiled_pdf, destination)
    if not Path(destination).exists():
        raise ArtifactRelocationError("PDF missing after copy", destination=destination)
    _log_debug(f"Copied {compiled_pdf.name} -> {destination.name}")
    return destination


def purge_byproducts(staging_dir: Path) -> List[Path]:
    """
    Remove compiler byproducts from a staging directory.

    Each removal is attempted independently; failures are logged, never raised.

    Returns:
        Files that could not be removed
    """
    leftovers = []
    for name in BYPRODUCT_FILES:
        path = Path(staging_dir) / name
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            _log_warning(f"Failed to delete temporary file {path}: {e}")
            leftovers.append(path)
    return leftovers


def remove_staging_dir(staging_dir: Path) -> None:
    """Delete a staging directory and anything left in it (best-effort)."""
    try:
        shutil.rmtree(staging_dir)
    except FileNotFoundError:
        pass
    except OSError as e:
        _log_warning(f"Failed to delete staging directory {staging_dir}: {e}")


def discard_artifact(pdf_path: Path) -> None:
    """
    Delete a delivered PDF along with its staging directory.

    Called once the PDF has been sent to the client.
    """
    pdf_path = Path(pdf_path)
    try:
        pdf_path.unlink(missing_ok=True)
    except OSError as e:
        _log_warning(f"Failed to delete generated PDF {pdf_path}: {e}")
        return

    staging_dir = pdf_path.parent
    if staging_dir.name.startswith(STAGING_DIR_PREFIX):
        remove_staging_dir(staging_dir)
    _log_debug(f"Discarded {pdf_path.name}")


def sweep_stale_staging_dirs(
    staging_root: Path = STAGING_ROOT,
    max_age_s: float = STALE_STAGING_AGE_S,
    now: Optional[float] = None,
) -> List[Path]:
    """
    Remove staging directories abandoned by earlier generations.

    discard_artifact() only runs once a PDF has been fully sent, so a client
    that disconnects mid-download (or a process that dies) leaves its staging
    directory behind. Only directories carrying the staging prefix and not
    modified for max_age_s are removed, so in-flight generations are safe.

    Args:
        staging_root: Parent of the per-invocation staging directories
        max_age_s: Minimum age, by modification time, of a removable directory
        now: Reference time in epoch seconds (default: current time)

    Returns:
        Directories that were removed
    """
    staging_root = Path(staging_root)
    if not staging_root.is_dir():
        return []

    cutoff = (time.time() if now is None else now) - max_age_s
    removed = []
    for path in staging_root.glob(f"{STAGING_DIR_PREFIX}*"):
        try:
            stale = path.is_dir() and path.stat().st_mtime < cutoff
        except FileNotFoundError:
            continue
        if stale:
            remove_staging_dir(path)
            removed.append(path)

    if removed:
        _log_info(f"Removed {len(removed)} stale staging directories from {staging_root}")
    return removed
