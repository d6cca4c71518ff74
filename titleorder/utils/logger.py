"""
Shared loguru setup for the CLI and the HTTP server.

Each entry point configures its sinks once through setup_logger; the contexts
log through their own prefixed wrappers in contexts/{context}/logger.py.
"""

import os
import platform
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from titleorder import __version__

load_dotenv()
CONSOLE_LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# Server sessions run for days; keep each file bounded
LOG_ROTATION = os.getenv("LOG_ROTATION", "20 MB")
LOG_RETENTION = os.getenv("LOG_RETENTION", "14 days")

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {thread.name} | {message}"
CONSOLE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
) -> Path:
    """
    Route loguru output to a session log file and to stdout.

    The file sink records DEBUG and above with the worker thread name, since
    several renders can be in flight inside one server process. Console output
    is filtered by LOG_LEVEL.

    Args:
        context_name: Session kind, used as the log file stem ("render", "api")
        log_dir: Directory for this logging session
        extra_provenance: Additional key-value pairs for the session header

    Returns:
        Path to log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(
        log_file,
        format=FILE_FORMAT,
        level="DEBUG",
        rotation=LOG_ROTATION,
        retention=LOG_RETENTION,
        enqueue=True,
    )
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=CONSOLE_LOG_LEVEL, colorize=True)

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra_context: Optional[dict] = None) -> None:
    """Write a session header: how the process was started and where it runs."""
    logger.info("=" * 80)
    logger.info(f"titleorder {__version__}")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {platform.python_version()} on {platform.system()}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info("=" * 80)
