"""
API logger.

Provides logging interface for the HTTP layer with automatic [api] prefix.
"""

from pathlib import Path

from loguru import logger

from titleorder.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[api]"


def setup_api_logger(log_dir: Path, port: int) -> Path:
    """Setup logger for a server session."""
    return _setup_logger(context_name="api", log_dir=log_dir, extra_provenance={"Port": port})


def _log_info(message: str) -> None:
    """Log info message with [api] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [api] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")
