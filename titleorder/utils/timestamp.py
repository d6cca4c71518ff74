"""Timestamp formatting utilities."""

from datetime import date, datetime
from typing import Optional

# Numeric US date used on order forms and artifact names
ORDER_DATE_FORMAT = "%m/%d/%Y"


def now() -> str:
    """Current local time as a sortable, filesystem-safe stamp (e.g. "20261017_093012")."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def today_numeric(today: Optional[date] = None) -> str:
    """
    Format a date as MM/DD/YYYY.

    Args:
        today: Date to format (default: the current local date)

    Returns:
        Zero-padded numeric date, e.g. "10/17/2026"
    """
    return (today or date.today()).strftime(ORDER_DATE_FORMAT)
