"""
Shared utilities for Title Order.

Common functionality used across contexts:
- Logger configuration
- Timestamps and date formatting
"""

from titleorder.utils.timestamp import now, today_numeric

__all__ = ["now", "today_numeric"]
