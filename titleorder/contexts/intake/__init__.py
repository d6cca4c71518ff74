"""
Intake Context

Responsibilities:
- ClickUp OAuth code exchange and token handling
- Reading title order tasks and their parcel subtasks from ClickUp
- Typed lookup of ClickUp custom fields
- Assembling DocumentRecords for the templating context

Owns: ClickUp API access, custom field interpretation, field map config
Never: Formats LaTeX
"""

from titleorder.contexts.intake.clickup_client import ClickUpClient, ClickUpCredentials
from titleorder.contexts.intake.custom_fields import find_field, parse_custom_fields
from titleorder.contexts.intake.exceptions import ClickUpAPIError, NotAuthenticatedError
from titleorder.contexts.intake.record_builder import build_order_record, load_field_map

__all__ = [
    "ClickUpClient",
    "ClickUpCredentials",
    "ClickUpAPIError",
    "NotAuthenticatedError",
    "parse_custom_fields",
    "find_field",
    "build_order_record",
    "load_field_map",
]
