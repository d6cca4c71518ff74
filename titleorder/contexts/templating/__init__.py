"""
Templating Context

Responsibilities:
- Escapes user text for safe embedding in LaTeX
- Formats scope lists, prose blocks and parcel tables into LaTeX fragments
- Populates the order form template with a record's formatted fields

Owns: Order record structure, LaTeX escaping, the order form template
Never: Invokes the LaTeX compiler
"""

from titleorder.contexts.templating.escaping import NO_DATA, escape_latex
from titleorder.contexts.templating.exceptions import TemplateLoadError, TemplateRenderError
from titleorder.contexts.templating.formatters import (
    format_multiline,
    format_parcel_table,
    format_scope_items,
)
from titleorder.contexts.templating.order_data_structure import (
    DocumentRecord,
    ParcelRow,
    ScopeItem,
)
from titleorder.contexts.templating.renderer import (
    PLACEHOLDERS,
    OrderFormRenderer,
    apply_default_date,
    build_placeholder_values,
)

__all__ = [
    # Escaping and formatting
    "NO_DATA",
    "escape_latex",
    "format_multiline",
    "format_scope_items",
    "format_parcel_table",
    # Data structure classes
    "DocumentRecord",
    "ScopeItem",
    "ParcelRow",
    # Rendering
    "PLACEHOLDERS",
    "OrderFormRenderer",
    "apply_default_date",
    "build_placeholder_values",
    # Errors
    "TemplateLoadError",
    "TemplateRenderError",
]
