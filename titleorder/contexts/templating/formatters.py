"""
Field formatters.

Turn structured order fields into LaTeX fragments for the order form template.
All user text goes through escape_latex().
"""

import re
from typing import List, Optional, Sequence

from titleorder.contexts.templating.escaping import NO_DATA, escape_latex
from titleorder.contexts.templating.order_data_structure import ParcelRow, ScopeItem

# Forced line break within a paragraph. The empty group stops \\ from reading a
# following "*" or "[" as its own star form or optional argument.
LATEX_LINE_BREAK = r" \\{} "
# Line break with a blank line's worth of space, used between paragraphs
LATEX_PARAGRAPH_BREAK = r" \\[\baselineskip] "
# Separator between scope items
LATEX_ITEM_SEPARATOR = r"\newline "
LATEX_COLUMN_SEPARATOR = " & "
LATEX_ROW_END = r" \\ \hline"

_LINE_BREAKS = re.compile(r"\r?\n")


def _single_line(text: Optional[str]) -> str:
    """Collapse internal line breaks to spaces and trim."""
    return _LINE_BREAKS.sub(" ", text or "").strip()


def format_multiline(text: Optional[str]) -> str:
    """
    Format multi-line prose (e.g. delivery instructions) for LaTeX.

    Surrounding blank lines are trimmed. Line breaks inside a paragraph become
    forced line breaks; blank lines separate paragraphs.

    Args:
        text: Free text, possibly None

    Returns:
        LaTeX fragment, or NO_DATA when there is no text
    """
    text = (text or "").replace("\r\n", "\n").strip()
    if not text:
        return NO_DATA

    paragraphs: List[List[str]] = [[]]
    for line in text.split("\n"):
        line = line.strip()
        if line:
            paragraphs[-1].append(escape_latex(line))
        elif paragraphs[-1]:
            paragraphs.append([])

    return LATEX_PARAGRAPH_BREAK.join(LATEX_LINE_BREAK.join(lines) for lines in paragraphs if lines)


def format_scope_item(item: ScopeItem) -> str:
    """Render one scope item as a bold name with an optional ": description"."""
    name = _single_line(item.name)
    description = _single_line(item.description)

    latex = f"\\textbf{{{escape_latex(name)}}}"
    if description:
        latex += f": {escape_latex(description)}"
    return latex


def format_scope_items(items: Optional[Sequence[ScopeItem]]) -> str:
    """
    Format title scope or E&R items for LaTeX.

    List items are single-line by design, so any line breaks inside a name or
    description are collapsed to spaces.

    Args:
        items: Ordered scope items, possibly None

    Returns:
        Items joined with \\newline, or NO_DATA for an empty list
    """
    if not items:
        return NO_DATA
    return LATEX_ITEM_SEPARATOR.join(format_scope_item(item) for item in items).strip()


def format_parcel_row(parcel: ParcelRow) -> str:
    """Render one parcel as a table row terminated by a rule."""
    cells = [parcel.name, parcel.parcel_id, parcel.address, parcel.county_st]
    return LATEX_COLUMN_SEPARATOR.join(escape_latex(cell) for cell in cells) + LATEX_ROW_END


def format_parcel_table(parcels: Optional[Sequence[ParcelRow]]) -> str:
    """
    Format parcels as the body of the parcel table.

    An empty list gives an empty body (zero rows) rather than NO_DATA, so the
    surrounding tabular stays syntactically valid.
    """
    return "\n".join(format_parcel_row(parcel) for parcel in parcels or [])
