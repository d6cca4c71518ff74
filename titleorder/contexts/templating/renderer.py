r"""
Order Form Renderer

Populates the order form LaTeX template with formatted record fields.

The template is an externally authored .tex file whose placeholders are
written {{name}}. Only tokens of exactly that shape are placeholders: other
double-brace groups such as {{\bfseries #1}} are plain LaTeX. Placeholder
tokens are rewritten to <<<name>>> and rendered with Jinja2 using delimiters
that never occur in LaTeX, so the rest of the file passes through untouched.

Before rendering, every placeholder reference is counted: a placeholder used
twice, or a name outside PLACEHOLDERS, is rejected instead of silently
leaving a literal token in the output.
"""

import os
import re
from collections import Counter
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    nodes,
)
from jinja2.exceptions import UndefinedError as JinjaUndefinedError

from titleorder.contexts.templating.escaping import escape_latex, is_missing
from titleorder.contexts.templating.exceptions import TemplateLoadError, TemplateRenderError
from titleorder.contexts.templating.formatters import (
    format_multiline,
    format_parcel_table,
    format_scope_items,
)
from titleorder.contexts.templating.logger import _log_debug, _log_info, _log_warning
from titleorder.contexts.templating.order_data_structure import DocumentRecord
from titleorder.utils.timestamp import today_numeric

load_dotenv()
DEFAULT_TEMPLATE_PATH = Path(__file__).resolve().parent / "template" / "template.tex"
ORDER_TEMPLATE_PATH = Path(os.getenv("ORDER_TEMPLATE_PATH", str(DEFAULT_TEMPLATE_PATH)))

# Closed set of placeholders the order form may reference
PLACEHOLDERS = (
    "title",
    "date_ordered",
    "title_scope_items",
    "er_items",
    "include_property_profile",
    "delivery_instructions",
    "delivery_email",
    "parcels",
)

# {{name}} with optional inner spaces; anything else inside {{ }} is LaTeX
PLACEHOLDER_TOKEN = re.compile(r"\{\{\s*([A-Za-z_]\w*)\s*\}\}")
# A known placeholder opened with {{ but never closed
UNCLOSED_PLACEHOLDER = re.compile(
    r"\{\{\s*(%s)\b(?!\s*\}\})" % "|".join(PLACEHOLDERS)
)


def apply_default_date(record: DocumentRecord) -> str:
    """
    Default a missing order date to today's date (MM/DD/YYYY).

    Mutates the record so the rendered date and the artifact name derived
    from it later agree.

    Returns:
        The record's (possibly defaulted) date
    """
    if is_missing(record.date_ordered):
        record.date_ordered = today_numeric()
    return record.date_ordered


def build_placeholder_values(record: DocumentRecord) -> Dict[str, str]:
    """Map each placeholder name to its formatted LaTeX fragment."""
    return {
        "title": escape_latex(record.title),
        "date_ordered": escape_latex(record.date_ordered),
        "title_scope_items": format_scope_items(record.title_scope_items),
        "er_items": format_scope_items(record.er_items),
        "include_property_profile": escape_latex(record.include_property_profile),
        "delivery_instructions": format_multiline(record.delivery_instructions),
        "delivery_email": escape_latex(record.delivery_email),
        "parcels": format_parcel_table(record.parcels),
    }


class OrderFormRenderer:
    """Loads the order form template and renders records into LaTeX source."""

    def __init__(self, template_path: Optional[Path] = None):
        """
        Args:
            template_path: Order form template. Defaults to ORDER_TEMPLATE_PATH
                           (env override, else the bundled template.tex)
        """
        self.template_path = Path(template_path or ORDER_TEMPLATE_PATH)

        self.env = Environment(
            loader=FileSystemLoader(str(self.template_path.parent)),
            undefined=StrictUndefined,
            # {{name}} tokens are rewritten to <<<name>>> before parsing, so
            # LaTeX brace groups never reach the Jinja lexer
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def load_template(self) -> Template:
        """
        Load, parse and check the template.

        Raises:
            TemplateLoadError: Template missing, unreadable or not parseable
            TemplateRenderError: A placeholder is repeated or unknown
        """
        try:
            source, _, _ = self.env.loader.get_source(self.env, self.template_path.name)
            self._check_unclosed(source)
            source = PLACEHOLDER_TOKEN.sub(r"<<<\1>>>", source)
            ast = self.env.parse(source, name=self.template_path.name)
        except TemplateNotFound as e:
            raise TemplateLoadError(
                "Order form template not found", template_path=self.template_path, original_error=e
            ) from e
        except TemplateSyntaxError as e:
            raise TemplateLoadError(
                f"Order form template has invalid placeholder syntax (line {e.lineno})",
                template_path=self.template_path,
                original_error=e,
            ) from e
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateLoadError(
                "Order form template could not be read",
                template_path=self.template_path,
                original_error=e,
            ) from e

        self._check_placeholders(ast)
        return self.env.from_string(source)

    def _check_unclosed(self, source: str) -> None:
        match = UNCLOSED_PLACEHOLDER.search(source)
        if match:
            line = source.count("\n", 0, match.start()) + 1
            raise TemplateLoadError(
                f"Order form template has an unclosed placeholder '{match.group(1)}' (line {line})",
                template_path=self.template_path,
            )

    def _check_placeholders(self, ast: nodes.Template) -> None:
        references = Counter(
            node.name for node in ast.find_all(nodes.Name) if node.ctx == "load"
        )

        unknown = sorted(name for name in references if name not in PLACEHOLDERS)
        if unknown:
            raise TemplateRenderError(
                "Template references unknown placeholders",
                placeholders=unknown,
                template_path=self.template_path,
            )

        repeated = sorted(name for name, count in references.items() if count > 1)
        if repeated:
            raise TemplateRenderError(
                "Template references placeholders more than once",
                placeholders=repeated,
                template_path=self.template_path,
            )

        unused = [name for name in PLACEHOLDERS if name not in references]
        if unused:
            _log_warning(f"Template does not reference: {', '.join(unused)}")

    def render(self, record: DocumentRecord) -> str:
        """
        Render a record into complete LaTeX source.

        Args:
            record: Order to render (date_ordered is defaulted in place)

        Returns:
            LaTeX document source

        Raises:
            TemplateLoadError: See load_template()
            TemplateRenderError: See load_template(), or substitution failed
        """
        _log_info(f"Rendering order form: {record.title}")
        template = self.load_template()

        apply_default_date(record)
        values = build_placeholder_values(record)

        try:
            rendered = template.render(**values)
        except JinjaUndefinedError as e:
            raise TemplateRenderError(
                "Placeholder substitution failed",
                template_path=self.template_path,
                original_error=e,
            ) from e

        _log_debug(f"Rendered {len(rendered)} characters from {self.template_path}")
        return rendered
