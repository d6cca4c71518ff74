"""
LaTeX escaping for order form values.

Every value substituted into the order form template passes through
escape_latex() so user-entered text can never inject markup.
"""

import re
from typing import Any, Dict

# Rendered wherever a field has no data
NO_DATA = "—"

# Substitution order matters when reasoning about the output: the backslash
# replacement introduces braces that must never be escaped again. The single
# regex pass below guarantees that.
LATEX_SPECIAL_CHARS: Dict[str, str] = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "_": r"\_",
    "$": r"\$",
    "#": r"\#",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "\n": r"\newline ",
}

_LATEX_SPECIAL_PATTERN = re.compile("|".join(re.escape(char) for char in LATEX_SPECIAL_CHARS))


def is_missing(value: Any) -> bool:
    """True for values that render as NO_DATA (None, empty string, the sentinel itself)."""
    return value is None or value == "" or value == NO_DATA


def escape_latex(text: Any) -> str:
    """
    Escape LaTeX special characters.

    Args:
        text: Value to escape. None and "" map to NO_DATA. Booleans render
              as "Yes"/"No", other scalars are converted with str().

    Returns:
        Markup-safe string. Never raises.

    Examples:
        >>> escape_latex("50% of A&B")
        '50\\\\% of A\\\\&B'
        >>> escape_latex(None)
        '—'
    """
    if isinstance(text, bool):
        text = "Yes" if text else "No"
    if text is None or text == "":
        return NO_DATA

    text = str(text).replace("\r\n", "\n")
    return _LATEX_SPECIAL_PATTERN.sub(lambda match: LATEX_SPECIAL_CHARS[match.group(0)], text)
