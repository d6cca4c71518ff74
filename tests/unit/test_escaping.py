"""Unit tests for LaTeX escaping."""

import re

import pytest

from titleorder.contexts.templating.escaping import LATEX_SPECIAL_CHARS, NO_DATA, escape_latex

_UNESCAPE = {escaped: char for char, escaped in LATEX_SPECIAL_CHARS.items()}
_UNESCAPE_PATTERN = re.compile(
    "|".join(re.escape(escaped) for escaped in sorted(_UNESCAPE, key=len, reverse=True))
)


def unescape_latex(latex: str) -> str:
    """Reverse escape_latex() for round-trip checks."""
    return _UNESCAPE_PATTERN.sub(lambda match: _UNESCAPE[match.group(0)], latex)


def strip_escapes(latex: str) -> str:
    """Remove every escape sequence, leaving only literal text."""
    return _UNESCAPE_PATTERN.sub("", latex)


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, ""])
def test_missing_text_renders_sentinel(value):
    assert escape_latex(value) == NO_DATA


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("A&B", r"A\&B"),
        ("50%", r"50\%"),
        ("lot_7", r"lot\_7"),
        ("$100", r"\$100"),
        ("#42", r"\#42"),
        ("{x}", r"\{x\}"),
        ("~home", r"\textasciitilde{}home"),
        ("x^2", r"x\textasciicircum{}2"),
        ("C:\\dir", r"C:\textbackslash{}dir"),
        ("line1\nline2", r"line1\newline line2"),
    ],
)
def test_escapes_each_special_character(text, expected):
    assert escape_latex(text) == expected


@pytest.mark.unit
def test_backslash_braces_are_not_escaped_again():
    """The braces of \\textbackslash{} must survive brace escaping."""
    assert escape_latex("\\") == r"\textbackslash{}"
    assert escape_latex("\\{") == r"\textbackslash{}\{"


@pytest.mark.unit
def test_adjacent_specials_escape_independently():
    assert escape_latex("\\&") == r"\textbackslash{}\&"
    assert escape_latex("&&") == r"\&\&"
    assert escape_latex("%_$") == r"\%\_\$"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        "Smith Estate #42",
        "Lot 5 & 6 (50% interest)",
        "\\\\server\\share\\{file}_~v^2$",
        "multi\nline & text\n",
        "&%_$#{}~^\\",
    ],
)
def test_round_trip(text):
    escaped = escape_latex(text)
    assert unescape_latex(escaped) == text


@pytest.mark.unit
@pytest.mark.parametrize("char", [c for c in LATEX_SPECIAL_CHARS if c != "\n"])
def test_no_unescaped_special_characters_remain(char):
    escaped = escape_latex(f"before {char}{char} after")
    assert char not in strip_escapes(escaped)


@pytest.mark.unit
def test_windows_line_endings():
    assert escape_latex("a\r\nb") == r"a\newline b"


@pytest.mark.unit
def test_booleans_and_numbers():
    assert escape_latex(True) == "Yes"
    assert escape_latex(False) == "No"
    assert escape_latex(0) == "0"
    assert escape_latex(12.5) == "12.5"
