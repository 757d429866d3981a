"""
Escaping helpers for resume data.

Each escaper is a per-character substitution table applied to every string in
the resume before it reaches a template of the matching type.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, Optional

# Backslash comes first so later replacements are not escaped twice
LATEX_REPLACEMENTS = (
    ("\\", r"\textbackslash{}"),
    ("&", r"\&"),
    ("%", r"\%"),
    ("$", r"\$"),
    ("#", r"\#"),
    ("_", r"\_"),
    ("{", r"\{"),
    ("}", r"\}"),
    ("~", r"\textasciitilde{}"),
    ("^", r"\textasciicircum{}"),
)

HTML_REPLACEMENTS = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

TYPST_SPECIAL_CHARACTERS = "\\*_`#[]<>@$"


def _escape_with_table(text: str, table) -> str:
    # One pass per character so replacement output is never re-escaped
    lookup = dict(table)
    return "".join(lookup.get(char, char) for char in text)


def escape_latex(text: Optional[str]) -> str:
    """Escape LaTeX special characters: & % $ # _ { } ~ ^ \\"""
    if not text:
        return ""
    return _escape_with_table(text, LATEX_REPLACEMENTS)


def escape_html(text: Optional[str]) -> str:
    """Escape HTML entities."""
    if not text:
        return ""
    return _escape_with_table(text, HTML_REPLACEMENTS)


def escape_typst(text: Optional[str]) -> str:
    """Escape Typst markup characters: * _ ` # [ ] < > @ $ \\"""
    if not text:
        return ""
    return "".join(f"\\{char}" if char in TYPST_SPECIAL_CHARACTERS else char for char in text)


ESCAPERS = {
    "latex": escape_latex,
    "typst": escape_typst,
    "html": escape_html,
}


def deep_escape(data: Any, escape_fn: Callable[[str], str]) -> Any:
    """Apply escape_fn to every string nested in mappings and lists."""
    if isinstance(data, str):
        return escape_fn(data)
    if isinstance(data, list):
        return [deep_escape(item, escape_fn) for item in data]
    if isinstance(data, dict):
        return {key: deep_escape(value, escape_fn) for key, value in data.items()}
    return data


def prepare_resume_data(data: dict, template_type: str) -> dict:
    """
    Escape resume data for a template type.

    Markdown and unknown types are returned unchanged.
    """
    escape_fn = ESCAPERS.get(template_type)
    if escape_fn is None:
        return data
    return deep_escape(data, escape_fn)


def format_date(date: Any) -> str:
    """
    Format an ISO date (or datetime) as "Month YYYY".

    Examples:
        format_date("2023-06-01")  # "June 2023"
        format_date("2023-06")     # "June 2023"
    """
    if not date:
        return ""
    if isinstance(date, datetime):
        return date.strftime("%B %Y")

    for pattern in ("%Y-%m-%d", "%Y-%m", "%Y"):
        try:
            return datetime.strptime(str(date), pattern).strftime("%B %Y")
        except ValueError:
            continue
    # Unparsable dates are shown as written
    return str(date)


def join_array(items: Optional[Iterable[Any]], separator: str = ", ") -> str:
    """Join items with a separator; anything that is not a list yields an empty string."""
    if not items or not isinstance(items, (list, tuple)):
        return ""
    return separator.join(str(item) for item in items)
