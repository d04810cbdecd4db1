"""Utilities for preparing HTML snippets before rendering in Streamlit."""
from html import escape
from textwrap import dedent
from typing import Iterable

BRAND_GREEN = "#bcd630"
BRAND_DARK_GRAY = "#4d4d4d"


def html_block(template: str) -> str:
    """
    Normalize multi-line HTML so Streamlit doesn't treat it as Markdown code.

    Lines with 4+ leading spaces would render as code blocks, so every line
    is stripped of leading whitespace.
    """
    lines = dedent(template).splitlines()
    return "\n".join(line.lstrip() for line in lines).strip()


def badge_list(values: Iterable[str], muted: bool = False) -> str:
    """Inline chips for interest tags; values are HTML-escaped."""
    background = "rgba(77, 77, 77, 0.12)" if muted else "rgba(188, 214, 48, 0.2)"
    return "".join(
        f"<span class='interest-badge' style='background: {background}; color: {BRAND_DARK_GRAY};'>"
        f"{escape(value)}</span>"
        for value in values
        if value
    )
