"""
Candidate formatting for search results.

A template string controls how each result is displayed:

    %d  docset name
    %n  symbol name
    %t  symbol type
    %f  file stem (last path segment, without .html/.htm or #fragment)
    %%  a literal percent sign

Any other %-sequence is left as written.
"""

import re

from .models import Candidate, Row

DEFAULT_TEMPLATE = "%d %n"

PLACEHOLDER_PATTERN = re.compile(r"%(.)", re.DOTALL)

# Dash embeds entry markers such as <dash_entry_name=foo> in stored paths
DASH_ENTRY_PATTERN = re.compile(r"<dash_entry_[^>]*>")

HTML_SUFFIX_PATTERN = re.compile(r"\.html?$", re.IGNORECASE)


def strip_dash_entries(path: str) -> str:
    """Remove embedded <dash_entry_...> markers from a stored path."""
    return DASH_ENTRY_PATTERN.sub("", path)


def file_stem(path: str) -> str:
    """
    Derive a short display name from a stored document path.

    Examples:
        "commands/blpop.html" -> "blpop"
        "library/os.html#os.walk" -> "os"
    """
    path = strip_dash_entries(path).split("#", 1)[0]
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return HTML_SUFFIX_PATTERN.sub("", segment)


def format_candidate(template: str, docset_name: str, row: Row) -> str:
    """
    Render a display string for one result row.

    Args:
        template: Template with %d, %n, %t, %f placeholders
        docset_name: Name of the docset that produced the row
        row: Result row

    Returns:
        Display string
    """
    values = {
        "d": docset_name,
        "n": row.symbol_name,
        "t": row.symbol_type,
        "%": "%",
    }

    def replace(match: re.Match) -> str:
        key = match.group(1)
        if key == "f":
            return file_stem(row.file_path)
        return values.get(key, match.group(0))

    return PLACEHOLDER_PATTERN.sub(replace, template)


def make_candidate(template: str, docset_name: str, row: Row) -> Candidate:
    """Format a row and keep the reference back to its docset."""
    return Candidate(
        display=format_candidate(template, docset_name, row),
        docset_name=docset_name,
        row=row,
    )
