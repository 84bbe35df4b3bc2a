"""Docset-name prefix narrowing.

Typing a docset's name followed by a space targets that docset alone:
``"redis blpop"`` searches only Redis for ``"blpop"``. A query whose first
word happens to equal a docset name is captured the same way.
"""

from collections.abc import Sequence
from typing import NamedTuple

from .models import Connection


class Narrowed(NamedTuple):
    """Connections to query and the pattern to query them with."""

    connections: list[Connection]
    pattern: str


def narrow(pattern: str, connections: Sequence[Connection]) -> Narrowed:
    """Restrict a search to one docset when the pattern names it.

    Args:
        pattern: Raw search pattern
        connections: Available connections, in priority order

    Returns:
        Narrowed with the single matching connection and the stripped
        pattern, or all connections and the unchanged pattern
    """
    for connection in connections:
        rest = _strip_folded_prefix(pattern, connection.name.casefold() + " ")
        if rest is not None:
            return Narrowed([connection], rest)
    return Narrowed(list(connections), pattern)


def _strip_folded_prefix(pattern: str, folded_prefix: str) -> str | None:
    # Casefolding can change length ("ß" -> "ss"), so count original characters
    folded = ""
    for index, char in enumerate(pattern):
        folded += char.casefold()
        if folded == folded_prefix:
            return pattern[index + 1:]
        if not folded_prefix.startswith(folded):
            return None
    return None
