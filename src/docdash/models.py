"""
Data classes shared by the query core.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import UnsupportedDialect


class Dialect(str, Enum):
    """On-disk schema shape of a docset index database."""

    LEGACY_INDEX = "DASH"  # flat searchIndex table
    OBJECT_INDEX = "ZDASH"  # Core Data ZTOKEN tables, carries anchors

    @classmethod
    def from_tag(cls, tag: str) -> "Dialect":
        """Map a stored tag back to a dialect, rejecting unknown tags."""
        try:
            return cls(tag)
        except ValueError:
            raise UnsupportedDialect(f"Unknown schema dialect: {tag!r}") from None

    @property
    def column_count(self) -> int:
        """Number of columns a query against this dialect selects."""
        if self is Dialect.OBJECT_INDEX:
            return 4
        return 3


@dataclass(frozen=True)
class Connection:
    """Resolved, reusable handle on one installed docset."""

    name: str
    db_path: Path
    dialect: Dialect


@dataclass(frozen=True)
class Row:
    """One symbol returned by a docset query."""

    symbol_type: str
    symbol_name: str
    file_path: str
    anchor: str | None = None


@dataclass(frozen=True)
class Candidate:
    """A formatted, selectable search result."""

    display: str
    docset_name: str
    row: Row

    def __str__(self) -> str:
        return self.display
