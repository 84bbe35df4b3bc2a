"""
Schema detection for docset index databases.

Dash docsets ship one of two index layouts:
- LEGACY_INDEX: a flat ``searchIndex(type, name, path)`` table
- OBJECT_INDEX: the Core Data layout (ZTOKEN, ZTOKENTYPE,
  ZTOKENMETAINFORMATION, ZFILEPATH) which also stores anchors
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .errors import UnreadableDatabase
from .models import Dialect

logger = logging.getLogger(__name__)

LEGACY_INDEX_TABLE = "searchIndex"


@contextmanager
def connect_readonly(db_path: Path | str) -> Iterator[sqlite3.Connection]:
    """Context manager for read-only database connections.

    Raises:
        UnreadableDatabase: If the file does not exist or cannot be opened
    """
    db_path = Path(db_path).expanduser()
    if not db_path.is_file():
        raise UnreadableDatabase(db_path, "file does not exist")

    uri = f"{db_path.resolve().as_uri()}?mode=ro"
    try:
        conn = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as e:
        raise UnreadableDatabase(db_path, str(e)) from e
    try:
        yield conn
    finally:
        conn.close()


def detect_dialect(db_path: Path | str) -> Dialect:
    """Classify a docset database into one of the supported dialects.

    Args:
        db_path: Path to the docset's docSet.dsidx

    Returns:
        Dialect.LEGACY_INDEX if a searchIndex table exists, else
        Dialect.OBJECT_INDEX

    Raises:
        UnreadableDatabase: If the database is missing or unreadable
    """
    with connect_readonly(db_path) as conn:
        try:
            row = conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
                (LEGACY_INDEX_TABLE,),
            ).fetchone()
        except sqlite3.Error as e:
            raise UnreadableDatabase(db_path, str(e)) from e

    dialect = Dialect.LEGACY_INDEX if row else Dialect.OBJECT_INDEX
    logger.debug(f"Detected {dialect.name} schema in {db_path}")
    return dialect
