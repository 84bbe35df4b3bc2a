"""Shared pytest fixtures for docdash tests.

Builds real on-disk docsets in tmp_path for both index dialects:
- legacy: flat searchIndex table
- object: Core Data ZTOKEN tables with anchors
"""

import sqlite3
from collections.abc import Callable
from pathlib import Path

import pytest

from docdash.paths import DATABASE_PATH, DOCUMENTS_PATH

REDIS_ENTRIES = [
    ("BLPOP", "Command", "commands/blpop.html"),
    ("BRPOP", "Command", "commands/brpop.html"),
    ("LPOP", "Command", "commands/lpop.html"),
    ("BLMPOP", "Command", "commands/blmpop.html"),
    ("Problems", "Guide", "topics/problems.html"),
    ("GET", "Command", "commands/get.html"),
]

GO_ENTRIES = [
    ("Println", "Function", "fmt/index.html", "Println"),
    ("Printf", "Function", "fmt/index.html", "Printf"),
    ("Reader", "Type", "io/index.html", "Reader"),
    ("Pop", "Method", "container/heap/index.html", None),
]


# =============================================================================
# Docset Builders
# =============================================================================


def _docset_dir(root: Path, name: str, layout: str) -> Path:
    if layout == "flat":
        return root / f"{name}.docset"
    if layout == "nested":
        return root / name / f"{name}.docset"
    if layout == "nested-any":
        return root / name / f"{name}-1.0.docset"
    raise ValueError(f"Unknown layout: {layout}")


def build_legacy_docset(
    root: Path,
    name: str,
    entries: list[tuple[str, str, str]],
    layout: str = "flat",
) -> Path:
    """Create a docset with a searchIndex table. Returns the .docset dir."""
    docset = _docset_dir(root, name, layout)
    (docset / DOCUMENTS_PATH).mkdir(parents=True)

    conn = sqlite3.connect(docset / DATABASE_PATH)
    conn.execute(
        "CREATE TABLE searchIndex(id INTEGER PRIMARY KEY, name TEXT, type TEXT, path TEXT)"
    )
    conn.executemany(
        "INSERT INTO searchIndex(name, type, path) VALUES (?, ?, ?)", entries
    )
    conn.commit()
    conn.close()
    return docset


def build_object_docset(
    root: Path,
    name: str,
    entries: list[tuple[str, str, str, str | None]],
    layout: str = "flat",
) -> Path:
    """Create a docset with the Core Data ZTOKEN layout. Returns the .docset dir."""
    docset = _docset_dir(root, name, layout)
    (docset / DOCUMENTS_PATH).mkdir(parents=True)

    conn = sqlite3.connect(docset / DATABASE_PATH)
    conn.executescript(
        """
        CREATE TABLE ZTOKENTYPE (Z_PK INTEGER PRIMARY KEY, ZTYPENAME VARCHAR);
        CREATE TABLE ZFILEPATH (Z_PK INTEGER PRIMARY KEY, ZPATH VARCHAR);
        CREATE TABLE ZTOKENMETAINFORMATION (
            Z_PK INTEGER PRIMARY KEY, ZFILE INTEGER, ZANCHOR VARCHAR
        );
        CREATE TABLE ZTOKEN (
            Z_PK INTEGER PRIMARY KEY, ZTOKENNAME VARCHAR,
            ZTOKENTYPE INTEGER, ZMETAINFORMATION INTEGER
        );
        """
    )
    types: dict[str, int] = {}
    paths: dict[str, int] = {}
    for pk, (token, token_type, path, anchor) in enumerate(entries, start=1):
        type_pk = types.setdefault(token_type, len(types) + 1)
        path_pk = paths.setdefault(path, len(paths) + 1)
        conn.execute(
            "INSERT OR IGNORE INTO ZTOKENTYPE VALUES (?, ?)", (type_pk, token_type)
        )
        conn.execute("INSERT OR IGNORE INTO ZFILEPATH VALUES (?, ?)", (path_pk, path))
        conn.execute(
            "INSERT INTO ZTOKENMETAINFORMATION VALUES (?, ?, ?)", (pk, path_pk, anchor)
        )
        conn.execute(
            "INSERT INTO ZTOKEN VALUES (?, ?, ?, ?)", (pk, token, type_pk, pk)
        )
    conn.commit()
    conn.close()
    return docset


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def docsets_root(tmp_path: Path) -> Path:
    """Empty docsets root directory."""
    root = tmp_path / "docsets"
    root.mkdir()
    return root


@pytest.fixture
def redis_docset(docsets_root: Path) -> Path:
    """Legacy-index Redis docset in the flat layout."""
    return build_legacy_docset(docsets_root, "Redis", REDIS_ENTRIES)


@pytest.fixture
def go_docset(docsets_root: Path) -> Path:
    """Object-index Go docset in the flat layout."""
    return build_object_docset(docsets_root, "Go", GO_ENTRIES)


@pytest.fixture
def counting_detector() -> Callable:
    """Schema detector that records every database it inspects."""
    from docdash.schema import detect_dialect

    def detector(db_path):
        detector.calls.append(Path(db_path))
        return detect_dialect(db_path)

    detector.calls = []
    return detector


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def docdash_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated DOCDASH_HOME with no config file."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("DOCDASH_HOME", str(home))
    monkeypatch.delenv("DOCDASH_CONFIG_PATH", raising=False)
    monkeypatch.delenv("DOCDASH_DOCSETS_PATH", raising=False)
    monkeypatch.delenv("DOCDASH_DEBUG", raising=False)
    return home
