"""Docset path discovery.

A docset named ``Redis`` may be installed in one of three layouts under the
docsets root:

    <root>/Redis.docset                 (flat, the default)
    <root>/Redis/Redis.docset           (nested, same name)
    <root>/Redis/<anything>.docset      (nested, first .docset subdirectory)

Resolution tries each layout in that order and returns the first that exists.
"""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from .errors import DocsetNotFound

logger = logging.getLogger(__name__)

DOCSET_EXTENSION = ".docset"

# Relative to the <name>.docset directory
RESOURCES_PATH = Path("Contents") / "Resources"
DATABASE_PATH = RESOURCES_PATH / "docSet.dsidx"
DOCUMENTS_PATH = RESOURCES_PATH / "Documents"


def _flat_layout(root: Path, name: str) -> Iterator[Path]:
    yield root / f"{name}{DOCSET_EXTENSION}"


def _nested_layout(root: Path, name: str) -> Iterator[Path]:
    yield root / name / f"{name}{DOCSET_EXTENSION}"


def _nested_any_layout(root: Path, name: str) -> Iterator[Path]:
    parent = root / name
    if not parent.is_dir():
        return
    for child in sorted(parent.iterdir()):
        if child.is_dir() and child.name.endswith(DOCSET_EXTENSION):
            yield child


# Tried in order; the first existing candidate wins
LAYOUTS: list[Callable[[Path, str], Iterator[Path]]] = [
    _flat_layout,
    _nested_layout,
    _nested_any_layout,
]


def resolve_docset_path(root: Path | str, name: str) -> Path:
    """Find the ``.docset`` directory for a docset name.

    Args:
        root: Docsets root directory
        name: Docset name (e.g. "Redis", "Python_3")

    Returns:
        Path to the existing ``<name>.docset`` directory

    Raises:
        DocsetNotFound: If no layout matches
    """
    root = Path(root).expanduser()
    for layout in LAYOUTS:
        for candidate in layout(root, name):
            if candidate.is_dir():
                return candidate
    raise DocsetNotFound(name, root)


def database_path(root: Path | str, name: str) -> Path:
    """Path to the index database of an installed docset."""
    return resolve_docset_path(root, name) / DATABASE_PATH


def documents_path(root: Path | str, name: str) -> Path:
    """Path to the documents tree of an installed docset.

    Falls back to the flat layout when the docset is not on disk, so that
    URLs can still be built deterministically.
    """
    try:
        docset_dir = resolve_docset_path(root, name)
    except DocsetNotFound:
        docset_dir = Path(root).expanduser() / f"{name}{DOCSET_EXTENSION}"
    return docset_dir / DOCUMENTS_PATH


def installed_docsets(root: Path | str) -> list[str]:
    """List names of the docsets installed under root, sorted."""
    root = Path(root).expanduser()
    if not root.is_dir():
        logger.debug(f"Docsets root does not exist: {root}")
        return []

    names = set()
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        if entry.name.endswith(DOCSET_EXTENSION):
            names.add(entry.name[: -len(DOCSET_EXTENSION)])
        elif any(
            child.is_dir() and child.name.endswith(DOCSET_EXTENSION)
            for child in entry.iterdir()
        ):
            names.add(entry.name)
    return sorted(names, key=str.lower)
