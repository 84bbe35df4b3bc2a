"""
Connection registry for installed docsets.

Holds one Connection per docset name, created lazily the first time the name
appears in either active set. Schema detection runs once per name per
registry lifetime; reset() drops every entry so the next ensure_* call
detects again.

Active sets:
- common: docsets active by default (configured or persisted)
- contextual: docsets active for the current working context
  (e.g. chosen by file type)

Both sets share one name namespace. available() lists contextual
connections first, then common ones, each name once.
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from .errors import DocdashError
from .models import Connection, Dialect
from .paths import database_path
from .schema import detect_dialect

logger = logging.getLogger(__name__)


def _unique(names: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for name in names:
        seen.setdefault(name, None)
    return list(seen)


class ConnectionRegistry:
    """Cache of resolved docset connections plus the two active sets."""

    def __init__(
        self,
        docsets_path: Path | str,
        detector: Callable[[Path], Dialect] = detect_dialect,
    ):
        """
        Args:
            docsets_path: Docsets root directory
            detector: Schema detector, injectable for tests
        """
        self.docsets_path = Path(docsets_path).expanduser()
        self._detect = detector
        self._connections: dict[str, Connection] = {}
        self._common: list[str] = []
        self._contextual: list[str] = []

    @property
    def common(self) -> list[str]:
        return list(self._common)

    @property
    def contextual(self) -> list[str]:
        return list(self._contextual)

    def __contains__(self, name: object) -> bool:
        return name in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def get(self, name: str) -> Connection | None:
        return self._connections.get(name)

    def _connect(self, name: str) -> Connection:
        db_path = database_path(self.docsets_path, name)
        dialect = self._detect(db_path)
        connection = Connection(name=name, db_path=db_path, dialect=dialect)
        self._connections[name] = connection
        logger.debug(f"Registered docset {name} ({dialect.name}) at {db_path}")
        return connection

    def _ensure(self, names: list[str], strict: bool) -> list[str]:
        """Register missing names; return the names that are registered."""
        registered = []
        for name in names:
            if name not in self._connections:
                try:
                    self._connect(name)
                except DocdashError as e:
                    if strict:
                        raise
                    logger.warning(f"Skipping docset {name}: {e}")
                    continue
            registered.append(name)
        return registered

    def ensure_common(self, names: Iterable[str], strict: bool = True) -> None:
        """Set the common active set and register any new names.

        Raises:
            DocsetNotFound: If strict and a name cannot be resolved
            UnreadableDatabase: If strict and a database cannot be read
        """
        self._common = _unique(names)
        self._ensure(self._common, strict)

    def ensure_contextual(self, names: Iterable[str], strict: bool = True) -> None:
        """Set the contextual active set and register any new names.

        Raises:
            DocsetNotFound: If strict and a name cannot be resolved
            UnreadableDatabase: If strict and a database cannot be read
        """
        self._contextual = _unique(names)
        self._ensure(self._contextual, strict)

    def activate(self, name: str) -> Connection:
        """Add a docset to the common set, re-detecting its schema.

        Any existing entry for the name is superseded, which picks up a
        docset that was reinstalled or updated on disk.
        """
        connection = self._connect(name)
        if name not in self._common:
            self._common.append(name)
        logger.info(f"Activated docset {name}")
        return connection

    def deactivate(self, name: str) -> bool:
        """Remove a docset from the common set. Returns False if it was not active."""
        if name not in self._common:
            return False
        self._common.remove(name)
        logger.info(f"Deactivated docset {name}")
        return True

    def available(self) -> list[Connection]:
        """Connections for the active sets, contextual first."""
        ordered = _unique(self._contextual + self._common)
        return [self._connections[name] for name in ordered if name in self._connections]

    def reset(self) -> None:
        """Drop every cached connection; active sets are kept."""
        logger.debug(f"Resetting {len(self._connections)} docset connections")
        self._connections.clear()
