"""Query execution against docset index databases.

Two engines share one interface:

- SqliteExecutor (default): Python's sqlite3 binding. Rows come back
  structured, so symbol names containing the field delimiter are safe.
- CommandLineExecutor: runs the external ``sqlite3`` program in list mode
  and parses its ``|``-delimited output. The list format has no escaping:
  a value containing ``|`` produces surplus fields, which are joined back
  into the last column, and a value containing a newline splits the record.
  Records with too few fields are dropped.

Neither engine aborts a search on a failed query: the diagnostic goes to the
debug sink and whatever rows were read are returned.
"""

import logging
import os
import sqlite3
import subprocess
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .errors import EngineUnavailable, UnreadableDatabase
from .models import Dialect, Row
from .schema import connect_readonly

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "|"
RECORD_SEPARATOR = "\n"

DebugSink = Callable[[str], None]


def _row_from_fields(fields: list[Any], dialect: Dialect) -> Row:
    values = ["" if value is None else str(value) for value in fields]
    anchor = None
    if dialect is Dialect.OBJECT_INDEX:
        anchor = values[3] or None
    return Row(
        symbol_type=values[0],
        symbol_name=values[1],
        file_path=values[2],
        anchor=anchor,
    )


def parse_rows(output: str, dialect: Dialect) -> list[Row]:
    """Parse list-mode query output into rows.

    Args:
        output: Raw stdout of the query engine
        dialect: Dialect the query was composed for (fixes the column count)

    Returns:
        Parsed rows; malformed records are skipped
    """
    expected = dialect.column_count
    rows = []
    for line in output.split(RECORD_SEPARATOR):
        line = line.rstrip("\r")
        if not line:
            continue
        fields = line.split(FIELD_SEPARATOR)
        if len(fields) < expected:
            logger.debug(f"Dropping malformed row ({len(fields)} fields): {line!r}")
            continue
        if len(fields) > expected:
            fields = fields[: expected - 1] + [
                FIELD_SEPARATOR.join(fields[expected - 1 :])
            ]
        rows.append(_row_from_fields(fields, dialect))
    return rows


class QueryExecutor(ABC):
    """Runs a composed query against one docset database."""

    def __init__(self, debug_sink: DebugSink | None = None):
        """
        Args:
            debug_sink: Receives diagnostics from failed queries.
                        Defaults to logging at WARNING level.
        """
        self.debug_sink = debug_sink

    def report(self, message: str) -> None:
        """Send a diagnostic to the debug sink."""
        if self.debug_sink is not None:
            self.debug_sink(message)
        else:
            logger.warning(message)

    @abstractmethod
    def execute(self, db_path: Path | str, query: str, dialect: Dialect) -> list[Row]:
        """
        Execute query against the database at db_path.

        Returns:
            Rows in the order the engine produced them

        Raises:
            UnreadableDatabase: If the database is missing or cannot be opened
            EngineUnavailable: If the query engine cannot be started
        """
        pass


class SqliteExecutor(QueryExecutor):
    """Executor backed by the sqlite3 module."""

    def execute(self, db_path: Path | str, query: str, dialect: Dialect) -> list[Row]:
        with connect_readonly(db_path) as conn:
            try:
                records = conn.execute(query).fetchall()
            except sqlite3.Error as e:
                self.report(f"Query failed for {db_path}: {e}")
                return []

        rows = []
        for record in records:
            if len(record) < dialect.column_count:
                logger.debug(f"Dropping malformed row from {db_path}: {record!r}")
                continue
            rows.append(_row_from_fields(list(record), dialect))
        return rows


class CommandLineExecutor(QueryExecutor):
    """Executor that shells out to the sqlite3 command-line program."""

    def __init__(
        self,
        binary: str = "sqlite3",
        debug: bool = False,
        debug_sink: DebugSink | None = None,
    ):
        """
        Args:
            binary: Name or path of the sqlite3 program
            debug: Capture stderr to a temporary file and report it on failure
            debug_sink: Receives diagnostics from failed queries
        """
        super().__init__(debug_sink)
        self.binary = binary
        self.debug = debug

    def command(self, db_path: Path | str, query: str) -> list[str]:
        """Build the argument vector for one query."""
        return [
            self.binary,
            "-readonly",
            "-list",
            "-noheader",
            "-init",
            os.devnull,
            str(db_path),
            query,
        ]

    def execute(self, db_path: Path | str, query: str, dialect: Dialect) -> list[Row]:
        db_path = Path(db_path).expanduser()
        if not db_path.is_file():
            raise UnreadableDatabase(db_path, "file does not exist")

        with tempfile.TemporaryFile(mode="w+", encoding="utf-8") as stderr_file:
            try:
                result = subprocess.run(
                    self.command(db_path, query),
                    stdout=subprocess.PIPE,
                    stderr=stderr_file if self.debug else subprocess.DEVNULL,
                    encoding="utf-8",
                    errors="replace",
                )
            except OSError as e:
                raise EngineUnavailable(
                    f"Cannot start query engine {self.binary!r}: {e}"
                ) from e

            if result.returncode != 0:
                message = f"{self.binary} exited with {result.returncode} for {db_path}"
                if self.debug:
                    stderr_file.seek(0)
                    diagnostic = stderr_file.read().strip()
                    if diagnostic:
                        message += f": {diagnostic}"
                self.report(message)

        return parse_rows(result.stdout or "", dialect)


def create_executor(
    search_config: dict[str, Any],
    debug: bool = False,
    debug_sink: DebugSink | None = None,
) -> QueryExecutor:
    """
    Build the executor selected by the ``search`` config section.

    Args:
        search_config: The ``search`` section of the loaded configuration
        debug: Enable stderr capture for the command-line engine
        debug_sink: Receives diagnostics from failed queries

    Returns:
        A QueryExecutor instance
    """
    engine = search_config.get("engine", "sqlite")
    if engine == "cli":
        return CommandLineExecutor(
            binary=search_config.get("sqlite_binary", "sqlite3"),
            debug=debug,
            debug_sink=debug_sink,
        )
    if engine != "sqlite":
        logger.warning(f"Unknown query engine {engine!r}, using sqlite")
    return SqliteExecutor(debug_sink=debug_sink)
