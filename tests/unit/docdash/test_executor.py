"""Tests for query execution and output parsing."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from docdash.errors import EngineUnavailable, UnreadableDatabase
from docdash.executor import (
    CommandLineExecutor,
    SqliteExecutor,
    create_executor,
    parse_rows,
)
from docdash.models import Dialect, Row
from docdash.paths import DATABASE_PATH
from docdash.query import compose_query


class TestParseRows:
    """Tests for parse_rows function."""

    def test_legacy_rows(self):
        """Each line is split on the field separator."""
        output = "Command|BLPOP|commands/blpop.html\nGuide|Problems|topics/problems.html\n"

        rows = parse_rows(output, Dialect.LEGACY_INDEX)

        assert rows == [
            Row("Command", "BLPOP", "commands/blpop.html"),
            Row("Guide", "Problems", "topics/problems.html"),
        ]

    def test_object_rows_carry_anchor(self):
        """Object-dialect rows keep the fourth column; empty means no anchor."""
        output = "Function|Printf|fmt/index.html|Printf\nMethod|Pop|heap.html|\n"

        rows = parse_rows(output, Dialect.OBJECT_INDEX)

        assert rows[0].anchor == "Printf"
        assert rows[1].anchor is None

    def test_malformed_row_dropped(self):
        """A short record is skipped without losing the rows after it."""
        output = (
            "Command|BLPOP|commands/blpop.html\n"
            "Command|BROKEN\n"
            "Command|LPOP|commands/lpop.html\n"
        )

        rows = parse_rows(output, Dialect.LEGACY_INDEX)

        assert [row.symbol_name for row in rows] == ["BLPOP", "LPOP"]

    def test_legacy_row_too_short_for_object_dialect(self):
        """Three fields are malformed when the dialect needs four."""
        assert parse_rows("Function|Printf|fmt.html\n", Dialect.OBJECT_INDEX) == []

    def test_delimiter_collision_joins_surplus(self):
        """Surplus fields are folded into the last column (known limitation)."""
        rows = parse_rows("Operator|a|b|ops.html\n", Dialect.LEGACY_INDEX)

        assert rows == [Row("Operator", "a", "b|ops.html")]

    def test_blank_and_crlf_lines(self):
        """Blank lines are ignored and trailing carriage returns stripped."""
        rows = parse_rows("\nCommand|GET|get.html\r\n\n", Dialect.LEGACY_INDEX)

        assert rows == [Row("Command", "GET", "get.html")]


class TestSqliteExecutor:
    """Tests for the sqlite3-module executor."""

    def test_legacy_query(self, redis_docset):
        """Rows come back structured and ordered."""
        executor = SqliteExecutor()
        query = compose_query(Dialect.LEGACY_INDEX, "pop")

        rows = executor.execute(redis_docset / DATABASE_PATH, query, Dialect.LEGACY_INDEX)

        assert [row.symbol_name for row in rows] == ["LPOP", "BLPOP", "BRPOP", "BLMPOP"]
        assert all(row.anchor is None for row in rows)

    def test_object_query(self, go_docset):
        """Object-dialect rows carry anchors; NULL anchors become None."""
        executor = SqliteExecutor()
        query = compose_query(Dialect.OBJECT_INDEX, "")

        rows = executor.execute(go_docset / DATABASE_PATH, query, Dialect.OBJECT_INDEX)

        assert rows[0] == Row("Method", "Pop", "container/heap/index.html", None)
        assert rows[1] == Row("Function", "Printf", "fmt/index.html", "Printf")

    def test_missing_database(self, tmp_path):
        """A missing database raises UnreadableDatabase."""
        with pytest.raises(UnreadableDatabase):
            SqliteExecutor().execute(tmp_path / "x.dsidx", "SELECT 1", Dialect.LEGACY_INDEX)

    def test_query_error_goes_to_debug_sink(self, go_docset):
        """A failing query reports to the sink and returns no rows."""
        messages = []
        executor = SqliteExecutor(debug_sink=messages.append)
        query = compose_query(Dialect.LEGACY_INDEX, "pop")  # wrong dialect

        rows = executor.execute(go_docset / DATABASE_PATH, query, Dialect.LEGACY_INDEX)

        assert rows == []
        assert len(messages) == 1
        assert "searchIndex" in messages[0]


class TestCommandLineExecutor:
    """Tests for the sqlite3-program executor (subprocess mocked)."""

    def test_command_line(self, redis_docset):
        """Queries run in list mode with no header and no init file."""
        executor = CommandLineExecutor(binary="sqlite3")
        command = executor.command(redis_docset / DATABASE_PATH, "SELECT 1")

        assert command[0] == "sqlite3"
        assert "-list" in command
        assert "-noheader" in command
        assert command[-2:] == [str(redis_docset / DATABASE_PATH), "SELECT 1"]

    def test_parses_stdout(self, redis_docset):
        """stdout is parsed into rows."""
        completed = MagicMock(returncode=0, stdout="Command|GET|commands/get.html\n")
        with patch("docdash.executor.subprocess.run", return_value=completed):
            rows = CommandLineExecutor().execute(
                redis_docset / DATABASE_PATH, "SELECT ...", Dialect.LEGACY_INDEX
            )

        assert rows == [Row("Command", "GET", "commands/get.html")]

    def test_engine_unavailable(self, redis_docset):
        """A program that cannot be started raises EngineUnavailable."""
        with patch("docdash.executor.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(EngineUnavailable):
                CommandLineExecutor(binary="no-such-sqlite").execute(
                    redis_docset / DATABASE_PATH, "SELECT 1", Dialect.LEGACY_INDEX
                )

    def test_nonzero_exit_keeps_partial_rows(self, redis_docset):
        """A failed run reports to the sink but still returns parsed rows."""
        messages = []
        completed = MagicMock(returncode=1, stdout="Command|GET|commands/get.html\n")
        with patch("docdash.executor.subprocess.run", return_value=completed):
            rows = CommandLineExecutor(debug_sink=messages.append).execute(
                redis_docset / DATABASE_PATH, "SELECT ...", Dialect.LEGACY_INDEX
            )

        assert len(rows) == 1
        assert "exited with 1" in messages[0]

    def test_debug_captures_stderr(self, redis_docset):
        """With debug on, stderr is written to a temp file and reported."""

        def fake_run(command, stdout, stderr, **kwargs):
            stderr.write("Error: no such table: searchIndex\n")
            stderr.flush()
            return MagicMock(returncode=1, stdout="")

        messages = []
        executor = CommandLineExecutor(debug=True, debug_sink=messages.append)
        with patch("docdash.executor.subprocess.run", side_effect=fake_run):
            rows = executor.execute(
                redis_docset / DATABASE_PATH, "SELECT ...", Dialect.LEGACY_INDEX
            )

        assert rows == []
        assert "no such table" in messages[0]

    def test_stderr_discarded_without_debug(self, redis_docset):
        """Without debug, stderr goes to DEVNULL."""
        completed = MagicMock(returncode=0, stdout="")
        with patch("docdash.executor.subprocess.run", return_value=completed) as run:
            CommandLineExecutor().execute(
                redis_docset / DATABASE_PATH, "SELECT 1", Dialect.LEGACY_INDEX
            )

        assert run.call_args.kwargs["stderr"] is subprocess.DEVNULL

    def test_missing_database(self, tmp_path):
        """The program is not started for a missing database."""
        with patch("docdash.executor.subprocess.run") as run:
            with pytest.raises(UnreadableDatabase):
                CommandLineExecutor().execute(
                    tmp_path / "x.dsidx", "SELECT 1", Dialect.LEGACY_INDEX
                )
        run.assert_not_called()


class TestCreateExecutor:
    """Tests for create_executor factory."""

    def test_default_is_sqlite(self):
        assert isinstance(create_executor({}), SqliteExecutor)

    def test_cli_engine(self):
        executor = create_executor(
            {"engine": "cli", "sqlite_binary": "/opt/sqlite3"}, debug=True
        )
        assert isinstance(executor, CommandLineExecutor)
        assert executor.binary == "/opt/sqlite3"
        assert executor.debug is True

    def test_unknown_engine_falls_back(self):
        assert isinstance(create_executor({"engine": "duckdb"}), SqliteExecutor)
