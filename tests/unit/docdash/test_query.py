"""Tests for query composition."""

import sqlite3

import pytest

from docdash.errors import UnsupportedDialect
from docdash.models import Dialect
from docdash.paths import DATABASE_PATH
from docdash.query import RESULT_LIMIT, compose_query

from conftest import build_legacy_docset


def _names(db_path, query):
    conn = sqlite3.connect(db_path)
    try:
        return [row[1] for row in conn.execute(query).fetchall()]
    finally:
        conn.close()


class TestComposeQuery:
    """Tests for compose_query function."""

    def test_legacy_columns(self):
        """Legacy queries select type, name, path from searchIndex."""
        query = compose_query(Dialect.LEGACY_INDEX, "foo")
        assert query.startswith("SELECT type, name, path FROM searchIndex")

    def test_object_columns(self):
        """Object queries join the Core Data tables and select the anchor."""
        query = compose_query(Dialect.OBJECT_INDEX, "foo")
        assert "ztokenmetainformation.zanchor" in query
        assert "INNER JOIN zfilepath" in query

    def test_terms_are_and_combined(self):
        """Each whitespace-separated term becomes its own LIKE predicate."""
        query = compose_query(Dialect.LEGACY_INDEX, "  foo   bar ")
        assert "name LIKE '%foo%'" in query
        assert "name LIKE '%bar%'" in query
        assert " AND " in query

    def test_empty_pattern_has_no_where(self):
        """An empty pattern matches every symbol."""
        assert "WHERE" not in compose_query(Dialect.LEGACY_INDEX, "")
        assert "WHERE" not in compose_query(Dialect.OBJECT_INDEX, "   ")

    def test_limit(self):
        """Results are capped at 1000."""
        assert RESULT_LIMIT == 1000
        assert compose_query(Dialect.LEGACY_INDEX, "x").endswith("LIMIT 1000")

    def test_quotes_are_escaped(self):
        """Single quotes in a term cannot break out of the literal."""
        query = compose_query(Dialect.LEGACY_INDEX, "it's")
        assert "'%it''s%'" in query

    def test_unknown_dialect(self):
        """A value outside the enum has no composer."""
        with pytest.raises(UnsupportedDialect):
            compose_query("SPOTLIGHT", "foo")


class TestQueryResults:
    """Tests that run composed queries against real databases."""

    def test_ordering_by_length_then_name(self, docsets_root):
        """Results are non-decreasing in length, then lowercase name."""
        docset = build_legacy_docset(
            docsets_root,
            "Sample",
            [
                ("foobar", "Function", "a.html"),
                ("Foo", "Class", "b.html"),
                ("xfoo", "Function", "c.html"),
                ("afoo", "Function", "d.html"),
                ("FOOD", "Constant", "e.html"),
                ("bar", "Function", "f.html"),
            ],
        )
        names = _names(docset / DATABASE_PATH, compose_query(Dialect.LEGACY_INDEX, "foo"))

        assert names == ["Foo", "afoo", "FOOD", "xfoo", "foobar"]
        keys = [(len(n), n.lower()) for n in names]
        assert keys == sorted(keys)

    def test_match_is_case_insensitive(self, redis_docset):
        """Lowercase terms match uppercase symbol names."""
        names = _names(
            redis_docset / DATABASE_PATH, compose_query(Dialect.LEGACY_INDEX, "blpop")
        )
        assert names == ["BLPOP"]

    def test_all_terms_must_match(self, redis_docset):
        """Multiple terms narrow the result set."""
        names = _names(
            redis_docset / DATABASE_PATH, compose_query(Dialect.LEGACY_INDEX, "b pop")
        )
        assert names == ["BLPOP", "BRPOP", "BLMPOP"]

    def test_wildcards_are_literal(self, docsets_root):
        """Underscore and percent in a term match only themselves."""
        docset = build_legacy_docset(
            docsets_root,
            "Sample",
            [("a_b", "Function", "a.html"), ("axb", "Function", "b.html")],
        )
        names = _names(docset / DATABASE_PATH, compose_query(Dialect.LEGACY_INDEX, "a_b"))
        assert names == ["a_b"]

    def test_object_query_runs(self, go_docset):
        """The object-dialect join returns anchors alongside paths."""
        conn = sqlite3.connect(go_docset / DATABASE_PATH)
        rows = conn.execute(compose_query(Dialect.OBJECT_INDEX, "print")).fetchall()
        conn.close()

        assert rows == [
            ("Function", "Printf", "fmt/index.html", "Printf"),
            ("Function", "Println", "fmt/index.html", "Println"),
        ]
