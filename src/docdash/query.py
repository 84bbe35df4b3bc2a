"""Query composition for docset index databases.

Builds one SQL statement per dialect. Each whitespace-separated term of the
pattern becomes a substring LIKE predicate on the symbol name; predicates
are AND-combined. Results are ordered by name length, then lowercase name,
so short exact-looking matches surface first without a ranking model.

The statement is a complete literal string (no bound parameters) because the
command-line engine receives it as a single argument.
"""

from .errors import UnsupportedDialect
from .models import Dialect

RESULT_LIMIT = 1000

LEGACY_INDEX_QUERY = (
    "SELECT type, name, path FROM searchIndex{where} "
    "ORDER BY LENGTH(name), LOWER(name) LIMIT {limit}"
)

OBJECT_INDEX_QUERY = (
    "SELECT ztokentype.ztypename, ztoken.ztokenname, zfilepath.zpath, "
    "ztokenmetainformation.zanchor "
    "FROM ztoken "
    "INNER JOIN ztokenmetainformation "
    "ON ztoken.zmetainformation = ztokenmetainformation.z_pk "
    "INNER JOIN zfilepath ON ztokenmetainformation.zfile = zfilepath.z_pk "
    "INNER JOIN ztokentype ON ztoken.ztokentype = ztokentype.z_pk{where} "
    "ORDER BY LENGTH(ztoken.ztokenname), LOWER(ztoken.ztokenname) "
    "LIMIT {limit}"
)


def _like_literal(term: str) -> str:
    """Quote a term as a '%term%' LIKE literal, escaping wildcards."""
    escaped = (
        term.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
        .replace("'", "''")
    )
    return f"'%{escaped}%'"


def _where_clause(column: str, pattern: str) -> str:
    terms = pattern.split()
    if not terms:
        return ""
    predicates = [f"{column} LIKE {_like_literal(term)} ESCAPE '\\'" for term in terms]
    return " WHERE " + " AND ".join(predicates)


def compose_query(dialect: Dialect, pattern: str, limit: int = RESULT_LIMIT) -> str:
    """Build the search statement for a dialect.

    Args:
        dialect: Schema dialect of the target database
        pattern: Search pattern; an empty pattern matches everything
        limit: Maximum number of rows to return

    Returns:
        SQL string selecting (type, name, path[, anchor])

    Raises:
        UnsupportedDialect: If no composer exists for the dialect
    """
    if dialect is Dialect.LEGACY_INDEX:
        return LEGACY_INDEX_QUERY.format(
            where=_where_clause("name", pattern), limit=limit
        )
    elif dialect is Dialect.OBJECT_INDEX:
        return OBJECT_INDEX_QUERY.format(
            where=_where_clause("ztoken.ztokenname", pattern), limit=limit
        )
    raise UnsupportedDialect(f"No query composer for dialect: {dialect!r}")
