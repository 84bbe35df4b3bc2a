"""
Multi-docset search.

Orchestrates narrowing, query composition and execution across the
registry's available connections. Connections are queried one after another
in priority order and their candidates concatenated; results from different
docsets are never re-ranked against each other.
"""

import logging

from .errors import UnreadableDatabase
from .executor import QueryExecutor
from .formatter import DEFAULT_TEMPLATE, make_candidate
from .models import Candidate
from .narrowing import narrow
from .query import compose_query
from .registry import ConnectionRegistry
from .urls import candidate_url

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 3


class SearchEngine:
    """Searches every active docset for a pattern."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        executor: QueryExecutor,
        min_length: int = DEFAULT_MIN_LENGTH,
        candidate_format: str = DEFAULT_TEMPLATE,
    ):
        """
        Args:
            registry: Connection registry holding the active docsets
            executor: Query executor used for every connection
            min_length: Patterns shorter than this return no results
            candidate_format: Display template (see docdash.formatter)
        """
        self.registry = registry
        self.executor = executor
        self.min_length = min_length
        self.candidate_format = candidate_format

    def search(self, pattern: str) -> list[Candidate]:
        """
        Search the active docsets.

        Args:
            pattern: Search terms, optionally prefixed by a docset name

        Returns:
            Candidates grouped by docset in connection order, each group
            ordered by name length then lowercase name
        """
        if len(pattern) < self.min_length:
            return []
        return self._run(pattern)

    def list_all(self) -> list[Candidate]:
        """Every symbol of every active docset, ignoring the length guard."""
        return self._run("")

    def _run(self, pattern: str) -> list[Candidate]:
        connections, pattern = narrow(pattern, self.registry.available())

        candidates: list[Candidate] = []
        for connection in connections:
            query = compose_query(connection.dialect, pattern)
            try:
                rows = self.executor.execute(
                    connection.db_path, query, connection.dialect
                )
            except UnreadableDatabase as e:
                logger.warning(f"Skipping docset {connection.name}: {e}")
                continue

            candidates.extend(
                make_candidate(self.candidate_format, connection.name, row)
                for row in rows
            )

        logger.debug(
            f"Search {pattern!r} over {len(connections)} docsets: "
            f"{len(candidates)} candidates"
        )
        return candidates

    def docset_names(self) -> list[str]:
        """Names of the docsets a search would query."""
        return [connection.name for connection in self.registry.available()]

    def result_url(self, candidate: Candidate) -> str:
        """URL that opens a candidate."""
        return candidate_url(self.registry.docsets_path, candidate)
