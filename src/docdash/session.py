"""
Session factory.

Wires a registry, executor, search engine and installation pipeline from a
loaded configuration. One Session per process or per test; nothing here is
module-level state.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .config import get_docsets_path, get_network_config, get_search_config
from .executor import DebugSink, create_executor
from .install import InstallationPipeline
from .registry import ConnectionRegistry
from .search import SearchEngine

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """The collaborating objects behind one front-end."""

    config: dict[str, Any]
    registry: ConnectionRegistry
    engine: SearchEngine
    pipeline: InstallationPipeline

    def activate(
        self,
        common: Iterable[str] = (),
        contextual: Iterable[str] = (),
        strict: bool = True,
    ) -> None:
        """Set both active sets, registering any new docsets."""
        self.registry.ensure_common(common, strict=strict)
        self.registry.ensure_contextual(contextual, strict=strict)


def contextual_docsets(config: dict[str, Any], extension: str | None) -> list[str]:
    """Docsets configured for a file extension ("py" or ".py")."""
    if not extension:
        return []
    mapping = config.get("docsets", {}).get("contextual") or {}
    return list(mapping.get(extension.lstrip("."), []))


def create_session(
    config: dict[str, Any], debug_sink: DebugSink | None = None
) -> Session:
    """
    Build a Session from configuration.

    Args:
        config: Configuration dictionary from load_config()
        debug_sink: Receives query-engine diagnostics

    Returns:
        Session with empty active sets; call Session.activate() next
    """
    search_config = get_search_config(config)
    debug = bool(config.get("logging", {}).get("debug", False))

    registry = ConnectionRegistry(get_docsets_path(config))
    executor = create_executor(search_config, debug=debug, debug_sink=debug_sink)
    engine = SearchEngine(
        registry,
        executor,
        min_length=int(search_config["min_length"]),
        candidate_format=search_config["candidate_format"],
    )
    pipeline = InstallationPipeline(
        registry,
        get_network_config(config),
        ignored=config.get("docsets", {}).get("ignored"),
    )
    logger.debug(
        f"Session for {registry.docsets_path} using {type(executor).__name__}"
    )
    return Session(config=config, registry=registry, engine=engine, pipeline=pipeline)
