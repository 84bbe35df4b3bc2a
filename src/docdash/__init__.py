"""
docdash - keyword search over locally installed offline docsets.

Usage:
    from docdash import load_config, create_session

    session = create_session(load_config())
    session.activate(common=["Redis", "Python_3"])

    for candidate in session.engine.search("redis blpop"):
        print(candidate.display, session.engine.result_url(candidate))
"""

from .config import load_config
from .errors import (
    AmbiguousExtractionResult,
    ConfigurationError,
    DocdashError,
    DocsetNotFound,
    DownloadFailed,
    EngineUnavailable,
    ExtractionFailed,
    PathTooLong,
    TimeoutExceeded,
    UnreadableDatabase,
    UnsupportedDialect,
)
from .models import Candidate, Connection, Dialect, Row
from .registry import ConnectionRegistry
from .search import SearchEngine
from .session import Session, create_session

__version__ = "0.1.0"

__all__ = [
    # Session
    "load_config",
    "create_session",
    "Session",
    "ConnectionRegistry",
    "SearchEngine",
    # Models
    "Candidate",
    "Connection",
    "Dialect",
    "Row",
    # Errors
    "DocdashError",
    "ConfigurationError",
    "DocsetNotFound",
    "UnreadableDatabase",
    "UnsupportedDialect",
    "EngineUnavailable",
    "DownloadFailed",
    "TimeoutExceeded",
    "ExtractionFailed",
    "PathTooLong",
    "AmbiguousExtractionResult",
]
