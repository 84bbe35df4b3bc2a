"""Exception hierarchy for docdash.

Every failure the query core or the installation pipeline reports derives
from DocdashError, so front-ends can catch one type and show the message.
"""


class DocdashError(Exception):
    """Base exception for docdash operations."""
    pass


class ConfigurationError(DocdashError):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


class DocsetNotFound(DocdashError):
    """Raised when a docset name does not resolve to a directory on disk."""

    def __init__(self, name: str, root: object = None):
        message = f"Docset not found: {name}"
        if root is not None:
            message += f" (searched {root})"
        super().__init__(message)
        self.name = name
        self.root = root


class UnreadableDatabase(DocdashError):
    """Raised when a docset index database is missing or cannot be opened."""

    def __init__(self, path: object, reason: str = ""):
        message = f"Cannot read docset database: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason


class UnsupportedDialect(DocdashError):
    """Raised for a schema dialect that has no query composer."""
    pass


class EngineUnavailable(DocdashError):
    """Raised when the external query engine cannot be started."""
    pass


class DownloadFailed(DocdashError):
    """Raised when a feed, catalog or archive cannot be fetched."""

    def __init__(self, url: str, reason: str = ""):
        message = f"Download failed: {url}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.url = url
        self.reason = reason


class TimeoutExceeded(DownloadFailed):
    """Raised when a network fetch exceeds the configured timeout."""

    def __init__(self, url: str, timeout: float):
        super().__init__(url, f"timed out after {timeout}s")
        self.timeout = timeout


class ExtractionFailed(DocdashError):
    """Raised when a docset archive cannot be extracted."""

    def __init__(self, archive: object, reason: str = ""):
        message = f"Failed to extract {archive}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.archive = archive
        self.reason = reason


class PathTooLong(ExtractionFailed):
    """Raised when extraction fails because an entry exceeds the path length limit."""
    pass


class AmbiguousExtractionResult(DocdashError):
    """Raised when the extracted top-level entry cannot be determined."""
    pass
