"""Result URL construction."""

from pathlib import Path

from .formatter import strip_dash_entries
from .models import Candidate
from .paths import documents_path

WEB_PREFIXES = ("http://", "https://")


def result_url(
    docsets_path: Path | str,
    docset_name: str,
    filename: str,
    anchor: str | None = None,
) -> str:
    """
    Build the URL that opens a search result.

    Stored paths that are already web URLs are returned unchanged. Anything
    else is resolved inside the docset's documents tree as a file:// URL.

    Args:
        docsets_path: Docsets root directory
        docset_name: Docset owning the row
        filename: Path stored in the index, relative to Documents
        anchor: Optional anchor (object-index docsets store it separately)

    Returns:
        URL string with spaces percent-encoded
    """
    if filename.startswith(WEB_PREFIXES):
        return filename

    documents = documents_path(docsets_path, docset_name)
    url = f"file://{documents.as_posix()}/{strip_dash_entries(filename).lstrip('/')}"
    if anchor:
        url += f"#{anchor}"
    return url.replace(" ", "%20")


def candidate_url(docsets_path: Path | str, candidate: Candidate) -> str:
    """URL for a selected candidate."""
    row = candidate.row
    return result_url(docsets_path, candidate.docset_name, row.file_path, row.anchor)
