"""
Docset feed and catalog access.

Two sources list installable docsets:
- Official: the Kapeli feeds repository. Its GitHub contents listing names
  one ``<Docset>.xml`` feed per docset; each feed lists archive mirrors in
  ``<url>`` elements.
- Unofficial: the contributed docsets catalog, a JSON list of
  name/archive-URL entries.
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable
from typing import Any

import requests

from ..errors import DownloadFailed, TimeoutExceeded

logger = logging.getLogger(__name__)

FEED_SUFFIX = ".xml"


def request_error(
    url: str, timeout: float, error: requests.RequestException
) -> DownloadFailed:
    """Translate a requests failure into a docdash error.

    A read timeout while a streamed body is consumed surfaces as a
    ConnectionError rather than a Timeout; both map to TimeoutExceeded.
    """
    if isinstance(error, requests.Timeout) or (
        isinstance(error, requests.ConnectionError)
        and "timed out" in str(error).lower()
    ):
        return TimeoutExceeded(url, timeout)
    return DownloadFailed(url, str(error))


def fetch(url: str, timeout: float, **kwargs: Any) -> requests.Response:
    """GET a URL, translating request failures into docdash errors.

    Raises:
        TimeoutExceeded: If the server does not answer within timeout
        DownloadFailed: On connection errors or an HTTP error status
    """
    logger.debug(f"GET {url} (timeout={timeout}s)")
    try:
        response = requests.get(url, timeout=timeout, **kwargs)
        response.raise_for_status()
    except requests.RequestException as e:
        raise request_error(url, timeout, e) from e
    return response


def fetch_json(url: str, timeout: float) -> Any:
    """GET a URL and decode its JSON body."""
    response = fetch(url, timeout)
    try:
        return response.json()
    except ValueError as e:
        raise DownloadFailed(url, f"invalid JSON: {e}") from e


def official_docsets(
    index_url: str, timeout: float, ignored: Iterable[str] = ()
) -> list[str]:
    """
    List the official docsets.

    Args:
        index_url: GitHub contents URL of the feeds repository
        timeout: Request timeout in seconds
        ignored: Docset names to leave out

    Returns:
        Sorted docset names
    """
    ignored = set(ignored)
    names = []
    for entry in fetch_json(index_url, timeout):
        filename = entry.get("name", "") if isinstance(entry, dict) else ""
        if not filename.endswith(FEED_SUFFIX):
            continue
        name = filename[: -len(FEED_SUFFIX)]
        if name not in ignored:
            names.append(name)
    return sorted(names, key=str.lower)


def official_archive_url(feed_url: str, name: str, timeout: float) -> str:
    """
    Archive URL of an official docset, taken from its feed.

    Args:
        feed_url: Feed URL template containing ``{name}``
        name: Official docset name
        timeout: Request timeout in seconds

    Returns:
        The first archive URL listed in the feed

    Raises:
        DownloadFailed: If the feed cannot be fetched, parsed, or lists no URL
    """
    url = feed_url.format(name=name)
    response = fetch(url, timeout)
    try:
        root = ET.fromstring(response.content)
    except ET.ParseError as e:
        raise DownloadFailed(url, f"invalid feed XML: {e}") from e

    for element in root.iter("url"):
        if element.text and element.text.strip():
            return element.text.strip()
    raise DownloadFailed(url, "feed lists no archive URL")


def _catalog_entry(entry: Any) -> tuple[str, str] | None:
    if isinstance(entry, dict):
        name, archive = entry.get("name"), entry.get("archive")
    elif isinstance(entry, (list, tuple)) and len(entry) >= 2:
        name, archive = entry[0], entry[1]
    else:
        return None
    if not name or not archive:
        return None
    return str(name), str(archive)


def unofficial_docsets(catalog_url: str, timeout: float) -> list[tuple[str, str]]:
    """
    List contributed docsets.

    Args:
        catalog_url: URL of the contributed docsets catalog
        timeout: Request timeout in seconds

    Returns:
        (name, archive URL) pairs in catalog order
    """
    docsets = []
    for entry in fetch_json(catalog_url, timeout):
        parsed = _catalog_entry(entry)
        if parsed is None:
            logger.debug(f"Skipping unrecognized catalog entry: {entry!r}")
            continue
        docsets.append(parsed)
    return docsets
