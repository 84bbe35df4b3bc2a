"""Docset archive download and extraction.

Extraction shells out to ``tar`` and recovers the name of the extracted
docset from the verbose listing, since an archive called ``Foo.tgz`` may
unpack to ``Bar.docset``.
"""

import logging
import subprocess
import tempfile
from pathlib import Path

import requests

from ..errors import AmbiguousExtractionResult, ExtractionFailed, PathTooLong
from .feeds import fetch, request_error

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

PATH_TOO_LONG_MARKERS = ("file name too long", "path name too long")


def download_archive(url: str, timeout: float, dest_dir: Path | None = None) -> Path:
    """
    Download a docset archive to a temporary file.

    Args:
        url: Archive URL
        timeout: Request timeout in seconds (connect and per-read)
        dest_dir: Directory for the temporary file (system default if None)

    Returns:
        Path to the downloaded archive; the caller removes it

    Raises:
        TimeoutExceeded: If the server stalls longer than timeout
        DownloadFailed: On connection errors, an HTTP error status or a
            truncated transfer; a partially written file is removed
    """
    response = fetch(url, timeout, stream=True)
    suffix = "".join(Path(url.split("?", 1)[0]).suffixes[-2:]) or ".tgz"
    archive_path: Path | None = None
    try:
        with response, tempfile.NamedTemporaryFile(
            suffix=suffix, dir=dest_dir, delete=False
        ) as archive:
            archive_path = Path(archive.name)
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                archive.write(chunk)
    except requests.RequestException as e:
        if archive_path is not None:
            archive_path.unlink(missing_ok=True)
        raise request_error(url, timeout, e) from e
    logger.info(f"Downloaded {url} to {archive_path}")
    return archive_path


def top_level_entry(listing: str) -> str:
    """
    First top-level entry name in a ``tar xv`` listing.

    GNU tar prints ``Name.docset/...``; bsdtar prints ``x Name.docset/...``.

    Raises:
        AmbiguousExtractionResult: If the listing names no entry
    """
    for line in listing.splitlines():
        line = line.strip()
        if line.startswith("x "):
            line = line[2:].strip()
        while line.startswith("./"):
            line = line[2:]
        if not line or line == ".":
            continue
        return line.split("/", 1)[0]
    raise AmbiguousExtractionResult("Cannot determine extracted docset from tar output")


def extract_archive(
    archive: Path | str, docsets_path: Path | str, tar_binary: str = "tar"
) -> str:
    """
    Extract a docset archive into the docsets root.

    Args:
        archive: Path to a .tgz/.tar.gz/.tar archive
        docsets_path: Docsets root directory (created if missing)
        tar_binary: tar program to run

    Returns:
        Name of the extracted top-level entry (e.g. "Redis.docset")

    Raises:
        PathTooLong: If tar reports an over-long entry name
        ExtractionFailed: If tar cannot run or exits non-zero
        AmbiguousExtractionResult: If the listing names no entry
    """
    docsets_path = Path(docsets_path).expanduser()
    docsets_path.mkdir(parents=True, exist_ok=True)

    try:
        result = subprocess.run(
            [tar_binary, "xvf", str(archive), "-C", str(docsets_path)],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise ExtractionFailed(archive, f"cannot run {tar_binary}: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        if any(marker in stderr.lower() for marker in PATH_TOO_LONG_MARKERS):
            raise PathTooLong(archive, stderr)
        raise ExtractionFailed(archive, stderr or f"exit code {result.returncode}")

    # bsdtar writes its listing to stderr
    entry = top_level_entry(result.stdout or result.stderr)
    logger.info(f"Extracted {archive} to {docsets_path / entry}")
    return entry
