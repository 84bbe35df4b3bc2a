"""
Installation Pipeline - acquire, extract and activate docsets.

Every install ends the same way: the archive is unpacked into the docsets
root, the actual docset name is read back from the extracted entry, and
that name is activated in the connection registry. Failures are raised to
the caller unchanged; nothing is retried.
"""

import logging
from pathlib import Path
from typing import Any

from ..config import DEFAULT_CONFIG
from ..errors import DownloadFailed
from ..paths import DOCSET_EXTENSION, installed_docsets
from ..registry import ConnectionRegistry
from .archive import download_archive, extract_archive
from .feeds import official_archive_url, official_docsets, unofficial_docsets

logger = logging.getLogger(__name__)

WEB_PREFIXES = ("http://", "https://")


class InstallationPipeline:
    """Installs docsets into the registry's docsets root."""

    def __init__(
        self,
        registry: ConnectionRegistry,
        network_config: dict[str, Any] | None = None,
        ignored: list[str] | None = None,
        tar_binary: str = "tar",
    ):
        """
        Args:
            registry: Registry that receives installed docsets
            network_config: The ``network`` config section (defaults if None)
            ignored: Official docsets hidden from listings
            tar_binary: tar program used for extraction
        """
        self.registry = registry
        self.network = {**DEFAULT_CONFIG["network"], **(network_config or {})}
        self.ignored = (
            list(ignored) if ignored is not None else DEFAULT_CONFIG["docsets"]["ignored"]
        )
        self.tar_binary = tar_binary

    @property
    def docsets_path(self) -> Path:
        return self.registry.docsets_path

    @property
    def timeout(self) -> float:
        return float(self.network["timeout"])

    def installed(self) -> list[str]:
        """Names of docsets present in the docsets root."""
        return installed_docsets(self.docsets_path)

    def official(self) -> list[str]:
        """Official docsets available for installation."""
        return official_docsets(
            self.network["official_index_url"], self.timeout, self.ignored
        )

    def unofficial(self) -> list[tuple[str, str]]:
        """Contributed docsets as (name, archive URL) pairs."""
        return unofficial_docsets(self.network["unofficial_url"], self.timeout)

    def install(self, source: str | Path, name: str | None = None) -> str:
        """
        Install a docset from a URL or a local archive.

        Args:
            source: http(s) archive URL or path to a downloaded archive
            name: Expected docset name, used only to flag a mismatch

        Returns:
            The installed docset's name as found on disk

        Raises:
            DownloadFailed: If the archive cannot be fetched
            TimeoutExceeded: If the fetch times out
            ExtractionFailed: If tar fails (PathTooLong for long entry names)
            AmbiguousExtractionResult: If the extracted entry is unknown
        """
        source_str = str(source)
        downloaded: Path | None = None
        if source_str.startswith(WEB_PREFIXES):
            downloaded = download_archive(source_str, self.timeout)
            archive = downloaded
        else:
            archive = Path(source_str).expanduser()

        try:
            entry = extract_archive(archive, self.docsets_path, self.tar_binary)
        finally:
            if downloaded is not None:
                downloaded.unlink(missing_ok=True)

        installed_name = entry
        if installed_name.endswith(DOCSET_EXTENSION):
            installed_name = installed_name[: -len(DOCSET_EXTENSION)]
        if name and name != installed_name:
            logger.info(f"Docset {name} was installed as {installed_name}")

        self.registry.activate(installed_name)
        return installed_name

    def install_official(self, name: str) -> str:
        """Install an official docset by name."""
        url = official_archive_url(self.network["official_feed_url"], name, self.timeout)
        return self.install(url, name)

    def install_unofficial(self, name: str) -> str:
        """Install a contributed docset by name.

        Raises:
            DownloadFailed: If the catalog has no docset of that name
        """
        for docset_name, url in self.unofficial():
            if docset_name == name:
                return self.install(url, name)
        raise DownloadFailed(
            self.network["unofficial_url"], f"no contributed docset named {name!r}"
        )
