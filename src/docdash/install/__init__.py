"""Installation Pipeline - Docset Download, Extraction and Registration

Usage:
    from docdash.install import InstallationPipeline

    pipeline = InstallationPipeline(registry, network_config)

    # From the official feeds
    pipeline.install_official("Redis")

    # From a URL or a previously downloaded archive
    pipeline.install("https://example.com/Foo.tgz")
    pipeline.install("~/Downloads/Foo.tgz")
"""

from .archive import download_archive, extract_archive, top_level_entry
from .feeds import official_archive_url, official_docsets, unofficial_docsets
from .operations import InstallationPipeline

__all__ = [
    "InstallationPipeline",
    "download_archive",
    "extract_archive",
    "top_level_entry",
    "official_archive_url",
    "official_docsets",
    "unofficial_docsets",
]
