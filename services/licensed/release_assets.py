"""Utilities for selecting and downloading release assets."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from services.licensed.constants import (
    ARCHIVE_FILE_NAME,
    GITHUB_REPO,
    OCTET_STREAM_MEDIA_TYPE,
    TEMP_DIR_PREFIX,
    TEMP_ROOT_ENV,
)
from services.licensed.github import GitHubClient
from services.licensed.models import DownloadError, Release, ReleaseAsset


_LOGGER = logging.getLogger(__name__)

__all__ = [
    "AssetDownloader",
    "GitHubAssetDownloader",
    "download_licensed_archive",
    "find_release_asset_for_platform",
]


class AssetDownloader(Protocol):
    """Protocol describing how a selected asset reaches the local disk."""

    def download(self, asset: ReleaseAsset) -> Path:
        """Download ``asset`` and return the path of the local archive."""


def find_release_asset_for_platform(release: Release, platform: str) -> ReleaseAsset | None:
    """Return the first uploaded asset of ``release`` whose name contains ``platform``."""

    for asset in release.assets:
        if not asset.is_uploaded:
            continue
        if platform in asset.name:
            return asset
    return None


def download_licensed_archive(
    client: GitHubClient,
    asset: ReleaseAsset,
    *,
    repository: str = GITHUB_REPO,
) -> Path:
    """Download ``asset`` into a new temporary directory and return the archive path."""

    url = client.api_url(f"repos/{repository}/releases/assets/{asset.id}")
    _LOGGER.info("Downloading %s from %s", asset.name, url)
    response = client.request(url, accept=OCTET_STREAM_MEDIA_TYPE, raise_for_status=False)
    if response.status != 200:
        raise DownloadError(
            f"Unable to download licensed: asset {asset.name} returned HTTP {response.status}"
        )

    temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX, dir=_temp_root()))
    archive_path = temp_dir / ARCHIVE_FILE_NAME
    archive_path.write_bytes(response.body)
    _LOGGER.debug("Stored %d bytes for %s at %s", len(response.body), asset.name, archive_path)
    return archive_path


def _temp_root() -> str | None:
    runner_temp = os.environ.get(TEMP_ROOT_ENV)
    if runner_temp and Path(runner_temp).is_dir():
        return runner_temp
    return None


class GitHubAssetDownloader:
    """Download release assets with an unauthenticated GitHub client."""

    def __init__(self, client: GitHubClient, *, repository: str = GITHUB_REPO) -> None:
        if client.authenticated:
            _LOGGER.debug("Release asset downloads should use an unauthenticated client")
        self._client = client
        self._repository = repository

    def download(self, asset: ReleaseAsset) -> Path:
        return download_licensed_archive(self._client, asset, repository=self._repository)
