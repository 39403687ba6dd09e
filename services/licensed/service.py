"""Service responsible for resolving and installing a licensed release."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from services.licensed.archive import ArchiveInstaller
from services.licensed.constants import GITHUB_REPO
from services.licensed.environment import add_path
from services.licensed.models import Release, ReleaseAsset
from services.licensed.providers import ReleaseCatalog
from services.licensed.release_assets import AssetDownloader, find_release_asset_for_platform
from services.licensed.versioning import find_release_for_version


_LOGGER = logging.getLogger(__name__)

ReleaseMatcher = Callable[[Sequence[Release], str], Optional[Release]]
AssetSelector = Callable[[Release, str], Optional[ReleaseAsset]]
PathUpdater = Callable[[Path], object]


class InstallService:
    """Coordinate release discovery, download and extraction.

    Every stage is a collaborator so callers can replace any of them without
    network or filesystem access.
    """

    def __init__(
        self,
        catalog: ReleaseCatalog,
        downloader: AssetDownloader,
        installer: ArchiveInstaller,
        *,
        install_dir: Path | None,
        platform: str,
        find_release: ReleaseMatcher = find_release_for_version,
        select_asset: AssetSelector = find_release_asset_for_platform,
        update_path: PathUpdater = add_path,
        repository: str = GITHUB_REPO,
    ) -> None:
        self._catalog = catalog
        self._downloader = downloader
        self._installer = installer
        self._install_dir = install_dir
        self._platform = platform
        self._find_release = find_release
        self._select_asset = select_asset
        self._update_path = update_path
        self._repository = repository

    def install(self, version: str) -> str | None:
        """Install ``version`` and return the resolved tag, or ``None`` when skipped."""

        if self._install_dir is None:
            _LOGGER.info(
                "Input required and not supplied to install licensed executable: install-dir"
            )
            return None

        release = self.find_release(version)
        if release is None:
            _LOGGER.info("%s (%s) release was not found", self._repository, version)
            return None

        asset = self._select_asset(release, self._platform)
        if asset is None:
            _LOGGER.info(
                "%s (%s-%s) package was not found", self._repository, version, self._platform
            )
            return None

        _LOGGER.info(
            "Installing %s %s from asset %s into %s",
            self._repository,
            release.tag_name,
            asset.name,
            self._install_dir,
        )
        self._install_dir.mkdir(parents=True, exist_ok=True)
        archive_path = self._downloader.download(asset)
        self._installer.install(archive_path, self._install_dir)

        self._update_path(self._install_dir)
        return release.tag_name

    def find_release(self, version: str) -> Release | None:
        releases = self._catalog.list_releases()
        _LOGGER.debug("Resolving %s against %d releases", version, len(releases))
        release = self._find_release(releases, version)
        if release is not None:
            _LOGGER.debug("Version %s resolved to %s", version, release.tag_name)
        return release
