"""Release catalog implementations."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from services.licensed.constants import GITHUB_REPO, RELEASES_PER_PAGE
from services.licensed.github import GitHubClient
from services.licensed.models import Release


_LOGGER = logging.getLogger(__name__)


class ReleaseCatalog(Protocol):
    """Protocol describing sources of upstream release metadata."""

    def list_releases(self) -> Sequence[Release]:
        """Return every release that carries at least one asset."""


class GitHubReleaseCatalog:
    """List ``licensee/licensed`` releases through the GitHub Releases API."""

    def __init__(self, client: GitHubClient, *, repository: str = GITHUB_REPO) -> None:
        self._client = client
        self._repository = repository

    def list_releases(self) -> list[Release]:
        url = self._client.api_url(
            f"repos/{self._repository}/releases?per_page={RELEASES_PER_PAGE}"
        )
        releases: list[Release] = []
        skipped = 0
        for payload in self._client.paginate(url):
            release = Release.from_payload(payload)
            if not release.assets:
                skipped += 1
                continue
            releases.append(release)

        _LOGGER.debug(
            "GitHub listed %d %s releases with assets (%d without assets skipped)",
            len(releases),
            self._repository,
            skipped,
        )
        return releases


class StaticReleaseCatalog:
    """Serve a fixed list of releases, dropping those without assets."""

    def __init__(self, releases: Sequence[Release]) -> None:
        self._releases = [release for release in releases if release.assets]

    def list_releases(self) -> list[Release]:
        return list(self._releases)


def get_releases(client: GitHubClient) -> list[Release]:
    """Return all ``licensee/licensed`` releases that have assets."""

    return GitHubReleaseCatalog(client).list_releases()


__all__ = ["GitHubReleaseCatalog", "ReleaseCatalog", "StaticReleaseCatalog", "get_releases"]
