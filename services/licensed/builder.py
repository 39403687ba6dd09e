"""Helpers for constructing and running the install service."""

from __future__ import annotations

import logging

from app.config import ActionConfig, get_action_config
from services.licensed.archive import TarArchiveInstaller
from services.licensed.environment import set_output
from services.licensed.github import GitHubClient
from services.licensed.models import LicensedInstallError
from services.licensed.providers import GitHubReleaseCatalog
from services.licensed.release_assets import GitHubAssetDownloader
from services.licensed.service import InstallService
from shared.logging_config import register_secret


_LOGGER = logging.getLogger(__name__)

VERSION_OUTPUT = "version"


def build_install_service(config: ActionConfig | None = None) -> InstallService:
    """Construct an :class:`InstallService` for ``config``.

    Catalog listing uses a client authenticated with the configured token for
    its higher rate limit.  Asset downloads always go through an
    unauthenticated client.
    """

    config = config or get_action_config()
    if config.github_token:
        register_secret(config.github_token)

    authenticated = GitHubClient(config.github_token, api_url=config.api_url)
    unauthenticated = GitHubClient(api_url=config.api_url)

    return InstallService(
        GitHubReleaseCatalog(authenticated, repository=config.repository),
        GitHubAssetDownloader(unauthenticated, repository=config.repository),
        TarArchiveInstaller(),
        install_dir=config.install_dir,
        platform=config.platform,
        repository=config.repository,
    )


def install(version: str | None = None, config: ActionConfig | None = None) -> str | None:
    """Install the requested licensed version and return its tag, if any."""

    config = config or get_action_config()
    service = build_install_service(config)
    return service.install(version or config.version)


def run_action(config: ActionConfig | None = None, service: InstallService | None = None) -> int:
    """Run one installation, publish the ``version`` output and return an exit code."""

    config = config or get_action_config()
    service = service or build_install_service(config)
    try:
        installed = service.install(config.version)
    except LicensedInstallError as exc:
        _LOGGER.error("%s", exc)
        return 1
    except OSError as exc:
        _LOGGER.error("licensed installation failed: %s", exc)
        return 1

    if installed is None:
        return 0

    _LOGGER.info("Installed %s %s", config.repository, installed)
    set_output(VERSION_OUTPUT, installed)
    return 0


__all__ = ["VERSION_OUTPUT", "build_install_service", "install", "run_action"]
