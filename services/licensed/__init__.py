"""Public API for the licensed installer package."""

from __future__ import annotations

from services.licensed.archive import (
    ArchiveInstaller,
    TarArchiveInstaller,
    build_extract_command,
    extract_licensed_archive,
    resolve_execution_mode,
)
from services.licensed.builder import build_install_service, install, run_action
from services.licensed.constants import (
    ARCHIVE_ENTRY,
    ARCHIVE_FILE_NAME,
    GITHUB_REPO,
    MAX_RETRY_COUNT,
)
from services.licensed.environment import add_path, is_on_path, set_output
from services.licensed.github import GitHubClient, GitHubResponse
from services.licensed.models import (
    AssetState,
    DownloadError,
    ExecutionMode,
    ExtractionError,
    LicensedInstallError,
    RateLimitError,
    Release,
    ReleaseAsset,
    ToolMissingError,
)
from services.licensed.providers import (
    GitHubReleaseCatalog,
    ReleaseCatalog,
    StaticReleaseCatalog,
    get_releases,
)
from services.licensed.release_assets import (
    AssetDownloader,
    GitHubAssetDownloader,
    download_licensed_archive,
    find_release_asset_for_platform,
)
from services.licensed.service import InstallService
from services.licensed.versioning import find_release_for_version, find_version

__all__ = [
    "ARCHIVE_ENTRY",
    "ARCHIVE_FILE_NAME",
    "GITHUB_REPO",
    "MAX_RETRY_COUNT",
    "ArchiveInstaller",
    "AssetDownloader",
    "AssetState",
    "DownloadError",
    "ExecutionMode",
    "ExtractionError",
    "GitHubAssetDownloader",
    "GitHubClient",
    "GitHubReleaseCatalog",
    "GitHubResponse",
    "InstallService",
    "LicensedInstallError",
    "RateLimitError",
    "Release",
    "ReleaseAsset",
    "ReleaseCatalog",
    "StaticReleaseCatalog",
    "TarArchiveInstaller",
    "ToolMissingError",
    "add_path",
    "build_extract_command",
    "build_install_service",
    "download_licensed_archive",
    "extract_licensed_archive",
    "find_release_asset_for_platform",
    "find_release_for_version",
    "find_version",
    "get_releases",
    "install",
    "is_on_path",
    "resolve_execution_mode",
    "run_action",
    "set_output",
]
