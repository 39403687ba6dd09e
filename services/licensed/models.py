"""Data models used by the licensed installer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class AssetState(str, Enum):
    """Upload state of a release asset."""

    UPLOADED = "uploaded"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: object) -> "AssetState":
        if isinstance(raw, str) and raw.strip().lower() == cls.UPLOADED.value:
            return cls.UPLOADED
        return cls.OTHER


class ExecutionMode(str, Enum):
    """How the extraction command runs against the install directory."""

    DIRECT = "direct"
    ELEVATED = "elevated"


@dataclass(frozen=True)
class ReleaseAsset:
    """One downloadable file attached to a release."""

    id: int
    name: str
    state: AssetState = AssetState.UPLOADED

    @property
    def is_uploaded(self) -> bool:
        return self.state is AssetState.UPLOADED

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["ReleaseAsset"]:
        """Build an asset from an API payload, or ``None`` without a usable ``id``."""

        raw_id = payload.get("id")
        if isinstance(raw_id, bool):
            return None
        try:
            asset_id = int(raw_id)
        except (TypeError, ValueError):
            return None
        return cls(
            id=asset_id,
            name=str(payload.get("name") or ""),
            state=AssetState.parse(payload.get("state")),
        )


@dataclass(frozen=True)
class Release:
    """A tagged upstream release and its assets."""

    tag_name: str
    assets: Tuple[ReleaseAsset, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Release":
        raw_assets = payload.get("assets") or []
        assets = (
            ReleaseAsset.from_payload(asset) for asset in raw_assets if isinstance(asset, Mapping)
        )
        return cls(
            tag_name=str(payload.get("tag_name") or ""),
            assets=tuple(asset for asset in assets if asset is not None),
        )


class LicensedInstallError(RuntimeError):
    """Base class for fatal installation failures."""


class DownloadError(LicensedInstallError):
    """Raised when a release asset cannot be downloaded."""


class ToolMissingError(LicensedInstallError):
    """Raised when a required host tool is not available on ``PATH``."""


class ExtractionError(LicensedInstallError):
    """Raised when extracting the downloaded archive fails."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class RateLimitError(LicensedInstallError):
    """Raised when GitHub keeps rate limiting a request past the retry limit."""
