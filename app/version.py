"""Version of the installed setup-licensed distribution."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata, resources

DISTRIBUTION_NAME = "setup-licensed"
_UNKNOWN_VERSION = "0.0.0-dev"


@lru_cache(maxsize=1)
def get_app_version() -> str:
    """Return this tool's own version.

    Installed distribution metadata wins.  A source tree that was never
    installed reports the bundled ``VERSION`` file instead.  The working
    directory is never consulted.
    """

    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    bundled = resources.files(__package__).joinpath("VERSION")
    try:
        text = bundled.read_text(encoding="utf-8").strip()
    except OSError:
        return _UNKNOWN_VERSION
    return text.lstrip("v") or _UNKNOWN_VERSION


def user_agent() -> str:
    """``User-Agent`` value sent with every GitHub API request."""

    return f"{DISTRIBUTION_NAME}/{get_app_version()}"


__all__ = ["DISTRIBUTION_NAME", "get_app_version", "user_agent"]
