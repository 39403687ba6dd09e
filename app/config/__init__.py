"""Action configuration assembled from bundled defaults and runner inputs."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

_CONFIG_RESOURCE = "action.json"
_ACTION_CONFIG_CACHE: ActionConfig | None = None

INSTALL_DIR_INPUT = "install-dir"
GITHUB_TOKEN_INPUT = "github_token"
VERSION_INPUT = "version"

_DEFAULT_VERSION = "latest"
_DEFAULT_REPOSITORY = "licensee/licensed"
_DEFAULT_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class ActionConfig:
    """Structured inputs for one installation run."""

    install_dir: Path | None
    github_token: str | None
    version: str
    platform: str
    repository: str = _DEFAULT_REPOSITORY
    api_url: str = _DEFAULT_API_URL


def input_env_name(name: str) -> str:
    """Return the environment variable a GitHub Actions runner uses for input ``name``."""

    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, environ: Mapping[str, str] | None = None) -> str | None:
    """Return the trimmed value of action input ``name`` or ``None`` when blank."""

    environ = os.environ if environ is None else environ
    value = environ.get(input_env_name(name), "")
    value = value.strip()
    return value or None


def get_action_config() -> ActionConfig:
    """Return the cached action configuration."""

    global _ACTION_CONFIG_CACHE
    if _ACTION_CONFIG_CACHE is None:
        _ACTION_CONFIG_CACHE = load_action_config()
    return _ACTION_CONFIG_CACHE


def reset_action_config_cache() -> None:
    """Reset the cached configuration for subsequent reloads."""

    global _ACTION_CONFIG_CACHE
    _ACTION_CONFIG_CACHE = None


def load_action_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ActionConfig:
    """Load defaults from ``path`` or the bundled JSON resource, then apply inputs."""

    environ = os.environ if environ is None else environ
    data = _read_config_data(path)
    defaults = data.get("defaults") if isinstance(data, Mapping) else None
    if not isinstance(defaults, Mapping):
        defaults = {}

    install_dir = get_input(INSTALL_DIR_INPUT, environ) or _coerce_text(defaults.get("install_dir"))
    version = (
        get_input(VERSION_INPUT, environ)
        or _coerce_text(defaults.get("version"))
        or _DEFAULT_VERSION
    )
    repository = _coerce_repository(defaults.get("repository"))
    api_url = (
        _coerce_text(environ.get("GITHUB_API_URL"))
        or _coerce_text(defaults.get("api_url"))
        or _DEFAULT_API_URL
    )

    return ActionConfig(
        install_dir=resolve_install_dir(install_dir),
        github_token=get_input(GITHUB_TOKEN_INPUT, environ),
        version=version,
        platform=sys.platform,
        repository=repository,
        api_url=api_url.rstrip("/"),
    )


def resolve_install_dir(raw: str | Path | None) -> Path | None:
    """Return ``raw`` as an absolute path, or ``None`` when not configured."""

    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None
    return Path(os.path.abspath(os.path.expanduser(text)))


def _read_config_data(path: str | Path | None) -> Mapping[str, Any]:
    if path is not None:
        return _load_json_from_path(Path(path).expanduser())
    return _load_default_config_data()


def _load_json_from_path(path: Path) -> Mapping[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    return _parse_json(raw)


def _load_default_config_data() -> Mapping[str, Any]:
    try:
        resource = resources.files(__package__).joinpath(_CONFIG_RESOURCE)
        raw = resource.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        return {}
    return _parse_json(raw)


def _parse_json(raw: str) -> Mapping[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return {}
    if isinstance(parsed, Mapping):
        return parsed
    return {}


def _coerce_text(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _coerce_repository(value: Any) -> str:
    text = _coerce_text(value)
    if text is None:
        return _DEFAULT_REPOSITORY
    owner, sep, name = text.partition("/")
    if not sep or not owner or not name or "/" in name:
        return _DEFAULT_REPOSITORY
    return text


__all__ = [
    "ActionConfig",
    "GITHUB_TOKEN_INPUT",
    "INSTALL_DIR_INPUT",
    "VERSION_INPUT",
    "get_action_config",
    "get_input",
    "input_env_name",
    "load_action_config",
    "reset_action_config_cache",
    "resolve_install_dir",
]
