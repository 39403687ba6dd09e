from __future__ import annotations

import sys
from pathlib import Path

import pytest


_ISOLATED_ENV_VARS = (
    "INPUT_INSTALL-DIR",
    "INPUT_GITHUB_TOKEN",
    "INPUT_VERSION",
    "GITHUB_API_URL",
    "GITHUB_OUTPUT",
    "GITHUB_PATH",
    "RUNNER_DEBUG",
    "RUNNER_TEMP",
    "LICENSED_LOG_FILE",
    "LICENSED_LOG_LEVEL",
)


def _ensure_project_root_on_path() -> None:
    """Guarantee the repository root is discoverable for absolute imports."""

    root = Path(__file__).resolve().parent.parent
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()


@pytest.fixture(autouse=True)
def _isolated_runner_env(monkeypatch: pytest.MonkeyPatch):
    """Keep the real runner environment from leaking into tests."""

    from app.config import reset_action_config_cache

    for name in _ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_action_config_cache()

    yield

    reset_action_config_cache()
