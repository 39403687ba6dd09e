from __future__ import annotations

import shutil
import subprocess
from importlib import metadata, resources

import pytest

from app import version as app_version


@pytest.fixture(autouse=True)
def reset_version_cache():
    app_version.get_app_version.cache_clear()
    try:
        yield
    finally:
        app_version.get_app_version.cache_clear()


def _bundled_version() -> str:
    return resources.files("app").joinpath("VERSION").read_text(encoding="utf-8").strip()


def _not_installed(name: str) -> str:
    raise metadata.PackageNotFoundError(name)


def test_installed_distribution_metadata_wins(monkeypatch) -> None:
    requested: list[str] = []

    def fake_version(name: str) -> str:
        requested.append(name)
        return "9.8.7"

    monkeypatch.setattr(app_version.metadata, "version", fake_version)

    assert app_version.get_app_version() == "9.8.7"
    assert requested == ["setup-licensed"]


def test_source_tree_reports_bundled_version_file(monkeypatch) -> None:
    monkeypatch.setattr(app_version.metadata, "version", _not_installed)

    assert _bundled_version()
    assert app_version.get_app_version() == _bundled_version()


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not available on this host")
def test_tagged_checkout_in_working_directory_does_not_change_version(monkeypatch, tmp_path) -> None:
    git = ["git", "-c", "user.name=ci", "-c", "user.email=ci@example.invalid"]
    subprocess.run(git + ["init", "-q"], cwd=tmp_path, check=True)
    subprocess.run(git + ["commit", "-q", "--allow-empty", "-m", "init"], cwd=tmp_path, check=True)
    subprocess.run(git + ["tag", "v42.0.0"], cwd=tmp_path, check=True)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(app_version.metadata, "version", _not_installed)

    assert app_version.get_app_version() == _bundled_version()
    assert "42.0.0" not in app_version.user_agent()


def test_user_agent_names_the_tool(monkeypatch) -> None:
    monkeypatch.setattr(app_version.metadata, "version", lambda name: "1.2.0")

    assert app_version.user_agent() == "setup-licensed/1.2.0"
