from __future__ import annotations

from pathlib import Path

import pytest

from app import cli
from shared import logging_config


@pytest.fixture(autouse=True)
def reset_logging():
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()


@pytest.fixture
def captured_configs(monkeypatch):
    configs = []

    def fake_run_action(config):  # type: ignore[no-untyped-def]
        configs.append(config)
        return 0

    monkeypatch.setattr(cli, "run_action", fake_run_action)
    return configs


def test_main_uses_runner_inputs(monkeypatch, captured_configs, tmp_path: Path) -> None:
    monkeypatch.setenv("INPUT_INSTALL-DIR", str(tmp_path / "bin"))
    monkeypatch.setenv("INPUT_VERSION", "4.3")

    assert cli.main([]) == 0

    (config,) = captured_configs
    assert config.install_dir == tmp_path / "bin"
    assert config.version == "4.3"


def test_main_arguments_override_inputs(monkeypatch, captured_configs, tmp_path: Path) -> None:
    monkeypatch.setenv("INPUT_INSTALL-DIR", str(tmp_path / "ignored"))
    monkeypatch.setenv("INPUT_VERSION", "4.3")

    cli.main(["--version", "v3.9.1", "--install-dir", str(tmp_path / "tools"), "--log-level", "debug"])

    (config,) = captured_configs
    assert config.version == "v3.9.1"
    assert config.install_dir == tmp_path / "tools"


def test_main_returns_run_action_exit_code(monkeypatch) -> None:
    monkeypatch.setattr(cli, "run_action", lambda config: 1)

    assert cli.main([]) == 1


def test_parser_rejects_unknown_log_level() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--log-level", "chatty"])
