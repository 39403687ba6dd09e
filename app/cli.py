"""Command line entry point that installs licensed on a CI runner."""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path

from app.config import load_action_config, resolve_install_dir
from services.licensed import run_action
from shared.logging_config import LogVerbosity, ensure_action_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="setup-licensed",
        description="Install a licensee/licensed release executable",
    )
    parser.add_argument(
        "--version",
        default=None,
        help="Release tag or partial version, e.g. 'v4.3.0', '4' or 'latest' (default: INPUT_VERSION)",
    )
    parser.add_argument(
        "--install-dir",
        type=Path,
        default=None,
        help="Directory receiving the licensed executable (default: INPUT_INSTALL-DIR)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file overriding the bundled action defaults",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogVerbosity],
        default=None,
        help="Minimum level printed to standard output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    ensure_action_logging(args.log_level)

    config = load_action_config(args.config)
    if args.version:
        config = replace(config, version=args.version)
    if args.install_dir is not None:
        config = replace(config, install_dir=resolve_install_dir(args.install_dir))

    return run_action(config)


if __name__ == "__main__":
    raise SystemExit(main())
