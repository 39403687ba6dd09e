"""Runner environment side effects: executable search path and step outputs."""

from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import MutableMapping


_LOGGER = logging.getLogger(__name__)

GITHUB_PATH_ENV = "GITHUB_PATH"
GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"

__all__ = ["add_path", "is_on_path", "set_output"]


def is_on_path(directory: Path | str, environ: MutableMapping[str, str] | None = None) -> bool:
    """Return ``True`` when ``directory`` already appears in ``PATH``."""

    environ = os.environ if environ is None else environ
    target = os.path.normcase(os.path.normpath(str(directory)))
    for entry in environ.get("PATH", "").split(os.pathsep):
        if entry and os.path.normcase(os.path.normpath(entry)) == target:
            return True
    return False


def add_path(directory: Path | str, environ: MutableMapping[str, str] | None = None) -> bool:
    """Prepend ``directory`` to ``PATH`` for this process and later workflow steps.

    Returns ``False`` without touching anything when the directory is already
    present.
    """

    environ = os.environ if environ is None else environ
    if is_on_path(directory, environ):
        _LOGGER.debug("%s is already on PATH", directory)
        return False

    directory = str(directory)
    github_path = environ.get(GITHUB_PATH_ENV)
    if github_path:
        with open(github_path, "a", encoding="utf-8") as handle:
            handle.write(f"{directory}\n")

    current = environ.get("PATH", "")
    environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else directory
    _LOGGER.info("Added %s to PATH", directory)
    return True


def set_output(name: str, value: str, environ: MutableMapping[str, str] | None = None) -> None:
    """Publish a step output through the runner's ``GITHUB_OUTPUT`` file."""

    environ = os.environ if environ is None else environ
    output_path = environ.get(GITHUB_OUTPUT_ENV)
    if not output_path:
        _LOGGER.debug("GITHUB_OUTPUT is not set; output %s=%s not published", name, value)
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(output_path, "a", encoding="utf-8") as handle:
        handle.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
