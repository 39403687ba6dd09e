"""Extraction of the downloaded licensed archive into the install directory."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Optional, Protocol

from services.licensed.constants import ARCHIVE_ENTRY, TEMP_DIR_PREFIX
from services.licensed.models import ExecutionMode, ExtractionError, ToolMissingError


_LOGGER = logging.getLogger(__name__)

__all__ = [
    "ArchiveInstaller",
    "TarArchiveInstaller",
    "build_extract_command",
    "extract_licensed_archive",
    "resolve_execution_mode",
]

Which = Callable[[str], Optional[str]]


class ArchiveInstaller(Protocol):
    """Protocol describing how a downloaded archive is unpacked."""

    def install(self, archive: Path, install_dir: Path) -> None:
        """Extract ``archive`` into ``install_dir`` and delete ``archive``."""


def resolve_execution_mode(install_dir: Path) -> ExecutionMode:
    """Return :attr:`ExecutionMode.ELEVATED` when ``install_dir`` is not writable."""

    if os.access(install_dir, os.W_OK):
        return ExecutionMode.DIRECT
    _LOGGER.info("%s is not writable; extracting with elevated privileges", install_dir)
    return ExecutionMode.ELEVATED


def build_extract_command(
    tar: str,
    archive: Path,
    install_dir: Path,
    mode: ExecutionMode,
    *,
    which: Which = shutil.which,
) -> list[str]:
    command = [tar, "xzv", "-f", str(archive), "-C", str(install_dir), ARCHIVE_ENTRY]
    if mode is ExecutionMode.DIRECT:
        return command

    sudo = which("sudo")
    if sudo is None:
        raise ToolMissingError(
            f"Unable to locate executable file: sudo (required to write to {install_dir})"
        )
    return [sudo, *command]


def extract_licensed_archive(
    archive: Path,
    install_dir: Path,
    *,
    which: Which = shutil.which,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> None:
    """Extract the ``licensed`` executable from ``archive`` into ``install_dir``.

    The archive is removed whether or not extraction succeeds.
    """

    archive = Path(archive)
    try:
        tar = which("tar")
        if tar is None:
            raise ToolMissingError("Unable to locate executable file: tar")

        mode = resolve_execution_mode(install_dir)
        command = build_extract_command(tar, archive, install_dir, mode, which=which)
        _LOGGER.info("[command]%s", " ".join(command))
        completed = run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            check=False,
        )
        _log_output(completed.stdout)
        if completed.returncode != 0:
            raise ExtractionError(
                f"{Path(tar).name} failed with exit code {completed.returncode}",
                returncode=completed.returncode,
            )
    finally:
        _remove_archive(archive)


def _log_output(output: str | None) -> None:
    if not output:
        return
    for line in output.splitlines():
        if line.strip():
            _LOGGER.info("%s", line)


def _remove_archive(archive: Path) -> None:
    archive.unlink(missing_ok=True)
    if not archive.parent.name.startswith(TEMP_DIR_PREFIX):
        return
    try:
        archive.parent.rmdir()
    except OSError:
        _LOGGER.debug("Temporary directory %s left in place", archive.parent)


class TarArchiveInstaller:
    """Unpack release archives with the host ``tar`` executable."""

    def __init__(
        self,
        *,
        which: Which = shutil.which,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self._which = which
        self._run = run

    def install(self, archive: Path, install_dir: Path) -> None:
        extract_licensed_archive(archive, install_dir, which=self._which, run=self._run)
