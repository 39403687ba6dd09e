"""Central logging configuration for the setup-licensed action.

Log records are written to standard output using the workflow command
syntax understood by GitHub Actions runners: ``DEBUG`` records become
``::debug::`` lines, ``WARNING`` and ``ERROR`` records become annotations and
``INFO`` records are printed verbatim.  Registered secrets and the user's
home directory are redacted from every formatted record.

Environment variables:

``LICENSED_LOG_LEVEL``
    Minimum level printed to standard output (``debug``, ``info``,
    ``warning`` or ``error``).  Defaults to ``info``, or ``debug`` when the
    runner enables step debug logging through ``RUNNER_DEBUG=1``.

``LICENSED_LOG_FILE``
    Optional path of a plain-text log file that receives every record.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Iterable

_LOG_LEVEL_ENV = "LICENSED_LOG_LEVEL"
_LOG_FILE_ENV = "LICENSED_LOG_FILE"
_RUNNER_DEBUG_ENV = "RUNNER_DEBUG"
_CONFIGURED = False
_HANDLER_TAG = "_licensed_logging_handler"
_SECRETS: set[str] = set()

SECRET_PLACEHOLDER = "***"
USER_HOME_PLACEHOLDER = "<user_home>"


class LogVerbosity(str, Enum):
    """Verbosity levels supported on standard output."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    DEBUG = "debug"


_VERBOSITY_LEVELS: dict[LogVerbosity, int] = {
    LogVerbosity.ERROR: logging.ERROR,
    LogVerbosity.WARNING: logging.WARNING,
    LogVerbosity.INFO: logging.INFO,
    LogVerbosity.DEBUG: logging.DEBUG,
}

_WORKFLOW_COMMANDS: dict[int, str] = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def _collect_home_candidates() -> set[str]:
    candidates: set[str] = set()
    home = str(Path.home())
    if home:
        candidates.add(home)
    value = os.environ.get("HOME")
    if value:
        candidates.add(os.path.expanduser(value))
    return {
        os.path.normpath(candidate)
        for candidate in candidates
        if candidate and os.path.normpath(candidate) not in {os.sep, "."}
    }


def _build_redaction_patterns() -> list[tuple[re.Pattern[str], str]]:
    patterns: list[tuple[re.Pattern[str], str]] = []
    for secret in sorted(_SECRETS, key=len, reverse=True):
        patterns.append((re.compile(re.escape(secret)), SECRET_PLACEHOLDER))
    for home in sorted(_collect_home_candidates(), key=len, reverse=True):
        patterns.append((re.compile(re.escape(home)), USER_HOME_PLACEHOLDER))
    return patterns


_REDACTION_PATTERNS: list[tuple[re.Pattern[str], str]] = _build_redaction_patterns()


def register_secret(value: str | None) -> None:
    """Mask ``value`` in every log record and in the runner's own output."""

    global _REDACTION_PATTERNS

    if not value or not value.strip():
        return
    value = value.strip()
    if value in _SECRETS:
        return
    _SECRETS.add(value)
    _REDACTION_PATTERNS = _build_redaction_patterns()
    sys.stdout.write(f"::add-mask::{value}\n")
    sys.stdout.flush()


def sanitize_text(message: str) -> str:
    if not message or not _REDACTION_PATTERNS:
        return message
    redacted = message
    for pattern, replacement in _REDACTION_PATTERNS:
        redacted = pattern.sub(replacement, redacted)
    return redacted


def _escape_command_data(text: str) -> str:
    return text.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class _RedactingFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        return sanitize_text(formatted)


class WorkflowCommandFormatter(_RedactingFormatter):
    """Render records as GitHub Actions workflow commands."""

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        command = _WORKFLOW_COMMANDS.get(record.levelno)
        if command is None:
            return formatted
        return f"::{command}::{_escape_command_data(formatted)}"


def ensure_action_logging(verbosity: LogVerbosity | str | None = None) -> None:
    """Configure the root logger for an action run.

    The first invocation installs a standard output handler and, when
    ``LICENSED_LOG_FILE`` is set, a file handler.  Subsequent calls only
    adjust the standard output level when ``verbosity`` is given.
    """

    global _CONFIGURED

    level = _VERBOSITY_LEVELS[_resolve_verbosity(verbosity)]
    root = logging.getLogger()

    if _CONFIGURED:
        for handler in _managed_handlers(root.handlers):
            if not isinstance(handler, logging.FileHandler):
                handler.setLevel(level)
        return

    root.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(WorkflowCommandFormatter("%(message)s"))
    setattr(stream_handler, _HANDLER_TAG, True)
    root.addHandler(stream_handler)

    log_file = os.environ.get(_LOG_FILE_ENV)
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            _RedactingFormatter(
                "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)

    _CONFIGURED = True


def _resolve_verbosity(verbosity: LogVerbosity | str | None) -> LogVerbosity:
    if isinstance(verbosity, LogVerbosity):
        return verbosity
    if isinstance(verbosity, str):
        try:
            return LogVerbosity(verbosity.strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported log verbosity: {verbosity}") from exc

    env_level = os.environ.get(_LOG_LEVEL_ENV, "").strip().lower()
    if env_level:
        try:
            return LogVerbosity(env_level)
        except ValueError:
            logging.getLogger(__name__).debug("Ignoring unsupported %s=%s", _LOG_LEVEL_ENV, env_level)
    if os.environ.get(_RUNNER_DEBUG_ENV) == "1":
        return LogVerbosity.DEBUG
    return LogVerbosity.INFO


def _managed_handlers(handlers: Iterable[logging.Handler]) -> list[logging.Handler]:
    return [handler for handler in handlers if getattr(handler, _HANDLER_TAG, False)]


def _reset_for_tests() -> None:
    """Remove handlers installed by :func:`ensure_action_logging`."""

    global _CONFIGURED, _REDACTION_PATTERNS

    root = logging.getLogger()
    for handler in _managed_handlers(root.handlers):
        root.removeHandler(handler)
        handler.close()

    _CONFIGURED = False
    _SECRETS.clear()
    _REDACTION_PATTERNS = _build_redaction_patterns()
