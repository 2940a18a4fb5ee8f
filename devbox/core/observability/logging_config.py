"""
Logging configuration — one setup call per process.

The ``devbox`` group calls ``setup_logging`` before any subcommand runs.
The standalone ``install-dev-tools`` and ``sync-repos`` entry points
call ``setup_logging_from_env`` instead. Modules only ever do
``logger = logging.getLogger(__name__)``.

Console level precedence:
    --debug / --verbose / --quiet  >  DEVBOX_LOG_LEVEL  >  WARNING

A log file is written when DEVBOX_LOG_FILE is set, at
DEVBOX_LOG_FILE_LEVEL (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "DEVBOX_LOG_LEVEL"
LOG_FILE_ENV = "DEVBOX_LOG_FILE"
LOG_FILE_LEVEL_ENV = "DEVBOX_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"

# (highest level the format applies to, format, datefmt), most verbose first
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Console level name from CLI flags, else DEVBOX_LOG_LEVEL, else WARNING."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def _parse_level(level: str | None) -> int:
    """Level name to number. Unknown or empty names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING


def _console_handler(level: int) -> logging.Handler:
    for limit, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= limit:
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path.
        log_file_level: Level for the file; the console level if omitted.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))
        root_level = min(root_level, file_level)

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(root_level)

    # a closed stderr (e.g. under a test runner) must not turn into tracebacks
    logging.raiseExceptions = False


def setup_logging_from_env(level: str | None = None) -> None:
    """``setup_logging`` driven entirely by DEVBOX_LOG_* variables."""
    setup_logging(
        level=level or resolve_level(),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )
