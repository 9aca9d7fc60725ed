"""
Logging configuration — central setup for the installer CLI.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Console level, in precedence order:
    CLI flag  >  MLI_LOG_LEVEL env var  >  WARNING (default)

Every install also keeps a log file: MLI_LOG_FILE when set, otherwise
``<root>/install.log`` once the root directory is chosen. It records
each delegated command line and its outcome, which is what a failed
pip run needs for a bug report.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV = "MLI_LOG_LEVEL"
LOG_FILE_ENV = "MLI_LOG_FILE"
LOG_FILE_LEVEL_ENV = "MLI_LOG_FILE_LEVEL"

INSTALL_LOG_NAME = "install.log"

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: click output is the UI, log lines are secondary
_FMT_CONSOLE = "%(levelname)s: %(message)s"

# INFO: step-by-step trace
_FMT_TRACE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG console and every log file
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# A root-directory log defaults to INFO so command lines are kept
_DEFAULT_FILE_LEVEL = logging.INFO


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger: one console handler, optionally a file.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the log file; the console level if unset.
    """
    console_level = _parse_level(level)
    if console_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_SHORT)
    elif console_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_TRACE, datefmt=_DATEFMT_SHORT)
    else:
        formatter = logging.Formatter(_FMT_CONSOLE)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root.addHandler(console)
    root.setLevel(console_level)

    if log_file:
        add_file_handler(log_file, log_file_level or level)

    logging.raiseExceptions = False


def add_file_handler(log_file: str | Path, level: str | None = None) -> logging.FileHandler:
    """Attach a log file to the root logger.

    The root logger's level is lowered when the file wants more detail
    than the console; the console handler keeps its own level.
    """
    file_level = _parse_level(level) if level else _DEFAULT_FILE_LEVEL

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(file_level)
    handler.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FILE))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(min(root.level or logging.WARNING, file_level))
    return handler


def log_to_root_directory(root: Path) -> Path:
    """Start ``<root>/install.log`` at MLI_LOG_FILE_LEVEL (INFO when unset)."""
    path = root / INSTALL_LOG_NAME
    add_file_handler(path, os.environ.get(LOG_FILE_LEVEL_ENV))
    logging.getLogger(__name__).info("Logging install to %s", path)
    return path


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
