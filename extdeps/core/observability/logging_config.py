"""
Logging configuration — one setup call per process.

Called by the CLI before any engine work; a host installer embedding
the engine may call it too or configure logging itself. Every module
uses ``logger = logging.getLogger(__name__)`` under the ``extdeps``
namespace.

Levels are resolved in precedence order:
    CLI flag  >  EXTDEPS_LOG_LEVEL env var  >  WARNING (default)

Optional file output via EXTDEPS_LOG_FILE / EXTDEPS_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

from extdeps.core.config.settings import Settings

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: what a user installing a package should see
_FMT_MINIMAL = "extdeps: %(message)s"

# INFO: fetches, installs, archives with timestamps
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"

# DEBUG and file output: file:line for tracing resolution decisions
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_DATEFMT_CONSOLE = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "extdeps"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Attach console (stderr) and optional file handlers.

    Handlers go on the ``extdeps`` logger rather than the root logger so
    a host installer's own logging setup is left alone.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.

    Returns:
        The configured ``extdeps`` logger.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_CONSOLE
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_CONSOLE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(console)

    effective_level = numeric_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_FILE))
        logger.addHandler(fh)

    logger.setLevel(effective_level)
    logger.propagate = False
    return logger


def setup_logging_from_settings(settings: Settings, level: str | None = None) -> logging.Logger:
    """Configure logging from ``Settings``; ``level`` (a CLI flag) wins."""
    return setup_logging(
        level=level or settings.log_level,
        log_file=settings.log_file,
        log_file_level=settings.log_file_level,
    )


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
