"""Centralized logging configuration for the ``ledgerwise`` package.

``configure_logging`` attaches a single ``StreamHandler`` to the package root
logger and is meant to be called once by entrypoints such as the CLI.
``get_logger`` is what library modules use; they never attach handlers
themselves.

What the package logs:

- INFO: parser selection, per-batch import counts, subscription creates and
  updates, detection totals.
- WARNING: statement rows that failed to insert, statements that are not
  valid UTF-8.
- DEBUG: dropped unparsable rows, duplicate rows skipped on import, snapshot
  recomputation, reasons a merchant group was not treated as recurring.

The level comes from ``--log-level`` on the CLI, else ``LEDGERWISE_LOG_LEVEL``,
else ``WARNING``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "ledgerwise"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv("LEDGERWISE_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Logging level as ``int`` or level name. When ``None`` the
            ``LEDGERWISE_LOG_LEVEL`` environment variable is used, falling
            back to ``WARNING``.
        fmt: Optional format string.
        stream: Output stream for the handler (defaults to ``sys.stderr``).
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, attaching a ``NullHandler`` to the package
    logger when logging has not been configured yet."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
