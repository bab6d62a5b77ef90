"""Logging for the static file server.

The server's threshold comes from two flags: ``--log`` names a level and
each ``-v`` lowers the bar from ``error`` downwards, overriding ``--log``.
Every module logs through ``logging.getLogger(__name__)``, so all records
land under the ``staticserve`` logger configured here.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

BASE_LOGGER = "staticserve"

LEVELS = ("debug", "info", "warn", "error", "critical")

_LOGGING_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

DEFAULT_LEVEL = "warn"


def level_name(log_level: str | None, verbosity: int | None = 0) -> str:
    """Pick the effective level name from ``--log`` and the ``-v`` count.

    >>> level_name("warn", 0)
    'warn'
    >>> level_name("warn", 2)
    'warn'
    >>> level_name("error", 4)
    'debug'
    """

    name = log_level if log_level in LEVELS else DEFAULT_LEVEL
    verbosity = int(verbosity or 0)
    if verbosity > 0:
        name = LEVELS[max(len(LEVELS) - verbosity - 1, 0)]
    return name


def select_level(log_level: str | None, verbosity: int | None = 0) -> int:
    return _LOGGING_LEVELS[level_name(log_level, verbosity)]


def configure_logging(
    log_level: str | None, verbosity: int | None = 0, *, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Point the server's log output at ``stream`` (stderr) using the ``l``/``v`` flags.

    Only the first call attaches a handler; later calls just move the threshold.
    """

    server_log = logging.getLogger(BASE_LOGGER)
    server_log.setLevel(select_level(log_level, verbosity))
    if not server_log.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        server_log.addHandler(handler)
        server_log.propagate = False
    return server_log
