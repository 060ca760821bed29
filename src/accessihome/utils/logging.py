"""Console logging for the AccessiHome CLI.

Logs go to stderr so they never interleave with tables and spoken
feedback printed on stdout by the interactive session.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Literal, get_args

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]
LOG_LEVELS: tuple[str, ...] = get_args(LogLevel)

LEVEL_ENV_VARS = ("ACCESSIHOME_LOGLEVEL", "LOGLEVEL")

# ``--verbose`` adds the source location for tracing interpreter round trips
SESSION_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d: %(message)s"
TIME_FORMAT = "%H:%M:%S"

# request lines from the interpreter client are noise at INFO
QUIET_LOGGERS: dict[str, int] = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
}

FIELD_STYLES = {
    "asctime": {"color": "green"},
    "levelname": {"bold": True},
    "name": {"color": "blue"},
}


def resolve_level(level: str | None = None, verbose: bool = False) -> str:
    """Pick the log level: explicit argument, then env, then INFO.

    ``verbose`` forces DEBUG regardless of the other sources.
    """
    if verbose:
        return "DEBUG"
    if level:
        return level.upper()
    for name in LEVEL_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value.upper()
    return "INFO"


def setup_logging(level: str | None = None, verbose: bool = False) -> str:
    resolved = resolve_level(level, verbose)

    coloredlogs.install(
        level=resolved,
        fmt=VERBOSE_FORMAT if verbose else SESSION_FORMAT,
        datefmt=TIME_FORMAT,
        field_styles=FIELD_STYLES,
        stream=sys.stderr,
    )

    for name, quiet_level in QUIET_LOGGERS.items():
        # verbose runs still want to see request lines
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else quiet_level)

    return resolved
