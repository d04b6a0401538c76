#!/usr/bin/env python3
"""AW Gateway - a weather gateway protocol client & sensor decoder.

This module wraps logger to provide a frame log: a record of every frame sent to, or
received from, a gateway.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import re
import shutil
import sys
from datetime import datetime as dt
from typing import Any, Final

import colorlog

from .helpers import bytes_to_hex
from .version import VERSION

DEV_MODE = False

_LOGGER = logging.getLogger(__name__)
if DEV_MODE:
    _LOGGER.setLevel(logging.DEBUG)

FRAME_LOGGER: Final = logging.getLogger(f"{__package__}.frames")

DEFAULT_FMT = "%(asctime)s.%(msecs)03d %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"

CONSOLE_COLS = int(shutil.get_terminal_size(fallback=(int(2e3), 24)).columns - 1)

CONSOLE_FMT = f"%(asctime)s %(peer)s %(direction)s %(message).{CONSOLE_COLS - 40}s"
FRAME_LOG_FMT = "%(asctime)s %(peer)s %(direction)s %(message)s"

BANDW_SUFFIX = "%(comment)s"
COLOR_SUFFIX = "%(cyan)s%(comment)s"

SZ_SENT: Final = ">>"
SZ_RCVD: Final = "<<"

LOG_COLOURS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}

_RECORD_DEFAULTS: Final[dict[str, str]] = {
    "peer": "-",
    "direction": "--",
    "comment": "",
}


class _Formatter:  # format asctime with millisecond precision
    """Formatter instances convert a LogRecord to text."""

    default_time_format = "%Y-%m-%dT%H:%M:%S.%f"
    precision = 3

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Return the creation time (asctime) of the LogRecord as formatted text."""
        result = dt.fromtimestamp(record.created).strftime(
            datefmt or self.default_time_format
        )
        if "f" not in self.default_time_format:
            return result
        return result[: self.precision - 6]


class ColoredFormatter(_Formatter, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class Formatter(_Formatter, logging.Formatter):  # type: ignore[misc]
    pass


class FrameLogFilter(logging.Filter):  # levelno in (INFO, WARNING)
    """For frame log files, process only frames (and the header line)."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return True if the record is to be processed.

        Records that were not logged via log_frame() are given placeholder fields.
        """
        for key, value in _RECORD_DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return record.levelno in (logging.INFO, logging.WARNING)


class StdErrFilter(logging.Filter):  # record.levelno >= logging.WARNING
    """For sys.stderr, process only warnings and above."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.WARNING


class StdOutFilter(logging.Filter):  # record.levelno < logging.WARNING
    """For sys.stdout, process only info and below."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


class TimedRotatingFileHandler(logging.handlers.TimedRotatingFileHandler):
    """Rotate at midnight, with the date (only) as the suffix of old files."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        assert self.when == "MIDNIGHT"
        self.extMatch = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)

    def getFilesToDelete(self) -> list[str]:
        """Determine the files to delete when rolling over."""
        dir_name, base_name = os.path.split(self.baseFilename)
        prefix = base_name + "."
        result = sorted(
            os.path.join(dir_name, f)
            for f in os.listdir(dir_name)
            if f.startswith(prefix) and self.extMatch.match(f[len(prefix) :])
        )
        if len(result) < self.backupCount:
            return []
        return result[: len(result) - self.backupCount]


def log_frame(direction: str, peer: str, frame: bytes) -> None:
    """Log a frame (as hex) that was sent to (>>), or received from (<<), a peer."""
    FRAME_LOGGER.info(
        bytes_to_hex(frame), extra={"direction": direction, "peer": peer}
    )


def set_frame_logging(
    logger: logging.Logger,
    cc_console: bool = False,
    file_name: str | None = None,
    rotate_backups: int = 0,
    rotate_bytes: int | None = None,
) -> None:
    """Create/configure handlers, formatters, etc.

    Parameters:
    - rotate_backups: keep this many copies, and rotate at midnight unless:
    - rotate_bytes:   rotate log files when log > rotate_bytes
    """

    logger.propagate = False  # log file is distinct from any app/debug logging
    logger.setLevel(logging.DEBUG)  # must be at least .INFO

    # as set_frame_logging() may be called several times: to avoid duplicates in logs...
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if file_name:
        handler: logging.Handler
        if rotate_bytes:
            rotate_backups = rotate_backups or 2
            handler = logging.handlers.RotatingFileHandler(
                file_name, maxBytes=rotate_bytes, backupCount=rotate_backups
            )
        elif rotate_backups:
            handler = TimedRotatingFileHandler(
                file_name, when="MIDNIGHT", backupCount=rotate_backups
            )
        else:
            handler = logging.FileHandler(file_name)

        handler.setFormatter(Formatter(fmt=FRAME_LOG_FMT + BANDW_SUFFIX))
        handler.setLevel(logging.INFO)
        handler.addFilter(FrameLogFilter())
        logger.addHandler(handler)

    elif cc_console:
        logger.addHandler(logging.NullHandler())

    else:
        logger.setLevel(logging.CRITICAL)
        return

    if cc_console:  # CC: output to stdout/stderr
        console_fmt = ColoredFormatter(
            fmt=f"%(log_color)s{CONSOLE_FMT + COLOR_SUFFIX}",
            reset=True,
            log_colors=LOG_COLOURS,
        )

        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(console_fmt)
        handler.setLevel(logging.WARNING)
        handler.addFilter(FrameLogFilter())
        handler.addFilter(StdErrFilter())
        logger.addHandler(handler)

        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(console_fmt)
        handler.setLevel(logging.DEBUG)
        handler.addFilter(FrameLogFilter())
        handler.addFilter(StdOutFilter())
        logger.addHandler(handler)

    logger.warning("", extra={"comment": f" # awgateway_tx {VERSION}"})  # initial line
