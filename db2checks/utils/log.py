#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import logging
import sys
from pathlib import Path
from typing import IO

# The plug-ins write their result to stdout, which is read by the monitoring
# core. Log messages therefore never go to stdout.
#
# Python         added here
# ---------------------------
# CRITICAL 50
# ERROR    40
# WARNING  30
# INFO     20
#                VERBOSE  15
# DEBUG    10

# We need an additional log level between INFO and DEBUG to reflect the
# -v and -vv options of the plug-ins.
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("db2checks")

_TRACE_HANDLER = "db2checks-trace"


def get_formatter(
    format_str: str = "%(asctime)s [%(levelno)s] [%(name)s %(process)d] %(message)s",
) -> logging.Formatter:
    """Returns a new message formater instance that uses the standard
    log format by default. You can also set another format if you like."""
    return logging.Formatter(format_str)


def clear_console_logging() -> None:
    logger.handlers[:] = []
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.WARNING)


# Set default logging handler to avoid "No handler found" warnings.
clear_console_logging()


def setup_console_logging(verbosity: int) -> None:
    """Log to stderr, without any additional information like date/time

    Handlers of an earlier setup, including a trace file, are dropped.
    """
    del logger.handlers[:]
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(get_formatter("%(levelname)s: %(message)s"))
    handler.setLevel(verbosity_to_log_level(verbosity))
    _add_handler(handler)


def open_trace(trace_file_path: str | Path) -> IO[str]:
    """Open the trace file and fall back to stderr if this is not successfull

    Everything down to DEBUG is traced, independent of the verbosity on the
    console. The opened file-like object is returned, pass it to
    :func:`close_trace` when done.
    """
    trace_file_path = Path(trace_file_path)
    try:
        tracefile: IO[str] = trace_file_path.open("a", encoding="utf-8")
    except OSError as e:
        logger.error("Cannot open trace file '%s': %s", trace_file_path, e)
        tracefile = sys.stderr

    handler = logging.StreamHandler(stream=tracefile)
    handler.set_name(_TRACE_HANDLER)
    handler.setFormatter(get_formatter())
    handler.setLevel(logging.DEBUG)
    _add_handler(handler)
    return tracefile


def close_trace(tracefile: IO[str]) -> None:
    """Remove the handler of :func:`open_trace` and close its file"""
    logger.handlers[:] = [h for h in logger.handlers if h.get_name() != _TRACE_HANDLER]
    if tracefile is not sys.stderr:
        tracefile.close()
    if not logger.handlers:
        clear_console_logging()
        return
    logger.setLevel(min(h.level for h in logger.handlers))


def _add_handler(handler: logging.Handler) -> None:
    logger.handlers[:] = [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]
    logger.addHandler(handler)
    logger.setLevel(min(h.level for h in logger.handlers))


def verbosity_to_log_level(verbosity: int) -> int:
    """Values for "verbosity":

      0: enables WARNING and above
      1: enables INFO and above
      2: enables VERBOSE and above
      3: enables DEBUG and above (ALL messages)

    >>> verbosity_to_log_level(0) == logging.WARNING
    True
    >>> verbosity_to_log_level(7) == logging.DEBUG
    True
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    if verbosity == 2:
        return VERBOSE
    return logging.DEBUG
