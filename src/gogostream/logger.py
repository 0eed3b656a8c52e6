import logging
import os
from typing import TextIO

import structlog
from structlog.typing import FilteringBoundLogger

from .error import LogFileError

# Loggers are built explicitly and passed down to every component instead of
# configuring structlog globally. Each line is rendered as a JSON object.
# structlog's WriteLogger writes and flushes every line under a per-file lock,
# so request threads sharing one log file never interleave their lines.

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def open_log_file(path: str | os.PathLike) -> TextIO:
    """Opens the log file for reading and appending, creating it if missing.

    Raises LogFileError if the file can't be opened.
    """
    try:
        return open(path, "a+", encoding="utf-8")
    except OSError as e:
        raise LogFileError(str(path), e) from e


def get_logger(
    log_file: TextIO, level: str = "info", **context
) -> FilteringBoundLogger:
    """Returns a JSON lines logger writing to the log file with the given context.

    Doesn't raise any exceptions for known levels.
    """
    return structlog.wrap_logger(
        structlog.WriteLogger(log_file),
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[level]),
        **context,
    )
