"""
Logging setup for the ontbench CLI.

Library code only asks for ``logging.getLogger("ontbench.<component>")``;
handlers are attached here, once per CLI invocation. Stdout is left to
command output, so the console sink writes to stderr.
"""

from __future__ import annotations

import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "ontbench"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3


class UTCFormatter(logging.Formatter):
    """ISO-8601 UTC timestamps with milliseconds, e.g. ``2024-05-01T12:00:00.250Z``."""

    converter = time.gmtime
    default_time_format = "%Y-%m-%dT%H:%M:%S"
    default_msec_format = "%s.%03dZ"


def setup_logging(log_file: Optional[Path] = None, *, level: int = logging.INFO) -> logging.Logger:
    """
    Route ``ontbench.*`` records to stderr and, optionally, a rotating file.

    Calling it again replaces the sinks of the previous call.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    sinks: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sinks.append(
            RotatingFileHandler(
                log_file,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    formatter = UTCFormatter(LOG_FORMAT)
    for sink in sinks:
        sink.setFormatter(formatter)
        logger.addHandler(sink)
    return logger
