#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Logging setup for arm-compose-x. INFO and DEBUG go to stdout, anything louder to stderr.
"""

from __future__ import annotations

import logging as logthings
import sys

LOGGER_NAME = "arm-compose-x"
VALID_LEVELS = ["FATAL", "CRITICAL", "ERROR", "WARNING", "WARN", "INFO", "DEBUG"]


class ArmFormatter(logthings.Formatter):
    default_format = "%(asctime)s [%(levelname)8s] %(message)s"
    debug_format = "%(asctime)s [%(levelname)8s] (%(filename)s.%(lineno)d , %(funcName)s,) %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    def format(self, record) -> str:
        if record.levelno == logthings.DEBUG:
            formatter = logthings.Formatter(self.debug_format, self.date_format)
        else:
            formatter = logthings.Formatter(self.default_format, self.date_format)
        return formatter.format(record)


class StdoutFilter(logthings.Filter):
    def filter(self, rec):
        return rec.levelno in (logthings.DEBUG, logthings.INFO)


class StderrFilter(logthings.Filter):
    def filter(self, rec):
        return rec.levelno not in (logthings.DEBUG, logthings.INFO)


def setup_logging(name: str = LOGGER_NAME) -> logthings.Logger:
    """
    Creates the application logger with one handler per output stream.

    :param str name: name of the logger
    :rtype: logging.Logger
    """
    app_logger = logthings.getLogger(name)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)

    stdout_handler = logthings.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(ArmFormatter())
    stdout_handler.setLevel(logthings.DEBUG)
    stdout_handler.addFilter(StdoutFilter())

    stderr_handler = logthings.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(ArmFormatter())
    stderr_handler.setLevel(logthings.WARNING)
    stderr_handler.addFilter(StderrFilter())

    app_logger.addHandler(stdout_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.setLevel(logthings.INFO)
    app_logger.propagate = False
    return app_logger


def set_loglevel(level: str) -> None:
    """
    Changes the level of the application logger

    :param str level: one of VALID_LEVELS, case insensitive
    :raises ValueError: when the level is not known
    """
    if level.upper() not in VALID_LEVELS:
        raise ValueError(f"Log level {level} is invalid. Must be one of", VALID_LEVELS)
    LOG.setLevel(logthings.getLevelName(level.upper()))


LOG = setup_logging()
