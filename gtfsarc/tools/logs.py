# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
import sys

from . import color


class ColoredFormatter(logging.Formatter):
    """ColoredFormatter is an opinionated log formatter with human-readable output colored
    with `ANSI escape sequences <https://en.wikipedia.org/wiki/ANSI_escape_code>`_.
    Concurrent publish tasks log from worker threads, so the thread name is
    appended to the logger name for anything not running on the main thread.
    """

    default_time_format = "%H:%M:%S"
    default_msec_format = "%s.%03d"

    @staticmethod
    def get_msg_color(level: int) -> str:
        if level >= logging.CRITICAL:
            return color.WHITE + color.BG_RED
        elif level >= logging.ERROR:
            return color.RED
        elif level >= logging.WARNING:
            return color.YELLOW
        elif level >= logging.INFO:
            return color.RESET
        else:
            return color.DIM

    def usesTime(self) -> bool:
        return True

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record)
        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        exception_suffix = f"\n{record.exc_text}" if record.exc_text else ""

        source = record.name
        if record.threadName and record.threadName != "MainThread":
            source = f"{source} ({record.threadName})"

        msg_color = self.get_msg_color(record.levelno)
        return (
            f"{color.BLUE}[{color.CYAN}{record.levelname}{color.BLUE} {record.asctime}] "
            f"{color.GREEN}{source}{color.RESET}: {msg_color}{record.message}{color.RESET}"
            f"{exception_suffix}"
        )


def initialize(verbose: bool) -> None:
    """Resets logging handlers to ensure only a single, logging.StreamHandler using
    :py:class:`~gtfsarc.tools.logs.ColoredFormatter` outputs onto the terminal (via stderr).
    Any other registered logging.Handlers printing to stdout or stderr are removed.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    handlers_to_remove: list[logging.Handler] = [
        handler
        for handler in root_logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and (handler.stream is sys.stdout or handler.stream is sys.stderr)  # type: ignore
    ]

    for handler in handlers_to_remove:
        root_logger.removeHandler(handler)

    new_handler = logging.StreamHandler(sys.stderr)
    new_handler.setFormatter(ColoredFormatter())
    root_logger.addHandler(new_handler)
