# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module contains helper functions related to logging.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import logging
import traceback
from typing import NoReturn, Any, IO, cast
import colorama

# Log levels.
#   * INFO: No prefixes, just the message.
#   * DEBUG, WARNING, ERROR, CRITICAL: Also have the prefix.
#   * ERRINFO: An ERROR message, but without a prefix.
INFO = logging.INFO
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
ERRINFO = logging.ERROR + 1
CRITICAL = logging.CRITICAL

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# The default prefix for debug messages.
_DEFAULT_DBG_PREFIX = "[%(created)f] [%(asctime)s] [%(module)s,%(lineno)d]"

class _MyFormatter(logging.Formatter):
    """
    A custom formatter for logging messages. Provides different message formats for different log
    levels.
    """

    def __init__(self, prefix: str | None = None, colors: dict[int, str] | None = None):
        """
        Initialize the custom logging formatter.

        Args:
            prefix: Prefix for non-info and non-debug messages. Info messages go without any
                    formatting.
            colors: A dictionary containing colorama color codes per log level.
        """

        logging.Formatter.__init__(self, "%(levelname)s: %(message)s", "%H:%M:%S")

        self._colors = colors if colors else {}
        self._myfmt: dict[int, str] = {}

        self.set_prefix(prefix=prefix)

    def _start(self, level: int) -> str:
        """Return the "start color output" code for the given log level."""
        return str(self._colors.get(level, ""))

    def _end(self, level: int) -> str:
        """Return the "end color output" code for the given log level."""

        if level in self._colors:
            return str(colorama.Style.RESET_ALL)
        return ""

    def set_prefix(self, prefix: str | None = None):
        """
        Set the prefix for messages.

        Args:
            prefix: Prefix for non-info and non-debug messages.
        """

        prefix = f"{prefix}: " if prefix else ""

        for lvl, pfx in ((WARNING, "warning"), (ERROR, "error"), (CRITICAL, "critical error")):
            if not prefix:
                pfx = pfx.title()
            self._myfmt[lvl] = self._start(lvl) + prefix + pfx + self._end(lvl) + ": %(message)s"

        # Debug messages get a timestamp and the module/line they come from.
        fmt = _DEFAULT_DBG_PREFIX + ": %(message)s"
        fmt = fmt.replace("[", "[" + self._start(DEBUG))
        self._myfmt[DEBUG] = fmt.replace("]", self._end(DEBUG) + "]")

        # Leave the info messages without any formatting.
        self._myfmt[ERRINFO] = self._myfmt[INFO] = "%(message)s"

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record using the format string of its level.

        Args:
            record: The log record to format.

        Returns:
            str: The formatted log record.
        """

        # pylint: disable=protected-access
        self._style._fmt = self._myfmt[record.levelno]
        return logging.Formatter.format(self, record)

class _MyFilter(logging.Filter):
    """A custom filter which allows only certain log levels to go through."""

    def __init__(self, let_go: list[int]):
        """
        Initialize the logging filter.

        Args:
            let_go: A list of logging levels to let go through the filter.
        """

        logging.Filter.__init__(self)
        self._let_go = let_go

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out all log levels except the ones specified by the user."""
        return record.levelno in self._let_go

class Logger(logging.Logger):
    """
    A custom logger class that provides the following functionality on top of the standard logger:
      * Message coloring.
      * Different prefixes for different log levels.
      * Debug messages with timestamps and file line numbers.
      * The ERRINFO log level.
      * The 'error_out()' method, which terminates the program with a given exit code.
    """

    def __init__(self, name: str | None = None):
        """
        Initialize the logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.prefix = ""
        self.colored = False
        self._colors: dict[int, str] = {}

        super().__init__(name if name else "default")

    def configure(self,
                  prefix: str | None = None,
                  level: int = INFO,
                  colored: bool | None = None,
                  info_stream: IO[str] | None = None,
                  error_stream: IO[str] | None = None) -> Logger:
        """
        Configure the logger.

        Args:
            prefix: The prefix for log messages, used for all levels except 'INFO' and 'ERRINFO'.
            level: The log level.
            colored: Whether to use colored output. By default, colored output is used only when
                     both streams are TTYs.
            info_stream: The stream for 'INFO' level messages. Default is 'sys.stderr', because
                         human-readable output of this project goes to the diagnostic stream.
            error_stream: The stream for messages of all other levels. Default is 'sys.stderr'.

        Returns:
            Logger: The configured logger instance.
        """

        # Resolve the streams at configuration time, they may have been replaced since import.
        if info_stream is None:
            info_stream = sys.stderr
        if error_stream is None:
            error_stream = sys.stderr

        self.prefix = prefix if prefix else ""
        self.setLevel(level)

        if colored is None:
            colored = info_stream.isatty() and error_stream.isatty()
        self.colored = colored

        self._colors = {}
        if colored:
            self._colors[DEBUG] = colorama.Fore.GREEN
            self._colors[WARNING] = colorama.Fore.YELLOW + colorama.Style.BRIGHT
            self._colors[ERROR] = colorama.Fore.RED + colorama.Style.BRIGHT
            self._colors[CRITICAL] = self._colors[ERROR]

        # Remove existing handlers.
        self.handlers = []

        formatter = _MyFormatter(prefix=self.prefix, colors=self._colors)

        stream_handler = logging.StreamHandler(info_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([INFO]))
        self.addHandler(stream_handler)

        stream_handler = logging.StreamHandler(error_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([DEBUG, WARNING, ERROR, ERRINFO, CRITICAL]))
        self.addHandler(stream_handler)

        return self

    def _print_traceback(self, level: int = ERROR):
        """
        Print an exception or stack traceback.

        Args:
            level: The logging level at which to log the traceback.
        """

        if sys.exc_info()[0]:
            lines = traceback.format_exc().splitlines()
        else:
            lines = [line.strip() for line in traceback.format_stack()]

        if not lines:
            return

        if self.colored:
            dim = colorama.Style.RESET_ALL + colorama.Style.DIM
            undim = colorama.Style.RESET_ALL
        else:
            dim = undim = ""

        self.log(level, "--- Debug trace starts here ---")
        self.log(level, "%sAn error occurred, here is the traceback:\n%s%s",
                 dim, "\n".join(lines), undim)
        self.log(level, "--- Debug trace ends here ---\n")

    def error_out(self, fmt: str | Exception, *args: Any, exitcode: int = 1,
                  print_tb: bool = False) -> NoReturn:
        """
        Print an error message and terminate program execution.

        Args:
            fmt: The error message format string.
            *args: The arguments to format the error message.
            exitcode: The program exit code.
            print_tb: If True, print the stack trace. The stack trace is always printed when
                      debugging is enabled.

        Raises:
            SystemExit: Terminates the program with exit code 'exitcode'.
        """

        if args:
            errmsg = str(fmt) % args
        else:
            errmsg = str(fmt)

        if print_tb or self.getEffectiveLevel() == DEBUG:
            self._print_traceback(level=ERRINFO)

        self.error(errmsg)

        raise SystemExit(exitcode)

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Get a logger by name (similar to 'logging.getLogger()').

    Args:
        name: The name of the logger.

    Returns:
        Logger: The logger instance.
    """

    # Because of 'setLoggerClass()', this returns a 'Logger' instance (except for the root logger).
    return cast(Logger, logging.getLogger(name=name))
