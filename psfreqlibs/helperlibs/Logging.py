# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
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
from psfreqlibs.helperlibs.Exceptions import Error

# Log levels.
#   * INFO: No prefixes, just the message.
#   * NOTICE: An INFO message, but with a prefix.
#   * DEBUG, WARNING, ERROR, CRITICAL: Also have the prefix.
#   * ERRINFO: An ERROR message, but without a prefix.
INFO = logging.INFO
NOTICE = logging.INFO + 1
DEBUG = logging.DEBUG
WARNING = logging.WARNING
ERROR = logging.ERROR
ERRINFO = logging.ERROR + 1
CRITICAL = logging.CRITICAL
# Above every other level, nothing is printed.
SILENT = logging.CRITICAL + 1

# Name of the main logger instance. Other project loggers are supposed to be children of this one.
MAIN_LOGGER_NAME = "main"

# Names of the modules to print debug messages for. All modules if 'None'.
DEBUG_MODULE_NAMES: set[str] | None = None

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
                    formatting. By default, the prefix is just the log level name.
            colors: A dictionary containing colorama color codes for the log levels.
        """

        logging.Formatter.__init__(self, "%(levelname)s: %(message)s", "%H:%M:%S")

        self._colors = colors if colors else {}
        self._myfmt = self._build_formats(prefix)

    def _build_formats(self, prefix: str | None) -> dict[int, str]:
        """Build and return the log level -> format string dictionary."""

        def _start(level):
            """Return the "start color output" code for log level 'level'."""
            return str(self._colors.get(level, ""))

        def _end(level):
            """Return the "end color output" code for log level 'level'."""

            if level in self._colors:
                return str(colorama.Style.RESET_ALL)
            return ""

        fmts: dict[int, str] = {}
        prefix = f"{prefix}: " if prefix else ""

        for lvl, pfx in ((WARNING, "warning"), (ERROR, "error"), (CRITICAL, "critical error"),
                         (NOTICE, "notice")):
            if not prefix:
                pfx = pfx.title()
            fmts[lvl] = _start(lvl) + prefix + pfx + _end(lvl) + ": %(message)s"

        # Color every bracketed field of the debug prefix.
        dbg_fmt = _DEFAULT_DBG_PREFIX + ": %(message)s"
        dbg_fmt = dbg_fmt.replace("[", "[" + _start(DEBUG)).replace("]", _end(DEBUG) + "]")
        fmts[DEBUG] = dbg_fmt

        # Info messages go as-is, this is what the "get" command prints.
        fmts[ERRINFO] = fmts[INFO] = "%(message)s"
        return fmts

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record. Prefix debugging messages with a timestamp and keep info messages
        unchanged.

        Args:
            record: The log record to format.

        Returns:
            str: The formatted log record.
        """

        # pylint: disable=protected-access
        self._style._fmt = self._myfmt[record.levelno]
        return logging.Formatter.format(self, record)

class _MyFilter(logging.Filter):
    """
    A custom filter which allows only certain log levels to go through, and drops debug messages
    from modules not listed in 'DEBUG_MODULE_NAMES'.
    """

    def __init__(self, let_go):
        """
        Initialize the logging filter.

        Args:
            let_go: A list of logging levels to let go through the filter.
        """

        logging.Filter.__init__(self)
        self._let_go = let_go

    def filter(self, record):
        """
        Filter out all log levels except the ones specified by the user.

        Args:
            record: The log record to filter.

        Returns:
            bool: True if the record should be printed, False otherwise.
        """

        if record.levelno not in self._let_go:
            return False

        if record.levelno == DEBUG and DEBUG_MODULE_NAMES is not None:
            return record.module in DEBUG_MODULE_NAMES

        return True

class Logger(logging.Logger):
    """
    A custom logger class that provides the following functionality on top of the standard logger:
      * Message coloring.
      * Different prefixes for different log levels.
      * Debug messages with timestamps and file line numbers.
      * The NOTICE and ERRINFO log levels.
      * The 'error_out()' method.
    """

    def __init__(self, name: str | None = None):
        """
        Initialize the logger.

        Args:
            name: The name of the logger (same as in 'logging.Logger()').
        """

        self.prefix = ""
        self.colored = True

        self._colors: dict[int, str] = {}

        if not name:
            name = "default"

        super().__init__(name)

    def _init_colors(self):
        """Initialize the per-level colors."""

        self._colors[DEBUG] = colorama.Fore.GREEN
        self._colors[WARNING] = colorama.Fore.YELLOW + colorama.Style.BRIGHT
        self._colors[NOTICE] = colorama.Fore.CYAN + colorama.Style.BRIGHT
        self._colors[ERROR] = self._colors[CRITICAL] = colorama.Fore.RED + colorama.Style.BRIGHT

    def configure(self,
                  prefix: str | None = None,
                  level: int = INFO,
                  colored: bool | None = None,
                  info_stream: IO[str] = sys.stdout,
                  error_stream: IO[str] = sys.stderr) -> Logger:
        """
        Configure the logger.

        Args:
            prefix: The prefix for log messages, used for all levels except 'INFO' and 'ERRINFO'.
            level: The log level.
            colored: Whether to use colored output. By default, colored output is used only if both
                     output streams are TTYs.
            info_stream: The stream for 'INFO' level messages. Default is 'sys.stdout'.
            error_stream: The stream for messages of all levels except 'INFO'. Default is
                          'sys.stderr'.

        Returns:
            Logger: The configured logger instance.
        """

        if not prefix:
            prefix = ""

        self.prefix = prefix
        self.setLevel(level)

        if colored is None:
            colored = info_stream.isatty() and error_stream.isatty()

        self.colored = colored

        self._colors = {}
        if colored:
            self._init_colors()

        # Re-configuring replaces the handlers, "psfreq" configures the logger twice: at import time
        # and after parsing the command line.
        self.handlers = []
        formatter = _MyFormatter(prefix=self.prefix, colors=self._colors)

        stream_handler = logging.StreamHandler(info_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([INFO]))
        self.addHandler(stream_handler)

        stream_handler = logging.StreamHandler(error_stream)
        stream_handler.setFormatter(formatter)
        stream_handler.addFilter(_MyFilter([DEBUG, WARNING, NOTICE, ERROR, ERRINFO, CRITICAL]))
        self.addHandler(stream_handler)

        return self

    def _print_traceback(self, level: int = ERROR):
        """
        Print an exception or stack traceback.

        Args:
            level: The logging level at which to log the traceback. Defaults to ERROR.
        """

        if sys.exc_info()[0]:
            lines = traceback.format_exc().splitlines()
        else:
            lines = [line.strip() for line in traceback.format_stack()]

        idx = 0
        last_idx = len(lines) - 1
        while idx < len(lines):
            if lines[idx].startswith('  File "'):
                idx += 2
                last_idx = idx
            else:
                idx += 1

        tback = lines[0:last_idx]

        if tback:
            dim = colorama.Style.RESET_ALL + colorama.Style.DIM if self.colored else ""
            undim = colorama.Style.RESET_ALL if self.colored else ""
            self.log(level, "--- Debug trace starts here ---")
            tb = "\n".join(tback)
            self.log(level, "%sAn error occurred, here is the traceback:\n%s%s", dim, tb, undim)
            self.log(level, "--- Debug trace ends here ---\n")

    def error_out(self, fmt: str | Error, *args: Any, print_tb: bool = False) -> NoReturn:
        """
        Print an error message and terminate program execution.

        Args:
            fmt: The error message format string.
            *args: The arguments to format the error message.
            print_tb: If True, print the stack trace. Defaults to False.

        Notes:
            If debugging is enabled, the stack trace is printed regardless of the 'print_tb' value.

        Raises:
            SystemExit: Terminates the program with exit code 1.
        """

        if args:
            errmsg = str(fmt) % args
        else:
            errmsg = str(fmt)

        if print_tb or self.getEffectiveLevel() == DEBUG:
            self._print_traceback(level=ERRINFO)

        self.error(errmsg)

        raise SystemExit(1)

    def notice(self, fmt: str, *args: Any):
        """
        Log a message with level 'NOTICE'.

        Args:
            fmt: The format string for the log message.
            *args: The arguments to format the log message.
        """

        self.log(NOTICE, fmt, *args)

logging.setLoggerClass(Logger)

def getLogger(name: str | None = None) -> Logger:
    """
    Get a logger by name (similar to 'logging.getLogger()').

    Args:
        name: The name of the logger.

    Returns:
        Logger: The logger instance.
    """

    # Note, because of 'setLoggerClass()', this will return a 'Logger' instance (except for the root
    # logger case).
    return cast(Logger, logging.getLogger(name=name))
