# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide API for reading and writing single values in sysfs files.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
from psfreqlibs.helperlibs import Logging, ClassHelpers, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorIO, ErrorNotFound, ErrorPermissionDenied
from psfreqlibs.helperlibs.Exceptions import ErrorBadFormat

# The default sysfs base directory for CPU-related files.
SYSFS_BASE = Path("/sys/devices/system/cpu")

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

def _fmt_val(val: str) -> str:
    """Return a possibly shortened version of 'val' for an error message."""

    if len(val) > 24:
        return f"{val[:23]}...snip..."
    return val

def _oserror_to_error(err: OSError, msg: str, path: Path) -> ErrorIO:
    """
    Translate an 'OSError' exception into a project exception.

    Args:
        err: The 'OSError' exception object to translate.
        msg: The error message prefix.
        path: The file path the failed operation was performed on.

    Returns:
        An 'ErrorNotFound', 'ErrorPermissionDenied' or 'ErrorIO' exception object.
    """

    errmsg = Error(str(err)).indent(2)
    if isinstance(err, FileNotFoundError):
        return ErrorNotFound(f"{msg}:\n{errmsg}", path=path)
    if isinstance(err, PermissionError):
        return ErrorPermissionDenied(f"{msg}:\n{errmsg}", path=path)
    return ErrorIO(f"{msg}:\n{errmsg}", path=path)

class SysfsIO(ClassHelpers.SimpleCloseContext):
    """
    Provide API for reading and writing sysfs files.

    Public methods overview.

    1. Path helpers.
        * 'path()' - join the base directory and a relative path.
        * 'exists()' - check if a file exists.
    2. Read / write to a file.
        * 'read()' - read a string.
        * 'read_int()' - read an integer.
        * 'write()' - write a string.
        * 'write_int()' - write an integer.

    Every read consumes exactly one line and strips the trailing white-spaces. Every write
    truncates the file and writes the value followed by a newline. File handles are released on
    every exit path. Failures are logged and raised as 'ErrorIO' (or one of its sub-classes), the
    caller decides whether a failure is fatal. Nothing is retried and nothing is cached.
    """

    def __init__(self, base: Path | str = SYSFS_BASE):
        """
        Initialize a class instance.

        Args:
            base: The base directory all relative paths are resolved against. Absolute paths are
                  used as-is.
        """

        self.base = Path(base)

    def close(self):
        """Uninitialize the class object."""

    def path(self, *parts: str | Path) -> Path:
        """
        Join the base directory and the relative path components.

        Args:
            *parts: Path components relative to the base directory, e.g., 'cpu0', 'cpufreq',
                    'scaling_driver'.

        Returns:
            The resulting path.
        """

        return self.base.joinpath(*parts)

    def exists(self, path: Path | str) -> bool:
        """Return 'True' if the sysfs file at 'path' exists, 'False' otherwise."""

        try:
            return self.path(path).exists()
        except OSError as err:
            _LOG.debug("Failed to check if '%s' exists: %s", self.path(path), err)
            return False

    def read(self, path: Path | str, what: str = "") -> str:
        """
        Read the first line of a sysfs file.

        Args:
            path: Path to the sysfs file to read. Relative paths are relative to the base directory.
            what: Optional short description of what is being read, included in exception messages.

        Returns:
            The first line of the file without trailing white-spaces.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorPermissionDenied: If there are no permissions to read the file.
            ErrorIO: If the file cannot be read or is empty.
        """

        path = self.path(path)
        if what:
            what = f" {what}"

        _LOG.debug("Reading%s from '%s'", what, path)

        try:
            with open(path, "r", encoding="utf-8") as fobj:
                line = fobj.readline()
        except OSError as err:
            exc = _oserror_to_error(err, f"Failed to read{what} from '{path}'", path)
            _LOG.debug("%s", exc)
            raise exc from err

        if not line:
            _LOG.debug("Sysfs file '%s' is empty", path)
            raise ErrorIO(f"Failed to read{what} from '{path}': the file is empty", path=path)

        return line.rstrip()

    def read_int(self, path: Path | str, what: str = "") -> int:
        """
        Read a sysfs file and return its contents as an integer.

        Args:
            path: Path to the sysfs file to read.
            what: Optional short description of what is being read, included in exception messages.

        Returns:
            The integer value read from the file.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorIO: If the file cannot be read.
            ErrorBadFormat: If the file contents cannot be parsed as an integer.
        """

        val = self.read(path, what=what)

        try:
            return Trivial.str_to_int(val, base=10, what=what)
        except Error as err:
            if what:
                what = f" {what}"
            raise ErrorBadFormat(f"Bad contents of{what} sysfs file '{self.path(path)}'\n"
                                 f"{err.indent(2)}") from err

    def write(self, path: Path | str, val: str, what: str = ""):
        """
        Write a value to a sysfs file, truncating it first.

        Args:
            path: Path to the sysfs file to write to.
            val: Value to write to the file. A newline is appended.
            what: Optional short description of what is being written, included in exception
                  messages.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorPermissionDenied: If there are no permissions to write to the file.
            ErrorIO: If the value cannot be written.
        """

        path = self.path(path)
        if what:
            what = f" {what}"

        _LOG.debug("Writing value '%s' to%s sysfs file '%s'", val, what, path)

        try:
            with open(path, "w", encoding="utf-8") as fobj:
                fobj.write(f"{val}\n")
        except OSError as err:
            exc = _oserror_to_error(err, f"Failed to write value '{_fmt_val(str(val))}' to{what} "
                                         f"sysfs file '{path}'", path)
            _LOG.debug("%s", exc)
            raise exc from err

    def write_int(self, path: Path | str, val: str | int, what: str = ""):
        """
        Write an integer value to a sysfs file.

        Args:
            path: Path to the sysfs file to write to.
            val: Value to write to the file.
            what: Optional short description of what is being written, included in exception
                  messages.

        Raises:
            ErrorBadFormat: If 'val' is not an integer.
            ErrorIO: If the value cannot be written.
        """

        int_val = Trivial.str_to_int(val, base=10, what=what)
        self.write(path, str(int_val), what=what)
