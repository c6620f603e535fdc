# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Exception types used in this project.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            **kwargs: Additional keyword arguments, stored as exception object attributes.
        """

        msg = str(msg)
        super().__init__(msg)

        for key, val in kwargs.items():
            setattr(self, key, val)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Can be an integer or a string. If an integer, each line of the error message is
                    prefixed with the specified number of white spaces. If a string, each line is
                    prefixed with the specified string.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            str: The modified error message.
        """

        def capitalize_mobj(mobj: Match[str]):
            """Capitalize the first non-white-space character of the message."""
            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", capitalize_mobj, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNotSupported(Error):
    """Feature/option/etc is not supported."""

class ErrorBadFormat(Error):
    """Bad format of something, e.g., file contents or a command line option value."""

class ErrorIO(Error):
    """Failed to read or write a sysfs or procfs file."""

    def __init__(self, msg: str, *args: Any, path: Path | None = None, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            path: Path of the file the failed I/O operation was performed on.
            **kwargs: Additional keyword arguments.
        """

        self.path = path
        super().__init__(msg, *args, **kwargs)

class ErrorNotFound(ErrorIO):
    """Something was not found."""

class ErrorPermissionDenied(ErrorIO):
    """No permissions to do something."""

class ErrorInit(Error):
    """Failed to discover the CPU inventory of the system."""

class ErrorInsaneSystem(Error):
    """
    The system reports values which make it impossible to compute safe CPU frequency settings.
    """

class ErrorCommit(Error):
    """Failed to apply new CPU frequency settings: not a single sysfs write succeeded."""

    def __init__(self,
                 msg: str,
                 *args: Any,
                 failures: list[tuple[Path, str]] | None = None,
                 **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            failures: The '(path, error message)' pairs describing the failed writes.
            **kwargs: Additional keyword arguments.
        """

        if failures is None:
            failures = []

        self.failures = failures
        super().__init__(msg, *args, **kwargs)
