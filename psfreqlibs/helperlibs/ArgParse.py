# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Helpful classes extending 'argparse.ArgumentParser' class functionality.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import types
import typing
import argparse
import argcomplete
from psfreqlibs.helperlibs import Trivial, Logging
from psfreqlibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import TypedDict, Iterable, Any

    # The class type returned by the 'add_subparsers()' method of the arguments classes. Even though
    # the class is private, it is documented and will unlikely to change.
    SubParsersType = argparse._SubParsersAction # pylint: disable=protected-access

    class ArgKwargsTypedDict(TypedDict, total=False):
        """
        The type of the "kwargs" sub-dictionary of the 'ArgTypedDict' dictionary type. It defines
        the supported keyword arguments that are ultimately passed to 'argparse.add_argument()'.

        Attributes:
            dest: The 'argparse' attribute name where the command line argument will be stored.
            default: The default value for the argument.
            metavar: The name of the argument in the help text.
            action: The 'argparse' action to use for the argument.
            choices: The allowed values of the argument.
            help: A brief description of the argument.
        """

        dest: str
        default: str | int | None
        metavar: str
        action: str
        choices: list[str]
        help: str

    class ArgTypedDict(TypedDict, total=False):
        """
        A dictionary type the options definitions dictionary.

        Attributes:
            short: The short option name.
            long: The long option name.
            argcomplete: The 'argcomplete' class name to use for tab completion of the option.
            kwargs: Additional keyword arguments for 'argparse.add_argument()'.
        """

        short: str | None
        long: str
        argcomplete: str | None
        kwargs: ArgKwargsTypedDict

    class CommonArgsTypedDict(TypedDict, total=False):
        """
        The common command-line arguments.

        Attributes:
            quiet: Suppress non-essential output (-q option). False by default.
            all_quiet: Suppress all output, including errors (-a option). False by default.
            force_color: Force colorized output even if the output stream is not a terminal
                        (--force-color option). False by default.
            debug: Enable debugging output (-d option). False by default.
            debug_modules: Modules to enable debugging output for (--debug-modules option). None
                           by default (enable debugging for all modules).
        """

        quiet: bool
        all_quiet: bool
        force_color: bool
        debug: bool
        debug_modules: list[str] | None

def add_options(parser: argparse.ArgumentParser, options: Iterable[ArgTypedDict]):
    """
    Add command line options to the given parser.

    Args:
        parser: The argument parser object to which options will be added.
        options: An iterable collection of option definition dictionaries.
    """

    for opt in options:
        args: tuple[str, ...]

        if opt["short"] is None:
            args = (opt["long"], )
        else:
            args = (opt["short"], opt["long"])

        arg = parser.add_argument(*args, **opt["kwargs"])
        if opt["argcomplete"]:
            setattr(arg, "completer", getattr(argcomplete.completers, opt["argcomplete"]))

def format_common_args(args: argparse.Namespace) -> CommonArgsTypedDict:
    """
    Verify common command-line arguments and return them as a dictionary.

    Args:
        args: Parsed command-line arguments.

    Returns:
        A dictionary containing the common options.
    """

    cmdl: CommonArgsTypedDict = {}

    cmdl["quiet"] = getattr(args, "quiet", False)
    cmdl["all_quiet"] = getattr(args, "all_quiet", False)
    cmdl["debug"] = getattr(args, "debug", False)
    if cmdl["quiet"] and cmdl["debug"]:
        raise Error("The '-q' and '-d' options cannot be used together")
    if cmdl["all_quiet"] and cmdl["debug"]:
        raise Error("The '-a' and '-d' options cannot be used together")

    debug_modules: str | None = getattr(args, "debug_modules", None)
    if debug_modules:
        if not cmdl["debug"]:
            raise Error("The '--debug-modules' option requires the '-d' option to be used")
        cmdl["debug_modules"] = Trivial.split_csv_line(debug_modules)
    else:
        cmdl["debug_modules"] = None

    cmdl["force_color"] = getattr(args, "force_color", False)
    return cmdl

def _add_parser(subparsers: SubParsersType, *args: Any, **kwargs: Any) -> argparse.ArgumentParser:
    """
    Override the 'add_parser()' method of a subparsers object to remove newlines and extra
    white-spaces from the 'description' argument, which is usually a multi-line string in the code.

    Args:
        subparsers: The subparsers action object returned by 'add_subparsers()'.
        *args: Positional arguments to pass to the original 'add_parser()' method.
        **kwargs: Keyword arguments to pass to the original 'add_parser()' method.

    Returns:
        The 'ArgumentParser' instance created by the original 'add_parser()' method.
    """

    if "description" in kwargs:
        kwargs["description"] = " ".join(kwargs["description"].split())

    orig_add_parser = getattr(subparsers, "__orig_add_parser")
    return orig_add_parser(*args, **kwargs)

class ArgsParser(argparse.ArgumentParser):
    """
    Enhance 'argparse.ArgumentParser' with standard options and improved usability.
      - Add and validate standard options, such  as '-h', '-q', '-a' and '-d'.
      - Configure the main project logger according to the '-q', '-a', '-d' and '--force-color'
        options.
      - Remove extra whitespace and newlines from 'description' in 'add_parser()'.
      - Override 'error()' to raise an exception instead of exiting, and suggest using '-h'.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        """
        Initialize the parser. Take the same arguments as 'argparse.ArgumentParser', plus the
        optional 'ver' keyword argument, the tool version to print with '--version'.
        """

        if "ver" in kwargs:
            version = kwargs["ver"]
            del kwargs["ver"]
        else:
            version = None

        kwargs["add_help"] = False
        super().__init__(*args, **kwargs)

        text = "Show this help message and exit."
        self.add_argument("-h", "--help", dest="help", action="help", help=text)

        # The common options are accepted both before and after sub-commands. Suppress the defaults
        # so that a sub-command parser does not overwrite the value set by the parent parser.
        text = "Be quiet (print only important messages like warnings and errors)."
        self.add_argument("-q", "--quiet", dest="quiet", action="store_true", help=text,
                          default=argparse.SUPPRESS)

        text = "Be completely quiet, do not print even warnings and errors."
        self.add_argument("-a", "--all-quiet", dest="all_quiet", action="store_true", help=text,
                          default=argparse.SUPPRESS)

        text = """Force colorized output even if the output stream is not a terminal (adds ANSI
                  escape codes)."""
        self.add_argument("--force-color", action="store_true", help=text,
                          default=argparse.SUPPRESS)

        text = "Print debugging information."
        self.add_argument("-d", "--debug", dest="debug", action="store_true", help=text,
                          default=argparse.SUPPRESS)

        text = "Print debugging information only from the specified modules."
        self.add_argument("--debug-modules", action="store", metavar="MODNAME[,MODNAME1,...]",
                          help=text, default=argparse.SUPPRESS)

        if version:
            text = "Print the version number and exit."
            self.add_argument("--version", action="version", help=text, version=version)

    def parse_args(self, *args: Any, **kwargs: Any) -> argparse.Namespace: # type: ignore[override]
        """
        Parse command line arguments and configure the main logger.

        Args:
            *args: Positional arguments for 'ArgumentParser.parse_args()'.
            **kwargs: Keyword arguments for 'ArgumentParser.parse_args()'.
        """

        _args = super().parse_args(*args, **kwargs)

        cmdl = format_common_args(_args)
        Logging.DEBUG_MODULE_NAMES = None
        if cmdl["debug_modules"] is not None:
            Logging.DEBUG_MODULE_NAMES = set(cmdl["debug_modules"])

        if cmdl["debug"]:
            level = Logging.DEBUG
        elif cmdl["all_quiet"]:
            level = Logging.SILENT
        elif cmdl["quiet"]:
            level = Logging.WARNING
        else:
            level = Logging.INFO

        log = Logging.getLogger(Logging.MAIN_LOGGER_NAME)
        colored = True if cmdl["force_color"] else None
        log.configure(prefix=log.prefix, level=level, colored=colored)

        return _args

    def add_subparsers(self, *args: Any, **kwargs: Any) -> SubParsersType:
        """
        Create subparsers with a customized 'add_parser()' method.

        Args:
            *args: Positional arguments for 'add_subparsers'.
            **kwargs: Keyword arguments for 'add_subparsers'.

        Returns:
            The subparsers action object.
        """

        subparsers = super().add_subparsers(*args, **kwargs)
        setattr(subparsers, "__orig_add_parser", subparsers.add_parser)
        setattr(subparsers, "add_parser", types.MethodType(_add_parser, subparsers))

        return subparsers

    def error(self, message: str):
        """
        Raise an exception instead of printing the error message and exiting.

        Args:
            message: The original error message.
        """

        raise Error(f"{message}\nUse '{self.prog} -h' for help.")
