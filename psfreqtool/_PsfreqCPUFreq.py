# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Implement the 'psfreq get' and 'psfreq set' commands.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import math
import contextlib
import argparse
from pathlib import Path
from typing import NamedTuple
from psfreqlibs import Sanitizer, Plans, Reporting
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.CPUInventory import CPUInventory
from psfreqlibs.CommitSequencer import CommitSequencer, DEFAULT_STRATEGY
from psfreqlibs.helperlibs import Logging, Human, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorNotSupported
from psfreqlibs.helperlibs.Exceptions import ErrorPermissionDenied
from psfreqtool import _PsfreqPrinter
from psfreqtool._PsfreqPrinter import PrintFormatType

class _CmdlineArgsType(NamedTuple):
    """
    A type for command-line arguments of the 'psfreq get' and 'psfreq set' commands.

    Attributes:
        sysfs_root: Path to the CPU sysfs directory.
        proc_cpuinfo: Path to the CPU information file.
        power_supply_root: Path to the power supply information directory.
        yaml: Whether to output results in YAML format.
        real: Whether to print the real-time CPU frequencies.
        min_freq: The requested minimum frequency, as specified by the user.
        max_freq: The requested maximum frequency, as specified by the user.
        turbo: The requested turbo status, as specified by the user.
        governor: The requested scaling governor name.
        plan: The requested power plan name or number.
        no_sleep: Whether to skip sleeping between the transient and the final writes.
        strategy: The commit strategy name.
    """

    sysfs_root: Path
    proc_cpuinfo: Path
    power_supply_root: Path
    yaml: bool
    real: bool
    min_freq: str | None
    max_freq: str | None
    turbo: str | None
    governor: str | None
    plan: str | None
    no_sleep: bool
    strategy: str

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

# Accepted turbo option values.
_TURBO_VALUES = {"1": 1, "on": 1, "0": 0, "off": 0}

def _get_cmdline_args(args: argparse.Namespace) -> _CmdlineArgsType:
    """
    Format command-line arguments into a named tuple.

    Args:
        args: Command-line arguments namespace.

    Returns:
        A named tuple containing the parsed command-line arguments.
    """

    return _CmdlineArgsType(sysfs_root=Path(args.sysfs_root),
                            proc_cpuinfo=Path(args.proc_cpuinfo),
                            power_supply_root=Path(args.power_supply_root),
                            yaml=getattr(args, "yaml", False),
                            real=getattr(args, "real", False),
                            min_freq=getattr(args, "min_freq", None),
                            max_freq=getattr(args, "max_freq", None),
                            turbo=getattr(args, "turbo", None),
                            governor=getattr(args, "governor", None),
                            plan=getattr(args, "plan", None),
                            no_sleep=getattr(args, "no_sleep", False),
                            strategy=getattr(args, "strategy", DEFAULT_STRATEGY))

def parse_freq(freq: str, inventory: CPUInventory, what: str) -> int:
    """
    Parse a user-provided frequency value.

    Args:
        freq: The frequency in kHz (e.g., "800000"), with a unit (e.g., "2.4GHz"), or as a
              percentage of the maximum hardware frequency (e.g., "80%").
        inventory: The CPU inventory, provides the maximum hardware frequency.
        what: Name of the value, for error messages.

    Returns:
        The frequency in kHz. It is not bounded by the hardware limits.

    Raises:
        ErrorBadFormat: If the frequency cannot be parsed or is negative.
        ErrorNotSupported: If the frequency is a percentage and the maximum hardware frequency is
                           unknown.
    """

    freq = freq.strip()
    if freq.endswith("%"):
        pct = freq[:-1].strip()
        if not Trivial.is_num(pct) or not math.isfinite(float(pct)):
            raise ErrorBadFormat(f"Bad {what} '{freq}': the percentage should be a finite "
                                 f"number")
        if inventory.info_max is None:
            raise ErrorNotSupported(f"Cannot use a percentage for {what}: the maximum supported "
                                    f"CPU frequency is unknown")
        result = Sanitizer.percent_to_freq(float(pct), inventory.info_max)
    else:
        result = int(Human.parse_human(freq, unit="kHz", target_unit="kHz", what=what))

    if result < 0:
        raise ErrorBadFormat(f"Bad {what} '{freq}': should not be negative")

    return result

def parse_turbo(turbo: str) -> int:
    """
    Parse a user-provided turbo status.

    Args:
        turbo: 'on' or '1' to enable turbo, 'off' or '0' to disable it.

    Returns:
        1 to enable turbo, 0 to disable it.

    Raises:
        ErrorBadFormat: If the value is not recognized.
    """

    val = turbo.strip().lower()
    if val not in _TURBO_VALUES:
        raise ErrorBadFormat(f"Bad turbo value '{turbo}', use one of: "
                             f"{', '.join(_TURBO_VALUES)}")
    return _TURBO_VALUES[val]

def _get_requested_values(cmdl: _CmdlineArgsType,
                          inventory: CPUInventory) -> Sanitizer.RequestedValues:
    """Build the requested values from the command-line arguments, including the power plan."""

    min_freq = max_freq = turbo = None
    if cmdl.min_freq is not None:
        min_freq = parse_freq(cmdl.min_freq, inventory, "minimum CPU frequency")
    if cmdl.max_freq is not None:
        max_freq = parse_freq(cmdl.max_freq, inventory, "maximum CPU frequency")
    if cmdl.turbo is not None:
        turbo = parse_turbo(cmdl.turbo)

    requested = Sanitizer.RequestedValues(min_freq=min_freq, max_freq=max_freq, turbo=turbo,
                                          governor=cmdl.governor, sleep=not cmdl.no_sleep)

    if cmdl.plan is not None:
        plan_request = Plans.get_plan_request(cmdl.plan, inventory,
                                              power_supply_root=cmdl.power_supply_root,
                                              sleep=requested.sleep)
        requested = Plans.merge_requests(plan_request, requested)

    return requested

def get_command(args: argparse.Namespace):
    """
    Implement the 'get' command to print the current CPU frequency settings.

    Args:
        args: Parsed command-line arguments.
    """

    cmdl = _get_cmdline_args(args)

    # The output format to use.
    fmt: PrintFormatType = "yaml" if cmdl.yaml else "human"

    with contextlib.ExitStack() as stack:
        sysfs_io = SysfsIO(base=cmdl.sysfs_root)
        stack.enter_context(sysfs_io)

        inventory = CPUInventory.discover(sysfs_io, proc_cpuinfo=cmdl.proc_cpuinfo)

        reporter = Reporting.Reporter(inventory, sysfs_io)
        stack.enter_context(reporter)

        printer = _PsfreqPrinter.Printer(fmt=fmt)
        stack.enter_context(printer)

        if cmdl.real:
            if not printer.print_cur_freqs(reporter.get_cur_freqs()):
                _LOG.warning("Failed to read the current frequency of all CPUs")
        else:
            printer.print_state(inventory, reporter.get_driver(), reporter.get_state())

def set_command(args: argparse.Namespace):
    """
    Implement the 'set' command to change the CPU frequency settings and print the new ones.

    Args:
        args: Parsed command-line arguments.
    """

    cmdl = _get_cmdline_args(args)

    if not Trivial.is_root():
        raise ErrorPermissionDenied("Insufficient permissions: changing CPU frequency settings "
                                    "requires superuser privileges")

    if cmdl.min_freq is None and cmdl.max_freq is None and cmdl.turbo is None and \
       cmdl.governor is None and cmdl.plan is None:
        raise Error("No requests, specify at least one of '--min', '--max', '--turbo', "
                    "'--governor' or '--plan'")

    with contextlib.ExitStack() as stack:
        sysfs_io = SysfsIO(base=cmdl.sysfs_root)
        stack.enter_context(sysfs_io)

        inventory = CPUInventory.discover(sysfs_io, proc_cpuinfo=cmdl.proc_cpuinfo)

        requested = _get_requested_values(cmdl, inventory)
        if requested.is_empty():
            raise Error("No requests, nothing to change")

        reporter = Reporting.Reporter(inventory, sysfs_io)
        stack.enter_context(reporter)

        current = reporter.get_state()
        sanitized = Sanitizer.compute(inventory, requested, current)

        if inventory.turbo_path is None and requested.turbo is not None:
            _LOG.notice("Turbo is not supported, ignoring the turbo setting")

        sequencer = CommitSequencer(sysfs_io, strategy=cmdl.strategy)
        stack.enter_context(sequencer)

        result = sequencer.apply(inventory, current, sanitized, sleep=requested.sleep)
        if not result.ok:
            failed = "\n".join(f"  * {path}" for path, _ in result.failures)
            _LOG.warning("Failed to write %d of %d sysfs files:\n%s",
                         result.failed, result.failed + result.written, failed)

        printer = _PsfreqPrinter.Printer()
        stack.enter_context(printer)

        printer.print_state(inventory, reporter.get_driver(), reporter.get_state())
