#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Common functions for psfreq tests. The tests run against a fake CPU sysfs tree and a fake
'/proc/cpuinfo' file created in a temporary directory.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.helperlibs import Logging
from psfreqlibs.helperlibs.Exceptions import ErrorIO
from psfreqtool import _Psfreq

if typing.TYPE_CHECKING:
    from typing import TypedDict
    from psfreqlibs.CPUInventory import CPUInventory

    class CommonTestParamsTypedDict(TypedDict, total=False):
        """
        A dictionary of common test parameters.

        Attributes:
            tmp_path: The temporary directory of the test.
            sysfs_root: The fake CPU sysfs directory.
            proc_cpuinfo: The fake '/proc/cpuinfo' file.
            power_supply_root: The fake power supply information directory.
            sysfs_io: A 'RecordingSysfsIO' object for the fake CPU sysfs directory.
            inventory: The CPU inventory of the fake system.
        """

        tmp_path: Path
        sysfs_root: Path
        proc_cpuinfo: Path
        power_supply_root: Path
        sysfs_io: RecordingSysfsIO
        inventory: CPUInventory

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

# The default fake system parameters.
CPUS_COUNT = 4
DRIVER = "intel_pstate"
INFO_MIN = 800000
INFO_MAX = 3400000
GOVERNOR = "powersave"

class RecordingSysfsIO(SysfsIO):
    """
    A 'SysfsIO' class which records every write and can be told to fail some writes.

    Attributes:
        writes: The '(path, value)' pairs of successful writes, in the order they happened.
        fail_paths: Writes to these paths fail with 'ErrorIO'.
        fail_values: Writes of these values fail with 'ErrorIO', the way the kernel rejects a value
                     it does not accept.
    """

    def __init__(self, *args, **kwargs):
        """Initialize a class instance. Take the same arguments as 'SysfsIO'."""

        super().__init__(*args, **kwargs)

        self.writes: list[tuple[Path, str]] = []
        self.fail_paths: set[Path] = set()
        self.fail_values: set[str] = set()

    def write(self, path, val, what=""):
        """Write a value, unless 'path' or 'val' is set up to fail, and record the write."""

        path = self.path(path)
        if path in self.fail_paths:
            raise ErrorIO(f"Failed to write to '{path}': Invalid argument (simulated)",
                          path=path)
        if str(val) in self.fail_values:
            raise ErrorIO(f"Failed to write '{val}' to '{path}': Invalid argument (simulated)",
                          path=path)

        super().write(path, val, what=what)
        self.writes.append((path, str(val)))

    def written_files(self) -> list[str]:
        """Return the written paths relative to the base directory, in the order of writes."""
        return [str(path.relative_to(self.base)) for path, _ in self.writes]

def write_file(path: Path, contents: str | int):
    """Create file 'path', including the parent directories, and write 'contents' to it."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{contents}\n", encoding="utf-8")

def read_file(path: Path) -> str:
    """Return the contents of file 'path' without trailing white-spaces."""
    return path.read_text(encoding="utf-8").rstrip()

def build_proc_cpuinfo(path: Path, cpus_count: int = CPUS_COUNT):
    """Create a fake '/proc/cpuinfo' file with 'cpus_count' 'processor' entries."""

    lines = []
    for cpu in range(cpus_count):
        lines += [f"processor\t: {cpu}",
                  "vendor_id\t: GenuineIntel",
                  "model name\t: Fake CPU @ 3.40GHz",
                  ""]

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines), encoding="utf-8")

def build_sysfs(root: Path,
                cpus_count: int = CPUS_COUNT,
                driver: str | None = DRIVER,
                info_min: int | None = INFO_MIN,
                info_max: int | None = INFO_MAX,
                min_freq: int | None = INFO_MIN,
                max_freq: int | None = INFO_MAX,
                governor: str | None = GOVERNOR,
                turbo: int | None = 1):
    """
    Create a fake CPU sysfs directory.

    Args:
        root: The directory to create the files in.
        cpus_count: Number of CPUs.
        driver: The scaling driver name. The turbo knob is 'intel_pstate/no_turbo' for the
                'intel_pstate' driver and 'cpufreq/boost' for other drivers.
        info_min: The minimum hardware frequency in kHz.
        info_max: The maximum hardware frequency in kHz.
        min_freq: The current minimum scaling frequency in kHz.
        max_freq: The current maximum scaling frequency in kHz.
        governor: The current scaling governor name.
        turbo: The current turbo status, 1 if turbo is enabled, 'None' to not create the turbo knob.

    Files are not created for the 'None' values.
    """

    for cpu in range(cpus_count):
        cpufreq = root / f"cpu{cpu}" / "cpufreq"
        for fname, val in (("scaling_driver", driver),
                           ("cpuinfo_min_freq", info_min),
                           ("cpuinfo_max_freq", info_max),
                           ("scaling_min_freq", min_freq),
                           ("scaling_max_freq", max_freq),
                           ("scaling_governor", governor),
                           ("scaling_cur_freq", 1200000 + 100000 * (cpu % 2))):
            if val is not None:
                write_file(cpufreq / fname, val)

    if turbo is not None:
        if driver == DRIVER:
            write_file(root / "intel_pstate" / "no_turbo", int(not turbo))
        else:
            write_file(root / "cpufreq" / "boost", turbo)

def build_power_supply(root: Path, online: int | None = None):
    """
    Create a fake power supply information directory with a battery and, unless 'online' is 'None',
    an AC adapter with the 'online' status.
    """

    write_file(root / "BAT0" / "type", "Battery")
    write_file(root / "BAT0" / "status", "Discharging")

    if online is not None:
        write_file(root / "AC" / "type", "Mains")
        write_file(root / "AC" / "online", online)

def run_psfreq(arguments: str, exp_exc: type[Exception] | None = None):
    """
    Execute the 'psfreq' command and validate its outcome.

    Args:
        arguments: The command-line arguments to execute the 'psfreq' command with, e.g.,
                   'set --max 2GHz'.
        exp_exc: The expected exception. If set, the test fails if the command does not raise the
                 expected exception. By default, any exception is considered a failure.

    Raises:
        AssertionError: If the command execution does not match the expected outcome.
    """

    toolname = _Psfreq.TOOLNAME
    _LOG.debug("running: %s %s", toolname, arguments)

    try:
        args = _Psfreq.parse_arguments(arguments.split())
        args.func(args)
    except Exception as err: # pylint: disable=broad-except
        if exp_exc is None:
            assert False, f"command '{toolname} {arguments}' raised the following exception:\n" \
                          f"- {type(err).__name__}({err})"

        if isinstance(err, exp_exc):
            return

        assert False, f"command '{toolname} {arguments}' raised the following exception:\n" \
                      f"- {type(err).__name__}({err})\nbut it was expected to raise the " \
                      f"following exception:\n- {exp_exc.__name__}"

    if exp_exc is not None:
        assert False, f"command '{toolname} {arguments}' did not raise the following " \
                      f"exception type:\n- {exp_exc.__name__}"
