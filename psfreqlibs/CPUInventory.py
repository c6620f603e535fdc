# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Discover the CPU frequency scaling capabilities of the system: the number of logical CPUs, the
scaling driver, the hardware frequency limits, and the per-CPU sysfs files used for changing the
CPU frequency settings.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from psfreqlibs import ProcCpuinfo
from psfreqlibs.helperlibs import Logging
from psfreqlibs.helperlibs.Exceptions import Error, ErrorInit

if typing.TYPE_CHECKING:
    from psfreqlibs._SysfsIO import SysfsIO

# Name of the Intel P-State driver, as reported by the 'scaling_driver' sysfs file.
PSTATE_DRIVER = "intel_pstate"

# Global turbo knobs, relative to the sysfs base directory. The 'intel_pstate' one disables turbo
# when set to 1, the generic 'cpufreq' one enables it when set to 1.
PSTATE_TURBO_PATH = Path("intel_pstate/no_turbo")
CPUFREQ_TURBO_PATH = Path("cpufreq/boost")

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

def cpufreq_path(cpu: int, fname: str) -> Path:
    """
    Return the path of a 'cpufreq' sysfs file of a CPU, relative to the sysfs base directory.

    Args:
        cpu: The CPU number.
        fname: The 'cpufreq' file name, e.g., 'scaling_max_freq'.

    Returns:
        The relative path, e.g., 'cpu3/cpufreq/scaling_max_freq'.
    """

    return Path(f"cpu{cpu}") / "cpufreq" / fname

class CPUInventory:
    """
    Describe the CPU frequency scaling capabilities of the system. Objects of this class are built
    once, usually with 'CPUInventory.discover()', and are not modified afterwards. The sysfs files
    they refer to are live and their contents may change.

    Attributes:
        cpus: Logical CPU numbers, in ascending order.
        cpus_count: The number of logical CPUs.
        driver: The CPU frequency scaling driver name, 'None' if it is unknown.
        has_pstate: 'True' if the scaling driver is 'intel_pstate'.
        info_min: The minimum CPU frequency supported by the hardware in kHz, 'None' if unknown.
        info_max: The maximum CPU frequency supported by the hardware in kHz, 'None' if unknown.
        min_paths: Paths of the 'scaling_min_freq' files, one per CPU, in 'cpus' order.
        max_paths: Paths of the 'scaling_max_freq' files, one per CPU, in 'cpus' order.
        governor_paths: Paths of the 'scaling_governor' files, one per CPU, in 'cpus' order.
        cur_freq_paths: Paths of the 'scaling_cur_freq' files, one per CPU, in 'cpus' order.
        turbo_path: Path of the global turbo knob, 'None' if turbo cannot be controlled.
        turbo_inverted: 'True' if writing 1 to 'turbo_path' disables turbo.
    """

    def __init__(self,
                 cpus: tuple[int, ...],
                 driver: str | None,
                 info_min: int | None,
                 info_max: int | None,
                 min_paths: tuple[Path, ...],
                 max_paths: tuple[Path, ...],
                 governor_paths: tuple[Path, ...],
                 cur_freq_paths: tuple[Path, ...],
                 turbo_path: Path | None = None,
                 turbo_inverted: bool = False):
        """
        Initialize a class instance. Take the attributes described in the class docstring.

        Raises:
            ErrorInit: If there are no CPUs or the per-CPU path sequences do not have one element
                       per CPU.
        """

        if not cpus:
            raise ErrorInit("No CPUs found, the CPU inventory cannot be empty")

        for name, paths in (("scaling minimum frequency", min_paths),
                            ("scaling maximum frequency", max_paths),
                            ("scaling governor", governor_paths),
                            ("current frequency", cur_freq_paths)):
            if len(paths) != len(cpus):
                raise ErrorInit(f"BUG: {len(paths)} {name} paths for {len(cpus)} CPUs")

        self.cpus = tuple(cpus)
        self.cpus_count = len(self.cpus)
        self.driver = driver
        self.has_pstate = driver == PSTATE_DRIVER
        self.info_min = info_min
        self.info_max = info_max
        self.min_paths = tuple(min_paths)
        self.max_paths = tuple(max_paths)
        self.governor_paths = tuple(governor_paths)
        self.cur_freq_paths = tuple(cur_freq_paths)
        self.turbo_path = turbo_path
        self.turbo_inverted = turbo_inverted

    def __repr__(self):
        """Return a short description of the inventory, handy in debug messages."""

        return f"CPUInventory(cpus_count={self.cpus_count}, driver={self.driver!r}, " \
               f"info_min={self.info_min}, info_max={self.info_max}, " \
               f"turbo_path={self.turbo_path})"

    @classmethod
    def discover(cls,
                 sysfs_io: SysfsIO,
                 proc_cpuinfo: Path | str = ProcCpuinfo.PROC_CPUINFO) -> CPUInventory:
        """
        Probe the system and build the CPU inventory.

        Args:
            sysfs_io: The sysfs access object, defines the sysfs base directory.
            proc_cpuinfo: Path to the '/proc/cpuinfo' file.

        Returns:
            The CPU inventory object.

        Raises:
            ErrorInit: If the CPU count cannot be found, is zero, or the per-CPU paths cannot be
                       built. A partial inventory is never returned.
        """

        _LOG.debug("Discovering CPU inventory, sysfs base '%s'", sysfs_io.base)

        cpus = _find_cpus(proc_cpuinfo)
        driver = _find_driver(sysfs_io)
        info_max = _find_info_freq(sysfs_io, "cpuinfo_max_freq")
        info_min = _find_info_freq(sysfs_io, "cpuinfo_min_freq")

        try:
            min_paths = _build_paths(sysfs_io, cpus, "scaling_min_freq")
            max_paths = _build_paths(sysfs_io, cpus, "scaling_max_freq")
            governor_paths = _build_paths(sysfs_io, cpus, "scaling_governor")
            cur_freq_paths = _build_paths(sysfs_io, cpus, "scaling_cur_freq")
        except (TypeError, ValueError, OSError) as err:
            errmsg = Error(str(err)).indent(2)
            raise ErrorInit(f"Failed to build per-CPU sysfs paths:\n{errmsg}") from err

        turbo_path: Path | None = None
        turbo_inverted = False
        if driver == PSTATE_DRIVER:
            if sysfs_io.exists(PSTATE_TURBO_PATH):
                turbo_path = sysfs_io.path(PSTATE_TURBO_PATH)
                turbo_inverted = True
        elif sysfs_io.exists(CPUFREQ_TURBO_PATH):
            turbo_path = sysfs_io.path(CPUFREQ_TURBO_PATH)

        if not turbo_path:
            _LOG.debug("No turbo control file found for driver '%s'", driver)

        inventory = cls(cpus, driver, info_min, info_max, min_paths, max_paths, governor_paths,
                        cur_freq_paths, turbo_path=turbo_path, turbo_inverted=turbo_inverted)
        _LOG.debug("Discovered %r", inventory)
        return inventory

def _find_cpus(proc_cpuinfo: Path | str) -> tuple[int, ...]:
    """
    Find the logical CPU numbers by counting the 'processor' entries of '/proc/cpuinfo'.

    Args:
        proc_cpuinfo: Path to the '/proc/cpuinfo' file.

    Returns:
        The CPU numbers in ascending order.

    Raises:
        ErrorInit: If the CPU numbers cannot be found or there are none.
    """

    try:
        cpus = ProcCpuinfo.get_cpus(proc_cpuinfo)
    except Error as err:
        _LOG.error("Failed to find the number of CPUs")
        raise ErrorInit(f"Failed to find the number of CPUs:\n{err.indent(2)}") from err

    if not cpus:
        _LOG.error("Failed to find the number of CPUs")
        raise ErrorInit(f"Failed to find the number of CPUs: no 'processor' entries in "
                        f"'{proc_cpuinfo}'")

    if len(set(cpus)) != len(cpus):
        raise ErrorInit(f"Duplicate 'processor' entries in '{proc_cpuinfo}'")

    _LOG.debug("Number of CPUs: %d", len(cpus))
    return tuple(sorted(cpus))

def _find_driver(sysfs_io: SysfsIO) -> str | None:
    """Return the CPU frequency scaling driver name of CPU 0, or 'None' if it cannot be read."""

    what = "CPU frequency driver"
    try:
        driver = sysfs_io.read(cpufreq_path(0, "scaling_driver"), what=what)
    except Error as err:
        _LOG.error("Unable to check for the '%s' driver:\n%s", PSTATE_DRIVER, err.indent(2))
        return None

    _LOG.debug("Compare driver '%s' with '%s'", driver, PSTATE_DRIVER)
    return driver

def _find_info_freq(sysfs_io: SysfsIO, fname: str) -> int | None:
    """
    Read a hardware frequency limit of CPU 0.

    Args:
        sysfs_io: The sysfs access object.
        fname: The file name, 'cpuinfo_min_freq' or 'cpuinfo_max_freq'.

    Returns:
        The frequency in kHz, or 'None' if the file is missing or does not contain a positive
        integer.
    """

    try:
        freq = sysfs_io.read_int(cpufreq_path(0, fname), what=fname)
    except Error as err:
        _LOG.error("Unable to read '%s':\n%s", fname, err.indent(2))
        return None

    if freq <= 0:
        _LOG.error("Bad '%s' value '%d': should be a positive integer", fname, freq)
        return None

    return freq

def _build_paths(sysfs_io: SysfsIO, cpus: tuple[int, ...], fname: str) -> tuple[Path, ...]:
    """Build a sequence of 'cpufreq' file 'fname' paths, one per CPU in 'cpus'."""

    paths = tuple(sysfs_io.path(cpufreq_path(cpu, fname)) for cpu in cpus)
    _LOG.debug("Built %d '%s' paths, first one is '%s'", len(paths), fname, paths[0])
    return paths
