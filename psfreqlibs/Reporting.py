# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Read the current CPU frequency settings back from sysfs.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from typing import NamedTuple
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.helperlibs import Logging, ClassHelpers
from psfreqlibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import Generator
    from psfreqlibs.CPUInventory import CPUInventory

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

class CPUState(NamedTuple):
    """
    The current CPU frequency settings, as read from the sysfs files of the first CPU.

    Attributes:
        min_freq: The current minimum scaling frequency in kHz.
        max_freq: The current maximum scaling frequency in kHz.
        turbo: 1 if turbo is enabled, 0 if it is disabled.
        governor: The current scaling governor name.

    Every attribute is 'None' if the value could not be read. For turbo, 'None' also means that
    turbo is not supported.
    """

    min_freq: int | None
    max_freq: int | None
    turbo: int | None
    governor: str | None

class Reporter(ClassHelpers.SimpleCloseContext):
    """
    Read the current CPU frequency settings. Never modifies anything.

    Public methods overview.
        * 'get_driver()' - the scaling driver name.
        * 'get_min_freq()', 'get_max_freq()' - the current scaling frequency limits.
        * 'get_governor()' - the current scaling governor.
        * 'get_turbo()' - the current turbo status.
        * 'get_state()' - all of the above except for the driver, as a 'CPUState' object.
        * 'get_cur_freqs()' - the real-time frequency of every CPU.

    The single-value getters read the files of the first CPU and return 'None' if the value cannot
    be read. The failure is logged, but not raised, so that whatever is available can be printed.
    """

    def __init__(self, inventory: CPUInventory, sysfs_io: SysfsIO | None = None):
        """
        Initialize a class instance.

        Args:
            inventory: The CPU inventory object.
            sysfs_io: The sysfs access object. Will be created if not provided.
        """

        self._inventory = inventory
        self._sysfs_io = sysfs_io

        self._close_sysfs_io = sysfs_io is None
        if not self._sysfs_io:
            self._sysfs_io = SysfsIO()

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, close_attrs=("_sysfs_io",), unref_attrs=("_inventory",))

    def _read_int(self, path, what: str) -> int | None:
        """Read an integer from 'path', return 'None' on failure."""

        try:
            return self._sysfs_io.read_int(path, what=what)
        except Error as err:
            _LOG.debug("Failed to read %s:\n%s", what, err.indent(2))
            return None

    def get_driver(self) -> str | None:
        """Return the CPU frequency scaling driver name, 'None' if it cannot be read."""

        # The driver file is next to the scaling frequency files.
        path = self._inventory.min_paths[0].parent / "scaling_driver"
        try:
            return self._sysfs_io.read(path, what="CPU frequency driver")
        except Error as err:
            _LOG.debug("Failed to read the CPU frequency driver:\n%s", err.indent(2))
            return None

    def get_min_freq(self) -> int | None:
        """Return the current minimum scaling frequency in kHz, 'None' if it cannot be read."""
        return self._read_int(self._inventory.min_paths[0], "scaling minimum frequency")

    def get_max_freq(self) -> int | None:
        """Return the current maximum scaling frequency in kHz, 'None' if it cannot be read."""
        return self._read_int(self._inventory.max_paths[0], "scaling maximum frequency")

    def get_governor(self) -> str | None:
        """Return the current scaling governor name, 'None' if it cannot be read."""

        what = "scaling governor"
        try:
            return self._sysfs_io.read(self._inventory.governor_paths[0], what=what)
        except Error as err:
            _LOG.debug("Failed to read %s:\n%s", what, err.indent(2))
            return None

    def get_turbo(self) -> int | None:
        """
        Return the current turbo status.

        Returns:
            1 if turbo is enabled, 0 if it is disabled, 'None' if turbo is not supported or its
            status cannot be read.
        """

        if not self._inventory.turbo_path:
            return None

        val = self._read_int(self._inventory.turbo_path, "turbo status")
        if val is None:
            return None

        enabled = bool(val)
        if self._inventory.turbo_inverted:
            enabled = not enabled

        return int(enabled)

    def get_state(self) -> CPUState:
        """Read and return the current CPU frequency settings."""

        return CPUState(min_freq=self.get_min_freq(), max_freq=self.get_max_freq(),
                        turbo=self.get_turbo(), governor=self.get_governor())

    def get_cur_freqs(self) -> Generator[tuple[int, int], None, None]:
        """
        Read and yield the real-time frequency of every CPU. Unlike the scaling limits, this is the
        frequency the CPU is running at right now, as the driver sees it.

        Yields:
            Tuples of (cpu, frequency), the frequency is in kHz. CPUs with unreadable frequency are
            skipped.
        """

        for cpu, path in zip(self._inventory.cpus, self._inventory.cur_freq_paths):
            freq = self._read_int(path, f"current frequency of CPU {cpu}")
            if freq is not None:
                yield cpu, freq
