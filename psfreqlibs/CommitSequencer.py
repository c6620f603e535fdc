# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Write sanitized CPU frequency settings to sysfs for every CPU, in an order that never asks the
driver for a minimum frequency above the maximum frequency.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import time
import typing
from typing import NamedTuple
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.helperlibs import Logging, ClassHelpers
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorCommit

if typing.TYPE_CHECKING:
    from pathlib import Path
    from psfreqlibs.CPUInventory import CPUInventory
    from psfreqlibs.Reporting import CPUState
    from psfreqlibs.Sanitizer import SanitizedValues

# The commit strategies.
#   * two-phase: write the transient (full hardware range) frequencies to every CPU first, sleep,
#                then write the final frequencies. Some drivers, e.g., 'intel_pstate', need this to
#                re-read the limits.
#   * direct: write the final frequencies right away.
STRATEGIES = ("two-phase", "direct")
DEFAULT_STRATEGY = "two-phase"

# How many seconds to sleep between the two phases of the "two-phase" strategy.
DEFAULT_SLEEP_TIME = 2

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

class CommitResult(NamedTuple):
    """
    The outcome of applying CPU frequency settings.

    Attributes:
        written: Number of successful sysfs writes.
        failed: Number of failed sysfs writes.
        failures: The '(path, error message)' pairs describing the failed writes.
    """

    written: int
    failed: int
    failures: list[tuple[Path, str]]

    @property
    def ok(self) -> bool:
        """'True' if every write succeeded."""
        return self.failed == 0

class CommitSequencer(ClassHelpers.SimpleCloseContext):
    """
    Write sanitized CPU frequency settings to the sysfs files of every CPU.

    Public methods overview.
        * 'apply()' - write the settings.

    Writes are best-effort: a failed write is logged and recorded, and the remaining writes go on.
    A commit where not a single final value was written is an error.
    """

    def __init__(self,
                 sysfs_io: SysfsIO | None = None,
                 strategy: str = DEFAULT_STRATEGY,
                 sleep_time: int | float = DEFAULT_SLEEP_TIME):
        """
        Initialize a class instance.

        Args:
            sysfs_io: The sysfs access object to write through. Will be created if not provided.
            strategy: The commit strategy name, one of 'STRATEGIES'.
            sleep_time: How many seconds to sleep between the phases of the "two-phase" strategy.

        Raises:
            ErrorBadFormat: If 'strategy' is unknown or 'sleep_time' is negative.
        """

        if strategy not in STRATEGIES:
            strategies = ", ".join(STRATEGIES)
            raise ErrorBadFormat(f"Bad commit strategy '{strategy}', use one of: {strategies}")

        if sleep_time < 0:
            raise ErrorBadFormat(f"Bad sleep time '{sleep_time}', should be a non-negative "
                                 f"number of seconds")

        self._sysfs_io = sysfs_io
        self._close_sysfs_io = sysfs_io is None
        if not self._sysfs_io:
            self._sysfs_io = SysfsIO()

        self.strategy = strategy
        self.sleep_time = sleep_time

        self._written = 0
        self._failures: list[tuple[Path, str]] = []

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, close_attrs=("_sysfs_io",))

    def _write(self, path: Path, val: int | str, what: str):
        """Write 'val' to 'path' and record the outcome. A failure is logged and not raised."""

        try:
            if isinstance(val, int):
                self._sysfs_io.write_int(path, val, what=what)
            else:
                self._sysfs_io.write(path, val, what=what)
        except Error as err:
            _LOG.warning("Failed to set %s to '%s':\n%s", what, val, err.indent(2))
            self._failures.append((path, str(err)))
        else:
            self._written += 1

    def _write_freqs(self, inventory: CPUInventory, min_freq: int, max_freq: int, min_first: bool):
        """
        Write a minimum and maximum frequency pair to every CPU. If 'min_first' is 'True', write
        all the minimum frequencies first, otherwise write all the maximum frequencies first.
        """

        mins = (inventory.min_paths, min_freq, "scaling minimum frequency")
        maxs = (inventory.max_paths, max_freq, "scaling maximum frequency")

        for paths, freq, what in (mins, maxs) if min_first else (maxs, mins):
            _LOG.debug("Writing %s %dkHz to %d CPUs", what, freq, len(paths))
            for cpu, path in zip(inventory.cpus, paths):
                self._write(path, freq, f"{what} of CPU {cpu}")

    def _write_turbo(self, inventory: CPUInventory, turbo: int | None):
        """Write the turbo status to the global turbo knob, if turbo is supported."""

        if turbo is None or not inventory.turbo_path:
            _LOG.debug("Turbo is not supported, skipping it")
            return

        val = turbo
        if inventory.turbo_inverted:
            val = int(not turbo)

        self._write(inventory.turbo_path, val, "turbo status")

    def _write_governors(self, inventory: CPUInventory, governor: str):
        """Write the scaling governor to every CPU."""

        for cpu, path in zip(inventory.cpus, inventory.governor_paths):
            self._write(path, governor, f"scaling governor of CPU {cpu}")

    def apply(self,
              inventory: CPUInventory,
              current: CPUState,
              sanitized: SanitizedValues,
              sleep: bool = True) -> CommitResult:
        """
        Write the sanitized CPU frequency settings to every CPU. The writes happen in this order.
          1. With the "two-phase" strategy, the transient minimum frequency to every CPU, then the
             transient maximum frequency to every CPU, then a sleep if 'sleep' is 'True'.
          2. The final frequencies. If the current minimum frequency is above the new maximum
             frequency, minimum frequencies go first, otherwise maximum frequencies go first.
          3. The turbo status, once, if turbo is supported.
          4. The scaling governor to every CPU.

        CPUs are always written in ascending order.

        Args:
            inventory: The CPU inventory, provides the sysfs paths.
            current: The current CPU frequency settings.
            sanitized: The values to write, as computed by 'Sanitizer.compute()'.
            sleep: Sleep between the phases of the "two-phase" strategy.

        Returns:
            The commit result object.

        Raises:
            ErrorCommit: If not a single final value was written. The transient writes of the
                         "two-phase" strategy do not count.
        """

        self._written = 0
        self._failures = []

        if self.strategy == "two-phase":
            _LOG.debug("Writing transient frequencies %dkHz - %dkHz",
                       sanitized.sane_min_freq, sanitized.sane_max_freq)
            self._write_freqs(inventory, sanitized.sane_min_freq, sanitized.sane_max_freq,
                              min_first=True)
            if sleep and self.sleep_time:
                _LOG.debug("Sleeping %s seconds", self.sleep_time)
                time.sleep(self.sleep_time)

        # Only the final writes count towards a successful commit.
        transient_written = self._written

        min_first = current.min_freq is not None and current.min_freq > sanitized.max_freq
        self._write_freqs(inventory, sanitized.min_freq, sanitized.max_freq, min_first=min_first)

        self._write_turbo(inventory, sanitized.turbo)
        self._write_governors(inventory, sanitized.governor)

        result = CommitResult(written=self._written, failed=len(self._failures),
                              failures=self._failures)
        _LOG.debug("Commit result: %d writes succeeded, %d failed", result.written, result.failed)

        if result.written == transient_written:
            raise ErrorCommit(f"Failed to change CPU frequency settings: all final sysfs writes "
                              f"failed ({result.failed} failed writes in total)",
                              failures=result.failures)

        return result
