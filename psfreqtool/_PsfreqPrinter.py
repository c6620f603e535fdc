# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module provides API for printing CPU frequency settings.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import typing
from typing import Literal
from psfreqlibs.helperlibs import Logging, ClassHelpers, Human, YAML, Trivial
from psfreqlibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import IO, Any, Iterable
    from psfreqlibs.CPUInventory import CPUInventory
    from psfreqlibs.Reporting import CPUState

PrintFormatType = Literal["human", "yaml"]

# The value printed in place of values that could not be read.
UNKNOWN = "?"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

class Printer(ClassHelpers.SimpleCloseContext):
    """Print CPU frequency settings in human-readable or YAML format."""

    def __init__(self, fmt: PrintFormatType = "human", fobj: IO[str] | None = None):
        """
        Initialize a class instance.

        Args:
            fmt: The output format, "human" or "yaml".
            fobj: The file object to print to. By default, human-readable output goes through the
                  logger and YAML output goes to the standard output.
        """

        if fmt not in ("human", "yaml"):
            raise Error(f"BUG: unsupported format '{fmt}'")

        self._fmt = fmt
        self._fobj = fobj

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, unref_attrs=("_fobj",))

    def _print(self, msg: str):
        """Print message 'msg'."""

        if self._fobj:
            self._fobj.write(msg + "\n")
        else:
            _LOG.info(msg)

    def _yaml_dump(self, info: dict[str, Any]):
        """Dump dictionary 'info' in YAML format."""

        fobj = self._fobj
        if not fobj:
            fobj = sys.stdout

        YAML.dump(info, fobj)

    @staticmethod
    def _fmt_freq(freq: int | None) -> str:
        """Format a frequency in kHz for humans, e.g., '1.60GHz'."""

        if freq is None:
            return UNKNOWN
        return Human.num2si(freq, unit="kHz", decp=2)

    @staticmethod
    def _fmt_turbo(inventory: CPUInventory, turbo: int | None) -> str:
        """Format the turbo status for humans."""

        if not inventory.turbo_path:
            return "not supported"
        if turbo is None:
            return UNKNOWN
        return "on" if turbo else "off"

    @staticmethod
    def _fmt_cpus(cpus: list[int]) -> str:
        """Format and return a string describing CPU numbers in the 'cpus' list."""

        cpus_range = Trivial.rangify(cpus)
        if len(cpus) == 1:
            return f"CPU {cpus_range}"
        return f"CPUs {cpus_range}"

    def print_state(self, inventory: CPUInventory, driver: str | None, state: CPUState):
        """
        Print the CPU frequency settings.

        Args:
            inventory: The CPU inventory.
            driver: The CPU frequency scaling driver name.
            state: The current CPU frequency settings.
        """

        if self._fmt == "yaml":
            turbo = None
            if state.turbo is not None:
                turbo = "on" if state.turbo else "off"
            info = {"driver": driver,
                    "cpus_count": inventory.cpus_count,
                    "governor": state.governor,
                    "turbo": turbo,
                    "min_freq": state.min_freq,
                    "max_freq": state.max_freq,
                    "info_min_freq": inventory.info_min,
                    "info_max_freq": inventory.info_max}
            self._yaml_dump(info)
            return

        self._print(f"Driver: {driver or UNKNOWN}")
        self._print(f"CPUs count: {inventory.cpus_count}")
        self._print(f"Governor: {state.governor or UNKNOWN}")
        self._print(f"Turbo: {self._fmt_turbo(inventory, state.turbo)}")
        self._print(f"Min. CPU frequency: {self._fmt_freq(state.min_freq)}")
        self._print(f"Max. CPU frequency: {self._fmt_freq(state.max_freq)}")
        self._print(f"Min. supported CPU frequency: {self._fmt_freq(inventory.info_min)}")
        self._print(f"Max. supported CPU frequency: {self._fmt_freq(inventory.info_max)}")

    def print_cur_freqs(self, cur_freqs: Iterable[tuple[int, int]]) -> int:
        """
        Print the real-time frequency of CPUs. CPUs running at the same frequency are printed on
        one line.

        Args:
            cur_freqs: An iterable of '(cpu, frequency)' tuples, the frequency is in kHz.

        Returns:
            The number of CPUs printed.
        """

        freq2cpus: dict[int, list[int]] = {}
        printed = 0
        for cpu, freq in cur_freqs:
            freq2cpus.setdefault(freq, []).append(cpu)
            printed += 1

        # Order by the first CPU of every group.
        groups = sorted(freq2cpus.items(), key=lambda item: min(item[1]))

        if self._fmt == "yaml":
            yaml_info = {"cur_freq": [{"CPU": Trivial.rangify(cpus), "freq": freq}
                                      for freq, cpus in groups]}
            self._yaml_dump(yaml_info)
        else:
            for freq, cpus in groups:
                self._print(f"{self._fmt_cpus(cpus)}: {self._fmt_freq(freq)}")

        return printed
