# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Turn requested CPU frequency settings into values that are safe to write to sysfs.

The functions of this module do not do any I/O. They take the CPU inventory, the requested values
and the current values, and compute the values to write: the frequencies are bounded by the
hardware limits, the minimum frequency is kept below the maximum frequency, and the turbo and
governor values fall back to the current ones when they were not requested.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import math
import typing
from typing import NamedTuple, cast
from psfreqlibs.helperlibs import Logging
from psfreqlibs.helperlibs.Exceptions import ErrorBadFormat, ErrorInsaneSystem

if typing.TYPE_CHECKING:
    from psfreqlibs.CPUInventory import CPUInventory
    from psfreqlibs.Reporting import CPUState

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

class RequestedValues(NamedTuple):
    """
    The CPU frequency settings requested by the user. 'None' means "not requested, keep the current
    value".

    Attributes:
        min_freq: The requested minimum scaling frequency in kHz.
        max_freq: The requested maximum scaling frequency in kHz.
        turbo: The requested turbo status, 1 to enable turbo, 0 to disable it.
        governor: The requested scaling governor name.
        sleep: Whether to sleep between writing the transient and the final values.
    """

    min_freq: int | None = None
    max_freq: int | None = None
    turbo: int | None = None
    governor: str | None = None
    sleep: bool = True

    def is_empty(self) -> bool:
        """Return 'True' if nothing at all was requested."""

        return self.min_freq is None and self.max_freq is None and \
               self.turbo is None and self.governor is None

class SanitizedValues(NamedTuple):
    """
    The CPU frequency settings to write.

    Attributes:
        min_freq: The final minimum scaling frequency in kHz.
        max_freq: The final maximum scaling frequency in kHz.
        sane_min_freq: The transient minimum scaling frequency in kHz, written before the final
                       one.
        sane_max_freq: The transient maximum scaling frequency in kHz, written before the final
                       one.
        turbo: The turbo status to write, 0 or 1, or 'None' if turbo is not supported.
        governor: The scaling governor name to write.
    """

    min_freq: int
    max_freq: int
    sane_min_freq: int
    sane_max_freq: int
    turbo: int | None
    governor: str

def bound_value(val: int, lo: int, hi: int) -> int:
    """
    Bound a value to a range.

    Args:
        val: The value to bound.
        lo: The lower bound of the range.
        hi: The upper bound of the range.

    Returns:
        'lo' if 'val' is less than 'lo', 'hi' if 'val' is greater than 'hi', and 'val' otherwise.
    """

    if val < lo:
        return lo
    if val > hi:
        return hi
    return val

def _bound_freqs(min_freq: int, max_freq: int, info_min: int, info_max: int) -> tuple[int, int]:
    """
    Bound a minimum and maximum frequency pair by the hardware limits and make sure the minimum
    frequency is less than the maximum frequency. Return the resulting pair.
    """

    min_freq = bound_value(min_freq, info_min, info_max - 1)
    max_freq = bound_value(max_freq, info_min + 1, info_max)
    if min_freq >= max_freq:
        min_freq = max_freq - 1

    return min_freq, max_freq

def percent_to_freq(percent: int | float, info_max: int) -> int:
    """
    Convert a percentage of the maximum hardware frequency to a frequency.

    Args:
        percent: The percentage, e.g., 80.
        info_max: The maximum hardware frequency in kHz.

    Returns:
        The frequency in kHz. The result is not bounded by the hardware limits.

    Raises:
        ErrorBadFormat: If the resulting frequency is not a finite number.
    """

    freq = info_max * percent / 100
    if not math.isfinite(freq):
        raise ErrorBadFormat(f"Bad percentage '{percent}': the resulting frequency should be a "
                             f"finite number")

    return int(freq)

def _check_sanity(inventory: CPUInventory, current: CPUState):
    """Raise 'ErrorInsaneSystem' if any of the values required for sanitizing is unknown."""

    missing = []
    for name, val in (("minimum hardware frequency", inventory.info_min),
                      ("maximum hardware frequency", inventory.info_max),
                      ("current minimum scaling frequency", current.min_freq),
                      ("current maximum scaling frequency", current.max_freq),
                      ("current scaling governor", current.governor)):
        if val is None:
            missing.append(name)

    if missing:
        raise ErrorInsaneSystem(f"Unable to safely change CPU frequency settings, unknown "
                                f"{', '.join(missing)}")

    if cast(int, inventory.info_min) >= cast(int, inventory.info_max):
        raise ErrorInsaneSystem(f"Unable to safely change CPU frequency settings, the minimum "
                                f"hardware frequency {inventory.info_min}kHz is not less than the "
                                f"maximum hardware frequency {inventory.info_max}kHz")

def compute(inventory: CPUInventory,
            requested: RequestedValues,
            current: CPUState) -> SanitizedValues:
    """
    Compute the CPU frequency settings to write.

    Args:
        inventory: The CPU inventory, provides the hardware frequency limits.
        requested: The requested values.
        current: The current values.

    Returns:
        The values to write. The minimum frequency is always less than the maximum frequency, and
        both are within the hardware limits. The same is true for the transient pair.

    Raises:
        ErrorInsaneSystem: If a hardware limit, a current frequency limit, or the current governor
                           is unknown, or if the hardware limits make no sense.
    """

    _check_sanity(inventory, current)

    info_min = cast(int, inventory.info_min)
    info_max = cast(int, inventory.info_max)

    min_freq = requested.min_freq if requested.min_freq is not None else cast(int, current.min_freq)
    max_freq = requested.max_freq if requested.max_freq is not None else cast(int, current.max_freq)
    min_freq, max_freq = _bound_freqs(min_freq, max_freq, info_min, info_max)

    sane_min_freq, sane_max_freq = _bound_freqs(percent_to_freq(0, info_max),
                                                percent_to_freq(100, info_max),
                                                info_min, info_max)

    turbo: int | None
    if current.turbo is None:
        turbo = None
    else:
        turbo = requested.turbo if requested.turbo is not None else current.turbo
        turbo = bound_value(turbo, 0, 1)

    governor = requested.governor if requested.governor is not None else cast(str, current.governor)

    values = SanitizedValues(min_freq=min_freq, max_freq=max_freq, sane_min_freq=sane_min_freq,
                             sane_max_freq=sane_max_freq, turbo=turbo, governor=governor)
    _LOG.debug("Sanitized values: %s", values)
    return values
