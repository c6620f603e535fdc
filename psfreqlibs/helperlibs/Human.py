# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Miscellaneous helper functions for converting frequencies and durations between human-readable
and machine-readable formats.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import math
from psfreqlibs.helperlibs import Logging, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

# The units this module supports.
SUPPORTED_UNITS = {
    "Hz" : "hertz",
    "s"  : "second",
}

_SIPFX_LARGE = ["k", "M", "G", "T"]
_SIPFX_SMALL = ["m", "u", "n"]
_SIPFX_SCALERS = {
    "T": 1000000000000,
    "G": 1000000000,
    "M": 1000000,
    "k": 1000,
    "m": 0.001,
    "u": 0.000001,
    "n": 0.000000001,
}

def separate_si_prefix(unit: str) -> tuple[str | None, str]:
    """
    Split a SI-unit prefix from the base unit.

    Args:
        unit: The unit string which may contain a SI-unit prefix.

    Returns:
        A tuple containing the SI-unit prefix and the base unit. If 'unit' does not contain a
        SI-unit prefix, the first element of the tuple is None.

    Examples:
        >>> separate_si_prefix("kHz")
        ("k", "Hz")
        >>> separate_si_prefix("Hz")
        (None, "Hz")
    """

    if len(unit) < 2:
        return None, unit

    sipfx = unit[0]
    base_unit = unit[1:]

    if sipfx not in _SIPFX_SCALERS:
        return None, unit

    if base_unit not in SUPPORTED_UNITS:
        _LOG.warning("Unsupported unit '%s' was split into SI-prefix '%s' and base unit '%s'",
                     unit, sipfx, base_unit)

    return sipfx, base_unit

def num2si(value: int | float,
           unit: str | None = None,
           decp: int = 1,
           sep: str | None = None,
           strip_zeroes: bool = False) -> str:
    """
    Convert a number into a human-readable form using SI suffixes like "k" (Kilo), "M" (Mega), etc.

    Args:
        value: The number to convert.
        unit: The unit used with 'value', including any SI-prefixes.
        decp: Maximum number of decimal places the result should include.
        sep: The separator string to use between the resulting number and its unit.
        strip_zeroes: if True, strip trailing zeroes after the decimal point.

    Returns:
        str: The human-readable string representation of the number with its unit.

    Examples:
        >>> num2si(1600000, unit="kHz", decp=2)
        "1.60GHz"
        >>> num2si(800, unit="MHz", decp=1, sep=" ", strip_zeroes=True)
        "800 MHz"
    """

    if not Trivial.is_num(value):
        raise Error(f"Bad input '{value}': not a number")

    if unit is None:
        unit = ""

    if decp < 0:
        raise Error("BUG: decimal places number bust be a positive integer")
    if decp > 8:
        raise Error("Specify at max. 8 decimal places")

    if sep is None:
        sep = ""
    if sep and not unit:
        raise Error("Specify the separator only if unit was specified")

    sipfx, base_unit = separate_si_prefix(unit)
    value = float(value)

    if sipfx:
        value *= _SIPFX_SCALERS[sipfx]

    pfx = None
    if abs(value) >= 1000:
        for pfx in _SIPFX_LARGE:
            value /= 1000.0
            if abs(value) < 1000:
                break
    elif 0 < abs(value) < 1:
        for pfx in _SIPFX_SMALL:
            value *= 1000.0
            if abs(value) >= 1:
                break

    result = f"{value:.{decp}f}"
    if strip_zeroes and "." in result:
        result = result.rstrip("0").rstrip(".")

    # Avoid things like 0nHz. If the result is 0 after the rounding, do not add the SI prefix.
    if pfx and float(result) != 0:
        result += sep + pfx
        if base_unit:
            result += base_unit
    elif base_unit:
        result += sep + base_unit

    return result

def parse_human(hval: str | float | int,
                unit: str,
                target_unit: str | None = None,
                integer: bool = True,
                what: str | None = None) -> int | float:
    """
    Convert a user-provided value 'hval' into an integer or float amount of 'unit' units (hertz,
    seconds).

    Args:
        hval: The value to convert. Can be of type string, int, or float. If it is a string, it may
              include the unit, possibly with a SI prefix.
        unit: The unit of 'hval' in case it does not include one, including any SI prefixes.
        target_unit: The unit of the result, including any SI prefixes. Defaults to the same 'unit'
                     without a SI prefix.
        integer: If True, round the result to the nearest integer and return an 'int' type,
                 otherwise return the result as a floating point number.
        what: An optional name associated with the value, used only in case of an error for
              formatting a nicer message.

    Returns:
        int or float: The converted value in the target unit.

    Examples:
        >>> parse_human("2.4GHz", unit="kHz", target_unit="kHz")
        2400000
        >>> parse_human("800000", unit="kHz", target_unit="kHz")
        800000
        >>> parse_human("500ms", unit="s", integer=False)
        0.5
    """

    if what:
        what = f" {what}"
    else:
        what = ""

    sipfx, base_unit = separate_si_prefix(unit)
    target_sipfx, target_base_unit = None, base_unit

    if target_unit:
        target_sipfx, target_base_unit = separate_si_prefix(target_unit)
        if target_base_unit != base_unit:
            raise Error(f"BUG: the target base unit has to be '{base_unit}', not "
                        f"'{target_base_unit}'")

    hval = str(hval).strip()
    if Trivial.is_num(hval):
        hval = f"{hval}{sipfx or ''}{base_unit}"

    if not hval.endswith(base_unit):
        raise ErrorBadFormat(f"Failed to parse{what} value '{hval}': should be a number with an "
                             f"optional '{base_unit}' unit")

    num = hval[:-len(base_unit)].strip()
    scaler: int | float = 1
    if num and num[-1] in _SIPFX_SCALERS and not Trivial.is_num(num):
        scaler = _SIPFX_SCALERS[num[-1]]
        num = num[:-1].strip()

    if not Trivial.is_num(num):
        raise ErrorBadFormat(f"Failed to parse{what} value '{hval}': non-numeric amount of "
                             f"{SUPPORTED_UNITS.get(base_unit, base_unit)}s")

    result = float(num) * scaler
    if target_sipfx:
        result /= _SIPFX_SCALERS[target_sipfx]

    if not math.isfinite(result):
        raise ErrorBadFormat(f"Failed to parse{what} value '{hval}': should be a finite number")

    if integer:
        return round(result)

    return result
