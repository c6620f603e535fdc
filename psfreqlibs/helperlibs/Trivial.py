# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Common trivial helpers.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from itertools import groupby
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import Iterable

def is_root() -> bool:
    """
    Check if the current process has superuser (root) privileges.

    Returns:
        bool: True if the current process has superuser privileges, False otherwise.
    """

    try:
        return os.geteuid() == 0
    except OSError as err:
        errmsg = Error(str(err)).indent(2)
        raise Error(f"Failed to get process effective UID:\n{errmsg}") from None

def str_to_int(snum: str | int, base: int = 0, what: str = "") -> int:
    """
    Convert a string to an integer value.

    Args:
        snum: The value to convert to 'int'.
        base: Base of 'snum'. Defaults to auto-detect based on the prefix.
        what: A string describing the value to convert, for the possible error message.

    Returns:
        int: The converted integer value.

    Raises:
        ErrorBadFormat: If 'snum' cannot be converted to an integer.
    """

    try:
        num = int(str(snum), base)
    except (ValueError, TypeError):
        if not what:
            what = "value"
        if base:
            errmsg = f"a base {base} integer"
        else:
            errmsg = "an integer"
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be {errmsg}") from None

    return num

def is_int(value: str | int | float, base: int = 0) -> bool:
    """
    Check if 'value' can be converted to 'int' type'.

    Args:
        value: The value to check.
        base: Base of the value. Defaults to auto-detect based on the prefix.

    Returns:
        bool: True if 'value' can be converted to 'int' type, False otherwise.
    """

    try:
        int(str(value), base)
    except (ValueError, TypeError):
        return False
    return True

def is_num(value: str | int | float) -> bool:
    """
    Check if 'value' can be converted to 'int' or 'float' types.

    Args:
        value: The value to check.

    Returns:
        bool: True if 'value' can be converted to 'int' or 'float' types, False otherwise.
    """

    try:
        int(str(value))
    except (ValueError, TypeError):
        try:
            float(str(value))
        except (ValueError, TypeError):
            return False

    return True

def split_csv_line(csv_line: str, sep: str = ",") -> list[str]:
    """
    Split a comma-separated values line and return the list of non-empty values.

    Args:
        csv_line: The comma-separated line to split.
        sep: The separator character. Defaults to comma.

    Returns:
        list: A list of values.
    """

    result = []
    for val in csv_line.strip(sep).split(sep):
        val = val.strip()
        if val:
            result.append(val)

    return result

def rangify(numbers: Iterable[int | str]) -> str:
    """
    Convert a list of numbers into a comma-separated string of ranges. Consecutive numbers are
    represented as ranges (e.g., "0-2"), while non-consecutive numbers are listed individually.

    Args:
        numbers: List of numbers to convert, as integers or strings.

    Returns:
        A string representing the input numbers as comma-separated ranges.
    """

    try:
        numbers_int = [int(number) for number in numbers]
    except (ValueError, TypeError) as err:
        raise Error(f"failed to translate numbers to ranges, expected list of numbers, got "
                    f"'{numbers}'") from err

    range_strs = []
    numbers_int = sorted(numbers_int)
    for _, pairs in groupby(enumerate(numbers_int), lambda x:x[0]-x[1]):
        # Numbers in one group are consecutive, e.g., [5,6,7,8,10,11,13] results in groups
        # (5, 6, 7, 8), (10, 11) and (13).
        nums = [val for _, val in pairs]
        if len(nums) > 2:
            range_strs.append(f"{nums[0]}-{nums[-1]}")
        else:
            for num in nums:
                range_strs.append(str(num))

    return ",".join(range_strs)
