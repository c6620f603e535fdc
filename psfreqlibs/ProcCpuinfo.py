# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Read CPU information from '/proc/cpuinfo'."""

from __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
from psfreqlibs.helperlibs import Logging, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorIO, ErrorBadFormat

PROC_CPUINFO = Path("/proc/cpuinfo")

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

def _read_cpuinfo(path: Path) -> str:
    """Read and return the contents of the '/proc/cpuinfo' file at 'path'."""

    try:
        with open(path, "r", encoding="utf-8") as fobj:
            return fobj.read()
    except OSError as err:
        errmsg = Error(str(err)).indent(2)
        raise ErrorIO(f"Failed to read '{path}':\n{errmsg}", path=path) from err

def get_cpus(path: Path | str = PROC_CPUINFO) -> list[int]:
    """
    Return the list of logical CPU numbers found in '/proc/cpuinfo'.

    Args:
        path: Path to the '/proc/cpuinfo' file.

    Returns:
        CPU numbers in the order they appear in the file, one per 'processor' entry.

    Raises:
        ErrorIO: If the file cannot be read.
        ErrorBadFormat: If a 'processor' entry does not contain a CPU number.
    """

    path = Path(path)
    cpus = []

    for line in _read_cpuinfo(path).splitlines():
        if not line.startswith("processor"):
            continue

        key, _, val = line.partition(":")
        if key.strip() != "processor":
            continue

        what = f"value of 'processor' from '{path}'"
        try:
            cpus.append(Trivial.str_to_int(val.strip(), base=10, what=what))
        except ErrorBadFormat as err:
            raise ErrorBadFormat(f"Bad line in '{path}':\n  {line}\n{err.indent(2)}") from err

    _LOG.debug("Found %d 'processor' entries in '%s'", len(cpus), path)
    return cpus

def get_cpus_count(path: Path | str = PROC_CPUINFO) -> int:
    """
    Return the number of logical CPUs, which is the number of 'processor' entries in
    '/proc/cpuinfo'.

    Args:
        path: Path to the '/proc/cpuinfo' file.

    Returns:
        The number of logical CPUs, can be 0 if the file has no 'processor' entries.
    """

    return len(get_cpus(path))
