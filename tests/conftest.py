#!/usr/bin/env python
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2022-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This configuration file provides the 'params' fixture: a fake system with a CPU sysfs tree, a
'/proc/cpuinfo' file and a power supply directory, created in a temporary directory.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import time
import typing
import pytest
import common
from psfreqlibs.CPUInventory import CPUInventory

if typing.TYPE_CHECKING:
    from typing import Generator
    from pathlib import Path
    from common import CommonTestParamsTypedDict

@pytest.fixture(name="params")
def get_params(tmp_path: Path) -> Generator[CommonTestParamsTypedDict, None, None]:
    """
    Build the default fake system and yield the test parameters dictionary for it.

    Args:
        tmp_path: The temporary directory of the test.

    Yields:
        The test parameters dictionary.
    """

    sysfs_root = tmp_path / "sys" / "devices" / "system" / "cpu"
    proc_cpuinfo = tmp_path / "proc" / "cpuinfo"
    power_supply_root = tmp_path / "sys" / "class" / "power_supply"

    common.build_sysfs(sysfs_root)
    common.build_proc_cpuinfo(proc_cpuinfo)
    common.build_power_supply(power_supply_root, online=1)

    with common.RecordingSysfsIO(base=sysfs_root) as sysfs_io:
        params: CommonTestParamsTypedDict = {}
        params["tmp_path"] = tmp_path
        params["sysfs_root"] = sysfs_root
        params["proc_cpuinfo"] = proc_cpuinfo
        params["power_supply_root"] = power_supply_root
        params["sysfs_io"] = sysfs_io
        params["inventory"] = CPUInventory.discover(sysfs_io, proc_cpuinfo=proc_cpuinfo)

        yield params

@pytest.fixture(name="sleeps")
def get_sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace 'time.sleep()' with a function that records the sleep times instead of sleeping."""

    sleeps: list[float] = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    return sleeps
