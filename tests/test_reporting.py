#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test the 'Reporting' module."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import common
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.CPUInventory import CPUInventory
from psfreqlibs.Reporting import Reporter, CPUState

if typing.TYPE_CHECKING:
    from pathlib import Path
    from common import CommonTestParamsTypedDict

def test_get_state(params: CommonTestParamsTypedDict):
    """Test reading the current CPU frequency settings."""

    with Reporter(params["inventory"], params["sysfs_io"]) as reporter:
        assert reporter.get_driver() == "intel_pstate"
        assert reporter.get_min_freq() == common.INFO_MIN
        assert reporter.get_max_freq() == common.INFO_MAX
        assert reporter.get_governor() == common.GOVERNOR
        # The fake system has turbo enabled, which means 'no_turbo' is 0.
        assert reporter.get_turbo() == 1

        assert reporter.get_state() == CPUState(min_freq=common.INFO_MIN,
                                                max_freq=common.INFO_MAX, turbo=1,
                                                governor=common.GOVERNOR)

        common.write_file(params["sysfs_root"] / "intel_pstate" / "no_turbo", 1)
        assert reporter.get_turbo() == 0

def test_get_state_boost(tmp_path: Path):
    """Test reading turbo status from the 'cpufreq/boost' file."""

    common.build_sysfs(tmp_path / "cpu", driver="acpi-cpufreq", turbo=0)
    common.build_proc_cpuinfo(tmp_path / "cpuinfo")

    with SysfsIO(base=tmp_path / "cpu") as sysfs_io:
        inventory = CPUInventory.discover(sysfs_io, proc_cpuinfo=tmp_path / "cpuinfo")
        with Reporter(inventory, sysfs_io) as reporter:
            assert reporter.get_turbo() == 0

            common.write_file(tmp_path / "cpu" / "cpufreq" / "boost", 1)
            assert reporter.get_turbo() == 1

def test_get_state_unreadable(tmp_path: Path):
    """Test that unreadable values are reported as 'None'."""

    common.build_sysfs(tmp_path / "cpu", min_freq=None, governor=None, turbo=None)
    common.build_proc_cpuinfo(tmp_path / "cpuinfo")
    common.write_file(tmp_path / "cpu" / "cpu0" / "cpufreq" / "scaling_max_freq", "garbage")

    with SysfsIO(base=tmp_path / "cpu") as sysfs_io:
        inventory = CPUInventory.discover(sysfs_io, proc_cpuinfo=tmp_path / "cpuinfo")
        with Reporter(inventory, sysfs_io) as reporter:
            assert reporter.get_state() == CPUState(None, None, None, None)

def test_get_cur_freqs(params: CommonTestParamsTypedDict):
    """Test reading the real-time CPU frequencies, including a CPU with an unreadable one."""

    (params["sysfs_root"] / "cpu2" / "cpufreq" / "scaling_cur_freq").unlink()

    with Reporter(params["inventory"], params["sysfs_io"]) as reporter:
        assert list(reporter.get_cur_freqs()) == [(0, 1200000), (1, 1300000), (3, 1300000)]

def test_reporter_owns_sysfs_io(params: CommonTestParamsTypedDict):
    """Test that a reporter created without a sysfs access object still works."""

    # The inventory paths are absolute, so the default base directory does not matter.
    with Reporter(params["inventory"]) as reporter:
        assert reporter.get_max_freq() == common.INFO_MAX
        assert reporter.get_driver() == "intel_pstate"
