#!/usr/bin/env python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test the 'psfreq get' and 'psfreq set' commands."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import pytest
import yaml
import common
from common import run_psfreq
from psfreqlibs.helperlibs import Logging, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat, ErrorInsaneSystem
from psfreqlibs.helperlibs.Exceptions import ErrorPermissionDenied
from psfreqtool import _Psfreq

if typing.TYPE_CHECKING:
    from common import CommonTestParamsTypedDict

@pytest.fixture(name="root")
def get_root(monkeypatch: pytest.MonkeyPatch):
    """Pretend to run with superuser privileges."""
    monkeypatch.setattr(Trivial, "is_root", lambda: True)

def _opts(params: CommonTestParamsTypedDict) -> str:
    """Return the global options pointing 'psfreq' to the fake system."""

    return f"--sysfs-root {params['sysfs_root']} --proc-cpuinfo {params['proc_cpuinfo']} " \
           f"--power-supply-root {params['power_supply_root']}"

def _read_cpufreq(params: CommonTestParamsTypedDict, fname: str) -> set[str]:
    """Return the set of values of the 'fname' cpufreq file across all CPUs."""

    vals = set()
    for cpu in range(common.CPUS_COUNT):
        vals.add(common.read_file(params["sysfs_root"] / f"cpu{cpu}" / "cpufreq" / fname))
    return vals

def test_get(params: CommonTestParamsTypedDict, capsys: pytest.CaptureFixture[str]):
    """Test the 'get' command."""

    opts = _opts(params)

    run_psfreq(f"{opts} get")
    run_psfreq(f"{opts} get --real")
    run_psfreq(f"-q {opts} get")
    run_psfreq(f"{opts} get -d")
    capsys.readouterr()

    run_psfreq(f"{opts} get --yaml")
    info = yaml.safe_load(capsys.readouterr().out)
    assert info["driver"] == "intel_pstate"
    assert info["cpus_count"] == common.CPUS_COUNT
    assert info["governor"] == common.GOVERNOR
    assert info["turbo"] == "on"
    assert info["min_freq"] == common.INFO_MIN
    assert info["max_freq"] == common.INFO_MAX

    run_psfreq(f"{opts} get --real --yaml")
    info = yaml.safe_load(capsys.readouterr().out)
    assert info == {"cur_freq": [{"CPU": "0,2", "freq": 1200000},
                                 {"CPU": "1,3", "freq": 1300000}]}

def test_quiet(params: CommonTestParamsTypedDict, monkeypatch: pytest.MonkeyPatch):
    """Test the '-q' and '-a' options."""

    opts = _opts(params)
    log = Logging.getLogger(Logging.MAIN_LOGGER_NAME)

    run_psfreq(f"-q {opts} get")
    assert not log.isEnabledFor(Logging.INFO)
    assert log.isEnabledFor(Logging.ERROR)

    monkeypatch.setattr(Trivial, "is_root", lambda: False)

    # Errors are not printed either, but the exit code still tells about them.
    run_psfreq(f"-a {opts} get")
    assert not log.isEnabledFor(Logging.ERROR)
    assert not log.isEnabledFor(Logging.CRITICAL)
    run_psfreq(f"{opts} --all-quiet set --max 2GHz", exp_exc=ErrorPermissionDenied)

    run_psfreq(f"-a -d {opts} get", exp_exc=Error)

    run_psfreq(f"{opts} get")
    assert log.isEnabledFor(Logging.INFO)

def test_get_insane(params: CommonTestParamsTypedDict, capsys: pytest.CaptureFixture[str]):
    """Test that 'get' works on a system with missing information."""

    (params["sysfs_root"] / "cpu0" / "cpufreq" / "cpuinfo_max_freq").unlink()
    (params["sysfs_root"] / "cpu0" / "cpufreq" / "scaling_governor").unlink()

    run_psfreq(f"{_opts(params)} get --yaml")
    info = yaml.safe_load(capsys.readouterr().out)
    assert info["info_max_freq"] is None
    assert info["governor"] is None

def test_set_not_root(params: CommonTestParamsTypedDict, monkeypatch: pytest.MonkeyPatch):
    """Test that 'set' requires superuser privileges and writes nothing without them."""

    monkeypatch.setattr(Trivial, "is_root", lambda: False)

    run_psfreq(f"{_opts(params)} set --max 2GHz", exp_exc=ErrorPermissionDenied)
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MAX)}

@pytest.mark.usefixtures("root", "sleeps")
def test_set(params: CommonTestParamsTypedDict):
    """Test changing the CPU frequency settings."""

    opts = _opts(params)
    turbo_path = params["sysfs_root"] / "intel_pstate" / "no_turbo"

    run_psfreq(f"{opts} set --min 1.2GHz --max 3000000 --turbo off --governor performance")
    assert _read_cpufreq(params, "scaling_min_freq") == {"1200000"}
    assert _read_cpufreq(params, "scaling_max_freq") == {"3000000"}
    assert _read_cpufreq(params, "scaling_governor") == {"performance"}
    assert common.read_file(turbo_path) == "1"

    run_psfreq(f"{opts} set --max 50% --turbo 1 --no-sleep")
    assert _read_cpufreq(params, "scaling_min_freq") == {"1200000"}
    assert _read_cpufreq(params, "scaling_max_freq") == {"1700000"}
    assert common.read_file(turbo_path) == "0"

    # Below the current minimum frequency: the minimum frequency follows.
    run_psfreq(f"{opts} set --max 1GHz --commit-strategy direct")
    assert _read_cpufreq(params, "scaling_min_freq") == {"999999"}
    assert _read_cpufreq(params, "scaling_max_freq") == {"1000000"}

    # Out of range values are bounded by the hardware limits.
    run_psfreq(f"{opts} set --min 0 --max 10GHz")
    assert _read_cpufreq(params, "scaling_min_freq") == {str(common.INFO_MIN)}
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MAX)}

@pytest.mark.usefixtures("root", "sleeps")
def test_set_plan(params: CommonTestParamsTypedDict):
    """Test applying power plans."""

    opts = _opts(params)

    run_psfreq(f"{opts} set --plan powersave")
    assert _read_cpufreq(params, "scaling_min_freq") == {str(common.INFO_MIN)}
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MIN + 1)}
    assert _read_cpufreq(params, "scaling_governor") == {"powersave"}

    # The fake system is on AC power, so "auto" is "performance". The explicit governor wins.
    run_psfreq(f"{opts} set --plan 4 --governor powersave")
    assert _read_cpufreq(params, "scaling_min_freq") == {str(common.INFO_MAX - 1)}
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MAX)}
    assert _read_cpufreq(params, "scaling_governor") == {"powersave"}

    run_psfreq(f"{opts} set --plan ultra", exp_exc=ErrorBadFormat)

@pytest.mark.usefixtures("root", "sleeps")
def test_set_bad(params: CommonTestParamsTypedDict):
    """Test the 'set' command with bad options."""

    opts = _opts(params)

    run_psfreq(f"{opts} set", exp_exc=Error)
    run_psfreq(f"{opts} set --no-sleep", exp_exc=Error)
    run_psfreq(f"{opts} set --turbo maybe", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max fast", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max -5", exp_exc=Error)
    run_psfreq(f"{opts} set --min x%", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max nan%", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max inf%", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max 1e308%", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --min inf", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --min nan", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max infGHz", exp_exc=ErrorBadFormat)
    run_psfreq(f"{opts} set --max 2GHz --commit-strategy three-phase", exp_exc=Error)
    run_psfreq(f"{opts} frobnicate", exp_exc=Error)

    # Nothing was changed.
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MAX)}

@pytest.mark.usefixtures("root", "sleeps")
def test_set_insane(params: CommonTestParamsTypedDict):
    """Test that 'set' refuses to change anything on a system with missing information."""

    (params["sysfs_root"] / "cpu0" / "cpufreq" / "cpuinfo_max_freq").unlink()

    run_psfreq(f"{_opts(params)} set --max 2GHz", exp_exc=ErrorInsaneSystem)
    assert _read_cpufreq(params, "scaling_max_freq") == {str(common.INFO_MAX)}

def test_main(params: CommonTestParamsTypedDict, monkeypatch: pytest.MonkeyPatch):
    """Test the exit codes of the 'main()' function."""

    opts = _opts(params).split()

    assert _Psfreq.main(opts + ["get"]) == 0

    with pytest.raises(SystemExit) as excinfo:
        _Psfreq.main(["--version"])
    assert excinfo.value.code == 0

    monkeypatch.setattr(Trivial, "is_root", lambda: False)
    with pytest.raises(SystemExit) as excinfo:
        _Psfreq.main(opts + ["set", "--max", "2GHz"])
    assert excinfo.value.code == 1

    # No command.
    assert _Psfreq.main(opts) == -1
