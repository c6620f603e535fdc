# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide power plans: named presets of CPU frequency settings.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from pathlib import Path
from psfreqlibs import Sanitizer
from psfreqlibs._SysfsIO import SysfsIO
from psfreqlibs.helperlibs import Logging, Trivial
from psfreqlibs.helperlibs.Exceptions import Error, ErrorBadFormat

if typing.TYPE_CHECKING:
    from typing import TypedDict
    from psfreqlibs.CPUInventory import CPUInventory

    class PlanTypedDict(TypedDict):
        """
        A power plan description.

        Attributes:
            number: The plan number, can be used instead of the name.
            min_pct: The minimum frequency, percent of the maximum hardware frequency.
            max_pct: The maximum frequency, percent of the maximum hardware frequency.
            turbo: 1 to enable turbo, 0 to disable it.
            governor: The scaling governor name.
            help: A short description of the plan.
        """

        number: int
        min_pct: int
        max_pct: int
        turbo: int
        governor: str
        help: str

# The default directory with power supply information.
POWER_SUPPLY_BASE = Path("/sys/class/power_supply")

# The "auto" plan picks one of these depending on whether the system runs on AC power.
AUTO_PLAN = "auto"
AUTO_PLAN_NUMBER = 4
AC_PLAN = "performance"
BATTERY_PLAN = "powersave"

PLANS: dict[str, PlanTypedDict] = {
    "powersave": {
        "number": 1,
        "min_pct": 0,
        "max_pct": 0,
        "turbo": 0,
        "governor": "powersave",
        "help": "Lowest frequency, turbo off.",
    },
    "balanced": {
        "number": 2,
        "min_pct": 0,
        "max_pct": 100,
        "turbo": 0,
        "governor": "powersave",
        "help": "Full frequency range, turbo off.",
    },
    "performance": {
        "number": 3,
        "min_pct": 100,
        "max_pct": 100,
        "turbo": 1,
        "governor": "performance",
        "help": "Highest frequency, turbo on.",
    },
}

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

def get_plan_names() -> list[str]:
    """Return the names of all power plans, including the "auto" plan."""
    return list(PLANS) + [AUTO_PLAN]

def resolve_plan_name(name: str) -> str:
    """
    Validate a power plan name or number and return the plan name.

    Args:
        name: The plan name (e.g., "balanced") or number (e.g., "2").

    Returns:
        The plan name.

    Raises:
        ErrorBadFormat: If there is no such plan.
    """

    name = name.strip().lower()
    if name == AUTO_PLAN or name in PLANS:
        return name

    if Trivial.is_int(name):
        number = int(name)
        if number == AUTO_PLAN_NUMBER:
            return AUTO_PLAN
        for plan_name, plan in PLANS.items():
            if plan["number"] == number:
                return plan_name

    names = ", ".join(get_plan_names())
    raise ErrorBadFormat(f"Bad power plan '{name}', use one of: {names}")

def is_ac_online(power_supply_root: Path | str = POWER_SUPPLY_BASE) -> bool:
    """
    Check if the system runs on AC power.

    Args:
        power_supply_root: The directory with power supply information.

    Returns:
        'True' if a "Mains" power supply reports that it is online, 'False' otherwise, including
        when there is no power supply information.
    """

    with SysfsIO(base=power_supply_root) as sysfs_io:
        try:
            supplies = sorted(sysfs_io.base.iterdir())
        except OSError as err:
            _LOG.debug("Failed to list power supplies in '%s': %s", sysfs_io.base, err)
            return False

        for supply in supplies:
            try:
                if sysfs_io.read(supply / "type", what="power supply type") != "Mains":
                    continue
                online = sysfs_io.read_int(supply / "online", what="power supply status")
            except Error as err:
                _LOG.debug("Skipping power supply '%s':\n%s", supply.name, err.indent(2))
                continue

            _LOG.debug("Power supply '%s' online status: %d", supply.name, online)
            if online == 1:
                return True

    return False

def get_plan_request(name: str,
                     inventory: CPUInventory,
                     power_supply_root: Path | str = POWER_SUPPLY_BASE,
                     sleep: bool = True) -> Sanitizer.RequestedValues:
    """
    Turn a power plan into requested CPU frequency settings.

    Args:
        name: The plan name or number.
        inventory: The CPU inventory, provides the maximum hardware frequency the plan frequencies
                   are relative to.
        power_supply_root: The directory with power supply information, used by the "auto" plan.
        sleep: The 'sleep' value of the returned object.

    Returns:
        The requested values. The frequencies are 'None' if the maximum hardware frequency is
        unknown.

    Raises:
        ErrorBadFormat: If there is no such plan.
    """

    name = resolve_plan_name(name)
    if name == AUTO_PLAN:
        name = AC_PLAN if is_ac_online(power_supply_root) else BATTERY_PLAN
        _LOG.debug("The '%s' plan resolved to '%s'", AUTO_PLAN, name)

    plan = PLANS[name]

    min_freq = max_freq = None
    if inventory.info_max is not None:
        min_freq = Sanitizer.percent_to_freq(plan["min_pct"], inventory.info_max)
        max_freq = Sanitizer.percent_to_freq(plan["max_pct"], inventory.info_max)

    return Sanitizer.RequestedValues(min_freq=min_freq, max_freq=max_freq, turbo=plan["turbo"],
                                     governor=plan["governor"], sleep=sleep)

def merge_requests(plan_request: Sanitizer.RequestedValues,
                   explicit: Sanitizer.RequestedValues) -> Sanitizer.RequestedValues:
    """
    Merge the requested values of a power plan with explicitly requested values. Explicit values
    take precedence. The 'sleep' value comes from 'explicit'.
    """

    fields = {}
    for field in ("min_freq", "max_freq", "turbo", "governor"):
        val = getattr(explicit, field)
        if val is None:
            val = getattr(plan_request, field)
        fields[field] = val

    return Sanitizer.RequestedValues(**fields, sleep=explicit.sleep)
