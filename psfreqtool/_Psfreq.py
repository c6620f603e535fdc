# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
psfreq - P-State frequency tool: report and change CPU frequency scaling settings on Linux.
"""

import sys
import argcomplete
from psfreqlibs import CommitSequencer, Plans, ProcCpuinfo
from psfreqlibs._SysfsIO import SYSFS_BASE
from psfreqlibs.helperlibs import ArgParse, Logging
from psfreqlibs.helperlibs.Exceptions import Error

if sys.version_info < (3, 9):
    raise SystemExit("this tool requires python version 3.9 or higher")

_VERSION = "1.0.2"
TOOLNAME = "psfreq"

Logging.getLogger(Logging.MAIN_LOGGER_NAME).configure(prefix=TOOLNAME)
_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq")

_SYSFS_ROOT_OPTION = {
    "short": None,
    "long":  "--sysfs-root",
    "argcomplete": "DirectoriesCompleter",
    "kwargs": {
        "dest": "sysfs_root",
        "metavar": "PATH",
        "default": str(SYSFS_BASE),
        "help": f"""This option is for debugging and testing. Path to the CPU sysfs directory,
                    '{SYSFS_BASE}' by default.""",
    },
}

_PROC_CPUINFO_OPTION = {
    "short": None,
    "long":  "--proc-cpuinfo",
    "argcomplete": "FilesCompleter",
    "kwargs": {
        "dest": "proc_cpuinfo",
        "metavar": "PATH",
        "default": str(ProcCpuinfo.PROC_CPUINFO),
        "help": f"""This option is for debugging and testing. Path to the CPU information file,
                    '{ProcCpuinfo.PROC_CPUINFO}' by default.""",
    },
}

_POWER_SUPPLY_ROOT_OPTION = {
    "short": None,
    "long":  "--power-supply-root",
    "argcomplete": "DirectoriesCompleter",
    "kwargs": {
        "dest": "power_supply_root",
        "metavar": "PATH",
        "default": str(Plans.POWER_SUPPLY_BASE),
        "help": f"""This option is for debugging and testing. Path to the power supply information
                    directory, '{Plans.POWER_SUPPLY_BASE}' by default. Used by the
                    '{Plans.AUTO_PLAN}' power plan.""",
    },
}

def build_arguments_parser():
    """Build and return the the command-line arguments parser object."""

    text = f"{TOOLNAME} - report and change CPU frequency scaling settings."
    parser = ArgParse.ArgsParser(description=text, prog=TOOLNAME, ver=_VERSION)

    ArgParse.add_options(parser, (_SYSFS_ROOT_OPTION, _PROC_CPUINFO_OPTION,
                                  _POWER_SUPPLY_ROOT_OPTION))

    # Not required, a missing command is reported by 'main()'.
    subparsers = parser.add_subparsers(title="commands", dest="a command")

    #
    # Create parser for the 'get' command.
    #
    text = "Print the current CPU frequency settings."
    descr = """Print the CPU frequency scaling driver, the number of CPUs, the scaling governor, the
               turbo status, the minimum and maximum scaling frequencies and the hardware frequency
               limits."""
    subpars = subparsers.add_parser("get", help=text, description=descr)
    subpars.set_defaults(func=_get_command)

    text = """Print the real-time frequency of every CPU instead of the frequency settings."""
    subpars.add_argument("-r", "--real", action="store_true", help=text)

    text = """Print information in YAML format."""
    subpars.add_argument("--yaml", action="store_true", help=text)

    #
    # Create parser for the 'set' command.
    #
    text = "Change the CPU frequency settings."
    descr = """Change the CPU frequency settings of all CPUs. The new values are bounded by the
               hardware frequency limits, and the minimum frequency is always kept below the maximum
               frequency. Settings that are not specified keep their current values. Requires
               superuser privileges."""
    subpars = subparsers.add_parser("set", help=text, description=descr)
    subpars.set_defaults(func=_set_command)

    freq_text = """Frequency can be specified in kHz (e.g., '800000'), with a unit (e.g., '2.4GHz'),
                   or as a percentage of the maximum hardware frequency (e.g., '80%%')."""

    text = f"""The minimum CPU frequency. {freq_text}"""
    subpars.add_argument("--min", dest="min_freq", metavar="FREQ", help=text)

    text = f"""The maximum CPU frequency. {freq_text}"""
    subpars.add_argument("--max", dest="max_freq", metavar="FREQ", help=text)

    text = """Enable ('on' or '1') or disable ('off' or '0') turbo. Ignored if the system does
              not support controlling turbo."""
    subpars.add_argument("-t", "--turbo", metavar="on|off", help=text)

    text = """The CPU frequency scaling governor name, e.g., 'powersave' or 'performance'."""
    subpars.add_argument("-g", "--governor", metavar="NAME", help=text)

    plans = " ".join(f"'{name}' ({num}): {descr}" for name, num, descr in _get_plans())
    text = f"""Apply a power plan. The plan can be specified by name or by number. {plans} The
               '{Plans.AUTO_PLAN}' plan picks '{Plans.AC_PLAN}' when running on AC power and
               '{Plans.BATTERY_PLAN}' otherwise. Other options override the plan settings."""
    subpars.add_argument("-p", "--plan", metavar="PLAN", help=text)

    text = f"""Do not sleep between writing the transient and the final frequencies (the
               '{CommitSequencer.DEFAULT_STRATEGY}' commit strategy sleeps
               {CommitSequencer.DEFAULT_SLEEP_TIME} seconds by default)."""
    subpars.add_argument("--no-sleep", action="store_true", help=text)

    strategies = ", ".join(f"'{name}'" for name in CommitSequencer.STRATEGIES)
    text = f"""How to write the frequencies: {strategies}. The '{CommitSequencer.STRATEGIES[0]}'
               strategy first writes the full hardware frequency range to all CPUs, which makes
               drivers like 'intel_pstate' re-read the limits. The '{CommitSequencer.STRATEGIES[1]}'
               strategy writes the new frequencies right away. Default is
               '{CommitSequencer.DEFAULT_STRATEGY}'."""
    subpars.add_argument("--commit-strategy", dest="strategy", metavar="STRATEGY",
                         choices=CommitSequencer.STRATEGIES,
                         default=CommitSequencer.DEFAULT_STRATEGY, help=text)

    argcomplete.autocomplete(parser)

    return parser

def _get_plans():
    """Yield '(name, number, description)' tuples for all power plans."""

    for name, plan in Plans.PLANS.items():
        yield name, plan["number"], plan["help"]
    yield Plans.AUTO_PLAN, Plans.AUTO_PLAN_NUMBER, "Pick a plan depending on the power source."

def parse_arguments(argv=None):
    """Parse command-line arguments."""

    parser = build_arguments_parser()
    return parser.parse_args(argv)

# pylint: disable=import-outside-toplevel

def _get_command(args):
    """Implement the 'get' command."""

    from psfreqtool import _PsfreqCPUFreq

    _PsfreqCPUFreq.get_command(args)

def _set_command(args):
    """Implement the 'set' command."""

    from psfreqtool import _PsfreqCPUFreq

    _PsfreqCPUFreq.set_command(args)

def main(argv=None):
    """
    Script entry point.

    Args:
        argv: The command-line arguments, 'sys.argv[1:]' by default.

    Returns:
        The exit code.
    """

    try:
        args = parse_arguments(argv)

        if not getattr(args, "func", None):
            _LOG.error("please, run '%s -h' for help", TOOLNAME)
            return -1

        args.func(args)
    except KeyboardInterrupt:
        _LOG.info("\nInterrupted, exiting")
        return -1
    except Error as err:
        _LOG.error_out(err)

    return 0

if __name__ == "__main__":
    sys.exit(main())
