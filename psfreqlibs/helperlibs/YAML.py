# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide YAML output capabilities.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import PosixPath
from typing import Any, IO
import yaml
from psfreqlibs.helperlibs.Exceptions import Error

def _represent_none(dumper: yaml.Dumper, _) -> yaml.ScalarNode:
    """Represent 'None' values as empty strings in YAML output."""
    return dumper.represent_scalar("tag:yaml.org,2002:null", "")

def _represent_posixpath(dumper: yaml.Dumper, value: PosixPath) -> yaml.ScalarNode:
    """Represent a 'PosixPath' object as a YAML string."""
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(value))

def dump(data: dict[str, Any], fobj: IO[str]):
    """
    Dump a dictionary in YAML format, keeping the order of the keys.

    Args:
        data: The dictionary to dump. 'None' values are dumped as empty values, which read back as
              'None'.
        fobj: The file object to write the YAML data to.
    """

    yaml.add_representer(type(None), _represent_none)
    yaml.add_representer(PosixPath, _represent_posixpath)

    try:
        yaml.dump(data, fobj, default_flow_style=False, sort_keys=False)
    except OSError as err:
        msg = Error(str(err)).indent(2)
        raise Error(f"failed to write YAML output:\n{msg}") from err
