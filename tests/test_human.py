# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Tests for the 'Human' module.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from typing import TypedDict
import pytest
from psfreqlibs.helperlibs import Human
from psfreqlibs.helperlibs.Exceptions import ErrorBadFormat

class _Num2SITestDataType(TypedDict, total=False):
    """Type for the '_NUM2SI_TEST_DATA' list."""
    value: int | float
    unit: str
    decp: int
    sep: str | None
    strip_zeroes: bool
    result: str

_NUM2SI_TEST_DATA: list[_Num2SITestDataType] = [
    {"value": 1600000, "unit": "kHz", "decp": 2, "sep": None, "strip_zeroes": False,
     "result": "1.60GHz"},
    {"value": 800000, "unit": "kHz", "decp": 2, "sep": None, "strip_zeroes": False,
     "result": "800.00MHz"},
    {"value": 800000, "unit": "kHz", "decp": 2, "sep": " ", "strip_zeroes": True,
     "result": "800 MHz"},
    {"value": 3400000, "unit": "kHz", "decp": 1, "sep": None, "strip_zeroes": True,
     "result": "3.4GHz"},
    {"value": 999, "unit": "kHz", "decp": 0, "sep": None, "strip_zeroes": True,
     "result": "999kHz"},
    {"value": 0, "unit": "kHz", "decp": 2, "sep": None, "strip_zeroes": True,
     "result": "0Hz"},
    {"value": 0.5, "unit": "s", "decp": 0, "sep": None, "strip_zeroes": True,
     "result": "500ms"},
    {"value": 2, "unit": "s", "decp": 1, "sep": None, "strip_zeroes": False,
     "result": "2.0s"},
]

class _ParseHumanTestDataType(TypedDict, total=False):
    """Type for the '_PARSE_HUMAN_TEST_DATA' list."""
    hval: str | int
    unit: str
    target_unit: str | None
    integer: bool
    result: int | float

_PARSE_HUMAN_TEST_DATA: list[_ParseHumanTestDataType] = [
    {"hval": "2.4GHz", "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 2400000},
    {"hval": "2.4 GHz", "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 2400000},
    {"hval": "800000", "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 800000},
    {"hval": 800000, "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 800000},
    {"hval": "800MHz", "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 800000},
    {"hval": "1500000Hz", "unit": "kHz", "target_unit": "kHz", "integer": True, "result": 1500},
    {"hval": "1GHz", "unit": "Hz", "target_unit": None, "integer": True, "result": 1000000000},
    {"hval": "500ms", "unit": "s", "target_unit": None, "integer": False, "result": 0.5},
    {"hval": "2", "unit": "s", "target_unit": None, "integer": True, "result": 2},
]

def test_num2si():
    """Test the 'num2si()' function."""

    for entry in _NUM2SI_TEST_DATA:
        result = Human.num2si(entry["value"], unit=entry["unit"], decp=entry["decp"],
                              sep=entry["sep"], strip_zeroes=entry["strip_zeroes"])
        assert result == entry["result"], \
               f"Bad result of num2si({entry['value']}, unit={entry['unit']}, " \
               f"decp={entry['decp']}, sep={entry['sep']}, " \
               f"strip_zeroes={entry['strip_zeroes']}):\n" \
               f"expected '{entry['result']}', got '{result}'"

def test_parse_human():
    """Test the 'parse_human()' function."""

    for entry in _PARSE_HUMAN_TEST_DATA:
        result = Human.parse_human(entry["hval"], unit=entry["unit"],
                                   target_unit=entry["target_unit"], integer=entry["integer"])
        assert result == entry["result"], \
               f"Bad result of parse_human({entry['hval']}, unit={entry['unit']}, " \
               f"target_unit={entry['target_unit']}, integer={entry['integer']}):\n" \
               f"expected '{entry['result']}', got '{result}'"

def test_parse_human_bad():
    """Test the 'parse_human()' function with bad input."""

    for hval in ("", "fast", "2.4GB", "GHz", "1.2.3GHz", "nan", "inf", "-infGHz", "nanMHz",
                 "1e308GHz"):
        with pytest.raises(ErrorBadFormat):
            Human.parse_human(hval, unit="kHz", target_unit="kHz", what="frequency")

def test_separate_si_prefix():
    """Test the 'separate_si_prefix()' function."""

    assert Human.separate_si_prefix("kHz") == ("k", "Hz")
    assert Human.separate_si_prefix("Hz") == (None, "Hz")
    assert Human.separate_si_prefix("ms") == ("m", "s")
    assert Human.separate_si_prefix("s") == (None, "s")
