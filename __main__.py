#!/usr/bin/python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
The main entry point for the 'psfreq' tool when it is run as a zipapp archive or as
'python -m <source directory>'. The tool has no data files, so nothing has to be extracted.
"""

import sys
from psfreqtool._Psfreq import main

if __name__ == "__main__":
    sys.exit(main())
