# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2026 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Miscellaneous common helpers for class objects.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any
from psfreqlibs.helperlibs import Logging

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.psfreq.{__name__}")

class SimpleCloseContext:
    """
    Provide a simple context manager implementation for classes. Sub-classes get '__enter__()' and
    '__exit__()', and only have to implement 'close()'.
    """

    def close(self):
        """Uninitialize the class object. Supposed to be implemented by the subclass."""

    def __enter__(self):
        """Enter the run-time context."""
        return self

    def __exit__(self, *_: Any):
        """Exit from the runtime context."""
        self.close()

def close(cls_obj: Any,
          close_attrs: list[str] | tuple[str, ...] = tuple(),
          unref_attrs: list[str] | tuple[str, ...] = tuple()):
    """
    Uninitialize a class object by freeing objects referred to by its attributes.

    Args:
        cls_obj: The class object to uninitialize.
        close_attrs: Attribute names referring to objects created by the class object. These objects
                     are closed by calling their 'close()' method, and then set to 'None'. If the
                     class object has the '_close{attr}' attribute (e.g., '_close_sysfs_io' for the
                     '_sysfs_io' attribute) and it is 'False', the object is not closed, only
                     unreferenced.
        unref_attrs: Attribute names referring to objects created outside the class object. These
                     attributes are set to 'None'.
    """

    for attr in close_attrs:
        obj = getattr(cls_obj, attr, None)
        if not obj:
            continue

        if attr.startswith("_"):
            name = f"_close{attr}"
        else:
            name = f"_close_{attr}"

        if getattr(cls_obj, name, True):
            if hasattr(obj, "close"):
                obj.close()
            else:
                _LOG.debug("No 'close()' method in '%s'", obj)

        setattr(cls_obj, attr, None)

    for attr in unref_attrs:
        if getattr(cls_obj, attr, None) is not None:
            setattr(cls_obj, attr, None)
