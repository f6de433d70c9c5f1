# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Miscellaneous common helpers for class objects.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any
from cpufreqctllibs.helperlibs import Logging

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

class SimpleCloseContext:
    """
    Provide a simple context manager implementation for classes.

    Subclass it to avoid duplicating '__enter__()' and '__exit__()'. The 'close()' method is called
    automatically when exiting the runtime context.
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
                     class object has a '_close_{attr}' attribute set to 'False', the object is not
                     closed, only unreferenced (it was created by someone else).
        unref_attrs: Attribute names referring to objects created outside the class object. These
                     attributes are set to 'None'.
    """

    for attr in close_attrs:
        if not hasattr(cls_obj, attr):
            _LOG.warning("close(close_attrs=<attrs>): non-existing attribute '%s' in '%s'",
                         attr, cls_obj)

        obj = getattr(cls_obj, attr, None)
        if not obj:
            continue

        if attr.startswith("_"):
            name = f"_close{attr}"
        else:
            name = f"_close_{attr}"

        if getattr(cls_obj, name, True) and hasattr(obj, "close"):
            obj.close()

        setattr(cls_obj, attr, None)

    for attr in unref_attrs:
        if not hasattr(cls_obj, attr):
            _LOG.warning("close(unref_attrs=<attrs>): non-existing attribute '%s' in '%s'",
                         attr, cls_obj)

        if getattr(cls_obj, attr, None):
            setattr(cls_obj, attr, None)
