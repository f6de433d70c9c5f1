# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Common trivial helpers.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from cpufreqctllibs.helperlibs.Exceptions import ErrorBadFormat, ErrorOutOfRange

def str_to_int(snum: str | int, what: str = "") -> int:
    """
    Convert a string to an integer value.

    Args:
        snum: The value to convert to 'int'.
        what: A string describing the value to convert, for the possible error message.

    Returns:
        int: The converted integer value.

    Raises:
        ErrorBadFormat: If 'snum' cannot be converted to an integer.
    """

    try:
        return int(str(snum).strip(), 10)
    except (ValueError, TypeError):
        if not what:
            what = "value"
        raise ErrorBadFormat(f"Bad {what} '{snum}': should be an integer", value=snum,
                             context=what) from None

def is_num(value: str | int | float) -> bool:
    """
    Check if 'value' can be converted to 'int' or 'float' types.

    Args:
        value: The value to check.

    Returns:
        bool: True if 'value' can be converted to 'int' or 'float' types, False otherwise.
    """

    try:
        int(str(value))
    except (ValueError, TypeError):
        try:
            float(str(value))
        except (ValueError, TypeError):
            return False

    return True

def validate_value_in_range(value: int | float, minval: int, maxval: int, what: str = ""):
    """
    Validate that 'value' is in the ['minval', 'maxval'] range.

    Args:
        value: The value to validate.
        minval: The minimum allowed value for 'value'.
        maxval: The maximum allowed value for 'value'.
        what: A string describing the value that is being validated, for the possible error message.

    Raises:
        ErrorOutOfRange: If 'value' is outside of the range.
    """

    if value < minval or value > maxval:
        if not what:
            what = "value"
        raise ErrorOutOfRange(f"{what.capitalize()} '{value}' is out of range, should be within "
                              f"[{minval},{maxval}]", value=value, rng=(minval, maxval))
