# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Helpers for turning machine-readable values into human-readable strings.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from cpufreqctllibs.helperlibs import Trivial
from cpufreqctllibs.helperlibs.Exceptions import Error

# SI prefixes and the scaler to the base unit.
_SIPFX_SCALERS = {
    "k": 1000,
    "M": 1000 * 1000,
    "G": 1000 * 1000 * 1000,
}

# Prefixes to walk through when scaling a large value down.
_SIPFX_LARGE = ["k", "M", "G", "T"]

def num2si(value: int | float,
           unit: str = "",
           decp: int = 1,
           sep: str = "",
           strip_zeroes: bool = False) -> str:
    """
    Convert a number into a human-readable form using SI prefixes like "k" (Kilo), "M" (Mega), etc.

    Args:
        value: The number to convert.
        unit: The unit used with 'value', may include an SI-prefix (e.g., "kHz").
        decp: Maximum number of decimal places the result should include.
        sep: The separator string to use between the resulting number and its unit.
        strip_zeroes: if True, strip trailing zeroes after the decimal point.

    Returns:
        str: The human-readable string representation of the number with its unit.

    Examples:
        >>> num2si(800000, unit="kHz", decp=2)
        "800.00MHz"
        >>> num2si(3600000, unit="kHz", decp=2, sep=" ", strip_zeroes=True)
        "3.6 GHz"
    """

    if not Trivial.is_num(value):
        raise Error(f"Bad input '{value}': not a number")
    if decp < 0 or decp > 8:
        raise Error(f"BUG: bad decimal places number '{decp}', must be within [0,8]")

    base_unit = unit
    if len(unit) > 1 and unit[0] in _SIPFX_SCALERS:
        value = float(value) * _SIPFX_SCALERS[unit[0]]
        base_unit = unit[1:]

    value = float(value)
    pfx = ""
    if abs(value) >= 1000:
        for pfx in _SIPFX_LARGE:
            value /= 1000.0
            if abs(value) < 1000:
                break

    result = f"{value:.{decp}f}"
    if strip_zeroes and "." in result:
        result = result.rstrip("0").rstrip(".")

    if base_unit or pfx:
        result += sep + pfx + base_unit

    return result
