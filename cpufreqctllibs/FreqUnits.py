# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Convert CPU frequency limits between percentages and absolute frequencies.

Percentages are relative to the reference maximum CPU frequency, which is resolved by the
'ReferenceFreq' class. Absolute frequencies are in kHz, the sysfs native unit.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import contextlib
from cpufreqctllibs import _SysfsIO
from cpufreqctllibs.helperlibs import Logging, ClassHelpers, Trivial
from cpufreqctllibs.helperlibs.Exceptions import Error, ErrorNotFound

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

PCT_MIN = 0
PCT_MAX = 100

def _div_round(num: int, den: int) -> int:
    """Divide 'num' by 'den' rounding half away from zero, using integer arithmetic only."""

    quot, rem = divmod(abs(num), abs(den))
    if 2 * rem >= abs(den):
        quot += 1
    if (num < 0) != (den < 0):
        return -quot
    return quot

def _validate_ref(ref: int):
    """Make sure the reference frequency can be divided by."""

    if ref <= 0:
        raise Error(f"BUG: bad reference frequency '{ref}', must be a positive integer")

def clamp_percentage(pct: int) -> int:
    """Clamp 'pct' to the [0,100] range."""
    return max(PCT_MIN, min(PCT_MAX, pct))

def to_percentage(freq: int, ref: int) -> int:
    """
    Convert an absolute frequency to a percentage of the reference frequency.

    Args:
        freq: The frequency to convert.
        ref: The reference maximum frequency, same unit as 'freq'.

    Returns:
        'freq / ref * 100' rounded half away from zero. Not clamped.
    """

    _validate_ref(ref)
    return _div_round(freq * 100, ref)

def to_absolute(pct: int, ref: int) -> int:
    """
    Convert a percentage of the reference frequency to an absolute frequency.

    Args:
        pct: The percentage to convert.
        ref: The reference maximum frequency.

    Returns:
        'pct / 100 * ref' rounded half away from zero, in the unit of 'ref'.
    """

    _validate_ref(ref)
    return _div_round(pct * ref, 100)

def read_available_freqs(sysfs_io: _SysfsIO.SysfsIO, cpu: int = 0) -> list[int] | None:
    """
    Read the available frequencies list of a CPU.

    Args:
        sysfs_io: The sysfs access object.
        cpu: The CPU to read the list of.

    Returns:
        The frequencies in kHz, in the sysfs file order. None if the file does not exist or is
        empty.

    Raises:
        ErrorBadFormat: If an entry of the list is not an integer.
    """

    path = f"cpu{cpu}/cpufreq/scaling_available_frequencies"
    try:
        val = sysfs_io.read(path, what=f"CPU {cpu} available frequencies")
    except ErrorNotFound:
        return None

    freqs = [Trivial.str_to_int(freq, what=f"CPU {cpu} available frequency")
             for freq in val.split()]
    if not freqs:
        return None
    return freqs

class ReferenceFreq(ClassHelpers.SimpleCloseContext):
    """
    Resolve and cache the reference maximum CPU frequency (kHz). The first available source wins:
      1. The explicit override.
      2. The currently configured max. scaling frequency ('scaling_max_freq').
      3. The hardware max. frequency ('cpuinfo_max_freq').
      4. The highest available frequency ('scaling_available_frequencies').
    If the BIOS limit ('bios_limit') exists and is lower than the result, the BIOS limit is used.

    The value is resolved on the first 'get()' call and never re-read, so that the same reference
    is used for converting in both directions.
    """

    def __init__(self, sysfs_io: _SysfsIO.SysfsIO, override: int | None = None, cpu: int = 0):
        """
        Initialize a class instance.

        Args:
            sysfs_io: The sysfs access object.
            override: The explicit reference frequency in kHz, or None.
            cpu: The CPU to read the frequency files of.
        """

        self._sysfs_io = sysfs_io
        self._override = override
        self._cpu = cpu

        self._freq: int | None = None

    def close(self):
        """Uninitialize the class instance."""
        ClassHelpers.close(self, unref_attrs=("_sysfs_io",))

    def _read_freq(self, fname: str) -> int | None:
        """Read a frequency from a cpufreq file of the CPU, return None if it does not exist."""

        path = f"cpu{self._cpu}/cpufreq/{fname}"
        with contextlib.suppress(ErrorNotFound):
            return self._sysfs_io.read_int(path, what=f"CPU {self._cpu} '{fname}'")
        return None

    def _read_max_available_freq(self) -> int | None:
        """Return the highest entry of the available frequencies list, or None."""

        freqs = read_available_freqs(self._sysfs_io, cpu=self._cpu)
        if freqs is None:
            return None
        return max(freqs)

    def _resolve(self) -> int:
        """Resolve the reference frequency from the sources in priority order."""

        freq: int | None
        src: str

        if self._override is not None:
            freq, src = self._override, "override"
        else:
            freq, src = self._read_freq("scaling_max_freq"), "scaling_max_freq"
            if freq is None:
                freq, src = self._read_freq("cpuinfo_max_freq"), "cpuinfo_max_freq"
            if freq is None:
                freq = self._read_max_available_freq()
                src = "scaling_available_frequencies"

        bios_limit = self._read_freq("bios_limit")
        if bios_limit is not None and (freq is None or bios_limit < freq):
            freq, src = bios_limit, "bios_limit"

        if freq is None or freq <= 0:
            raise Error(f"Failed to find out the reference maximum frequency of CPU {self._cpu}: "
                        f"none of the frequency sysfs files is available")

        _LOG.debug("Reference frequency: %d kHz (source: %s)", freq, src)
        return freq

    def get(self) -> int:
        """Return the reference maximum frequency in kHz."""

        if self._freq is None:
            self._freq = self._resolve()
        return self._freq

    def to_percentage(self, freq: int) -> int:
        """Convert frequency 'freq' (kHz) to a percentage of the reference frequency."""
        return to_percentage(freq, self.get())

    def to_absolute(self, pct: int) -> int:
        """Convert percentage 'pct' to an absolute frequency in kHz."""
        return to_absolute(pct, self.get())
