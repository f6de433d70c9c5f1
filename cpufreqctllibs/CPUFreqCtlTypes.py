# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Type definitions shared by the 'cpufreqctl' library modules.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from typing import TypedDict, Literal, Union

# Names of the supported CPU frequency scaling backends.
BackendNameType = Literal["intel_pstate", "cpufreq"]

# The turbo on/off state.
TurboStateType = Literal["on", "off"]

# The output format of the command-line tool.
OutputFormatType = Literal["human", "json"]

class CoreStatsTypedDict(TypedDict):
    """
    Summary statistics over the current frequencies of all CPUs, in kHz.

    Attributes:
        min: The lowest CPU frequency.
        max: The highest CPU frequency.
        avg: The average CPU frequency, truncated to an integer.
        rnd: The frequency of a randomly selected CPU.
    """

    min: int
    max: int
    avg: int
    rnd: int

class ContinuousFreqModeTypedDict(TypedDict):
    """
    Any frequency between 'min' and 'max' is allowed.

    Attributes:
        mode: Always "continuous".
        min: The lowest allowed frequency, percent of the reference frequency.
        max: The highest allowed frequency, percent of the reference frequency.
    """

    mode: Literal["continuous"]
    min: int
    max: int

class DiscreteFreqModeTypedDict(TypedDict):
    """
    Only the listed frequencies are allowed.

    Attributes:
        mode: Always "discrete".
        frequencies: Ascending list of allowed frequencies, percent of the reference frequency.
    """

    mode: Literal["discrete"]
    frequencies: list[int]

FreqModeTypedDict = Union[ContinuousFreqModeTypedDict, DiscreteFreqModeTypedDict]

class ConfigTypedDict(TypedDict):
    """
    The 'cpufreqctl' configuration.

    Attributes:
        backend: Backend name or "automatic".
        fmt: The output format.
        reference_freq: The reference maximum frequency in kHz to use instead of the one read from
                        sysfs, or None.
        sysfs_root: The sysfs mount point.
        lock_path: Path to the lock file serializing hardware limits probing.
    """

    backend: str
    fmt: OutputFormatType
    reference_freq: int | None
    sysfs_root: str
    lock_path: str
