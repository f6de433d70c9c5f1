# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Build the 'cpufreqctl' configuration from explicit values and environment variables.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import typing
from cpufreqctllibs.helperlibs import Logging, Trivial
from cpufreqctllibs.helperlibs.Exceptions import ErrorInvalidArgument

if typing.TYPE_CHECKING:
    from cpufreqctllibs.CPUFreqCtlTypes import ConfigTypedDict, OutputFormatType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

# Environment variables overriding the defaults.
REFERENCE_FREQ_ENVAR = "CPUFREQCTL_REFERENCE_FREQ"
SYSFS_ROOT_ENVAR = "CPUFREQCTL_SYSFS_ROOT"
LOCK_FILE_ENVAR = "CPUFREQCTL_LOCK_FILE"

DEFAULT_SYSFS_ROOT = "/sys"
DEFAULT_LOCK_PATH = "/run/lock/cpufreqctl.lock"

OUTPUT_FORMATS: tuple[OutputFormatType, ...] = ("human", "json")

def _parse_reference_freq(val: str | int, what: str) -> int:
    """Validate and return a reference frequency value."""

    freq = Trivial.str_to_int(val, what=what)
    if freq <= 0:
        raise ErrorInvalidArgument(f"Bad {what} '{val}': should be a positive integer (kHz)",
                                   value=val, context=what)
    return freq

def get_config(backend: str = "automatic",
               fmt: str = "human",
               reference_freq: str | int | None = None,
               sysfs_root: str | None = None,
               lock_path: str | None = None) -> ConfigTypedDict:
    """
    Build and return the configuration dictionary. Explicit arguments take priority over the
    environment variables, which take priority over the defaults.

    Args:
        backend: Backend name or "automatic". The name is validated by the backend selector.
        fmt: The output format ("human" or "json").
        reference_freq: The reference maximum frequency in kHz.
        sysfs_root: The sysfs mount point.
        lock_path: Path to the probe lock file.

    Returns:
        The configuration dictionary.

    Raises:
        ErrorInvalidArgument: If a value is not valid.
    """

    if fmt not in OUTPUT_FORMATS:
        raise ErrorInvalidArgument(f"Bad output format '{fmt}', use one of: "
                                   f"{', '.join(OUTPUT_FORMATS)}", value=fmt, context="format")

    ref_freq: int | None = None
    if reference_freq is not None:
        ref_freq = _parse_reference_freq(reference_freq, "reference frequency")
    elif os.environ.get(REFERENCE_FREQ_ENVAR):
        ref_freq = _parse_reference_freq(os.environ[REFERENCE_FREQ_ENVAR],
                                         f"'{REFERENCE_FREQ_ENVAR}' environment variable value")

    if sysfs_root is None:
        sysfs_root = os.environ.get(SYSFS_ROOT_ENVAR, DEFAULT_SYSFS_ROOT)
    if lock_path is None:
        lock_path = os.environ.get(LOCK_FILE_ENVAR, DEFAULT_LOCK_PATH)

    config: ConfigTypedDict = {"backend": backend,
                               "fmt": typing.cast("OutputFormatType", fmt),
                               "reference_freq": ref_freq,
                               "sysfs_root": sysfs_root,
                               "lock_path": lock_path}

    _LOG.debug("Configuration: %s", config)
    return config
