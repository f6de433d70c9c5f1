# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide the backend for the 'intel_pstate' CPU frequency scaling driver.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from cpufreqctllibs import _BackendBase
from cpufreqctllibs.helperlibs import Logging

if typing.TYPE_CHECKING:
    from cpufreqctllibs import _SysfsIO

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

# The global 'intel_pstate' control files, relative to the CPU sysfs directory.
_NO_TURBO = "intel_pstate/no_turbo"
_MIN_PERF_PCT = "intel_pstate/min_perf_pct"
_MAX_PERF_PCT = "intel_pstate/max_perf_pct"

# The lowest min. limit 'set_min()' accepts, lower values are raised to this one.
MIN_PCT_FLOOR = 10

class IntelPstateBackend(_BackendBase.BackendBase):
    """
    The 'intel_pstate' driver backend. The driver exposes global min. and max. limits as native
    percentages, so no frequency conversion is needed. The turbo control file is inverted: 1 means
    turbo is disabled.
    """

    name = "intel_pstate"
    description = "Intel P-state driver"

    @staticmethod
    def probe(sysfs_io: _SysfsIO.SysfsIO) -> bool:
        """Refer to 'BackendBase.probe()'."""

        for path in (_MAX_PERF_PCT, _MIN_PERF_PCT, _NO_TURBO):
            if not sysfs_io.exists(path):
                _LOG.debug("intel_pstate: '%s' does not exist", path)
                return False
        return True

    def _read_turbo(self) -> bool:
        """Refer to 'BackendBase._read_turbo()'."""
        return not self._sysfs_io.read_int(_NO_TURBO, what="turbo disable flag")

    def _write_turbo(self, enable: bool):
        """Refer to 'BackendBase._write_turbo()'."""
        self._sysfs_io.write_int(_NO_TURBO, int(not enable), what="turbo disable flag")

    def _read_min(self) -> int:
        """Refer to 'BackendBase._read_min()'."""
        return self._sysfs_io.read_int(_MIN_PERF_PCT, what="min. performance percentage")

    def _read_max(self) -> int:
        """Refer to 'BackendBase._read_max()'."""
        return self._sysfs_io.read_int(_MAX_PERF_PCT, what="max. performance percentage")

    def _write_min(self, pct: int):
        """Refer to 'BackendBase._write_min()'."""

        max_pct = self._read_max()
        if pct > max_pct:
            _LOG.debug("intel_pstate: min. limit %d%% is above the max. limit, using %d%%",
                       pct, max_pct)
            pct = max_pct

        self._sysfs_io.write_int(_MIN_PERF_PCT, pct, what="min. performance percentage")

    def _write_max(self, pct: int):
        """Refer to 'BackendBase._write_max()'."""

        min_pct = self._read_min()
        if pct < min_pct:
            _LOG.debug("intel_pstate: max. limit %d%% is below the min. limit, using %d%%",
                       pct, min_pct)
            pct = min_pct

        self._sysfs_io.write_int(_MAX_PERF_PCT, pct, what="max. performance percentage")

    def _apply_min_policy(self, pct: int) -> int:
        """Raise min. limits below the floor to the floor."""

        if pct < MIN_PCT_FLOOR:
            _LOG.debug("intel_pstate: min. limit %d%% is below the floor, using %d%%",
                       pct, MIN_PCT_FLOOR)
            return MIN_PCT_FLOOR
        return pct

    def _save_limits(self) -> tuple[int, int]:
        """Refer to 'BackendBase._save_limits()'."""
        return self._read_min(), self._read_max()

    def _write_extreme_limits(self):
        """Refer to 'BackendBase._write_extreme_limits()'."""

        self._sysfs_io.write_int(_MAX_PERF_PCT, 100, what="max. performance percentage")
        self._sysfs_io.write_int(_MIN_PERF_PCT, 0, what="min. performance percentage")

    def _restore_limits(self, saved: tuple[int, int]):
        """Refer to 'BackendBase._restore_limits()'."""

        min_pct, max_pct = saved
        self._sysfs_io.write_int(_MIN_PERF_PCT, min_pct, what="min. performance percentage")
        self._sysfs_io.write_int(_MAX_PERF_PCT, max_pct, what="max. performance percentage")
