# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide the backend for the generic 'cpufreq' CPU frequency scaling interface.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from cpufreqctllibs import _BackendBase, CoreStats, FreqUnits, ProbeLock
from cpufreqctllibs.helperlibs import Logging, ClassHelpers

if typing.TYPE_CHECKING:
    import random
    from typing import Literal
    from cpufreqctllibs import _SysfsIO
    from cpufreqctllibs.CPUFreqCtlTypes import ConfigTypedDict, FreqModeTypedDict

    _LimitType = Literal["min", "max"]

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

_BOOST = "cpufreq/boost"

# The highest value the kernel accepts for 'scaling_max_freq' ('unsigned int'). The kernel clamps it
# to the hardware max. frequency.
_MAX_FREQ_EXTREME = 4294967295

def _limit_path(cpu: int, limit: _LimitType) -> str:
    """Return path to the 'scaling_min_freq' or 'scaling_max_freq' file of CPU 'cpu'."""
    return f"cpu{cpu}/cpufreq/scaling_{limit}_freq"

class CPUFreqBackend(_BackendBase.BackendBase):
    """
    The generic 'cpufreq' backend. The limits are per-CPU files in kHz. The same limit is applied
    to all CPUs, and reading a limit reports the average over all CPUs. Percentages are converted
    with the reference maximum frequency of CPU 0.
    """

    name = "cpufreq"
    description = "Generic Linux cpufreq interface"

    def __init__(self,
                 config: ConfigTypedDict,
                 sysfs_io: _SysfsIO.SysfsIO | None = None,
                 rng: random.Random | None = None):
        """Refer to 'BackendBase.__init__()'."""

        super().__init__(config, sysfs_io=sysfs_io, rng=rng)

        self._ref = FreqUnits.ReferenceFreq(self._sysfs_io, override=config["reference_freq"])

    def close(self):
        """Uninitialize the class instance."""

        ClassHelpers.close(self, close_attrs=("_ref",))
        super().close()

    @staticmethod
    def probe(sysfs_io: _SysfsIO.SysfsIO) -> bool:
        """Refer to 'BackendBase.probe()'."""

        for limit in ("max", "min"):
            path = _limit_path(0, limit)
            if not sysfs_io.exists(path):
                _LOG.debug("cpufreq: '%s' does not exist", path)
                return False
        return True

    def _read_turbo(self) -> bool:
        """Refer to 'BackendBase._read_turbo()'."""
        return bool(self._sysfs_io.read_int(_BOOST, what="turbo boost flag"))

    def _write_turbo(self, enable: bool):
        """Refer to 'BackendBase._write_turbo()'."""
        self._sysfs_io.write_int(_BOOST, int(enable), what="turbo boost flag")

    def _read_cpu_limit(self, cpu: int, limit: _LimitType) -> int:
        """Read and return the 'limit' frequency of CPU 'cpu' in kHz."""
        return self._sysfs_io.read_int(_limit_path(cpu, limit), what=f"{limit}. frequency limit")

    def _write_cpu_limit(self, cpu: int, limit: _LimitType, freq: int):
        """Write frequency 'freq' (kHz) to the 'limit' file of CPU 'cpu'."""
        self._sysfs_io.write_int(_limit_path(cpu, limit), freq, what=f"{limit}. frequency limit")

    def _read_limits(self, limit: _LimitType) -> list[int]:
        """Read the 'limit' frequency of all CPUs concurrently, return the list in kHz."""

        return CoreStats.run_per_cpu(lambda cpu: self._read_cpu_limit(cpu, limit), self.get_cpus(),
                                     what=f"reading the {limit}. frequency limit")

    def _read_limit_pct(self, limit: _LimitType) -> int:
        """Return the 'limit' frequency averaged over all CPUs, in percent."""

        freqs = self._read_limits(limit)
        avg = sum(freqs) // len(freqs)
        return self._ref.to_percentage(avg)

    def _read_min(self) -> int:
        """Refer to 'BackendBase._read_min()'."""
        return self._read_limit_pct("min")

    def _read_max(self) -> int:
        """Refer to 'BackendBase._read_max()'."""
        return self._read_limit_pct("max")

    def _write_min(self, pct: int):
        """Refer to 'BackendBase._write_min()'."""

        freq = self._ref.to_absolute(pct)

        def _set_cpu_min(cpu: int):
            """Set the min. limit of CPU 'cpu', not above its max. limit."""

            max_freq = self._read_cpu_limit(cpu, "max")
            self._write_cpu_limit(cpu, "min", min(freq, max_freq))

        _LOG.debug("cpufreq: min. limit %d%% is %d kHz", pct, freq)
        CoreStats.run_per_cpu(_set_cpu_min, self.get_cpus(), what="setting the min. frequency limit")

    def _write_max(self, pct: int):
        """Refer to 'BackendBase._write_max()'."""

        freq = self._ref.to_absolute(pct)

        def _set_cpu_max(cpu: int):
            """Set the max. limit of CPU 'cpu', not below its min. limit."""

            min_freq = self._read_cpu_limit(cpu, "min")
            self._write_cpu_limit(cpu, "max", max(freq, min_freq))

        _LOG.debug("cpufreq: max. limit %d%% is %d kHz", pct, freq)
        CoreStats.run_per_cpu(_set_cpu_max, self.get_cpus(), what="setting the max. frequency limit")

    def _save_limits(self) -> list[tuple[int, int]]:
        """Refer to 'BackendBase._save_limits()'."""

        return CoreStats.run_per_cpu(lambda cpu: (self._read_cpu_limit(cpu, "min"),
                                                  self._read_cpu_limit(cpu, "max")),
                                     self.get_cpus(), what="saving the frequency limits")

    def _write_extreme_limits(self):
        """Refer to 'BackendBase._write_extreme_limits()'."""

        def _write_cpu_extremes(cpu: int):
            """Write the extreme limits of CPU 'cpu', the max. limit first."""

            self._write_cpu_limit(cpu, "max", _MAX_FREQ_EXTREME)
            self._write_cpu_limit(cpu, "min", 0)

        CoreStats.run_per_cpu(_write_cpu_extremes, self.get_cpus(),
                              what="writing the extreme frequency limits")

    def _restore_limits(self, saved: list[tuple[int, int]]):
        """Refer to 'BackendBase._restore_limits()'."""

        limits = dict(zip(self.get_cpus(), saved))

        def _restore_cpu_limits(cpu: int):
            """Restore the limits of CPU 'cpu', the min. limit first."""

            min_freq, max_freq = limits[cpu]
            self._write_cpu_limit(cpu, "min", min_freq)
            self._write_cpu_limit(cpu, "max", max_freq)

        CoreStats.run_per_cpu(_restore_cpu_limits, self.get_cpus(),
                              what="restoring the frequency limits")

    def _prepare_probe(self):
        """
        Resolve the reference frequency before the extreme limits replace 'scaling_max_freq'.
        Refer to 'BackendBase._prepare_probe()'.
        """
        self._ref.get()

    def info_frequencies(self) -> FreqModeTypedDict:
        """
        Return the discrete frequencies list if the CPU provides one, otherwise probe the
        continuous range. Refer to 'BackendBase.info_frequencies()'.
        """

        # The reference frequency comes from 'scaling_max_freq', so it is resolved only with the
        # probe lock held.
        with ProbeLock.shared_access(self._lock_path):
            freqs = FreqUnits.read_available_freqs(self._sysfs_io)
            pcts = [FreqUnits.clamp_percentage(self._ref.to_percentage(freq))
                    for freq in freqs or []]

        if freqs is None:
            return super().info_frequencies()

        return {"mode": "discrete", "frequencies": sorted(set(pcts))}
