# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide the base class for CPU frequency scaling backends.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from cpufreqctllibs import _SysfsIO, CoreStats, FreqUnits, ProbeLock
from cpufreqctllibs.helperlibs import Logging, ClassHelpers
from cpufreqctllibs.helperlibs.Exceptions import ErrorInvalidArgument

if typing.TYPE_CHECKING:
    import random
    from cpufreqctllibs.CPUFreqCtlTypes import ConfigTypedDict, CoreStatsTypedDict
    from cpufreqctllibs.CPUFreqCtlTypes import FreqModeTypedDict, TurboStateType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

TURBO_STATES: tuple[TurboStateType, ...] = ("on", "off")

class BackendBase(ClassHelpers.SimpleCloseContext):
    """
    The base class for CPU frequency scaling backends. All backends provide the same operations,
    and min/max limits are always percentages of the reference maximum frequency.

    Public methods overview.
        * 'probe()' - check if the backend's sysfs control files exist (static method).
        * 'get_turbo()', 'set_turbo()' - get/set turbo on/off state.
        * 'get_min()', 'set_min()' - get/set the min. frequency limit.
        * 'get_max()', 'set_max()' - get/set the max. frequency limit.
        * 'reset()' - restore the max. limit, the min. limit and turbo to the defaults.
        * 'info_frequencies()' - get the frequencies the hardware accepts.
        * 'info_current()' - get statistics over the current frequency of all CPUs.

    Subclasses implement the methods starting with '_read_', '_write_', and the limits probing
    helpers. The '_read_*()' and '_write_*()' methods do not take the probe lock.
    """

    # Backend name and a short description, defined by subclasses.
    name = ""
    description = ""

    def __init__(self,
                 config: ConfigTypedDict,
                 sysfs_io: _SysfsIO.SysfsIO | None = None,
                 rng: random.Random | None = None):
        """
        Initialize a class instance.

        Args:
            config: The 'cpufreqctl' configuration.
            sysfs_io: The sysfs access object. Will be created if not provided.
            rng: Random numbers generator for picking the random CPU in 'info_current()'.
        """

        self._config = config
        self._rng = rng
        self._lock_path = config["lock_path"]

        self._close_sysfs_io = sysfs_io is None
        self._sysfs_io: _SysfsIO.SysfsIO
        if sysfs_io:
            self._sysfs_io = sysfs_io
        else:
            self._sysfs_io = _SysfsIO.SysfsIO(sysfs_root=config["sysfs_root"])

        self._cpus: list[int] | None = None

    def close(self):
        """Uninitialize the class instance."""
        ClassHelpers.close(self, close_attrs=("_sysfs_io",))

    @staticmethod
    def probe(sysfs_io: _SysfsIO.SysfsIO) -> bool:
        """
        Check if the backend is supported on the system.

        Args:
            sysfs_io: The sysfs access object.

        Returns:
            True if the backend's sysfs control files exist, False otherwise.
        """

        raise NotImplementedError()

    def get_cpus(self) -> list[int]:
        """Return the list of CPU numbers managed by the backend."""

        if self._cpus is None:
            self._cpus = self._sysfs_io.get_cpus()
        return self._cpus

    def _read_turbo(self) -> bool:
        """Return True if turbo is enabled."""
        raise NotImplementedError()

    def _write_turbo(self, enable: bool):
        """Enable or disable turbo."""
        raise NotImplementedError()

    def _read_min(self) -> int:
        """Return the min. frequency limit in percent."""
        raise NotImplementedError()

    def _read_max(self) -> int:
        """Return the max. frequency limit in percent."""
        raise NotImplementedError()

    def _write_min(self, pct: int):
        """
        Set the min. frequency limit to 'pct' percent. Clamp it to the current max. limit if it is
        greater.
        """
        raise NotImplementedError()

    def _write_max(self, pct: int):
        """
        Set the max. frequency limit to 'pct' percent. Clamp it to the current min. limit if it is
        lower.
        """
        raise NotImplementedError()

    def _save_limits(self) -> typing.Any:
        """Return the current limits in a form '_restore_limits()' accepts."""
        raise NotImplementedError()

    def _write_extreme_limits(self):
        """Write the lowest min. and the highest max. limits the interface accepts."""
        raise NotImplementedError()

    def _restore_limits(self, saved: typing.Any):
        """Restore the limits saved by '_save_limits()'."""
        raise NotImplementedError()

    def _prepare_probe(self):
        """
        Get ready for probing the limits. Called with the exclusive probe lock held, before the
        limits are saved.
        """

    def _apply_min_policy(self, pct: int) -> int:
        """Apply a backend-specific policy to a user-requested min. limit percentage."""
        return pct

    def get_turbo(self) -> TurboStateType:
        """Return the turbo state, "on" or "off"."""

        if self._read_turbo():
            return "on"
        return "off"

    def set_turbo(self, state: TurboStateType):
        """
        Switch turbo on or off.

        Args:
            state: "on" or "off".

        Raises:
            ErrorInvalidArgument: If 'state' is not "on" or "off".
        """

        if state not in TURBO_STATES:
            raise ErrorInvalidArgument(f"Bad turbo state '{state}', use one of: "
                                       f"{', '.join(TURBO_STATES)}", value=state, context="turbo")

        _LOG.debug("%s: switching turbo %s", self.name, state)
        self._write_turbo(state == "on")

    def get_min(self) -> int:
        """Return the min. frequency limit in percent of the reference frequency."""

        with ProbeLock.shared_access(self._lock_path):
            return self._read_min()

    def get_max(self) -> int:
        """Return the max. frequency limit in percent of the reference frequency."""

        with ProbeLock.shared_access(self._lock_path):
            return self._read_max()

    def set_min(self, pct: int):
        """
        Set the min. frequency limit.

        Args:
            pct: The limit in percent of the reference frequency. Clamped to [0,100], then to
                 the backend floor (if any), then to the current max. limit.
        """

        pct = self._apply_min_policy(FreqUnits.clamp_percentage(pct))
        _LOG.debug("%s: setting min. limit to %d%%", self.name, pct)

        with ProbeLock.exclusive_access(self._lock_path):
            self._write_min(pct)

    def set_max(self, pct: int):
        """
        Set the max. frequency limit.

        Args:
            pct: The limit in percent of the reference frequency. Clamped to [0,100], then to
                 the current min. limit.
        """

        pct = FreqUnits.clamp_percentage(pct)
        _LOG.debug("%s: setting max. limit to %d%%", self.name, pct)

        with ProbeLock.exclusive_access(self._lock_path):
            self._write_max(pct)

    def reset(self):
        """
        Restore the defaults: max. limit 100%, min. limit 0%, turbo on. The max. limit goes first,
        because some interfaces reject a min. limit greater than the max. limit. The min. limit
        floor of 'set_min()' does not apply here.
        """

        _LOG.debug("%s: resetting limits and turbo", self.name)

        with ProbeLock.exclusive_access(self._lock_path):
            self._write_max(FreqUnits.PCT_MAX)
            self._write_min(FreqUnits.PCT_MIN)
        self._write_turbo(True)

    def _probe_limits(self) -> tuple[int, int]:
        """
        Find out the true min. and max. frequency limits by writing the extreme values and reading
        back what the kernel accepted. The original limits are restored on any exit path. The
        exclusive probe lock is held for the duration of the sequence.

        Returns:
            The '(min, max)' tuple, percent of the reference frequency, clamped to [0,100].
        """

        with ProbeLock.exclusive_access(self._lock_path):
            self._prepare_probe()
            saved = self._save_limits()
            try:
                self._write_extreme_limits()
                min_pct = self._read_min()
                max_pct = self._read_max()
            finally:
                _LOG.debug("%s: restoring limits after probing", self.name)
                self._restore_limits(saved)

        return FreqUnits.clamp_percentage(min_pct), FreqUnits.clamp_percentage(max_pct)

    def info_frequencies(self) -> FreqModeTypedDict:
        """
        Return the frequencies the hardware accepts. The base implementation probes the continuous
        range.
        """

        min_pct, max_pct = self._probe_limits()
        return {"mode": "continuous", "min": min_pct, "max": max_pct}

    def _read_cur_freq(self, cpu: int) -> int:
        """Read and return the current frequency of CPU 'cpu' in kHz."""

        path = f"cpu{cpu}/cpufreq/scaling_cur_freq"
        return self._sysfs_io.read_int(path, what=f"current frequency of CPU {cpu}")

    def info_current(self) -> CoreStatsTypedDict:
        """Return statistics over the current frequencies (kHz) of all CPUs."""

        freqs = CoreStats.run_per_cpu(self._read_cur_freq, self.get_cpus(),
                                      what="reading the current frequency")
        return CoreStats.aggregate(freqs, rng=self._rng)
