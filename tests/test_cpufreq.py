# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Tests for the generic 'cpufreq' backend.
"""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import time
import random
import typing
import threading
import pytest
import common
from cpufreqctllibs import _SysfsIO, Config, ProbeLock
from cpufreqctllibs._CPUFreqBackend import CPUFreqBackend
from cpufreqctllibs.helperlibs.Exceptions import Error, ErrorNotFound, ErrorBadFormat

if typing.TYPE_CHECKING:
    from pathlib import Path
    from cpufreqctllibs.CPUFreqCtlTypes import ConfigTypedDict, FreqModeTypedDict

_CPUS = (0, 1, 2, 3)

def _cpu_limits(sysfs_root: Path, limit: str) -> list[int]:
    """Return the per-CPU 'limit' ("min" or "max") frequencies from the fake sysfs tree."""

    return [common.read_int(common.cpufreq_path(sysfs_root, cpu, f"scaling_{limit}_freq"))
            for cpu in _CPUS]

def test_probe(sysfs_root: Path):
    """Verify the capability check."""

    sysfs_io = _SysfsIO.SysfsIO(sysfs_root=sysfs_root)
    assert not CPUFreqBackend.probe(sysfs_io)

    common.add_cpufreq(sysfs_root)
    assert CPUFreqBackend.probe(sysfs_io)

    common.cpufreq_path(sysfs_root, 0, "scaling_min_freq").unlink()
    assert not CPUFreqBackend.probe(sysfs_io)

def test_turbo(sysfs_root: Path, config: ConfigTypedDict):
    """Verify turbo control via the 'boost' file."""

    common.add_cpufreq(sysfs_root, boost=0)
    boost_path = common.cpu_base(sysfs_root) / "cpufreq" / "boost"

    with CPUFreqBackend(config) as backend:
        assert backend.get_turbo() == "off"
        backend.set_turbo("on")
        assert common.read_int(boost_path) == 1
        assert backend.get_turbo() == "on"

def test_min_max(sysfs_root: Path, config: ConfigTypedDict):
    """Verify reading and writing the limits as percentages of the reference frequency."""

    common.add_cpufreq(sysfs_root, min_freq=800000, max_freq=3600000)

    with CPUFreqBackend(config) as backend:
        assert backend.get_min() == 22
        assert backend.get_max() == 100

        backend.set_max(50)
        assert _cpu_limits(sysfs_root, "max") == [1800000] * 4
        assert backend.get_max() == 50

        backend.set_min(25)
        assert _cpu_limits(sysfs_root, "min") == [900000] * 4
        assert backend.get_min() == 25

def test_average_limit(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that the limit reported for CPUs with different limits is the average one."""

    common.add_cpufreq(sysfs_root, min_freq=(400000, 800000, 1200000, 1600000),
                       max_freq=3600000)

    with CPUFreqBackend(config) as backend:
        # The average is 1000000 kHz.
        assert backend.get_min() == 28

def test_clamping(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that min. and max. limits are clamped to each other on every CPU."""

    common.add_cpufreq(sysfs_root, min_freq=800000, max_freq=3600000)

    with CPUFreqBackend(config) as backend:
        backend.set_max(50)
        backend.set_min(80)
        assert _cpu_limits(sysfs_root, "min") == [1800000] * 4

        backend.set_min(30)
        backend.set_max(10)
        assert _cpu_limits(sysfs_root, "max") == [1080000] * 4

        # No floor for this backend.
        backend.set_min(5)
        assert _cpu_limits(sysfs_root, "min") == [180000] * 4

def test_reference_override(sysfs_root: Path, lock_path: Path):
    """Verify that the reference frequency override is used for conversions."""

    common.add_cpufreq(sysfs_root, max_freq=1800000)
    config = Config.get_config(sysfs_root=str(sysfs_root), lock_path=str(lock_path),
                               reference_freq=3600000)

    with CPUFreqBackend(config) as backend:
        assert backend.get_max() == 50

def test_reset(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that reset restores the defaults."""

    common.add_cpufreq(sysfs_root, min_freq=800000, max_freq=3600000, boost=0)

    with CPUFreqBackend(config) as backend:
        backend.set_min(40)
        backend.reset()

        assert _cpu_limits(sysfs_root, "max") == [3600000] * 4
        assert _cpu_limits(sysfs_root, "min") == [0] * 4
        assert backend.get_min() == 0
        assert backend.get_max() == 100
        assert backend.get_turbo() == "on"

def test_info_frequencies_discrete(sysfs_root: Path, config: ConfigTypedDict):
    """Verify the discrete frequencies list."""

    common.add_cpufreq(sysfs_root, max_freq=3600000,
                       available_freqs=(3600000, 2800000, 2000000, 1200000, 1200000))

    with CPUFreqBackend(config) as backend:
        info = backend.info_frequencies()

    assert info == {"mode": "discrete", "frequencies": [33, 56, 78, 100]}

def test_info_frequencies_continuous(sysfs_root: Path, config: ConfigTypedDict):
    """Verify the continuous range probing and that per-CPU limits are restored afterwards."""

    min_freqs = [800000, 900000, 1000000, 1100000]
    max_freqs = [3600000, 3500000, 3400000, 3300000]
    common.add_cpufreq(sysfs_root, min_freq=min_freqs, max_freq=max_freqs)

    with CPUFreqBackend(config) as backend:
        info = backend.info_frequencies()

    assert info == {"mode": "continuous", "min": 0, "max": 100}
    assert _cpu_limits(sysfs_root, "min") == min_freqs
    assert _cpu_limits(sysfs_root, "max") == max_freqs

def test_info_frequencies_restores_on_error(sysfs_root: Path, config: ConfigTypedDict,
                                            monkeypatch: pytest.MonkeyPatch):
    """Verify that the limits are restored if reading back the probed limits fails."""

    common.add_cpufreq(sysfs_root, min_freq=800000, max_freq=3600000)

    with CPUFreqBackend(config) as backend:
        def _failing_read_max() -> int:
            """Fail reading the max. limit."""
            raise Error("simulated read failure")

        monkeypatch.setattr(backend, "_read_max", _failing_read_max)

        with pytest.raises(Error):
            backend.info_frequencies()

    assert _cpu_limits(sysfs_root, "min") == [800000] * 4
    assert _cpu_limits(sysfs_root, "max") == [3600000] * 4

def test_failed_cpu_write(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that a failure on one CPU fails the whole operation and names the CPU."""

    common.add_cpufreq(sysfs_root)
    common.cpufreq_path(sysfs_root, 2, "scaling_min_freq").unlink()

    with CPUFreqBackend(config) as backend:
        with pytest.raises(ErrorNotFound) as excinfo:
            backend.set_min(50)

    assert "CPU 2" in str(excinfo.value)

def test_info_current(sysfs_root: Path, config: ConfigTypedDict):
    """Verify current frequency statistics."""

    freqs = [800000, 1200000, 1600000, 2000000]
    common.add_cpufreq(sysfs_root, cur_freqs=freqs)

    expected = random.Random(7)
    with CPUFreqBackend(config, rng=random.Random(7)) as backend:
        for _ in range(5):
            stats = backend.info_current()
            assert stats["min"] == 800000
            assert stats["max"] == 2000000
            assert stats["avg"] == 1400000
            assert stats["rnd"] == freqs[expected.randrange(len(freqs))]

def test_missing_cur_freq(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that a missing current frequency file is an error."""

    common.add_cpufreq(sysfs_root)
    common.cpufreq_path(sysfs_root, 1, "scaling_cur_freq").unlink()

    with CPUFreqBackend(config) as backend:
        with pytest.raises(ErrorNotFound):
            backend.info_current()

def _info_frequencies_while_probing(backend: CPUFreqBackend, sysfs_root: Path,
                                    lock_path: Path, max_freq: int) -> list[FreqModeTypedDict]:
    """
    Run 'backend.info_frequencies()' in a thread while the probe lock is held and
    'scaling_max_freq' contains the hardware max. frequency, like in the middle of probing by
    another process. Restore 'max_freq' before releasing the lock and return the results.
    """

    results: list[FreqModeTypedDict] = []

    with ProbeLock.exclusive_access(lock_path):
        for cpu in _CPUS:
            common.write_file(common.cpufreq_path(sysfs_root, cpu, "scaling_max_freq"), 4000000)

        thread = threading.Thread(target=lambda: results.append(backend.info_frequencies()))
        thread.start()
        time.sleep(0.1)
        assert thread.is_alive()

        for cpu in _CPUS:
            common.write_file(common.cpufreq_path(sysfs_root, cpu, "scaling_max_freq"), max_freq)

    thread.join()
    return results

def test_discrete_readers_wait_for_probe(sysfs_root: Path, config: ConfigTypedDict,
                                         lock_path: Path):
    """
    Verify that the discrete frequencies are not converted with the max. limit written while
    probing.
    """

    common.add_cpufreq(sysfs_root, min_freq=400000, max_freq=2000000, cpuinfo_max_freq=4000000,
                       available_freqs=(1000000, 2000000))

    with CPUFreqBackend(config) as backend:
        results = _info_frequencies_while_probing(backend, sysfs_root, lock_path, 2000000)
        assert results == [{"mode": "discrete", "frequencies": [50, 100]}]
        assert backend.get_max() == 100

def test_continuous_readers_wait_for_probe(sysfs_root: Path, config: ConfigTypedDict,
                                           lock_path: Path):
    """
    Verify that the reference frequency is not resolved from the max. limit written while
    probing.
    """

    common.add_cpufreq(sysfs_root, min_freq=400000, max_freq=2000000, cpuinfo_max_freq=4000000)

    with CPUFreqBackend(config) as backend:
        results = _info_frequencies_while_probing(backend, sysfs_root, lock_path, 2000000)
        assert results == [{"mode": "continuous", "min": 0, "max": 100}]

        assert _cpu_limits(sysfs_root, "max") == [2000000] * 4
        assert _cpu_limits(sysfs_root, "min") == [400000] * 4
        assert backend.get_max() == 100
        assert backend.get_min() == 20

def test_info_frequencies_bad_list(sysfs_root: Path, config: ConfigTypedDict):
    """Verify that a malformed available frequencies list is an error."""

    common.add_cpufreq(sysfs_root, available_freqs=(3600000, 2000000))
    common.write_file(common.cpufreq_path(sysfs_root, 0, "scaling_available_frequencies"),
                      "3600000 2000000 fast")

    with CPUFreqBackend(config) as backend:
        with pytest.raises(ErrorBadFormat):
            backend.info_frequencies()
