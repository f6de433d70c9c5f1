# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Common functions for 'cpufreqctl' tests: populate fake sysfs trees."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

from pathlib import Path
from typing import Sequence

def cpu_base(sysfs_root: Path) -> Path:
    """Return path to the CPU sysfs directory of the fake sysfs tree."""
    return sysfs_root / "devices" / "system" / "cpu"

def write_file(path: Path, val: int | str):
    """Create file 'path' (and the parent directories) with contents 'val'."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{val}\n", encoding="utf-8")

def read_file(path: Path) -> str:
    """Return contents of file 'path' without the surrounding white-spaces."""
    return path.read_text(encoding="utf-8").strip()

def read_int(path: Path) -> int:
    """Return contents of file 'path' as an integer."""
    return int(read_file(path))

def cpufreq_path(sysfs_root: Path, cpu: int, fname: str) -> Path:
    """Return path to the 'fname' cpufreq file of CPU 'cpu'."""
    return cpu_base(sysfs_root) / f"cpu{cpu}" / "cpufreq" / fname

def intel_pstate_path(sysfs_root: Path, fname: str) -> Path:
    """Return path to the 'fname' file of the 'intel_pstate' driver."""
    return cpu_base(sysfs_root) / "intel_pstate" / fname

def add_cpufreq(sysfs_root: Path,
                cur_freqs: Sequence[int] = (800000, 1200000, 1600000, 2000000),
                min_freq: int | Sequence[int] = 800000,
                max_freq: int | Sequence[int] = 3600000,
                cpuinfo_max_freq: int | None = 3600000,
                available_freqs: Sequence[int] | None = None,
                bios_limit: int | None = None,
                boost: int | None = 1):
    """
    Populate the generic cpufreq files in the fake sysfs tree. The amount of CPUs is the length of
    'cur_freqs'. The 'min_freq' and 'max_freq' arguments can be per-CPU sequences. Files for
    arguments that are 'None' are not created.
    """

    for cpu, cur_freq in enumerate(cur_freqs):
        cpu_min = min_freq if isinstance(min_freq, int) else min_freq[cpu]
        cpu_max = max_freq if isinstance(max_freq, int) else max_freq[cpu]

        write_file(cpufreq_path(sysfs_root, cpu, "scaling_cur_freq"), cur_freq)
        write_file(cpufreq_path(sysfs_root, cpu, "scaling_min_freq"), cpu_min)
        write_file(cpufreq_path(sysfs_root, cpu, "scaling_max_freq"), cpu_max)
        if cpuinfo_max_freq is not None:
            write_file(cpufreq_path(sysfs_root, cpu, "cpuinfo_max_freq"), cpuinfo_max_freq)
        if available_freqs is not None:
            write_file(cpufreq_path(sysfs_root, cpu, "scaling_available_frequencies"),
                       " ".join(str(freq) for freq in available_freqs))
        if bios_limit is not None:
            write_file(cpufreq_path(sysfs_root, cpu, "bios_limit"), bios_limit)

    if boost is not None:
        write_file(cpu_base(sysfs_root) / "cpufreq" / "boost", boost)

def add_intel_pstate(sysfs_root: Path, min_pct: int = 20, max_pct: int = 100, no_turbo: int = 0):
    """Populate the 'intel_pstate' driver files in the fake sysfs tree."""

    write_file(intel_pstate_path(sysfs_root, "min_perf_pct"), min_pct)
    write_file(intel_pstate_path(sysfs_root, "max_perf_pct"), max_pct)
    write_file(intel_pstate_path(sysfs_root, "no_turbo"), no_turbo)
