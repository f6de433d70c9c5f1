# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Test 'cpufreqctl' command-line options and exit codes."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import json
import typing
import pytest
import common
from cpufreqctllibs import Config
from cpufreqctltool import _CPUFreqCtl

if typing.TYPE_CHECKING:
    from pathlib import Path

@pytest.fixture(name="env", autouse=True)
def setup_environment(clean_environment: None, sysfs_root: Path, lock_path: Path,
                      monkeypatch: pytest.MonkeyPatch):
    """Point the tool to the fake sysfs tree and to a temporary lock file."""

    monkeypatch.setenv(Config.SYSFS_ROOT_ENVAR, str(sysfs_root))
    monkeypatch.setenv(Config.LOCK_FILE_ENVAR, str(lock_path))

def _run_cpufreqctl(arguments: str) -> int:
    """Run 'cpufreqctl' with the space-separated 'arguments' and return the exit code."""

    try:
        return _CPUFreqCtl.main(arguments.split())
    except SystemExit as err:
        return typing.cast(int, err.code)

def _run_json(arguments: str, capsys: pytest.CaptureFixture[str]) -> typing.Any:
    """Run 'cpufreqctl' in the JSON output mode, verify success, and return the parsed output."""

    capsys.readouterr()
    exitcode = _run_cpufreqctl(f"--format json {arguments}")
    captured = capsys.readouterr()
    assert exitcode == _CPUFreqCtl.EXIT_SUCCESS, \
           f"'cpufreqctl --format json {arguments}' failed:\n{captured.err}"
    return json.loads(captured.out)

def test_no_arguments():
    """Verify the exit code of running without arguments."""
    assert _run_cpufreqctl("") == _CPUFreqCtl.EXIT_NO_ARGUMENTS

def test_invalid_arguments(sysfs_root: Path):
    """Verify the exit code for bad options and values."""

    common.add_intel_pstate(sysfs_root)

    for arguments in ("--bogus-option turbo get",
                      "turbo",
                      "turbo set maybe",
                      "min set abc",
                      "max set 1.5",
                      "--format yaml turbo get",
                      "--reference-freq 0 max get",
                      "-q -d turbo get"):
        assert _run_cpufreqctl(arguments) == _CPUFreqCtl.EXIT_INVALID_ARGUMENT, arguments

def test_out_of_range(sysfs_root: Path):
    """Verify the exit code for limits outside of [0,100]."""

    common.add_intel_pstate(sysfs_root)

    for arguments in ("min set 101", "max set -1", "max set 1000"):
        assert _run_cpufreqctl(arguments) == _CPUFreqCtl.EXIT_OUT_OF_RANGE, arguments

def test_invalid_backend(sysfs_root: Path):
    """Verify the exit code for an unknown backend name."""

    common.add_cpufreq(sysfs_root)
    assert _run_cpufreqctl("--backend bogus turbo get") == _CPUFreqCtl.EXIT_INVALID_BACKEND

def test_not_supported(sysfs_root: Path):
    """Verify the exit code when the backend is not supported."""

    assert _run_cpufreqctl("turbo get") == _CPUFreqCtl.EXIT_NOT_SUPPORTED

    common.add_cpufreq(sysfs_root)
    assert _run_cpufreqctl("--backend intel_pstate turbo get") == _CPUFreqCtl.EXIT_NOT_SUPPORTED

def test_internal_error(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the exit code for a missing control file and that the error goes to stderr."""

    common.add_cpufreq(sysfs_root)
    common.cpufreq_path(sysfs_root, 3, "scaling_cur_freq").unlink()

    assert _run_cpufreqctl("--format json info current") == _CPUFreqCtl.EXIT_INTERNAL_ERROR

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "CPU 3" in captured.err

def test_version(capsys: pytest.CaptureFixture[str]):
    """Verify the '--version' option."""

    assert _run_cpufreqctl("--version") == 0
    assert _CPUFreqCtl._VERSION in capsys.readouterr().out # pylint: disable=protected-access

def test_turbo(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'turbo' commands."""

    common.add_intel_pstate(sysfs_root, no_turbo=0)

    assert _run_json("turbo get", capsys) == "on"

    capsys.readouterr()
    assert _run_cpufreqctl("turbo set off") == _CPUFreqCtl.EXIT_SUCCESS
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""

    assert _run_cpufreqctl("turbo get") == _CPUFreqCtl.EXIT_SUCCESS
    assert "Turbo: off" in capsys.readouterr().err

def test_min_max(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'min' and 'max' commands on the 'intel_pstate' backend."""

    common.add_intel_pstate(sysfs_root, min_pct=20, max_pct=100)

    assert _run_json("min get", capsys) == 20
    assert _run_json("max get", capsys) == 100

    assert _run_cpufreqctl("max set 60") == _CPUFreqCtl.EXIT_SUCCESS
    assert _run_cpufreqctl("min set 80") == _CPUFreqCtl.EXIT_SUCCESS
    assert _run_json("min get", capsys) == 60
    assert _run_json("max get", capsys) == 60

    assert _run_cpufreqctl("min set 3") == _CPUFreqCtl.EXIT_SUCCESS
    assert _run_json("min get", capsys) == 10

    capsys.readouterr()
    assert _run_cpufreqctl("max get") == _CPUFreqCtl.EXIT_SUCCESS
    assert "Max. frequency limit: 60%" in capsys.readouterr().err

def test_max_set_get_reference(sysfs_root: Path, monkeypatch: pytest.MonkeyPatch,
                               capsys: pytest.CaptureFixture[str]):
    """Verify 'max set 50' followed by 'max get' with reference frequency 3600000 kHz."""

    common.add_cpufreq(sysfs_root, max_freq=3600000)
    monkeypatch.setenv(Config.REFERENCE_FREQ_ENVAR, "3600000")

    assert _run_cpufreqctl("max set 50") == _CPUFreqCtl.EXIT_SUCCESS
    assert common.read_int(common.cpufreq_path(sysfs_root, 0, "scaling_max_freq")) == 1800000
    assert _run_json("max get", capsys) == 50

    assert _run_json("--reference-freq 1800000 max get", capsys) == 100

def test_reset(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'reset' command."""

    common.add_intel_pstate(sysfs_root, min_pct=50, max_pct=70, no_turbo=1)

    assert _run_cpufreqctl("reset") == _CPUFreqCtl.EXIT_SUCCESS
    assert _run_json("min get", capsys) == 0
    assert _run_json("max get", capsys) == 100
    assert _run_json("turbo get", capsys) == "on"

def test_info_frequencies(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'info frequencies' command."""

    common.add_cpufreq(sysfs_root, max_freq=3600000, available_freqs=(1200000, 3600000))

    info = _run_json("info frequencies", capsys)
    assert info == {"mode": "discrete", "frequencies": [33, 100]}

    assert _run_cpufreqctl("info frequencies") == _CPUFreqCtl.EXIT_SUCCESS
    err = capsys.readouterr().err
    assert "Frequency mode: discrete" in err
    assert "33%, 100%" in err

    info = _run_json("--backend cpufreq info frequencies", capsys)
    assert info["mode"] == "discrete"

def test_info_frequencies_continuous(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'info frequencies' command for the continuous range."""

    common.add_intel_pstate(sysfs_root, min_pct=25, max_pct=75)

    info = _run_json("info frequencies", capsys)
    assert info == {"mode": "continuous", "min": 0, "max": 100}
    assert _run_json("min get", capsys) == 25
    assert _run_json("max get", capsys) == 75

def test_info_current(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'info current' command."""

    freqs = [800000, 1200000, 1600000, 2000000]
    common.add_cpufreq(sysfs_root, cur_freqs=freqs)

    stats = _run_json("info current", capsys)
    assert stats["min"] == 800000
    assert stats["max"] == 2000000
    assert stats["avg"] == 1400000
    assert stats["rnd"] in freqs

    assert _run_cpufreqctl("info current") == _CPUFreqCtl.EXIT_SUCCESS
    err = capsys.readouterr().err
    assert "Min. current frequency: 800.00MHz" in err
    assert "Average current frequency: 1.40GHz" in err

def test_backends_list(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'backends list' command with and without supported backends."""

    assert _run_json("backends list", capsys) == {"intel_pstate": False, "cpufreq": False}

    assert _run_cpufreqctl("backends list") == _CPUFreqCtl.EXIT_SUCCESS
    err = capsys.readouterr().err
    assert "intel_pstate: not supported" in err
    assert "cpufreq: not supported" in err

    common.add_cpufreq(sysfs_root)
    assert _run_json("backends list", capsys) == {"intel_pstate": False, "cpufreq": True}

    assert _run_cpufreqctl("--force-color backends list") == _CPUFreqCtl.EXIT_SUCCESS
    err = capsys.readouterr().err
    assert "\x1b[" in err
    assert "supported" in err

def test_backends_current(sysfs_root: Path, capsys: pytest.CaptureFixture[str]):
    """Verify the 'backends current' command."""

    common.add_cpufreq(sysfs_root)
    assert _run_json("backends current", capsys) == "cpufreq"

    common.add_intel_pstate(sysfs_root)
    assert _run_json("backends current", capsys) == "intel_pstate"

    assert _run_cpufreqctl("backends current") == _CPUFreqCtl.EXIT_SUCCESS
    assert "Backend: intel_pstate" in capsys.readouterr().err
