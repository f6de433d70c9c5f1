# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""Common fixtures for the 'cpufreqctl' tests: a fake sysfs tree and a configuration using it."""

from  __future__ import annotations # Remove when switching to Python 3.10+.

import typing
import pytest
from cpufreqctllibs import Config

if typing.TYPE_CHECKING:
    from pathlib import Path
    from cpufreqctllibs.CPUFreqCtlTypes import ConfigTypedDict

@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Make sure the 'cpufreqctl' environment variables of the test runner do not affect tests."""

    for envar in (Config.REFERENCE_FREQ_ENVAR, Config.SYSFS_ROOT_ENVAR, Config.LOCK_FILE_ENVAR):
        monkeypatch.delenv(envar, raising=False)

@pytest.fixture(name="sysfs_root")
def get_sysfs_root(tmp_path: Path) -> Path:
    """Return path to an empty fake sysfs tree."""

    path = tmp_path / "sys"
    (path / "devices" / "system" / "cpu").mkdir(parents=True)
    return path

@pytest.fixture(name="lock_path")
def get_lock_path(tmp_path: Path) -> Path:
    """Return path to the probe lock file."""
    return tmp_path / "cpufreqctl.lock"

@pytest.fixture(name="config")
def get_config(sysfs_root: Path, lock_path: Path) -> ConfigTypedDict:
    """Return a configuration pointing to the fake sysfs tree."""
    return Config.get_config(sysfs_root=str(sysfs_root), lock_path=str(lock_path))
