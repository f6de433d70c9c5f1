# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Cross-process advisory locking for hardware limits probing.

Probing the true CPU frequency limits requires temporarily writing extreme min. and max. values.
The exclusive lock makes sure only one process probes at a time, and the shared lock makes readers
wait until the original values are restored. The lock is a 'flock()' on a lock file, so the kernel
releases it when the process dies.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import fcntl
import typing
import contextlib
from pathlib import Path
from cpufreqctllibs.helperlibs import Logging
from cpufreqctllibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import Generator

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

def _open_lock_file(path: Path) -> int:
    """
    Open the lock file, create it if it does not exist, and return the file descriptor.

    The file is opened read-only, because 'flock()' does not need write access, and a read-only
    open works for non-root users on a lock file created by root.
    """

    try:
        return os.open(path, os.O_RDONLY | os.O_CREAT | os.O_CLOEXEC, 0o644)
    except OSError as err:
        errmsg = Error(str(err)).indent(2)
        raise Error(f"Failed to open lock file '{path}':\n{errmsg}") from err

@contextlib.contextmanager
def _locked(path: Path | str, operation: int, name: str) -> Generator[None, None, None]:
    """
    Acquire a 'flock()' lock of type 'operation' on 'path' for the duration of the context.

    Args:
        path: The lock file path.
        operation: 'fcntl.LOCK_EX' or 'fcntl.LOCK_SH'.
        name: Lock type name for debug messages.
    """

    path = Path(path)
    fd = _open_lock_file(path)

    try:
        _LOG.debug("Acquiring %s lock '%s'", name, path)
        try:
            fcntl.flock(fd, operation)
        except OSError as err:
            errmsg = Error(str(err)).indent(2)
            raise Error(f"Failed to acquire {name} lock '{path}':\n{errmsg}") from err

        try:
            yield
        finally:
            _LOG.debug("Releasing %s lock '%s'", name, path)
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)

def exclusive_access(path: Path | str) -> contextlib.AbstractContextManager[None]:
    """
    Return a context manager holding the exclusive probe lock.

    Args:
        path: The lock file path. All processes must use the same path.

    Example:
        with ProbeLock.exclusive_access(config["lock_path"]):
            ... write extreme values, read back, restore ...
    """

    return _locked(path, fcntl.LOCK_EX, "exclusive")

def shared_access(path: Path | str) -> contextlib.AbstractContextManager[None]:
    """
    Return a context manager holding the probe lock in shared mode. Multiple readers may hold it at
    the same time, but not while a prober holds the exclusive lock.

    Args:
        path: The lock file path.
    """

    return _locked(path, fcntl.LOCK_SH, "shared")
