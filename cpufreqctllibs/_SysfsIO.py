# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2023-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide API for reading and writing sysfs files.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import os
import re
from pathlib import Path
from cpufreqctllibs.helperlibs import Logging, ClassHelpers, Trivial
from cpufreqctllibs.helperlibs.Exceptions import Error, ErrorNotFound, ErrorPermissionDenied
from cpufreqctllibs.helperlibs.Exceptions import ErrorBadFormat

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

def _shorten(val: str) -> str:
    """Shorten a long value for an error message."""

    if len(val) > 24:
        return f"{val[:23]}...snip..."
    return val

def _translate_oserror(err: OSError, msg: str) -> Error:
    """
    Translate an 'OSError' exception into an exception of this project.

    Args:
        err: The 'OSError' exception object.
        msg: The error message to prepend to the 'OSError' description.

    Returns:
        'ErrorNotFound' for a missing file, 'ErrorPermissionDenied' for a permission problem,
        'Error' otherwise.
    """

    errmsg = Error(str(err)).indent(2)
    if isinstance(err, FileNotFoundError):
        return ErrorNotFound(f"{msg}:\n{errmsg}")
    if isinstance(err, PermissionError):
        return ErrorPermissionDenied(f"{msg}:\n{errmsg}")
    return Error(f"{msg}:\n{errmsg}")

class SysfsIO(ClassHelpers.SimpleCloseContext):
    """
    Provide API for reading and writing sysfs files.

    Public methods overview.
        * 'exists()' - check if a sysfs file exists.
        * 'read()' - read a string.
        * 'read_int()' - read an integer.
        * 'write()' - write a string.
        * 'write_int()' - write an integer.
        * 'get_cpus()' - get the list of CPUs that have a "cpufreq" sysfs directory.

    All paths are relative to the CPU sysfs directory ('<root>/devices/system/cpu'). Values are not
    cached, every read goes to the file.
    """

    def __init__(self, sysfs_root: Path | str = "/sys"):
        """
        Initialize a class instance.

        Args:
            sysfs_root: Path to the sysfs mount point. Tests point it to a fake sysfs tree.
        """

        self.sysfs_root = Path(sysfs_root)
        self.sysfs_base = self.sysfs_root / "devices" / "system" / "cpu"

    def _abspath(self, path: Path | str) -> Path:
        """Return the absolute path for 'path', which is relative to the CPU sysfs directory."""
        return self.sysfs_base / path

    def exists(self, path: Path | str) -> bool:
        """
        Check if a sysfs file or directory exists.

        Args:
            path: Path relative to the CPU sysfs directory.

        Returns:
            True if the path exists, False otherwise. Never raises.
        """

        try:
            return self._abspath(path).exists()
        except OSError as err:
            _LOG.debug("Cannot check existence of '%s': %s", self._abspath(path), err)
            return False

    def read(self, path: Path | str, what: str = "") -> str:
        """
        Read the contents of a sysfs file.

        Args:
            path: Path relative to the CPU sysfs directory.
            what: Optional short description of what is being read, included in exception messages.

        Returns:
            The contents of the file with the surrounding white-spaces stripped.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorPermissionDenied: If there are not enough permissions to read the file.
        """

        abspath = self._abspath(path)
        what = f" {what}" if what else ""

        try:
            with abspath.open("r", encoding="utf-8") as fobj:
                val = fobj.read().strip()
        except OSError as err:
            raise _translate_oserror(err, f"Failed to read{what} from '{abspath}'") from err

        _LOG.debug("Read '%s' from%s sysfs file '%s'", val, what, abspath)
        return val

    def read_int(self, path: Path | str, what: str = "") -> int:
        """
        Read a sysfs file and return its contents as an integer.

        Args:
            path: Path relative to the CPU sysfs directory.
            what: Optional short description of what is being read, included in exception messages.

        Returns:
            The integer value read from the file.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorBadFormat: If the file contents cannot be parsed as an integer.
        """

        val = self.read(path, what=what)

        try:
            return Trivial.str_to_int(val, what=what)
        except ErrorBadFormat as err:
            what = f" {what}" if what else ""
            raise Error(f"Bad contents of{what} sysfs file '{self._abspath(path)}'\n"
                        f"{err.indent(2)}") from err

    def write(self, path: Path | str, val: str, what: str = ""):
        """
        Write a value to a sysfs file.

        Args:
            path: Path relative to the CPU sysfs directory.
            val: Value to write to the file.
            what: Optional short description of what is being written, included in exception
                  messages.

        Raises:
            ErrorNotFound: If the file does not exist.
            ErrorPermissionDenied: If there are not enough permissions to write to the file.
        """

        abspath = self._abspath(path)
        what = f" {what}" if what else ""

        _LOG.debug("Writing value '%s' to%s sysfs file '%s'", val, what, abspath)

        # No 'O_CREAT': a missing control file is an error, not something to create.
        try:
            fd = os.open(abspath, os.O_WRONLY | os.O_TRUNC)
            with os.fdopen(fd, "w", encoding="utf-8") as fobj:
                fobj.write(val)
        except OSError as err:
            msg = f"Failed to write value '{_shorten(val)}' to{what} sysfs file '{abspath}'"
            raise _translate_oserror(err, msg) from err

    def write_int(self, path: Path | str, val: int, what: str = ""):
        """
        Write an integer value to a sysfs file.

        Args:
            path: Path relative to the CPU sysfs directory.
            val: Value to write to the file.
            what: Optional short description of what is being written, included in exception
                  messages.
        """

        self.write(path, str(Trivial.str_to_int(val, what=what)), what=what)

    def get_cpus(self) -> list[int]:
        """
        Return the sorted list of logical CPU numbers which have the "cpufreq" sysfs directory.

        Raises:
            ErrorNotFound: If no CPU has the "cpufreq" directory.
        """

        cpus = []
        try:
            for entry in self.sysfs_base.iterdir():
                mobj = re.fullmatch(r"cpu(\d+)", entry.name)
                if mobj and (entry / "cpufreq").is_dir():
                    cpus.append(int(mobj.group(1)))
        except OSError as err:
            raise _translate_oserror(err, f"Failed to list CPUs in '{self.sysfs_base}'") from err

        if not cpus:
            raise ErrorNotFound(f"No CPUs with a 'cpufreq' sysfs directory found in "
                                f"'{self.sysfs_base}'")

        return sorted(cpus)
