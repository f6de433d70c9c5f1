# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Provide the CPU frequency scaling backends catalog and the backend selector.

Usage example:
    config = Config.get_config(backend="automatic")
    with Backends.BackendSelector(config) as selector:
        backend = selector.get_backend()
        backend.set_max(80)
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import typing
from cpufreqctllibs import _SysfsIO, _IntelPstateBackend, _CPUFreqBackend
from cpufreqctllibs.helperlibs import Logging, ClassHelpers
from cpufreqctllibs.helperlibs.Exceptions import ErrorInvalidBackend, ErrorNotSupported

if typing.TYPE_CHECKING:
    import random
    from cpufreqctllibs._BackendBase import BackendBase
    from cpufreqctllibs.CPUFreqCtlTypes import BackendNameType, ConfigTypedDict

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

# The "backend name" value for selecting the first supported backend.
AUTOMATIC = "automatic"

# The backends catalog. The order is the automatic selection priority order.
BACKENDS: dict[BackendNameType, type[BackendBase]] = {
    "intel_pstate": _IntelPstateBackend.IntelPstateBackend,
    "cpufreq": _CPUFreqBackend.CPUFreqBackend,
}

def _validate_name(name: str):
    """Raise 'ErrorInvalidBackend' if 'name' is not a known backend name."""

    if name not in BACKENDS:
        names = ", ".join(BACKENDS)
        raise ErrorInvalidBackend(f"Unknown backend '{name}', use one of: {names}, {AUTOMATIC}",
                                  name=name)

def is_supported(name: str, sysfs_io: _SysfsIO.SysfsIO) -> bool:
    """
    Check if a backend is supported on the system.

    Args:
        name: Backend name.
        sysfs_io: The sysfs access object.

    Returns:
        True if the backend's control files exist. False if they don't or the name is unknown.
    """

    if name not in BACKENDS:
        return False

    supported = BACKENDS[typing.cast("BackendNameType", name)].probe(sysfs_io)
    _LOG.debug("Backend '%s' is%s supported", name, "" if supported else " not")
    return supported

def list_backends(sysfs_io: _SysfsIO.SysfsIO) -> dict[str, bool]:
    """Return a 'backend name -> supported' dictionary for all backends in priority order."""
    return {name: is_supported(name, sysfs_io) for name in BACKENDS}

class BackendSelector(ClassHelpers.SimpleCloseContext):
    """
    Select the backend to use, either by name or automatically. The selection is done on the
    first 'get_backend()' call and then cached.

    Public methods overview.
        * 'get_backend()' - return the selected backend object.
        * 'get_backend_name()' - return the selected backend name.
        * 'list_backends()' - return the 'name -> supported' dictionary.
    """

    def __init__(self,
                 config: ConfigTypedDict,
                 sysfs_io: _SysfsIO.SysfsIO | None = None,
                 rng: random.Random | None = None):
        """
        Initialize a class instance.

        Args:
            config: The 'cpufreqctl' configuration. The 'backend' key is the backend name or
                    "automatic".
            sysfs_io: The sysfs access object. Will be created if not provided.
            rng: Random numbers generator passed to the backend.
        """

        self._config = config
        self._rng = rng

        self._close_sysfs_io = sysfs_io is None
        self._sysfs_io: _SysfsIO.SysfsIO
        if sysfs_io:
            self._sysfs_io = sysfs_io
        else:
            self._sysfs_io = _SysfsIO.SysfsIO(sysfs_root=config["sysfs_root"])

        self._backend: BackendBase | None = None

    def close(self):
        """Uninitialize the class instance."""
        ClassHelpers.close(self, close_attrs=("_backend", "_sysfs_io"))

    def _resolve(self) -> BackendBase:
        """Pick the backend class according to the configuration and create the backend object."""

        name = self._config["backend"]

        if name == AUTOMATIC:
            for bname, cls in BACKENDS.items():
                if cls.probe(self._sysfs_io):
                    _LOG.debug("Automatically selected backend '%s'", bname)
                    return cls(self._config, sysfs_io=self._sysfs_io, rng=self._rng)

            raise ErrorNotSupported(f"None of the CPU frequency scaling backends is supported "
                                    f"on this system (tried: {', '.join(BACKENDS)})")

        _validate_name(name)
        cls = BACKENDS[typing.cast("BackendNameType", name)]
        if not cls.probe(self._sysfs_io):
            raise ErrorNotSupported(f"Backend '{name}' ({cls.description}) is not supported on "
                                    f"this system")

        _LOG.debug("Using backend '%s'", name)
        return cls(self._config, sysfs_io=self._sysfs_io, rng=self._rng)

    def get_backend(self) -> BackendBase:
        """
        Return the backend object.

        Raises:
            ErrorInvalidBackend: If the configured backend name is unknown.
            ErrorNotSupported: If the configured backend is not supported, or in the automatic
                               mode, none of the backends is supported.
        """

        if not self._backend:
            self._backend = self._resolve()
        return self._backend

    def get_backend_name(self) -> str:
        """Return the name of the selected backend."""
        return self.get_backend().name

    def list_backends(self) -> dict[str, bool]:
        """Refer to 'list_backends()'."""
        return list_backends(self._sysfs_io)
