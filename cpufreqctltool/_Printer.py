# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
This module provides API for printing 'cpufreqctl' command results in the human-readable and JSON
formats.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import json
import typing
import colorama
from cpufreqctllibs import Config
from cpufreqctllibs.helperlibs import Logging, ClassHelpers, Human
from cpufreqctllibs.helperlibs.Exceptions import ErrorInvalidArgument

if typing.TYPE_CHECKING:
    from typing import IO, Any
    from cpufreqctllibs.CPUFreqCtlTypes import CoreStatsTypedDict, FreqModeTypedDict
    from cpufreqctllibs.CPUFreqCtlTypes import OutputFormatType, TurboStateType

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

class Printer(ClassHelpers.SimpleCloseContext):
    """
    Print command results. In the "human" format, messages go to the 'cpufreqctl' logger at the
    INFO level (the diagnostic stream). In the "json" format, one JSON document is printed to the
    output file object (standard output by default).
    """

    def __init__(self, fmt: OutputFormatType = "human", fobj: IO[str] | None = None,
                 colored: bool = False):
        """
        Initialize a class instance.

        Args:
            fmt: The output format, "human" or "json".
            fobj: The file object to print JSON output to. Standard output by default.
            colored: Use colors in the human-readable output.
        """

        if fmt not in Config.OUTPUT_FORMATS:
            formats = ", ".join(Config.OUTPUT_FORMATS)
            raise ErrorInvalidArgument(f"Bad output format '{fmt}', use one of: {formats}",
                                       value=fmt, context="format")

        self._fmt = fmt
        self._fobj = fobj
        self._colored = colored

    def close(self):
        """Uninitialize the class object."""
        ClassHelpers.close(self, unref_attrs=("_fobj",))

    def _json_dump(self, info: Any):
        """Print 'info' in the JSON format."""

        fobj = self._fobj
        if not fobj:
            fobj = sys.stdout

        fobj.write(json.dumps(info))
        fobj.write("\n")

    def _colorize(self, msg: str, color: str) -> str:
        """Wrap 'msg' into color 'color' if colors are enabled."""

        if not self._colored:
            return msg
        return f"{color}{msg}{colorama.Style.RESET_ALL}"

    def print_turbo(self, state: TurboStateType):
        """Print the turbo state."""

        if self._fmt == "json":
            self._json_dump(state)
        else:
            _LOG.info("Turbo: %s", state)

    def print_limit(self, limit: str, pct: int):
        """
        Print a frequency limit.

        Args:
            limit: The limit name, "min" or "max".
            pct: The limit value, percent of the reference frequency.
        """

        if self._fmt == "json":
            self._json_dump(pct)
        else:
            _LOG.info("%s. frequency limit: %d%%", limit.capitalize(), pct)

    def print_frequencies(self, info: FreqModeTypedDict):
        """Print the frequencies the hardware accepts."""

        if self._fmt == "json":
            self._json_dump(info)
            return

        _LOG.info("Frequency mode: %s", info["mode"])
        if info["mode"] == "discrete":
            freqs = typing.cast("list[int]", info["frequencies"]) # type: ignore[typeddict-item]
            _LOG.info("Available frequencies: %s", ", ".join(f"{pct}%" for pct in freqs))
        else:
            _LOG.info("Min. frequency: %d%%", info["min"]) # type: ignore[typeddict-item]
            _LOG.info("Max. frequency: %d%%", info["max"]) # type: ignore[typeddict-item]

    def print_core_stats(self, stats: CoreStatsTypedDict):
        """Print the current CPU frequency statistics."""

        if self._fmt == "json":
            self._json_dump(stats)
            return

        descriptions = (("min", "Min. current frequency"),
                        ("max", "Max. current frequency"),
                        ("avg", "Average current frequency"),
                        ("rnd", "Random CPU current frequency"))

        for key, descr in descriptions:
            freq = Human.num2si(stats[key], unit="kHz", decp=2) # type: ignore[literal-required]
            _LOG.info("%s: %s", descr, freq)

    def print_backends(self, backends: dict[str, bool]):
        """
        Print the backends support status.

        Args:
            backends: The 'backend name -> supported' dictionary.
        """

        if self._fmt == "json":
            self._json_dump(backends)
            return

        for name, supported in backends.items():
            if supported:
                status = self._colorize("supported", colorama.Fore.GREEN)
            else:
                status = self._colorize("not supported", colorama.Fore.RED)
            _LOG.info("%s: %s", name, status)

    def print_backend_name(self, name: str):
        """Print the name of the backend in use."""

        if self._fmt == "json":
            self._json_dump(name)
        else:
            _LOG.info("Backend: %s", name)
