# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Combine per-CPU readings into summary statistics and run per-CPU operations concurrently.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import random
import typing
from concurrent.futures import ThreadPoolExecutor
from cpufreqctllibs.helperlibs import Logging
from cpufreqctllibs.helperlibs.Exceptions import Error

if typing.TYPE_CHECKING:
    from typing import Callable, Sequence, TypeVar
    from cpufreqctllibs.CPUFreqCtlTypes import CoreStatsTypedDict

    _RetType = TypeVar("_RetType")

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl.{__name__}")

# Upper limit for the number of worker threads of a per-CPU fan-out.
_MAX_WORKERS = 64

def aggregate(values: Sequence[int], rng: random.Random | None = None) -> CoreStatsTypedDict:
    """
    Compute summary statistics over per-CPU frequencies.

    Args:
        values: Per-CPU frequencies, at least one.
        rng: The random numbers generator to pick the random CPU with. Use the global 'random'
             module generator by default. Pass a seeded 'random.Random' object for reproducible
             results.

    Returns:
        The statistics dictionary. The 'rnd' element is picked anew on every call.

    Raises:
        Error: If 'values' is empty.
    """

    if not values:
        raise Error("BUG: cannot compute CPU frequency statistics over an empty list")

    if rng is None:
        idx = random.randrange(len(values))
    else:
        idx = rng.randrange(len(values))

    return {"min": min(values),
            "max": max(values),
            "avg": sum(values) // len(values),
            "rnd": values[idx]}

def run_per_cpu(func: Callable[[int], _RetType], cpus: Sequence[int],
                what: str = "") -> list[_RetType]:
    """
    Run 'func(cpu)' for every CPU in 'cpus' concurrently and wait for all of them to finish.

    Args:
        func: The function to run, gets the CPU number as the only argument.
        cpus: The CPU numbers.
        what: A short description of the operation for error messages.

    Returns:
        The 'func()' return values in the 'cpus' order.

    Raises:
        Error: If 'func()' failed for any CPU. Raised only after all the other calls have finished.
               The error of the first failed CPU in the 'cpus' order is reported.
    """

    if not cpus:
        return []

    what = f" {what}" if what else ""
    _LOG.debug("Running%s for CPUs %s", what, ", ".join(str(cpu) for cpu in cpus))

    workers = min(len(cpus), _MAX_WORKERS)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cpufreqctl") as executor:
        futures = [executor.submit(func, cpu) for cpu in cpus]
        # Leaving the 'with' block waits for all the tasks.

    results = []
    for cpu, future in zip(cpus, futures):
        err = future.exception()
        if err is None:
            results.append(future.result())
            continue

        if isinstance(err, Error):
            # Keep the attributes of the exception, such as the offending value.
            attrs = {key: val for key, val in vars(err).items() if key != "msg"}
            raise type(err)(f"Failed{what} for CPU {cpu}:\n{err.indent(2)}", **attrs) from err
        raise Error(f"Failed{what} for CPU {cpu}:\n  {err}") from err

    return results
