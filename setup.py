#!/usr/bin/python3
#
# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""The standard python packaging script."""

import re
from setuptools import setup, find_namespace_packages

def get_version(filename):
    """Fetch the project version number."""

    with open(filename, "r", encoding="utf-8") as fobj:
        for line in fobj:
            matchobj = re.match(r'^_VERSION = "(\d+.\d+.\d+)"$', line)
            if matchobj:
                return matchobj.group(1)
    return None

setup(
    name="cpufreqctl",
    description="""CPU frequency scaling control tool""",
    python_requires=">=3.9",
    version=get_version("cpufreqctltool/_CPUFreqCtl.py"),
    scripts=["cpufreqctl"],
    packages=find_namespace_packages(include=["cpufreqctllibs*", "cpufreqctltool*"]),
    long_description="""A tool for getting and setting CPU turbo boost state and min./max. CPU
                        frequency limits on Linux, on top of the 'intel_pstate' and the generic
                        'cpufreq' kernel drivers.""",
    install_requires=["colorama", "argcomplete"],
    extras_require={"test": ["pytest"]},
    classifiers=[
        "Intended Audience :: System Administrators",
        "Topic :: System :: Hardware",
        "Topic :: System :: Operating System Kernels :: Linux",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3 :: Only",
        "Development Status :: 4 - Beta",
    ],
)
