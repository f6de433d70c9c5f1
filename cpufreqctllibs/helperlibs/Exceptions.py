# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Exception types used in this project.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

from typing import Any, Match
import re

class Error(Exception):
    """The base class for all exceptions raised by this project."""

    def __init__(self, msg: str, *args: Any, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            **kwargs: Additional keyword arguments, stored as attributes of the exception object.
        """

        msg = str(msg)
        super().__init__(msg)

        for key, val in kwargs.items():
            setattr(self, key, val)

        if args:
            self.msg = msg % tuple(args)
        else:
            self.msg = msg

    def indent(self, indent: int | str, capitalize: bool = True) -> str:
        """
        Indent/prefix each line in the error message.

        Args:
            indent: Can be an integer or a string. If an integer, each line of the error message is
                    prefixed with the specified number of white spaces. If a string, each line is
                    prefixed with the specified string.
            capitalize: If True, ensures the message starts with a capital letter.

        Returns:
            str: The modified error message.
        """

        def capitalize_mobj(mobj: Match[str]):
            """Capitalize the intended/prefixed message."""
            return mobj.group(1) + mobj.group(2).capitalize()

        if isinstance(indent, int):
            pfx = " " * indent
        else:
            pfx = indent

        msg = pfx + self.msg.replace("\n", f"\n{pfx}")
        if capitalize:
            msg = re.sub(r"^(\s*)(\S)", capitalize_mobj, msg)

        return msg

    def __str__(self):
        """The string representation of the exception."""
        return self.msg

class ErrorNoArguments(Error):
    """The tool was run without any arguments."""

class ErrorInvalidArgument(Error):
    """Bad command-line argument or API argument value."""

    def __init__(self, msg: str, *args: Any, value: Any = None, context: str = "",
                 **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            value: The offending value.
            context: Where the value came from, e.g., an option name.
            **kwargs: Additional keyword arguments.
        """

        self.value = value
        self.context = context

        super().__init__(msg, *args, **kwargs)

class ErrorBadFormat(ErrorInvalidArgument):
    """Bad format of something, e.g., a string that should be an integer."""

class ErrorOutOfRange(Error):
    """A value is out of the allowed range."""

    def __init__(self, msg: str, *args: Any, value: Any = None,
                 rng: tuple[int, int] | None = None, **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            value: The out-of-range value.
            rng: The allowed '(min, max)' range.
            **kwargs: Additional keyword arguments.
        """

        self.value = value
        self.rng = rng

        super().__init__(msg, *args, **kwargs)

class ErrorInvalidBackend(Error):
    """Unknown frequency scaling backend name."""

    def __init__(self, msg: str, *args: Any, name: str = "", **kwargs: Any):
        """
        Initialize the exception object.

        Args:
            msg: The exception message.
            *args: Positional arguments for the message.
            name: The unknown backend name.
            **kwargs: Additional keyword arguments.
        """

        self.name = name
        super().__init__(msg, *args, **kwargs)

class ErrorNotSupported(Error):
    """A frequency scaling backend is not supported on this system."""

class ErrorNotFound(Error):
    """Something was not found, e.g., a sysfs control file."""

class ErrorPermissionDenied(Error):
    """Not enough permissions to access something."""
