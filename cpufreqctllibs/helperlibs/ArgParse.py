# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2020-2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
Helpful classes extending 'argparse.ArgumentParser' class functionality.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import types
import typing
import argparse
import argcomplete
from cpufreqctllibs.helperlibs.Exceptions import ErrorInvalidArgument

if typing.TYPE_CHECKING:
    from typing import TypedDict, Iterable, Any, Sequence

    # The class type returned by the 'add_subparsers()' method of the arguments classes. Even though
    # the class is private, it is documented and will unlikely to change.
    SubParsersType = argparse._SubParsersAction # pylint: disable=protected-access

    class ArgKwargsTypedDict(TypedDict, total=False):
        """
        The keyword arguments passed to 'argparse.add_argument()' for an option.

        Attributes:
            dest: The 'argparse' attribute name where the command line argument will be stored.
            default: The default value for the argument.
            choices: The allowed values of the argument.
            metavar: The name of the argument in the help text.
            action: The 'argparse' action to use for the argument.
            help: A brief description of the argument.
        """

        dest: str
        default: str | int | None
        choices: Sequence[str]
        metavar: str
        action: str | type[argparse.Action]
        help: str

    class ArgTypedDict(TypedDict, total=False):
        """
        An option definition dictionary.

        Attributes:
            short: The short option name.
            long: The long option name.
            argcomplete: The 'argcomplete' completer class name to use for tab completion of the
                         option.
            kwargs: Additional keyword arguments for 'argparse.add_argument()'.
        """

        short: str | None
        long: str
        argcomplete: str | None
        kwargs: ArgKwargsTypedDict

def add_options(parser: argparse.ArgumentParser, options: Iterable[ArgTypedDict]):
    """
    Add command line options to the given parser.

    Args:
        parser: The argument parser object to which options will be added.
        options: An iterable collection of option definition dictionaries.
    """

    for opt in options:
        args: tuple[str, ...]

        if opt["short"] is None:
            args = (opt["long"], )
        else:
            args = (opt["short"], opt["long"])

        arg = parser.add_argument(*args, **opt["kwargs"])
        if opt["argcomplete"]:
            setattr(arg, "completer", getattr(argcomplete.completers, opt["argcomplete"]))

def _add_parser(subparsers: SubParsersType, *args: Any, **kwargs: Any) -> argparse.ArgumentParser:
    """
    Override the 'add_parser()' method of a subparsers object to remove newlines and extra
    whitespace from the 'description' argument.

    Args:
        subparsers: The subparsers action object returned by 'add_subparsers()'.
        *args: Positional arguments to pass to the original 'add_parser()' method.
        **kwargs: Keyword arguments to pass to the original 'add_parser()' method.

    Returns:
        The 'ArgumentParser' instance created by the original 'add_parser()' method.
    """

    if "description" in kwargs:
        kwargs["description"] = " ".join(kwargs["description"].split())

    orig_add_parser = getattr(subparsers, "__orig_add_parser")
    return orig_add_parser(*args, **kwargs)

class _SubArgsParser(argparse.ArgumentParser):
    """
    The sub-command parser. Unlike 'ArgsParser', does not add the standard options, because
    sub-parser defaults would override the values parsed by the main parser.
    """

    def error(self, message: str): # type: ignore[override]
        """Raise an exception instead of printing the message and exiting."""
        raise ErrorInvalidArgument(f"{message}\nUse '{self.prog} -h' for help.")

class ArgsParser(argparse.ArgumentParser):
    """
    Enhance 'argparse.ArgumentParser' with standard options and improved usability.
      - Add the standard options, such as '-h', '-q' and '-d'.
      - Remove extra whitespace and newlines from 'description' in 'add_parser()'.
      - Override 'error()' to raise an exception instead of exiting the program.
    """

    def __init__(self, *args: Any, **kwargs: Any):
        """
        Initialize the parser. Accept the additional 'ver' keyword argument, the version of the
        tool to print for the '--version' option.
        """

        version = kwargs.pop("ver", None)

        kwargs["add_help"] = False
        super().__init__(*args, **kwargs)

        text = "Show this help message and exit."
        self.add_argument("-h", "--help", dest="help", action="help", help=text)

        text = "Be quiet (print only important messages like warnings)."
        self.add_argument("-q", "--quiet", dest="quiet", action="store_true", help=text)

        text = """Force colorized output even if the output stream is not a terminal (adds ANSI
                  escape codes)."""
        self.add_argument("--force-color", action="store_true", help=text)

        text = "Print debugging information."
        self.add_argument("-d", "--debug", dest="debug", action="store_true", help=text)

        if version:
            text = "Print the version number and exit."
            self.add_argument("--version", action="version", help=text, version=version)

    def parse_args(self, *args: Any, **kwargs: Any) -> argparse.Namespace: # type: ignore[override]
        """
        Parse command line arguments and validate the standard options.

        Args:
            *args: Positional arguments for 'ArgumentParser.parse_args()'.
            **kwargs: Keyword arguments for 'ArgumentParser.parse_args()'.
        """

        _args = super().parse_args(*args, **kwargs)

        if getattr(_args, "quiet", False) and getattr(_args, "debug", False):
            raise ErrorInvalidArgument("The '-q' and '-d' options cannot be used together")

        return _args

    def add_subparsers(self, *args: Any, **kwargs: Any) -> SubParsersType:
        """
        Create subparsers with a customized 'add_parser()' method.

        Args:
            *args: Positional arguments for 'add_subparsers'.
            **kwargs: Keyword arguments for 'add_subparsers'.

        Returns:
            The subparsers action object.
        """

        kwargs.setdefault("parser_class", _SubArgsParser)
        subparsers = super().add_subparsers(*args, **kwargs)
        setattr(subparsers, "__orig_add_parser", subparsers.add_parser)
        setattr(subparsers, "add_parser", types.MethodType(_add_parser, subparsers))

        return subparsers

    def error(self, message: str): # type: ignore[override]
        """
        Raise an exception instead of printing the message and exiting, which is what the
        superclass method does.

        Args:
            message: The original error message.
        """

        raise ErrorInvalidArgument(f"{message}\nUse '{self.prog} -h' for help.")
