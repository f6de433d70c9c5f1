# -*- coding: utf-8 -*-
# vim: ts=4 sw=4 tw=100 et ai si
#
# Copyright (C) 2025 Intel Corporation
# SPDX-License-Identifier: BSD-3-Clause

"""
cpufreqctl - CPU frequency scaling control tool for Linux.
"""

from __future__ import annotations # Remove when switching to Python 3.10+.

import sys
import typing
import argcomplete
from cpufreqctllibs import Backends, Config, FreqUnits
from cpufreqctllibs.helperlibs import ArgParse, Logging, Trivial
from cpufreqctllibs.helperlibs.Exceptions import Error, ErrorNoArguments, ErrorInvalidArgument
from cpufreqctllibs.helperlibs.Exceptions import ErrorOutOfRange, ErrorInvalidBackend
from cpufreqctllibs.helperlibs.Exceptions import ErrorNotSupported
from cpufreqctltool import _Printer

if typing.TYPE_CHECKING:
    import argparse
    from typing import Sequence
    from cpufreqctllibs.helperlibs.ArgParse import ArgTypedDict

_VERSION = "1.0.0"
TOOLNAME = "cpufreqctl"

_LOG = Logging.getLogger(f"{Logging.MAIN_LOGGER_NAME}.cpufreqctl")

# The tool exit codes.
EXIT_SUCCESS = 0
EXIT_NO_ARGUMENTS = 1
EXIT_INVALID_ARGUMENT = 2
EXIT_OUT_OF_RANGE = 3
EXIT_INVALID_BACKEND = 4
EXIT_INTERNAL_ERROR = 5
EXIT_NOT_SUPPORTED = 6

# Exception type to exit code map. Exceptions not listed here are internal errors.
_EXIT_CODES: tuple[tuple[type[Error], int], ...] = (
    (ErrorNoArguments, EXIT_NO_ARGUMENTS),
    (ErrorInvalidArgument, EXIT_INVALID_ARGUMENT),
    (ErrorOutOfRange, EXIT_OUT_OF_RANGE),
    (ErrorInvalidBackend, EXIT_INVALID_BACKEND),
    (ErrorNotSupported, EXIT_NOT_SUPPORTED),
)

_GLOBAL_OPTIONS: tuple[ArgTypedDict, ...] = (
    {
        "short": "-b",
        "long": "--backend",
        "argcomplete": None,
        "kwargs": {
            "dest": "backend",
            "default": Backends.AUTOMATIC,
            "metavar": "NAME",
            "help": f"""The CPU frequency scaling backend to use: {', '.join(Backends.BACKENDS)},
                        or '{Backends.AUTOMATIC}' to use the first supported one (default)."""
        },
    },
    {
        "short": "-f",
        "long": "--format",
        "argcomplete": None,
        "kwargs": {
            "dest": "fmt",
            "default": "human",
            "choices": Config.OUTPUT_FORMATS,
            "help": """The output format: 'human' prints human-readable lines to standard error,
                       'json' prints JSON to standard output. Default is 'human'."""
        },
    },
    {
        "short": None,
        "long": "--reference-freq",
        "argcomplete": None,
        "kwargs": {
            "dest": "reference_freq",
            "metavar": "KHZ",
            "help": f"""The reference maximum CPU frequency in kHz, which min. and max. limit
                        percentages are relative to. By default, the '{Config.REFERENCE_FREQ_ENVAR}'
                        environment variable value is used, or the frequency is read from
                        sysfs."""
        },
    },
)

def _get_exitcode(err: Error) -> int:
    """Return the tool exit code for exception 'err'."""

    for errtype, exitcode in _EXIT_CODES:
        if isinstance(err, errtype):
            return exitcode
    return EXIT_INTERNAL_ERROR

def _parse_percentage(val: str, what: str) -> int:
    """Validate and return a frequency limit percentage given on the command line."""

    pct = Trivial.str_to_int(val, what=what)
    Trivial.validate_value_in_range(pct, FreqUnits.PCT_MIN, FreqUnits.PCT_MAX, what=what)
    return pct

def build_arguments_parser() -> ArgParse.ArgsParser:
    """Build and return the the command-line arguments parser object."""

    text = f"{TOOLNAME} - CPU frequency scaling control tool for Linux."
    parser = ArgParse.ArgsParser(description=text, prog=TOOLNAME, ver=_VERSION)

    ArgParse.add_options(parser, _GLOBAL_OPTIONS)

    subparsers = parser.add_subparsers(title="commands", dest="a command")
    subparsers.required = True

    #
    # Create parser for the 'turbo' command.
    #
    text = "Turbo boost commands."
    descr = "Get or switch turbo boost on and off."
    subpars = subparsers.add_parser("turbo", help=text, description=descr)
    subparsers2 = subpars.add_subparsers(title="further sub-commands", dest="turbo command")
    subparsers2.required = True

    text = "Print the turbo state ('on' or 'off')."
    subpars2 = subparsers2.add_parser("get", help=text, description=text)
    subpars2.set_defaults(func=_turbo_get_command)

    text = "Switch turbo on or off."
    subpars2 = subparsers2.add_parser("set", help=text, description=text)
    subpars2.set_defaults(func=_turbo_set_command)
    subpars2.add_argument("state", choices=("on", "off"), help="The turbo state.")

    #
    # Create parsers for the 'min' and 'max' commands.
    #
    for limit, func_get, func_set in (("min", _min_get_command, _min_set_command),
                                      ("max", _max_get_command, _max_set_command)):
        text = f"{limit.capitalize()}. CPU frequency limit commands."
        descr = f"""Get or set the {limit}. CPU frequency limit, in percent of the reference maximum
                    CPU frequency."""
        subpars = subparsers.add_parser(limit, help=text, description=descr)
        subparsers2 = subpars.add_subparsers(title="further sub-commands",
                                             dest=f"{limit} command")
        subparsers2.required = True

        text = f"Print the {limit}. CPU frequency limit."
        subpars2 = subparsers2.add_parser("get", help=text, description=text)
        subpars2.set_defaults(func=func_get)

        text = f"Set the {limit}. CPU frequency limit."
        subpars2 = subparsers2.add_parser("set", help=text, description=text)
        subpars2.set_defaults(func=func_set)
        text = f"The {limit}. CPU frequency limit in percent (0-100)."
        subpars2.add_argument("value", metavar="VALUE", help=text)

    #
    # Create parser for the 'reset' command.
    #
    text = "Reset the frequency limits and turbo."
    descr = "Set the max. CPU frequency limit to 100%, the min. limit to 0%, and switch turbo on."
    subpars = subparsers.add_parser("reset", help=text, description=descr)
    subpars.set_defaults(func=_reset_command)

    #
    # Create parser for the 'info' command.
    #
    text = "CPU frequency information commands."
    subpars = subparsers.add_parser("info", help=text, description=text)
    subparsers2 = subpars.add_subparsers(title="further sub-commands", dest="info command")
    subparsers2.required = True

    text = "Print the CPU frequencies the hardware accepts."
    descr = """Print the CPU frequencies the hardware accepts: either a continuous range or a list
               of discrete frequencies, in percent of the reference maximum CPU frequency. Probing
               the continuous range temporarily changes the frequency limits."""
    subpars2 = subparsers2.add_parser("frequencies", help=text, description=descr)
    subpars2.set_defaults(func=_info_frequencies_command)

    text = "Print current CPU frequency statistics."
    descr = """Print the minimum, maximum, and average current frequency over all CPUs, and the
               current frequency of a randomly selected CPU."""
    subpars2 = subparsers2.add_parser("current", help=text, description=descr)
    subpars2.set_defaults(func=_info_current_command)

    #
    # Create parser for the 'backends' command.
    #
    text = "CPU frequency scaling backend commands."
    subpars = subparsers.add_parser("backends", help=text, description=text)
    subparsers2 = subpars.add_subparsers(title="further sub-commands", dest="backends command")
    subparsers2.required = True

    text = "List all backends and whether they are supported on this system."
    subpars2 = subparsers2.add_parser("list", help=text, description=text)
    subpars2.set_defaults(func=_backends_list_command)

    text = "Print the name of the backend in use."
    subpars2 = subparsers2.add_parser("current", help=text, description=text)
    subpars2.set_defaults(func=_backends_current_command)

    argcomplete.autocomplete(parser)

    return parser

def parse_arguments(argv: Sequence[str]) -> argparse.Namespace:
    """Parse command-line arguments."""

    parser = build_arguments_parser()
    return parser.parse_args(argv)

def _turbo_get_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'turbo get' command."""
    printer.print_turbo(selector.get_backend().get_turbo())

def _turbo_set_command(args: argparse.Namespace, selector: Backends.BackendSelector, _):
    """Implement the 'turbo set' command."""
    selector.get_backend().set_turbo(args.state)

def _min_get_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'min get' command."""
    printer.print_limit("min", selector.get_backend().get_min())

def _min_set_command(args: argparse.Namespace, selector: Backends.BackendSelector, _):
    """Implement the 'min set' command."""

    pct = _parse_percentage(args.value, "min. frequency limit")
    selector.get_backend().set_min(pct)

def _max_get_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'max get' command."""
    printer.print_limit("max", selector.get_backend().get_max())

def _max_set_command(args: argparse.Namespace, selector: Backends.BackendSelector, _):
    """Implement the 'max set' command."""

    pct = _parse_percentage(args.value, "max. frequency limit")
    selector.get_backend().set_max(pct)

def _reset_command(_, selector: Backends.BackendSelector, __):
    """Implement the 'reset' command."""
    selector.get_backend().reset()

def _info_frequencies_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'info frequencies' command."""
    printer.print_frequencies(selector.get_backend().info_frequencies())

def _info_current_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'info current' command."""
    printer.print_core_stats(selector.get_backend().info_current())

def _backends_list_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'backends list' command."""
    printer.print_backends(selector.list_backends())

def _backends_current_command(_, selector: Backends.BackendSelector, printer: _Printer.Printer):
    """Implement the 'backends current' command."""
    printer.print_backend_name(selector.get_backend_name())

def _configure_logging(args: argparse.Namespace):
    """Configure the tool logger according to the standard options."""

    if args.debug:
        level = Logging.DEBUG
    elif args.quiet:
        level = Logging.WARNING
    else:
        level = Logging.INFO

    colored = True if args.force_color else None
    _LOG.configure(prefix=TOOLNAME, level=level, colored=colored)

def main(argv: Sequence[str] | None = None) -> int:
    """
    Script entry point.

    Args:
        argv: The command-line arguments without the program name. Use 'sys.argv' by default.

    Returns:
        The exit code in case of success. Errors terminate the program with 'SystemExit' carrying
        the exit code matching the error.
    """

    if argv is None:
        argv = sys.argv[1:]

    _LOG.configure(prefix=TOOLNAME)

    try:
        if not argv:
            raise ErrorNoArguments(f"No arguments given, use '{TOOLNAME} -h' for help")

        args = parse_arguments(argv)
        _configure_logging(args)

        config = Config.get_config(backend=args.backend, fmt=args.fmt,
                                   reference_freq=args.reference_freq)

        with Backends.BackendSelector(config) as selector, \
             _Printer.Printer(fmt=config["fmt"], colored=_LOG.colored) as printer:
            args.func(args, selector, printer)
    except KeyboardInterrupt:
        _LOG.error_out("Interrupted, exiting", exitcode=EXIT_INTERNAL_ERROR)
    except Error as err:
        _LOG.error_out(err, exitcode=_get_exitcode(err))

    return EXIT_SUCCESS

if __name__ == "__main__":
    sys.exit(main())
