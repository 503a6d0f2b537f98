# Copyright Red Hat
#
# uidshift/command.py - UID/GID shifter command interface
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""The ``uidshift.command`` module provides the uidshift command line
interface, and a simple procedural interface to the ``uidshift.shift``
package.

The procedural interface is used by the ``uidshift`` command line tool,
and may be used by application programs, or interactively in the
Python shell.
"""
from argparse import ArgumentParser, ArgumentTypeError
from os.path import basename
from typing import Iterable, Optional, TextIO, Union
import logging
import sys
import os

from uidshift import (
    OFFSET_MAX,
    OFFSET_MIN,
    UIDSHIFT_DEBUG_WALK,
    UIDSHIFT_DEBUG_SHIFT,
    UIDSHIFT_DEBUG_COMMAND,
    UIDSHIFT_DEBUG_ALL,
    UIDSHIFT_SUBSYSTEM_COMMAND,
    SubsystemFilter,
    set_debug_mask,
    __version__,
)
from .shift import IdShifter, ShiftOptions, ShiftSummary

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_command(msg, *args, **kwargs):
    """A wrapper for command subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": UIDSHIFT_SUBSYSTEM_COMMAND}, **kwargs)


_DEFAULT_LOG_LEVEL = logging.WARNING
_CONSOLE_HANDLER = None


def shift_paths(
    paths: Iterable[Union[str, os.PathLike]],
    options: ShiftOptions,
    out: Optional[TextIO] = None,
) -> ShiftSummary:
    """
    Shift the ownership of all objects under ``paths``.

    :param paths: The paths to process.
    :param options: The offsets and mode flags to use.
    :param out: Optional stream for verbose change reports.
    :returns: A ``ShiftSummary`` for the run.
    """
    shifter = IdShifter(options, out=out)
    return shifter.run(paths)


def _shift_cmd(cmd_args):
    """
    Shift command handler.

    Shift the user and group IDs of the paths given on the command line.
    Per-object errors are reported but do not affect the exit status.

    :param cmd_args: Command line arguments for the command
    :returns: integer status code returned from ``main()``
    """
    options = ShiftOptions.from_cmd_args(cmd_args)
    summary = shift_paths(cmd_args.paths, options)
    if summary.errors:
        _log_warn("Encountered %d errors while shifting ownership", summary.errors)
    return 0


def _offset_arg(value: str) -> int:
    """
    Parse and range check a UID or GID offset argument.

    :param value: The argument string.
    :returns: The offset as an integer.
    :raises: ``ArgumentTypeError`` if the value is not an integer in range.
    """
    try:
        offset = int(value, 10)
    except ValueError as err:
        raise ArgumentTypeError(f"invalid offset value: '{value}'") from err
    if offset < OFFSET_MIN or offset > OFFSET_MAX:
        raise ArgumentTypeError(
            f"{offset} is not in {OFFSET_MIN}..={OFFSET_MAX}"
        )
    return offset


def setup_logging(cmd_args):
    """
    Set up uidshift logging.
    """
    # pylint: disable=global-statement
    global _CONSOLE_HANDLER
    level = _DEFAULT_LOG_LEVEL
    if cmd_args.verbose and cmd_args.verbose > 1:
        level = logging.DEBUG
    elif cmd_args.verbose and cmd_args.verbose > 0:
        level = logging.INFO

    uidshift_log = logging.getLogger("uidshift")
    formatter = logging.Formatter("%(levelname)s - %(message)s")
    uidshift_log.setLevel(level)
    if uidshift_log.hasHandlers():
        uidshift_log.handlers.clear()

    # Subsystem log filtering
    _uidshift_subsystem_filter = SubsystemFilter("uidshift")

    _CONSOLE_HANDLER = logging.StreamHandler()

    _CONSOLE_HANDLER.setLevel(level)
    _CONSOLE_HANDLER.setFormatter(formatter)
    _CONSOLE_HANDLER.addFilter(_uidshift_subsystem_filter)

    uidshift_log.addHandler(_CONSOLE_HANDLER)


def shutdown_logging():
    """
    Shut down uidshift logging.
    """
    logging.shutdown()


def set_debug(debug_arg):
    """
    Set debugging mask from command line argument.
    """
    if not debug_arg:
        return

    mask_map = {
        "walk": UIDSHIFT_DEBUG_WALK,
        "shift": UIDSHIFT_DEBUG_SHIFT,
        "command": UIDSHIFT_DEBUG_COMMAND,
        "all": UIDSHIFT_DEBUG_ALL,
    }

    mask = 0
    for name in debug_arg.split(","):
        if name not in mask_map:
            raise ValueError(f"Unknown debug option: {name}")
        mask |= mask_map[name]
    set_debug_mask(mask)


def _add_shift_args(parser):
    """
    Add ownership shift arguments.
    """
    parser.add_argument(
        "paths",
        metavar="PATH",
        type=str,
        nargs="+",
        help="Paths which user and group IDs should get shifted",
    )
    parser.add_argument(
        "--no-recursive",
        action="store_true",
        help="Disables recursion into sub-directories",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Skips changing the user and group IDs for trial runs",
    )
    parser.add_argument(
        "-u",
        "--uid-offset",
        metavar="OFFSET",
        type=_offset_arg,
        required=True,
        help="The user ID offset to be applied to each file. "
        "Can both be positive or negative",
    )
    parser.add_argument(
        "-g",
        "--gid-offset",
        metavar="OFFSET",
        type=_offset_arg,
        required=True,
        help="The group ID offset to be applied to each file. "
        "Can both be positive or negative",
    )


def main(args):
    """
    Main entry point for uidshift.
    """
    parser = ArgumentParser(
        description="Shift user and group IDs of files and folders",
        prog=basename(args[0]),
    )

    parser.add_argument(
        "-d",
        "--debug",
        metavar="DEBUGOPTS",
        type=str,
        help="A list of debug options to enable",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        help="Enable verbose command output",
        action="count",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        help="Report the version number of uidshift",
        version=__version__,
    )
    _add_shift_args(parser)
    parser.set_defaults(func=_shift_cmd)

    cmd_args = parser.parse_args(args[1:])

    status = 1

    try:
        set_debug(cmd_args.debug)
    except ValueError as err:
        print(err)
        parser.print_help()
        return status

    setup_logging(cmd_args)

    _log_debug_command("Parsed %s", " ".join(args[1:]))

    if cmd_args.debug:
        status = cmd_args.func(cmd_args)
    else:
        try:
            status = cmd_args.func(cmd_args)
        # pylint: disable=broad-except
        except KeyboardInterrupt:  # pragma: no cover
            _log_info("Exiting on user cancel")
        except Exception as err:
            _log_error("Command failed: %s", err)

    shutdown_logging()
    return status


def console_main():
    """
    Console script entry point for uidshift.
    """
    sys.exit(main(sys.argv))


# vim: set et ts=4 sw=4 :
