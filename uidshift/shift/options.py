# Copyright Red Hat
#
# uidshift/shift/options.py - UID/GID shifter options
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Ownership shift options.
"""
from dataclasses import dataclass, fields
from argparse import Namespace
import logging

from uidshift import OFFSET_MAX, OFFSET_MIN, UidShiftArgumentError

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def check_offset(name: str, value: int) -> int:
    """
    Validate a UID or GID offset value.

    :param name: The name of the offset (used in error messages).
    :type name: ``str``
    :param value: The offset value to check.
    :type value: ``int``
    :returns: ``value`` unchanged if valid.
    :rtype: ``int``
    :raises: ``UidShiftArgumentError`` if ``value`` is not an integer or
             lies outside ``[OFFSET_MIN, OFFSET_MAX]``.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise UidShiftArgumentError(f"Invalid {name}: {value!r} is not an integer")
    if value < OFFSET_MIN or value > OFFSET_MAX:
        raise UidShiftArgumentError(
            f"Invalid {name}: {value} is not in range {OFFSET_MIN}..={OFFSET_MAX}"
        )
    return value


@dataclass(frozen=True)
class ShiftOptions:
    """
    Ownership shift options.
    """

    #: Offset added to the owning user ID of each object
    uid_offset: int = 0
    #: Offset added to the owning group ID of each object
    gid_offset: int = 0
    #: Recurse into sub-directories of each path
    recursive: bool = True
    #: Report each ownership change before it is made
    verbose: bool = False
    #: Validate and report changes without modifying ownership
    dry_run: bool = False

    def __post_init__(self):
        check_offset("uid_offset", self.uid_offset)
        check_offset("gid_offset", self.gid_offset)

    def __str__(self):
        """
        Return a human readable string representation of this
        ``ShiftOptions`` instance.

        :returns: A human readable string.
        :rtype: ``str``
        """
        return "\n".join(f"{key}={val}" for key, val in self.__dict__.items())

    @classmethod
    def from_cmd_args(cls, cmd_args: Namespace) -> "ShiftOptions":
        """
        Initialise ShiftOptions from command line arguments.

        Construct a new ``ShiftOptions`` object from the command line
        arguments in ``cmd_args``. The ``no_recursive`` flag is inverted
        into ``recursive`` and a counted ``verbose`` argument enables
        change reporting at any level.

        :param cmd_args: The command line arguments.
        :type cmd_args: ``Namespace``
        :returns: A new ``ShiftOptions`` instance
        :rtype: ``ShiftOptions``
        """
        field_names = {f.name for f in fields(cls)}
        kwargs = {
            name: getattr(cmd_args, name)
            for name in field_names
            if hasattr(cmd_args, name)
        }
        if hasattr(cmd_args, "no_recursive"):
            kwargs["recursive"] = not cmd_args.no_recursive
        kwargs["verbose"] = bool(kwargs.get("verbose"))
        options = cls(**kwargs)
        _log_debug("Initialised ShiftOptions from arguments: %s", repr(options))
        return options
