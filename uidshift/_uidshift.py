# Copyright Red Hat
#
# uidshift/_uidshift.py - UID/GID shifter global definitions
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Global definitions for the top-level uidshift package.
"""
import logging

_log = logging.getLogger("uidshift")

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Uidshift debugging subsystem mask
UIDSHIFT_DEBUG_WALK = 1
UIDSHIFT_DEBUG_SHIFT = 2
UIDSHIFT_DEBUG_COMMAND = 4
UIDSHIFT_DEBUG_ALL = UIDSHIFT_DEBUG_WALK | UIDSHIFT_DEBUG_SHIFT | UIDSHIFT_DEBUG_COMMAND

# Uidshift debugging subsystem names
UIDSHIFT_SUBSYSTEM_WALK = "uidshift.walk"
UIDSHIFT_SUBSYSTEM_SHIFT = "uidshift.shift"
UIDSHIFT_SUBSYSTEM_COMMAND = "uidshift.command"

_DEBUG_MASK_TO_SUBSYSTEM = {
    UIDSHIFT_DEBUG_WALK: UIDSHIFT_SUBSYSTEM_WALK,
    UIDSHIFT_DEBUG_SHIFT: UIDSHIFT_SUBSYSTEM_SHIFT,
    UIDSHIFT_DEBUG_COMMAND: UIDSHIFT_SUBSYSTEM_COMMAND,
}

_debug_subsystems = set()

#: Largest value representable as an unsigned 32-bit user or group ID.
ID_MAX = 2**32 - 1

#: Largest magnitude of a UID or GID offset: enough to map any valid ID to
#: any other valid ID.
OFFSET_MAX = ID_MAX
OFFSET_MIN = -ID_MAX


class SubsystemFilter(logging.Filter):
    """
    Filters DEBUG records based on a set of enabled subsystem names.
    Non-DEBUG records or DEBUG records without a 'subsystem' attribute
    are always passed through.
    """

    def __init__(self, name=""):
        super().__init__(name)
        self.enabled_subsystems = set(_debug_subsystems)

    def filter(self, record):
        # Always pass non-DEBUG messages.
        if record.levelno != logging.DEBUG:
            return True

        # Always pass DEBUG messages that aren't for a specific subsystem.
        if not hasattr(record, "subsystem"):
            return True

        return record.subsystem in self.enabled_subsystems

    def set_debug_subsystems(self, subsystems):
        """Sets the collection of subsystems to allow."""
        self.enabled_subsystems = set(subsystems)


def get_debug_mask():
    """
    Return the current debug mask for the ``uidshift`` package.

    :returns: The current debug mask value
    :rtype: int
    """
    enabled_subsystems = set(_debug_subsystems)
    uidshift_log = logging.getLogger("uidshift")

    for handler in uidshift_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                enabled_subsystems.update(f.enabled_subsystems)

    mask_map = {v: k for k, v in _DEBUG_MASK_TO_SUBSYSTEM.items()}
    mask = 0
    for subsystem_name in enabled_subsystems:
        mask |= mask_map.get(subsystem_name, 0)
    return mask


def set_debug_mask(mask):
    """
    Set the debug mask for the ``uidshift`` package.

    :param mask: the logical OR of the ``UIDSHIFT_DEBUG_*``
                 values to log.
    :rtype: None
    """
    # pylint: disable=global-statement
    global _debug_subsystems

    if mask < 0 or mask > UIDSHIFT_DEBUG_ALL:
        raise ValueError(f"Invalid uidshift debug mask: {mask}")

    enabled_subsystems = []
    for flag, subsystem_name in _DEBUG_MASK_TO_SUBSYSTEM.items():
        if mask & flag:
            enabled_subsystems.append(subsystem_name)

    uidshift_log = logging.getLogger("uidshift")
    for handler in uidshift_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                f.set_debug_subsystems(enabled_subsystems)

    _debug_subsystems = set(enabled_subsystems)


#
# Uidshift exception types
#


class UidShiftError(Exception):
    """
    Base class for UID/GID shifter errors.
    """


class UidShiftArgumentError(UidShiftError):
    """
    An invalid argument was passed to a uidshift API call.
    """


class MetadataReadError(UidShiftError):
    """
    The metadata of a file system object could not be read.
    """

    def __init__(self, path: str, err: OSError):
        """
        Initialise a new ``MetadataReadError`` exception.

        :param path: The path that could not be examined.
        :param err: The ``OSError`` raised by ``os.lstat()``.
        """
        self.path, self.err = path, err
        super().__init__(f"Could not load file metadata for '{path}': {err}")


class IdentityOverflowError(UidShiftError):
    """
    Applying an offset to a UID or GID gives a value outside the unsigned
    32-bit ID range.
    """

    def __init__(self, path: str, kind: str, old_id: int, offset: int):
        """
        Initialise a new ``IdentityOverflowError`` exception.

        :param path: The path of the object being shifted.
        :param kind: The kind of identifier: "UID" or "GID".
        :param old_id: The current value of the identifier.
        :param offset: The offset that could not be applied.
        """
        self.path, self.kind, self.old_id, self.offset = path, kind, old_id, offset
        super().__init__(
            f"{kind} offset {offset} results in invalid new {kind} "
            f"{old_id + offset} for '{path}' (old {kind}: {old_id})"
        )


class MutationError(UidShiftError):
    """
    An error changing the ownership of a file system object.
    """

    def __init__(self, path: str, err: OSError):
        """
        Initialise a new ``MutationError`` exception.

        :param path: The path whose ownership could not be changed.
        :param err: The ``OSError`` raised by ``os.lchown()``.
        """
        self.path, self.err = path, err
        super().__init__(f"Could not set new owner for '{path}': {err}")


class TraversalStepError(UidShiftError):
    """
    A single step of a directory tree walk failed.
    """

    def __init__(self, err: OSError):
        """
        Initialise a new ``TraversalStepError`` exception.

        :param err: The ``OSError`` reported by the directory walk.
        """
        self.path, self.err = err.filename, err
        super().__init__(f"Error while walking '{err.filename}': {err.strerror}")


__all__ = [
    "ID_MAX",
    "OFFSET_MAX",
    "OFFSET_MIN",
    "UIDSHIFT_DEBUG_WALK",
    "UIDSHIFT_DEBUG_SHIFT",
    "UIDSHIFT_DEBUG_COMMAND",
    "UIDSHIFT_DEBUG_ALL",
    "UIDSHIFT_SUBSYSTEM_WALK",
    "UIDSHIFT_SUBSYSTEM_SHIFT",
    "UIDSHIFT_SUBSYSTEM_COMMAND",
    "SubsystemFilter",
    "get_debug_mask",
    "set_debug_mask",
    "UidShiftError",
    "UidShiftArgumentError",
    "MetadataReadError",
    "IdentityOverflowError",
    "MutationError",
    "TraversalStepError",
]
