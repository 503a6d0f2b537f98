# Copyright Red Hat
#
# uidshift/shift/shifter.py - UID/GID shifter ownership changes
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Apply a UID/GID offset to a single file system object.
"""
from dataclasses import dataclass
from typing import Optional, Set, TextIO, Tuple, Union
import logging
import sys
import os

from uidshift import (
    ID_MAX,
    UIDSHIFT_SUBSYSTEM_SHIFT,
    UidShiftError,
    MetadataReadError,
    IdentityOverflowError,
    MutationError,
)

from .options import ShiftOptions
from .shifttypes import ShiftOutcome

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_shift(msg, *args, **kwargs):
    """A wrapper for shift subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": UIDSHIFT_SUBSYSTEM_SHIFT}, **kwargs)


#: An (inode, device) pair identifying a file system object.
Identity = Tuple[int, int]


def shift_id(path: str, kind: str, old_id: int, offset: int) -> int:
    """
    Apply ``offset`` to ``old_id`` and check the result is a valid ID.

    :param path: The path the ID belongs to (used in error messages).
    :type path: ``str``
    :param kind: The kind of ID: "UID" or "GID".
    :type kind: ``str``
    :param old_id: The current ID value.
    :type old_id: ``int``
    :param offset: The signed offset to apply.
    :type offset: ``int``
    :returns: The new ID value.
    :rtype: ``int``
    :raises: ``IdentityOverflowError`` if the result is negative or does
             not fit in an unsigned 32-bit value.
    """
    new_id = old_id + offset
    if new_id < 0 or new_id > ID_MAX:
        raise IdentityOverflowError(path, kind, old_id, offset)
    return new_id


@dataclass(frozen=True)
class ShiftResult:
    """
    The result of shifting the ownership of one path.
    """

    #: The path that was processed
    path: str
    #: What happened to the object at ``path``
    outcome: ShiftOutcome
    #: Owning UID before the shift, if known
    old_uid: Optional[int] = None
    #: Owning GID before the shift, if known
    old_gid: Optional[int] = None
    #: Owning UID after the shift, if computed
    new_uid: Optional[int] = None
    #: Owning GID after the shift, if computed
    new_gid: Optional[int] = None
    #: The error for ``ShiftOutcome.FAILED`` results
    error: Optional[UidShiftError] = None

    @property
    def failed(self) -> bool:
        """
        ``True`` if this result represents a failed shift.
        """
        return self.outcome == ShiftOutcome.FAILED


class OwnershipShifter:
    """
    Shift the owning user and group of file system objects, at most once
    per object identity.
    """

    def __init__(
        self,
        seen: Set[Identity],
        options: Optional[ShiftOptions] = None,
        out: Optional[TextIO] = None,
    ):
        """
        Initialise a new ``OwnershipShifter``.

        :param seen: The set of object identities already processed in
                     this run. It is updated in place and may be shared
                     between several ``OwnershipShifter`` calls.
        :type seen: ``Set[Identity]``
        :param options: Offsets and mode flags for this run.
        :type options: ``ShiftOptions``
        :param out: Stream for verbose change reports (default
                    ``sys.stdout``).
        :type out: ``Optional[TextIO]``
        """
        self.seen: Set[Identity] = seen
        self.options: ShiftOptions = options or ShiftOptions()
        self.out: TextIO = out or sys.stdout

    def _shift(self, path: str) -> ShiftResult:
        options = self.options

        try:
            attrs = os.lstat(path)
        except OSError as err:
            raise MetadataReadError(path, err) from err

        identity = (attrs.st_ino, attrs.st_dev)
        if identity in self.seen:
            _log_debug_shift("Skipping already seen '%s' %s", path, identity)
            return ShiftResult(path, ShiftOutcome.SKIPPED)
        self.seen.add(identity)

        old_uid = attrs.st_uid
        old_gid = attrs.st_gid
        new_uid = shift_id(path, "UID", old_uid, options.uid_offset)
        new_gid = shift_id(path, "GID", old_gid, options.gid_offset)

        if options.verbose:
            print(
                f"Changing uid:gid from {old_uid}:{old_gid} to "
                f"{new_uid}:{new_gid} for '{path}'",
                file=self.out,
            )

        outcome = ShiftOutcome.SIMULATED
        if not options.dry_run:
            try:
                os.lchown(path, new_uid, new_gid)
            except OSError as err:
                raise MutationError(path, err) from err
            outcome = ShiftOutcome.APPLIED

        _log_debug_shift(
            "%s '%s' %d:%d -> %d:%d",
            outcome.value,
            path,
            old_uid,
            old_gid,
            new_uid,
            new_gid,
        )
        return ShiftResult(path, outcome, old_uid, old_gid, new_uid, new_gid)

    def shift(self, path: Union[str, os.PathLike]) -> ShiftResult:
        """
        Apply the configured offsets to the object at ``path``.

        The object's own metadata is read without following symbolic
        links, so a link is shifted rather than its target. Objects whose
        (inode, device) identity has already been seen are skipped. Per
        object failures do not raise: they are returned as a
        ``ShiftOutcome.FAILED`` result carrying the error, and the object
        is left unmodified.

        :param path: The path to shift.
        :type path: ``str`` or ``os.PathLike``
        :returns: The result of the shift.
        :rtype: ``ShiftResult``
        """
        path = os.fspath(path)
        try:
            return self._shift(path)
        except UidShiftError as err:
            _log_debug_shift("Failed to shift '%s': %s", path, err)
            return ShiftResult(path, ShiftOutcome.FAILED, error=err)
