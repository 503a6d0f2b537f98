# Copyright Red Hat
#
# uidshift/shift/idshifter.py - UID/GID shifter top-level interface
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Top-level ownership shift interface.
"""
from typing import Iterable, Optional, Set, TextIO, Union
import logging
import os

from uidshift import TraversalStepError

from .options import ShiftOptions
from .shifter import Identity, OwnershipShifter, ShiftResult
from .shifttypes import ShiftOutcome
from .treewalk import TreeWalker

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


class ShiftSummary:
    """
    Counts of the outcomes of one ownership shift run.
    """

    def __init__(self):
        #: Number of objects whose ownership was changed
        self.applied: int = 0
        #: Number of paths skipped as already seen in this run
        self.skipped: int = 0
        #: Number of changes validated but not applied (dry run)
        self.simulated: int = 0
        #: Number of objects that could not be shifted
        self.failed: int = 0
        #: Number of directory walk errors
        self.walk_errors: int = 0

    def add(self, result: ShiftResult):
        """
        Account for one ``ShiftResult``.

        :param result: The result to count.
        :type result: ``ShiftResult``
        """
        attr = {
            ShiftOutcome.APPLIED: "applied",
            ShiftOutcome.SKIPPED: "skipped",
            ShiftOutcome.SIMULATED: "simulated",
            ShiftOutcome.FAILED: "failed",
        }[result.outcome]
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def errors(self) -> int:
        """
        The total number of errors reported during the run.
        """
        return self.failed + self.walk_errors

    def __str__(self):
        return (
            f"{self.applied} applied, {self.simulated} simulated, "
            f"{self.skipped} skipped, {self.failed} failed, "
            f"{self.walk_errors} walk errors"
        )


class IdShifter:
    """
    Shift the ownership of every object under a list of paths.
    """

    def __init__(self, options: Optional[ShiftOptions] = None, out: Optional[TextIO] = None):
        """
        Initialise a new ``IdShifter``.

        :param options: Options to control this ``IdShifter`` instance.
        :type options: ``ShiftOptions``
        :param out: Stream for verbose change reports (default
                    ``sys.stdout``).
        :type out: ``Optional[TextIO]``
        """
        self.options: ShiftOptions = options or ShiftOptions()
        self.out: Optional[TextIO] = out
        self.tree_walker: TreeWalker = TreeWalker(self.options)

    def run(self, paths: Iterable[Union[str, os.PathLike]]) -> ShiftSummary:
        """
        Shift the ownership of all objects reachable from ``paths``.

        Each path is walked in turn (or used alone when recursion is
        disabled) and every object is shifted at most once, however many
        times it is reached. Errors are logged as they occur and do not
        stop the run.

        :param paths: The root paths to process.
        :type paths: ``Iterable[Union[str, os.PathLike]]``
        :returns: A summary of the run.
        :rtype: ``ShiftSummary``
        """
        seen: Set[Identity] = set()
        shifter = OwnershipShifter(seen, self.options, out=self.out)
        summary = ShiftSummary()

        def _walk_error(err: TraversalStepError):
            summary.walk_errors += 1
            _log_error("%s", err)

        _log_debug("Shifting ownership with options:\n%s", self.options)

        for root in paths:
            for path in self.tree_walker.walk(root, onerror=_walk_error):
                result = shifter.shift(path)
                summary.add(result)
                if result.failed:
                    _log_error("%s", result.error)

        _log_info(
            "%s ownership of %d objects: %s",
            "Checked" if self.options.dry_run else "Shifted",
            len(seen),
            summary,
        )
        return summary
