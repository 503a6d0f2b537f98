# Copyright Red Hat
#
# uidshift/shift/__init__.py - UID/GID shifter ownership shift package
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Ownership shift package.

Provides tree walking, per-object ownership shifting with (inode, device)
deduplication, and a top-level interface to run both over a list of
paths. The main entry points are ``IdShifter`` and ``ShiftOptions``.
"""
from .idshifter import IdShifter, ShiftSummary
from .options import ShiftOptions
from .shifter import OwnershipShifter, ShiftResult
from .shifttypes import ShiftOutcome
from .treewalk import TreeWalker, walk_paths

__all__ = [
    "IdShifter",
    "OwnershipShifter",
    "ShiftOptions",
    "ShiftOutcome",
    "ShiftResult",
    "ShiftSummary",
    "TreeWalker",
    "walk_paths",
]
