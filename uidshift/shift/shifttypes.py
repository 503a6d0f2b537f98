# Copyright Red Hat
#
# uidshift/shift/shifttypes.py - UID/GID shifter outcome types
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Ownership shift outcome types
"""
from enum import Enum


class ShiftOutcome(Enum):
    """
    Enum for the outcome of shifting a single file system object.
    """

    APPLIED = "applied"
    SKIPPED = "skipped"
    SIMULATED = "simulated"
    FAILED = "failed"
