# Copyright Red Hat
#
# uidshift/__init__.py - UID/GID shifter package initialisation
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Uidshift top-level package.
"""
from ._uidshift import *  # noqa: F401, F403
from ._uidshift import __all__  # noqa: F401

__version__ = "0.1.0"
