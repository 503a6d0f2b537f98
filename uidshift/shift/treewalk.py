# Copyright Red Hat
#
# uidshift/shift/treewalk.py - UID/GID shifter tree walk
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Tree walking support for ownership shifts.
"""
from typing import Callable, Iterator, Optional, Union
import logging
import stat
import os

from uidshift import UIDSHIFT_SUBSYSTEM_WALK, TraversalStepError

from .options import ShiftOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_walk(msg, *args, **kwargs):
    """A wrapper for walk subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": UIDSHIFT_SUBSYSTEM_WALK}, **kwargs)


#: Type of the callable used to report non-fatal walk errors.
WalkErrorHandler = Callable[[TraversalStepError], None]


def _warn_walk_error(err: TraversalStepError):
    """
    Default walk error handler: log the error and carry on.

    :param err: The error to report.
    :type err: ``TraversalStepError``
    """
    _log_warn("%s", err)


def _is_real_dir(path: str) -> bool:
    """
    Return ``True`` if ``path`` is a directory and not a symbolic link.

    :param path: The path to check.
    :type path: ``str``
    :returns: ``True`` for a directory that can be descended into.
    :rtype: ``bool``
    """
    try:
        return stat.S_ISDIR(os.lstat(path).st_mode)
    except OSError:
        return False


def walk_paths(
    root: Union[str, os.PathLike],
    recurse: bool = True,
    onerror: Optional[WalkErrorHandler] = None,
) -> Iterator[str]:
    """
    Lazily yield the paths of all file system objects under ``root``.

    The root itself is always yielded first, unresolved. If ``recurse`` is
    ``True`` and the root is a directory, every file, directory and
    symbolic link below it is then yielded exactly once, each directory's
    entries before the contents of its sub-directories. Symbolic links are
    yielded but never followed.

    Failures listing a directory are wrapped in ``TraversalStepError`` and
    passed to ``onerror``; the walk then continues with the remaining
    entries.

    :param root: The path to start from.
    :type root: ``str`` or ``os.PathLike``
    :param recurse: Descend into sub-directories of ``root``.
    :type recurse: ``bool``
    :param onerror: Optional callable to receive walk errors. Errors are
                    logged as warnings if no handler is given.
    :type onerror: ``Optional[WalkErrorHandler]``
    :returns: An iterator over path strings.
    :rtype: ``Iterator[str]``
    """
    root = os.fspath(root)
    onerror = onerror or _warn_walk_error

    yield root

    if not recurse or not _is_real_dir(root):
        return

    def _walk_error(err: OSError):
        _log_debug_walk("Walk error at '%s': %s", err.filename, err)
        onerror(TraversalStepError(err))

    for dirpath, dirs, files in os.walk(root, onerror=_walk_error, followlinks=False):
        _log_debug_walk(
            "Visiting '%s' (%d dirs, %d files)", dirpath, len(dirs), len(files)
        )
        dirs.sort()
        for name in sorted(files + dirs):
            yield os.path.join(dirpath, name)


class TreeWalker:
    """
    File system tree walker for ownership shifts.
    """

    def __init__(self, options: Optional[ShiftOptions] = None):
        """
        Initialise a new ``TreeWalker`` object.

        :param options: Options to control this ``TreeWalker`` instance.
        :type options: ``ShiftOptions``
        """
        self.options: ShiftOptions = options or ShiftOptions()

    def walk(
        self,
        root: Union[str, os.PathLike],
        onerror: Optional[WalkErrorHandler] = None,
    ) -> Iterator[str]:
        """
        Walk ``root`` according to this walker's options.

        :param root: The path to start from.
        :type root: ``str`` or ``os.PathLike``
        :param onerror: Optional callable to receive walk errors.
        :type onerror: ``Optional[WalkErrorHandler]``
        :returns: An iterator over path strings.
        :rtype: ``Iterator[str]``
        """
        _log_debug_walk(
            "Walking '%s' (recursive=%s)", os.fspath(root), self.options.recursive
        )
        return walk_paths(root, recurse=self.options.recursive, onerror=onerror)
