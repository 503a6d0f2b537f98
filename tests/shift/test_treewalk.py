# Copyright Red Hat
#
# tests/shift/test_treewalk.py - TreeWalker tests.
#
# This file is part of the uidshift project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
import tempfile
import os
from unittest.mock import patch
from pathlib import Path

from uidshift import TraversalStepError
from uidshift.shift.options import ShiftOptions
from uidshift.shift.treewalk import TreeWalker, walk_paths

from ._util import make_tree


class TestWalkPaths(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = self._tmp.name
        self.tree = make_tree(self.base)

    def test_walk_paths_recursive(self):
        """All entries are yielded exactly once, root first."""
        paths = list(walk_paths(self.base))
        self.assertEqual(paths[0], self.base)
        self.assertEqual(len(paths), len(self.tree) + 1)
        self.assertEqual(set(paths), set([self.base] + self.tree))

    def test_walk_paths_parent_before_children(self):
        paths = list(walk_paths(self.base))
        for i, path in enumerate(paths):
            parent = os.path.dirname(path)
            if path == self.base:
                continue
            self.assertLess(paths.index(parent), i)

    def test_walk_paths_deterministic_order(self):
        b = self.base
        expected = [
            b,
            os.path.join(b, "a"),
            os.path.join(b, "b"),
            os.path.join(b, "c"),
            os.path.join(b, "a", "one"),
            os.path.join(b, "a", "sub"),
            os.path.join(b, "a", "two"),
            os.path.join(b, "a", "sub", "three"),
            os.path.join(b, "b", "dangling"),
            os.path.join(b, "b", "link"),
        ]
        self.assertEqual(list(walk_paths(b)), expected)

    def test_walk_paths_non_recursive(self):
        self.assertEqual(list(walk_paths(self.base, recurse=False)), [self.base])

    def test_walk_paths_does_not_follow_symlinks(self):
        paths = list(walk_paths(self.base))
        link = os.path.join(self.base, "b", "link")
        self.assertIn(link, paths)
        self.assertFalse(any(p.startswith(link + os.sep) for p in paths))

    def test_walk_paths_symlink_root(self):
        """A root that is a symlink to a directory is not descended into."""
        link = os.path.join(self.base, "b", "link")
        self.assertEqual(list(walk_paths(link)), [link])

    def test_walk_paths_file_root(self):
        path = os.path.join(self.base, "c")
        self.assertEqual(list(walk_paths(path)), [path])

    def test_walk_paths_missing_root(self):
        """A missing root is yielded for downstream error reporting."""
        errors = []
        missing = os.path.join(self.base, "missing")
        paths = list(walk_paths(missing, onerror=errors.append))
        self.assertEqual(paths, [missing])
        self.assertEqual(errors, [])

    def test_walk_paths_pathlike_root(self):
        paths = list(walk_paths(Path(self.base), recurse=False))
        self.assertEqual(paths, [self.base])

    def test_walk_paths_error_continues(self):
        """A failed walk step is reported and the walk carries on."""
        locked = os.path.join(self.base, "locked")

        def fake_walk(top, onerror=None, followlinks=False):
            onerror(PermissionError(13, "Permission denied", locked))
            yield (top, [], ["c"])

        errors = []
        with patch("uidshift.shift.treewalk.os.walk", side_effect=fake_walk):
            paths = list(walk_paths(self.base, onerror=errors.append))

        self.assertEqual(paths, [self.base, os.path.join(self.base, "c")])
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], TraversalStepError)
        self.assertEqual(errors[0].path, locked)
        self.assertIn("Permission denied", str(errors[0]))

    def test_walk_paths_error_default_handler_logs(self):
        def fake_walk(top, onerror=None, followlinks=False):
            onerror(PermissionError(13, "Permission denied", top))
            return iter(())

        with patch("uidshift.shift.treewalk.os.walk", side_effect=fake_walk):
            with self.assertLogs("uidshift.shift.treewalk", level="WARNING") as cm:
                paths = list(walk_paths(self.base))

        self.assertEqual(paths, [self.base])
        self.assertIn("Permission denied", cm.output[0])

    def test_walk_paths_is_lazy(self):
        with patch("uidshift.shift.treewalk.os.walk") as mock_walk:
            walker = walk_paths(self.base)
            self.assertEqual(next(walker), self.base)
            mock_walk.assert_not_called()


class TestTreeWalker(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = self._tmp.name
        self.tree = make_tree(self.base)

    def test_TreeWalker(self):
        walker = TreeWalker()
        self.assertTrue(walker.options.recursive)

    def test_TreeWalker_walk_recursive(self):
        walker = TreeWalker(ShiftOptions())
        self.assertEqual(len(list(walker.walk(self.base))), len(self.tree) + 1)

    def test_TreeWalker_walk_no_recursive(self):
        walker = TreeWalker(ShiftOptions(recursive=False))
        self.assertEqual(list(walker.walk(self.base)), [self.base])
