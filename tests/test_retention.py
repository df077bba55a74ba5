"""Tests for the retention pruner."""

import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from logrotate.retention import (
    BACKUP_STAGE,
    ROLLOVER_STAGE,
    prune,
    remove_file,
)

BASE = "svc.log"


class RetentionTestCase(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.reporter = MagicMock()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def _touch(self, name):
        path = os.path.join(self.tmpdir, name)
        open(path, "w").close()
        return path

    def _remaining(self):
        return sorted(os.listdir(self.tmpdir))


class TestPruneRollover(RetentionTestCase):
    def test_keeps_newest(self):
        names = [
            f"{BASE}.20240101000000000",
            f"{BASE}.20240102000000000",
            f"{BASE}.20240103000000000",
            f"{BASE}.20240104000000000",
        ]
        for name in names:
            self._touch(name)
        self._touch(BASE)

        deleted = prune(self.tmpdir, BASE, 2, ROLLOVER_STAGE, self.reporter)

        self.assertEqual([os.path.basename(p) for p in deleted], names[:2])
        self.assertEqual(self._remaining(), sorted([BASE] + names[2:]))

    def test_ignores_zip_and_other_bases(self):
        self._touch(f"{BASE}.20240101000000000.zip")
        self._touch("other.log.20240101000000000")
        self._touch(f"my{BASE}.1")
        self._touch(f"{BASE}.1")

        deleted = prune(self.tmpdir, BASE, 0, ROLLOVER_STAGE, self.reporter)

        self.assertEqual([os.path.basename(p) for p in deleted], [f"{BASE}.1"])
        self.assertEqual(len(self._remaining()), 3)

    def test_short_suffixes_sort_lexicographically(self):
        # Known limitation: "10" sorts before "2", so .10 is treated as older.
        self._touch(f"{BASE}.2")
        self._touch(f"{BASE}.10")

        deleted = prune(self.tmpdir, BASE, 1, ROLLOVER_STAGE, self.reporter)

        self.assertEqual([os.path.basename(p) for p in deleted], [f"{BASE}.10"])

    def test_base_name_dots_are_literal(self):
        self._touch("svcXlog.1")
        deleted = prune(self.tmpdir, BASE, 0, ROLLOVER_STAGE, self.reporter)
        self.assertEqual(deleted, [])


class TestPruneBackup(RetentionTestCase):
    def test_only_canonical_archives(self):
        old = self._touch(f"{BASE}.20240101000000000.zip")
        self._touch(f"{BASE}.20240102000000000.zip")
        self._touch(f"{BASE}.1.zip")
        self._touch(f"{BASE}.20240103000000000")

        deleted = prune(self.tmpdir, BASE, 1, BACKUP_STAGE, self.reporter)

        self.assertEqual(deleted, [old])
        self.assertEqual(len(self._remaining()), 3)

    def test_count_within_limit_deletes_nothing(self):
        self._touch(f"{BASE}.20240101000000000.zip")
        self.assertEqual(prune(self.tmpdir, BASE, 5, BACKUP_STAGE, self.reporter), [])


class TestPruneEdgeCases(RetentionTestCase):
    def test_negative_count_is_unlimited(self):
        for i in range(5):
            self._touch(f"{BASE}.{i}")
        self.assertEqual(prune(self.tmpdir, BASE, -1, ROLLOVER_STAGE, self.reporter), [])
        self.assertEqual(len(self._remaining()), 5)

    def test_unknown_stage_is_noop(self):
        self._touch(f"{BASE}.1")
        self.assertEqual(prune(self.tmpdir, BASE, 0, "archive", self.reporter), [])
        self.assertEqual(len(self._remaining()), 1)

    def test_missing_directory_is_reported(self):
        missing = os.path.join(self.tmpdir, "missing")
        self.assertEqual(prune(missing, BASE, 0, ROLLOVER_STAGE, self.reporter), [])
        self.reporter.error.assert_called_once()

    def test_failed_delete_stops_pass(self):
        for i in range(1, 5):
            self._touch(f"{BASE}.{i}")

        with patch("logrotate.retention.remove_file", side_effect=PermissionError("denied")):
            deleted = prune(self.tmpdir, BASE, 1, ROLLOVER_STAGE, self.reporter)

        self.assertEqual(deleted, [])
        self.assertEqual(len(self._remaining()), 4)
        self.reporter.error.assert_called_once()
        self.assertIn("denied", self.reporter.error.call_args[0][0])

    def test_directory_matching_pattern_survives(self):
        os.makedirs(os.path.join(self.tmpdir, f"{BASE}.1"))
        remove_file(os.path.join(self.tmpdir, f"{BASE}.1"))
        self.assertTrue(os.path.isdir(os.path.join(self.tmpdir, f"{BASE}.1")))


if __name__ == "__main__":
    unittest.main()
