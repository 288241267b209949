#!/usr/bin/env python3

"""Tests for the git diagnostic logger."""

import logging
import unittest
from unittest.mock import AsyncMock, patch

from expecttest import TestCase

from autocommit.debug_log import GitDebugLogger, format_event
from autocommit.testing import failed, ok


class FormatEventTest(TestCase):
    def test_without_data(self):
        self.assertEqual(format_event("AUTO-COMMIT", "hello"), "[AUTO-COMMIT] hello")

    def test_with_data(self):
        self.assertExpectedInline(
            format_event("AUTO-COMMIT", "Running git add -A", {"cwd": "/repo", "exitCode": 1}),
            """[AUTO-COMMIT] Running git add -A {"cwd": "/repo", "exitCode": 1}""",
        )


class GitDebugLoggerTest(TestCase, unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.std_logger = logging.getLogger("autocommit.test.debug")
        self.std_logger.setLevel(logging.DEBUG)
        self.addCleanup(self.std_logger.setLevel, logging.NOTSET)

        self.run_process_patch = patch(
            "autocommit.debug_log.run_process", new_callable=AsyncMock
        )
        self.mock_run_process = self.run_process_patch.start()
        self.addCleanup(self.run_process_patch.stop)

    def test_event_is_logged_at_debug(self):
        logger = GitDebugLogger(self.std_logger, snapshots=True)
        with self.assertLogs(self.std_logger, level="DEBUG") as cm:
            logger.event("AUTO-COMMIT", "Commit SUCCESS for T-1", {"commitSha": None})
        self.assertEqual(
            cm.output,
            ['DEBUG:autocommit.test.debug:[AUTO-COMMIT] Commit SUCCESS for T-1 {"commitSha": null}'],
        )

    async def test_snapshot_logs_branch_and_changes(self):
        self.mock_run_process.side_effect = [ok("main\n"), ok(" M a.py\n?? b.py\n")]
        logger = GitDebugLogger(self.std_logger, snapshots=True)

        with self.assertLogs(self.std_logger, level="DEBUG") as cm:
            await logger.git_status("AUTO-COMMIT", "/repo", "before commit for T-1")

        self.assertExpectedInline(
            cm.records[0].getMessage(),
            """[AUTO-COMMIT] git status (before commit for T-1) {"branch": "main", "changes": [" M a.py", "?? b.py"], "clean": false, "cwd": "/repo"}""",
        )

    async def test_snapshot_reports_unavailable_status(self):
        self.mock_run_process.side_effect = [failed("fatal"), failed("fatal: not a git repository\n", 128)]
        logger = GitDebugLogger(self.std_logger, snapshots=True)

        with self.assertLogs(self.std_logger, level="DEBUG") as cm:
            await logger.git_status("AUTO-COMMIT", "/tmp", "after commit for T-1")

        self.assertIn("git status (after commit for T-1) unavailable", cm.output[0])
        self.assertIn('"exitCode": 128', cm.output[0])

    async def test_snapshot_never_raises(self):
        self.mock_run_process.side_effect = OSError("boom")
        logger = GitDebugLogger(self.std_logger, snapshots=True)

        # DEBUG keeps the snapshot enabled while the logs are captured
        with self.assertLogs(self.std_logger, level="DEBUG") as cm:
            await logger.git_status("AUTO-COMMIT", "/repo", "before commit for T-1")

        self.mock_run_process.assert_awaited_once()
        warnings = [r for r in cm.records if r.levelno == logging.WARNING]
        self.assertEqual(len(warnings), 1)
        self.assertIn("snapshot (before commit for T-1) failed: boom", warnings[0].getMessage())

    async def test_snapshot_skipped_when_disabled(self):
        logger = GitDebugLogger(self.std_logger, snapshots=False)
        await logger.git_status("AUTO-COMMIT", "/repo", "before commit for T-1")
        self.mock_run_process.assert_not_called()

    async def test_snapshot_skipped_when_debug_is_off(self):
        self.std_logger.setLevel(logging.INFO)
        logger = GitDebugLogger(self.std_logger, snapshots=True)
        await logger.git_status("AUTO-COMMIT", "/repo", "before commit for T-1")
        self.mock_run_process.assert_not_called()

    def test_snapshot_setting_defaults_to_config(self):
        with patch(
            "autocommit.debug_log.get_git_status_snapshots", return_value=False
        ) as mock_setting:
            logger = GitDebugLogger(self.std_logger)
            self.assertFalse(logger.snapshots_enabled)
            self.assertFalse(logger.snapshots_enabled)
        mock_setting.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
