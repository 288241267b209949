#!/usr/bin/env python3

"""Unit tests for has_uncommitted_changes."""

import unittest
from unittest.mock import AsyncMock, patch

from expecttest import TestCase

from autocommit.git_status import GitStatusError, has_uncommitted_changes
from autocommit.testing import failed, ok


class HasUncommittedChangesTest(TestCase, unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.run_process_patch = patch(
            "autocommit.git_status.run_process", new_callable=AsyncMock
        )
        self.mock_run_process = self.run_process_patch.start()
        self.addCleanup(self.run_process_patch.stop)

    async def test_runs_porcelain_status_in_cwd(self):
        self.mock_run_process.return_value = ok("")

        await has_uncommitted_changes("/work/tree")

        self.mock_run_process.assert_awaited_once_with(
            "git", ["status", "--porcelain"], cwd="/work/tree"
        )

    async def test_clean_tree(self):
        self.mock_run_process.return_value = ok("")
        self.assertFalse(await has_uncommitted_changes("/repo"))

    async def test_whitespace_only_output_is_clean(self):
        self.mock_run_process.return_value = ok("\n  \n")
        self.assertFalse(await has_uncommitted_changes("/repo"))

    async def test_untracked_file_is_a_change(self):
        self.mock_run_process.return_value = ok("?? new.txt\n")
        self.assertTrue(await has_uncommitted_changes("/repo"))

    async def test_failure_embeds_stderr(self):
        self.mock_run_process.return_value = failed(
            "fatal: not a git repository\n", exit_code=128
        )

        with self.assertRaises(GitStatusError) as cm:
            await has_uncommitted_changes("/tmp")

        self.assertExpectedInline(
            str(cm.exception), """git status failed: fatal: not a git repository"""
        )
        self.assertEqual(cm.exception.exit_code, 128)
        self.assertEqual(cm.exception.stderr, "fatal: not a git repository\n")

    async def test_failure_without_stderr_falls_back_to_exit_code(self):
        self.mock_run_process.return_value = failed("   ", exit_code=127)

        with self.assertRaises(GitStatusError) as cm:
            await has_uncommitted_changes("/repo")

        self.assertExpectedInline(
            str(cm.exception), """git status failed: unknown error (exit code 127)"""
        )

    async def test_error_is_a_runtime_error(self):
        self.mock_run_process.return_value = failed("boom")

        with self.assertRaises(RuntimeError):
            await has_uncommitted_changes("/repo")


if __name__ == "__main__":
    unittest.main()
