#!/usr/bin/env python3

import asyncio
import os
import subprocess
import tempfile
import unittest
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from unittest import mock

from expecttest import TestCase

from .shell import ProcessResult

__all__ = [
    "RecordingLogger",
    "GitRepositoryTestCase",
    "ok",
    "failed",
]


def ok(stdout: str = "") -> ProcessResult:
    """A successful ProcessResult, for stubbing run_process."""
    return ProcessResult(success=True, exit_code=0, stdout=stdout, stderr="")


def failed(stderr: str = "", exit_code: int = 1, stdout: str = "") -> ProcessResult:
    """A failed ProcessResult, for stubbing run_process."""
    return ProcessResult(success=False, exit_code=exit_code, stdout=stdout, stderr=stderr)


@dataclass
class RecordingLogger:
    """DiagnosticLogger that keeps everything it is told, in order."""

    events: List[Tuple[str, str, Dict[str, Any]]] = field(default_factory=list)
    snapshots: List[Tuple[str, str, str]] = field(default_factory=list)

    def event(
        self, category: str, message: str, data: Optional[Mapping[str, Any]] = None
    ) -> None:
        self.events.append((category, message, dict(data or {})))

    async def git_status(self, category: str, cwd: str, context: str) -> None:
        self.snapshots.append((category, cwd, context))

    @property
    def messages(self) -> List[str]:
        return [message for _, message, _ in self.events]


class GitRepositoryTestCase(TestCase, unittest.IsolatedAsyncioTestCase):
    """Base class for tests that need a real git repository.

    Each test gets a fresh repository in a temporary directory with one
    commit, and a deterministic git environment that run_command also uses.
    """

    async def asyncSetUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.testing_time = "1112911993"  # Fixed timestamp for git

        self.env = os.environ.copy()
        # Set environment variables for reproducible git behavior
        self.env.setdefault("GIT_TERMINAL_PROMPT", "0")
        self.env.setdefault("EDITOR", ":")
        self.env.setdefault("GIT_MERGE_AUTOEDIT", "no")
        self.env.setdefault("LANG", "C")
        self.env.setdefault("LC_ALL", "C")
        self.env.setdefault("PAGER", "cat")
        self.env.setdefault("TZ", "UTC")
        self.env.setdefault("TERM", "dumb")
        # For deterministic commit times
        self.env.setdefault("GIT_AUTHOR_EMAIL", "author@example.com")
        self.env.setdefault("GIT_AUTHOR_NAME", "A U Thor")
        self.env.setdefault("GIT_COMMITTER_EMAIL", "committer@example.com")
        self.env.setdefault("GIT_COMMITTER_NAME", "C O Mitter")
        self.env.setdefault("GIT_COMMITTER_DATE", f"{self.testing_time} -0700")
        self.env.setdefault("GIT_AUTHOR_DATE", f"{self.testing_time} -0700")
        # Keep the user's global config (signing, hooks) out of the tests
        self.env["GIT_CONFIG_GLOBAL"] = os.devnull
        self.env["GIT_CONFIG_NOSYSTEM"] = "1"

        self.env_patcher = mock.patch(
            "autocommit.shell.get_subprocess_env", return_value=self.env
        )
        self.env_patcher.start()

        await self.setup_repository()

    async def asyncTearDown(self):
        self.env_patcher.stop()
        self.temp_dir.cleanup()

    async def setup_repository(self):
        """Initialize a git repository with a README and an initial commit.

        Subclasses can override this to customize the repository setup.
        """
        try:
            await self.git_run(["init", "-b", "main"])
        except subprocess.CalledProcessError:
            self.fail(
                "git version is too old for tests! Please install a newer version of git."
            )
        await self.git_run(["config", "user.email", "test@example.com"])
        await self.git_run(["config", "user.name", "Test User"])

        self.write_file("README.md", "# Test Repository\n")
        await self.git_run(["add", "README.md"])
        await self.git_run(["commit", "-m", "Initial commit"])

    def write_file(self, name: str, content: str) -> str:
        """Write content to name inside the repository and return its path."""
        path = os.path.join(self.temp_dir.name, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        return path

    async def git_run(
        self,
        args: List[str],
        check: bool = True,
        capture_output: bool = False,
        text: bool = False,
        **kwargs: Any,
    ) -> Union[subprocess.CompletedProcess[bytes], str]:
        """Run git in the test repository with the test environment.

        Args:
            args: List of git command arguments (without 'git' prefix)
            check: If True, raises if the command returns a non-zero exit code
            capture_output: If True, captures stdout and stderr
            text: If True, decodes stdout and stderr using the preferred encoding
            **kwargs: Additional keyword arguments to pass to the subprocess

        Returns:
            If capture_output is False: subprocess.CompletedProcess instance
            If capture_output is True and text is True: The stripped stdout

        Example:
            log_output = await self.git_run(["log", "--oneline"], capture_output=True, text=True)
        """
        cmd = ["git"] + args

        kwargs.setdefault("cwd", self.temp_dir.name)
        kwargs.setdefault("env", self.env)

        if capture_output:
            kwargs.setdefault("stdout", subprocess.PIPE)
            kwargs.setdefault("stderr", subprocess.PIPE)

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            **kwargs,
        )

        stdout, stderr = await proc.communicate()

        result = subprocess.CompletedProcess[bytes](
            args=cmd,
            returncode=proc.returncode or 0,
            stdout=stdout,
            stderr=stderr,
        )

        if check and proc.returncode and proc.returncode != 0:
            cmd_str = " ".join(cmd)
            raise subprocess.CalledProcessError(
                proc.returncode, cmd_str, output=stdout, stderr=stderr
            )

        if capture_output and text:
            return stdout.decode().strip() if stdout else ""
        return result
