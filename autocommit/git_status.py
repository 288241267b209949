#!/usr/bin/env python3

import logging

from .shell import run_process

__all__ = [
    "GitStatusError",
    "has_uncommitted_changes",
]

log = logging.getLogger(__name__)


class GitStatusError(RuntimeError):
    """Raised when git cannot report the state of a working tree."""

    def __init__(self, message: str, exit_code: int, stderr: str) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


async def has_uncommitted_changes(cwd: str) -> bool:
    """Check whether the working tree at cwd has uncommitted changes.

    Untracked files count as changes, as does anything staged but not yet
    committed.

    Args:
        cwd: The working directory to inspect

    Returns:
        True if `git status --porcelain` reports anything, False otherwise

    Raises:
        GitStatusError: If the status cannot be determined (not a git
            repository, git not installed, ...)
    """
    result = await run_process("git", ["status", "--porcelain"], cwd=cwd)
    if not result.success:
        detail = result.stderr.strip() or f"unknown error (exit code {result.exit_code})"
        raise GitStatusError(
            f"git status failed: {detail}",
            exit_code=result.exit_code,
            stderr=result.stderr,
        )

    has_changes = bool(result.stdout.strip())
    log.debug("has_uncommitted_changes(%s) = %s", cwd, has_changes)
    return has_changes
