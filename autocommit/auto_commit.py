#!/usr/bin/env python3

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .debug_log import DiagnosticLogger, GitDebugLogger
from .git_status import has_uncommitted_changes
from .shell import run_process

__all__ = [
    "AutoCommitResult",
    "Committed",
    "Skipped",
    "Failed",
    "NO_CHANGES",
    "format_commit_message",
    "perform_auto_commit",
]

log = logging.getLogger(__name__)

CATEGORY = "AUTO-COMMIT"
NO_CHANGES = "no uncommitted changes"


@dataclass(frozen=True)
class Committed:
    """A new commit was created.

    ``commit_sha`` is None when the commit succeeded but its short hash
    could not be resolved afterwards.
    """

    commit_message: str
    commit_sha: Optional[str] = None

    committed = True
    skip_reason = None
    error = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "committed": True,
            "commitMessage": self.commit_message,
        }
        if self.commit_sha is not None:
            result["commitSha"] = self.commit_sha
        return result


@dataclass(frozen=True)
class Skipped:
    """Nothing needed committing."""

    skip_reason: str

    committed = False
    commit_message = None
    commit_sha = None
    error = None

    def to_dict(self) -> dict[str, Any]:
        return {"committed": False, "skipReason": self.skip_reason}


@dataclass(frozen=True)
class Failed:
    """A git step failed; ``error`` says which one and why."""

    error: str

    committed = False
    commit_message = None
    commit_sha = None
    skip_reason = None

    def to_dict(self) -> dict[str, Any]:
        return {"committed": False, "error": self.error}


AutoCommitResult = Union[Committed, Skipped, Failed]


def format_commit_message(task_id: str, task_title: str) -> str:
    """Build the commit message used for every auto-commit."""
    return f"feat: {task_id} - {task_title}"


def _describe_failure(stderr: str) -> str:
    return stderr.strip() or "unknown error"


async def perform_auto_commit(
    cwd: str,
    task_id: str,
    task_title: str,
    logger: Optional[DiagnosticLogger] = None,
) -> AutoCommitResult:
    """Stage everything in cwd and commit it on behalf of a finished task.

    The steps run strictly in order (status, add, commit, rev-parse) and the
    first failing step ends the attempt.  Nothing is rolled back: if the
    commit went through but the hash lookup failed, the commit stays and the
    result is still Committed, just without a hash.

    Failures never raise; inspect the returned result instead.

    Args:
        cwd: The working tree to commit in
        task_id: Identifier of the task that produced the changes, e.g. "US-042"
        task_title: Human readable task title
        logger: Receives diagnostic events and status snapshots; defaults to
            a GitDebugLogger

    Returns:
        Committed, Skipped or Failed
    """
    if logger is None:
        logger = GitDebugLogger()

    logger.event(
        CATEGORY,
        f"performAutoCommit called for {task_id}",
        {"cwd": cwd, "taskId": task_id, "taskTitle": task_title},
    )
    await logger.git_status(CATEGORY, cwd, f"before commit for {task_id}")

    try:
        has_changes = await has_uncommitted_changes(cwd)
    except (RuntimeError, OSError) as e:
        logger.event(
            CATEGORY,
            f"hasUncommittedChanges error for {task_id}",
            {"cwd": cwd, "error": str(e)},
        )
        log.warning("Auto-commit for %s could not read git status: %s", task_id, e)
        return Failed(error=str(e))

    logger.event(
        CATEGORY,
        f"hasUncommittedChanges result for {task_id}",
        {"cwd": cwd, "hasChanges": has_changes},
    )
    if not has_changes:
        logger.event(CATEGORY, f"SKIPPING commit for {task_id} - no changes", {"cwd": cwd})
        return Skipped(skip_reason=NO_CHANGES)

    logger.event(CATEGORY, f"Running git add -A for {task_id}", {"cwd": cwd})
    add_result = await run_process("git", ["add", "-A"], cwd=cwd)
    if not add_result.success:
        logger.event(
            CATEGORY,
            f"git add FAILED for {task_id}",
            {"cwd": cwd, "stderr": add_result.stderr, "exitCode": add_result.exit_code},
        )
        return Failed(error=f"git add failed: {_describe_failure(add_result.stderr)}")

    commit_message = format_commit_message(task_id, task_title)
    logger.event(
        CATEGORY,
        f"Running git commit for {task_id}",
        {"cwd": cwd, "commitMessage": commit_message},
    )
    commit_result = await run_process("git", ["commit", "-m", commit_message], cwd=cwd)
    if not commit_result.success:
        logger.event(
            CATEGORY,
            f"git commit FAILED for {task_id}",
            {
                "cwd": cwd,
                "stderr": commit_result.stderr,
                "stdout": commit_result.stdout,
                "exitCode": commit_result.exit_code,
            },
        )
        return Failed(
            error=f"git commit failed: {_describe_failure(commit_result.stderr)}"
        )

    sha_result = await run_process("git", ["rev-parse", "--short", "HEAD"], cwd=cwd)
    commit_sha = (sha_result.stdout.strip() or None) if sha_result.success else None
    if commit_sha is None:
        log.warning(
            "Committed %s but could not resolve HEAD: %s",
            task_id,
            _describe_failure(sha_result.stderr),
        )

    logger.event(
        CATEGORY,
        f"Commit SUCCESS for {task_id}",
        {"cwd": cwd, "commitSha": commit_sha, "commitMessage": commit_message},
    )
    await logger.git_status(CATEGORY, cwd, f"after commit for {task_id}")

    return Committed(commit_message=commit_message, commit_sha=commit_sha)
