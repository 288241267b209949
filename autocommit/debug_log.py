#!/usr/bin/env python3

"""Diagnostic side channel for git operations.

Events are written to the ``autocommit.debug`` logger at DEBUG level so they
end up in the regular log file when debugging is enabled.  Status snapshots
shell out to git, so they are only taken when that logger would actually
record them.
"""

import json
import logging
from typing import Any, Mapping, Optional, Protocol

from .config import get_git_status_snapshots
from .shell import run_process

__all__ = [
    "DiagnosticLogger",
    "GitDebugLogger",
    "format_event",
]

log = logging.getLogger("autocommit.debug")


class DiagnosticLogger(Protocol):
    """What the commit orchestrator needs from a logger."""

    def event(
        self, category: str, message: str, data: Optional[Mapping[str, Any]] = None
    ) -> None: ...

    async def git_status(self, category: str, cwd: str, context: str) -> None: ...


def format_event(
    category: str, message: str, data: Optional[Mapping[str, Any]] = None
) -> str:
    """Render an event as ``[CATEGORY] message {"key": value, ...}``."""
    line = f"[{category}] {message}"
    if data:
        line += " " + json.dumps(dict(data), default=str, sort_keys=True)
    return line


class GitDebugLogger:
    """DiagnosticLogger backed by the standard logging module."""

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        snapshots: Optional[bool] = None,
    ) -> None:
        self.logger = logger or log
        # None means "ask the user config"
        self._snapshots = snapshots

    @property
    def snapshots_enabled(self) -> bool:
        if self._snapshots is None:
            self._snapshots = get_git_status_snapshots()
        return self._snapshots

    def event(
        self, category: str, message: str, data: Optional[Mapping[str, Any]] = None
    ) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(format_event(category, message, data))

    async def git_status(self, category: str, cwd: str, context: str) -> None:
        """Log the branch and porcelain status of cwd, labelled with context.

        Failures are logged as warnings; a snapshot never raises.
        """
        if not self.logger.isEnabledFor(logging.DEBUG) or not self.snapshots_enabled:
            return

        try:
            branch = await run_process(
                "git", ["rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd
            )
            status = await run_process("git", ["status", "--porcelain"], cwd=cwd)
        except Exception as e:
            self.logger.warning(f"[{category}] git status snapshot ({context}) failed: {e}")
            return

        if not status.success:
            self.event(
                category,
                f"git status ({context}) unavailable",
                {"cwd": cwd, "exitCode": status.exit_code, "stderr": status.stderr.strip()},
            )
            return

        lines = [line for line in status.stdout.splitlines() if line.strip()]
        self.event(
            category,
            f"git status ({context})",
            {
                "cwd": cwd,
                "branch": branch.stdout.strip() if branch.success else None,
                "clean": not lines,
                "changes": lines,
            },
        )
