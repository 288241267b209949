#!/usr/bin/env python3

"""Human readable progress lines for task runs.

Lines look like ``[12:00:01] [INFO] [progress] Iteration 2/10: ...``.  The
timestamp prefix can be switched off, which tests rely on.
"""

import sys
from datetime import datetime
from typing import Optional, TextIO

from .auto_commit import AutoCommitResult, Committed, Skipped

__all__ = ["StructuredLogger"]


class StructuredLogger:
    def __init__(
        self,
        show_timestamp: bool = True,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
        debug: bool = False,
    ) -> None:
        self.show_timestamp = show_timestamp
        self.stream = stream if stream is not None else sys.stdout
        self.error_stream = error_stream if error_stream is not None else sys.stderr
        self.debug_enabled = debug

    def _write(self, level: str, category: str, message: str) -> None:
        prefix = ""
        if self.show_timestamp:
            prefix = f"[{datetime.now().strftime('%H:%M:%S')}] "
        target = self.error_stream if level in ("ERROR", "WARN") else self.stream
        target.write(f"{prefix}[{level}] [{category}] {message}\n")
        target.flush()

    def info(self, category: str, message: str) -> None:
        self._write("INFO", category, message)

    def warn(self, category: str, message: str) -> None:
        self._write("WARN", category, message)

    def error(self, category: str, message: str) -> None:
        self._write("ERROR", category, message)

    def debug(self, category: str, message: str) -> None:
        if self.debug_enabled:
            self._write("DEBUG", category, message)

    def progress(
        self,
        iteration: int,
        max_iterations: int,
        task_id: str,
        task_title: str,
        agent: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        """Report which task an iteration is working on.

        A max_iterations of 0 means the run is unbounded and is shown as ``∞``.
        The routing suffix is only added when an agent or model is known.
        """
        limit = str(max_iterations) if max_iterations > 0 else "∞"
        message = f"Iteration {iteration}/{limit}: Working on {task_id} - {task_title}"
        if agent or model:
            message += f" (agent: {agent or 'default'}, model: {model or 'default'})"
        self.info("progress", message)

    def auto_commit(self, task_id: str, result: AutoCommitResult) -> None:
        if isinstance(result, Committed):
            if result.commit_sha:
                self.info("git", f"Committed {result.commit_sha}: {result.commit_message}")
            else:
                self.info("git", f"Committed: {result.commit_message}")
        elif isinstance(result, Skipped):
            self.info("git", f"Skipped auto-commit for {task_id}: {result.skip_reason}")
        else:
            self.error("git", f"Auto-commit failed for {task_id}: {result.error}")
