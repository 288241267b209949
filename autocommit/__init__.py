#!/usr/bin/env python3

from .auto_commit import (
    AutoCommitResult,
    Committed,
    Failed,
    Skipped,
    format_commit_message,
    perform_auto_commit,
)
from .debug_log import DiagnosticLogger, GitDebugLogger
from .git_status import GitStatusError, has_uncommitted_changes
from .main import cli, configure_logging, run
from .mcp import mcp
from .shell import ProcessResult, get_subprocess_env, run_command, run_process
from .structured_logger import StructuredLogger

__all__ = [
    "AutoCommitResult",
    "Committed",
    "Skipped",
    "Failed",
    "format_commit_message",
    "perform_auto_commit",
    "DiagnosticLogger",
    "GitDebugLogger",
    "GitStatusError",
    "has_uncommitted_changes",
    "StructuredLogger",
    "configure_logging",
    "run",
    "mcp",
    "ProcessResult",
    "run_command",
    "run_process",
    "get_subprocess_env",
    "cli",
]
