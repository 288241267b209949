#!/usr/bin/env python3

import logging
import os
from typing import Any

from ..auto_commit import perform_auto_commit
from ..common import normalize_file_path
from ..mcp import mcp

__all__ = [
    "auto_commit",
]


@mcp.tool()
async def auto_commit(path: str, task_id: str, task_title: str) -> dict[str, Any]:
    """Stage and commit every change in a git working tree after a task finished.

    The commit message is always "feat: {task_id} - {task_title}".  Nothing is
    committed when the tree is clean.

    Args:
        path: The git working tree to commit in
        task_id: Identifier of the finished task, e.g. "US-042"
        task_title: Title of the finished task

    Returns:
        A dictionary with "committed" and, depending on the outcome,
        "commitMessage"/"commitSha", "skipReason" or "error"
    """
    full_path = normalize_file_path(path)
    if not os.path.isdir(full_path):
        raise ValueError(f"Path is not a directory: {path}")

    result = await perform_auto_commit(full_path, task_id, task_title)
    logging.info(f"auto_commit({task_id}) -> {result}")
    return result.to_dict()
