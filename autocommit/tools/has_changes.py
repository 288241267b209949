#!/usr/bin/env python3

from ..common import normalize_file_path
from ..git_status import has_uncommitted_changes
from ..mcp import mcp

__all__ = [
    "has_changes",
]


@mcp.tool()
async def has_changes(path: str) -> bool:
    """Report whether a git working tree has uncommitted changes.

    Args:
        path: The git working tree to inspect

    Returns:
        True if `git status --porcelain` lists anything
    """
    return await has_uncommitted_changes(normalize_file_path(path))
