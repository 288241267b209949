#!/usr/bin/env python3

from .auto_commit import auto_commit
from .has_changes import has_changes

__all__ = [
    "auto_commit",
    "has_changes",
]
