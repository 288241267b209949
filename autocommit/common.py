#!/usr/bin/env python3

import os

__all__ = [
    "normalize_file_path",
]


def normalize_file_path(file_path: str) -> str:
    """Normalize a file path to an absolute path.

    Expands the tilde character (~) if present to the user's home directory.
    """
    expanded_path = os.path.expanduser(file_path)

    if not os.path.isabs(expanded_path):
        return os.path.abspath(os.path.join(os.getcwd(), expanded_path))
    return os.path.abspath(expanded_path)
