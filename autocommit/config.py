"""Configuration module for autocommit.

This module provides access to user configuration stored in one of these locations:
1. $AUTOCOMMIT_CONFIG_DIR/autocommitrc if $AUTOCOMMIT_CONFIG_DIR is defined
2. $XDG_CONFIG_HOME/autocommit/autocommitrc if $XDG_CONFIG_HOME is defined
3. $HOME/.autocommitrc

The configuration is stored in TOML format.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import tomli

__all__ = [
    "get_config_path",
    "load_config",
    "get_logger_verbosity",
    "get_logger_path",
    "get_show_timestamp",
    "get_git_status_snapshots",
]

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "logger": {
        "verbosity": "INFO",  # Default logging level
        "path": str(Path.home() / ".autocommit"),  # Default logger path
        "show_timestamp": True,  # Prefix progress lines with a timestamp
    },
    "debug": {
        "git_status_snapshots": True,  # Log `git status` before/after commits
    },
}


def get_config_path() -> Path:
    """Return the path to the user's config file.

    Checks the following locations in order:
    1. $AUTOCOMMIT_CONFIG_DIR/autocommitrc if $AUTOCOMMIT_CONFIG_DIR is defined
    2. $XDG_CONFIG_HOME/autocommit/autocommitrc if $XDG_CONFIG_HOME is defined
    3. Fallback to $HOME/.autocommitrc

    Returns:
        Path to the config file
    """
    if "AUTOCOMMIT_CONFIG_DIR" in os.environ:
        path = Path(os.environ["AUTOCOMMIT_CONFIG_DIR"]) / "autocommitrc"
        if path.exists():
            return path

    if "XDG_CONFIG_HOME" in os.environ:
        path = Path(os.environ["XDG_CONFIG_HOME"]) / "autocommit" / "autocommitrc"
        if path.exists():
            return path

    return Path.home() / ".autocommitrc"


def load_config() -> dict[str, Any]:
    """Load configuration from the config file.

    Returns:
        Dict containing the merged configuration (defaults + user config).
        A config file that cannot be parsed is reported and ignored.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                user_config = tomli.load(f)

            _merge_configs(config, user_config)
        except (OSError, tomli.TOMLDecodeError) as e:
            logging.warning(f"Error loading config from {config_path}: {e}")

    return config


def _merge_configs(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Recursively merge override dict into base dict.

    Args:
        base: The base configuration dictionary to merge into.
        override: The override configuration dictionary to merge from.

    """
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            nested_value: dict[str, Any] = value
            _merge_configs(base[key], nested_value)
        else:
            base[key] = value


def get_logger_verbosity() -> str:
    """Get the configured logger verbosity level.

    Returns:
        String representing the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    """
    config = load_config()
    return config["logger"]["verbosity"]


def get_logger_path() -> str:
    """Get the configured logger path, with ``~`` expanded."""
    config = load_config()
    return os.path.expanduser(config["logger"]["path"])


def get_show_timestamp() -> bool:
    config = load_config()
    return bool(config["logger"]["show_timestamp"])


def get_git_status_snapshots() -> bool:
    """Whether the debug logger should record `git status` snapshots."""
    config = load_config()
    return bool(config["debug"]["git_status_snapshots"])
