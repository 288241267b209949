#!/usr/bin/env python3

import asyncio
import json
import logging
import os
import sys

import click

from .auto_commit import Failed, perform_auto_commit
from .common import normalize_file_path
from .git_status import GitStatusError, has_uncommitted_changes
from .mcp import mcp
from .structured_logger import StructuredLogger
from .tools.auto_commit import auto_commit  # noqa: F401
from .tools.has_changes import has_changes  # noqa: F401


def configure_logging(log_file: str = "autocommit.log", console: bool = True) -> None:
    """Configure logging to write to a file and, optionally, the console.

    The log level is determined from the configuration file.
    It can be overridden by setting the AUTOCOMMIT_DEBUG_LEVEL environment variable,
    and AUTOCOMMIT_DEBUG=1 forces DEBUG.

    The log directory is read from the configuration file's logger.path setting.
    By default, logs are written to $HOME/.autocommit.

    By default, logs from the 'mcp' module are filtered out unless in debug mode.
    """
    from .config import get_logger_path, get_logger_verbosity

    log_dir = get_logger_path()
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_file)

    log_level_str = os.environ.get("AUTOCOMMIT_DEBUG_LEVEL") or get_logger_verbosity()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    # Unknown names fall back to INFO
    log_level = log_level_map.get(log_level_str.upper(), logging.INFO)

    debug_mode = False
    if os.environ.get("AUTOCOMMIT_DEBUG"):
        log_level = logging.DEBUG
        debug_mode = True

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    class ModuleFilter(logging.Filter):
        def filter(self, record: logging.LogRecord) -> bool:
            return debug_mode or not record.name.startswith("mcp")

    module_filter = ModuleFilter()

    handlers: list[logging.Handler] = [logging.FileHandler(log_path)]
    if console:
        # stdout belongs to the MCP stdio transport and to command output
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        handler.addFilter(module_filter)
        root_logger.addHandler(handler)

    logging.info(f"Logging configured. Log file: {log_path}")
    logging.info(f"Log level set to: {logging.getLevelName(log_level)}")
    if not debug_mode:
        logging.info("Logs from 'mcp' module are being filtered")


def _resolve_directory(path: str) -> str:
    full_path = normalize_file_path(path)
    if not os.path.exists(full_path):
        raise click.BadParameter(f"Path {path} does not exist", param_hint="--path")
    if not os.path.isdir(full_path):
        raise click.BadParameter(f"Path {path} is not a directory", param_hint="--path")
    return full_path


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """autocommit: commit the work of finished tasks, from the shell or over MCP."""
    # No subcommand runs the MCP server
    if ctx.invoked_subcommand is None:
        run()


@cli.command()
@click.argument("task_id", type=str)
@click.argument("task_title", type=str)
@click.option("--path", type=click.Path(), default=".", help="Git working tree")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def commit(task_id: str, task_title: str, path: str, as_json: bool) -> None:
    """Stage all changes and commit them as "feat: TASK_ID - TASK_TITLE".

    Exits with status 1 if a git step failed.  A clean working tree is not
    an error.
    """
    from .config import get_show_timestamp

    full_path = _resolve_directory(path)
    configure_logging(console=False)

    result = asyncio.run(perform_auto_commit(full_path, task_id, task_title))

    if as_json:
        click.echo(json.dumps(result.to_dict()))
    else:
        logger = StructuredLogger(show_timestamp=get_show_timestamp())
        logger.auto_commit(task_id, result)

    if isinstance(result, Failed):
        sys.exit(1)


@cli.command()
@click.option("--path", type=click.Path(), default=".", help="Git working tree")
def status(path: str) -> None:
    """Print "dirty" if the working tree has uncommitted changes, else "clean"."""
    full_path = _resolve_directory(path)
    try:
        dirty = asyncio.run(has_uncommitted_changes(full_path))
    except GitStatusError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("dirty" if dirty else "clean")


def run() -> None:
    """Run the MCP server."""
    configure_logging()

    import signal

    def handle_exit(sig, frame):
        logging.info("Received shutdown signal - exiting immediately")
        os._exit(0)

    signal.signal(signal.SIGINT, handle_exit)
    signal.signal(signal.SIGTERM, handle_exit)

    mcp.run()
