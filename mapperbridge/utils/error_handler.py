"""Centralized error handler for mapperbridge commands.

Unexpected failures are logged with their traceback to
``<root>/.mapperbridge/error.log``, where ``root`` is the command's
``--root`` option, and surface to the user as a one-line ClickException.
"""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any

import click

from mapperbridge.utils.logging import logger

from .constants import ERROR_LOG_NAME, state_dir

_RULE = "=" * 80


def _write_error_log(log_file: Path, command: str, error: Exception) -> None:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(f"\n{_RULE}\n")
        f.write(f"[{datetime.now().isoformat()}] Error in command: {command}\n")
        f.write(f"{_RULE}\n")
        f.write(f"{type(error).__name__}: {error}\n\n")
        f.write(traceback.format_exc())
        f.write(f"{_RULE}\n\n")


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Turn unexpected exceptions from a command into a logged ClickException.

    Click's own exceptions pass through untouched so usage errors and
    explicit exits keep their exit codes.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except Exception as e:
            command = func.__name__
            log_file = state_dir(kwargs.get("root")) / ERROR_LOG_NAME

            logger.opt(exception=True).error("Command '{cmd}' failed: {err}", cmd=command, err=str(e))
            try:
                _write_error_log(log_file, command, e)
            except OSError as log_error:
                logger.warning("Could not write error log {}: {}", log_file, log_error)
                location = "error log unavailable"
            else:
                location = f"Full traceback logged to: {log_file}"

            raise click.ClickException(f"{type(e).__name__}: {e}\n\n{location}") from e

    return wrapper
