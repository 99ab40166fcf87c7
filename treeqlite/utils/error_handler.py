"""Centralized error handler for TreeQLite commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from treeqlite.utils.logging import get_request_id, logger

from .constants import CONFIG_DIR, ERROR_LOG_FILE


def describe_error(error: BaseException) -> str:
    """Render an error and its cause chain as ``Type: message`` lines."""
    lines = []
    current: BaseException | None = error
    while current is not None:
        prefix = "" if current is error else "Caused by "
        lines.append(f"{prefix}{type(current).__name__}: {current}")
        current = current.__cause__
    return "\n".join(lines)


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs a failed command and turns it into a ClickException."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            CONFIG_DIR.mkdir(parents=True, exist_ok=True)

            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )

            with open(ERROR_LOG_FILE, "a", encoding="utf-8") as f:
                f.write("\n" + "=" * 80 + "\n")
                f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                f.write(f"Request ID: {get_request_id()}\n")
                f.write("=" * 80 + "\n")
                f.write(traceback.format_exc())
                f.write("=" * 80 + "\n\n")

            user_message = (
                f"{describe_error(e)}\n\n"
                f"Full traceback logged to: {ERROR_LOG_FILE} (request {get_request_id()})"
            )

            raise click.ClickException(user_message) from e

    return wrapper
