"""Shared utilities for CLI commands."""

from __future__ import annotations

import json
import sys
import traceback
from pathlib import Path
from typing import TYPE_CHECKING

from motordef_tools.exceptions import InvalidArgumentError, MotorDefToolsError
from motordef_tools.schema.motor import ServoMotor

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["format_error", "print_error", "get_error_console", "load_motor_file"]

# Module-level console for error output, created lazily
_error_console: Console | None = None


def get_error_console() -> Console:
    """Get or create the Rich console for error output.

    Returns a console configured for stderr with appropriate settings.
    The console is created lazily and cached for reuse.
    """
    global _error_console
    if _error_console is None:
        from rich.console import Console

        _error_console = Console(stderr=True, force_terminal=None)
    return _error_console


def print_error(
    e: Exception,
    verbose: bool = False,
    use_rich: bool | None = None,
) -> None:
    """
    Print an exception with Rich formatting when available.

    Uses the Rich console on TTY terminals and plain text otherwise
    (pipes, captured output).

    Args:
        e: The exception to print
        verbose: If True, include full stack trace
        use_rich: Override automatic TTY detection (None = auto-detect)
    """
    console = get_error_console()

    if use_rich is None:
        use_rich = console.is_terminal

    if verbose:
        # Always use plain text for stack traces
        print(traceback.format_exc(), file=sys.stderr)
        return

    if use_rich and isinstance(e, MotorDefToolsError):
        from rich.markup import escape

        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
    else:
        print(format_error(e, verbose=False), file=sys.stderr)


def format_error(e: Exception, verbose: bool = False) -> str:
    """
    Format an exception for user-friendly display (plain text).

    Args:
        e: The exception to format
        verbose: If True, include full stack trace

    Returns:
        Formatted error message string
    """
    if verbose:
        return traceback.format_exc()

    if isinstance(e, MotorDefToolsError):
        return f"Error: {e}"

    # For other exceptions, show type and message
    return f"Error: {type(e).__name__}: {e}"


def load_motor_file(path: str | Path) -> ServoMotor:
    """Load a motor definition JSON file for a command.

    Raises:
        InvalidArgumentError: If the file is missing or is not a motor document
    """
    motor_path = Path(path)
    if not motor_path.exists():
        raise InvalidArgumentError(f"File not found: {motor_path}", argument="file")

    try:
        return ServoMotor.load(motor_path)
    except json.JSONDecodeError as e:
        raise InvalidArgumentError(
            f"Invalid JSON in {motor_path}: {e}",
            argument="file",
            suggestions=["Pass a motor definition saved as JSON"],
        ) from e
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidArgumentError(
            f"Not a motor definition: {motor_path}",
            argument="file",
            context={"reason": str(e)},
        ) from e
