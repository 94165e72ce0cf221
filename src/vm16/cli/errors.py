"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes across all CLI tools.

Assembly errors are printed as a delimited block naming the file and
line, so they stand out in build logs:

    ****
    FILE: prog.asm
    LINE # 2
    Malformed integer: '0x12'
    hint: write hexadecimal as '$12'
    ****
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from vm16.errors import AssemblerError, Vm16Error


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Assembly error
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


ERROR_DELIMITER = "****"


def format_error_block(error: AssemblerError) -> str:
    """Format an assembly error as a delimited block for stderr."""
    lines = ["", ERROR_DELIMITER]
    if error.location is not None:
        lines.append(f"FILE: {error.location.filename}")
        lines.append(f"LINE # {error.location.line}")
    lines.append(error.message)
    if error.hint:
        lines.append(f"hint: {error.hint}")
    lines.append(ERROR_DELIMITER)
    lines.append("")
    return "\n".join(lines)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Unified exception handler for all CLI tools.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for the error message (e.g., "Assembly")

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, AssemblerError):
        click.echo(format_error_block(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, Vm16Error):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, FileNotFoundError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, PermissionError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
