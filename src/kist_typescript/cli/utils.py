"""CLI utility functions and error handling.

Errors go to stderr as plain text with a non-zero exit code, so build
pipelines can branch on the failure class.

Example:
    from kist_typescript.cli.utils import error_exit, ExitCode

    error_exit("Invalid --option value", exit_code=ExitCode.USAGE_ERROR)
"""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TYPE_CHECKING

import click

from kist_typescript.errors import ErrorKind

if TYPE_CHECKING:
    from typing import NoReturn


class ExitCode(IntEnum):
    """Exit codes for kist-tsc."""

    SUCCESS = 0
    """Compilation succeeded."""

    USAGE_ERROR = 2
    """Invalid usage (bad arguments, malformed --option)."""

    FILE_NOT_FOUND = 3
    """tsconfig.json missing, unreadable or unparseable."""

    VALIDATION_ERROR = 5
    """tsconfig.json or an override failed validation."""

    COMPILATION_ERROR = 7
    """The compiler reported diagnostics."""


def exit_code_for(kind: ErrorKind) -> ExitCode:
    """Map an error variant kind to its exit code."""
    codes = {
        ErrorKind.CONFIG_READ: ExitCode.FILE_NOT_FOUND,
        ErrorKind.CONFIG_VALIDATION: ExitCode.VALIDATION_ERROR,
        ErrorKind.INVALID_OVERRIDE: ExitCode.VALIDATION_ERROR,
        ErrorKind.COMPILATION_DIAGNOSTICS: ExitCode.COMPILATION_ERROR,
    }
    return codes[kind]


def error(message: str, **context: str | int | bool | None) -> None:
    """Print an error message to stderr.

    Example:
        error("Compilation failed", diagnostics=2)
        # Output: Error: Compilation failed (diagnostics=2)
    """
    details = ", ".join(f"{key}={value}" for key, value in context.items() if value is not None)
    click.echo(f"Error: {message} ({details})" if details else f"Error: {message}", err=True)


def error_exit(
    message: str,
    exit_code: ExitCode = ExitCode.COMPILATION_ERROR,
    **context: str | int | bool | None,
) -> NoReturn:
    """Print an error message to stderr and exit with a code.

    Raises:
        SystemExit: Always exits with the specified code.
    """
    error(message, **context)
    sys.exit(exit_code)


def info(message: str) -> None:
    """Print an informational message to stderr."""
    click.echo(message, err=True)


class EchoActionLogger:
    """ActionLogger printing host log events to the terminal."""

    def log_info(self, message: str) -> None:
        info(message)

    def log_error(self, message: str) -> None:
        error(message)


__all__ = [
    "EchoActionLogger",
    "ExitCode",
    "error",
    "error_exit",
    "exit_code_for",
    "info",
]
