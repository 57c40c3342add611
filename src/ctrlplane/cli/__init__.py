"""Utilities used by the ctrlplane CLI."""

from ._app import app, create_app, main
from ._shared import ExitCode, exit_with_error, get_error_console

__all__ = [
    "ExitCode",
    "app",
    "create_app",
    "exit_with_error",
    "get_error_console",
    "main",
]
