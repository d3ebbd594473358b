"""The gitconductor command-line interface."""

from ._app import app, create_app, main
from ._commands._context import CLIContext

__all__ = ["CLIContext", "app", "create_app", "main"]
