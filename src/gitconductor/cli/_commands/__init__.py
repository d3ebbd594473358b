"""gitconductor CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._config import app as config_app
from ._conflicts import app as conflicts_app
from ._context import CLIContext, OutputFormat
from ._patch import app as patch_app
from ._pull import app as pull_app
from ._rebase import app as rebase_app
from ._shared import (
    ExitCode,
    FormattableData,
    exit_with_error,
    exit_with_success,
    format_json,
    format_table,
    format_yaml,
    get_error_console,
)
from ._status import app as status_app
from ._trust import app as trust_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "config_app",
    "conflicts_app",
    "exit_with_error",
    "exit_with_success",
    "format_json",
    "format_table",
    "format_yaml",
    "get_error_console",
    "patch_app",
    "pull_app",
    "rebase_app",
    "status_app",
    "trust_app",
]


def register_commands(app: "App") -> None:
    app.command(status_app)
    app.command(conflicts_app)
    app.command(rebase_app)
    app.command(patch_app)
    app.command(pull_app)
    app.command(trust_app)
    app.command(config_app)
