# pyright: reportExplicitAny=false, reportAny=false
"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and their mapping from gitconductor exceptions
- Generic output formatters (JSON, YAML, table)
- Console utilities for error handling
- Construction of the Conductor from the active CLI context
"""

import dataclasses
from contextlib import contextmanager
from enum import Enum, IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Never

from cyclopts import Parameter

from gitconductor.conductor import Conductor
from gitconductor.exceptions import (
    BinaryContentError,
    ConfigError,
    GitCommandError,
    GitConductorError,
    GitNotFoundError,
    NoOperationInProgressError,
    NotAWorkingCopyError,
    OperationInProgressError,
    RenameTargetNotFoundError,
    RewordMapError,
    ValidationError,
)

from ._context import CLIContext, OutputFormat

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

# Type alias for formattable data - uses Any to match library signatures
FormattableData = dict[str, Any]

RepoArgument = Annotated[
    Path,
    Parameter(help="Repository working tree root (defaults to the current directory)"),
]
FormatOption = Annotated[
    OutputFormat,
    Parameter(name=["--format", "-f"], help="Output format (text, json, yaml, table)"),
]

__all__ = [
    "ExitCode",
    "FormatOption",
    "FormattableData",
    "RepoArgument",
    "exit_code_for",
    "exit_with_error",
    "exit_with_success",
    "format_json",
    "format_table",
    "format_yaml",
    "get_error_console",
    "handle_errors",
    "open_conductor",
    "render",
    "repo_root",
    "to_plain",
]


class ExitCode(IntEnum):
    """Standard exit codes for gitconductor CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CONFLICTS = 6


_EXIT_CODES: tuple[tuple[type[GitConductorError], ExitCode], ...] = (
    (ValidationError, ExitCode.VALIDATION_ERROR),
    (OperationInProgressError, ExitCode.VALIDATION_ERROR),
    (NoOperationInProgressError, ExitCode.VALIDATION_ERROR),
    (BinaryContentError, ExitCode.VALIDATION_ERROR),
    (NotAWorkingCopyError, ExitCode.NOT_FOUND),
    (RenameTargetNotFoundError, ExitCode.NOT_FOUND),
    (GitNotFoundError, ExitCode.NOT_FOUND),
    (RewordMapError, ExitCode.IO_ERROR),
    (ConfigError, ExitCode.LOAD_ERROR),
    (GitCommandError, ExitCode.INTERNAL_ERROR),
)


def exit_code_for(error: GitConductorError) -> ExitCode:
    """Map a gitconductor exception to the exit code a command reports.

    Examples:
        >>> exit_code_for(ValidationError("path is required.", field="path"))
        <ExitCode.VALIDATION_ERROR: 2>
    """
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.INTERNAL_ERROR


# =============================================================================
# Formatting
# =============================================================================


def to_plain(value: Any) -> Any:
    """Convert result models into JSON and YAML friendly builtins.

    Dataclasses become dicts, enums their values, tuples lists, and
    frozensets sorted lists.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: to_plain(getattr(value, item.name))
            for item in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {str(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, frozenset | set):
        return sorted(to_plain(item) for item in value)
    if isinstance(value, list | tuple):
        return [to_plain(item) for item in value]
    if isinstance(value, Path):
        return str(value)
    return value


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary to format as JSON.
        indent: Whether to pretty-print with indentation.

    Returns:
        JSON-formatted string representation.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode("utf-8")


def format_yaml(data: FormattableData) -> str:
    """Format data as YAML.

    Args:
        data: Dictionary to format as YAML.

    Returns:
        YAML-formatted string representation.
    """
    import yaml

    return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True)


def format_table(headers: list[str], rows: list[list[str]]) -> str:
    """Format data as a Markdown table.

    Args:
        headers: Column headers for the table.
        rows: List of rows, where each row is a list of cell values.

    Returns:
        Markdown table string representation.
    """
    from pytablewriter import MarkdownTableWriter

    writer = MarkdownTableWriter(
        headers=headers,
        value_matrix=rows,
        margin=1,
    )
    return writer.dumps()


def render(
    data: FormattableData,
    output_format: OutputFormat,
    *,
    text: str,
    table: tuple[list[str], list[list[str]]] | None = None,
) -> str:
    """Render a command result in the requested format.

    Args:
        data: Structured result, already converted with ``to_plain``.
        output_format: Requested format.
        text: Human-readable rendering used for ``text``, and for ``table``
            when the command has no tabular view.
        table: Headers and rows for the ``table`` format.

    Returns:
        The rendered output without a trailing newline.
    """
    match output_format:
        case OutputFormat.JSON:
            return format_json(data)
        case OutputFormat.YAML:
            return format_yaml(data).rstrip()
        case OutputFormat.TABLE if table is not None:
            headers, rows = table
            return format_table(headers, rows).rstrip()
        case _:
            return text


# =============================================================================
# Console and exit helpers
# =============================================================================


def get_error_console() -> "Console":
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {message}", markup=True, highlight=False)
    raise SystemExit(code)


def exit_with_success(
    message: str | None = None,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an optional success message and exit with SUCCESS code.

    Args:
        message: Optional success message to display.
        console: Optional Rich console for output. If not provided and a message
            is given, a new stderr console will be created.

    Raises:
        SystemExit: Always raised with ExitCode.SUCCESS (0).
    """
    if message is not None:
        if console is None:
            console = get_error_console()
        console.print(message)
    raise SystemExit(ExitCode.SUCCESS)


@contextmanager
def handle_errors() -> "Iterator[None]":
    """Turn gitconductor exceptions into an error message and exit code.

    Failures are also logged to the CLI logger, when one is configured.

    Raises:
        SystemExit: When the wrapped block raises a GitConductorError.
    """
    try:
        yield
    except GitConductorError as e:
        code = exit_code_for(e)
        logger = CLIContext.get_current().logger
        if logger is not None:
            logger.warning(
                "command_failed",
                error=type(e).__name__,
                message=str(e),
                exit_code=int(code),
            )
        exit_with_error(str(e), code)


# =============================================================================
# Conductor access
# =============================================================================


def repo_root(repo: Path) -> str:
    """Resolve a repository argument to the absolute path git reports."""
    return str(repo.expanduser().resolve())


@contextmanager
def open_conductor() -> "Iterator[Conductor]":
    """Yield a Conductor built from the active CLI context's config and logger."""
    ctx = CLIContext.get_current()
    with Conductor(config=ctx.config, logger=ctx.logger) as conductor:
        yield conductor
