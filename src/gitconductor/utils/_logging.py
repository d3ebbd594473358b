"""Logging utilities for gitconductor.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to a file. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from ._paths import get_default_log_file

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3


def _log_level_from_string(level: str | None) -> int:
    """Convert a log level string to a logging level integer.

    GITCONDUCTOR_DEBUG overrides everything; GITCONDUCTOR_LOG_LEVEL is used
    when no level is given. Defaults to INFO.
    """
    if getenv("GITCONDUCTOR_DEBUG", None):
        return logging.DEBUG

    effective = level if level is not None else getenv("GITCONDUCTOR_LOG_LEVEL", "info")
    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(effective.upper(), logging.INFO)


def _create_logger(
    log_file_path: str,
    *,
    log_level: int,
    log_format: LogFormatType = "json",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger writing to the specified file.

    Args:
        log_file_path: Path to the log file (opened in append mode).
        log_level: Minimum level that is written.
        log_format: Output format, either "json" or "text".
        max_bytes: Maximum size in bytes before rotation. Must be set with
            backup_count for rotation to be enabled.
        backup_count: Number of rotated log files to keep.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    log_path = Path(log_file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    if max_bytes is not None and backup_count is not None:
        stdlib_logger = logging.getLogger(f"gitconductor.{log_path.stem}.{id(log_path)}")
        stdlib_logger.handlers.clear()
        stdlib_logger.propagate = False
        stdlib_logger.setLevel(log_level)

        handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        stdlib_logger.addHandler(handler)
        raw_logger: object = stdlib_logger
    else:
        raw_logger = structlog.WriteLoggerFactory(file=log_path.open("a"))()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
        ),
    )


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
    rotate: bool = True,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create the logger used by the orchestration core.

    The log level is determined by (in order of precedence):
    1. GITCONDUCTOR_DEBUG environment variable (enables DEBUG)
    2. The `level` parameter
    3. GITCONDUCTOR_LOG_LEVEL environment variable
    4. Default: INFO

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Log file path; empty uses the platform user log directory.
        rotate: Rotate the file at 5 MiB keeping three backups.

    Returns:
        A FilteringBoundLogger instance.
    """
    effective_file = log_file if log_file else str(get_default_log_file())
    return _create_logger(
        effective_file,
        log_level=_log_level_from_string(level),
        log_format=log_format,
        max_bytes=DEFAULT_MAX_BYTES if rotate else None,
        backup_count=DEFAULT_BACKUP_COUNT if rotate else None,
    )


def create_cli_logger(
    *,
    level: str = "info",
    log_format: LogFormatType = "json",
    log_file: str = "",
    command: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a logger for CLI commands.

    The logger binds the command name to all log entries when given.

    Args:
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to log file (uses the default log file if empty).
        command: Name of the CLI command for context.

    Returns:
        A FilteringBoundLogger instance configured for CLI logging.
    """
    logger = create_logger(
        level=level, log_format=log_format, log_file=log_file, rotate=False
    )
    if command:
        return logger.bind(command=command)
    return logger
