"""Shared helpers for gitconductor."""

from ._logging import LogFormatType, create_cli_logger, create_logger
from ._paths import (
    ensure_rel_path_safe,
    get_default_log_file,
    get_log_dir,
    join_repo_path,
    normalize_repo_path,
    repo_lock_key,
    require_text,
)

__all__ = [
    "LogFormatType",
    "create_cli_logger",
    "create_logger",
    "ensure_rel_path_safe",
    "get_default_log_file",
    "get_log_dir",
    "join_repo_path",
    "normalize_repo_path",
    "repo_lock_key",
    "require_text",
]
