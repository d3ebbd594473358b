"""Git process invocation layer."""

from ._retry import (
    MAILBOX_CONTINUE,
    MERGE_CONTINUE,
    FlagDowngrade,
    is_unsupported_flag_diagnostic,
)
from ._runner import GitResult, GitRunner
from ._trust import TrustRegistry, is_safe_directory
from ._worktree import (
    NOT_A_WORKTREE_MESSAGE,
    ensure_is_git_worktree,
    git_path,
    path_exists_at,
    ref_exists,
)

__all__ = [
    "MAILBOX_CONTINUE",
    "MERGE_CONTINUE",
    "NOT_A_WORKTREE_MESSAGE",
    "FlagDowngrade",
    "GitResult",
    "GitRunner",
    "TrustRegistry",
    "ensure_is_git_worktree",
    "git_path",
    "is_safe_directory",
    "is_unsupported_flag_diagnostic",
    "path_exists_at",
    "ref_exists",
]
