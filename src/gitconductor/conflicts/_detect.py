"""Operation detection from repository sentinels."""

from typing import TYPE_CHECKING

from gitconductor.enums import ConflictOperationKind
from gitconductor.exceptions import GitCommandError
from gitconductor.git import git_path, ref_exists

from ._models import OperationSentinels

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner


def detect_operation(sentinels: OperationSentinels) -> ConflictOperationKind:
    """Map sentinel presence to the active operation.

    Priority order: mailbox apply, rebase, merge, cherry-pick. The first
    match wins, so the result is unambiguous even when stale sentinels of a
    lower-priority operation are left behind.
    """
    if sentinels.applying_marker:
        return ConflictOperationKind.MAILBOX_APPLY
    if sentinels.rebase_head or sentinels.rebase_merge_dir or sentinels.rebase_apply_dir:
        return ConflictOperationKind.REBASE
    if sentinels.merge_head:
        return ConflictOperationKind.MERGE
    if sentinels.cherry_pick_head:
        return ConflictOperationKind.CHERRY_PICK
    return ConflictOperationKind.NONE


def _git_dir_entry(runner: "GitRunner", repo_path: "str | Path", name: str) -> "Path | None":
    try:
        return git_path(runner, repo_path, name)
    except GitCommandError:
        return None


def read_sentinels(runner: "GitRunner", repo_path: "str | Path") -> OperationSentinels:
    """Collect the sentinel state of a repository."""
    applying = _git_dir_entry(runner, repo_path, "rebase-apply/applying")
    rebase_merge = _git_dir_entry(runner, repo_path, "rebase-merge")
    rebase_apply = _git_dir_entry(runner, repo_path, "rebase-apply")
    applying_marker = applying is not None and applying.is_file()

    return OperationSentinels(
        applying_marker=applying_marker,
        rebase_head=ref_exists(runner, repo_path, "REBASE_HEAD"),
        rebase_merge_dir=rebase_merge is not None and rebase_merge.is_dir(),
        rebase_apply_dir=(
            not applying_marker and rebase_apply is not None and rebase_apply.is_dir()
        ),
        merge_head=ref_exists(runner, repo_path, "MERGE_HEAD"),
        cherry_pick_head=ref_exists(runner, repo_path, "CHERRY_PICK_HEAD"),
    )


def current_operation(runner: "GitRunner", repo_path: "str | Path") -> ConflictOperationKind:
    """Return the operation currently in progress in a repository."""
    return detect_operation(read_sentinels(runner, repo_path))


def is_rebase_in_progress(runner: "GitRunner", repo_path: "str | Path") -> bool:
    """Return True if a rebase of any backend is in progress."""
    return current_operation(runner, repo_path) is ConflictOperationKind.REBASE


def is_merge_in_progress(runner: "GitRunner", repo_path: "str | Path") -> bool:
    """Return True if ``MERGE_HEAD`` resolves."""
    return ref_exists(runner, repo_path, "MERGE_HEAD")
