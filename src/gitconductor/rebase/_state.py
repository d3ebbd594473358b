"""Rebase progress derived from the sentinel files in the git directory.

Nothing here is cached. Every call reads the current files, because a rebase
may be advanced by another process between two queries.
"""

from typing import TYPE_CHECKING

from gitconductor.conflicts import is_rebase_in_progress, list_unmerged_files
from gitconductor.enums import RebaseSessionStatus
from gitconductor.exceptions import GitCommandError
from gitconductor.git import git_path

from ._models import RebaseSessionState, RebaseStatusInfo

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner

COMPLETED_MESSAGE = "Rebase completed successfully."
CONFLICTS_MESSAGE = "Rebase stopped due to conflicts."
STOPPED_MESSAGE = "Rebase stopped for editing."

_STATE_DIRS = ("rebase-merge", "rebase-apply")


def rebase_merge_dir(runner: "GitRunner", repo_path: "str | Path") -> "Path | None":
    """Return the ``rebase-merge`` directory if it exists."""
    try:
        path = git_path(runner, repo_path, "rebase-merge")
    except GitCommandError:
        return None
    return path if path.is_dir() else None


def read_rebase_file(runner: "GitRunner", repo_path: "str | Path", name: str) -> str | None:
    """Read a rebase state file, trimmed.

    ``rebase-merge/<name>`` is preferred; the legacy ``rebase-apply/<name>``
    is consulted when it is absent. Blank or unreadable files yield None.
    """
    for directory in _STATE_DIRS:
        try:
            path = git_path(runner, repo_path, f"{directory}/{name}")
        except GitCommandError:
            continue
        try:
            text = path.read_text(encoding="utf-8", errors="replace").strip()
        except OSError:
            continue
        if text:
            return text
    return None


def _read_int(runner: "GitRunner", repo_path: "str | Path", name: str) -> int | None:
    value = read_rebase_file(runner, repo_path, name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def head_author(runner: "GitRunner", repo_path: "str | Path") -> str | None:
    """Return HEAD's author as ``Name <email>``, or None if it cannot be read."""
    result = runner.execute(repo_path, ["show", "-s", "--format=%an <%ae>", "HEAD"])
    if not result.ok:
        return None
    return result.stdout.strip() or None


def rebase_in_progress(runner: "GitRunner", repo_path: "str | Path") -> bool:
    """Return True while a rebase is active or parked at a stop."""
    return rebase_merge_dir(runner, repo_path) is not None or is_rebase_in_progress(
        runner, repo_path
    )


def derive_rebase_state(runner: "GitRunner", repo_path: "str | Path") -> RebaseSessionState:
    """Classify the current rebase situation.

    Returns:
        ``completed`` when no rebase is active, ``conflicts`` when unmerged
        paths exist, otherwise ``stopped_at_edit``.
    """
    if not rebase_in_progress(runner, repo_path):
        return RebaseSessionState(
            status=RebaseSessionStatus.COMPLETED, message=COMPLETED_MESSAGE
        )

    conflicts = tuple(list_unmerged_files(runner, repo_path))
    status = RebaseSessionStatus.CONFLICTS if conflicts else RebaseSessionStatus.STOPPED_AT_EDIT
    return RebaseSessionState(
        status=status,
        message=CONFLICTS_MESSAGE if conflicts else STOPPED_MESSAGE,
        current_step=_read_int(runner, repo_path, "msgnum"),
        total_steps=_read_int(runner, repo_path, "end"),
        stopped_commit_hash=read_rebase_file(runner, repo_path, "stopped-sha"),
        stopped_commit_message=read_rebase_file(runner, repo_path, "message"),
        stopped_commit_author=head_author(runner, repo_path),
        conflict_files=conflicts,
    )


def get_rebase_status(runner: "GitRunner", repo_path: "str | Path") -> RebaseStatusInfo:
    """Return the progress of the rebase in a repository."""
    if not rebase_in_progress(runner, repo_path):
        return RebaseStatusInfo(in_progress=False)

    return RebaseStatusInfo(
        in_progress=True,
        current_step=_read_int(runner, repo_path, "msgnum"),
        total_steps=_read_int(runner, repo_path, "end"),
        stopped_commit_hash=read_rebase_file(runner, repo_path, "stopped-sha"),
        stopped_commit_message=read_rebase_file(runner, repo_path, "message"),
        stopped_commit_author=head_author(runner, repo_path),
        conflict_files=tuple(list_unmerged_files(runner, repo_path)),
    )
