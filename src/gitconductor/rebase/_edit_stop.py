"""Working tree file operations while a rebase is stopped for editing.

Each operation first checks that a rebase is active, then validates the path.
Writes, renames, and deletions are staged so that the next amend or continue
picks them up.
"""

from typing import TYPE_CHECKING

from gitconductor.conflicts import (
    NameStatusEntry,
    decode_text,
    parse_name_status_z,
    remove_path,
    stage_path,
    write_worktree_file,
)
from gitconductor.exceptions import NoOperationInProgressError, ValidationError
from gitconductor.utils import ensure_rel_path_safe, join_repo_path, require_text

from ._state import rebase_in_progress

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner

NOT_STOPPED_MESSAGE = "No interactive rebase is stopped for editing."


def _require_stop(runner: "GitRunner", repo_path: "str | Path", path: str) -> str:
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NOT_STOPPED_MESSAGE, operation="rebase")
    return ensure_rel_path_safe(require_text(path, "path"))


def list_stopped_commit_files(
    runner: "GitRunner", repo_path: "str | Path"
) -> list[NameStatusEntry]:
    """List the files changed by the commit the rebase is stopped at.

    Raises:
        NoOperationInProgressError: If no rebase is active.
        GitCommandError: If git fails.
    """
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NOT_STOPPED_MESSAGE, operation="rebase")
    output = runner.run_raw(
        repo_path,
        [
            "diff-tree",
            "--no-commit-id",
            "--root",
            "-r",
            "-M",
            "--name-status",
            "-z",
            "HEAD",
        ],
    )
    return parse_name_status_z(output)


def read_stop_file(runner: "GitRunner", repo_path: "str | Path", path: str) -> str:
    """Read a working tree file as text.

    Raises:
        NoOperationInProgressError: If no rebase is active.
        ValidationError: If the path is unsafe.
        BinaryContentError: If the file is binary.
        FileNotFoundError: If the file does not exist.
    """
    path = _require_stop(runner, repo_path, path)
    return decode_text(join_repo_path(repo_path, path).read_bytes(), path)


def write_stop_file(
    runner: "GitRunner", repo_path: "str | Path", path: str, content: str
) -> None:
    """Write a working tree file and stage it."""
    path = _require_stop(runner, repo_path, path)
    write_worktree_file(repo_path, path, content.encode("utf-8"))
    stage_path(runner, repo_path, path)


def rename_stop_file(
    runner: "GitRunner", repo_path: "str | Path", old_path: str, new_path: str
) -> None:
    """Rename a tracked file and stage the rename.

    Raises:
        ValidationError: If either path is unsafe or both are the same.
    """
    old_path = _require_stop(runner, repo_path, old_path)
    new_path = ensure_rel_path_safe(require_text(new_path, "new_path"))
    if old_path == new_path:
        msg = "The new path is the same as the old path."
        raise ValidationError(msg, field="new_path")
    join_repo_path(repo_path, new_path).parent.mkdir(parents=True, exist_ok=True)
    runner.run(repo_path, ["mv", "--", old_path, new_path])


def delete_stop_file(runner: "GitRunner", repo_path: "str | Path", path: str) -> None:
    """Delete a file and stage the deletion."""
    path = _require_stop(runner, repo_path, path)
    remove_path(runner, repo_path, path)


def restore_stop_file(runner: "GitRunner", repo_path: "str | Path", path: str) -> None:
    """Restore a file in the index and working tree from HEAD."""
    path = _require_stop(runner, repo_path, path)
    runner.run(repo_path, ["checkout", "HEAD", "--", path])
