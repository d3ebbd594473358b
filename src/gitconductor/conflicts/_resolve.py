"""Resolution of individual conflicted paths.

All functions here mutate the index and working tree. Callers are expected
to hold the repository's lock.
"""

from typing import TYPE_CHECKING

from gitconductor.enums import ConflictSide
from gitconductor.exceptions import RenameTargetNotFoundError
from gitconductor.utils import ensure_rel_path_safe, join_repo_path, require_text

from ._versions import (
    DEFAULT_RENAME_SIMILARITY,
    detect_rename_target,
    inspect_conflict,
    show_path_bytes_or_empty,
)

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner


def _clean_path(path: str) -> str:
    return ensure_rel_path_safe(require_text(path, "path"))


def write_worktree_file(repo_path: "str | Path", path: str, content: bytes) -> None:
    """Write a file under the working tree, creating parent directories."""
    full = join_repo_path(repo_path, path)
    full.parent.mkdir(parents=True, exist_ok=True)
    _ = full.write_bytes(content)


def remove_path(runner: "GitRunner", repo_path: "str | Path", path: str) -> None:
    """Remove a path from the index and the working tree.

    The removal is staged. A stray untracked file left at the path is
    deleted as well.
    """
    runner.run(repo_path, ["rm", "-f", "--ignore-unmatch", "--quiet", "--", path])
    full = join_repo_path(repo_path, path)
    if full.is_file() or full.is_symlink():
        full.unlink()


def stage_path(runner: "GitRunner", repo_path: "str | Path", path: str) -> None:
    """Stage a path's working tree content."""
    runner.run(repo_path, ["add", "--", path])


def take_ours(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> None:
    """Resolve a path with the local version.

    If ours deleted the path the deletion is staged. If the incoming side
    renamed the path, the rename target is removed so only the original
    name remains.

    Raises:
        ValidationError: If ``path`` is blank or unsafe.
        GitCommandError: If git fails.
    """
    path = _clean_path(path)
    shape = inspect_conflict(runner, repo_path, path, similarity=similarity)

    if not shape.has_ours and (shape.ours_deleted or shape.stages):
        remove_path(runner, repo_path, path)
        return

    if shape.rename_target is not None and shape.rename_target != path:
        remove_path(runner, repo_path, shape.rename_target)
    if shape.stages:
        runner.run(repo_path, ["checkout", "--ours", "--", path])
    stage_path(runner, repo_path, path)


def take_theirs(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> None:
    """Resolve a path with the incoming version.

    If the incoming side renamed the path, its content is written at the new
    name and staged, and the original path is removed. If the incoming side
    deleted the path, the deletion is staged.

    Raises:
        ValidationError: If ``path`` is blank or unsafe.
        GitCommandError: If git fails.
    """
    path = _clean_path(path)
    shape = inspect_conflict(runner, repo_path, path, similarity=similarity)

    if shape.rename_target is not None and shape.theirs_ref is not None:
        content = show_path_bytes_or_empty(
            runner, repo_path, shape.theirs_ref, shape.rename_target
        )
        write_worktree_file(repo_path, shape.rename_target, content)
        stage_path(runner, repo_path, shape.rename_target)
        remove_path(runner, repo_path, path)
        return

    if not shape.has_theirs and (shape.theirs_deleted or shape.stages):
        remove_path(runner, repo_path, path)
        return

    if shape.stages:
        runner.run(repo_path, ["checkout", "--theirs", "--", path])
    stage_path(runner, repo_path, path)


def resolve_rename(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    keep_name: ConflictSide,
    keep_content: ConflictSide,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> str:
    """Resolve a rename conflict with an explicit name and content choice.

    Args:
        runner: Git runner.
        repo_path: Repository root.
        path: The conflicted (original) path.
        keep_name: Side whose file name is kept.
        keep_content: Side whose content is kept.
        similarity: Rename detection threshold in percent.

    Returns:
        The final path that holds the resolved content.

    Raises:
        RenameTargetNotFoundError: If no incoming rename of ``path`` exists.
        GitCommandError: If git fails.
    """
    path = _clean_path(path)
    shape = inspect_conflict(runner, repo_path, path, similarity=similarity)
    target = shape.rename_target
    if target is None and shape.theirs_ref is not None:
        target = detect_rename_target(
            runner, repo_path, path, shape.theirs_ref, similarity=similarity
        )
    if target is None or shape.theirs_ref is None:
        msg = f"Could not determine the renamed path for {path}."
        raise RenameTargetNotFoundError(msg, path=path)

    final_path = path if keep_name is ConflictSide.OURS else target
    other_path = target if final_path == path else path

    if keep_content is ConflictSide.OURS:
        content = show_path_bytes_or_empty(runner, repo_path, ":2", path)
        if not content and not shape.has_ours:
            content = show_path_bytes_or_empty(runner, repo_path, "HEAD", path)
    else:
        content = show_path_bytes_or_empty(runner, repo_path, shape.theirs_ref, target)

    remove_path(runner, repo_path, other_path)
    write_worktree_file(repo_path, final_path, content)
    stage_path(runner, repo_path, final_path)
    return final_path


def apply_and_stage(
    runner: "GitRunner", repo_path: "str | Path", path: str, content: str
) -> None:
    """Write caller-resolved content to a path and stage it.

    Raises:
        ValidationError: If ``path`` is blank or unsafe.
        GitCommandError: If staging fails.
    """
    path = _clean_path(path)
    write_worktree_file(repo_path, path, content.encode("utf-8"))
    stage_path(runner, repo_path, path)
