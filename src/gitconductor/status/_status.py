"""Working copy status with rename reconciliation.

``git status`` only pairs deletions with additions when both are staged.
For unstaged moves it reports an independent deletion and an untracked file.
After parsing, the deleted paths' committed blob ids are compared with the
content ids of the added or untracked files; identical content is folded into
a single rename entry.
"""

from dataclasses import replace
from typing import TYPE_CHECKING

from dulwich.errors import NotGitRepository, NotTreeError
from dulwich.object_store import tree_lookup_path
from dulwich.repo import Repo

from gitconductor.exceptions import ValidationError
from gitconductor.git import ensure_is_git_worktree
from gitconductor.utils import join_repo_path

from ._parser import parse_hash_object, parse_porcelain_z

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from gitconductor.git import GitRunner

    from ._models import StatusEntry

STATUS_ARGS = ("status", "--porcelain", "-z", "--find-renames", "--untracked-files=all")


def reconcile_renames(
    entries: "list[StatusEntry]",
    committed_ids: "Mapping[str, str]",
    working_ids: "Mapping[str, str]",
) -> "list[StatusEntry]":
    """Fold deletion and addition pairs with identical content into renames.

    Each deletion is consumed at most once; additions are matched in list
    order. Unmerged entries and existing renames or copies are left alone.

    Args:
        entries: Parsed status entries.
        committed_ids: Blob id at HEAD for deleted paths.
        working_ids: Content id of the working file for added paths.

    Returns:
        A new list where each matched addition became ``R `` with
        ``old_path`` set, and the matched deletions are removed.
    """
    deletions_by_id: dict[str, list[int]] = {}
    for index, entry in enumerate(entries):
        if entry.is_rename_or_copy or entry.is_unmerged or not entry.is_deletion:
            continue
        blob_id = committed_ids.get(entry.path)
        if blob_id:
            deletions_by_id.setdefault(blob_id, []).append(index)

    if not deletions_by_id:
        return list(entries)

    replaced: dict[int, StatusEntry] = {}
    consumed: set[int] = set()
    for index, entry in enumerate(entries):
        if entry.is_rename_or_copy or entry.is_unmerged or not entry.is_addition:
            continue
        candidates = deletions_by_id.get(working_ids.get(entry.path, ""))
        if not candidates:
            continue
        deleted_index = candidates.pop(0)
        consumed.add(deleted_index)
        replaced[index] = replace(entry, status="R ", old_path=entries[deleted_index].path)

    return [
        replaced.get(index, entry)
        for index, entry in enumerate(entries)
        if index not in consumed
    ]


def committed_blob_ids(repo_path: "str | Path", paths: "Iterable[str]") -> dict[str, str]:
    """Look up the blob id of each path in HEAD's tree.

    Paths missing from HEAD are omitted. An unborn HEAD or unreadable
    repository yields an empty mapping.
    """
    try:
        repo = Repo(str(repo_path))
    except NotGitRepository:
        return {}

    try:
        try:
            head_sha: bytes = repo.head()
        except KeyError:
            # No commits yet
            return {}

        tree_sha: bytes | None = getattr(repo[head_sha], "tree", None)
        if tree_sha is None:
            return {}

        result: dict[str, str] = {}
        for path in paths:
            try:
                _mode, blob_sha = tree_lookup_path(
                    repo.__getitem__, tree_sha, path.encode("utf-8")
                )
            except (KeyError, NotTreeError):
                continue
            result[path] = blob_sha.decode("ascii")
        return result
    finally:
        repo.close()


def present_files(repo_path: "str | Path", paths: "Iterable[str]") -> list[str]:
    """Keep the paths that name a regular file under the working tree.

    Paths ``--stdin-paths`` cannot carry (embedded newlines) are dropped.
    """
    present: list[str] = []
    for path in paths:
        if "\n" in path:
            continue
        try:
            if join_repo_path(repo_path, path).is_file():
                present.append(path)
        except ValidationError:
            continue
    return present


def working_content_ids(
    runner: "GitRunner", repo_path: "str | Path", paths: list[str]
) -> dict[str, str]:
    """Compute the blob id each working file would get if it were added.

    Uses ``git hash-object --stdin-paths`` so clean filters and line-ending
    conversion match what staging would produce. Paths without a file on
    disk are skipped. If a file disappears while hashing, the survivors are
    hashed once more; a second failure yields an empty mapping.
    """
    for _attempt in range(2):
        present = present_files(repo_path, paths)
        if not present:
            return {}
        result = runner.execute(
            repo_path, ["hash-object", "--stdin-paths"], stdin="\n".join(present) + "\n"
        )
        if result.ok:
            return parse_hash_object(present, result.stdout)
        if len(present_files(repo_path, present)) == len(present):
            break
    if runner.logger is not None:
        runner.logger.debug("hash_object_failed", repo=str(repo_path))
    return {}


def get_status(runner: "GitRunner", repo_path: "str | Path") -> "list[StatusEntry]":
    """Return the working copy status with unstaged renames reconciled.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        GitCommandError: If ``git status`` fails.
    """
    ensure_is_git_worktree(runner, repo_path)
    raw = runner.run_bytes(repo_path, STATUS_ARGS)
    entries = parse_porcelain_z(raw)

    deleted = [
        e.path
        for e in entries
        if e.is_deletion and not e.is_rename_or_copy and not e.is_unmerged
    ]
    added = [
        e.path
        for e in entries
        if e.is_addition and not e.is_rename_or_copy and not e.is_unmerged
    ]
    if not deleted or not added:
        return entries

    committed = committed_blob_ids(repo_path, deleted)
    if not committed:
        return entries
    return reconcile_renames(entries, committed, working_content_ids(runner, repo_path, added))
