"""Conflict state listing."""

from typing import TYPE_CHECKING

from gitconductor.enums import ConflictOperationKind
from gitconductor.status import parse_porcelain_z

from ._detect import current_operation
from ._models import ConflictFileEntry, ConflictState
from ._parser import parse_ls_files_unmerged, parse_unmerged_names

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner


def list_unmerged_files(runner: "GitRunner", repo_path: "str | Path") -> list[str]:
    """Return the sorted unmerged paths, or an empty list if git fails."""
    result = runner.execute(
        repo_path, ["diff", "--name-only", "-z", "--diff-filter=U"]
    )
    if not result.ok:
        return []
    return parse_unmerged_names(result.stdout)


def unmerged_stages(
    runner: "GitRunner", repo_path: "str | Path", paths: list[str] | None = None
) -> dict[str, frozenset[int]]:
    """Return the index stages present per unmerged path.

    Failures yield an empty mapping.
    """
    args = ["ls-files", "-u", "-z"]
    if paths:
        args.extend(["--", *paths])
    result = runner.execute(repo_path, args)
    if not result.ok:
        return {}
    return parse_ls_files_unmerged(result.stdout)


def _status_codes(runner: "GitRunner", repo_path: "str | Path") -> dict[str, str]:
    result = runner.execute(
        repo_path, ["status", "--porcelain", "-z", "--untracked-files=no"]
    )
    if not result.ok:
        return {}
    return {entry.path: entry.status for entry in parse_porcelain_z(result.stdout_bytes)}


def get_conflict_state(runner: "GitRunner", repo_path: "str | Path") -> ConflictState:
    """Return the active operation and its unmerged paths.

    Status codes and stage sets only annotate the listing. When the queries
    that supply them fail, entries fall back to ``U`` and an empty stage set.
    """
    operation = current_operation(runner, repo_path)
    files = list_unmerged_files(runner, repo_path)
    if not files:
        return ConflictState(
            in_progress=operation is not ConflictOperationKind.NONE,
            operation=operation,
        )

    codes = _status_codes(runner, repo_path)
    stages = unmerged_stages(runner, repo_path)
    if runner.logger is not None and (not codes or not stages):
        runner.logger.debug(
            "conflict_annotations_degraded",
            repo=str(repo_path),
            have_status=bool(codes),
            have_stages=bool(stages),
        )

    return ConflictState(
        in_progress=operation is not ConflictOperationKind.NONE,
        operation=operation,
        files=tuple(
            ConflictFileEntry(
                path=path,
                status=codes.get(path, "U"),
                stages=stages.get(path, frozenset()),
            )
            for path in files
        ),
    )
