"""Pull, pull prediction, and three-way conflict preview."""

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from gitconductor.conflicts import (
    BINARY_UNSUPPORTED_MESSAGE,
    is_merge_in_progress,
    is_rebase_in_progress,
    list_unmerged_files,
    show_path_bytes_or_empty,
)
from gitconductor.enums import PullAction, PullMode, PullStatus
from gitconductor.exceptions import BinaryContentError, GitCommandError, ValidationError
from gitconductor.git import ensure_is_git_worktree
from gitconductor.utils import ensure_rel_path_safe, require_text

from ._models import PullPrediction, PullResult
from ._parser import (
    parse_conflict_messages,
    parse_left_right_count,
    parse_merge_tree_conflicts,
)

if TYPE_CHECKING:
    from gitconductor.git import GitRunner

DEFAULT_REMOTE = "origin"
DETACHED_HEAD_MESSAGE = "Cannot pull from detached HEAD."

# merge-file exits with the number of conflicts, capped at 127.
_MERGE_FILE_MAX_CONFLICTS = 127


def current_branch(runner: "GitRunner", repo_path: str | Path) -> str | None:
    """Return the checked out branch name, or None for a detached HEAD."""
    result = runner.execute(repo_path, ["symbolic-ref", "--quiet", "--short", "HEAD"])
    if not result.ok:
        return None
    return result.stdout.strip() or None


def infer_upstream(
    runner: "GitRunner", repo_path: str | Path, remote: str, branch: str
) -> str | None:
    """Return the configured upstream, else ``<remote>/<branch>`` if it exists."""
    result = runner.execute(
        repo_path, ["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"]
    )
    if result.ok and result.stdout.strip():
        return result.stdout.strip()
    if runner.succeeds(
        repo_path, ["show-ref", "--verify", "--quiet", f"refs/remotes/{remote}/{branch}"]
    ):
        return f"{remote}/{branch}"
    return None


def fetch(runner: "GitRunner", repo_path: str | Path, remote: str = DEFAULT_REMOTE) -> str:
    """Fetch a remote.

    Raises:
        GitCommandError: If the fetch fails.
    """
    remote = require_text(remote, "remote")
    output = runner.run(repo_path, ["fetch", remote])
    if runner.logger is not None:
        runner.logger.info("fetch_completed", repo=str(repo_path), remote=remote)
    return output


def predict_merge_conflicts(
    runner: "GitRunner", repo_path: str | Path, upstream: str
) -> list[str]:
    """Predict the paths a merge of ``upstream`` into HEAD would conflict on.

    Uses an in-memory ``merge-tree`` so neither the index nor the working
    tree is touched. Any failure, including a git too old for
    ``--write-tree``, yields an empty list.
    """
    base = runner.execute(repo_path, ["merge-base", "HEAD", upstream])
    merge_base = base.stdout.strip() if base.ok else ""
    if not merge_base:
        return []

    result = runner.execute(
        repo_path,
        [
            "merge-tree",
            "--write-tree",
            "--messages",
            "--merge-base",
            merge_base,
            "HEAD",
            upstream,
        ],
    )
    if result.returncode not in (0, 1):
        if runner.logger is not None:
            runner.logger.debug(
                "merge_tree_unavailable",
                repo=str(repo_path),
                diagnostic=result.diagnostic,
            )
        return []
    return parse_merge_tree_conflicts(f"{result.stdout}\n{result.stderr}")


def choose_pull_action(
    upstream: str | None, ahead: int, behind: int, mode: PullMode
) -> PullAction:
    """Decide what a pull would do from the divergence counts.

    Examples:
        >>> choose_pull_action("origin/main", 2, 0, PullMode.MERGE)
        <PullAction.NOOP: 'noop'>
        >>> choose_pull_action("origin/main", 0, 3, PullMode.REBASE)
        <PullAction.FAST_FORWARD: 'fast-forward'>
    """
    if upstream is None:
        return PullAction.NO_UPSTREAM
    if behind == 0:
        return PullAction.NOOP
    if ahead == 0:
        return PullAction.FAST_FORWARD
    if mode is PullMode.REBASE:
        return PullAction.REBASE
    return PullAction.MERGE_COMMIT


def predict_pull(
    runner: "GitRunner",
    repo_path: str | Path,
    remote: str = DEFAULT_REMOTE,
    mode: PullMode = PullMode.MERGE,
) -> PullPrediction:
    """Fetch and predict the effect of pulling the current branch.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        ValidationError: If HEAD is detached.
        GitCommandError: If the fetch fails.
    """
    ensure_is_git_worktree(runner, repo_path)
    remote = require_text(remote, "remote")
    _ = runner.run(repo_path, ["fetch", remote])

    branch = current_branch(runner, repo_path)
    if branch is None:
        msg = "Cannot predict pull from detached HEAD."
        raise ValidationError(msg, field="branch")

    upstream = infer_upstream(runner, repo_path, remote, branch)
    if upstream is None:
        return PullPrediction(
            upstream=None, ahead=0, behind=0, action=PullAction.NO_UPSTREAM
        )

    counts = runner.execute(
        repo_path, ["rev-list", "--left-right", "--count", f"{upstream}...HEAD"]
    )
    behind, ahead = parse_left_right_count(counts.stdout if counts.ok else "")
    conflicts = predict_merge_conflicts(runner, repo_path, upstream) if behind else []

    return PullPrediction(
        upstream=upstream,
        ahead=ahead,
        behind=behind,
        action=choose_pull_action(upstream, ahead, behind, mode),
        conflict_files=tuple(conflicts),
    )


def pull(
    runner: "GitRunner",
    repo_path: str | Path,
    remote: str = DEFAULT_REMOTE,
    mode: PullMode = PullMode.MERGE,
) -> PullResult:
    """Pull the current branch, merging or rebasing diverged history.

    A pull that stops on conflicts is not an error: the result reports them
    so they can be resolved with the conflict operations.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        ValidationError: If HEAD is detached.
        GitCommandError: If the pull fails without leaving conflicts.
    """
    ensure_is_git_worktree(runner, repo_path)
    remote = require_text(remote, "remote")
    branch = current_branch(runner, repo_path)
    if branch is None:
        raise ValidationError(DETACHED_HEAD_MESSAGE, field="branch")

    strategy = ["--rebase"] if mode is PullMode.REBASE else ["--no-rebase", "--no-edit"]
    result = runner.execute(
        repo_path, ["pull", *strategy, remote, branch], env=runner.no_editor_env()
    )
    if result.ok:
        if runner.logger is not None:
            runner.logger.info(
                "pull_completed", repo=str(repo_path), remote=remote, mode=mode.value
            )
        return PullResult(
            status=PullStatus.OK,
            operation=mode,
            message=result.stdout.strip() or result.stderr.strip(),
        )

    message = result.diagnostic
    merging = is_merge_in_progress(runner, repo_path)
    rebasing = is_rebase_in_progress(runner, repo_path)
    conflicts = list_unmerged_files(runner, repo_path) or parse_conflict_messages(
        f"{result.stdout}\n{result.stderr}"
    )
    if not (merging or rebasing or conflicts):
        raise result.to_error()

    if rebasing:
        operation = PullMode.REBASE
    elif merging:
        operation = PullMode.MERGE
    else:
        operation = mode
    if runner.logger is not None:
        runner.logger.info(
            "pull_completed",
            repo=str(repo_path),
            remote=remote,
            mode=mode.value,
            conflict_files=conflicts,
        )
    return PullResult(
        status=PullStatus.CONFLICTS,
        operation=operation,
        message=message,
        conflict_files=tuple(conflicts),
    )


def conflict_preview(
    runner: "GitRunner", repo_path: str | Path, upstream: str, path: str
) -> str:
    """Render a diff3-style preview of merging ``upstream``'s version of a path.

    The merge-base, HEAD and upstream blobs are merged in temporary files,
    so the repository is not touched.

    Returns:
        The merged text with ``ours``/``base``/``theirs`` conflict markers.

    Raises:
        ValidationError: If ``upstream`` or ``path`` is blank or unsafe.
        BinaryContentError: If any version is binary.
        GitCommandError: If git fails.
    """
    ensure_is_git_worktree(runner, repo_path)
    upstream = require_text(upstream, "upstream")
    path = ensure_rel_path_safe(require_text(path, "path"))

    merge_base = runner.run(repo_path, ["merge-base", "HEAD", upstream])
    if not merge_base:
        msg = "Failed to determine merge-base."
        raise GitCommandError(msg, args=("merge-base", "HEAD", upstream))

    versions = {
        "ours": show_path_bytes_or_empty(runner, repo_path, "HEAD", path),
        "base": show_path_bytes_or_empty(runner, repo_path, merge_base, path),
        "theirs": show_path_bytes_or_empty(runner, repo_path, upstream, path),
    }
    if any(b"\0" in content for content in versions.values()):
        raise BinaryContentError(BINARY_UNSUPPORTED_MESSAGE, path=path)

    with tempfile.TemporaryDirectory(prefix="gitconductor-preview-") as tmp:
        files: dict[str, Path] = {}
        for label, content in versions.items():
            files[label] = Path(tmp) / f"{label}.txt"
            _ = files[label].write_bytes(content)

        result = runner.execute(
            repo_path,
            [
                "merge-file",
                "-p",
                "--diff3",
                "-L",
                "ours",
                "-L",
                "base",
                "-L",
                "theirs",
                str(files["ours"]),
                str(files["base"]),
                str(files["theirs"]),
            ],
        )

    if not 0 <= result.returncode <= _MERGE_FILE_MAX_CONFLICTS:
        raise result.to_error()
    return result.stdout
