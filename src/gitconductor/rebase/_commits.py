"""Listing the commits available to an interactive rebase."""

from typing import TYPE_CHECKING

from ._models import RebaseCommitInfo

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(["%H", "%h", "%s", "%b", "%an", "%ae", "%ad"]) + _RECORD_SEP
_EMPTY_RANGE_MARKERS = ("unknown revision", "does not have any commits")


def parse_commit_records(output: str, pushed: set[str]) -> list[RebaseCommitInfo]:
    """Parse ``git log`` output written with the record and field separators."""
    commits: list[RebaseCommitInfo] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip()  # noqa: PLW2901
        if not record:
            continue
        parts = [part.strip() for part in record.split(_FIELD_SEP, 6)]
        parts.extend([""] * (7 - len(parts)))
        commit, short, subject, body, name, email, date = parts
        if not commit:
            continue
        commits.append(
            RebaseCommitInfo(
                hash=commit,
                short_hash=short,
                subject=subject,
                body=body,
                author_name=name,
                author_email=email,
                author_date=date,
                is_pushed=commit in pushed,
            )
        )
    return commits


def _upstream(runner: "GitRunner", repo_path: "str | Path") -> str | None:
    result = runner.execute(repo_path, ["rev-parse", "--abbrev-ref", "@{upstream}"])
    if not result.ok:
        return None
    return result.stdout.strip() or None


def _pushed_commits(runner: "GitRunner", repo_path: "str | Path") -> set[str]:
    result = runner.execute(repo_path, ["rev-list", "--remotes"])
    if not result.ok:
        return set()
    return {line.strip() for line in result.stdout.splitlines() if line.strip()}


def list_rebase_commits(
    runner: "GitRunner", repo_path: "str | Path", base: str | None = None
) -> list[RebaseCommitInfo]:
    """List the non-merge commits in ``base..HEAD``, oldest first.

    Args:
        runner: Git runner.
        repo_path: Repository root.
        base: Exclusive base. Defaults to the upstream branch, or the whole
            history of HEAD when there is no upstream.

    Returns:
        The commits, empty for an unborn branch or an unknown base.

    Raises:
        GitCommandError: If git log fails for another reason.
    """
    base_ref = base.strip() if base and base.strip() else _upstream(runner, repo_path)
    rev_range = f"{base_ref}..HEAD" if base_ref else "HEAD"

    result = runner.execute(
        repo_path,
        [
            "--no-pager",
            "log",
            "--reverse",
            "--no-merges",
            "--date=iso-strict",
            f"--pretty=format:{_LOG_FORMAT}",
            rev_range,
        ],
    )
    if not result.ok:
        lowered = result.diagnostic.lower()
        if any(marker in lowered for marker in _EMPTY_RANGE_MARKERS):
            return []
        raise result.to_error()

    return parse_commit_records(result.stdout, _pushed_commits(runner, repo_path))
