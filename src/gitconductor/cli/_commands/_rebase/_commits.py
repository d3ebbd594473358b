# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Command listing the commits an interactive rebase can rewrite."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from .._context import OutputFormat
from .._shared import (
    FormatOption,
    RepoArgument,
    handle_errors,
    open_conductor,
    render,
    repo_root,
    to_plain,
)
from ._app import app


@app.command(name="commits")
def _commits(
    repo: RepoArgument = Path(),
    *,
    base: Annotated[
        str | None,
        Parameter(name=["--base", "-b"], help="Exclusive base (default: upstream)"),
    ] = None,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """List commits after the base, oldest first

    Args:
        repo: Repository working tree root.
        base: Exclusive base commit.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        commits = conductor.list_rebase_commits(repo_root(repo), base)

    text = "\n".join(
        f"{commit.short_hash} {commit.subject}" + (" (pushed)" if commit.is_pushed else "")
        for commit in commits
    )
    rows = [
        [c.short_hash, c.subject, c.author_name, "yes" if c.is_pushed else "no"]
        for c in commits
    ]
    print(
        render(
            {"commits": to_plain(commits)},
            format,
            text=text or "No commits to rebase.",
            table=(["Commit", "Subject", "Author", "Pushed"], rows),
        )
    )
