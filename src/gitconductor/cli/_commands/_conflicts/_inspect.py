# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands that inspect the active operation without changing it."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from gitconductor.conflicts import ConflictFileVersions

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
from ._render import print_state

_MISSING = "(absent)"


def _describe_versions(versions: ConflictFileVersions) -> str:
    header = f"{versions.conflict_kind.value}: {versions.ours_path}"
    if versions.theirs_path != versions.ours_path:
        header += f" -> {versions.theirs_path}"
    sections = [header]
    for label, content in (
        ("base", versions.base),
        ("ours", versions.ours),
        ("theirs", versions.theirs),
        ("working", versions.working),
    ):
        body = _MISSING if content is None else content.rstrip("\n")
        sections.append(f"=== {label} ===\n{body}")
    return "\n".join(sections)


@app.command(name="show")
def _show(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show the active operation and its conflicted files

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        state = conductor.get_conflict_state(repo_root(repo))
    raise SystemExit(print_state(state, format))


@app.command(name="versions")
def _versions(
    path: Annotated[str, Parameter(help="Conflicted path, relative to the root")],
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show the base, ours, theirs and working versions of a conflicted file

    Args:
        path: Conflicted path, relative to the repository root.
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        versions = conductor.get_conflict_file_versions(repo_root(repo), path)
    print(render(to_plain(versions), format, text=_describe_versions(versions)))
