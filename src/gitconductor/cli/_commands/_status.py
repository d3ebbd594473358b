# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Status command: working copy changes with renames reconciled."""

from pathlib import Path

from cyclopts import App

from gitconductor.status import StatusEntry

from ._context import OutputFormat
from ._shared import (
    FormatOption,
    RepoArgument,
    exit_with_success,
    handle_errors,
    open_conductor,
    render,
    repo_root,
    to_plain,
)

app = App(
    name="status",
    help="Show working copy changes with unstaged renames reconciled",
    help_on_error=True,
)


def _describe(entry: StatusEntry) -> str:
    if entry.old_path is not None:
        return f"{entry.status} {entry.old_path} -> {entry.path}"
    return f"{entry.status} {entry.path}"


@app.default
def _status(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show the working copy status

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        entries = conductor.get_status(repo_root(repo))

    if not entries and format == OutputFormat.TEXT:
        print("Working tree clean.")
        exit_with_success()

    text = "\n".join(_describe(entry) for entry in entries)
    rows = [[entry.status, entry.path, entry.old_path or ""] for entry in entries]
    print(
        render(
            {"entries": to_plain(entries)},
            format,
            text=text,
            table=(["Status", "Path", "Renamed from"], rows),
        )
    )
