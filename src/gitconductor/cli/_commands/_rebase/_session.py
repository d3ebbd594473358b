# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands that start and drive an interactive rebase."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from .._context import OutputFormat
from .._shared import (
    FormatOption,
    RepoArgument,
    handle_errors,
    open_conductor,
    repo_root,
)
from ._app import app
from ._plan import load_plan
from ._render import print_session, print_status


@app.command(name="start")
def _start(
    onto: Annotated[str, Parameter(help="Commit the plan is replayed onto")],
    repo: RepoArgument = Path(),
    *,
    plan: Annotated[
        Path,
        Parameter(name=["--plan", "-p"], help="JSON plan file, oldest commit first"),
    ],
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Start an interactive rebase from a plan file

    Reword and author changes are applied automatically. The command returns
    when the rebase completes, stops at an edit, or stops on conflicts.

    Args:
        onto: Commit the plan is replayed onto.
        repo: Repository working tree root.
        plan: JSON plan file.
        format: Output format.
    """
    with handle_errors():
        entries = load_plan(plan)
        with open_conductor() as conductor:
            state = conductor.start_interactive_rebase(repo_root(repo), onto, entries)
    raise SystemExit(print_session(state, format))


@app.command(name="continue")
def _continue(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Continue the interactive rebase after an edit stop or resolved conflicts

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        state = conductor.continue_interactive_rebase(repo_root(repo))
    raise SystemExit(print_session(state, format))


@app.command(name="status")
def _status(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Show the progress of the interactive rebase

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        info = conductor.get_interactive_rebase_status(repo_root(repo))
    print_status(info, format)


@app.command(name="amend")
def _amend(
    repo: RepoArgument = Path(),
    *,
    message: Annotated[
        str | None,
        Parameter(name=["--message", "-m"], help="New commit message"),
    ] = None,
    author: Annotated[
        str | None,
        Parameter(name="--author", help="New author as 'Name <email>'"),
    ] = None,
) -> None:
    """Amend the commit the rebase is stopped at

    Args:
        repo: Repository working tree root.
        message: New commit message; the current message is kept if omitted.
        author: New author.
    """
    with handle_errors(), open_conductor() as conductor:
        output = conductor.amend_stopped_commit(
            repo_root(repo), message=message, author=author
        )
    print(output or "Amended.")


@app.command(name="abort")
def _abort(repo: RepoArgument = Path()) -> None:
    """Abort the interactive rebase

    Args:
        repo: Repository working tree root.
    """
    with handle_errors(), open_conductor() as conductor:
        output = conductor.abort_interactive_rebase(repo_root(repo))
    print(output or "Rebase aborted.")
