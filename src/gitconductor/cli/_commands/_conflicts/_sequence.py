# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands that continue, abort or skip the active operation.

Each prints the conflict state observed afterwards and exits with
``ExitCode.CONFLICTS`` while conflicted paths remain.
"""

from pathlib import Path

from .._context import OutputFormat
from .._shared import (
    FormatOption,
    RepoArgument,
    handle_errors,
    open_conductor,
    repo_root,
)
from ._app import app
from ._render import print_state


@app.command(name="continue")
def _continue(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Continue the active merge, rebase, cherry-pick or mailbox apply

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        state = conductor.continue_operation(repo_root(repo))
    raise SystemExit(print_state(state, format))


@app.command(name="abort")
def _abort(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Abort the active operation

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        state = conductor.abort_operation(repo_root(repo))
    raise SystemExit(print_state(state, format))


@app.command(name="skip")
def _skip(
    repo: RepoArgument = Path(),
    *,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Skip the current step of the active rebase, cherry-pick or mailbox apply

    Args:
        repo: Repository working tree root.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        state = conductor.skip_operation(repo_root(repo))
    raise SystemExit(print_state(state, format))
