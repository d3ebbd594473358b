# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415, FBT002
"""Trust commands for repositories owned by another user."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from ._shared import ExitCode, RepoArgument, handle_errors, open_conductor, repo_root

app = App(
    name="trust",
    help="Trust repositories owned by another user (safe.directory)",
    help_on_error=True,
)


@app.command(name="add")
def _add(
    repo: RepoArgument = Path(),
    *,
    persist: Annotated[
        bool,
        Parameter(
            name="--persist",
            negative="--no-persist",
            help="Also add the repository to the global safe.directory list",
        ),
    ] = True,
) -> None:
    """Trust a repository

    Args:
        repo: Repository working tree root.
        persist: Also write the global git configuration.
    """
    root = repo_root(repo)
    with handle_errors(), open_conductor() as conductor:
        conductor.trust_repository(root, persist=persist)
    print(f"Trusted {root}.")


@app.command(name="check")
def _check(repo: RepoArgument = Path()) -> None:
    """Check whether a repository is in the global safe.directory list

    Exits with the not-found code when it is not.

    Args:
        repo: Repository working tree root.
    """
    root = repo_root(repo)
    with handle_errors(), open_conductor() as conductor:
        trusted = conductor.is_trusted(root)
    print(f"{root} is {'trusted' if trusted else 'not trusted'}.")
    if not trusted:
        raise SystemExit(ExitCode.NOT_FOUND)
