# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Commands that resolve a single conflicted path."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from gitconductor.enums import ConflictSide
from gitconductor.exceptions import ValidationError

from .._shared import RepoArgument, handle_errors, open_conductor, repo_root
from ._app import app

PathArgument = Annotated[
    str, Parameter(help="Conflicted path, relative to the repository root")
]


@app.command(name="ours")
def _ours(path: PathArgument, repo: RepoArgument = Path()) -> None:
    """Resolve a conflicted file with the local version

    Args:
        path: Conflicted path.
        repo: Repository working tree root.
    """
    with handle_errors(), open_conductor() as conductor:
        conductor.take_ours(repo_root(repo), path)
    print(f"Resolved {path} with ours.")


@app.command(name="theirs")
def _theirs(path: PathArgument, repo: RepoArgument = Path()) -> None:
    """Resolve a conflicted file with the incoming version

    Args:
        path: Conflicted path.
        repo: Repository working tree root.
    """
    with handle_errors(), open_conductor() as conductor:
        conductor.take_theirs(repo_root(repo), path)
    print(f"Resolved {path} with theirs.")


@app.command(name="resolve-rename")
def _resolve_rename(
    path: PathArgument,
    repo: RepoArgument = Path(),
    *,
    keep_name: Annotated[
        ConflictSide,
        Parameter(name="--keep-name", help="Side whose file name is kept"),
    ] = ConflictSide.THEIRS,
    keep_content: Annotated[
        ConflictSide,
        Parameter(name="--keep-content", help="Side whose content is kept"),
    ] = ConflictSide.THEIRS,
) -> None:
    """Resolve a rename conflict by choosing a name and a content side

    Args:
        path: Conflicted path (either side's name).
        repo: Repository working tree root.
        keep_name: Side whose file name is kept.
        keep_content: Side whose content is kept.
    """
    with handle_errors(), open_conductor() as conductor:
        final_path = conductor.resolve_rename(
            repo_root(repo), path, keep_name, keep_content
        )
    print(f"Resolved rename, kept {final_path}.")


@app.command(name="stage")
def _stage(
    path: PathArgument,
    repo: RepoArgument = Path(),
    *,
    content_file: Annotated[
        Path,
        Parameter(
            name=["--content-file", "-c"],
            help="File holding the resolved content",
        ),
    ],
) -> None:
    """Write resolved content to a conflicted file and stage it

    Args:
        path: Conflicted path.
        repo: Repository working tree root.
        content_file: File holding the resolved content.
    """
    with handle_errors():
        try:
            content = content_file.read_text(encoding="utf-8")
        except OSError as e:
            msg = f"Cannot read {content_file}: {e.strerror or e}"
            raise ValidationError(msg, field="content_file") from e
        with open_conductor() as conductor:
            conductor.apply_and_stage(repo_root(repo), path, content)
    print(f"Staged {path}.")
