# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Pull commands: prediction, pull, conflict preview and fetch."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from gitconductor.enums import PullMode, PullStatus
from gitconductor.pull import DEFAULT_REMOTE, PullPrediction

from ._context import OutputFormat
from ._shared import (
    ExitCode,
    FormatOption,
    RepoArgument,
    handle_errors,
    open_conductor,
    render,
    repo_root,
    to_plain,
)

app = App(
    name="pull",
    help="Predict and run pulls of the current branch",
    help_on_error=True,
)

RemoteOption = Annotated[str, Parameter(name=["--remote", "-r"], help="Remote name")]
ModeOption = Annotated[
    PullMode,
    Parameter(name="--mode", help="Integrate diverged history by merge or rebase"),
]


def _describe_prediction(prediction: PullPrediction) -> str:
    if prediction.upstream is None:
        return "No upstream branch."
    lines = [
        f"Upstream: {prediction.upstream}",
        f"Ahead: {prediction.ahead}, behind: {prediction.behind}",
        f"Action: {prediction.action.value}",
    ]
    lines.extend(f"Conflict: {path}" for path in prediction.conflict_files)
    return "\n".join(lines)


@app.command(name="predict")
def _predict(
    repo: RepoArgument = Path(),
    *,
    remote: RemoteOption = DEFAULT_REMOTE,
    mode: ModeOption = PullMode.MERGE,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Fetch and predict what a pull would do

    Args:
        repo: Repository working tree root.
        remote: Remote to fetch.
        mode: How diverged history would be integrated.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        prediction = conductor.predict_pull(repo_root(repo), remote, mode)
    print(render(to_plain(prediction), format, text=_describe_prediction(prediction)))


@app.command(name="run")
def _run(
    repo: RepoArgument = Path(),
    *,
    remote: RemoteOption = DEFAULT_REMOTE,
    mode: ModeOption = PullMode.MERGE,
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Pull the current branch

    Exits with the conflicts code when the pull stops on conflicts.

    Args:
        repo: Repository working tree root.
        remote: Remote to pull from.
        mode: How diverged history is integrated.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        result = conductor.pull(repo_root(repo), remote, mode)

    lines = [result.message or "Pulled."]
    lines.extend(f"Conflict: {path}" for path in result.conflict_files)
    print(render(to_plain(result), format, text="\n".join(lines)))
    if result.status is PullStatus.CONFLICTS:
        raise SystemExit(ExitCode.CONFLICTS)


@app.command(name="preview")
def _preview(
    upstream: Annotated[str, Parameter(help="Incoming branch or commit")],
    path: Annotated[str, Parameter(help="Path relative to the repository root")],
    repo: RepoArgument = Path(),
) -> None:
    """Preview merging one file from the upstream, with diff3 markers

    Args:
        upstream: Incoming branch or commit.
        path: Path relative to the repository root.
        repo: Repository working tree root.
    """
    with handle_errors(), open_conductor() as conductor:
        preview = conductor.conflict_preview(repo_root(repo), upstream, path)
    print(preview, end="")


@app.command(name="fetch")
def _fetch(
    repo: RepoArgument = Path(),
    *,
    remote: RemoteOption = DEFAULT_REMOTE,
) -> None:
    """Fetch a remote

    Args:
        repo: Repository working tree root.
        remote: Remote to fetch.
    """
    with handle_errors(), open_conductor() as conductor:
        future = conductor.fetch_in_background(repo_root(repo), remote)
        output = future.result()
    print(output or f"Fetched {remote}.")
