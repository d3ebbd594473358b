# pyright: reportUnusedCallResult=false, reportUnusedFunction=false
# ruff: noqa: D415
"""Patch commands: dry-run prediction, application and export."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from gitconductor.enums import PatchApplyStatus
from gitconductor.patches import PatchPrediction

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
    name="patch",
    help="Predict, apply and export patch files",
    help_on_error=True,
)

PatchArgument = Annotated[Path, Parameter(help="Patch file")]
MethodOption = Annotated[
    str,
    Parameter(
        name=["--method", "-m"],
        help="'apply' for a plain diff, 'am' for mailbox commits",
    ),
]


def _describe_prediction(prediction: PatchPrediction) -> str:
    verdict = "Patch applies cleanly." if prediction.ok else "Patch does not apply."
    lines = [verdict]
    if prediction.subject:
        lines.append(f"Subject: {prediction.subject}")
    lines.extend(f"File: {path}" for path in prediction.files)
    lines.extend(f"Conflict: {path}" for path in prediction.conflict_files)
    if not prediction.ok:
        lines.append(prediction.message)
    return "\n".join(lines)


@app.command(name="predict")
def _predict(
    patch: PatchArgument,
    repo: RepoArgument = Path(),
    *,
    method: MethodOption = "apply",
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Check whether a patch applies, without changing the repository

    Exits with the conflicts code when the patch would not apply.

    Args:
        patch: Patch file.
        repo: Repository working tree root.
        method: How the patch would be applied.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        prediction = conductor.predict_patch(repo_root(repo), patch, method)
    print(render(to_plain(prediction), format, text=_describe_prediction(prediction)))
    raise SystemExit(ExitCode.SUCCESS if prediction.ok else ExitCode.CONFLICTS)


@app.command(name="apply")
def _apply(
    patch: PatchArgument,
    repo: RepoArgument = Path(),
    *,
    method: MethodOption = "apply",
    format: FormatOption = OutputFormat.TEXT,
) -> None:
    """Apply a patch to the working tree or as mailbox commits

    Args:
        patch: Patch file.
        repo: Repository working tree root.
        method: How the patch is applied.
        format: Output format.
    """
    with handle_errors(), open_conductor() as conductor:
        result = conductor.apply_patch(repo_root(repo), patch, method)

    lines = [result.message or f"Patch {result.status.value}."]
    lines.extend(f"Conflict: {path}" for path in result.conflict_files)
    print(render(to_plain(result), format, text="\n".join(lines)))
    if result.status is PatchApplyStatus.CONFLICTS:
        raise SystemExit(ExitCode.CONFLICTS)


@app.command(name="format")
def _format(
    commit: Annotated[str, Parameter(help="Commit to export")],
    output: Annotated[Path, Parameter(help="Patch file to write")],
    repo: RepoArgument = Path(),
) -> None:
    """Export a single commit as a mailbox patch file

    Args:
        commit: Commit to export.
        output: Patch file to write.
        repo: Repository working tree root.
    """
    with handle_errors(), open_conductor() as conductor:
        written = conductor.format_patch_to_file(repo_root(repo), commit, output)
    print(f"Wrote {written}.")
