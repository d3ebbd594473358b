"""Rendering of rebase progress for the rebase commands."""

from gitconductor.enums import RebaseSessionStatus
from gitconductor.rebase import RebaseSessionState, RebaseStatusInfo

from .._context import OutputFormat
from .._shared import ExitCode, render, to_plain

_EXIT_CODES = {
    RebaseSessionStatus.COMPLETED: ExitCode.SUCCESS,
    RebaseSessionStatus.STOPPED_AT_EDIT: ExitCode.SUCCESS,
    RebaseSessionStatus.CONFLICTS: ExitCode.CONFLICTS,
    RebaseSessionStatus.ERROR: ExitCode.INTERNAL_ERROR,
}


def describe_progress(state: RebaseSessionState | RebaseStatusInfo) -> list[str]:
    """Describe the step and stopped commit of a rebase."""
    lines: list[str] = []
    if state.current_step is not None and state.total_steps is not None:
        lines.append(f"Step {state.current_step}/{state.total_steps}")
    if state.stopped_commit_hash:
        subject = (state.stopped_commit_message or "").splitlines()
        lines.append(
            f"Stopped at {state.stopped_commit_hash[:12]}"
            + (f" {subject[0]}" if subject else "")
        )
    if state.stopped_commit_author:
        lines.append(f"Author: {state.stopped_commit_author}")
    lines.extend(f"Conflict: {path}" for path in state.conflict_files)
    return lines


def print_session(state: RebaseSessionState, output_format: OutputFormat) -> ExitCode:
    """Print a rebase session state and return the matching exit code."""
    text = "\n".join([state.message, *describe_progress(state)])
    print(render(to_plain(state), output_format, text=text))
    return _EXIT_CODES[state.status]


def print_status(info: RebaseStatusInfo, output_format: OutputFormat) -> None:
    """Print the progress of the rebase, if any."""
    if info.in_progress:
        text = "\n".join(["Interactive rebase in progress.", *describe_progress(info)])
    else:
        text = "No interactive rebase in progress."
    print(render(to_plain(info), output_format, text=text))
