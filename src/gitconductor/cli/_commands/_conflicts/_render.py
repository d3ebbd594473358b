"""Rendering of conflict state for the conflicts commands."""

from gitconductor.conflicts import ConflictState

from .._context import OutputFormat
from .._shared import ExitCode, render, to_plain


def describe_state(state: ConflictState) -> str:
    """Render a conflict state as human-readable text."""
    if not state.in_progress and not state.files:
        return "No operation in progress."
    lines = [f"Operation: {state.operation.value}"]
    if not state.files:
        lines.append("No conflicted files.")
    for entry in state.files:
        stages = ",".join(str(stage) for stage in sorted(entry.stages))
        lines.append(f"{entry.status} {entry.path} (stages {stages or '-'})")
    return "\n".join(lines)


def print_state(state: ConflictState, output_format: OutputFormat) -> ExitCode:
    """Print a conflict state and return CONFLICTS while paths stay unmerged."""
    rows = [
        [entry.status, entry.path, ",".join(str(s) for s in sorted(entry.stages))]
        for entry in state.files
    ]
    print(
        render(
            to_plain(state),
            output_format,
            text=describe_state(state),
            table=(["Status", "Path", "Stages"], rows),
        )
    )
    return ExitCode.CONFLICTS if state.files else ExitCode.SUCCESS
