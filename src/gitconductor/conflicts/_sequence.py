"""Continue, abort, and skip for the active composite operation.

Every command runs with all editors replaced by a no-op so git never waits
for terminal input. After a successful command the sentinels are read
again: a zero exit status from ``--continue`` can mean the sequence stopped
at its next step rather than finished.
"""

from typing import TYPE_CHECKING

from gitconductor.enums import ConflictOperationKind
from gitconductor.exceptions import NoOperationInProgressError, ValidationError
from gitconductor.git import MAILBOX_CONTINUE, MERGE_CONTINUE

from ._detect import current_operation
from ._state import get_conflict_state

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from gitconductor.git import GitResult, GitRunner

    from ._models import ConflictState

NO_OPERATION_MESSAGE = "No merge, rebase, cherry-pick or patch apply is in progress."

_SUBCOMMANDS: dict[ConflictOperationKind, str] = {
    ConflictOperationKind.MERGE: "merge",
    ConflictOperationKind.REBASE: "rebase",
    ConflictOperationKind.CHERRY_PICK: "cherry-pick",
    ConflictOperationKind.MAILBOX_APPLY: "am",
}


def _require_operation(runner: "GitRunner", repo_path: "str | Path") -> ConflictOperationKind:
    operation = current_operation(runner, repo_path)
    if operation is ConflictOperationKind.NONE:
        raise NoOperationInProgressError(NO_OPERATION_MESSAGE)
    return operation


def _finish(
    runner: "GitRunner",
    repo_path: "str | Path",
    result: "GitResult",
    operation: ConflictOperationKind,
    action: str,
) -> "ConflictState":
    if not result.ok:
        raise result.to_error()
    if runner.logger is not None:
        runner.logger.info(
            "operation_sequenced",
            repo=str(repo_path),
            operation=operation.value,
            action=action,
        )
    return get_conflict_state(runner, repo_path)


def continue_operation(runner: "GitRunner", repo_path: "str | Path") -> "ConflictState":
    """Continue the active operation after its conflicts were resolved.

    Merge and mailbox continuation fall back to their legacy spellings on
    git releases that reject ``--continue``.

    Returns:
        The conflict state after continuing.

    Raises:
        NoOperationInProgressError: If nothing is in progress.
        GitCommandError: If git refuses to continue.
    """
    operation = _require_operation(runner, repo_path)
    env = runner.no_editor_env()

    if operation is ConflictOperationKind.MERGE:
        result = MERGE_CONTINUE.run(runner, repo_path, env=env)
    elif operation is ConflictOperationKind.MAILBOX_APPLY:
        result = MAILBOX_CONTINUE.run(runner, repo_path, env=env)
    else:
        result = runner.execute(
            repo_path, [_SUBCOMMANDS[operation], "--continue"], env=env
        )
    return _finish(runner, repo_path, result, operation, "continue")


def abort_operation(
    runner: "GitRunner",
    repo_path: "str | Path",
    *,
    on_rebase_abort: "Callable[[], None] | None" = None,
) -> "ConflictState":
    """Abort the active operation and restore the pre-operation state.

    Args:
        runner: Git runner.
        repo_path: Repository root.
        on_rebase_abort: Called after a rebase was aborted, used to discard
            pending interactive rebase state.

    Raises:
        NoOperationInProgressError: If nothing is in progress.
        GitCommandError: If git refuses to abort.
    """
    operation = _require_operation(runner, repo_path)
    result = runner.execute(
        repo_path, [_SUBCOMMANDS[operation], "--abort"], env=runner.no_editor_env()
    )
    if result.ok and operation is ConflictOperationKind.REBASE and on_rebase_abort:
        on_rebase_abort()
    return _finish(runner, repo_path, result, operation, "abort")


def skip_operation(runner: "GitRunner", repo_path: "str | Path") -> "ConflictState":
    """Skip the current step of a rebase, cherry-pick, or mailbox apply.

    Raises:
        NoOperationInProgressError: If nothing is in progress.
        ValidationError: If the active operation is a merge.
        GitCommandError: If git refuses to skip.
    """
    operation = _require_operation(runner, repo_path)
    if operation is ConflictOperationKind.MERGE:
        msg = "A merge has no step to skip. Abort it instead."
        raise ValidationError(msg, field="operation")
    result = runner.execute(
        repo_path, [_SUBCOMMANDS[operation], "--skip"], env=runner.no_editor_env()
    )
    return _finish(runner, repo_path, result, operation, "skip")
