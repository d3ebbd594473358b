"""Interactive rebase orchestration.

A plan is injected by replacing git's sequence editor with a command that
copies a pre-built todo file over the one git asks to be edited. Every other
editor is replaced with a no-op, so ``edit`` stops never block.

Rewords and author changes are implemented as ``edit`` stops with an entry in
the reword map. The auto-continue loop amends those stops and continues until
the rebase completes, hits conflicts, or reaches an ``edit`` the user asked
for. The exit status of git is never taken as proof of completion: the state
is always re-derived from the sentinel files.
"""

import shlex
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from gitconductor.conflicts import current_operation
from gitconductor.enums import ConflictOperationKind, RebaseSessionStatus
from gitconductor.exceptions import (
    NoOperationInProgressError,
    OperationInProgressError,
    ValidationError,
)
from gitconductor.git import ensure_is_git_worktree
from gitconductor.utils import require_text

from ._models import RebaseSessionState
from ._reword_map import (
    DEFAULT_REWORD_MAP_FILENAME,
    delete_reword_map,
    load_reword_map,
    lookup_reword,
    reword_map_path,
    save_reword_map,
)
from ._state import derive_rebase_state, rebase_in_progress
from ._todo import build_todo_plan

if TYPE_CHECKING:
    from collections.abc import Sequence

    from gitconductor.git import GitResult, GitRunner

    from ._models import RebaseTodoEntry, RewordEntry

NO_REBASE_MESSAGE = "No interactive rebase in progress."

_REBASE_CONFIG = ("rebase.missingCommitsCheck=ignore",)


def amend_args(message: str | None, author: str | None) -> list[str]:
    """Build the ``commit --amend`` arguments for a message and author override.

    A blank message keeps the existing one. A blank author is ignored.

    Examples:
        >>> amend_args("New subject", None)
        ['commit', '--amend', '--no-verify', '-m', 'New subject']
        >>> amend_args(None, "A U Thor <a@example.com>")
        ['commit', '--amend', '--no-verify', '--no-edit', '--author', 'A U Thor <a@example.com>']
    """
    args = ["commit", "--amend", "--no-verify"]
    if message is not None and message.strip():
        args.extend(["-m", message])
    else:
        args.append("--no-edit")
    if author is not None and author.strip():
        args.extend(["--author", author.strip()])
    return args


def sequence_editor_command(todo_file: Path) -> str:
    """Return a sequence editor that copies ``todo_file`` over git's todo.

    Git runs the editor through a shell and appends the todo path.
    """
    return f"cp {shlex.quote(todo_file.as_posix())}"


def _check_no_operation(runner: "GitRunner", repo_path: str | Path) -> None:
    operation = current_operation(runner, repo_path)
    if operation is ConflictOperationKind.NONE and not rebase_in_progress(
        runner, repo_path
    ):
        return
    if operation in (ConflictOperationKind.REBASE, ConflictOperationKind.NONE):
        msg = "A rebase is already in progress."
        raise OperationInProgressError(msg, operation=ConflictOperationKind.REBASE.value)
    if operation is ConflictOperationKind.MERGE:
        msg = "A merge is in progress. Resolve it first."
        raise OperationInProgressError(msg, operation=operation.value)
    msg = f"A {operation.value} operation is in progress. Resolve it first."
    raise OperationInProgressError(msg, operation=operation.value)


def _log(runner: "GitRunner", event: str, repo_path: str | Path, **kw: object) -> None:
    if runner.logger is not None:
        runner.logger.info(event, repo=str(repo_path), **kw)


def _amend(
    runner: "GitRunner", repo_path: str | Path, message: str | None, author: str | None
) -> str:
    result = runner.execute(
        repo_path, amend_args(message, author), env=runner.no_editor_env()
    )
    if not result.ok:
        raise result.to_error()
    return result.stdout.strip() or result.stderr.strip()


def _continue(
    runner: "GitRunner", repo_path: str | Path, flag: str = "--continue"
) -> "GitResult":
    return runner.execute(repo_path, ["rebase", flag], env=runner.no_editor_env())


def _settle(
    runner: "GitRunner",
    repo_path: str | Path,
    map_path: Path,
    result: "GitResult | None",
    previous_stop: str | None,
) -> RebaseSessionState:
    """Drive the rebase forward through every stop that has an override.

    Args:
        runner: Git runner.
        repo_path: Repository root.
        map_path: Reword map file.
        result: Outcome of the git command that led here, if any.
        previous_stop: Commit the rebase was stopped at before that command.

    Returns:
        The state once the rebase completes, conflicts, reaches an edit
        without an override, or makes no progress.
    """
    reword_map: dict[str, RewordEntry] = load_reword_map(map_path)

    while True:
        state = derive_rebase_state(runner, repo_path)

        if state.status is RebaseSessionStatus.COMPLETED:
            _ = delete_reword_map(map_path)
            _log(runner, "rebase_completed", repo_path)
            return state

        if state.status is RebaseSessionStatus.CONFLICTS:
            _log(
                runner,
                "rebase_stopped",
                repo_path,
                status=state.status.value,
                conflict_files=list(state.conflict_files),
            )
            return state

        # A failed continue that left the rebase at the same stop made no
        # progress. Report git's diagnostic instead of amending again.
        if (
            result is not None
            and not result.ok
            and state.stopped_commit_hash == previous_stop
        ):
            return RebaseSessionState(
                status=RebaseSessionStatus.ERROR,
                message=result.diagnostic or state.message,
                current_step=state.current_step,
                total_steps=state.total_steps,
                stopped_commit_hash=state.stopped_commit_hash,
                stopped_commit_message=state.stopped_commit_message,
                stopped_commit_author=state.stopped_commit_author,
            )

        override = lookup_reword(reword_map, state.stopped_commit_hash)
        if override is None:
            _log(
                runner,
                "rebase_stopped",
                repo_path,
                status=state.status.value,
                stopped_commit=state.stopped_commit_hash,
            )
            return state

        _ = _amend(runner, repo_path, override.message, override.author)
        _log(
            runner,
            "rebase_auto_amend",
            repo_path,
            stopped_commit=state.stopped_commit_hash,
            message_changed=override.message is not None,
            author_changed=override.author is not None,
        )
        previous_stop = state.stopped_commit_hash
        result = _continue(runner, repo_path)


def start_interactive_rebase(
    runner: "GitRunner",
    repo_path: str | Path,
    onto: str,
    entries: "Sequence[RebaseTodoEntry]",
    *,
    reword_map_filename: str = DEFAULT_REWORD_MAP_FILENAME,
) -> RebaseSessionState:
    """Start an interactive rebase of ``entries`` onto ``onto``.

    When every entry is dropped no rebase runs: the branch is hard reset to
    ``onto`` instead.

    Args:
        runner: Git runner.
        repo_path: Repository root.
        onto: Base the commits are replayed on (exclusive).
        entries: Plan entries, oldest commit first.
        reword_map_filename: Name of the reword map inside the git directory.

    Returns:
        The state after every stop with an override has been handled.

    Raises:
        ValidationError: If ``onto`` is blank or no entries are given.
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        OperationInProgressError: If a rebase or merge is already active.
        GitCommandError: If git refuses to start the rebase.
    """
    ensure_is_git_worktree(runner, repo_path)
    onto = require_text(onto, "onto")
    if not entries:
        msg = "No commits selected for rebase."
        raise ValidationError(msg, field="entries")
    _check_no_operation(runner, repo_path)

    plan = build_todo_plan(entries)
    if plan.is_empty:
        output = runner.run(repo_path, ["reset", "--hard", onto])
        _log(runner, "rebase_completed", repo_path, dropped_all=True, onto=onto)
        return RebaseSessionState(
            status=RebaseSessionStatus.COMPLETED,
            message=output or f"All commits were dropped. Branch reset to {onto}.",
        )

    map_path = reword_map_path(runner, repo_path, reword_map_filename)
    _ = delete_reword_map(map_path)
    if plan.reword_map:
        save_reword_map(map_path, plan.reword_map)

    _log(
        runner,
        "rebase_started",
        repo_path,
        onto=onto,
        steps=len(plan.lines),
        overrides=len(plan.reword_map),
    )

    with tempfile.TemporaryDirectory(prefix="gitconductor-rebase-") as tmp:
        todo_file = Path(tmp) / "git-rebase-todo"
        _ = todo_file.write_text(plan.render(), encoding="utf-8", newline="\n")
        env = {
            **runner.no_editor_env(),
            "GIT_SEQUENCE_EDITOR": sequence_editor_command(todo_file),
        }
        result = runner.execute(
            repo_path,
            ["rebase", "-i", "--autostash", onto],
            env=env,
            config=_REBASE_CONFIG,
        )

    if not result.ok and not rebase_in_progress(runner, repo_path):
        _ = delete_reword_map(map_path)
        raise result.to_error()

    return _settle(runner, repo_path, map_path, None, None)


def continue_interactive_rebase(
    runner: "GitRunner",
    repo_path: str | Path,
    *,
    reword_map_filename: str = DEFAULT_REWORD_MAP_FILENAME,
) -> RebaseSessionState:
    """Continue after an edit stop or resolved conflicts.

    Later stops that have an override are still handled automatically.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        NoOperationInProgressError: If no rebase is active.
    """
    ensure_is_git_worktree(runner, repo_path)
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NO_REBASE_MESSAGE, operation="rebase")

    previous_stop = derive_rebase_state(runner, repo_path).stopped_commit_hash
    result = _continue(runner, repo_path)
    map_path = reword_map_path(runner, repo_path, reword_map_filename)
    return _settle(runner, repo_path, map_path, result, previous_stop)


def skip_interactive_rebase(
    runner: "GitRunner",
    repo_path: str | Path,
    *,
    reword_map_filename: str = DEFAULT_REWORD_MAP_FILENAME,
) -> RebaseSessionState:
    """Drop the commit the rebase is stopped at and carry on.

    Stops after the skipped commit are handled like those after a continue.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        NoOperationInProgressError: If no rebase is active.
    """
    ensure_is_git_worktree(runner, repo_path)
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NO_REBASE_MESSAGE, operation="rebase")

    previous_stop = derive_rebase_state(runner, repo_path).stopped_commit_hash
    result = _continue(runner, repo_path, "--skip")
    map_path = reword_map_path(runner, repo_path, reword_map_filename)
    return _settle(runner, repo_path, map_path, result, previous_stop)


def amend_stopped_commit(
    runner: "GitRunner",
    repo_path: str | Path,
    *,
    message: str | None = None,
    author: str | None = None,
) -> str:
    """Amend the commit the rebase is stopped at.

    Returns:
        Git's output.

    Raises:
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        NoOperationInProgressError: If no rebase is active.
        GitCommandError: If the amend fails.
    """
    ensure_is_git_worktree(runner, repo_path)
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NO_REBASE_MESSAGE, operation="rebase")
    return _amend(runner, repo_path, message, author)


def abort_interactive_rebase(
    runner: "GitRunner",
    repo_path: str | Path,
    *,
    reword_map_filename: str = DEFAULT_REWORD_MAP_FILENAME,
) -> str:
    """Abort the rebase and discard its reword map.

    Raises:
        NoOperationInProgressError: If no rebase is active.
        GitCommandError: If git refuses to abort.
    """
    ensure_is_git_worktree(runner, repo_path)
    if not rebase_in_progress(runner, repo_path):
        raise NoOperationInProgressError(NO_REBASE_MESSAGE, operation="rebase")
    output = runner.run(repo_path, ["rebase", "--abort"], env=runner.no_editor_env())
    _ = delete_reword_map(reword_map_path(runner, repo_path, reword_map_filename))
    _log(runner, "rebase_aborted", repo_path)
    return output
