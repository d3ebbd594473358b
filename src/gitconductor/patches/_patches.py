"""Patch prediction, application, and export."""

from pathlib import Path
from typing import TYPE_CHECKING

from gitconductor.conflicts import current_operation, list_unmerged_files
from gitconductor.enums import ConflictOperationKind, PatchApplyStatus, PatchMethod
from gitconductor.exceptions import OperationInProgressError, ValidationError
from gitconductor.git import ensure_is_git_worktree, git_path
from gitconductor.utils import require_text

from ._models import PatchApplyResult, PatchPrediction
from ._parser import (
    extract_diff_payload,
    extract_patch_subject,
    parse_apply_conflicts,
    parse_touched_files,
)

if TYPE_CHECKING:
    from gitconductor.git import GitRunner

MAILBOX_BUSY_MESSAGE = (
    "A previous 'git am' or rebase is still in progress. "
    "Continue or abort it first."
)


def parse_patch_method(value: str | PatchMethod) -> PatchMethod:
    """Parse ``apply`` or ``am``.

    Raises:
        ValidationError: For any other value.
    """
    try:
        return PatchMethod(str(value).strip().lower())
    except ValueError:
        msg = "method must be 'apply' or 'am'"
        raise ValidationError(msg, field="method") from None


def _patch_file(patch_path: str | Path) -> Path:
    text = require_text(str(patch_path) if patch_path else None, "patch_path")
    return Path(text).expanduser().resolve()


def read_patch_text(patch_path: str | Path) -> str:
    """Read a patch file as text, replacing undecodable bytes.

    Raises:
        ValidationError: If the path is blank or the file cannot be read.
    """
    path = _patch_file(patch_path)
    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError as e:
        msg = f"Failed to read patch file: {e}"
        raise ValidationError(msg, field="patch_path") from e


def predict_patch(
    runner: "GitRunner",
    repo_path: str | Path,
    patch_path: str | Path,
    method: str | PatchMethod = PatchMethod.APPLY,
) -> PatchPrediction:
    """Check whether a patch applies without changing the repository.

    Mailbox patches are checked by their diff part, so the prediction for
    ``am`` approximates the three-way apply by a plain one.

    Raises:
        ValidationError: If the path or method is invalid.
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
    """
    ensure_is_git_worktree(runner, repo_path)
    method = parse_patch_method(method)
    text = read_patch_text(patch_path)
    files = tuple(parse_touched_files(text))
    subject = extract_patch_subject(text) if method is PatchMethod.MAILBOX else None
    payload = extract_diff_payload(text) if method is PatchMethod.MAILBOX else text

    result = runner.execute(repo_path, ["apply", "--check", "--", "-"], stdin=payload)
    if result.ok:
        return PatchPrediction(
            ok=True,
            message=result.stdout.strip() or "ok",
            method=method,
            files=files,
            subject=subject,
        )

    diagnostic = result.diagnostic
    return PatchPrediction(
        ok=False,
        message=diagnostic,
        method=method,
        files=files,
        conflict_files=tuple(parse_apply_conflicts(diagnostic)),
        subject=subject,
    )


def _ensure_mailbox_idle(runner: "GitRunner", repo_path: str | Path) -> None:
    operation = current_operation(runner, repo_path)
    if operation in (ConflictOperationKind.MAILBOX_APPLY, ConflictOperationKind.REBASE):
        raise OperationInProgressError(MAILBOX_BUSY_MESSAGE, operation=operation.value)
    if git_path(runner, repo_path, "rebase-apply").exists():
        raise OperationInProgressError(
            MAILBOX_BUSY_MESSAGE, operation=ConflictOperationKind.MAILBOX_APPLY.value
        )


def apply_patch(
    runner: "GitRunner",
    repo_path: str | Path,
    patch_path: str | Path,
    method: str | PatchMethod = PatchMethod.APPLY,
) -> PatchApplyResult:
    """Apply a patch file to the working tree or as commits.

    ``apply`` changes the working tree only. ``am`` creates commits and uses
    the three-way fallback, so a patch that does not apply cleanly leaves
    real conflicts that can be resolved like any other.

    Returns:
        ``applied`` on success, or ``conflicts`` when a mailbox apply
        stopped with unmerged paths.

    Raises:
        ValidationError: If the path or method is invalid.
        NotAWorkingCopyError: If ``repo_path`` is not a working tree root.
        OperationInProgressError: If a mailbox apply or rebase is active.
        GitCommandError: If git fails without leaving conflicts.
    """
    ensure_is_git_worktree(runner, repo_path)
    method = parse_patch_method(method)
    patch_file = _patch_file(patch_path)
    if not patch_file.is_file():
        msg = f"Patch file not found: {patch_file}"
        raise ValidationError(msg, field="patch_path")

    if method is PatchMethod.APPLY:
        args = ["apply", "--", str(patch_file)]
    else:
        _ensure_mailbox_idle(runner, repo_path)
        args = ["am", "-3", "--", str(patch_file)]

    result = runner.execute(repo_path, args, env=runner.no_editor_env())
    if result.ok:
        if runner.logger is not None:
            runner.logger.info(
                "patch_applied",
                repo=str(repo_path),
                method=method.value,
                patch=str(patch_file),
            )
        return PatchApplyResult(
            status=PatchApplyStatus.APPLIED,
            message=result.stdout.strip() or "ok",
        )

    if method is PatchMethod.MAILBOX:
        conflicts = list_unmerged_files(runner, repo_path)
        operation = current_operation(runner, repo_path)
        if conflicts and operation is ConflictOperationKind.MAILBOX_APPLY:
            if runner.logger is not None:
                runner.logger.info(
                    "patch_applied",
                    repo=str(repo_path),
                    method=method.value,
                    patch=str(patch_file),
                    conflict_files=conflicts,
                )
            return PatchApplyResult(
                status=PatchApplyStatus.CONFLICTS,
                message=result.diagnostic,
                conflict_files=tuple(conflicts),
            )
    raise result.to_error()


def format_patch_to_file(
    runner: "GitRunner", repo_path: str | Path, commit: str, out_path: str | Path
) -> Path:
    """Write ``format-patch -1 --stdout <commit>`` to a file.

    Returns:
        The file written.

    Raises:
        ValidationError: If ``commit`` or ``out_path`` is blank.
        GitCommandError: If git fails.
    """
    ensure_is_git_worktree(runner, repo_path)
    commit = require_text(commit, "commit")
    target = Path(require_text(str(out_path) if out_path else None, "out_path"))
    payload = runner.run_raw(repo_path, ["format-patch", "-1", "--stdout", commit])
    target.parent.mkdir(parents=True, exist_ok=True)
    _ = target.write_text(payload, encoding="utf-8", newline="")
    return target
