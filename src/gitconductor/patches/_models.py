"""Patch prediction and application results."""

from dataclasses import dataclass

from gitconductor.enums import PatchApplyStatus, PatchMethod


@dataclass(frozen=True, slots=True)
class PatchPrediction:
    """Outcome of a dry-run check of a patch file.

    Attributes:
        ok: True if the patch applies cleanly to the working tree.
        message: Git's output, ``ok`` on success, or its diagnostic.
        method: Method the patch was checked for.
        files: Paths the patch touches.
        conflict_files: Paths git reported as not applying.
        subject: Subject of the first mailbox message, if any.
    """

    ok: bool
    message: str
    method: PatchMethod
    files: tuple[str, ...] = ()
    conflict_files: tuple[str, ...] = ()
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class PatchApplyResult:
    """Outcome of applying a patch file.

    Attributes:
        status: ``applied`` or ``conflicts``.
        message: Git's output or diagnostic.
        conflict_files: Unmerged paths left by a three-way mailbox apply.
    """

    status: PatchApplyStatus
    message: str
    conflict_files: tuple[str, ...] = ()
