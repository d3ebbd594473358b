"""Enumerations shared across gitconductor modules."""

from enum import StrEnum


class ConflictOperationKind(StrEnum):
    """Composite git operation that can leave conflicts behind.

    Detection is mutually exclusive and follows a fixed priority order,
    see ``gitconductor.conflicts.detect_operation``.
    """

    NONE = "none"
    MERGE = "merge"
    REBASE = "rebase"
    CHERRY_PICK = "cherry-pick"
    MAILBOX_APPLY = "am"


class ConflictKind(StrEnum):
    """Shape of a single conflicted path."""

    TEXT = "text"
    RENAME = "rename"
    MODIFY_DELETE = "modify-delete"


class ConflictSide(StrEnum):
    """One side of a two-way conflict choice."""

    OURS = "ours"
    THEIRS = "theirs"


class RebaseAction(StrEnum):
    """Action for a single entry of an interactive rebase plan."""

    PICK = "pick"
    REWORD = "reword"
    EDIT = "edit"
    SQUASH = "squash"
    FIXUP = "fixup"
    DROP = "drop"


class RebaseSessionStatus(StrEnum):
    """Outcome of driving an interactive rebase one step further."""

    COMPLETED = "completed"
    STOPPED_AT_EDIT = "stopped_at_edit"
    CONFLICTS = "conflicts"
    ERROR = "error"


class PatchMethod(StrEnum):
    """How a patch file is applied."""

    APPLY = "apply"
    MAILBOX = "am"


class PatchApplyStatus(StrEnum):
    """Result status of applying a patch."""

    APPLIED = "applied"
    CONFLICTS = "conflicts"


class PullMode(StrEnum):
    """How diverged history is integrated on pull."""

    MERGE = "merge"
    REBASE = "rebase"


class PullAction(StrEnum):
    """Predicted effect of a pull."""

    NO_UPSTREAM = "no-upstream"
    NOOP = "noop"
    FAST_FORWARD = "fast-forward"
    REBASE = "rebase"
    MERGE_COMMIT = "merge-commit"


class PullStatus(StrEnum):
    """Result status of a pull."""

    OK = "ok"
    CONFLICTS = "conflicts"
