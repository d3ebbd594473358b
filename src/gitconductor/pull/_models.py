"""Pull prediction and result models."""

from dataclasses import dataclass

from gitconductor.enums import PullAction, PullMode, PullStatus


@dataclass(frozen=True, slots=True)
class PullPrediction:
    """What a pull would do, computed after fetching.

    Attributes:
        upstream: Upstream branch, or None when the branch has none.
        ahead: Local commits missing upstream.
        behind: Upstream commits missing locally.
        action: Predicted effect.
        conflict_files: Paths a merge of both sides would conflict on.
    """

    upstream: str | None
    ahead: int
    behind: int
    action: PullAction
    conflict_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PullResult:
    """Outcome of a pull.

    Attributes:
        status: ``ok`` or ``conflicts``.
        operation: How history was integrated.
        message: Git's output or diagnostic.
        conflict_files: Unmerged paths when the pull stopped on conflicts.
    """

    status: PullStatus
    operation: PullMode
    message: str
    conflict_files: tuple[str, ...] = ()
