"""Interactive rebase data models."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gitconductor.enums import RebaseAction, RebaseSessionStatus
from gitconductor.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True, slots=True)
class RebaseTodoEntry:
    """One client-supplied line of an interactive rebase plan.

    Attributes:
        action: What to do with the commit.
        hash: Commit hash, full or abbreviated.
        subject: Original subject, copied into the native todo line.
        new_message: Replacement commit message.
        new_author: Replacement author in ``Name <email>`` form.
    """

    action: RebaseAction
    hash: str
    subject: str = ""
    new_message: str | None = None
    new_author: str | None = None

    @classmethod
    def from_mapping(cls, data: "Mapping[str, Any]") -> "RebaseTodoEntry":  # pyright: ignore[reportExplicitAny]
        """Build an entry from a plan file record.

        Unknown actions are treated as ``pick``. Both ``subject`` and
        ``original_message`` are accepted for the subject.

        Raises:
            ValidationError: If the record has no hash.
        """
        raw_hash = data.get("hash")
        if not isinstance(raw_hash, str) or not raw_hash.strip():
            msg = "Every rebase entry needs a commit hash."
            raise ValidationError(msg, field="hash")

        try:
            action = RebaseAction(str(data.get("action", "pick")).strip().lower())
        except ValueError:
            action = RebaseAction.PICK

        subject = data.get("subject", data.get("original_message", ""))
        return cls(
            action=action,
            hash=raw_hash.strip(),
            subject=str(subject or ""),
            new_message=_optional_str(data.get("new_message")),
            new_author=_optional_str(data.get("new_author")),
        )


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


@dataclass(frozen=True, slots=True)
class RewordEntry:
    """Pending message and author override for one commit.

    Attributes:
        message: New message, or None to keep the existing one.
        author: New author, or None to keep the existing one.
    """

    message: str | None = None
    author: str | None = None


@dataclass(frozen=True, slots=True)
class TodoPlan:
    """Native todo lines plus the overrides applied at their edit stops.

    Attributes:
        lines: Todo lines in execution order.
        reword_map: Overrides keyed by commit hash.
    """

    lines: tuple[str, ...] = ()
    reword_map: dict[str, RewordEntry] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return True when every entry was dropped."""
        return not self.lines

    def render(self) -> str:
        """Render the todo file content."""
        return "".join(f"{line}\n" for line in self.lines)


@dataclass(frozen=True, slots=True)
class RebaseSessionState:
    """State of an interactive rebase, derived from the repository.

    Attributes:
        status: Outcome of the last step.
        message: Human-readable summary.
        current_step: Number of the todo line being processed.
        total_steps: Number of todo lines.
        stopped_commit_hash: Commit the rebase stopped at.
        stopped_commit_message: Message of the stopped commit.
        stopped_commit_author: Author of HEAD at the stop.
        conflict_files: Unmerged paths.
    """

    status: RebaseSessionStatus
    message: str
    current_step: int | None = None
    total_steps: int | None = None
    stopped_commit_hash: str | None = None
    stopped_commit_message: str | None = None
    stopped_commit_author: str | None = None
    conflict_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RebaseStatusInfo:
    """Progress of the interactive rebase in a repository, if any."""

    in_progress: bool
    current_step: int | None = None
    total_steps: int | None = None
    stopped_commit_hash: str | None = None
    stopped_commit_message: str | None = None
    stopped_commit_author: str | None = None
    conflict_files: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RebaseCommitInfo:
    """A commit that can be placed in a rebase plan.

    Attributes:
        hash: Full commit hash.
        short_hash: Abbreviated hash.
        subject: First line of the message.
        body: Remaining message lines.
        author_name: Author name.
        author_email: Author email.
        author_date: Author date in strict ISO 8601.
        is_pushed: True if the commit is reachable from a remote-tracking ref.
    """

    hash: str
    short_hash: str
    subject: str
    body: str
    author_name: str
    author_email: str
    author_date: str
    is_pushed: bool = False
