"""Status data models."""

from dataclasses import dataclass

_RENAME_OR_COPY = frozenset("RC")


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One changed path in the working copy.

    Attributes:
        status: Two-letter porcelain code (index column then worktree column).
        path: Current path, relative to the repository root.
        old_path: Previous path for renames and copies.
    """

    status: str
    path: str
    old_path: str | None = None

    @property
    def is_rename_or_copy(self) -> bool:
        """Return True if either status column is a rename or copy."""
        return any(code in _RENAME_OR_COPY for code in self.status)

    @property
    def is_unmerged(self) -> bool:
        """Return True for the unmerged combinations (DD, AU, UD, UA, DU, AA, UU)."""
        return "U" in self.status or self.status in ("DD", "AA")

    @property
    def is_deletion(self) -> bool:
        """Return True if either column reports a deletion."""
        return "D" in self.status

    @property
    def is_addition(self) -> bool:
        """Return True for untracked paths and additions still present on disk.

        An ``AD`` entry was staged and then removed from the working tree, so
        there is no file to compare against a deletion.
        """
        if self.status == "??":
            return True
        return "A" in self.status and self.worktree_code != "D"

    @property
    def worktree_code(self) -> str:
        """Return the worktree column of the status code."""
        return self.status[1:2]
