"""Conflict state data models."""

from dataclasses import dataclass, field

from gitconductor.enums import ConflictKind, ConflictOperationKind


@dataclass(frozen=True, slots=True)
class OperationSentinels:
    """Presence of the sentinels that identify an in-flight operation.

    Attributes:
        applying_marker: ``rebase-apply/applying`` exists (``git am``).
        rebase_head: ``REBASE_HEAD`` resolves.
        rebase_merge_dir: ``rebase-merge/`` exists (merge backend rebase).
        rebase_apply_dir: ``rebase-apply/`` exists without the applying
            marker (apply backend rebase).
        merge_head: ``MERGE_HEAD`` resolves.
        cherry_pick_head: ``CHERRY_PICK_HEAD`` resolves.
    """

    applying_marker: bool = False
    rebase_head: bool = False
    rebase_merge_dir: bool = False
    rebase_apply_dir: bool = False
    merge_head: bool = False
    cherry_pick_head: bool = False


@dataclass(frozen=True, slots=True)
class ConflictFileEntry:
    """An unmerged path.

    Attributes:
        path: Path relative to the repository root.
        status: Two-letter porcelain code, ``U`` when unavailable.
        stages: Index stages present (1 base, 2 ours, 3 theirs).
    """

    path: str
    status: str = "U"
    stages: frozenset[int] = field(default_factory=frozenset)


@dataclass(frozen=True, slots=True)
class ConflictState:
    """Snapshot of the repository's conflict situation.

    Attributes:
        in_progress: True when a composite operation is active.
        operation: The active operation.
        files: Unmerged paths, sorted by path.
    """

    in_progress: bool
    operation: ConflictOperationKind
    files: tuple[ConflictFileEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class ConflictShape:
    """Structural facts about one conflicted path, without file contents.

    Attributes:
        path: The conflicted path.
        stages: Index stages present for the path.
        theirs_ref: First resolvable of MERGE_HEAD, CHERRY_PICK_HEAD,
            REBASE_HEAD, or None.
        rename_target: Path the incoming side renamed ``path`` to, if any.
        ours_deleted: Ours has no version and HEAD does not contain the path.
        theirs_deleted: The incoming side removed the path without renaming.
    """

    path: str
    stages: frozenset[int]
    theirs_ref: str | None = None
    rename_target: str | None = None
    ours_deleted: bool = False
    theirs_deleted: bool = False

    @property
    def has_ours(self) -> bool:
        """Return True if the ours stage is present."""
        return 2 in self.stages  # noqa: PLR2004

    @property
    def has_theirs(self) -> bool:
        """Return True if the theirs stage is present."""
        return 3 in self.stages  # noqa: PLR2004


@dataclass(frozen=True, slots=True)
class ConflictFileVersions:
    """The four versions of a conflicted path and its classification.

    Attributes:
        base: Common ancestor content (stage 1).
        ours: Local content (stage 2).
        theirs: Incoming content (stage 3, or the rename target under the
            incoming reference).
        working: Current working tree content.
        ours_path: Path of the ours version.
        theirs_path: Path of the theirs version (differs for renames).
        ours_deleted: The local side deleted the path.
        theirs_deleted: The incoming side deleted the path.
        conflict_kind: Shape of the conflict.
    """

    base: str | None
    ours: str | None
    theirs: str | None
    working: str | None
    ours_path: str
    theirs_path: str
    ours_deleted: bool = False
    theirs_deleted: bool = False
    conflict_kind: ConflictKind = ConflictKind.TEXT
