"""Reconstruction and classification of a conflicted path's versions."""

from typing import TYPE_CHECKING

from gitconductor.enums import ConflictKind
from gitconductor.exceptions import BinaryContentError
from gitconductor.git import path_exists_at, ref_exists
from gitconductor.utils import ensure_rel_path_safe, join_repo_path, require_text

from ._models import ConflictFileVersions, ConflictShape
from ._parser import find_rename_target, parse_name_status_z
from ._state import unmerged_stages

if TYPE_CHECKING:
    from pathlib import Path

    from gitconductor.git import GitRunner

BINARY_UNSUPPORTED_MESSAGE = "Binary file preview is not supported."

THEIRS_REFS = ("MERGE_HEAD", "CHERRY_PICK_HEAD", "REBASE_HEAD")

DEFAULT_RENAME_SIMILARITY = 50

_MISSING_OBJECT_MARKERS = (
    "does not exist in",
    "exists on disk, but not in",
    "path '",
    'path "',
)


def show_path_bytes_or_empty(
    runner: "GitRunner", repo_path: "str | Path", rev: str, path: str
) -> bytes:
    """Return the bytes of ``<rev>:<path>``, or ``b""`` if it does not exist there.

    ``rev`` may be an index stage such as ``:2``.

    Raises:
        GitCommandError: If git fails for any other reason.
    """
    result = runner.execute(repo_path, ["show", f"{rev}:{path}"])
    if result.ok:
        return result.stdout_bytes

    lowered = result.stderr.lower()
    if any(marker in lowered for marker in _MISSING_OBJECT_MARKERS):
        return b""
    raise result.to_error()


def decode_text(data: bytes, path: str) -> str:
    """Decode file content as text.

    Raises:
        BinaryContentError: If the content contains a NUL byte.
    """
    if b"\0" in data:
        raise BinaryContentError(BINARY_UNSUPPORTED_MESSAGE, path=path)
    return data.decode("utf-8", errors="replace")


def resolve_theirs_ref(runner: "GitRunner", repo_path: "str | Path") -> str | None:
    """Return the first resolvable incoming reference."""
    for ref in THEIRS_REFS:
        if ref_exists(runner, repo_path, ref):
            return ref
    return None


def detect_rename_target(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    theirs_ref: str,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> str | None:
    """Find where the incoming side renamed ``path`` to, if it did.

    Diffs HEAD against ``theirs_ref`` with rename detection at the given
    similarity threshold. Failures yield None.
    """
    result = runner.execute(
        repo_path,
        ["diff", "--name-status", "-z", f"-M{similarity}%", "HEAD", theirs_ref],
    )
    if not result.ok:
        return None
    return find_rename_target(parse_name_status_z(result.stdout), path)


def inspect_conflict(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> ConflictShape:
    """Collect the structural facts about a conflicted path.

    A side counts as missing when its index stage is absent. The ours side is
    deleted when HEAD does not contain the path. When theirs is missing, a
    rename on the incoming side is looked for first; without one, the path
    is deleted on that side if the incoming reference does not contain it.
    """
    stages = unmerged_stages(runner, repo_path, [path]).get(path, frozenset())
    theirs_ref = resolve_theirs_ref(runner, repo_path)

    ours_deleted = 2 not in stages and not path_exists_at(  # noqa: PLR2004
        runner, repo_path, "HEAD", path
    )

    rename_target: str | None = None
    theirs_deleted = False
    if 3 not in stages and theirs_ref is not None:  # noqa: PLR2004
        rename_target = detect_rename_target(
            runner, repo_path, path, theirs_ref, similarity=similarity
        )
        if rename_target is None:
            theirs_deleted = not path_exists_at(runner, repo_path, theirs_ref, path)

    return ConflictShape(
        path=path,
        stages=stages,
        theirs_ref=theirs_ref,
        rename_target=rename_target,
        ours_deleted=ours_deleted,
        theirs_deleted=theirs_deleted,
    )


def _read_working(repo_path: "str | Path", path: str) -> bytes | None:
    full = join_repo_path(repo_path, path)
    try:
        return full.read_bytes()
    except (FileNotFoundError, IsADirectoryError):
        return None


def get_conflict_file_versions(
    runner: "GitRunner",
    repo_path: "str | Path",
    path: str,
    *,
    similarity: int = DEFAULT_RENAME_SIMILARITY,
) -> ConflictFileVersions:
    """Fetch base, ours, theirs, and working content and classify the conflict.

    Each stage is fetched independently; a stage that does not exist is
    absent, not an error. Binary content at any stage aborts before
    classification.

    Raises:
        ValidationError: If ``path`` is blank or unsafe.
        BinaryContentError: If any version contains a NUL byte.
        GitCommandError: If git fails while reading a stage.
    """
    path = ensure_rel_path_safe(require_text(path, "path"))
    shape = inspect_conflict(runner, repo_path, path, similarity=similarity)

    raw: dict[str, bytes | None] = {
        "base": show_path_bytes_or_empty(runner, repo_path, ":1", path),
        "ours": show_path_bytes_or_empty(runner, repo_path, ":2", path),
        "theirs": show_path_bytes_or_empty(runner, repo_path, ":3", path),
        "working": _read_working(repo_path, path),
    }
    theirs_path = path
    if shape.rename_target is not None and shape.theirs_ref is not None:
        theirs_path = shape.rename_target
        raw["theirs"] = show_path_bytes_or_empty(
            runner, repo_path, shape.theirs_ref, shape.rename_target
        )

    for data in raw.values():
        if data:
            _ = decode_text(data, path)

    def present(stage: int, key: str) -> str | None:
        data = raw[key]
        if data is None:
            return None
        if stage in shape.stages or (not shape.stages and data):
            return decode_text(data, path)
        return None

    base = present(1, "base")
    ours = present(2, "ours")
    if shape.rename_target is not None:
        theirs_raw = raw["theirs"]
        theirs = decode_text(theirs_raw, path) if theirs_raw else None
    else:
        theirs = present(3, "theirs")
    working_raw = raw["working"]
    working = decode_text(working_raw, path) if working_raw is not None else None

    kind = ConflictKind.RENAME if shape.rename_target is not None else ConflictKind.TEXT
    ours_deleted = shape.ours_deleted
    theirs_deleted = shape.theirs_deleted
    if theirs_deleted:
        kind = ConflictKind.MODIFY_DELETE
    if kind is ConflictKind.TEXT and (ours is None) != (theirs is None):
        kind = ConflictKind.MODIFY_DELETE
        if ours is None:
            ours_deleted = True
        else:
            theirs_deleted = True

    return ConflictFileVersions(
        base=base,
        ours=ours,
        theirs=theirs,
        working=working,
        ours_path=path,
        theirs_path=theirs_path,
        ours_deleted=ours_deleted,
        theirs_deleted=theirs_deleted,
        conflict_kind=kind,
    )

