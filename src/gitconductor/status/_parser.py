"""Parsers for ``git status`` and ``git hash-object`` output."""

from typing import TYPE_CHECKING

from ._models import StatusEntry

if TYPE_CHECKING:
    from collections.abc import Sequence


def parse_porcelain_z(output: bytes | str) -> list[StatusEntry]:
    """Parse ``git status --porcelain -z`` output.

    Records are NUL-terminated ``XY <path>``. A record whose code contains
    ``R`` or ``C`` is followed by one more NUL-terminated token holding the
    previous path, so ``path`` is always the current name. Malformed records
    are skipped.
    """
    text = (
        output.decode("utf-8", errors="replace") if isinstance(output, bytes) else output
    )
    tokens = text.split("\0")
    entries: list[StatusEntry] = []

    index = 0
    while index < len(tokens):
        record = tokens[index]
        index += 1
        if len(record) < 4:  # noqa: PLR2004
            continue

        status, path = record[:2], record[3:]
        if not any(code in "RC" for code in status):
            if path.strip():
                entries.append(StatusEntry(status=status, path=path))
            continue

        old_path = tokens[index] if index < len(tokens) else ""
        index += 1
        if path.strip():
            entries.append(
                StatusEntry(status=status, path=path, old_path=old_path or None)
            )
        elif old_path.strip():
            entries.append(StatusEntry(status=status, path=old_path))

    return entries


def parse_hash_object(paths: "Sequence[str]", output: str) -> dict[str, str]:
    """Pair ``git hash-object`` output lines with the paths that produced them.

    Returns an empty mapping if the number of lines does not match.
    """
    ids = [line.strip() for line in output.splitlines() if line.strip()]
    if len(ids) != len(paths):
        return {}
    return dict(zip(paths, ids, strict=True))
