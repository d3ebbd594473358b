"""Parsers for ``rev-list --count``, ``merge-tree`` and pull diagnostics."""

import re

_STAGE_RECORD = re.compile(r"^[0-7]{6} [0-9a-f]{7,64} [123]\t(?P<path>.+)$")
_MERGE_CONFLICT_IN = "Merge conflict in "


def parse_left_right_count(output: str) -> tuple[int, int]:
    """Parse ``rev-list --left-right --count upstream...HEAD``.

    Returns:
        ``(behind, ahead)``. Missing or malformed numbers count as zero.

    Examples:
        >>> parse_left_right_count("3\\t1\\n")
        (3, 1)
        >>> parse_left_right_count("")
        (0, 0)
    """
    parts = output.split()

    def number(index: int) -> int:
        try:
            return max(int(parts[index]), 0)
        except (IndexError, ValueError):
            return 0

    return number(0), number(1)


def parse_conflict_messages(text: str) -> list[str]:
    """Extract paths from ``CONFLICT (...)`` lines, in order of appearance.

    ``Merge conflict in <path>`` names the path at the end of the line. The
    other kinds (modify/delete, rename/delete, ...) start their description
    with the path.

    Examples:
        >>> parse_conflict_messages("CONFLICT (content): Merge conflict in a.txt")
        ['a.txt']
        >>> parse_conflict_messages(
        ...     "CONFLICT (modify/delete): b.txt deleted in HEAD and modified in 1a2b3c."
        ... )
        ['b.txt']
    """
    paths: list[str] = []
    for line in text.splitlines():
        if "CONFLICT" not in line:
            continue
        _, found, rest = line.partition(_MERGE_CONFLICT_IN)
        if found:
            path = rest.strip()
        else:
            _, _, description = line.partition("):")
            words = description.split()
            path = words[0].strip(":") if words else ""
        if path and path not in paths:
            paths.append(path)
    return paths


def parse_merge_tree_conflicts(output: str) -> list[str]:
    """Parse ``merge-tree --write-tree --messages`` output into conflicted paths.

    The output starts with the tree id, followed by one
    ``<mode> <object> <stage>\\t<path>`` record per conflicted stage and then
    the informational messages. Both the stage records and the ``CONFLICT``
    messages contribute paths.

    Returns:
        Sorted unique paths.
    """
    paths: set[str] = set()
    lines = output.splitlines()
    for line in lines[1:]:
        match = _STAGE_RECORD.match(line)
        if match is not None:
            paths.add(match.group("path"))
    paths.update(parse_conflict_messages(output))
    return sorted(paths)
