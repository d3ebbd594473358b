"""Parsers for the index and diff listings used during conflicts."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NameStatusEntry:
    """One ``git diff --name-status -z`` record.

    Attributes:
        status: Status letter with optional score (``M``, ``D``, ``R087``).
        path: Current path.
        old_path: Source path for renames and copies.
    """

    status: str
    path: str
    old_path: str | None = None

    @property
    def is_rename(self) -> bool:
        """Return True for rename records."""
        return self.status.startswith("R")


def parse_null_separated(output: str) -> list[str]:
    """Split NUL-separated output, dropping empty and blank items."""
    return [item for item in output.split("\0") if item.strip()]


def parse_unmerged_names(output: str) -> list[str]:
    """Parse ``git diff --name-only -z --diff-filter=U`` into sorted unique paths."""
    return sorted(set(parse_null_separated(output)))


def parse_ls_files_unmerged(output: str) -> dict[str, frozenset[int]]:
    """Parse ``git ls-files -u -z`` into the stages present per path.

    Records have the form ``<mode> <object> <stage>\\t<path>``. Records with
    an unparseable or zero stage are ignored.
    """
    stages: dict[str, set[int]] = {}
    for record in output.split("\0"):
        meta, sep, path = record.partition("\t")
        fields = meta.split()
        if not sep or not path.strip() or len(fields) < 3:  # noqa: PLR2004
            continue
        try:
            stage = int(fields[2])
        except ValueError:
            continue
        if stage == 0:
            continue
        stages.setdefault(path, set()).add(stage)
    return {path: frozenset(found) for path, found in stages.items()}


def parse_name_status_z(output: str) -> list[NameStatusEntry]:
    """Parse ``git diff --name-status -z`` output.

    Rename and copy records carry two paths (source, then destination).
    """
    tokens = output.split("\0")
    entries: list[NameStatusEntry] = []
    index = 0
    while index < len(tokens):
        status = tokens[index].strip()
        index += 1
        if not status:
            continue
        if status[0] in "RC":
            old_path = tokens[index] if index < len(tokens) else ""
            new_path = tokens[index + 1] if index + 1 < len(tokens) else ""
            index += 2
            if old_path and new_path:
                entries.append(NameStatusEntry(status, new_path, old_path))
            continue
        path = tokens[index] if index < len(tokens) else ""
        index += 1
        if path:
            entries.append(NameStatusEntry(status, path))
    return entries


def find_rename_target(entries: list[NameStatusEntry], path: str) -> str | None:
    """Return the destination of a rename whose source is ``path``."""
    for entry in entries:
        if entry.is_rename and entry.old_path == path:
            return entry.path
    return None
