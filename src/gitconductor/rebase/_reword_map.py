"""Reword map side file.

The map lives inside the git directory for the duration of one interactive
rebase, so a process restarted mid-rebase still knows which edit stops to
amend automatically. The file is JSON::

    {"<commit hash>": {"message": "...", "author": "Name <email>"}}
"""

import os
from typing import TYPE_CHECKING, Any

import orjson

from gitconductor.exceptions import RewordMapError
from gitconductor.git import git_path

from ._models import RewordEntry

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from gitconductor.git import GitRunner

DEFAULT_REWORD_MAP_FILENAME = "gitconductor-reword-map.json"


def reword_map_path(
    runner: "GitRunner",
    repo_path: "str | Path",
    filename: str = DEFAULT_REWORD_MAP_FILENAME,
) -> "Path":
    """Return the location of the reword map inside the git directory."""
    return git_path(runner, repo_path, filename)


def save_reword_map(path: "Path", entries: "Mapping[str, RewordEntry]") -> None:
    """Write the reword map, replacing any previous file.

    Raises:
        RewordMapError: If the file cannot be written.
    """
    payload = {
        commit: {"message": entry.message, "author": entry.author}
        for commit, entry in entries.items()
    }
    tmp = path.with_name(f"{path.name}.tmp")
    try:
        _ = tmp.write_bytes(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS))
        _ = os.replace(tmp, path)
    except OSError as e:
        msg = f"Failed to write reword map: {e}"
        raise RewordMapError(msg, path=path) from e


def _optional(value: Any) -> str | None:  # pyright: ignore[reportExplicitAny, reportAny]
    return value if isinstance(value, str) else None


def load_reword_map(path: "Path") -> dict[str, RewordEntry]:
    """Read the reword map. A missing file is an empty map.

    Raises:
        RewordMapError: If the file exists but is unreadable or malformed.
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return {}
    except OSError as e:
        msg = f"Failed to read reword map: {e}"
        raise RewordMapError(msg, path=path) from e

    try:
        data = orjson.loads(raw)  # pyright: ignore[reportAny]
    except orjson.JSONDecodeError as e:
        msg = f"Reword map is not valid JSON: {e}"
        raise RewordMapError(msg, path=path) from e

    if not isinstance(data, dict):
        msg = "Reword map must be a JSON object"
        raise RewordMapError(msg, path=path)

    entries: dict[str, RewordEntry] = {}
    for commit, value in data.items():  # pyright: ignore[reportUnknownVariableType]
        if not isinstance(commit, str) or not isinstance(value, dict):
            msg = f"Malformed reword map entry: {commit!r}"
            raise RewordMapError(msg, path=path)
        entries[commit] = RewordEntry(
            message=_optional(value.get("message")),  # pyright: ignore[reportUnknownMemberType]
            author=_optional(value.get("author")),  # pyright: ignore[reportUnknownMemberType]
        )
    return entries


def delete_reword_map(path: "Path") -> bool:
    """Delete the reword map. Returns True if a file was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def lookup_reword(
    entries: "Mapping[str, RewordEntry]", stopped_sha: str | None
) -> RewordEntry | None:
    """Find the override for a stopped commit.

    Either hash may be abbreviated, so a key matches when one is a prefix of
    the other.

    Examples:
        >>> lookup_reword({"abc123": RewordEntry(message="m")}, "abc123def").message
        'm'
        >>> lookup_reword({"abc123def": RewordEntry()}, "fff") is None
        True
    """
    if not stopped_sha:
        return None
    stopped = stopped_sha.strip()
    if not stopped:
        return None
    for commit, entry in entries.items():
        if commit and (commit.startswith(stopped) or stopped.startswith(commit)):
            return entry
    return None
