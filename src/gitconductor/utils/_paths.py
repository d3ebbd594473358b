"""Path helpers for repository keys, log files, and safe relative paths."""

import sys
from pathlib import Path, PurePosixPath

import platformdirs

from gitconductor.exceptions import ValidationError

_CASE_INSENSITIVE_PLATFORMS = ("win32", "cygwin", "darwin")


def get_log_dir() -> Path:
    """Return the platform user log directory for gitconductor."""
    return platformdirs.user_log_path("gitconductor")


def get_default_log_file() -> Path:
    """Return the default log file used when none is configured."""
    return get_log_dir() / "gitconductor.log"


def normalize_repo_path(repo_path: str | Path) -> str:
    r"""Normalize a repository path to a stable string form.

    Surrounding whitespace is trimmed, backslashes become forward slashes,
    and trailing slashes are removed (a bare root such as ``/`` is kept).

    Examples:
        >>> normalize_repo_path("C:\\work\\repo\\")
        'C:/work/repo'
        >>> normalize_repo_path(" /srv/repo/ ")
        '/srv/repo'
    """
    normalized = str(repo_path).strip().replace("\\", "/")
    stripped = normalized.rstrip("/")
    return stripped or normalized[:1]


def repo_lock_key(repo_path: str | Path, *, platform: str | None = None) -> str:
    """Return the registry key used to serialize work on a repository.

    The key is the normalized path, case-folded on platforms whose default
    filesystems are case-insensitive.

    Args:
        repo_path: Repository path as given by the caller.
        platform: Override for ``sys.platform``.
    """
    key = normalize_repo_path(repo_path)
    if (platform or sys.platform).startswith(_CASE_INSENSITIVE_PLATFORMS):
        return key.casefold()
    return key


def ensure_rel_path_safe(rel_path: str) -> str:
    """Validate a repository-relative path before touching the filesystem.

    Args:
        rel_path: Path relative to the working tree root, using ``/`` or ``\\``.

    Returns:
        The path with forward slashes.

    Raises:
        ValidationError: If the path is blank, absolute, contains a NUL byte,
            or has ``.``/``..`` components.
    """
    if not rel_path.strip():
        msg = "path is empty"
        raise ValidationError(msg, field="path")
    if "\x00" in rel_path:
        msg = "path contains a NUL byte"
        raise ValidationError(msg, field="path")

    posix = rel_path.replace("\\", "/")
    candidate = PurePosixPath(posix)
    if candidate.is_absolute() or (len(posix) > 1 and posix[1] == ":"):
        msg = f"path must be relative to the repository: {rel_path}"
        raise ValidationError(msg, field="path")
    if any(part in ("", ".", "..") for part in posix.split("/")):
        msg = f"path contains an invalid component: {rel_path}"
        raise ValidationError(msg, field="path")
    return posix


def join_repo_path(repo_path: str | Path, rel_path: str) -> Path:
    """Join a validated relative path onto a repository root.

    Raises:
        ValidationError: If ``rel_path`` is not safe.
    """
    return Path(repo_path).joinpath(*ensure_rel_path_safe(rel_path).split("/"))


def require_text(value: str | None, field: str) -> str:
    """Return ``value`` stripped, raising ValidationError if it is blank."""
    if value is None or not value.strip():
        msg = f"{field} is required"
        raise ValidationError(msg, field=field)
    return value.strip()
