"""Session trust registry for repositories git considers unsafe.

Repositories owned by another user are rejected by git unless listed in
``safe.directory``. Marking a repository as trusted for the session makes
every git invocation against it pass ``-c safe.directory=<path>``. The set is
held in memory only and is cleared when the process exits.

Example:
    >>> registry = TrustRegistry.get_instance()
    >>> registry.trust("/srv/shared/repo/")
    >>> registry.is_trusted("/srv/shared/repo")
    True
"""

import threading
from typing import TYPE_CHECKING, ClassVar

from gitconductor.utils import normalize_repo_path

if TYPE_CHECKING:
    from pathlib import Path

    from ._runner import GitRunner


class TrustRegistry:
    """Thread-safe process-wide set of repositories trusted this session.

    Use get_instance() for the shared registry. Tests and embedders may
    construct private instances and inject them into a GitRunner.

    Attributes:
        _instance: Class-level singleton instance.
        _lock: Class-level lock for thread-safe initialization.
    """

    _instance: ClassVar["TrustRegistry | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    __slots__: tuple[str, ...] = ("_paths", "_paths_lock")

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._paths: set[str] = set()
        self._paths_lock: threading.Lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "TrustRegistry":
        """Get the singleton registry instance, creating it on first use."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        result = cls._instance
        assert result is not None  # noqa: S101
        return result

    @classmethod
    def _reset_instance(cls) -> None:
        """Reset the singleton instance (for testing only)."""
        with cls._lock:
            cls._instance = None

    def trust(self, repo_path: "str | Path") -> None:
        """Mark a repository as trusted for the rest of the session."""
        with self._paths_lock:
            self._paths.add(normalize_repo_path(repo_path))

    def untrust(self, repo_path: "str | Path") -> None:
        """Remove a repository from the session trust set."""
        with self._paths_lock:
            self._paths.discard(normalize_repo_path(repo_path))

    def is_trusted(self, repo_path: "str | Path") -> bool:
        """Check whether a repository was trusted this session."""
        with self._paths_lock:
            return normalize_repo_path(repo_path) in self._paths


def is_safe_directory(runner: "GitRunner", repo_path: "str | Path") -> bool:
    """Check the global ``safe.directory`` list for a repository.

    Matches the exact path, the ``*`` wildcard, and ``<dir>/*`` prefixes.
    """
    normalized = normalize_repo_path(repo_path)
    result = runner.execute(
        normalized, ["config", "--global", "--get-all", "safe.directory"]
    )
    if not result.ok:
        return False
    for line in result.stdout.splitlines():
        entry = normalize_repo_path(line)
        if entry in ("*", normalized):
            return True
        if entry.endswith("/*") and normalized.startswith(entry[:-1]):
            return True
    return False
