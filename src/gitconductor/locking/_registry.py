"""Per-repository lock registry.

This module provides the RepoLockRegistry class, a process-wide map from a
normalized repository path to a reentrant lock. Every state-mutating
operation runs while holding its repository's lock, so at most one such
operation is in flight per repository. Operations on different repositories
use different locks and never contend.

Locks are created lazily and live for the lifetime of the registry.

Example:
    >>> registry = RepoLockRegistry.get_instance()
    >>> with registry.hold("/work/repo"):
    ...     pass
"""

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, ClassVar

from gitconductor.utils import repo_lock_key

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


class RepoLockRegistry:
    """Thread-safe registry of one lock per repository.

    Use get_instance() for the process-wide registry, or construct a private
    instance and inject it where isolation is needed.

    The locks are reentrant so that an operation holding a repository's lock
    can call other lock-guarded operations on the same repository.

    Attributes:
        _instance: Class-level singleton instance.
        _lock: Class-level lock for thread-safe initialization.
    """

    _instance: ClassVar["RepoLockRegistry | None"] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    __slots__: tuple[str, ...] = ("_locks", "_locks_guard", "_platform")

    def __init__(self, *, platform: str | None = None) -> None:
        """Initialize an empty registry.

        Args:
            platform: Override for ``sys.platform`` when deriving keys.
        """
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard: threading.Lock = threading.Lock()
        self._platform: str | None = platform

    @classmethod
    def get_instance(cls) -> "RepoLockRegistry":
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

    def key_for(self, repo_path: "str | Path") -> str:
        """Return the registry key for a repository path."""
        return repo_lock_key(repo_path, platform=self._platform)

    def lock_for(self, repo_path: "str | Path") -> threading.RLock:
        """Return the lock for a repository, creating it on first use."""
        key = self.key_for(repo_path)
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        """Return the number of repositories with a lock."""
        with self._locks_guard:
            return len(self._locks)

    @contextmanager
    def hold(self, repo_path: "str | Path") -> "Iterator[None]":
        """Hold a repository's lock for the duration of a ``with`` block."""
        lock = self.lock_for(repo_path)
        with lock:
            yield

    def with_repo_lock[T](self, repo_path: "str | Path", fn: "Callable[[], T]") -> T:
        """Call ``fn`` while holding the repository's lock.

        The lock is released on every exit path, including exceptions.
        """
        with self.hold(repo_path):
            return fn()
