"""Per-repository concurrency guard."""

from ._registry import RepoLockRegistry

__all__ = ["RepoLockRegistry"]
