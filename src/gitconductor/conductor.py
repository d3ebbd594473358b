"""Repository orchestration facade.

The Conductor is the public entry point. It owns a GitRunner, the
per-repository lock registry, and a small worker pool for background fetches,
and routes every state-mutating operation through the repository's lock.
Status and rebase progress queries are not locked: they may observe a
transient state of a concurrent mutation and are re-derived on every call.
"""

from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import TYPE_CHECKING, Final, Self

from gitconductor import conflicts, patches, pull, rebase, status
from gitconductor.config import Config
from gitconductor.enums import (
    ConflictOperationKind,
    ConflictSide,
    PatchMethod,
    PullMode,
    RebaseSessionStatus,
)
from gitconductor.exceptions import GitCommandError
from gitconductor.git import (
    GitRunner,
    TrustRegistry,
    ensure_is_git_worktree,
    is_safe_directory,
)
from gitconductor.locking import RepoLockRegistry
from gitconductor.pull import DEFAULT_REMOTE
from gitconductor.utils import normalize_repo_path, require_text

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from concurrent.futures import Future
    from pathlib import Path
    from types import TracebackType

    from structlog.typing import FilteringBoundLogger

    from gitconductor.conflicts import (
        ConflictFileVersions,
        ConflictState,
        NameStatusEntry,
    )
    from gitconductor.patches import PatchApplyResult, PatchPrediction
    from gitconductor.pull import PullPrediction, PullResult
    from gitconductor.rebase import (
        RebaseCommitInfo,
        RebaseSessionState,
        RebaseStatusInfo,
        RebaseTodoEntry,
    )
    from gitconductor.status import StatusEntry

_FETCH_THREAD_PREFIX: Final = "gitconductor-fetch"


class Conductor:
    """Git orchestration for one process.

    All arguments are optional. Without them the Conductor loads the merged
    configuration, uses the process-wide lock and trust registries, and logs
    nothing.

    Args:
        config: Loaded configuration.
        runner: Git runner. Built from ``config.git`` when omitted.
        locks: Lock registry. Defaults to the process-wide registry.
        trust: Trust registry. Defaults to the process-wide registry.
        logger: Structured logger handed to the runner it creates.

    Example:
        >>> with Conductor() as conductor:
        ...     entries = conductor.get_status("/work/repo")
    """

    __slots__: Final = (
        "_config",
        "_executor",
        "_executor_lock",
        "_locks",
        "_logger",
        "_runner",
    )

    def __init__(
        self,
        *,
        config: Config | None = None,
        runner: GitRunner | None = None,
        locks: RepoLockRegistry | None = None,
        trust: TrustRegistry | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._config: Config = config if config is not None else Config.load()
        self._logger: FilteringBoundLogger | None = logger
        self._runner: GitRunner = (
            runner
            if runner is not None
            else GitRunner.from_config(self._config.git, trust=trust, logger=logger)
        )
        self._locks: RepoLockRegistry = (
            locks if locks is not None else RepoLockRegistry.get_instance()
        )
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock: Lock = Lock()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: "TracebackType | None",
    ) -> None:
        self.close()

    def close(self) -> None:
        """Wait for background fetches and release the worker pool."""
        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    @property
    def config(self) -> Config:
        """Return the configuration in use."""
        return self._config

    @property
    def runner(self) -> GitRunner:
        """Return the git runner."""
        return self._runner

    @property
    def locks(self) -> RepoLockRegistry:
        """Return the lock registry."""
        return self._locks

    def _locked[T](self, repo_path: "str | Path", fn: "Callable[[], T]") -> T:
        return self._locks.with_repo_lock(repo_path, fn)

    def _log_resolution(self, repo_path: "str | Path", path: str, resolution: str) -> None:
        if self._logger is not None:
            self._logger.info(
                "conflict_resolved",
                repo=str(repo_path),
                path=path,
                resolution=resolution,
            )

    @property
    def _similarity(self) -> int:
        return self._config.git.rename_similarity

    @property
    def _map_filename(self) -> str:
        return self._config.git.reword_map_filename

    # =========================================================================
    # Trust
    # =========================================================================

    def trust_repository(self, repo_path: "str | Path", *, persist: bool = True) -> None:
        """Trust a repository owned by another user.

        The repository is trusted for the session. With ``persist`` it is also
        added to the global ``safe.directory`` list.

        Raises:
            ValidationError: If ``repo_path`` is blank.
            GitCommandError: If the global config cannot be written.
        """
        normalized = normalize_repo_path(require_text(str(repo_path), "repo_path"))
        self._runner.trust.trust(normalized)
        if persist:
            _ = self._runner.run(
                normalized,
                ["config", "--global", "--add", "safe.directory", normalized],
            )

    def is_trusted(self, repo_path: "str | Path") -> bool:
        """Check whether a repository is trusted this session or globally."""
        return self._runner.trust.is_trusted(repo_path) or is_safe_directory(
            self._runner, repo_path
        )

    # =========================================================================
    # Status
    # =========================================================================

    def get_status(self, repo_path: "str | Path") -> "list[StatusEntry]":
        """Return the working copy status with unstaged renames reconciled."""
        return status.get_status(self._runner, repo_path)

    # =========================================================================
    # Conflicts
    # =========================================================================

    def get_conflict_state(self, repo_path: "str | Path") -> "ConflictState":
        """Return the active operation and its unmerged paths."""
        self._ensure_worktree(repo_path)
        return self._locked(
            repo_path, lambda: conflicts.get_conflict_state(self._runner, repo_path)
        )

    def get_conflict_file_versions(
        self, repo_path: "str | Path", path: str
    ) -> "ConflictFileVersions":
        """Return the four versions of a conflicted path and its classification."""
        self._ensure_worktree(repo_path)
        return self._locked(
            repo_path,
            lambda: conflicts.get_conflict_file_versions(
                self._runner, repo_path, path, similarity=self._similarity
            ),
        )

    def take_ours(self, repo_path: "str | Path", path: str) -> None:
        """Resolve a conflicted path with the local version."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path,
            lambda: conflicts.take_ours(
                self._runner, repo_path, path, similarity=self._similarity
            ),
        )
        self._log_resolution(repo_path, path, "ours")

    def take_theirs(self, repo_path: "str | Path", path: str) -> None:
        """Resolve a conflicted path with the incoming version."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path,
            lambda: conflicts.take_theirs(
                self._runner, repo_path, path, similarity=self._similarity
            ),
        )
        self._log_resolution(repo_path, path, "theirs")

    def resolve_rename(
        self,
        repo_path: "str | Path",
        path: str,
        keep_name: ConflictSide | str,
        keep_content: ConflictSide | str,
    ) -> str:
        """Resolve a rename conflict. Returns the path that was kept."""
        self._ensure_worktree(repo_path)
        final_path = self._locked(
            repo_path,
            lambda: conflicts.resolve_rename(
                self._runner,
                repo_path,
                path,
                ConflictSide(keep_name),
                ConflictSide(keep_content),
                similarity=self._similarity,
            ),
        )
        self._log_resolution(repo_path, final_path, "rename")
        return final_path

    def apply_and_stage(self, repo_path: "str | Path", path: str, content: str) -> None:
        """Write caller-resolved content to a conflicted path and stage it."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path,
            lambda: conflicts.apply_and_stage(self._runner, repo_path, path, content),
        )
        self._log_resolution(repo_path, path, "manual")

    def continue_operation(self, repo_path: "str | Path") -> "ConflictState":
        """Continue the active merge, rebase, cherry-pick, or mailbox apply.

        A rebase is continued by the interactive rebase driver, so later
        stops with a reword or author override are still amended and the
        reword map is removed once the rebase finishes.

        Raises:
            NoOperationInProgressError: If nothing is in progress.
            GitCommandError: If git refuses to continue.
        """
        self._ensure_worktree(repo_path)
        return self._locked(
            repo_path,
            lambda: self._step_sequence(
                repo_path,
                rebase.continue_interactive_rebase,
                conflicts.continue_operation,
                "--continue",
            ),
        )

    def abort_operation(self, repo_path: "str | Path") -> "ConflictState":
        """Abort the active operation. Aborting a rebase drops its reword map."""
        self._ensure_worktree(repo_path)

        def drop_reword_map() -> None:
            _ = rebase.delete_reword_map(
                rebase.reword_map_path(self._runner, repo_path, self._map_filename)
            )

        return self._locked(
            repo_path,
            lambda: conflicts.abort_operation(
                self._runner, repo_path, on_rebase_abort=drop_reword_map
            ),
        )

    def skip_operation(self, repo_path: "str | Path") -> "ConflictState":
        """Skip the current step of the active sequence.

        Like ``continue_operation``, a rebase is driven by the interactive
        rebase driver.
        """
        self._ensure_worktree(repo_path)
        return self._locked(
            repo_path,
            lambda: self._step_sequence(
                repo_path,
                rebase.skip_interactive_rebase,
                conflicts.skip_operation,
                "--skip",
            ),
        )

    def _step_sequence(
        self,
        repo_path: "str | Path",
        rebase_step: "Callable[..., RebaseSessionState]",
        other_step: "Callable[[GitRunner, str | Path], ConflictState]",
        flag: str,
    ) -> "ConflictState":
        if conflicts.current_operation(self._runner, repo_path) is not (
            ConflictOperationKind.REBASE
        ):
            return other_step(self._runner, repo_path)

        session = rebase_step(
            self._runner, repo_path, reword_map_filename=self._map_filename
        )
        if session.status is RebaseSessionStatus.ERROR:
            raise GitCommandError(session.message, args=("rebase", flag))
        return conflicts.get_conflict_state(self._runner, repo_path)

    # =========================================================================
    # Interactive rebase
    # =========================================================================

    def list_rebase_commits(
        self, repo_path: "str | Path", base: str | None = None
    ) -> "list[RebaseCommitInfo]":
        """List the commits available to an interactive rebase, oldest first."""
        self._ensure_worktree(repo_path)
        return rebase.list_rebase_commits(self._runner, repo_path, base)

    def start_interactive_rebase(
        self,
        repo_path: "str | Path",
        onto: str,
        entries: "Sequence[RebaseTodoEntry]",
    ) -> "RebaseSessionState":
        """Start an interactive rebase with a pre-built plan."""
        return self._locked(
            repo_path,
            lambda: rebase.start_interactive_rebase(
                self._runner,
                repo_path,
                onto,
                entries,
                reword_map_filename=self._map_filename,
            ),
        )

    def continue_interactive_rebase(self, repo_path: "str | Path") -> "RebaseSessionState":
        """Continue an interactive rebase after an edit stop or conflicts."""
        return self._locked(
            repo_path,
            lambda: rebase.continue_interactive_rebase(
                self._runner, repo_path, reword_map_filename=self._map_filename
            ),
        )

    def amend_stopped_commit(
        self,
        repo_path: "str | Path",
        *,
        message: str | None = None,
        author: str | None = None,
    ) -> str:
        """Amend the commit an interactive rebase is stopped at."""
        return self._locked(
            repo_path,
            lambda: rebase.amend_stopped_commit(
                self._runner, repo_path, message=message, author=author
            ),
        )

    def get_interactive_rebase_status(self, repo_path: "str | Path") -> "RebaseStatusInfo":
        """Return the progress of the interactive rebase, if any."""
        self._ensure_worktree(repo_path)
        return rebase.get_rebase_status(self._runner, repo_path)

    def abort_interactive_rebase(self, repo_path: "str | Path") -> str:
        """Abort the interactive rebase and drop its reword map."""
        return self._locked(
            repo_path,
            lambda: rebase.abort_interactive_rebase(
                self._runner, repo_path, reword_map_filename=self._map_filename
            ),
        )

    def list_stopped_commit_files(self, repo_path: "str | Path") -> "list[NameStatusEntry]":
        """List the files changed by the commit the rebase is stopped at."""
        self._ensure_worktree(repo_path)
        return rebase.list_stopped_commit_files(self._runner, repo_path)

    def read_stop_file(self, repo_path: "str | Path", path: str) -> str:
        """Read a working tree file during an edit stop."""
        self._ensure_worktree(repo_path)
        return rebase.read_stop_file(self._runner, repo_path, path)

    def write_stop_file(self, repo_path: "str | Path", path: str, content: str) -> None:
        """Write and stage a working tree file during an edit stop."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path,
            lambda: rebase.write_stop_file(self._runner, repo_path, path, content),
        )

    def rename_stop_file(self, repo_path: "str | Path", old_path: str, new_path: str) -> None:
        """Rename a tracked file during an edit stop."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path,
            lambda: rebase.rename_stop_file(self._runner, repo_path, old_path, new_path),
        )

    def delete_stop_file(self, repo_path: "str | Path", path: str) -> None:
        """Delete a file during an edit stop."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path, lambda: rebase.delete_stop_file(self._runner, repo_path, path)
        )

    def restore_stop_file(self, repo_path: "str | Path", path: str) -> None:
        """Restore a file from HEAD during an edit stop."""
        self._ensure_worktree(repo_path)
        self._locked(
            repo_path, lambda: rebase.restore_stop_file(self._runner, repo_path, path)
        )

    # =========================================================================
    # Patches
    # =========================================================================

    def predict_patch(
        self,
        repo_path: "str | Path",
        patch_path: "str | Path",
        method: PatchMethod | str = PatchMethod.APPLY,
    ) -> "PatchPrediction":
        """Check whether a patch applies, without changing the repository."""
        return self._locked(
            repo_path,
            lambda: patches.predict_patch(self._runner, repo_path, patch_path, method),
        )

    def apply_patch(
        self,
        repo_path: "str | Path",
        patch_path: "str | Path",
        method: PatchMethod | str = PatchMethod.APPLY,
    ) -> "PatchApplyResult":
        """Apply a patch file directly or as mailbox commits."""
        return self._locked(
            repo_path,
            lambda: patches.apply_patch(self._runner, repo_path, patch_path, method),
        )

    def format_patch_to_file(
        self, repo_path: "str | Path", commit: str, out_path: "str | Path"
    ) -> "Path":
        """Export a single commit as a mailbox patch file."""
        return self._locked(
            repo_path,
            lambda: patches.format_patch_to_file(
                self._runner, repo_path, commit, out_path
            ),
        )

    # =========================================================================
    # Pull and fetch
    # =========================================================================

    def predict_pull(
        self,
        repo_path: "str | Path",
        remote: str = DEFAULT_REMOTE,
        mode: PullMode | str = PullMode.MERGE,
    ) -> "PullPrediction":
        """Fetch and predict what pulling the current branch would do."""
        return self._locked(
            repo_path,
            lambda: pull.predict_pull(self._runner, repo_path, remote, PullMode(mode)),
        )

    def pull(
        self,
        repo_path: "str | Path",
        remote: str = DEFAULT_REMOTE,
        mode: PullMode | str = PullMode.MERGE,
    ) -> "PullResult":
        """Pull the current branch by merge or rebase."""
        return self._locked(
            repo_path,
            lambda: pull.pull(self._runner, repo_path, remote, PullMode(mode)),
        )

    def conflict_preview(self, repo_path: "str | Path", upstream: str, path: str) -> str:
        """Render a diff3 preview of merging one path from ``upstream``."""
        return pull.conflict_preview(self._runner, repo_path, upstream, path)

    def fetch(self, repo_path: "str | Path", remote: str = DEFAULT_REMOTE) -> str:
        """Fetch a remote on the calling thread."""
        self._ensure_worktree(repo_path)
        return self._locked(repo_path, lambda: pull.fetch(self._runner, repo_path, remote))

    def fetch_in_background(
        self, repo_path: "str | Path", remote: str = DEFAULT_REMOTE
    ) -> "Future[str]":
        """Fetch a remote on a worker thread.

        The worker holds the repository's lock while fetching, so the fetch
        is serialized with every other mutation of the same repository.
        """
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._config.git.fetch_workers,
                    thread_name_prefix=_FETCH_THREAD_PREFIX,
                )
            return self._executor.submit(self.fetch, repo_path, remote)

    def _ensure_worktree(self, repo_path: "str | Path") -> None:
        ensure_is_git_worktree(self._runner, repo_path)
