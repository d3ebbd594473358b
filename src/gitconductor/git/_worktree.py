"""Working tree validation and git directory lookups."""

from pathlib import Path
from typing import TYPE_CHECKING

from gitconductor.exceptions import NotAWorkingCopyError
from gitconductor.utils import normalize_repo_path

if TYPE_CHECKING:
    from ._runner import GitRunner

NOT_A_WORKTREE_MESSAGE = "Selected path is not a Git working tree."


def _same_location(left: str | Path, right: str | Path) -> bool:
    def canonical(path: str | Path) -> str:
        try:
            resolved = Path(path).resolve()
        except OSError:
            resolved = Path(path)
        return normalize_repo_path(resolved).casefold()

    return canonical(left) == canonical(right)


def ensure_is_git_worktree(runner: "GitRunner", repo_path: str | Path) -> None:
    """Verify that ``repo_path`` is the top level of a git working tree.

    Raises:
        NotAWorkingCopyError: If git refuses the path, the path is inside a
            bare repository, or it is a subdirectory of a working tree. When
            git refused because of dubious ownership the error carries
            ``dubious_ownership=True`` and git's diagnostic text.
    """
    path = str(repo_path)
    result = runner.execute(repo_path, ["rev-parse", "--is-inside-work-tree"])
    if not result.ok:
        diagnostic = result.diagnostic
        lowered = diagnostic.lower()
        if "dubious ownership" in lowered or "safe.directory" in lowered:
            msg = f"Git refused the repository because of dubious ownership.\n{diagnostic}"
            raise NotAWorkingCopyError(msg, path=path, dubious_ownership=True)
        raise NotAWorkingCopyError(NOT_A_WORKTREE_MESSAGE, path=path)

    if result.stdout.strip() != "true":
        raise NotAWorkingCopyError(NOT_A_WORKTREE_MESSAGE, path=path)

    toplevel = runner.execute(repo_path, ["rev-parse", "--show-toplevel"])
    if not toplevel.ok or not _same_location(toplevel.stdout.strip(), repo_path):
        raise NotAWorkingCopyError(NOT_A_WORKTREE_MESSAGE, path=path)


def git_path(runner: "GitRunner", repo_path: str | Path, name: str) -> Path:
    """Resolve a path inside the git directory (``rev-parse --git-path``).

    Honours linked worktrees and relocated git directories.

    Raises:
        GitCommandError: If git cannot resolve the path.
    """
    resolved = Path(runner.run(repo_path, ["rev-parse", "--git-path", name]))
    if resolved.is_absolute():
        return resolved
    return Path(repo_path) / resolved


def ref_exists(runner: "GitRunner", repo_path: str | Path, ref: str) -> bool:
    """Check whether ``ref`` resolves to an object."""
    return runner.succeeds(repo_path, ["rev-parse", "--verify", "-q", ref])


def path_exists_at(runner: "GitRunner", repo_path: str | Path, ref: str, path: str) -> bool:
    """Check whether ``path`` exists in the tree of ``ref``."""
    return runner.succeeds(repo_path, ["cat-file", "-e", f"{ref}:{path}"])
