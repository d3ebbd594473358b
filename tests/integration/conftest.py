import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

import pytest

from gitconductor.conductor import Conductor
from gitconductor.config import Config
from gitconductor.locking import RepoLockRegistry


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


def run_git(cwd: Path, *args: str) -> str:
    """Run a git command in ``cwd`` and return its stripped stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def init_git_repo(path: Path, *, bare: bool = False) -> None:
    """Initialize a repository on ``main`` with a local identity."""
    path.mkdir(parents=True, exist_ok=True)
    run_git(path, "init", *(["--bare"] if bare else []))
    run_git(path, "symbolic-ref", "HEAD", "refs/heads/main")
    if bare:
        return
    run_git(path, "config", "user.email", "test@example.com")
    run_git(path, "config", "user.name", "Test User")
    run_git(path, "config", "commit.gpgsign", "false")


@dataclass(frozen=True, slots=True)
class GitRepo:
    """A scratch working tree driven through the git CLI."""

    path: Path

    def git(self, *args: str) -> str:
        return run_git(self.path, *args)

    def write(self, rel_path: str, content: str) -> Path:
        target = self.path / rel_path
        target.parent.mkdir(parents=True, exist_ok=True)
        _ = target.write_text(content)
        return target

    def commit(self, message: str, **files: str) -> str:
        for name, content in files.items():
            _ = self.write(name, content)
        self.git("add", "-A")
        self.git("commit", "-q", "-m", message)
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")

    def subject(self, rev: str = "HEAD") -> str:
        return self.git("log", "-1", "--format=%s", rev)


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[[str], GitRepo]:
    def factory(name: str = "repo") -> GitRepo:
        path = tmp_path / name
        init_git_repo(path)
        return GitRepo(path.resolve())

    return factory


@pytest.fixture
def repo(make_repo: Callable[[str], GitRepo]) -> GitRepo:
    return make_repo("repo")


@pytest.fixture
def clone_pair(tmp_path: Path) -> tuple[GitRepo, GitRepo]:
    """Two clones of a shared bare remote, both on ``main`` with one commit."""
    remote = tmp_path / "remote.git"
    init_git_repo(remote, bare=True)

    first = GitRepo((tmp_path / "first").resolve())
    init_git_repo(first.path)
    _ = first.commit("Initial commit", **{"shared.txt": "one\ntwo\nthree\n"})
    first.git("remote", "add", "origin", str(remote))
    first.git("push", "-q", "-u", "origin", "main")

    run_git(tmp_path, "clone", "-q", str(remote), "second")
    second = GitRepo((tmp_path / "second").resolve())
    second.git("config", "user.email", "other@example.com")
    second.git("config", "user.name", "Other User")
    second.git("config", "commit.gpgsign", "false")
    return first, second


@pytest.fixture
def conductor() -> Iterator[Conductor]:
    with Conductor(config=Config.from_dict({}), locks=RepoLockRegistry()) as instance:
        yield instance


@pytest.fixture
def git_version() -> tuple[int, ...]:
    output = run_git(Path.cwd(), "--version")
    numbers = output.split()[2].split(".")
    return tuple(int(part) for part in numbers[:2] if part.isdigit())
