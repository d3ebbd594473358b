from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from gitconductor.git import GitResult, GitRunner, TrustRegistry


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.unit)


def git_result(
    args: Sequence[str] = (),
    returncode: int = 0,
    stdout: str | bytes = "",
    stderr: str = "",
) -> GitResult:
    """Build a GitResult as the runner would return it."""
    stdout_bytes = stdout.encode("utf-8") if isinstance(stdout, str) else stdout
    return GitResult(
        args=tuple(args),
        returncode=returncode,
        stdout_bytes=stdout_bytes,
        stderr=stderr,
    )


class ScriptedRunner(GitRunner):
    """GitRunner whose ``execute`` replays canned results.

    Responses are keyed by an argument prefix and the longest matching prefix
    wins. A response may be a list, consumed one result per call, with the
    last one repeated. Unmatched invocations fail with exit status 128. The
    checked helpers (``run``, ``run_raw``, ``succeeds``, ...) are the real
    ones layered on top.
    """

    def __init__(
        self,
        responses: Mapping[tuple[str, ...], GitResult | list[GitResult]],
        **kwargs: object,
    ) -> None:
        super().__init__(trust=TrustRegistry(), **kwargs)  # pyright: ignore[reportArgumentType]
        self.responses: dict[tuple[str, ...], GitResult | list[GitResult]] = dict(
            responses
        )
        self.calls: list[tuple[str, ...]] = []
        self.envs: list[Mapping[str, str] | None] = []
        self.stdins: list[str | bytes | None] = []

    def execute(
        self,
        repo_path: str | Path,
        args: Sequence[str],
        *,
        stdin: str | bytes | None = None,
        env: Mapping[str, str] | None = None,
        config: Sequence[str] = (),
    ) -> GitResult:
        key = tuple(args)
        self.calls.append(key)
        self.envs.append(env)
        self.stdins.append(stdin)
        matches = [prefix for prefix in self.responses if key[: len(prefix)] == prefix]
        if not matches:
            return git_result(args, 128, stderr="fatal: unscripted")
        response = self.responses[max(matches, key=len)]
        if isinstance(response, list):
            return response.pop(0) if len(response) > 1 else response[0]
        return response

    def called(self, *prefix: str) -> bool:
        """Return True if any invocation started with ``prefix``."""
        return any(call[: len(prefix)] == prefix for call in self.calls)


@pytest.fixture
def worktree_responses(tmp_path: Path) -> dict[tuple[str, ...], GitResult]:
    """Responses that make ``tmp_path`` pass the working tree check."""
    return {
        ("rev-parse", "--is-inside-work-tree"): git_result(stdout="true\n"),
        ("rev-parse", "--show-toplevel"): git_result(stdout=f"{tmp_path}\n"),
    }


type ResultFactory = Callable[..., GitResult]
type RunnerFactory = Callable[..., ScriptedRunner]


@pytest.fixture
def make_result() -> ResultFactory:
    """Factory for canned git results."""
    return git_result


@pytest.fixture
def scripted_runner() -> RunnerFactory:
    """Factory for a ScriptedRunner over a response table."""
    return ScriptedRunner
