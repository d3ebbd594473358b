"""Uniform git subprocess execution.

Every invocation runs ``git`` with the working directory pinned through
``-C``, ``core.quotepath`` disabled so non-ASCII paths are printed verbatim,
and a ``safe.directory`` override when the repository was trusted for the
session. Diagnostics are forced to the C locale because several callers
interpret git's messages.
"""

import os
import subprocess
from dataclasses import dataclass
from typing import TYPE_CHECKING

from gitconductor.exceptions import GitCommandError, GitNotFoundError
from gitconductor.utils import normalize_repo_path

from ._trust import TrustRegistry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from gitconductor.config import GitConfig

_BASE_ENV: dict[str, str] = {
    "LC_ALL": "C",
    "GIT_TERMINAL_PROMPT": "0",
}


@dataclass(frozen=True, slots=True)
class GitResult:
    """Outcome of a single git process.

    Attributes:
        args: Git arguments (without the global options).
        returncode: Process exit status.
        stdout_bytes: Raw standard output.
        stderr: Standard error decoded as UTF-8 with replacement.
    """

    args: tuple[str, ...]
    returncode: int
    stdout_bytes: bytes
    stderr: str

    @property
    def ok(self) -> bool:
        """Return True if git exited with status zero."""
        return self.returncode == 0

    @property
    def stdout(self) -> str:
        """Return standard output decoded as UTF-8 with replacement."""
        return self.stdout_bytes.decode("utf-8", errors="replace")

    @property
    def diagnostic(self) -> str:
        """Return stderr, falling back to stdout when stderr is empty."""
        stderr = self.stderr.strip()
        if stderr:
            return stderr
        return self.stdout.strip()

    def to_error(self) -> GitCommandError:
        """Build the exception describing this failed invocation."""
        message = self.diagnostic or (
            f"git {' '.join(self.args)} exited with status {self.returncode}"
        )
        return GitCommandError(
            message,
            args=self.args,
            returncode=self.returncode,
            stderr=self.stderr,
            stdout=self.stdout,
        )


class GitRunner:
    """Runs git against a repository path.

    Args:
        executable: Name or path of the git binary.
        trust: Registry consulted for the ``safe.directory`` override.
            Defaults to the process-wide registry.
        no_editor_command: Command substituted for editors by
            ``no_editor_env``.
        logger: Optional structured logger.
    """

    __slots__: tuple[str, ...] = (
        "_executable",
        "_logger",
        "_no_editor_command",
        "_trust",
    )

    def __init__(
        self,
        *,
        executable: str = "git",
        trust: TrustRegistry | None = None,
        no_editor_command: str = "true",
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self._executable: str = executable
        self._trust: TrustRegistry = (
            trust if trust is not None else TrustRegistry.get_instance()
        )
        self._no_editor_command: str = no_editor_command
        self._logger: FilteringBoundLogger | None = logger

    @classmethod
    def from_config(
        cls,
        config: "GitConfig",
        *,
        trust: TrustRegistry | None = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> "GitRunner":
        """Create a runner from the ``[git]`` configuration section."""
        return cls(
            executable=config.executable,
            trust=trust,
            no_editor_command=config.no_editor_command,
            logger=logger,
        )

    @property
    def trust(self) -> TrustRegistry:
        """Return the trust registry consulted by this runner."""
        return self._trust

    @property
    def logger(self) -> "FilteringBoundLogger | None":
        """Return the structured logger, if any."""
        return self._logger

    def no_editor_env(self) -> dict[str, str]:
        """Return environment overrides that turn every editor into a no-op."""
        return {
            "GIT_EDITOR": self._no_editor_command,
            "EDITOR": self._no_editor_command,
            "VISUAL": self._no_editor_command,
        }

    def build_argv(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        *,
        config: "Sequence[str]" = (),
    ) -> list[str]:
        """Build the full argument vector for a git invocation.

        Args:
            repo_path: Repository the command runs in.
            args: Git subcommand and its arguments.
            config: Extra ``name=value`` settings passed with ``-c``.
        """
        argv = [self._executable]
        normalized = normalize_repo_path(repo_path)
        if self._trust.is_trusted(normalized):
            argv.extend(["-c", f"safe.directory={normalized}"])
        argv.extend(["-c", "core.quotepath=false"])
        for setting in config:
            argv.extend(["-c", setting])
        argv.extend(["-C", str(repo_path)])
        argv.extend(args)
        return argv

    def execute(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        *,
        stdin: str | bytes | None = None,
        env: "Mapping[str, str] | None" = None,
        config: "Sequence[str]" = (),
    ) -> GitResult:
        """Run git and return the result without raising on failure.

        Raises:
            GitNotFoundError: If the git executable cannot be launched.
        """
        argv = self.build_argv(repo_path, args, config=config)
        process_env = {**os.environ, **_BASE_ENV, **(env or {})}
        input_bytes = stdin.encode("utf-8") if isinstance(stdin, str) else stdin

        try:
            completed = subprocess.run(  # noqa: S603
                argv,
                input=input_bytes,
                env=process_env,
                capture_output=True,
                check=False,
            )
        except FileNotFoundError as e:
            msg = f"Git executable not found: {self._executable}"
            raise GitNotFoundError(msg, args=tuple(args)) from e

        result = GitResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout_bytes=completed.stdout,
            stderr=completed.stderr.decode("utf-8", errors="replace"),
        )
        if self._logger is not None:
            self._logger.debug(
                "git_command",
                repo=str(repo_path),
                args=list(args),
                returncode=result.returncode,
            )
        return result

    def _checked(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        *,
        stdin: str | bytes | None = None,
        env: "Mapping[str, str] | None" = None,
        config: "Sequence[str]" = (),
    ) -> GitResult:
        result = self.execute(repo_path, args, stdin=stdin, env=env, config=config)
        if not result.ok:
            if self._logger is not None:
                self._logger.warning(
                    "git_command_failed",
                    repo=str(repo_path),
                    args=list(args),
                    returncode=result.returncode,
                    diagnostic=result.diagnostic,
                )
            raise result.to_error()
        return result

    def run(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        *,
        env: "Mapping[str, str] | None" = None,
        config: "Sequence[str]" = (),
    ) -> str:
        """Run git and return stdout with trailing whitespace removed.

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        return self._checked(repo_path, args, env=env, config=config).stdout.rstrip()

    def run_raw(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        *,
        env: "Mapping[str, str] | None" = None,
    ) -> str:
        """Run git and return stdout exactly as printed (patch and diff payloads).

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        return self._checked(repo_path, args, env=env).stdout

    def run_bytes(self, repo_path: "str | Path", args: "Sequence[str]") -> bytes:
        """Run git and return undecoded stdout (blob contents).

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        return self._checked(repo_path, args).stdout_bytes

    def run_with_stdin(
        self,
        repo_path: "str | Path",
        args: "Sequence[str]",
        stdin_text: str,
        *,
        env: "Mapping[str, str] | None" = None,
    ) -> str:
        """Run git with text piped to stdin and return trimmed stdout.

        Raises:
            GitCommandError: If git exits with a non-zero status.
        """
        return self._checked(repo_path, args, stdin=stdin_text, env=env).stdout.rstrip()

    def succeeds(self, repo_path: "str | Path", args: "Sequence[str]") -> bool:
        """Run a check command and report whether it exited with status zero."""
        return self.execute(repo_path, args).ok
