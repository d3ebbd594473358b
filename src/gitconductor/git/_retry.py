"""Two-attempt flag downgrade for older git releases.

Some sequencer subcommands gained their modern spelling late (for example
``merge --continue`` and ``am --continue``). A FlagDowngrade runs the modern
form first and, only when git rejects the flags themselves, retries once with
the legacy form. This is the only automatic retry in gitconductor.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from ._runner import GitResult, GitRunner

_UNSUPPORTED_FLAG_PATTERN = re.compile(
    r"unknown option|unknown switch|unrecognized (?:option|argument)|^usage:",
    re.IGNORECASE | re.MULTILINE,
)


def is_unsupported_flag_diagnostic(diagnostic: str) -> bool:
    """Check whether git rejected the command line rather than the operation.

    Examples:
        >>> is_unsupported_flag_diagnostic("error: unknown option `continue'")
        True
        >>> is_unsupported_flag_diagnostic("fatal: There is no merge in progress")
        False
    """
    return _UNSUPPORTED_FLAG_PATTERN.search(diagnostic) is not None


@dataclass(frozen=True, slots=True)
class FlagDowngrade:
    """Primary arguments with a legacy fallback.

    Attributes:
        name: Short identifier used in log events.
        primary: Arguments tried first.
        fallback: Arguments tried once if the primary attempt is rejected.
        should_retry: Predicate over the diagnostic text of a failed primary
            attempt deciding whether the fallback is tried.
    """

    name: str
    primary: tuple[str, ...]
    fallback: tuple[str, ...]
    should_retry: Callable[[str], bool] = is_unsupported_flag_diagnostic

    def run(
        self,
        runner: "GitRunner",
        repo_path: "str | Path",
        *,
        env: "Mapping[str, str] | None" = None,
    ) -> "GitResult":
        """Run the primary arguments, falling back once if they are rejected.

        Returns:
            The result of the last attempt. Callers decide whether a failure
            is fatal.
        """
        result = runner.execute(repo_path, self.primary, env=env)
        if result.ok or not self.should_retry(result.diagnostic):
            return result

        if runner.logger is not None:
            runner.logger.info(
                "flag_downgrade_retry",
                strategy=self.name,
                repo=str(repo_path),
                diagnostic=result.diagnostic,
            )
        return runner.execute(repo_path, self.fallback, env=env)


MERGE_CONTINUE = FlagDowngrade(
    name="merge-continue",
    primary=("merge", "--continue"),
    fallback=("commit", "--no-edit"),
)

MAILBOX_CONTINUE = FlagDowngrade(
    name="am-continue",
    primary=("am", "--continue"),
    fallback=("am", "--resolved"),
)
