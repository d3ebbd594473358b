"""gitconductor exceptions."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class GitConductorError(Exception):
    """Base exception for gitconductor errors."""


class ValidationError(GitConductorError):
    """Raised when a required argument is blank or unsafe."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with error message and the offending argument name."""
        super().__init__(message)
        self.field: str | None = field


# =============================================================================
# Repository Exceptions
# =============================================================================


class NotAWorkingCopyError(GitConductorError):
    """Raised when a path is not the top level of a git working tree."""

    def __init__(
        self,
        message: str,
        *,
        path: str,
        dubious_ownership: bool = False,
    ) -> None:
        """Initialize with error message and repository context.

        Args:
            message: Human-readable description.
            path: The path that was rejected.
            dubious_ownership: True when git refused the repository because it
                is owned by another user (see ``safe.directory``).
        """
        super().__init__(message)
        self.path: str = path
        self.dubious_ownership: bool = dubious_ownership


class OperationInProgressError(GitConductorError):
    """Raised when starting an operation while another one is active."""

    def __init__(self, message: str, *, operation: str) -> None:
        """Initialize with error message and the active operation."""
        super().__init__(message)
        self.operation: str = operation


class NoOperationInProgressError(GitConductorError):
    """Raised when continuing or amending while nothing is active."""

    def __init__(self, message: str, *, operation: str | None = None) -> None:
        """Initialize with error message and the expected operation."""
        super().__init__(message)
        self.operation: str | None = operation


# =============================================================================
# Git Process Exceptions
# =============================================================================


class GitCommandError(GitConductorError):
    """Raised when a git process exits with a non-zero status.

    Attributes:
        args_: The git arguments (without the global options).
        returncode: Process exit status.
        stderr: Captured standard error.
        stdout: Captured standard output.
    """

    def __init__(
        self,
        message: str,
        *,
        args: tuple[str, ...] = (),
        returncode: int | None = None,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        """Initialize with error message and process context."""
        super().__init__(message)
        self.args_: tuple[str, ...] = args
        self.returncode: int | None = returncode
        self.stderr: str = stderr
        self.stdout: str = stdout

    @property
    def diagnostic(self) -> str:
        """Return the diagnostic text git printed, preferring stderr."""
        stderr = self.stderr.strip()
        if stderr:
            return stderr
        return self.stdout.strip()


class GitNotFoundError(GitCommandError):
    """Raised when the git executable cannot be launched."""


# =============================================================================
# Conflict Exceptions
# =============================================================================


class BinaryContentError(GitConductorError):
    """Raised when text content was expected but a NUL byte was found."""

    def __init__(self, message: str, *, path: str) -> None:
        """Initialize with error message and file path."""
        super().__init__(message)
        self.path: str = path


class RenameTargetNotFoundError(GitConductorError):
    """Raised when a rename counterpart for a conflicted path cannot be found."""

    def __init__(self, message: str, *, path: str) -> None:
        """Initialize with error message and file path."""
        super().__init__(message)
        self.path: str = path


class RewordMapError(GitConductorError):
    """Raised when the reword map side file cannot be read or written."""

    def __init__(self, message: str, *, path: "Path") -> None:
        """Initialize with error message and map file path."""
        super().__init__(message)
        self.path: Path = path


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(GitConductorError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
