"""Config path discovery utilities.

This module determines the platform-specific user configuration file and the
optional repository-local configuration file stored in a repository's git
directory.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Any

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models._source import ConfigSource, ConfigSourceName

if TYPE_CHECKING:
    from dulwich.repo import Repo

REPOSITORY_CONFIG_FILENAME = "gitconductor.toml"


def get_user_config_path() -> Path:
    r"""Get platform-specific user config file path.

    - Linux: ``~/.config/gitconductor/config.toml``
    - macOS: ``~/Library/Application Support/gitconductor/config.toml``
    - Windows: ``%APPDATA%\gitconductor\config.toml``

    The path is returned regardless of whether the file exists.
    """
    config_dir = platformdirs.user_config_path("gitconductor")
    return config_dir / "config.toml"


def get_git_dir(path: Path | None = None) -> Path | None:
    """Get the git directory for the given path.

    Linked worktrees resolve to their worktree-specific git directory.

    Args:
        path: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        Path to the git directory, or None if not in a git repository.
    """
    from dulwich.errors import NotGitRepository  # noqa: PLC0415
    from dulwich.repo import Repo  # noqa: PLC0415

    search_path = str(path.resolve()) if path else "."

    try:
        repo: Repo = Repo.discover(search_path)
    except NotGitRepository:
        return None
    try:
        return Path(repo.controldir())
    finally:
        repo.close()


def _file_exists(path: Path) -> bool:
    """Check if a file exists, treating permission errors as absence."""
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    repo_path: Path | None = None,
    *,
    include_env: bool = True,
    include_cli: bool = False,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources.

    Args:
        repo_path: Repository whose git directory may hold a
            ``gitconductor.toml`` override. Skipped when None.
        include_env: Include environment variables as a source.
        include_cli: Include CLI overrides as a source.
        cli_overrides: CLI argument overrides, used if include_cli is True.

    Returns:
        ConfigSource objects in precedence order (highest first). Missing
        files are included with exists=False.
    """
    sources: list[ConfigSource] = []

    if include_cli:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=bool(cli_overrides),
                values=cli_overrides or {},
            )
        )

    if include_env:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.ENV,
                path=None,
                exists=True,  # Parsed during loading
                values={},
            )
        )

    if repo_path is not None:
        git_dir = get_git_dir(repo_path)
        if git_dir:
            repo_config = git_dir / REPOSITORY_CONFIG_FILENAME
            sources.append(
                ConfigSource(
                    name=ConfigSourceName.REPOSITORY,
                    path=repo_config,
                    exists=_file_exists(repo_config),
                    values={},
                )
            )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
