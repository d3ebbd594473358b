"""Shared test fixtures for gitconductor tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.console import Console

from gitconductor.git import TrustRegistry
from gitconductor.locking import RepoLockRegistry


@pytest.fixture(autouse=True)
def isolated_environment(
    tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path]:
    """Keep tests away from the user's configuration, logs and git settings.

    Every GITCONDUCTOR_ variable is cleared, logs go to a temporary file, the
    user config file points at a temporary location, and git reads an empty
    global config instead of ``~/.gitconfig``.
    """
    home = tmp_path_factory.mktemp("home")
    for key in [k for k in os.environ if k.startswith("GITCONDUCTOR_")]:
        monkeypatch.delenv(key)

    global_config = home / "gitconfig"
    global_config.write_text("")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(global_config))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GITCONDUCTOR_LOGGING__FILE", str(home / "gitconductor.log"))
    monkeypatch.setattr(
        "gitconductor.config._discovery.get_user_config_path",
        lambda: home / "config.toml",
    )

    TrustRegistry._reset_instance()  # pyright: ignore[reportPrivateUsage]
    RepoLockRegistry._reset_instance()  # pyright: ignore[reportPrivateUsage]
    yield home
    TrustRegistry._reset_instance()  # pyright: ignore[reportPrivateUsage]
    RepoLockRegistry._reset_instance()  # pyright: ignore[reportPrivateUsage]


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
