"""Configuration loading with strict/lenient error handling."""

import os
import sys
from typing import TYPE_CHECKING

from gitconductor.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path


def safe_load_config(
    *,
    config_path: "Path | None" = None,
    repo_path: "Path | None" = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Errors are handled based on the GITCONDUCTOR_STRICT_CONFIG environment
    variable:
    - If unset or "0": warn to stderr and return the default config
    - If "1": fail fast with sys.exit(1)

    When config_path is provided, the file must exist (explicit user request).

    Args:
        config_path: Explicit path to config file (--config flag).
        repo_path: Repository whose git directory may hold an override file.
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    strict_mode = os.environ.get("GITCONDUCTOR_STRICT_CONFIG", "0") == "1"

    try:
        if config_path is not None:
            if not config_path.exists():
                print(f"Error: Config file not found: {config_path}", file=sys.stderr)  # noqa: T201
                sys.exit(1)
            return Config.from_file(config_path), None

        config = Config.load(
            repo_path=repo_path,
            include_env=True,
            include_cli=cli_overrides is not None,
            cli_overrides=cli_overrides,
        )
    except (ConfigError, OSError) as e:
        error_msg = f"Failed to load config: {e}"
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
        print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}), error_msg
    else:
        return config, None
