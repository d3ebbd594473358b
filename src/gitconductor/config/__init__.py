"""gitconductor configuration.

This module provides the public API for configuration management,
including loading and typed access to configuration values.

Example:
    >>> from gitconductor.config import Config
    >>> config = Config.load()
    >>> config.git.rename_similarity
    50
"""

from gitconductor.exceptions import ConfigError, ConfigLoadError

from ._defaults import DEFAULT_CONFIG
from ._discovery import discover_sources, get_git_dir, get_user_config_path
from ._load import safe_load_config
from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    GitConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
)

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "GitConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "deep_merge",
    "discover_sources",
    "get_git_dir",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]
