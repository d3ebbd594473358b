# pyright: reportExplicitAny=false, reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing gitconductor configuration values.
"""

from typing import TYPE_CHECKING, Any, ClassVar, TypeVar, overload

import tomli_w
from pydantic import BaseModel, ConfigDict, PrivateAttr
from pydantic import ValidationError as PydanticValidationError

from gitconductor.config._defaults import DEFAULT_CONFIG
from gitconductor.config._loader import (
    copy_value,
    deep_merge,
    parse_env_vars,
    read_toml_file,
)
from gitconductor.config._models._git import GitConfig
from gitconductor.config._models._logging import LogFormat, LoggingConfig, LogLevel
from gitconductor.config._models._source import ConfigSource, ConfigSourceName

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self

T = TypeVar("T")


def _parse_log_level(value: object) -> LogLevel:
    """Parse log level value to LogLevel enum, defaulting to INFO."""
    try:
        return LogLevel(str(value).lower())
    except ValueError:
        return LogLevel.INFO


def _parse_log_format(value: object) -> LogFormat:
    """Parse log format value to LogFormat enum, defaulting to JSON."""
    try:
        return LogFormat(str(value).lower())
    except ValueError:
        return LogFormat.JSON


def _parse_logging(data: dict[str, Any]) -> LoggingConfig:
    """Parse logging section dictionary into LoggingConfig.

    Args:
        data: Dictionary containing logging configuration.

    Returns:
        Parsed LoggingConfig instance.
    """
    return LoggingConfig(
        level=_parse_log_level(data.get("level", "info")),
        format=_parse_log_format(data.get("format", "json")),
        file=str(data.get("file", "")),
    )


def _as_str(value: object) -> str:
    """Render a config value as a string, keeping booleans in TOML spelling."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_git(data: dict[str, Any]) -> GitConfig:
    """Parse git section dictionary into GitConfig.

    String settings are coerced with ``_as_str`` because a TOML file or dict
    may give a boolean such as ``true``. Out-of-range numbers fall back to the
    defaults.

    Args:
        data: Dictionary containing git configuration.

    Returns:
        Parsed GitConfig instance.
    """
    defaults: dict[str, Any] = DEFAULT_CONFIG["git"]
    values = {
        "executable": _as_str(data.get("executable", defaults["executable"])),
        "no_editor_command": _as_str(
            data.get("no_editor_command", defaults["no_editor_command"])
        ),
        "reword_map_filename": _as_str(
            data.get("reword_map_filename", defaults["reword_map_filename"])
        ),
    }
    for key in ("rename_similarity", "fetch_workers"):
        try:
            _ = GitConfig(**{key: data.get(key, defaults[key])})
            values[key] = data.get(key, defaults[key])
        except PydanticValidationError:
            values[key] = defaults[key]
    return GitConfig(**values)


class Config(BaseModel):
    """Configuration container with typed access.

    This class provides immutable, type-safe access to gitconductor
    configuration. Use factory methods to create instances rather than the
    constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    _data: dict[str, Any] = PrivateAttr(default_factory=dict)
    _sources: tuple[ConfigSource, ...] = PrivateAttr(default=())
    _logging: LoggingConfig = PrivateAttr(default_factory=LoggingConfig)
    _git: GitConfig = PrivateAttr(default_factory=GitConfig)

    def __init__(
        self,
        *,
        _data: dict[str, Any] | None = None,
        _sources: tuple[ConfigSource, ...] = (),
        _logging: LoggingConfig | None = None,
        _git: GitConfig | None = None,
    ) -> None:
        """Initialize configuration container.

        This constructor is intended for internal use. Use from_dict(),
        from_file(), or load() to create Config instances.
        """
        super().__init__()
        self._data = _data if _data is not None else {}
        self._sources = _sources
        self._logging = _logging if _logging is not None else LoggingConfig()
        self._git = _git if _git is not None else GitConfig()

    @classmethod
    def _from_merged(
        cls, merged: dict[str, Any], sources: tuple[ConfigSource, ...]
    ) -> "Self":
        return cls(
            _data=merged,
            _sources=sources,
            _logging=_parse_logging(merged.get("logging", {})),
            _git=_parse_git(merged.get("git", {})),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Self":
        """Create configuration from a dictionary merged over the defaults.

        Args:
            data: Dictionary of configuration values.

        Returns:
            Configuration object from the dictionary.
        """
        return cls._from_merged(deep_merge(DEFAULT_CONFIG, data), ())

    @classmethod
    def from_file(cls, path: "Path") -> "Self":
        """Load configuration from a specific file.

        Args:
            path: Path to the TOML config file.

        Returns:
            Configuration object from the specified file only.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
        """
        data = read_toml_file(path)
        source = ConfigSource(
            name=ConfigSourceName.USER,
            path=path,
            exists=True,
            values=data,
        )
        return cls._from_merged(deep_merge(DEFAULT_CONFIG, data), (source,))

    @classmethod
    def load(
        cls,
        *,
        repo_path: "Path | None" = None,
        include_env: bool = True,
        include_cli: bool = False,
        cli_overrides: dict[str, Any] | None = None,
    ) -> "Self":
        """Load merged configuration from all sources.

        Sources are merged in precedence order
        (defaults -> user -> repository -> env -> cli).

        Args:
            repo_path: Repository whose git directory may contain a
                ``gitconductor.toml`` override.
            include_env: Include environment variables as a source.
            include_cli: Include CLI overrides.
            cli_overrides: Dict of CLI argument overrides.

        Returns:
            Merged configuration object.

        Raises:
            ConfigLoadError: If config files cannot be parsed.
        """
        # Deferred import to avoid circular dependency
        from gitconductor.config._discovery import discover_sources  # noqa: PLC0415

        sources = discover_sources(
            repo_path,
            include_env=include_env,
            include_cli=include_cli,
            cli_overrides=cli_overrides,
        )

        merged: dict[str, Any] = {}
        loaded_sources: list[ConfigSource] = []

        # Sources are discovered highest-to-lowest, merge lowest first
        for source in reversed(sources):
            values: dict[str, Any] = {}

            if source.name in (ConfigSourceName.DEFAULT, ConfigSourceName.CLI):
                values = source.values
            elif source.name == ConfigSourceName.ENV:
                values = parse_env_vars()
            elif source.path and source.exists:
                values = read_toml_file(source.path)

            loaded_sources.append(
                ConfigSource(
                    name=source.name,
                    path=source.path,
                    exists=source.exists,
                    values=values,
                )
            )
            if values:
                merged = deep_merge(merged, values)

        return cls._from_merged(merged, tuple(reversed(loaded_sources)))

    @property
    def sources(self) -> list[ConfigSource]:
        """Return the sources that contributed to this configuration."""
        return list(self._sources)

    @property
    def logging(self) -> LoggingConfig:
        """Return the logging configuration section."""
        return self._logging

    @property
    def git(self) -> GitConfig:
        """Return the git configuration section."""
        return self._git

    @overload
    def get(self, key: str) -> Any: ...

    @overload
    def get(self, key: str, default: T) -> T: ...

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-notation key.

        Examples:
            >>> config.get("git.rename_similarity")
            50
            >>> config.get("nonexistent", "fallback")
            'fallback'
        """
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def to_dict(self, *, include_defaults: bool = True) -> dict[str, Any]:
        """Convert configuration to a dictionary.

        Args:
            include_defaults: Whether to include default values. If False,
                only values that differ from defaults are included.
        """
        if include_defaults:
            return copy_value(self._data)
        return _diff_from_defaults(self._data, DEFAULT_CONFIG)

    def to_toml(self, *, include_defaults: bool = False) -> str:
        """Convert configuration to a TOML string."""
        return tomli_w.dumps(self.to_dict(include_defaults=include_defaults))


def _diff_from_defaults(
    data: dict[str, Any],
    defaults: dict[str, Any],
) -> dict[str, Any]:
    """Extract values that differ from defaults."""
    result: dict[str, Any] = {}

    for key, value in data.items():
        if key not in defaults:
            result[key] = copy_value(value)
        elif isinstance(value, dict) and isinstance(defaults[key], dict):
            nested_diff = _diff_from_defaults(value, defaults[key])
            if nested_diff:
                result[key] = nested_diff
        elif value != defaults[key]:
            result[key] = copy_value(value)

    return result
