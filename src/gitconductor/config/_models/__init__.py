"""Configuration models.

This module provides Pydantic models for gitconductor configuration sections
and the main Config container class.
"""

from gitconductor.config._models._config import Config
from gitconductor.config._models._git import GitConfig
from gitconductor.config._models._logging import LogFormat, LoggingConfig, LogLevel
from gitconductor.config._models._source import ConfigSource, ConfigSourceName

__all__ = [
    "Config",
    "ConfigSource",
    "ConfigSourceName",
    "GitConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
]
