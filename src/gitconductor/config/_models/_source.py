"""Where a configuration layer came from."""

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class ConfigSourceName(StrEnum):
    """Configuration layers, highest precedence first."""

    CLI = "cli"
    ENV = "env"
    REPOSITORY = "repository"
    USER = "user"
    DEFAULT = "default"


@dataclass(frozen=True, slots=True)
class ConfigSource:
    """One layer of the merged configuration.

    Attributes:
        name: Layer identifier.
        path: TOML file backing the layer. None for the cli, env and default
            layers.
        exists: Whether the file exists, or for non-file layers whether any
            values were supplied.
        values: Raw values read from the layer.
    """

    name: ConfigSourceName
    path: "Path | None"
    exists: bool
    values: dict[str, Any]  # pyright: ignore[reportExplicitAny]
