"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is a plain dict so it can be passed straight to
deep_merge, which always returns copies.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "git": {
        "executable": "git",
        "no_editor_command": "true",
        "rename_similarity": 50,
        "reword_map_filename": "gitconductor-reword-map.json",
        "fetch_workers": 2,
    },
}
