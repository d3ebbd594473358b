"""Plan file reading for ``rebase start``.

A plan file is a JSON list of entries, or an object with an ``entries`` list.
Each entry is ``{action, hash, subject, new_message?, new_author?}``.
"""

from typing import TYPE_CHECKING, Any

import orjson

from gitconductor.exceptions import ValidationError
from gitconductor.rebase import RebaseTodoEntry

if TYPE_CHECKING:
    from pathlib import Path


def load_plan(path: "Path") -> list[RebaseTodoEntry]:
    """Read a rebase plan file.

    Raises:
        ValidationError: If the file cannot be read, is not JSON, or does not
            hold a list of entry objects.
    """
    try:
        data: Any = orjson.loads(path.read_bytes())  # pyright: ignore[reportExplicitAny]
    except OSError as e:
        msg = f"Cannot read plan file {path}: {e.strerror or e}"
        raise ValidationError(msg, field="plan") from e
    except orjson.JSONDecodeError as e:
        msg = f"Plan file {path} is not valid JSON: {e}"
        raise ValidationError(msg, field="plan") from e

    if isinstance(data, dict):
        data = data.get("entries")
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        msg = "Plan file must hold a list of entry objects."
        raise ValidationError(msg, field="plan")
    return [RebaseTodoEntry.from_mapping(item) for item in data]
