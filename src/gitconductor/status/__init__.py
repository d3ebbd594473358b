"""Working copy status and rename reconciliation."""

from ._models import StatusEntry
from ._parser import parse_hash_object, parse_porcelain_z
from ._status import (
    committed_blob_ids,
    get_status,
    present_files,
    reconcile_renames,
    working_content_ids,
)

__all__ = [
    "StatusEntry",
    "committed_blob_ids",
    "get_status",
    "parse_hash_object",
    "parse_porcelain_z",
    "present_files",
    "reconcile_renames",
    "working_content_ids",
]
