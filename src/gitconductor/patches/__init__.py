"""Patch prediction and application."""

from ._models import PatchApplyResult, PatchPrediction
from ._parser import (
    extract_diff_payload,
    extract_patch_subject,
    extract_patch_subjects,
    parse_apply_conflicts,
    parse_touched_files,
)
from ._patches import (
    MAILBOX_BUSY_MESSAGE,
    apply_patch,
    format_patch_to_file,
    parse_patch_method,
    predict_patch,
    read_patch_text,
)

__all__ = [
    "MAILBOX_BUSY_MESSAGE",
    "PatchApplyResult",
    "PatchPrediction",
    "apply_patch",
    "extract_diff_payload",
    "extract_patch_subject",
    "extract_patch_subjects",
    "format_patch_to_file",
    "parse_apply_conflicts",
    "parse_patch_method",
    "parse_touched_files",
    "predict_patch",
    "read_patch_text",
]
