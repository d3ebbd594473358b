"""Conflict state machine for merge, rebase, cherry-pick, and mailbox apply."""

from ._detect import (
    current_operation,
    detect_operation,
    is_merge_in_progress,
    is_rebase_in_progress,
    read_sentinels,
)
from ._models import (
    ConflictFileEntry,
    ConflictFileVersions,
    ConflictShape,
    ConflictState,
    OperationSentinels,
)
from ._parser import (
    NameStatusEntry,
    find_rename_target,
    parse_ls_files_unmerged,
    parse_name_status_z,
    parse_null_separated,
    parse_unmerged_names,
)
from ._resolve import (
    apply_and_stage,
    remove_path,
    resolve_rename,
    stage_path,
    take_ours,
    take_theirs,
    write_worktree_file,
)
from ._sequence import (
    NO_OPERATION_MESSAGE,
    abort_operation,
    continue_operation,
    skip_operation,
)
from ._state import get_conflict_state, list_unmerged_files, unmerged_stages
from ._versions import (
    BINARY_UNSUPPORTED_MESSAGE,
    DEFAULT_RENAME_SIMILARITY,
    THEIRS_REFS,
    decode_text,
    detect_rename_target,
    get_conflict_file_versions,
    inspect_conflict,
    resolve_theirs_ref,
    show_path_bytes_or_empty,
)

__all__ = [
    "BINARY_UNSUPPORTED_MESSAGE",
    "DEFAULT_RENAME_SIMILARITY",
    "NO_OPERATION_MESSAGE",
    "THEIRS_REFS",
    "ConflictFileEntry",
    "ConflictFileVersions",
    "ConflictShape",
    "ConflictState",
    "NameStatusEntry",
    "OperationSentinels",
    "abort_operation",
    "apply_and_stage",
    "continue_operation",
    "current_operation",
    "decode_text",
    "detect_operation",
    "detect_rename_target",
    "find_rename_target",
    "get_conflict_file_versions",
    "get_conflict_state",
    "inspect_conflict",
    "is_merge_in_progress",
    "is_rebase_in_progress",
    "list_unmerged_files",
    "parse_ls_files_unmerged",
    "parse_name_status_z",
    "parse_null_separated",
    "parse_unmerged_names",
    "read_sentinels",
    "remove_path",
    "resolve_rename",
    "resolve_theirs_ref",
    "show_path_bytes_or_empty",
    "skip_operation",
    "stage_path",
    "take_ours",
    "take_theirs",
    "unmerged_stages",
    "write_worktree_file",
]
