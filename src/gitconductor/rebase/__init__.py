"""Interactive rebase orchestration with automatic reword handling."""

from ._commits import list_rebase_commits, parse_commit_records
from ._edit_stop import (
    NOT_STOPPED_MESSAGE,
    delete_stop_file,
    list_stopped_commit_files,
    read_stop_file,
    rename_stop_file,
    restore_stop_file,
    write_stop_file,
)
from ._models import (
    RebaseCommitInfo,
    RebaseSessionState,
    RebaseStatusInfo,
    RebaseTodoEntry,
    RewordEntry,
    TodoPlan,
)
from ._orchestrator import (
    NO_REBASE_MESSAGE,
    abort_interactive_rebase,
    amend_args,
    amend_stopped_commit,
    continue_interactive_rebase,
    sequence_editor_command,
    skip_interactive_rebase,
    start_interactive_rebase,
)
from ._reword_map import (
    DEFAULT_REWORD_MAP_FILENAME,
    delete_reword_map,
    load_reword_map,
    lookup_reword,
    reword_map_path,
    save_reword_map,
)
from ._state import (
    COMPLETED_MESSAGE,
    CONFLICTS_MESSAGE,
    STOPPED_MESSAGE,
    derive_rebase_state,
    get_rebase_status,
    head_author,
    read_rebase_file,
    rebase_in_progress,
    rebase_merge_dir,
)
from ._todo import build_todo_plan, todo_line

__all__ = [
    "COMPLETED_MESSAGE",
    "CONFLICTS_MESSAGE",
    "DEFAULT_REWORD_MAP_FILENAME",
    "NOT_STOPPED_MESSAGE",
    "NO_REBASE_MESSAGE",
    "STOPPED_MESSAGE",
    "RebaseCommitInfo",
    "RebaseSessionState",
    "RebaseStatusInfo",
    "RebaseTodoEntry",
    "RewordEntry",
    "TodoPlan",
    "abort_interactive_rebase",
    "amend_args",
    "amend_stopped_commit",
    "build_todo_plan",
    "continue_interactive_rebase",
    "delete_reword_map",
    "delete_stop_file",
    "derive_rebase_state",
    "get_rebase_status",
    "head_author",
    "list_rebase_commits",
    "list_stopped_commit_files",
    "load_reword_map",
    "lookup_reword",
    "parse_commit_records",
    "read_rebase_file",
    "read_stop_file",
    "rebase_in_progress",
    "rebase_merge_dir",
    "rename_stop_file",
    "restore_stop_file",
    "reword_map_path",
    "save_reword_map",
    "sequence_editor_command",
    "skip_interactive_rebase",
    "start_interactive_rebase",
    "todo_line",
    "write_stop_file",
]
