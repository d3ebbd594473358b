"""Pull, pull prediction, conflict preview, and fetch."""

from ._models import PullPrediction, PullResult
from ._parser import (
    parse_conflict_messages,
    parse_left_right_count,
    parse_merge_tree_conflicts,
)
from ._pull import (
    DEFAULT_REMOTE,
    DETACHED_HEAD_MESSAGE,
    choose_pull_action,
    conflict_preview,
    current_branch,
    fetch,
    infer_upstream,
    predict_merge_conflicts,
    predict_pull,
    pull,
)

__all__ = [
    "DEFAULT_REMOTE",
    "DETACHED_HEAD_MESSAGE",
    "PullPrediction",
    "PullResult",
    "choose_pull_action",
    "conflict_preview",
    "current_branch",
    "fetch",
    "infer_upstream",
    "parse_conflict_messages",
    "parse_left_right_count",
    "parse_merge_tree_conflicts",
    "predict_merge_conflicts",
    "predict_pull",
    "pull",
]
