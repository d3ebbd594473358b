"""Property-based tests for operation detection priority."""

from hypothesis import given, strategies as st

from gitconductor.conflicts import OperationSentinels, detect_operation
from gitconductor.enums import ConflictOperationKind

sentinel_sets = st.builds(
    OperationSentinels,
    applying_marker=st.booleans(),
    rebase_head=st.booleans(),
    rebase_merge_dir=st.booleans(),
    rebase_apply_dir=st.booleans(),
    merge_head=st.booleans(),
    cherry_pick_head=st.booleans(),
)


class TestDetectOperationProperties:
    @given(sentinel_sets)
    def test_none_only_without_sentinels(self, sentinels: OperationSentinels) -> None:
        any_sentinel = any(
            (
                sentinels.applying_marker,
                sentinels.rebase_head,
                sentinels.rebase_merge_dir,
                sentinels.rebase_apply_dir,
                sentinels.merge_head,
                sentinels.cherry_pick_head,
            )
        )
        assert (detect_operation(sentinels) is ConflictOperationKind.NONE) == (
            not any_sentinel
        )

    @given(sentinel_sets)
    def test_mailbox_apply_dominates(self, sentinels: OperationSentinels) -> None:
        if sentinels.applying_marker:
            assert detect_operation(sentinels) is ConflictOperationKind.MAILBOX_APPLY

    @given(sentinel_sets)
    def test_stale_merge_head_never_hides_rebase(self, sentinels: OperationSentinels) -> None:
        rebasing = sentinels.rebase_head or sentinels.rebase_merge_dir or sentinels.rebase_apply_dir
        if rebasing and not sentinels.applying_marker:
            assert detect_operation(sentinels) is ConflictOperationKind.REBASE

    @given(sentinel_sets)
    def test_cherry_pick_only_when_alone(self, sentinels: OperationSentinels) -> None:
        if detect_operation(sentinels) is ConflictOperationKind.CHERRY_PICK:
            assert sentinels.cherry_pick_head
            assert not (sentinels.merge_head or sentinels.applying_marker or sentinels.rebase_head)
