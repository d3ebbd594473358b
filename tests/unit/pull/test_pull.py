from pathlib import Path

import pytest

from gitconductor.enums import PullAction, PullMode, PullStatus
from gitconductor.exceptions import BinaryContentError, GitCommandError, ValidationError
from gitconductor.pull import (
    DETACHED_HEAD_MESSAGE,
    choose_pull_action,
    conflict_preview,
    infer_upstream,
    predict_merge_conflicts,
    predict_pull,
    pull,
)


class TestChoosePullAction:
    @pytest.mark.parametrize(
        ("upstream", "ahead", "behind", "mode", "expected"),
        [
            (None, 0, 5, PullMode.MERGE, PullAction.NO_UPSTREAM),
            ("origin/main", 0, 0, PullMode.MERGE, PullAction.NOOP),
            ("origin/main", 3, 0, PullMode.REBASE, PullAction.NOOP),
            ("origin/main", 0, 2, PullMode.MERGE, PullAction.FAST_FORWARD),
            ("origin/main", 1, 2, PullMode.MERGE, PullAction.MERGE_COMMIT),
            ("origin/main", 1, 2, PullMode.REBASE, PullAction.REBASE),
        ],
    )
    def test_decision_table(
        self,
        upstream: str | None,
        ahead: int,
        behind: int,
        mode: PullMode,
        expected: PullAction,
    ) -> None:
        assert choose_pull_action(upstream, ahead, behind, mode) is expected


class TestInferUpstream:
    def test_configured_upstream(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {("rev-parse", "--abbrev-ref"): make_result(stdout="upstream/dev\n")}
        )
        assert infer_upstream(runner, tmp_path, "origin", "main") == "upstream/dev"

    def test_remote_branch_fallback(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {("show-ref", "--verify", "--quiet", "refs/remotes/origin/main"): make_result()}
        )
        assert infer_upstream(runner, tmp_path, "origin", "main") == "origin/main"

    def test_none(self, scripted_runner, tmp_path: Path) -> None:
        assert infer_upstream(scripted_runner({}), tmp_path, "origin", "main") is None


class TestPredictMergeConflicts:
    def test_unavailable_merge_tree_is_empty(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                ("merge-base",): make_result(stdout="abc\n"),
                ("merge-tree",): make_result(returncode=129, stderr="usage: git merge-tree"),
            }
        )
        assert predict_merge_conflicts(runner, tmp_path, "origin/main") == []

    def test_no_merge_base(self, scripted_runner, tmp_path: Path) -> None:
        runner = scripted_runner({})
        assert predict_merge_conflicts(runner, tmp_path, "origin/main") == []
        assert not runner.called("merge-tree")

    def test_conflicted_merge(
        self, scripted_runner, make_result, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                ("merge-base",): make_result(stdout="abc\n"),
                ("merge-tree",): make_result(
                    returncode=1,
                    stdout="tree\nCONFLICT (content): Merge conflict in a.txt\n",
                ),
            }
        )
        assert predict_merge_conflicts(runner, tmp_path, "origin/main") == ["a.txt"]
        assert runner.called("merge-tree", "--write-tree", "--messages", "--merge-base", "abc")


class TestPredictPull:
    def test_diverged(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("fetch", "origin"): make_result(),
                ("symbolic-ref",): make_result(stdout="main\n"),
                ("rev-parse", "--abbrev-ref"): make_result(stdout="origin/main\n"),
                ("rev-list", "--left-right"): make_result(stdout="2\t1\n"),
                ("merge-base",): make_result(stdout="abc\n"),
                ("merge-tree",): make_result(stdout="tree\n"),
            }
        )

        prediction = predict_pull(runner, tmp_path, mode=PullMode.REBASE)

        assert prediction.upstream == "origin/main"
        assert (prediction.behind, prediction.ahead) == (2, 1)
        assert prediction.action is PullAction.REBASE
        assert prediction.conflict_files == ()

    def test_detached_head(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner({**worktree_responses, ("fetch",): make_result()})
        with pytest.raises(ValidationError):
            _ = predict_pull(runner, tmp_path)

    def test_no_upstream(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("fetch",): make_result(),
                ("symbolic-ref",): make_result(stdout="topic\n"),
            }
        )
        prediction = predict_pull(runner, tmp_path)
        assert prediction.action is PullAction.NO_UPSTREAM
        assert prediction.upstream is None

    def test_fetch_failure_raises(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("fetch",): make_result(returncode=128, stderr="fatal: no such remote"),
            }
        )
        with pytest.raises(GitCommandError, match="no such remote"):
            _ = predict_pull(runner, tmp_path, remote="nope")


class TestPull:
    def test_detached_head(
        self, scripted_runner, worktree_responses, tmp_path: Path
    ) -> None:
        with pytest.raises(ValidationError, match=DETACHED_HEAD_MESSAGE):
            _ = pull(scripted_runner(worktree_responses), tmp_path)

    def test_merge_mode_arguments(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("symbolic-ref",): make_result(stdout="main\n"),
                ("pull",): make_result(stdout="Already up to date.\n"),
            }
        )

        result = pull(runner, tmp_path)

        assert result.status is PullStatus.OK
        assert result.message == "Already up to date."
        assert runner.called("pull", "--no-rebase", "--no-edit", "origin", "main")

    def test_conflicts_reported(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("symbolic-ref",): make_result(stdout="main\n"),
                ("pull",): make_result(
                    returncode=1, stdout="CONFLICT (content): Merge conflict in a.txt\n"
                ),
                ("rev-parse", "--verify", "-q", "MERGE_HEAD"): make_result(),
                ("diff", "--name-only"): make_result(stdout="a.txt\0"),
            }
        )

        result = pull(runner, tmp_path, mode=PullMode.REBASE)

        assert result.status is PullStatus.CONFLICTS
        assert result.operation is PullMode.MERGE
        assert result.conflict_files == ("a.txt",)
        assert runner.called("pull", "--rebase", "origin", "main")

    def test_failure_without_conflicts_raises(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("symbolic-ref",): make_result(stdout="main\n"),
                ("pull",): make_result(returncode=1, stderr="fatal: couldn't find remote ref"),
            }
        )
        with pytest.raises(GitCommandError):
            _ = pull(runner, tmp_path)


class TestConflictPreview:
    def test_binary_rejected(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("merge-base",): make_result(stdout="abc\n"),
                ("show",): make_result(stdout=b"\0\0"),
            }
        )
        with pytest.raises(BinaryContentError):
            _ = conflict_preview(runner, tmp_path, "origin/main", "img.bin")

    def test_merge_file_output(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        merged = "<<<<<<< ours\na\n||||||| base\nb\n=======\nc\n>>>>>>> theirs\n"
        runner = scripted_runner(
            {
                **worktree_responses,
                ("merge-base",): make_result(stdout="abc\n"),
                ("show", "HEAD:a.txt"): make_result(stdout="a\n"),
                ("show", "abc:a.txt"): make_result(stdout="b\n"),
                ("show", "origin/main:a.txt"): make_result(stdout="c\n"),
                ("merge-file",): make_result(returncode=1, stdout=merged),
            }
        )

        assert conflict_preview(runner, tmp_path, "origin/main", "a.txt") == merged
        merge_call = next(call for call in runner.calls if call[0] == "merge-file")
        assert merge_call[:9] == (
            "merge-file",
            "-p",
            "--diff3",
            "-L",
            "ours",
            "-L",
            "base",
            "-L",
            "theirs",
        )

    def test_merge_file_error_raises(
        self, scripted_runner, make_result, worktree_responses, tmp_path: Path
    ) -> None:
        runner = scripted_runner(
            {
                **worktree_responses,
                ("merge-base",): make_result(stdout="abc\n"),
                ("show",): make_result(stdout="x\n"),
                ("merge-file",): make_result(returncode=255, stderr="error: bad"),
            }
        )
        with pytest.raises(GitCommandError):
            _ = conflict_preview(runner, tmp_path, "origin/main", "a.txt")
